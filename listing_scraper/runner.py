"""Run a full listing crawl and write the canonical records."""

import logging
from pathlib import Path

from crawl4ai import AsyncWebCrawler

from listing_scraper.config import CrawlConfig
from listing_scraper.crawler import DEFAULT_SESSION_ID, create_browser_config
from listing_scraper.json_writer import write_records_json
from listing_scraper.models import CanonicalRecord
from listing_scraper.navigator import Crawl4aiNavigator, Navigator
from listing_scraper.pagination import NoListingsError, PaginationController

logger = logging.getLogger(__name__)


class ListingScraper:
    """Crawls the listing site and produces CanonicalRecords."""

    def __init__(self, config: CrawlConfig | None = None) -> None:
        """Initialize with a crawl config (defaults read from the environment)."""
        self.config = config or CrawlConfig.from_env()

    async def crawl_with(self, navigator: Navigator) -> list[CanonicalRecord]:
        """Crawl through an already open navigator.

        Raises:
            ScrapeError: If the site did not render or no listings were found.
        """
        controller = PaginationController(navigator, self.config)
        listings = await controller.crawl()
        return [CanonicalRecord.from_listing(listing) for listing in listings]

    async def scrape_listings(self) -> list[CanonicalRecord]:
        """Open a browser session and crawl every listing page."""
        browser_config = create_browser_config(
            headless=self.config.headless,
            user_agent=self.config.user_agent,
            locale=self.config.locale,
        )
        logger.info(f"Crawling listings from {self.config.start_url} (headless={self.config.headless})")

        async with AsyncWebCrawler(config=browser_config) as crawler:
            navigator = Crawl4aiNavigator(crawler, session_id=DEFAULT_SESSION_ID)
            try:
                return await self.crawl_with(navigator)
            finally:
                try:
                    await navigator.close()
                except Exception as e:
                    logger.warning(f"Failed to close browser session: {e}")

    async def run(self) -> tuple[Path, int]:
        """Crawl and write the JSON output.

        Returns:
            Tuple of (output_path, record_count).

        Raises:
            NoListingsError: If zero records were discovered; nothing is written.
        """
        records = await self.scrape_listings()
        if not records:
            raise NoListingsError(f"Discovered 0 listings from {self.config.start_url}")

        path = self.config.output_path
        write_records_json(records, path)
        logger.info(f"Wrote {len(records)} records to {path}")
        return path, len(records)
