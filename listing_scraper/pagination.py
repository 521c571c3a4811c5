"""Pagination controller: walks the listing pages of a rendered session.

The site paginates client-side through a bottom ``<nav role="navigation">``.
After clicking "Volgende pagina" two independent signals tell whether the
page actually advanced: the current page-number indicator and the href of
the first listing. Either one changing is enough; if neither changes within
the bound the crawl stops instead of extracting the same page twice. A site
that renders slower than ``advance_timeout`` therefore ends the crawl early.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from listing_scraper.config import CrawlConfig
from listing_scraper.dom import DomQuery, first
from listing_scraper.extractor import LISTING_ANCHOR_SELECTOR, extract_listings
from listing_scraper.merger import RecordMerger
from listing_scraper.models import ListingRecord
from listing_scraper.navigator import NavigationError, Navigator

logger = logging.getLogger(__name__)


class ScrapeError(Exception):
    """Base class for crawl outcomes that need human attention."""


class PageNotRenderedError(ScrapeError):
    """Raised when the start page shows the JavaScript-required placeholder."""


class NoListingsError(ScrapeError):
    """Raised when a finished crawl discovered zero listings."""


class CrawlState(Enum):
    START = "start"
    LOADED = "loaded"
    ADVANCING = "advancing"
    DONE = "done"


@dataclass(frozen=True)
class SiteSelectors:
    """CSS selectors for the listing site's markup."""

    listing_anchor: str = LISTING_ANCHOR_SELECTOR
    pagination_nav: str = 'nav[role="navigation"]'
    current_page: str = 'nav[role="navigation"] li[aria-current="true"] p'
    next_button: str = 'nav[role="navigation"] [aria-label="Volgende pagina"]'
    # Enclosing list item, clicked when the button itself refuses the click
    next_button_item: str = 'nav[role="navigation"] li:has([aria-label="Volgende pagina"])'
    js_disabled_text: str = "doesn't work properly without javascript enabled"


class PaginationController:
    """Drives a navigator through every listing page, in order, once.

    Args:
        navigator: Rendered page to drive.
        config: Crawl settings (start URL, caps, timeouts).
        selectors: Site markup selectors.
        merger: Accumulator for records across pages.
    """

    def __init__(
        self,
        navigator: Navigator,
        config: CrawlConfig,
        selectors: SiteSelectors | None = None,
        merger: RecordMerger | None = None,
    ) -> None:
        self.navigator = navigator
        self.config = config
        self.selectors = selectors or SiteSelectors()
        self.merger = merger or RecordMerger()
        self.state = CrawlState.START
        self.pages_visited = 0
        self.stop_reason: str | None = None

    async def crawl(self) -> list[ListingRecord]:
        """Visit every listing page and return the merged records.

        Returns:
            Records sorted by URL, truncated to config.max_records.

        Raises:
            NavigationError: If the start page cannot be loaded.
            PageNotRenderedError: If the site shows its no-JavaScript placeholder.
            NoListingsError: If no listing was found on any page.
        """
        await self._start()

        while self.state is not CrawlState.DONE:
            await self._collect_current_page()

            reason = self._cap_reached()
            if reason:
                self._finish(reason)
                break

            self.state = CrawlState.ADVANCING
            if await self._advance():
                self.state = CrawlState.LOADED

        records = self.merger.results(self.config.max_records)
        if not records:
            raise NoListingsError(
                f"Discovered 0 listings on {self.pages_visited} page(s) from {self.config.start_url}"
            )

        logger.info(f"[listing] DONE discovered={len(records)} reason={self.stop_reason}")
        return records

    async def _start(self) -> None:
        cfg = self.config
        await self.navigator.goto(cfg.start_url, cfg.load_timeout)

        rendered = await self.navigator.wait_for_selector(
            self.selectors.listing_anchor, cfg.render_timeout
        )
        self._assert_rendered(await self.navigator.snapshot())
        if not rendered:
            logger.warning(f"No listing anchors appeared within {cfg.render_timeout}s on {cfg.start_url}")

        await self._dismiss_cookie_banners()
        await asyncio.sleep(cfg.initial_settle_delay)
        self.state = CrawlState.LOADED

    def _assert_rendered(self, dom: DomQuery) -> None:
        body = first(dom, "body")
        text = dom.text(body).lower() if body is not None else ""
        if self.selectors.js_disabled_text.lower() in text:
            raise PageNotRenderedError(
                f"{self.config.start_url} did not render (JavaScript-required message visible)"
            )

    async def _dismiss_cookie_banners(self) -> None:
        try:
            await self.navigator.dismiss_cookie_banners()
        except Exception as e:
            logger.warning(f"Ignoring cookie banner failure: {e}")

    async def _collect_current_page(self) -> None:
        dom = await self.navigator.snapshot()
        page_number = self.page_number(dom)
        entries = extract_listings(dom)
        new_count = self.merger.add(entries)
        self.pages_visited += 1

        logger.info(
            f"[listing] page={page_number or '?'} pages_visited={self.pages_visited} "
            f"found_here={len(entries)} new={new_count} total_unique={len(self.merger)}"
        )

    def _cap_reached(self) -> str | None:
        cfg = self.config
        if cfg.max_records > 0 and len(self.merger) >= cfg.max_records:
            return f"max_records={cfg.max_records} reached"
        if cfg.max_pages > 0 and self.pages_visited >= cfg.max_pages:
            return f"max_pages={cfg.max_pages} reached"
        return None

    def _finish(self, reason: str) -> None:
        logger.info(f"Stopping crawl: {reason}")
        self.stop_reason = reason
        self.state = CrawlState.DONE

    async def _advance(self) -> bool:
        """Move to the next listing page, or finish.

        Returns:
            True if either advancement signal changed, False once DONE.
        """
        dom = await self.navigator.snapshot()

        if first(dom, self.selectors.pagination_nav) is None:
            self._finish("no pagination")
            return False

        next_button = first(dom, self.selectors.next_button)
        if next_button is None:
            self._finish("no next page control")
            return False
        if self.is_disabled(dom, next_button):
            self._finish("next page control disabled")
            return False

        before_page = self.page_number(dom)
        before_href = self.first_href(dom)

        if not await self._click_next():
            self._finish("next page click failed")
            return False

        await self.navigator.wait_for_load(self.config.load_timeout)

        def advanced(current: DomQuery) -> bool:
            return self._page_changed(current, before_page) or self._first_href_changed(
                current, before_href
            )

        if not await self.navigator.wait_for(advanced, self.config.advance_timeout):
            self._finish(
                f"page did not change within {self.config.advance_timeout}s "
                f"(page={before_page}, first={before_href})"
            )
            return False

        await asyncio.sleep(self.config.settle_delay)
        return True

    async def _click_next(self) -> bool:
        timeout = self.config.click_timeout
        for selector in (self.selectors.next_button, self.selectors.next_button_item):
            try:
                if await self.navigator.click(selector, timeout):
                    return True
            except NavigationError as e:
                logger.warning(f"Click on {selector!r} failed: {e}")
            logger.debug(f"Click on {selector!r} did not go through, trying fallback")
        return False

    def page_number(self, dom: DomQuery) -> int | None:
        """Current page number from the pagination indicator, if readable."""
        indicator = first(dom, self.selectors.current_page)
        if indicator is None:
            return None
        text = dom.text(indicator)
        return int(text) if text.isdecimal() else None

    def first_href(self, dom: DomQuery) -> str | None:
        """Raw href of the first listing anchor."""
        for anchor in dom.query_all(self.selectors.listing_anchor):
            href = dom.attribute(anchor, "href")
            if href:
                return href
        return None

    @staticmethod
    def is_disabled(dom: DomQuery, element: Any) -> bool:
        aria = (dom.attribute(element, "aria-disabled") or "").strip().lower()
        return aria == "true" or dom.attribute(element, "disabled") is not None

    def _page_changed(self, dom: DomQuery, before: int | None) -> bool:
        current = self.page_number(dom)
        return before is not None and current is not None and current != before

    def _first_href_changed(self, dom: DomQuery, before: str | None) -> bool:
        current = self.first_href(dom)
        return before is not None and current is not None and current != before
