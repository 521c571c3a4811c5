"""Listing scraper: crawl a paginated, rendered location directory."""

from listing_scraper.config import CrawlConfig
from listing_scraper.crawler import create_browser_config, create_crawl_config
from listing_scraper.dom import DomQuery, SoupDom
from listing_scraper.extractor import extract_listings
from listing_scraper.json_writer import write_records_json
from listing_scraper.merger import RecordMerger, merge_records
from listing_scraper.models import CanonicalRecord, ListingRecord
from listing_scraper.navigator import Crawl4aiNavigator, NavigationError, Navigator
from listing_scraper.pagination import (
    CrawlState,
    NoListingsError,
    PageNotRenderedError,
    PaginationController,
    ScrapeError,
    SiteSelectors,
)
from listing_scraper.runner import ListingScraper

__all__ = [
    "CanonicalRecord",
    "Crawl4aiNavigator",
    "CrawlConfig",
    "CrawlState",
    "DomQuery",
    "ListingRecord",
    "ListingScraper",
    "NavigationError",
    "Navigator",
    "NoListingsError",
    "PageNotRenderedError",
    "PaginationController",
    "RecordMerger",
    "ScrapeError",
    "SiteSelectors",
    "SoupDom",
    "create_browser_config",
    "create_crawl_config",
    "extract_listings",
    "merge_records",
    "write_records_json",
]
