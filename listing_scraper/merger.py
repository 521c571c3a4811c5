"""Merge listing sightings into one record per canonical URL."""

import logging
from collections.abc import Iterable

from listing_scraper.models import ListingRecord
from listing_scraper.urls import canonical_url

logger = logging.getLogger(__name__)


def merge_records(first: ListingRecord, later: ListingRecord) -> ListingRecord:
    """Merge two sightings of the same listing.

    Non-empty values of the earlier sighting are kept; the later sighting
    only fills fields the earlier one lacks.
    """
    return ListingRecord(
        url=first.url,
        title=first.title or later.title or None,
        description=first.description or later.description or None,
        image=first.image or later.image or None,
    )


def dedupe_records(records: Iterable[ListingRecord]) -> list[ListingRecord]:
    """Fold sightings by canonical URL, keeping first-seen order."""
    merged: dict[str, ListingRecord] = {}
    for record in records:
        url = canonical_url(record.url)
        record = record.model_copy(update={"url": url})
        prev = merged.get(url)
        merged[url] = merge_records(prev, record) if prev is not None else record
    return list(merged.values())


class RecordMerger:
    """Running map of listings across every crawled page."""

    def __init__(self) -> None:
        self._records: dict[str, ListingRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, url: str) -> bool:
        return canonical_url(url) in self._records

    def get(self, url: str) -> ListingRecord | None:
        return self._records.get(canonical_url(url))

    def add(self, records: Iterable[ListingRecord]) -> int:
        """Fold a page of sightings into the map.

        Returns:
            Number of URLs not seen before.
        """
        new_count = 0
        for record in records:
            url = canonical_url(record.url)
            record = record.model_copy(update={"url": url})
            prev = self._records.get(url)
            if prev is None:
                self._records[url] = record
                new_count += 1
            else:
                self._records[url] = merge_records(prev, record)
        return new_count

    def results(self, max_records: int = 0) -> list[ListingRecord]:
        """Return all records sorted by URL, truncated when max_records > 0."""
        items = sorted(self._records.values(), key=lambda r: r.url)
        if max_records > 0:
            items = items[:max_records]
        logger.debug(f"Merged {len(self._records)} unique listings, returning {len(items)}")
        return items
