"""Heuristic extraction of listing records from a rendered listing page.

Each ``<a href="locaties/00000-slug/">`` is its own extraction root, so a
record never mixes content from a neighbouring card. Title, description and
preview image are picked from the anchor's contents; medal and icon imagery
is filtered out.
"""

import logging
import re
from typing import Any

from listing_scraper.dom import DomQuery
from listing_scraper.merger import dedupe_records
from listing_scraper.models import ListingRecord
from listing_scraper.urls import canonical_url, is_listing_url, to_absolute

logger = logging.getLogger(__name__)

LISTING_ANCHOR_SELECTOR = 'a[href*="locaties/"]'
TEXT_LINE_SELECTOR = "p"

MAX_TITLE_LENGTH = 80
MAX_DESCRIPTION_LENGTH = 120

# "3294 Molenstede" - address lines start with a Belgian postal code
POSTAL_LINE = re.compile(r"\b\d{4}\b")

# Dutch medal names (goud/zilver/brons/medaille) plus English equivalents
MEDAL_MARKERS = re.compile(r"goud|zilver|brons|medaille|medal|award", re.IGNORECASE)
ICON_MARKERS = re.compile(r"icon|logo|favicon|precomposed|sprite|apple-touch", re.IGNORECASE)
# Most medal assets are served locally from images/
LOCAL_ASSET = re.compile(r"^(?:\.?/)?images/", re.IGNORECASE)
PREVIEW_MARKERS = re.compile(r"xano\.io|thumbnail_|tpl=big", re.IGNORECASE)


def is_postal_line(text: str) -> bool:
    return bool(POSTAL_LINE.search(text))


def is_decorative_image(src: str | None, alt: str | None = None) -> bool:
    """Check whether an image is a medal, icon, logo or local asset."""
    src = src or ""
    alt = alt or ""
    return bool(
        MEDAL_MARKERS.search(src)
        or MEDAL_MARKERS.search(alt)
        or ICON_MARKERS.search(src)
        or LOCAL_ASSET.match(src)
    )


def text_lines(dom: DomQuery, anchor: Any) -> list[str]:
    """Collect the non-empty text lines inside an anchor."""
    lines = [dom.text(p) for p in dom.query_all(TEXT_LINE_SELECTOR, anchor)]
    lines = [line for line in lines if line]
    if lines:
        return lines
    # Cards without paragraph markup: one line per rendered block
    return dom.text_blocks(anchor)


def pick_title(lines: list[str]) -> str | None:
    """Pick the first short line that is not an address line.

    Falls back to the very first line when every line is an address or too
    long.
    """
    for line in lines:
        if not is_postal_line(line) and len(line) <= MAX_TITLE_LENGTH:
            return line
    return lines[0] if lines else None


def pick_description(lines: list[str], title: str | None) -> str | None:
    """Prefer the address line, otherwise the first short non-title line."""
    for line in lines:
        if is_postal_line(line):
            return line
    for line in lines:
        if line != title and len(line) <= MAX_DESCRIPTION_LENGTH:
            return line
    return None


def pick_preview_image(dom: DomQuery, anchor: Any) -> str | None:
    """Pick the preview thumbnail src inside an anchor.

    Returns:
        Raw src of a hosted thumbnail if present, else of the first
        non-decorative image, else None.
    """
    candidates = []
    for img in dom.query_all("img", anchor):
        src = (dom.attribute(img, "src") or "").strip()
        if not src:
            continue
        if is_decorative_image(src, dom.attribute(img, "alt")):
            continue
        candidates.append(src)

    for src in candidates:
        if PREVIEW_MARKERS.search(src):
            return src
    return candidates[0] if candidates else None


def extract_anchor(dom: DomQuery, anchor: Any) -> ListingRecord | None:
    """Build a record from one listing anchor, or None if it is not a listing."""
    href = to_absolute(dom.attribute(anchor, "href"), dom.origin)
    if not href or not is_listing_url(href):
        return None

    lines = text_lines(dom, anchor)
    title = pick_title(lines)
    description = pick_description(lines, title)

    image_src = pick_preview_image(dom, anchor)
    image = to_absolute(image_src, dom.origin) if image_src else None

    return ListingRecord(
        url=canonical_url(href),
        title=title,
        description=description,
        image=image,
    )


def extract_listings(dom: DomQuery) -> list[ListingRecord]:
    """Extract the listing records visible on the current page.

    Anchors pointing to the same URL (nested duplicate markup) are merged:
    first non-empty value wins, later anchors fill gaps.
    """
    records = []
    anchors = dom.query_all(LISTING_ANCHOR_SELECTOR)
    for anchor in anchors:
        record = extract_anchor(dom, anchor)
        if record is not None:
            records.append(record)

    unique = dedupe_records(records)
    logger.debug(
        f"Extracted {len(unique)} listings from {len(anchors)} candidate anchors on {dom.page_url}"
    )
    return unique
