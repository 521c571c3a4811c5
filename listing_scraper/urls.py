"""URL and text normalization for listing anchors."""

import re
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit, urlunsplit

_WHITESPACE = re.compile(r"\s+")
_ABSOLUTE_HTTP = re.compile(r"^https?://", re.IGNORECASE)
_OTHER_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)
_LISTING_PATH = re.compile(r"^/locaties/\d{5}-[^/]+/?$", re.IGNORECASE)
_LISTING_KEY = re.compile(r"/locaties/([^/]+)/?$")
_KEY_PARTS = re.compile(r"^(\d{5})-(.+)$")


@dataclass(frozen=True)
class ListingKey:
    """Identity parts parsed from a listing URL path."""

    key: str | None = None
    id: str | None = None
    slug: str | None = None


def normalize_space(text: str | None) -> str:
    """Collapse whitespace runs to single spaces and strip."""
    return _WHITESPACE.sub(" ", str(text or "")).strip()


def origin_of(url: str) -> str:
    """Return scheme://host[:port] of a URL."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def to_absolute(href: str | None, origin: str) -> str | None:
    """Resolve an href against the page origin.

    Rooted and protocol-relative hrefs resolve the usual way. Bare paths
    (``locaties/...``, ``./locaties/...``) resolve against the origin root,
    never against the current page path.

    Args:
        href: Raw attribute value.
        origin: Origin of the page the href was found on.

    Returns:
        Absolute URL, or None for empty hrefs and non-http schemes.
    """
    if not href:
        return None
    href = href.strip()
    if not href:
        return None

    if _ABSOLUTE_HTTP.match(href):
        return href
    if href.startswith("/"):
        return urljoin(origin, href)
    if _OTHER_SCHEME.match(href):
        # mailto:, javascript:, data:, tel:
        return None

    bare = re.sub(r"^\.?/", "", href)
    return urljoin(origin.rstrip("/") + "/", bare)


def canonical_url(url: str) -> str:
    """Return the identity key for a listing URL.

    Query and fragment are removed and the path always ends with a slash.
    Applying it twice returns the same value.
    """
    parts = urlsplit(url)
    path = parts.path if parts.path.endswith("/") else f"{parts.path}/"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def is_listing_url(url: str | None) -> bool:
    """Check whether an absolute URL points at a listing detail page."""
    if not url:
        return False
    return bool(_LISTING_PATH.match(urlsplit(url).path))


def parse_key(url: str) -> ListingKey:
    """Parse key, five-digit id and slug from a listing URL."""
    match = _LISTING_KEY.search(urlsplit(url).path)
    if not match:
        return ListingKey()

    key = match.group(1)
    parts = _KEY_PARTS.match(key)
    if not parts:
        return ListingKey()
    return ListingKey(key=key, id=parts.group(1), slug=parts.group(2))
