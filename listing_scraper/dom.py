"""DOM query capability over a rendered HTML snapshot."""

from __future__ import annotations

from typing import Any, Protocol

from bs4 import BeautifulSoup, Tag
from bs4.element import NavigableString

from listing_scraper.urls import normalize_space, origin_of

# Elements whose text never shows up in innerText of a scripted page
HIDDEN_TEXT_TAGS = frozenset({"script", "style", "noscript", "template"})

# Elements that start a new line of rendered text
BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
        "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
        "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section",
        "table", "td", "th", "tr", "ul",
    }
)


class DomQuery(Protocol):
    """Minimal read-only view of a rendered page used by the extractor."""

    @property
    def page_url(self) -> str: ...

    @property
    def origin(self) -> str: ...

    def query_all(self, selector: str, root: Any | None = None) -> list[Any]: ...

    def text(self, handle: Any) -> str: ...

    def text_blocks(self, handle: Any) -> list[str]: ...

    def attribute(self, handle: Any, name: str) -> str | None: ...


class SoupDom:
    """DomQuery implementation backed by BeautifulSoup.

    Handles are bs4 ``Tag`` objects. Selectors go through soupsieve, so
    attribute selectors and ``:has()`` work the way they do in the browser.
    """

    def __init__(self, html: str, page_url: str) -> None:
        self._soup = BeautifulSoup(html or "", "html.parser")
        self._page_url = page_url
        self._origin = origin_of(page_url)

    @property
    def page_url(self) -> str:
        return self._page_url

    @property
    def origin(self) -> str:
        return self._origin

    def query_all(self, selector: str, root: Tag | None = None) -> list[Tag]:
        scope = root if root is not None else self._soup
        return list(scope.select(selector))

    def text(self, handle: Tag) -> str:
        """Return whitespace-normalized visible text of an element.

        Block elements and ``<br>`` separate words; inline markup does not.
        """
        return " ".join(self.text_blocks(handle))

    def text_blocks(self, handle: Tag) -> list[str]:
        """Return the non-empty rendered lines of an element, in order."""
        blocks: list[list[str]] = [[]]
        _collect_blocks(handle, blocks)
        lines = (normalize_space("".join(parts)) for parts in blocks)
        return [line for line in lines if line]

    def attribute(self, handle: Tag, name: str) -> str | None:
        value = handle.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)


def _collect_blocks(node: Tag, blocks: list[list[str]]) -> None:
    for child in node.children:
        if isinstance(child, Tag):
            if child.name in HIDDEN_TEXT_TAGS:
                continue
            if child.name == "br":
                blocks.append([])
                continue
            is_block = child.name in BLOCK_TAGS
            if is_block:
                blocks.append([])
            _collect_blocks(child, blocks)
            if is_block:
                blocks.append([])
        # Exact type check skips comments, doctype and CDATA
        elif type(child) is NavigableString:
            blocks[-1].append(str(child))


def first(dom: DomQuery, selector: str, root: Any | None = None) -> Any | None:
    """Return the first element matching selector, or None."""
    matches = dom.query_all(selector, root)
    return matches[0] if matches else None
