"""Shared fixtures: static listing pages and a navigator that serves them."""

import pytest

from listing_scraper.config import CrawlConfig
from listing_scraper.dom import SoupDom
from listing_scraper.navigator import Navigator

BASE_URL = "https://iedereen.overal.info/"


def card(
    key: str,
    title: str | None = None,
    address: str | None = None,
    image: str | None = None,
    medal: bool = False,
) -> str:
    """Render one listing card the way the site does."""
    parts = [f'<a href="locaties/{key}/" class="ww-card">']
    if medal:
        parts.append('<img src="images/medaille-goud.png" alt="Gouden medaille">')
    if image:
        parts.append(f'<img src="{image}" alt="">')
    if title:
        parts.append(f'<p class="ww-text-content">{title}</p>')
    if address:
        parts.append(f'<p class="ww-text-content">{address}</p>')
    parts.append("</a>")
    return "".join(parts)


def listing_page(
    cards: list[str],
    page: int | None = 1,
    has_next: bool = True,
    next_disabled: bool = False,
    with_nav: bool = True,
) -> str:
    """Render a listing page with the bottom pagination nav."""
    nav = ""
    if with_nav:
        items = ['<li><button aria-label="Vorige pagina">‹</button></li>']
        if page is not None:
            items.append(f'<li aria-current="true"><p>{page}</p></li>')
        if has_next:
            disabled = ' aria-disabled="true"' if next_disabled else ""
            items.append(f'<li><button aria-label="Volgende pagina"{disabled}>›</button></li>')
        nav = f'<nav role="navigation"><ul>{"".join(items)}</ul></nav>'
    return (
        "<html><head><title>Locaties</title></head><body>"
        "<noscript>We're sorry but this site doesn't work properly without JavaScript enabled.</noscript>"
        f'<main><div class="grid">{"".join(cards)}</div></main>{nav}'
        "</body></html>"
    )


class FakeNavigator(Navigator):
    """Navigator over a fixed list of HTML pages.

    A successful click on any selector that matches the current page moves to
    the next page, unless ``advances`` is False (a click that renders nothing).
    """

    poll_interval = 0.001

    def __init__(
        self,
        pages: list[str],
        advances: bool = True,
        failing_selectors: tuple[str, ...] = (),
    ) -> None:
        self.pages = pages
        self.advances = advances
        self.failing_selectors = failing_selectors
        self.index = 0
        self.url: str | None = None
        self.goto_calls: list[str] = []
        self.clicks: list[str] = []
        self.snapshots = 0
        self.cookie_attempts = 0
        self.closed = False

    async def goto(self, url: str, timeout: float) -> None:
        self.goto_calls.append(url)
        self.url = url
        self.index = 0

    async def snapshot(self) -> SoupDom:
        self.snapshots += 1
        return SoupDom(self.pages[self.index], self.url or BASE_URL)

    async def click(self, selector: str, timeout: float) -> bool:
        self.clicks.append(selector)
        if selector in self.failing_selectors:
            return False
        if not SoupDom(self.pages[self.index], self.url or BASE_URL).query_all(selector):
            return False
        if self.advances and self.index < len(self.pages) - 1:
            self.index += 1
        return True

    async def dismiss_cookie_banners(self) -> bool:
        self.cookie_attempts += 1
        return True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fast_config(tmp_path):
    """Config with tiny timeouts and no settle delays."""
    return CrawlConfig(
        start_url=BASE_URL,
        output_path=tmp_path / "buildings.json",
        render_timeout=0.05,
        load_timeout=0.05,
        click_timeout=0.05,
        advance_timeout=0.05,
        settle_delay=0,
        initial_settle_delay=0,
    )
