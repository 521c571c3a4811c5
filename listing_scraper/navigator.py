"""Navigation client: the rendered browser page the crawl drives.

The pagination controller only talks to ``Navigator``. ``Crawl4aiNavigator``
keeps one Crawl4AI session open and reads the rendered DOM as HTML
snapshots; tests substitute a navigator backed by static HTML.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from crawl4ai import AsyncWebCrawler

from listing_scraper.crawler import DEFAULT_SESSION_ID, create_crawl_config
from listing_scraper.dom import DomQuery, SoupDom

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.25
DEFAULT_SNAPSHOT_TIMEOUT = 10.0

# Labels of cookie-consent buttons (Dutch and English)
COOKIE_BUTTON_PATTERNS = [r"accep", r"akkoord", r"agree", r"^ok$", r"alles accep"]


class NavigationError(Exception):
    """Raised when the browser cannot load or read a page."""


class Navigator(ABC):
    """Controllable rendered page.

    Every wait is bounded and reports expiry as ``False``; it is up to the
    caller to decide what an unobserved signal means.
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL

    @abstractmethod
    async def goto(self, url: str, timeout: float) -> None:
        """Navigate to url.

        Raises:
            NavigationError: If the page cannot be loaded.
        """
        ...

    @abstractmethod
    async def snapshot(self) -> DomQuery:
        """Return a read-only view of the currently rendered DOM."""
        ...

    @abstractmethod
    async def click(self, selector: str, timeout: float) -> bool:
        """Click the first element matching selector. Returns False on failure."""
        ...

    async def wait_for_load(self, timeout: float) -> bool:
        """Wait until the page has finished loading after a navigation."""
        return True

    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        """Wait until at least one element matches selector."""
        return await self.wait_for(lambda dom: bool(dom.query_all(selector)), timeout)

    async def wait_for(self, predicate: Callable[[DomQuery], bool], timeout: float) -> bool:
        """Poll DOM snapshots until predicate holds or timeout expires."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            try:
                if predicate(await self.snapshot()):
                    return True
            except NavigationError as e:
                logger.debug(f"Snapshot failed while waiting: {e}")

            remaining = deadline - loop.time()
            if remaining <= 0:
                return False
            await asyncio.sleep(min(self.poll_interval, remaining))

    async def dismiss_cookie_banners(self) -> bool:
        """Try to close consent banners. Returns True if an attempt was made."""
        return False

    async def close(self) -> None:
        """Release the page."""


def _click_script(selector: str) -> str:
    return (
        "(() => {"
        f" const el = document.querySelector({json.dumps(selector)});"
        " if (!el) return false;"
        " el.scrollIntoView({block: 'center'});"
        " el.click();"
        " return true;"
        " })();"
    )


def _cookie_script(patterns: list[str]) -> str:
    regexes = ", ".join(f"new RegExp({json.dumps(p)}, 'i')" for p in patterns)
    return (
        "(() => {"
        f" const patterns = [{regexes}];"
        " const buttons = [...document.querySelectorAll('button, [role=\"button\"]')];"
        " let clicked = 0;"
        " for (const rx of patterns) {"
        "  const btn = buttons.find((b) => rx.test((b.innerText || '').trim()));"
        "  if (btn) { try { btn.click(); clicked++; } catch (e) {} }"
        " }"
        " return clicked;"
        " })();"
    )


class Crawl4aiNavigator(Navigator):
    """Navigator over a Crawl4AI session.

    ``goto`` is a regular crawl; every later call reuses the session page
    with ``js_only=True`` so the single-page app keeps its client-side state.
    """

    def __init__(
        self,
        crawler: AsyncWebCrawler,
        session_id: str = DEFAULT_SESSION_ID,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        snapshot_timeout: float = DEFAULT_SNAPSHOT_TIMEOUT,
    ) -> None:
        self._crawler = crawler
        self._session_id = session_id
        self._snapshot_timeout = snapshot_timeout
        self._url: str | None = None
        self.poll_interval = poll_interval

    @property
    def url(self) -> str | None:
        """URL passed to the last goto()."""
        return self._url

    async def _run_in_page(
        self,
        timeout: float,
        js_code: str | None = None,
        wait_for: str | None = None,
    ):
        if self._url is None:
            raise NavigationError("No page loaded, call goto() first")
        config = create_crawl_config(
            session_id=self._session_id,
            js_code=js_code,
            js_only=True,
            wait_for=wait_for,
            page_timeout=int(timeout * 1000),
        )
        return await self._crawler.arun(url=self._url, config=config)

    async def goto(self, url: str, timeout: float) -> None:
        logger.debug(f"Navigating to {url}")
        config = create_crawl_config(session_id=self._session_id, page_timeout=int(timeout * 1000))
        result = await self._crawler.arun(url=url, config=config)
        if not result.success:
            raise NavigationError(f"Failed to load {url}: {result.error_message}")
        self._url = url

    async def snapshot(self) -> SoupDom:
        result = await self._run_in_page(self._snapshot_timeout)
        if not result.success:
            raise NavigationError(f"Failed to read page {self._url}: {result.error_message}")
        return SoupDom(result.html, self._url)

    async def wait_for_load(self, timeout: float) -> bool:
        result = await self._run_in_page(
            timeout, wait_for="js:() => document.readyState !== 'loading'"
        )
        return bool(result.success)

    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        result = await self._run_in_page(timeout, wait_for=f"css:{selector}")
        if not result.success:
            logger.debug(f"Selector {selector!r} not present after {timeout}s: {result.error_message}")
        return bool(result.success)

    async def click(self, selector: str, timeout: float) -> bool:
        dom = await self.snapshot()
        if not dom.query_all(selector):
            logger.debug(f"Nothing to click for {selector!r}")
            return False

        result = await self._run_in_page(timeout, js_code=_click_script(selector))
        if not result.success:
            logger.warning(f"Click on {selector!r} failed: {result.error_message}")
            return False
        return True

    async def dismiss_cookie_banners(self) -> bool:
        result = await self._run_in_page(
            self._snapshot_timeout, js_code=_cookie_script(COOKIE_BUTTON_PATTERNS)
        )
        if not result.success:
            logger.warning(f"Cookie banner dismissal failed: {result.error_message}")
            return False
        return True

    async def close(self) -> None:
        await self._crawler.crawler_strategy.kill_session(self._session_id)
