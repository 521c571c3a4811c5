"""Crawl4AI configuration factories with project-specific defaults."""

from crawl4ai import BrowserConfig, CacheMode, CrawlerRunConfig

from listing_scraper.config import DEFAULT_LOCALE, DEFAULT_USER_AGENT

DEFAULT_SESSION_ID = "listing-session"
DEFAULT_PAGE_TIMEOUT_MS = 15000
DEFAULT_WAIT_UNTIL = "domcontentloaded"


def create_browser_config(
    headless: bool = True,
    user_agent: str = DEFAULT_USER_AGENT,
    locale: str = DEFAULT_LOCALE,
) -> BrowserConfig:
    """Create browser config for the listing session.

    Args:
        headless: Run without a visible window. Has no effect on extraction.
        user_agent: Desktop user agent sent with every request.
        locale: Preferred content language, sent as Accept-Language.

    Returns:
        Configured BrowserConfig instance.
    """
    return BrowserConfig(
        browser_type="chromium",
        headless=headless,
        user_agent=user_agent,
        headers={"Accept-Language": f"{locale},{locale.split('-')[0]};q=0.9"},
        verbose=False,
    )


def create_crawl_config(
    session_id: str = DEFAULT_SESSION_ID,
    js_code: str | list[str] | None = None,
    js_only: bool = False,
    wait_for: str | None = None,
    page_timeout: int = DEFAULT_PAGE_TIMEOUT_MS,
    cache_mode: CacheMode = CacheMode.BYPASS,
) -> CrawlerRunConfig:
    """Create a run config bound to the shared browser session.

    Args:
        session_id: Session that keeps the same page open across calls.
        js_code: Script(s) to run in the page before the HTML is captured.
        js_only: Reuse the current page instead of navigating.
        wait_for: Crawl4AI wait condition ("css:..." or "js:...").
        page_timeout: Timeout in milliseconds for navigation and waits.
        cache_mode: Cache mode for the crawler (default: BYPASS).

    Returns:
        Configured CrawlerRunConfig instance.
    """
    return CrawlerRunConfig(
        session_id=session_id,
        js_code=js_code,
        js_only=js_only,
        wait_for=wait_for,
        wait_until=DEFAULT_WAIT_UNTIL,
        page_timeout=page_timeout,
        cache_mode=cache_mode,
        verbose=False,
    )
