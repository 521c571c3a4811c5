"""Crawl configuration, read from environment variables or passed explicitly."""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_START_URL = "https://iedereen.overal.info/"
DEFAULT_OUTPUT_PATH = Path("data/buildings.json")
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120 Safari/537.36"
)
DEFAULT_LOCALE = "nl-BE"

TRUE_VALUES = ("1", "true", "yes", "on")


class CrawlConfig(BaseModel):
    """Settings for one crawl run. Timeouts and delays are in seconds."""

    start_url: str = Field(default=DEFAULT_START_URL, description="First listing page")
    output_path: Path = Field(default=DEFAULT_OUTPUT_PATH, description="JSON output file")
    max_records: int = Field(default=0, ge=0, description="Cap on unique records, 0 = unlimited")
    max_pages: int = Field(default=0, ge=0, description="Cap on listing pages, 0 = until next stops")
    headless: bool = Field(default=True, description="Run the browser without a window")

    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    locale: str = Field(default=DEFAULT_LOCALE)

    render_timeout: float = Field(default=20.0, gt=0, description="Wait for first listing anchor")
    load_timeout: float = Field(default=15.0, gt=0, description="Page load wait")
    click_timeout: float = Field(default=4.0, gt=0, description="Per click attempt")
    advance_timeout: float = Field(default=10.0, gt=0, description="Wait for page change signals")
    settle_delay: float = Field(default=0.5, ge=0, description="Pause after a successful advance")
    initial_settle_delay: float = Field(default=0.8, ge=0, description="Pause after first render")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "CrawlConfig":
        """Build config from START_URL, OUT, MAX_LOCATIONS, MAX_LISTING_PAGES and HEADFUL.

        Args:
            environ: Mapping to read instead of os.environ.
            **overrides: Explicit values that win over the environment.

        Raises:
            pydantic.ValidationError: If a value cannot be parsed.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        if env.get("START_URL"):
            values["start_url"] = env["START_URL"]
        if env.get("OUT"):
            values["output_path"] = env["OUT"]
        if env.get("MAX_LOCATIONS"):
            values["max_records"] = env["MAX_LOCATIONS"]
        if env.get("MAX_LISTING_PAGES"):
            values["max_pages"] = env["MAX_LISTING_PAGES"]
        if env.get("HEADFUL"):
            values["headless"] = env["HEADFUL"].strip().lower() not in TRUE_VALUES

        values.update(overrides)
        return cls.model_validate(values)
