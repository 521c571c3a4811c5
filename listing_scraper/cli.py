"""CLI for running the listing scraper."""

import asyncio
import logging
import subprocess
import sys

from pydantic import ValidationError

from listing_scraper.config import CrawlConfig
from listing_scraper.navigator import NavigationError
from listing_scraper.pagination import NoListingsError, ScrapeError
from listing_scraper.runner import ListingScraper

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_LISTINGS = 2

# Options that take a value, mapped to CrawlConfig fields
VALUE_OPTIONS = {
    "--start-url": "start_url",
    "--out": "output_path",
    "--max-records": "max_records",
    "--max-pages": "max_pages",
}


USAGE = """\
usage: listing-scraper [setup | help] [--start-url URL] [--out PATH]
                       [--max-records N] [--max-pages N] [--headful] [--verbose]

Walk the location listing page by page and write one JSON record per location.

options (each overrides its environment variable):
  --start-url URL   START_URL          first listing page [https://iedereen.overal.info/]
  --out PATH        OUT                JSON array to write [data/buildings.json]
  --max-records N   MAX_LOCATIONS      keep at most N locations, 0 for all [0]
  --max-pages N     MAX_LISTING_PAGES  visit at most N listing pages, 0 for all [0]
  --headful         HEADFUL=true       open a visible browser window
  --verbose                            log polling and click detail

commands:
  setup             download the Chromium build the crawler drives
  help, -h          print this text

exit status: 0 written, 1 failed, 2 no locations found (markup changed or site down)
"""

# Browser download needed once per machine before the first crawl
BROWSER_INSTALL_COMMAND = [sys.executable, "-m", "playwright", "install", "chromium"]


class UsageError(Exception):
    """Raised for malformed command line arguments."""


def print_usage() -> None:
    """Print usage information."""
    print(USAGE, end="")


def run_setup() -> int:
    """Download the Chromium browser used through Crawl4AI.

    Returns:
        Process exit code.
    """
    logger.info(f"Running {' '.join(BROWSER_INSTALL_COMMAND[1:])}")
    returncode = subprocess.run(BROWSER_INSTALL_COMMAND, check=False).returncode
    if returncode != 0:
        print(f"Browser download failed (exit {returncode}); install Chromium with Playwright by hand.")
        return EXIT_FAILURE
    print("Chromium is ready. Start a crawl with: listing-scraper")
    return EXIT_OK


def parse_args(args: list[str]) -> tuple[dict[str, object], bool]:
    """Parse command line arguments.

    Returns:
        Tuple of (config_overrides, verbose)

    Raises:
        UsageError: On unknown options or missing option values.
    """
    overrides: dict[str, object] = {}
    verbose = False

    i = 0
    while i < len(args):
        arg = args[i]
        name, _, inline_value = arg.partition("=")
        if name in VALUE_OPTIONS:
            if inline_value:
                value = inline_value
            else:
                i += 1
                if i >= len(args):
                    raise UsageError(f"Option {name} requires a value")
                value = args[i]
            overrides[VALUE_OPTIONS[name]] = value
        elif arg == "--headful":
            overrides["headless"] = False
        elif arg == "--verbose":
            verbose = True
        else:
            raise UsageError(f"Unknown argument: {arg}")
        i += 1

    return overrides, verbose


async def run_scraper(config: CrawlConfig) -> int:
    """Run the scraper and return the process exit code."""
    print(f"=== Crawling {config.start_url} ===")
    scraper = ListingScraper(config)

    try:
        path, count = await scraper.run()
    except NoListingsError as e:
        logger.error(f"Discovered 0 locations: {e}")
        print(f"  FATAL: {e}")
        return EXIT_NO_LISTINGS
    except (ScrapeError, NavigationError) as e:
        logger.error(f"Crawl failed: {e}")
        print(f"  ERROR: {e}")
        return EXIT_FAILURE
    except Exception as e:
        logger.exception(f"Unexpected failure: {e}")
        print(f"  ERROR: {e}")
        return EXIT_FAILURE

    print(f"  Records: {count}")
    print(f"  Output: {path}")
    return EXIT_OK


async def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the crawl and return the exit code."""
    args = sys.argv[1:] if argv is None else argv

    if args:
        cmd = args[0]
        if cmd in ("-h", "--help", "help"):
            print_usage()
            return EXIT_OK
        if cmd == "setup":
            return run_setup()

    try:
        overrides, verbose = parse_args(args)
        config = CrawlConfig.from_env(**overrides)
    except UsageError as e:
        print(str(e))
        print()
        print("Run with -h for help.")
        return EXIT_FAILURE
    except ValidationError as e:
        print(f"Invalid configuration: {e}")
        return EXIT_FAILURE

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    logger.info(f"[config] start_url={config.start_url}")
    logger.info(f"[config] output_path={config.output_path}")

    return await run_scraper(config)


def cli() -> None:
    """Entry point for CLI."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
