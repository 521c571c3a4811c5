"""Tests for crawl configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from listing_scraper.config import DEFAULT_START_URL, CrawlConfig


class TestDefaults:
    def test_defaults(self):
        config = CrawlConfig()
        assert config.start_url == DEFAULT_START_URL == "https://iedereen.overal.info/"
        assert config.output_path == Path("data/buildings.json")
        assert config.max_records == 0
        assert config.max_pages == 0
        assert config.headless is True
        assert config.locale == "nl-BE"
        assert config.advance_timeout == 10.0

    def test_negative_caps_rejected(self):
        with pytest.raises(ValidationError):
            CrawlConfig(max_records=-1)
        with pytest.raises(ValidationError):
            CrawlConfig(max_pages=-5)

    def test_zero_timeout_rejected(self):
        with pytest.raises(ValidationError):
            CrawlConfig(advance_timeout=0)


class TestFromEnv:
    """Tests for environment variable parsing."""

    def test_empty_environment_gives_defaults(self):
        assert CrawlConfig.from_env({}) == CrawlConfig()

    def test_reads_all_variables(self):
        config = CrawlConfig.from_env(
            {
                "START_URL": "https://example.com/start/",
                "OUT": "/tmp/out.json",
                "MAX_LOCATIONS": "25",
                "MAX_LISTING_PAGES": "3",
                "HEADFUL": "true",
            }
        )
        assert config.start_url == "https://example.com/start/"
        assert config.output_path == Path("/tmp/out.json")
        assert config.max_records == 25
        assert config.max_pages == 3
        assert config.headless is False

    @pytest.mark.parametrize("value,headless", [("false", True), ("TRUE", False), ("1", False), ("no", True)])
    def test_headful_values(self, value, headless):
        assert CrawlConfig.from_env({"HEADFUL": value}).headless is headless

    def test_empty_values_ignored(self):
        config = CrawlConfig.from_env({"MAX_LOCATIONS": "", "OUT": ""})
        assert config.max_records == 0
        assert config.output_path == Path("data/buildings.json")

    def test_overrides_win(self):
        config = CrawlConfig.from_env({"MAX_LISTING_PAGES": "3"}, max_pages="7", headless=False)
        assert config.max_pages == 7
        assert config.headless is False

    def test_invalid_number(self):
        with pytest.raises(ValidationError):
            CrawlConfig.from_env({"MAX_LOCATIONS": "lots"})

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("MAX_LISTING_PAGES", "4")
        assert CrawlConfig.from_env().max_pages == 4
