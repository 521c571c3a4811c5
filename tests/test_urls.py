"""Tests for URL and text normalization."""

import pytest

from listing_scraper.urls import (
    ListingKey,
    canonical_url,
    is_listing_url,
    normalize_space,
    origin_of,
    parse_key,
    to_absolute,
)

ORIGIN = "https://iedereen.overal.info"


class TestNormalizeSpace:
    def test_collapses_whitespace(self):
        assert normalize_space("  't   Kroonrad\n\t ") == "'t Kroonrad"

    def test_none_becomes_empty(self):
        assert normalize_space(None) == ""


class TestToAbsolute:
    """Tests for href resolution against the page origin."""

    @pytest.mark.parametrize(
        "href",
        [
            "locaties/12345-kroonrad/",
            "./locaties/12345-kroonrad/",
            "/locaties/12345-kroonrad/",
            "https://iedereen.overal.info/locaties/12345-kroonrad/",
        ],
    )
    def test_all_forms_resolve_to_same_url(self, href):
        assert to_absolute(href, ORIGIN) == f"{ORIGIN}/locaties/12345-kroonrad/"

    def test_bare_path_ignores_current_page_path(self):
        """Bare paths resolve against the origin root, not the page path."""
        assert to_absolute("locaties/12345-x/", ORIGIN) == f"{ORIGIN}/locaties/12345-x/"

    def test_origin_with_trailing_slash(self):
        assert to_absolute("locaties/12345-x/", ORIGIN + "/") == f"{ORIGIN}/locaties/12345-x/"

    def test_protocol_relative(self):
        assert to_absolute("//cdn.xano.io/thumbnail_1.jpg", ORIGIN) == "https://cdn.xano.io/thumbnail_1.jpg"

    def test_strips_surrounding_whitespace(self):
        assert to_absolute("  /locaties/12345-x/ ", ORIGIN) == f"{ORIGIN}/locaties/12345-x/"

    @pytest.mark.parametrize("href", [None, "", "   "])
    def test_empty_returns_none(self, href):
        assert to_absolute(href, ORIGIN) is None

    @pytest.mark.parametrize(
        "href", ["mailto:info@example.com", "javascript:void(0)", "tel:+3211223344", "data:image/png;base64,AAA"]
    )
    def test_non_http_schemes_return_none(self, href):
        assert to_absolute(href, ORIGIN) is None


class TestCanonicalUrl:
    """Tests for the listing identity key."""

    def test_strips_query_and_fragment(self):
        url = f"{ORIGIN}/locaties/12345-kroonrad/?ref=list#top"
        assert canonical_url(url) == f"{ORIGIN}/locaties/12345-kroonrad/"

    def test_adds_trailing_slash(self):
        assert canonical_url(f"{ORIGIN}/locaties/12345-kroonrad") == f"{ORIGIN}/locaties/12345-kroonrad/"

    @pytest.mark.parametrize(
        "url",
        [
            f"{ORIGIN}/locaties/12345-kroonrad",
            f"{ORIGIN}/locaties/12345-kroonrad/?a=1",
            f"{ORIGIN}/locaties/12345-kroonrad#x",
            ORIGIN,
        ],
    )
    def test_idempotent(self, url):
        once = canonical_url(url)
        assert canonical_url(once) == once


class TestIsListingUrl:
    @pytest.mark.parametrize(
        "url",
        [
            f"{ORIGIN}/locaties/12345-kroonrad/",
            f"{ORIGIN}/locaties/12345-kroonrad",
            f"{ORIGIN}/Locaties/00001-a/",
        ],
    )
    def test_listing_urls(self, url):
        assert is_listing_url(url) is True

    @pytest.mark.parametrize(
        "url",
        [
            f"{ORIGIN}/locaties/",
            f"{ORIGIN}/locaties/1234-short-id/",
            f"{ORIGIN}/locaties/123456-long-id/",
            f"{ORIGIN}/locaties/kroonrad/",
            f"{ORIGIN}/over/locaties/12345-x/",
            f"{ORIGIN}/locaties/12345-x/fotos/",
            None,
        ],
    )
    def test_other_urls(self, url):
        assert is_listing_url(url) is False


class TestParseKey:
    def test_parses_id_and_slug(self):
        key = parse_key(f"{ORIGIN}/locaties/12345-t-kroonrad/")
        assert key == ListingKey(key="12345-t-kroonrad", id="12345", slug="t-kroonrad")

    def test_without_trailing_slash(self):
        assert parse_key(f"{ORIGIN}/locaties/54321-molen").id == "54321"

    def test_non_matching_shape_is_all_none(self):
        assert parse_key(f"{ORIGIN}/locaties/kroonrad/") == ListingKey()

    def test_not_a_listing_url(self):
        assert parse_key(f"{ORIGIN}/contact/") == ListingKey()


def test_origin_of():
    assert origin_of(f"{ORIGIN}/locaties/12345-x/?q=1") == ORIGIN
