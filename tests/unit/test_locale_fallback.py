"""
Unit tests for the locale fallback chain and device region lookup.
"""

import logging

import pytest

from aboutui.collaborators import StaticStatisticsProvider
from aboutui.locale.fallback import (
    build_locale_chain,
    extract_base_language,
    read_device_region,
)


class TestBuildLocaleChain:
    """Tests for build_locale_chain()."""

    def test_region_without_table_entry(self):
        """Test the region probe is skipped for unclassified countries."""
        assert build_locale_chain("fr-CA", "fr") == ("fr-fr", "en-us")

    def test_region_with_table_entry(self):
        """Test the region probe sits between language and default."""
        assert build_locale_chain("de-AT", "at") == ("de-at", "eu", "en-us")

    def test_apac(self):
        assert build_locale_chain("ja", "jp") == ("ja-jp", "apac", "en-us")

    def test_collapses_duplicates(self):
        """Test en-US on a US device probes en-us once."""
        assert build_locale_chain("en-US", "us") == ("en-us",)

    def test_input_is_lowercased(self):
        assert build_locale_chain("DE-at", "AT") == ("de-at", "eu", "en-us")

    def test_empty_base_language(self):
        """Test probe #1 is skipped without a language."""
        assert build_locale_chain("", "at") == ("eu", "en-us")
        assert build_locale_chain("", "us") == ("en-us",)

    @pytest.mark.parametrize("locale,region", [
        ("fr-CA", "ca"), ("pt_BR", "br"), ("zh-TW", "tw"), ("en-GB", "gb"), ("", ""),
    ])
    def test_chain_shape(self, locale, region):
        """Test the chain ends with en-us and has no consecutive repeats."""
        chain = build_locale_chain(locale, region)
        assert chain[-1] == "en-us"
        assert all(a != b for a, b in zip(chain, chain[1:]))


class TestExtractBaseLanguage:
    """Tests for extract_base_language()."""

    @pytest.mark.parametrize("locale,expected", [
        ("fr-CA", "fr"),
        ("pt_BR", "pt"),
        ("zh-Hant-TW", "zh"),
        ("de", "de"),
        ("", ""),
    ])
    def test_extract(self, locale, expected):
        assert extract_base_language(locale) == expected


class TestReadDeviceRegion:
    """Tests for read_device_region()."""

    def test_simple_region(self):
        stats = StaticStatisticsProvider({"region": "DE"})
        assert read_device_region(stats) == "de"

    def test_complex_region_code(self):
        """Test only the first dot-separated piece is used."""
        stats = StaticStatisticsProvider({"region": "ca.ansi"})
        assert read_device_region(stats) == "ca"

    def test_missing_statistic(self, caplog):
        """Test a missing statistic defaults to us with a warning."""
        with caplog.at_level(logging.WARNING, logger="aboutui.locale.fallback"):
            assert read_device_region(StaticStatisticsProvider()) == "us"
        assert "defaulting to US" in caplog.text

    def test_missing_provider(self, caplog):
        with caplog.at_level(logging.WARNING, logger="aboutui.locale.fallback"):
            assert read_device_region(None) == "us"
        assert caplog.records

    def test_empty_value(self):
        stats = StaticStatisticsProvider({"region": ""})
        assert read_device_region(stats) == "us"
