"""
Unit tests for MIME type detection.
"""

import pytest

from aboutui.source.mime_types import get_content_type, get_mime_type, is_text_type


class TestGetMimeType:
    """Tests for get_mime_type()."""

    @pytest.mark.parametrize("path", ["credits.js", "stats.js", "strings.js"])
    def test_known_scripts(self, path):
        assert get_mime_type(path) == "application/javascript"
        assert get_mime_type(path, chromeos=True) == "application/javascript"

    def test_keyboard_utils_only_on_chromeos(self):
        """Test keyboard_utils.js is a script only on ChromeOS."""
        assert get_mime_type("keyboard_utils.js") == "text/html"
        assert get_mime_type("keyboard_utils.js", chromeos=True) == "application/javascript"

    @pytest.mark.parametrize("path", ["", "credits.html", "other.js", "arc/terms", "CREDITS.JS"])
    def test_everything_else_is_html(self, path):
        """Test no extension-based guessing happens."""
        assert get_mime_type(path) == "text/html"


class TestContentType:
    """Tests for get_content_type() and is_text_type()."""

    def test_charset_added(self):
        assert get_content_type("") == "text/html; charset=utf-8"
        assert get_content_type("credits.js") == "application/javascript; charset=utf-8"

    def test_custom_charset(self):
        assert get_content_type("", charset="latin-1") == "text/html; charset=latin-1"

    def test_is_text_type(self):
        assert is_text_type("text/html")
        assert is_text_type("application/javascript")
        assert not is_text_type("application/pdf")
