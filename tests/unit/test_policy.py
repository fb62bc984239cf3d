"""
Unit tests for the CSP and CORS policies.
"""

from aboutui.source.policy import (
    CSPDirective,
    build_content_security_policy,
    get_access_control_allow_origin,
    get_content_security_policy,
    should_add_content_security_policy,
)


class TestContentSecurityPolicy:
    """Tests for the per-host CSP."""

    def test_disk_credits_opt_out_on_chromeos(self):
        """Test os-credits and crostini-credits carry no CSP on ChromeOS."""
        assert not should_add_content_security_policy("os-credits", chromeos=True)
        assert not should_add_content_security_policy("crostini-credits", chromeos=True)
        assert build_content_security_policy("os-credits", chromeos=True) is None

    def test_other_hosts_keep_csp(self):
        for host in ["credits", "terms", "chrome-urls", "linux-proxy-config"]:
            assert should_add_content_security_policy(host, chromeos=True)
            assert should_add_content_security_policy(host)

    def test_opt_out_is_chromeos_only(self):
        assert should_add_content_security_policy("os-credits", chromeos=False)

    def test_credits_trusted_types(self):
        """Test the credits page allows its static trusted-types policy."""
        value = get_content_security_policy("credits", CSPDirective.TRUSTED_TYPES)
        assert value == "trusted-types credits-static;"

    def test_default_trusted_types(self):
        assert get_content_security_policy("terms", CSPDirective.TRUSTED_TYPES) == "trusted-types;"

    def test_unset_directive(self):
        assert get_content_security_policy("terms", CSPDirective.IMG_SRC) == ""

    def test_build_header(self):
        """Test directives are joined in declaration order."""
        header = build_content_security_policy("terms")
        assert header == (
            "child-src 'none'; frame-ancestors 'none'; object-src 'none'; "
            "script-src chrome://resources 'self'; "
            "require-trusted-types-for 'script'; trusted-types;"
        )

    def test_build_header_credits(self):
        header = build_content_security_policy("credits")
        assert header.endswith("trusted-types credits-static;")


class TestAccessControlAllowOrigin:
    """Tests for get_access_control_allow_origin()."""

    def test_oobe_origin_allowed_for_terms(self):
        """Test the OOBE origin is echoed back on ChromeOS."""
        assert get_access_control_allow_origin("terms", "chrome://oobe", chromeos=True) == "chrome://oobe"
        assert get_access_control_allow_origin("terms", "chrome://oobe/", chromeos=True) == "chrome://oobe/"

    def test_other_origin_rejected(self):
        assert get_access_control_allow_origin("terms", "chrome://evil", chromeos=True) is None

    def test_other_host_rejected(self):
        assert get_access_control_allow_origin("credits", "chrome://oobe", chromeos=True) is None

    def test_not_chromeos(self):
        assert get_access_control_allow_origin("terms", "chrome://oobe") is None

    def test_empty_origin(self):
        """Test an empty origin never matches, although every URL starts with it."""
        assert get_access_control_allow_origin("terms", "", chromeos=True) is None
        assert get_access_control_allow_origin("terms", None, chromeos=True) is None

    def test_custom_oobe_url(self):
        result = get_access_control_allow_origin(
            "terms", "chrome://setup", chromeos=True, oobe_url="chrome://setup/welcome"
        )
        assert result == "chrome://setup"
