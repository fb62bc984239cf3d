"""
Unit tests for AboutServer and the command-line entry point.
"""

import threading

import pytest

from aboutui import AboutConfig, AboutServer, __version__
from aboutui.__main__ import build_parser, config_from_args, main as cli_main
from aboutui.middleware import AccessLogMiddleware, function_middleware

from conftest import OS_CREDITS_PATH


@pytest.fixture
def server(collaborators, chromeos):
    config = AboutConfig(chromeos=True, os_credits_path=OS_CREDITS_PATH, program_path="/usr/bin/lt-browser")
    server = AboutServer(config, collaborators=collaborators, capabilities=chromeos, configure_logging=False)
    server.start()
    yield server
    server.shutdown()


class TestLifecycle:
    """Tests for start/shutdown."""

    def test_context_manager(self, collaborators):
        with AboutServer(collaborators=collaborators, configure_logging=False) as server:
            assert server.is_running
            assert server.main.is_running
        assert not server.is_running
        assert not server.main.is_running

    def test_resolve_before_start(self, collaborators):
        server = AboutServer(collaborators=collaborators, configure_logging=False)
        with pytest.raises(RuntimeError):
            server.resolve("credits", "", lambda body: None)

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            AboutServer(AboutConfig(max_workers=0), configure_logging=False)

    def test_version(self):
        assert __version__ == "1.0.0"


class TestFetch:
    """Tests for fetch()."""

    def test_terms(self, server):
        response = server.fetch("chrome://terms/")
        assert "LT Browser Terms of Service" in response.text
        assert response.mime_type == "text/html"
        assert response.host == "terms"
        assert len(response) == len(response.body)

    def test_script_mime_type(self, server):
        response = server.fetch("chrome://credits/credits.js")
        assert response.mime_type == "application/javascript"
        assert response.headers["Content-Type"] == "application/javascript; charset=utf-8"

    def test_loader_backed_host(self, server, file_system):
        file_system.files[OS_CREDITS_PATH] = b"os credits from disk"
        assert server.fetch("chrome://os-credits/").text == "os credits from disk"

    def test_unknown_host(self, server):
        assert server.fetch("chrome://nope/").text == ""

    def test_fetch_on_main_context(self, server):
        """Test fetch() refuses to block the main context."""
        errors = []
        done = threading.Event()

        def try_fetch():
            try:
                server.fetch("chrome://credits/")
            except RuntimeError as e:
                errors.append(e)
            finally:
                done.set()

        server.main.post(try_fetch)
        assert done.wait(5.0)
        assert len(errors) == 1

    def test_timeout(self, server):
        @function_middleware
        def drop(request, next):
            pass

        server.use(drop)
        with pytest.raises(TimeoutError):
            server.fetch("chrome://credits/", timeout=0.1)

    def test_stats(self, server):
        server.fetch("chrome://os-credits/")
        stats = server.stats
        assert stats["main"]["tasks_run"] >= 1
        assert stats["pool"]["workers"]["total"] >= 1


class TestHeaders:
    """Tests for headers_for()."""

    def test_default_csp(self, server):
        headers = server.headers_for("terms", "")
        assert headers["Content-Type"] == "text/html; charset=utf-8"
        assert "trusted-types;" in headers["Content-Security-Policy"]
        assert "Access-Control-Allow-Origin" not in headers

    def test_no_csp_for_disk_credits(self, server):
        assert "Content-Security-Policy" not in server.headers_for("os-credits", "")

    def test_oobe_origin(self, server):
        response = server.fetch("chrome://terms/", origin="chrome://oobe")
        assert response.headers["Access-Control-Allow-Origin"] == "chrome://oobe"


class TestResolve:
    """Tests for resolve() from arbitrary threads."""

    def test_callback_runs_on_main_context(self, server):
        seen = {}
        done = threading.Event()

        def on_body(body):
            seen["on_main"] = server.main.is_current()
            seen["text"] = body.decode()
            done.set()

        thread = threading.Thread(target=server.resolve_url, args=("chrome://linux-proxy-config/", on_body))
        thread.start()
        thread.join()

        assert done.wait(5.0)
        assert seen["on_main"] is True
        assert "man lt-browser" in seen["text"]

    def test_middleware_sees_requests(self, server):
        hosts = []

        @function_middleware
        def record(request, next):
            hosts.append(request.host)
            next(request)

        server.use(record).use(AccessLogMiddleware())
        server.fetch("chrome://Credits/")
        assert hosts == ["credits"]


class TestCli:
    """Tests for the aboutui command."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ["ABOUTUI_CHROMEOS", "ABOUTUI_WORKERS", "ABOUTUI_LOG_FORMAT", "ABOUTUI_LOCALE",
                     "ABOUTUI_LOG_LEVEL"]:
            monkeypatch.delenv(name, raising=False)

    def test_url_listing(self, capsys):
        assert cli_main(["chrome://chrome-urls/"]) == 0
        out = capsys.readouterr().out
        assert "<li><a href='chrome://credits/'>lt-browser://credits</a></li>" in out

    def test_headers(self, capsys):
        assert cli_main(["chrome://credits/credits.js", "--headers"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Content-Type: application/javascript; charset=utf-8\n")

    def test_localized_terms(self, capsys):
        assert cli_main(["chrome://terms/", "--locale", "fr-CA"]) == 0
        assert "Conditions d'utilisation" in capsys.readouterr().out

    def test_invalid_config(self, capsys):
        assert cli_main(["chrome://terms/", "--workers", "0"]) == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_bad_environment(self, capsys, monkeypatch):
        monkeypatch.setenv("ABOUTUI_WORKERS", "lots")
        assert cli_main(["chrome://terms/"]) == 2

    def test_cli_log_level_defaults_to_warning(self):
        config = config_from_args(build_parser().parse_args(["chrome://terms/"]))
        assert config.log_level == "WARNING"

    def test_environment_log_level_kept(self, monkeypatch):
        """Test ABOUTUI_LOG_LEVEL wins over the CLI default."""
        monkeypatch.setenv("ABOUTUI_LOG_LEVEL", "DEBUG")
        config = config_from_args(build_parser().parse_args(["chrome://terms/"]))
        assert config.log_level == "DEBUG"

    def test_flag_overrides_environment_log_level(self, monkeypatch):
        monkeypatch.setenv("ABOUTUI_LOG_LEVEL", "DEBUG")
        args = build_parser().parse_args(["chrome://terms/", "--log-level", "ERROR"])
        assert config_from_args(args).log_level == "ERROR"
