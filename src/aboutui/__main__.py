"""
=============================================================================
ABOUT-UI CLI ENTRY POINT
=============================================================================

Resolve one about-ui URL and print the content.

=============================================================================
USAGE
=============================================================================

    # The URL listing
    python -m aboutui chrome://chrome-urls/

    # Headers only (Content-Type, CSP, CORS)
    python -m aboutui chrome://credits/ --headers

    # ChromeOS hosts, French UI on a Canadian device
    python -m aboutui chrome://terms/arc/terms --chromeos --locale fr-CA --region ca

    # One access log line per response, as JSON
    python -m aboutui chrome://terms/ --access-log json

=============================================================================
"""

import argparse
import os
import sys

from .config import AboutConfig
from .errors import ConfigError
from .middleware import AccessLogMiddleware
from .server import AboutServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aboutui",
        description="Resolve an about-ui URL and print the generated content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m aboutui chrome://chrome-urls/
  python -m aboutui chrome://credits/credits.js --headers
  python -m aboutui chrome://terms/oem --chromeos
        """,
    )

    parser.add_argument("url", help="URL to resolve, e.g. chrome://credits/")

    # ─────────────────────────────────────────────────────────────────────
    # OUTPUT
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--headers",
        action="store_true",
        help="Print response headers before the body",
    )
    parser.add_argument(
        "--origin",
        default=None,
        help="Request origin used for the Access-Control-Allow-Origin header",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Seconds to wait for the response (default: 5)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # PLATFORM AND LOCALE
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--chromeos",
        action="store_true",
        default=None,
        help="Enable ChromeOS hosts (os-credits, crostini-credits, terms sub-paths)",
    )
    parser.add_argument("--locale", default=None, help="Application locale (default: en-US)")
    parser.add_argument("--region", default=None, help="Device region statistic, e.g. 'ca.ansi'")

    # ─────────────────────────────────────────────────────────────────────
    # RUNTIME
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Maximum worker threads (default: 4)",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: WARNING for the CLI)",
    )
    parser.add_argument(
        "--access-log",
        choices=["text", "json"],
        default=None,
        help="Emit one access log line per response",
    )
    parser.add_argument("--version", "-v", action="version", version="aboutui 1.0.0")
    return parser


def config_from_args(args: argparse.Namespace) -> AboutConfig:
    """Environment first, then command-line overrides."""
    config = AboutConfig.from_env()
    if "ABOUTUI_LOG_LEVEL" not in os.environ:
        config.log_level = "WARNING"

    if args.chromeos:
        config.chromeos = True
    if args.locale:
        config.application_locale = args.locale
    if args.region:
        config.device_region = args.region
    if args.workers is not None:
        config.max_workers = args.workers
    if args.log_level:
        config.log_level = args.log_level
    if args.access_log:
        config.log_format = args.access_log
    return config


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = AboutServer(config)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if args.access_log:
        server.use(AccessLogMiddleware(log_format=config.log_format))

    with server:
        try:
            response = server.fetch(args.url, timeout=args.timeout, origin=args.origin)
        except TimeoutError as e:
            print(str(e), file=sys.stderr)
            return 1

    if args.headers:
        for name, value in response.headers.items():
            print(f"{name}: {value}")
        print()

    sys.stdout.write(response.text)
    if response.text and not response.text.endswith("\n"):
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
