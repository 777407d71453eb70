"""
=============================================================================
COMMAND-LINE INTERFACE
=============================================================================

    python -m minihttp --directory /tmp/data
    minihttp --directory /tmp/data --log-level DEBUG

Command-line flags override HTTP_* environment variables, which override
the ServerConfig defaults.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, LOG_LEVELS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                            # Serve ./ on 0.0.0.0:4221
  python -m minihttp --directory /tmp/data      # Files root for /files/
  python -m minihttp --log-level DEBUG          # Verbose logging
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="Directory path to serve files from (default: current directory)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 0.0.0.0)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 4221)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment-derived config with any given flags applied on top."""
    config = ServerConfig.from_env()

    if args.directory is not None:
        config.directory = args.directory
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    return config


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    try:
        server = HTTPServer(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
