"""CLI entry point for the MagnetSearch server."""

from __future__ import annotations

import argparse
import os
import socket
import sys


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for the MagnetSearch server."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from magnetsearch.config.settings import CONFIG_FILE_ENV, load_settings
    from magnetsearch.observability.logging import setup_logging

    try:
        settings = load_settings(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Apply CLI overrides
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers
    if args.log_level:
        settings.observability.log_level = args.log_level
    if args.log_format:
        settings.observability.log_format = args.log_format

    setup_logging(settings.observability)

    # Worker processes rebuild settings through the app factory
    if args.config:
        os.environ[CONFIG_FILE_ENV] = os.path.abspath(args.config)
    if args.log_level:
        os.environ["MAGNETSEARCH_OBSERVABILITY__LOG_LEVEL"] = args.log_level
    if args.log_format:
        os.environ["MAGNETSEARCH_OBSERVABILITY__LOG_FORMAT"] = args.log_format

    if not _port_available(settings.server.host, settings.server.port):
        print(f"Error: Port {settings.server.port} is already in use.", file=sys.stderr)
        print(f"Run 'lsof -i :{settings.server.port}' to find the process.", file=sys.stderr)
        sys.exit(1)

    # Start server
    import uvicorn

    uvicorn.run(
        "magnetsearch.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers if not args.reload else 1,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
        log_config=None,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="magnetsearch",
        description="MagnetSearch: magnet link search server",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Server bind address (overrides config)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Server port (overrides config)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of worker processes",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        choices=["json", "console"],
        default=None,
        help="Log format (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"MagnetSearch {_get_version()}",
    )
    return parser


def _port_available(host: str, port: int) -> bool:
    """Return True if *port* can be bound on *host*."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind((host if host != "0.0.0.0" else "127.0.0.1", port))
    except OSError:
        return False
    finally:
        sock.close()
    return True


def _get_version() -> str:
    from magnetsearch import __version__

    return __version__


if __name__ == "__main__":
    main()
