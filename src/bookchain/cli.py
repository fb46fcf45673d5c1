"""
Command-line interface for the bookchain server.

Provides CLI commands for server management:
- run: Start the API server
- config: Print the resolved configuration

Usage:
    bookchain run [--port PORT] [--host HOST] [--no-auto-discover]
    bookchain config

Environment Variables:
    BOOKCHAIN_HOST: Host to bind the API server (default: 0.0.0.0)
    BOOKCHAIN_PORT: Port for the API server (default: 3000, auto-discovers if in use)
    See bookchain.config for the full list.
"""

import argparse
import sys


def cmd_run(args: argparse.Namespace) -> int:
    """
    Run the API server.

    Configuration Priority:
        1. CLI arguments (--port, --host)
        2. Environment variables / config/server.ini
        3. Default values (3000, 0.0.0.0)

    The chain starts with a single genesis block and lives only as long as
    the server process.

    Returns:
        0 on clean shutdown (including Ctrl+C), 1 on startup error
    """
    from bookchain.api.server import start_server

    host = getattr(args, "host", None)
    port = getattr(args, "port", None)
    auto_discover = not getattr(args, "no_auto_discover", False)

    try:
        start_server(host=host, port=port, auto_discover=auto_discover)
        return 0
    except KeyboardInterrupt:
        print("\nServer stopped.")
        return 0
    except OSError as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Print the configuration summary. Returns 0."""
    from bookchain.config import print_config_summary

    print_config_summary()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="bookchain",
        description="bookchain - hash-linked ledger of book checkouts",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run the API server",
        description=(
            "Start the API server with a fresh chain. "
            "If the port is in use, automatically finds an available port in the range."
        ),
    )
    run_parser.add_argument(
        "--port",
        "-p",
        type=int,
        help="API server port (default: 3000, or BOOKCHAIN_PORT env var).",
    )
    run_parser.add_argument(
        "--host",
        type=str,
        help="Host to bind to (default: 0.0.0.0, or BOOKCHAIN_HOST env var)",
    )
    run_parser.add_argument(
        "--no-auto-discover",
        action="store_true",
        help="Fail instead of picking another port when the port is in use",
    )
    run_parser.set_defaults(func=cmd_run)

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show the resolved configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
