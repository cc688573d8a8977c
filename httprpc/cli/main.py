"""Entry point for the httprpc command."""

import logging
import sys
from typing import Any

from httprpc.cli.arg_parser import parse_args
from httprpc.cli.commands import cmd_batch, cmd_call, cmd_notify
from httprpc.client import JsonRpcClient
from httprpc.core.errors import ConfigError


def configure_logging(verbose: bool) -> None:
    """Send httprpc log records to stderr (DEBUG when verbose, else WARNING)."""
    level = logging.DEBUG if verbose else logging.WARNING

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))

    package_logger = logging.getLogger("httprpc")
    package_logger.setLevel(level)
    package_logger.handlers.clear()
    package_logger.addHandler(console_handler)
    package_logger.propagate = False


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit code."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    overrides: dict[str, Any] = {}
    if args.timeout is not None:
        overrides["timeout"] = args.timeout

    try:
        client = JsonRpcClient.from_url(args.url, config=overrides, config_path=args.config)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    with client:
        if args.command == "call":
            return cmd_call(client, args.method, args.params, args.request_id)
        if args.command == "notify":
            return cmd_notify(client, args.method, args.params)
        return cmd_batch(client, args.file)


if __name__ == "__main__":
    sys.exit(main())
