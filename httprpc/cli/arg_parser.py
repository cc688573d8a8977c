"""Argument parsing for the httprpc CLI."""

import argparse
from pathlib import Path


def add_url_arg(parser: argparse.ArgumentParser) -> None:
    """Add the positional endpoint URL argument to a parser."""
    parser.add_argument("url", help="JSON-RPC endpoint URL (http or https)")


def add_params_arg(parser: argparse.ArgumentParser) -> None:
    """Add the optional positional params argument to a parser."""
    parser.add_argument(
        "params",
        nargs="?",
        default=None,
        help="Parameters as a JSON array or object (e.g. '[1, 2]' or '{\"a\": 1}')",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="httprpc",
        description="Send JSON-RPC 2.0 requests over HTTP",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log requests and responses to stderr",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: 60)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with transport configuration",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # call - single request, prints the response
    call_parser = subparsers.add_parser("call", help="Call a method and print the response")
    add_url_arg(call_parser)
    call_parser.add_argument("method", help="Method name")
    add_params_arg(call_parser)
    call_parser.add_argument(
        "--id",
        dest="request_id",
        default="1",
        help="Request id (integers are sent as numbers, default: 1)",
    )

    # notify - fire and forget
    notify_parser = subparsers.add_parser("notify", help="Send a notification")
    add_url_arg(notify_parser)
    notify_parser.add_argument("method", help="Method name")
    add_params_arg(notify_parser)

    # batch - many requests in one exchange
    batch_parser = subparsers.add_parser(
        "batch",
        help="Send a batch read from a JSON file",
        description=(
            "FILE holds a JSON array of {\"method\": ..., \"params\": ..., \"id\": ...} "
            "objects. Entries without an id are sent as notifications."
        ),
    )
    add_url_arg(batch_parser)
    batch_parser.add_argument("file", type=Path, help="JSON file with the batch entries")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)
