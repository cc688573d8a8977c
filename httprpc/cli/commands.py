"""CLI commands for sending JSON-RPC requests.

Each function takes a ready client, prints JSON to stdout and returns an exit
code. Errors go to stderr so they don't pollute JSON output.

    httprpc call URL METHOD [PARAMS] [--id ID]
    httprpc notify URL METHOD [PARAMS]
    httprpc batch URL FILE
"""

import json
import sys
from pathlib import Path
from typing import Any

from httprpc.client import JsonRpcClient
from httprpc.core.errors import HttpRpcError, InvalidRequestError, LoadError
from httprpc.rpc.types import Request, RequestId


def _print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    print(json.dumps(data, indent=2))


def _print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)


def parse_params(text: str | None) -> Any:
    """Decode a params argument given on the command line."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"params must be valid JSON: {e}") from e


def parse_id(text: str) -> RequestId:
    """Send numeric ids as numbers, everything else as strings."""
    try:
        return int(text)
    except ValueError:
        return text


def load_batch(client: JsonRpcClient, path: Path) -> list[Request]:
    """Read batch entries from a JSON file and build requests from them.

    Raises:
        InvalidRequestError: If the file isn't an array of request entries.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise LoadError(f"Failed to read batch file {path}: {e}") from e
    try:
        entries = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(entries, list):
        raise InvalidRequestError(f"Batch file must contain a JSON array, got {type(entries).__name__}")

    requests = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidRequestError(f"Batch entry {position} must be an object")
        method = entry.get("method")
        params = entry.get("params")
        if "id" in entry:
            requests.append(client.request(entry["id"], method, params))
        else:
            requests.append(client.notification(method, params))
    return requests


def cmd_call(
    client: JsonRpcClient,
    method: str,
    params: str | None = None,
    request_id: str = "1",
) -> int:
    """Call a method and print the response object."""
    try:
        response = client.call(parse_id(request_id), method, parse_params(params))
    except HttpRpcError as e:
        _print_error(e.message)
        return 1

    _print_json(response.to_dict())
    return 1 if response.is_error else 0


def cmd_notify(client: JsonRpcClient, method: str, params: str | None = None) -> int:
    """Send a notification."""
    try:
        client.notify(method, parse_params(params))
    except HttpRpcError as e:
        _print_error(e.message)
        return 1
    return 0


def cmd_batch(client: JsonRpcClient, path: Path) -> int:
    """Send the batch in path and print the correlated responses."""
    try:
        responses = client.call_all(load_batch(client, path))
    except HttpRpcError as e:
        _print_error(e.message)
        return 1

    _print_json([response.to_dict() for response in responses])
    return 1 if any(response.is_error for response in responses) else 0

