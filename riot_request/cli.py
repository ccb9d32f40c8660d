"""CLI entry point for riot-request.

Executes a single API call and prints the response body.

Exit codes:
    0  success (body on stdout)
    1  API error or network failure
    2  invalid arguments or configuration
    3  rate limited (retry-after on stderr)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from riot_request.config_loader import load_api_config
from riot_request.errors import ConfigError, RateLimitError, RiotApiError
from riot_request.models import ApiConfig, RequestMethod
from riot_request.request import Request

EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_USAGE = 2
EXIT_RATE_LIMITED = 3


def non_negative_int(value: str) -> int:
    """Parse and validate a non-negative integer value.

    Raises:
        argparse.ArgumentTypeError: If value is not an integer >= 0.
    """
    try:
        result = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer '{value}'.")
    if result < 0:
        raise argparse.ArgumentTypeError(f"Value must be >= 0, got {result}.")
    return result


def parse_query_param(value: str) -> tuple[str, str]:
    """Parse KEY=VALUE format.

    Raises:
        argparse.ArgumentTypeError: If format is invalid.
    """
    if "=" not in value:
        raise argparse.ArgumentTypeError(
            f"Invalid format '{value}'. Expected KEY=VALUE (e.g., 'count=20')"
        )
    key, param_value = value.split("=", 1)
    if not key:
        raise argparse.ArgumentTypeError(f"Invalid format '{value}'. Key cannot be empty.")
    return (key, param_value)


@dataclass
class FetchArgs:
    """Parsed arguments for fetch mode."""

    url: str
    method: RequestMethod = RequestMethod.GET
    params: list[tuple[str, str]] = field(default_factory=list)
    body: str | None = None
    config: Path | None = None
    timeout: int | None = None
    api_key: bool = False
    tournament_token: bool = False
    verbose: bool = False


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the fetch subcommand."""
    parser = argparse.ArgumentParser(
        prog="riot-request",
        description="Execute a single Riot API request and print the response.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Mode")

    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Send one request and print the response body",
    )
    fetch_parser.add_argument(
        "url",
        help="Host-qualified URL, e.g. https://euw1.api.riotgames.com/lol/status/v4/platform-data",
    )
    fetch_parser.add_argument(
        "--method",
        type=str.upper,
        choices=[m.value for m in RequestMethod],
        default=RequestMethod.GET.value,
        help="HTTP method (default: GET)",
    )
    fetch_parser.add_argument(
        "--param",
        type=parse_query_param,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (can be repeated)",
    )
    fetch_parser.add_argument(
        "--body",
        type=str,
        default=None,
        help="JSON request body",
    )
    fetch_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML config with key, tournament_key and timeout",
    )
    fetch_parser.add_argument(
        "--timeout",
        type=non_negative_int,
        default=None,
        metavar="MS",
        help="Timeout in milliseconds, overrides the config (0 = none)",
    )
    fetch_parser.add_argument(
        "--api-key",
        action="store_true",
        help="Append the configured API key as the api_key query parameter",
    )
    fetch_parser.add_argument(
        "--tournament-token",
        action="store_true",
        help="Send the configured tournament key in the X-Riot-Token header",
    )
    fetch_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log request events to stderr",
    )

    return parser


def parse_fetch_args(namespace: argparse.Namespace) -> FetchArgs:
    """Convert argparse namespace to FetchArgs."""
    return FetchArgs(
        url=namespace.url,
        method=RequestMethod(namespace.method),
        params=namespace.param,
        body=namespace.body,
        config=namespace.config,
        timeout=namespace.timeout,
        api_key=namespace.api_key,
        tournament_token=namespace.tournament_token,
        verbose=namespace.verbose,
    )


def parse_args(args: list[str] | None = None) -> FetchArgs:
    """Parse command-line arguments and return typed args dataclass.

    Raises:
        SystemExit: If arguments are invalid (argparse behavior).
    """
    parser = build_parser()
    namespace = parser.parse_args(args)
    return parse_fetch_args(namespace)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    try:
        parsed = parse_args(argv)
        return run_fetch(parsed)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return EXIT_API_ERROR


def _build_request(args: FetchArgs, config: ApiConfig) -> Request:
    request = Request(config)
    request.set_url_base(args.url)
    request.set_method(args.method)
    for key, value in args.params:
        request.add_url_parameter(key, value)
    if args.api_key:
        request.add_api_key_to_url()
    if args.tournament_token:
        request.add_tournament_key_to_riot_token()
    if args.body is not None:
        request.set_body(args.body)
    if args.timeout is not None:
        request.set_timeout(args.timeout)
    return request


def run_fetch(args: FetchArgs) -> int:
    """Run fetch mode."""
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    if args.body is not None:
        try:
            json.loads(args.body)
        except json.JSONDecodeError as e:
            print(f"Invalid JSON body: {e}", file=sys.stderr)
            return EXIT_USAGE

    try:
        config = load_api_config(args.config) if args.config else ApiConfig()
        request = _build_request(args, config)
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        request.execute()
    except RateLimitError as e:
        print(f"Rate limited: {e}", file=sys.stderr)
        return EXIT_RATE_LIMITED
    except RiotApiError as e:
        state = request.state.value.replace("_", " ")
        print(f"Request {state}: {e} (code {e.code})", file=sys.stderr)
        return EXIT_API_ERROR

    print(request.response_body)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
