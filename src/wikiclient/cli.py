"""
Command-line interface for wikiclient.

Provides commands for poking at a wiki API from a shell:
- get: Send a GET request and print the response
- post: Send a POST request and print the response
- token: Print a token of the given kind

Usage:
    wikiclient [--api-url URL] [--login] get action=query meta=siteinfo
    wikiclient post action=purge titles=Main_Page --checked
    wikiclient --login token edit

Environment Variables:
    WIKI_API_URL: API endpoint (default: https://en.wikipedia.org/w/api.php)
    WIKI_USER_AGENT: User-Agent header
    WIKI_REQUEST_TIMEOUT: Request timeout in seconds (default: 30)
    WIKI_LOG_LEVEL: Logging level (default: WARNING)
    WIKI_USERNAME: Username used by --login
    WIKI_PASSWORD: Password used by --login
"""

import argparse
import getpass
import json
import logging
import os
import sys
from collections.abc import Sequence

from wikiclient.client import WikiClient
from wikiclient.config import Config, add_config_arguments
from wikiclient.document import Document
from wikiclient.errors import WikiClientError

# Exit status of a checked request whose response had errors or warnings.
EXIT_NOT_OK = 2

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_params(pairs: Sequence[str]) -> dict[str, list[str]]:
    """
    Turn ``key=value`` arguments into request parameters.

    Repeating a key sends the key once per value.

    Raises:
        ValueError: If an argument has no "=" or an empty key.
    """
    params: dict[str, list[str]] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {pair!r}")
        params.setdefault(key, []).append(value)
    return params


def get_credentials_from_env() -> tuple[str | None, str | None]:
    """Return (username, password) from WIKI_USERNAME / WIKI_PASSWORD."""
    return os.environ.get("WIKI_USERNAME"), os.environ.get("WIKI_PASSWORD")


def resolve_credentials() -> tuple[str, str]:
    """
    Get login credentials, prompting for whatever the environment lacks.

    Raises:
        SystemExit: If the user cancels (Ctrl+C) during input.
    """
    username, password = get_credentials_from_env()
    try:
        if not username:
            username = input("Username: ").strip()
        if not password:
            password = getpass.getpass("Password: ")
    except (KeyboardInterrupt, EOFError):
        print("\nCancelled.", file=sys.stderr)
        raise SystemExit(1) from None
    return username, password


def print_document(document: Document) -> None:
    print(json.dumps(document.data, indent=2, ensure_ascii=False))


def cmd_request(wiki: WikiClient, args: argparse.Namespace) -> int:
    """Run a get or post command."""
    params = parse_params(args.params)
    post = args.command == "post"

    if args.checked:
        result = wiki.post_checked(params) if post else wiki.get_checked(params)
        print_document(result.document)
        if not result.ok:
            print(f"API reported {result.status.value}", file=sys.stderr)
            return EXIT_NOT_OK
        return 0

    print_document(wiki.post(params) if post else wiki.get(params))
    return 0


def cmd_token(wiki: WikiClient, args: argparse.Namespace) -> int:
    """Print a token."""
    print(wiki.get_token(args.kind))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the wikiclient command."""
    parser = argparse.ArgumentParser(
        prog="wikiclient",
        description="Talk to a MediaWiki-style action API from the command line",
    )
    add_config_arguments(parser)
    parser.add_argument(
        "--login",
        action="store_true",
        help="Log in before running the command (uses WIKI_USERNAME/WIKI_PASSWORD or prompts)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("get", "Send a GET request and print the response"),
        ("post", "Send a POST request and print the response"),
    ):
        request_parser = subparsers.add_parser(name, help=help_text)
        request_parser.add_argument(
            "params",
            nargs="*",
            metavar="KEY=VALUE",
            help="Request parameter; repeat a key to send several values",
        )
        request_parser.add_argument(
            "--checked",
            action="store_true",
            help=f"Exit with status {EXIT_NOT_OK} if the response has errors or warnings",
        )
        request_parser.set_defaults(func=cmd_request)

    token_parser = subparsers.add_parser("token", help="Print a token of the given kind")
    token_parser.add_argument("kind", help='Token kind, e.g. "edit"')
    token_parser.set_defaults(func=cmd_token)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = Config.from_namespace(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

    try:
        with WikiClient.from_config(config) as wiki:
            if args.login:
                username, password = resolve_credentials()
                wiki.login(username, password)
            return int(args.func(wiki, args))
    except (ValueError, WikiClientError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
