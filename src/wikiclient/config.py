"""
Configuration management for the wiki API client.

This module handles configuration from multiple sources with the following
precedence (highest to lowest):

1. Command-line arguments (--api-url, --user-agent, --timeout, --log-level)
2. Environment variables (WIKI_API_URL, WIKI_USER_AGENT, WIKI_REQUEST_TIMEOUT,
   WIKI_LOG_LEVEL)
3. Default values

The configuration is immutable once created. The response format is not
part of it: the client always speaks JSON.

Example:
    # Create config from CLI args
    config = Config.from_args(["--api-url", "https://wiki.example.org/w/api.php"])

    # Access configuration
    print(config.api_url)     # "https://wiki.example.org/w/api.php"
    print(config.timeout)     # 30.0 (default)
"""

from __future__ import annotations

import argparse
import os
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from wikiclient.errors import InvalidEndpoint

# =============================================================================
# DEFAULT CONFIGURATION VALUES
# =============================================================================

DEFAULT_API_URL = "https://en.wikipedia.org/w/api.php"

# MediaWiki etiquette asks clients to identify themselves. Anyone running a
# bot should override this with a string that includes contact details.
DEFAULT_USER_AGENT = "wikiclient (https://www.mediawiki.org/wiki/API:Etiquette)"

# Default HTTP request timeout in seconds.
DEFAULT_TIMEOUT = 30.0

DEFAULT_LOG_LEVEL = "WARNING"

# The only response format this client understands.
RESPONSE_FORMAT = "json"

ENV_API_URL = "WIKI_API_URL"
ENV_USER_AGENT = "WIKI_USER_AGENT"
ENV_TIMEOUT = "WIKI_REQUEST_TIMEOUT"
ENV_LOG_LEVEL = "WIKI_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_api_url(url: str) -> httpx.URL:
    """
    Parse and validate an API endpoint URL.

    Args:
        url: Endpoint URL, e.g. "https://en.wikipedia.org/w/api.php".

    Returns:
        The parsed URL.

    Raises:
        InvalidEndpoint: If the URL does not parse, or is not an absolute
            http(s) URL with a host.
    """
    if not url:
        raise InvalidEndpoint(message="Invalid API endpoint", detail="URL is empty", url=url)

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidEndpoint(message="Invalid API endpoint", detail=str(e), url=url) from e

    if parsed.scheme not in ("http", "https"):
        raise InvalidEndpoint(
            message="Invalid API endpoint",
            detail=f"unsupported scheme {parsed.scheme!r}",
            url=url,
        )
    if not parsed.host:
        raise InvalidEndpoint(message="Invalid API endpoint", detail="URL has no host", url=url)

    return parsed


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for the client.

    Attributes:
        api_url: Full URL of the wiki's api.php endpoint.
        user_agent: User-Agent header sent with every request.
        timeout: HTTP request timeout in seconds.
        log_level: Logging level name, used by the command-line tool.

    Example:
        config = Config(api_url="https://wiki.example.org/w/api.php")
    """

    api_url: str
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        """
        Validate configuration values after initialization.

        Raises:
            InvalidEndpoint: If api_url is not a usable endpoint.
            ValueError: If user_agent is empty, timeout is not positive,
                or log_level is unknown.
        """
        parse_api_url(self.api_url)

        if not self.user_agent:
            raise ValueError("user_agent cannot be empty")

        if self.timeout <= 0:
            raise ValueError("timeout must be a positive number")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    @classmethod
    def from_env(cls) -> Config:
        """Create a Config from environment variables and defaults only."""
        return cls.from_namespace(argparse.Namespace())

    @classmethod
    def from_namespace(cls, parsed: argparse.Namespace) -> Config:
        """
        Resolve a Config from parsed arguments, falling back to the
        environment and then to defaults for anything left unset.
        """
        api_url = (
            getattr(parsed, "api_url", None) or os.environ.get(ENV_API_URL) or DEFAULT_API_URL
        )
        user_agent = (
            getattr(parsed, "user_agent", None)
            or os.environ.get(ENV_USER_AGENT)
            or DEFAULT_USER_AGENT
        )

        timeout = getattr(parsed, "timeout", None)
        if timeout is None:
            if ENV_TIMEOUT in os.environ:
                timeout = float(os.environ[ENV_TIMEOUT])
            else:
                timeout = DEFAULT_TIMEOUT

        log_level = (
            getattr(parsed, "log_level", None)
            or os.environ.get(ENV_LOG_LEVEL)
            or DEFAULT_LOG_LEVEL
        )

        return cls(
            api_url=api_url,
            user_agent=user_agent,
            timeout=timeout,
            log_level=log_level.upper(),
        )

    @classmethod
    def from_args(cls, args: Sequence[str] | None = None) -> Config:
        """
        Create a Config instance from command-line arguments.

        Args:
            args: Command-line arguments to parse. If None, uses sys.argv[1:].

        Returns:
            Config: A fully populated configuration object.
        """
        parser = argparse.ArgumentParser(prog="wikiclient", add_help=False)
        add_config_arguments(parser)
        parsed, _ = parser.parse_known_args(args)
        return cls.from_namespace(parsed)


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the configuration options on an argument parser."""
    # Each default is None so from_namespace can fall back to env, then default.
    parser.add_argument(
        "--api-url",
        "-u",
        dest="api_url",
        default=None,
        help=f"API endpoint URL (default: ${ENV_API_URL} or {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--user-agent",
        "-A",
        dest="user_agent",
        default=None,
        help=f"User-Agent header (default: ${ENV_USER_AGENT} or a generic identifier)",
    )
    parser.add_argument(
        "--timeout",
        "-t",
        type=float,
        default=None,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help=f"Logging level (default: ${ENV_LOG_LEVEL} or {DEFAULT_LOG_LEVEL})",
    )
