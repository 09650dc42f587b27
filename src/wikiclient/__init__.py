"""wikiclient: a session-aware client for MediaWiki-style action APIs.

The client keeps a cookie jar and a token cache per session, performs the
two-round login handshake, and reports API errors and warnings separately
from transport failures.

Example:
    from wikiclient import WikiClient

    with WikiClient("https://wiki.example.org/w/api.php") as wiki:
        wiki.login("Example", "hunter2")
        doc = wiki.get({"action": "query", "meta": "userinfo"})
        print(doc.get("query", "userinfo", "name"))

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from wikiclient.check import CheckResult, CheckStatus, error_check
from wikiclient.client import LoginState, WikiClient
from wikiclient.config import DEFAULT_USER_AGENT, Config
from wikiclient.document import Document, decode
from wikiclient.errors import (
    ApiError,
    ApiWarning,
    DecodeError,
    InvalidEndpoint,
    LoginFailure,
    ProtocolError,
    TransportError,
    WikiClientError,
)

# ---------------------------------------------------------------------------
# Package version, read from pyproject.toml via importlib.metadata, with a
# fallback for imports from a source tree that was never installed.
# ---------------------------------------------------------------------------
try:
    __version__: str = version("wikiclient")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "DEFAULT_USER_AGENT",
    "ApiError",
    "ApiWarning",
    "CheckResult",
    "CheckStatus",
    "Config",
    "DecodeError",
    "Document",
    "InvalidEndpoint",
    "LoginFailure",
    "LoginState",
    "ProtocolError",
    "TransportError",
    "WikiClient",
    "WikiClientError",
    "__version__",
    "decode",
    "error_check",
]
