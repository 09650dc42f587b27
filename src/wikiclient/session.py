"""
Per-client session state.

A SessionState is created with each WikiClient and lives exactly as long
as it does; nothing is persisted across processes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from wikiclient.config import DEFAULT_USER_AGENT, RESPONSE_FORMAT


@dataclass
class SessionState:
    """
    Tracks everything the client remembers between requests.

    Attributes:
        api_url: The API endpoint every request goes to.
        user_agent: Sent as the User-Agent header. May be changed at any
            time; the next request picks it up.
        format: Response format, always "json".
        cookies: Cookie jar shared with the HTTP client. Cookies from every
            response are merged in, whatever the HTTP status.
        tokens: Token cache, keyed by kind ("edit", "login", ...).
        username: Set after a successful login, cleared on logout.

    Example:
        state = SessionState(api_url=httpx.URL("https://wiki.example.org/w/api.php"))
        state.tokens["edit"] = "abc123"
        state.invalidate_token("edit")
        print(state.tokens)  # {}
    """

    api_url: httpx.URL
    user_agent: str = DEFAULT_USER_AGENT
    format: str = field(default=RESPONSE_FORMAT, init=False)
    cookies: httpx.Cookies = field(default_factory=httpx.Cookies, repr=False)
    tokens: dict[str, str] = field(default_factory=dict)
    username: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Check if a login has succeeded on this session."""
        return self.username is not None

    def invalidate_token(self, kind: str) -> None:
        """Drop a cached token, e.g. after the server rejected it."""
        self.tokens.pop(kind, None)

    def clear_tokens(self) -> None:
        """Drop every cached token."""
        self.tokens.clear()

    def clear(self) -> None:
        """Forget the login, cached tokens and cookies. Endpoint and User-Agent stay."""
        self.username = None
        self.tokens.clear()
        self.cookies.clear()
