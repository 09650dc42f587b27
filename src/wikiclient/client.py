"""
HTTP client for a MediaWiki-style action API.

WikiClient wraps a single httpx.Client and a SessionState. Every request
goes through one executor (_call) that:

    - forces ``format=json`` whatever the caller passed
    - sends parameters as a query string (GET) or a form body (POST)
    - sets the User-Agent header, and Content-Type for POST
    - attaches cookies for the endpoint and merges back the response's
      cookies, whatever the HTTP status
    - decodes the body into a Document without interpreting it

On top of that sit the checked variants, the login handshake, logout and
the token cache.

Example:
    with WikiClient("https://wiki.example.org/w/api.php") as wiki:
        wiki.login("Example", "hunter2")
        token = wiki.get_token("edit")
        result = wiki.get_checked({"action": "query", "meta": "siteinfo"})
        if not result.ok:
            print(result.status)

Thread safety:
    Requests and the token cache are guarded by a re-entrant lock, so one
    client may be shared between threads. Calls are serialized.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

import httpx

from wikiclient.check import CheckResult, api_error_from, error_check, warning_text
from wikiclient.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, Config, parse_api_url
from wikiclient.document import Document, decode
from wikiclient.errors import (
    ApiWarning,
    DecodeError,
    LoginFailure,
    ProtocolError,
    TransportError,
    WikiClientError,
)
from wikiclient.session import SessionState

logger = logging.getLogger(__name__)

# Parameter values: a single string, or several values for one key.
ParamValue = str | Sequence[str]
Params = Mapping[str, ParamValue]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class LoginState(Enum):
    """States of the login handshake."""

    START = "start"  # credentials sent without a token
    RETRY = "retry"  # credentials resent with the token from START
    DONE = "done"


class WikiClient:
    """
    Synchronous client for one wiki API endpoint.

    Attributes:
        session: Cookies, token cache, User-Agent and login state.

    Args:
        api_url: Full URL of the wiki's api.php.
        user_agent: User-Agent header. Can be changed later through
            ``session.user_agent``.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, e.g. httpx.MockTransport.

    Raises:
        InvalidEndpoint: If api_url is not an absolute http(s) URL.
    """

    def __init__(
        self,
        api_url: str,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        url = parse_api_url(api_url)
        self._http_client = httpx.Client(
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )
        # The session owns the jar the HTTP client reads from and writes to.
        self.session = SessionState(
            api_url=url,
            user_agent=user_agent,
            cookies=self._http_client.cookies,
        )
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls, config: Config, transport: httpx.BaseTransport | None = None
    ) -> WikiClient:
        """Create a client from a Config."""
        return cls(
            config.api_url,
            user_agent=config.user_agent,
            timeout=config.timeout,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"WikiClient({str(self.session.api_url)!r})"

    # -------------------------------------------------------------------------
    # Resource management
    # -------------------------------------------------------------------------

    def __enter__(self) -> WikiClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._http_client.close()

    # -------------------------------------------------------------------------
    # Request execution
    # -------------------------------------------------------------------------

    def _encode_params(self, params: Params) -> dict[str, list[str]]:
        """
        Normalize parameters to ``{key: [values]}`` and force the format.

        A list or tuple value produces one pair per element. Anything else
        is sent as a single value.
        """
        encoded: dict[str, list[str]] = {}
        for key, value in params.items():
            if isinstance(value, (list, tuple)):
                encoded[key] = [str(item) for item in value]
            else:
                encoded[key] = [str(value)]
        encoded["format"] = [self.session.format]
        return encoded

    def _call(self, params: Params, post: bool) -> Document:
        """
        Send one request to the API and decode the answer.

        Raises:
            TransportError: If the request could not be completed.
            DecodeError: If the response body is not JSON.
        """
        method = "POST" if post else "GET"
        encoded = self._encode_params(params)
        headers = {"User-Agent": self.session.user_agent}

        with self._lock:
            logger.debug("%s %s action=%s", method, self.session.api_url, encoded.get("action"))
            try:
                if post:
                    headers["Content-Type"] = FORM_CONTENT_TYPE
                    response = self._http_client.post(
                        self.session.api_url, data=encoded, headers=headers
                    )
                else:
                    response = self._http_client.get(
                        self.session.api_url, params=encoded, headers=headers
                    )
            except httpx.HTTPError as e:
                logger.warning("Error during %s: %s", method, e)
                raise TransportError(
                    message=f"{method} request failed",
                    detail=f"Cannot reach {self.session.api_url}: {e}",
                ) from e

        if not response.is_success:
            logger.debug("%s returned HTTP %d", method, response.status_code)

        try:
            return decode(response.content, status_code=response.status_code)
        except DecodeError as e:
            logger.warning("Error during JSON parsing: %s", e)
            raise

    def get(self, params: Params) -> Document:
        """
        Make a GET request.

        Args:
            params: API parameters, e.g. ``{"action": "query", "meta": "siteinfo"}``.
                ``format`` is always replaced with "json".

        Returns:
            The decoded response, uninterpreted.

        Raises:
            TransportError: On connection failure or an undecodable body.
        """
        return self._call(params, post=False)

    def post(self, params: Params) -> Document:
        """Make a POST request. Same contract as get()."""
        return self._call(params, post=True)

    def get_checked(self, params: Params) -> CheckResult:
        """
        Make a GET request and check it for API errors and warnings.

        Returns:
            CheckResult whose ``ok`` is False if the response has a
            top-level "error" or "warnings" key.

        Raises:
            TransportError: On connection failure or an undecodable body.
        """
        return error_check(self._call(params, post=False))

    def post_checked(self, params: Params) -> CheckResult:
        """Make a POST request and check it. Same contract as get_checked()."""
        return error_check(self._call(params, post=True))

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def login(self, username: str, password: str) -> None:
        """
        Log in with a username and password.

        The first round posts the credentials alone. If the server answers
        "NeedToken", a second round posts them again with the token it
        returned. There is never a third round.

        Raises:
            LoginFailure: If the final result is not "Success". ``str(e)``
                is the server's result, e.g. "WrongPass".
            ApiError: If the server answered with an error object.
            ProtocolError: If the answer lacks ``login.result``, or a
                "NeedToken" answer lacks ``login.token``.
            TransportError: If either round fails to complete.
        """
        state = LoginState.START
        token: str | None = None

        with self._lock:
            while state is not LoginState.DONE:
                params = {"action": "login", "lgname": username, "lgpassword": password}
                if token is not None:
                    params["lgtoken"] = token

                logger.debug("Login %s round for %s", state.value, username)
                document = self.post(params)
                if "error" in document:
                    raise api_error_from(document)

                result = document.require("login", "result", expected=str)
                if result == "Success":
                    state = LoginState.DONE
                elif result == "NeedToken" and state is LoginState.START:
                    token = document.require("login", "token", expected=str)
                    if not token:
                        raise ProtocolError(
                            message="Unexpected API response",
                            detail="login.token is empty",
                            path="login.token",
                        )
                    state = LoginState.RETRY
                else:
                    logger.warning("Login as %s failed: %s", username, result)
                    raise LoginFailure(message="Login failed", result=result)

            self.session.username = username

    def logout(self) -> bool:
        """
        Log out.

        Sends one ``action=logout`` request and ignores its outcome: the
        session is treated as logged out either way. Cached tokens are left
        alone. Always returns True.
        """
        try:
            self.get({"action": "logout"})
        except WikiClientError as e:
            logger.debug("Logout request failed: %s", e)
        finally:
            self.session.username = None
        return True

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def get_token(self, kind: str) -> str:
        """
        Return a token of the given kind, fetching it if not cached.

        Args:
            kind: Token kind without the "token" suffix, e.g. "edit".

        Raises:
            ApiError: If the server answered with an error object.
            ApiWarning: If the server answered with warnings.
            ProtocolError: If ``tokens.<kind>token`` is missing.
            TransportError: If the request failed.
        """
        with self._lock:
            cached = self.session.tokens.get(kind)
            if cached is not None:
                logger.debug("Token %r served from cache", kind)
                return cached

            document, _, api_ok = self.get_checked({"action": "tokens", "type": kind})
            if not api_ok:
                if "error" in document:
                    raise api_error_from(document)

                if "warnings" in document:
                    text = warning_text(document, "tokens")
                    if text is None:
                        text = json.dumps(document.get("warnings"))
                    raise ApiWarning(message="API warning", module="tokens", text=text)

            token = document.require("tokens", f"{kind}token", expected=str)
            self.session.tokens[kind] = token
            return token

    def invalidate_token(self, kind: str) -> None:
        """Drop a cached token so the next get_token() fetches a new one."""
        with self._lock:
            self.session.invalidate_token(kind)

    def clear_tokens(self) -> None:
        """Drop all cached tokens."""
        with self._lock:
            self.session.clear_tokens()
