"""
Exception types for the wiki API client.

Every failure the client can report is a subclass of WikiClientError, so
callers that don't care about the distinction can catch a single type.

Hierarchy:
    WikiClientError
    ├── InvalidEndpoint   - API URL could not be parsed (also a ValueError)
    ├── TransportError    - connection or I/O failure
    │   └── DecodeError   - response body was not valid JSON
    ├── ApiError          - response carried a top-level "error" object
    ├── ApiWarning        - response carried "warnings" (escalated by get_token)
    ├── ProtocolError     - expected value missing from a well-formed response
    └── LoginFailure      - login finished with a result other than "Success"

Example:
    try:
        wiki.login("Example", "hunter2")
    except LoginFailure as e:
        print(f"Server said: {e.result}")
    except TransportError as e:
        print(f"Could not reach the wiki: {e}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class WikiClientError(Exception):
    """
    Base class for all client errors.

    Attributes:
        message: Human-readable error message.
        detail: Additional context, if available.
    """

    message: str
    detail: str = ""

    def __str__(self) -> str:
        """Return a formatted error message."""
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


@dataclass
class InvalidEndpoint(WikiClientError, ValueError):
    """Raised when the API endpoint URL is unusable."""

    url: str = ""


@dataclass
class TransportError(WikiClientError):
    """
    Raised when a request could not be completed.

    Attributes:
        status_code: HTTP status of the response, or 0 if none was received.
    """

    status_code: int = 0


@dataclass
class DecodeError(TransportError):
    """Raised when a response body is not valid JSON."""


@dataclass
class ApiError(WikiClientError):
    """
    Raised when the API answers with an ``error`` object.

    Attributes:
        code: Machine-readable error code (e.g. "badtoken").
        info: Human-readable explanation from the server.
    """

    code: str = ""
    info: str = ""

    def __str__(self) -> str:
        return f"{self.code}: {self.info}"


@dataclass
class ApiWarning(WikiClientError):
    """
    Raised when a response's ``warnings`` must be treated as fatal.

    Warnings are normally only reflected in the ``ok`` flag of a checked
    call; get_token() escalates them because no token is returned.
    """

    module: str = ""
    text: str = ""

    def __str__(self) -> str:
        return self.text


@dataclass
class ProtocolError(WikiClientError):
    """
    Raised when a response lacks a value the protocol guarantees.

    Attributes:
        path: Dotted path of the missing value (e.g. "tokens.edittoken").
    """

    path: str = ""


@dataclass
class LoginFailure(WikiClientError):
    """
    Raised when login ends with a result other than "Success".

    The string form is the server's result verbatim ("WrongPass",
    "NotExists", "Throttled", ...).
    """

    result: str = ""

    def __str__(self) -> str:
        return self.result
