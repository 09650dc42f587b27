"""
API-level error and warning detection.

A request can succeed at the HTTP level and still fail at the API level:
the server then answers with a top-level ``error`` object, or with
``warnings`` keyed by module name. error_check() turns that into a single
``ok`` flag so callers can gate on one boolean.

``ok`` deliberately does not distinguish errors from warnings. Callers that
need to know which one they got can read ``status``.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from wikiclient.document import Document
from wikiclient.errors import ApiError, WikiClientError


class CheckStatus(str, Enum):
    """What error_check() found at the top level of a document."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class CheckResult(NamedTuple):
    """
    Result of a checked call.

    Attributes:
        document: The document, passed through untouched.
        error: The error, passed through untouched.
        ok: False if the document has a top-level "error" or "warnings" key.
    """

    document: Document | None
    error: WikiClientError | None
    ok: bool

    @property
    def status(self) -> CheckStatus:
        """ERROR takes precedence over WARNING when both are present."""
        if self.document is not None and "error" in self.document:
            return CheckStatus.ERROR
        if self.document is not None and "warnings" in self.document:
            return CheckStatus.WARNING
        return CheckStatus.OK


def error_check(
    document: Document | None, error: WikiClientError | None = None
) -> CheckResult:
    """
    Check a document for API errors and warnings.

    Neither argument is modified; both are returned as given, so this can
    wrap the result of a request directly.

    Args:
        document: Decoded response, or None if there is none.
        error: Error from the request, if any.

    Returns:
        CheckResult whose ``ok`` is False when the document carries a
        top-level "error" or "warnings" key.
    """
    api_ok = True

    if document is not None and "error" in document:
        api_ok = False

    if document is not None and "warnings" in document:
        api_ok = False

    return CheckResult(document, error, api_ok)


def api_error_from(document: Document) -> ApiError:
    """Build an ApiError from a document's ``error`` object."""
    code = document.get("error", "code", default="")
    info = document.get("error", "info", default="")
    return ApiError(message="API error", code=str(code), info=str(info))


def warning_text(document: Document, module: str) -> str | None:
    """Return the text of ``warnings.<module>.*``, or None if absent."""
    text = document.get("warnings", module, "*")
    return text if isinstance(text, str) else None
