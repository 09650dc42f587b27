"""
Response decoding and path navigation.

The API answers with JSON documents whose shape depends on the action.
decode() only checks that the body is syntactically valid JSON; everything
else is looked up lazily through Document, which never raises on a missing
path unless the caller asks it to via require().

Example:
    doc = decode(b'{"tokens": {"edittoken": "abc123"}}')
    doc.get("tokens", "edittoken")          # "abc123"
    doc.get("tokens", "csrftoken")          # None
    doc.require("login", "result", expected=str)   # raises ProtocolError
"""

from __future__ import annotations

import json
from typing import Any

from wikiclient.errors import DecodeError, ProtocolError

# Key type accepted when walking a path: str for objects, int for arrays.
PathKey = str | int

_MISSING = object()

# How much of an undecodable body is echoed back in DecodeError.detail.
_EXCERPT_LENGTH = 200


def decode(raw: bytes | str, status_code: int = 0) -> Document:
    """
    Parse a raw response body into a Document.

    Args:
        raw: Response body.
        status_code: HTTP status of the response, carried into DecodeError.

    Raises:
        DecodeError: If the body is not valid JSON.
    """
    try:
        data = json.loads(raw)
    except (ValueError, TypeError) as e:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        if isinstance(raw, bytes):
            excerpt = raw[:_EXCERPT_LENGTH].decode("utf-8", errors="replace")
        else:
            excerpt = str(raw)[:_EXCERPT_LENGTH]
        raise DecodeError(
            message="Response is not valid JSON",
            detail=f"{e} (body starts with {excerpt!r})",
            status_code=status_code,
        ) from e
    return Document(data)


def format_path(path: tuple[PathKey, ...]) -> str:
    """Render a lookup path as a dotted string, e.g. ``tokens.edittoken``."""
    return ".".join(str(key) for key in path)


class Document:
    """
    A decoded API response.

    Attributes:
        data: The decoded JSON value (dict, list, str, int, float, bool or None).
    """

    __slots__ = ("data",)

    def __init__(self, data: Any):
        self.data = data

    def __contains__(self, key: object) -> bool:
        """True if the document is an object with top-level ``key``."""
        return isinstance(self.data, dict) and key in self.data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Document):
            return bool(self.data == other.data)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Document({self.data!r})"

    def _lookup(self, path: tuple[PathKey, ...]) -> Any:
        node = self.data
        for key in path:
            if isinstance(node, dict) and isinstance(key, str):
                node = node.get(key, _MISSING)
            elif (
                isinstance(node, list) and isinstance(key, int) and not isinstance(key, bool)
            ):
                node = node[key] if -len(node) <= key < len(node) else _MISSING
            else:
                return _MISSING
            if node is _MISSING:
                return _MISSING
        return node

    def has(self, *path: PathKey) -> bool:
        """True if every key along ``path`` exists."""
        return self._lookup(path) is not _MISSING

    def get(self, *path: PathKey, default: Any = None) -> Any:
        """
        Return the value at ``path``, or ``default`` if any step is missing.

        String keys index objects and integer keys index arrays. A key of
        the wrong kind for the node it is applied to counts as missing.
        """
        value = self._lookup(path)
        return default if value is _MISSING else value

    def get_path(self, dotted: str, default: Any = None) -> Any:
        """Like get(), with the path given as ``"a.b.c"`` (object keys only)."""
        return self.get(*dotted.split("."), default=default)

    def require(self, *path: PathKey, expected: type | tuple[type, ...] = object) -> Any:
        """
        Return the value at ``path``, which must exist and be ``expected``.

        Raises:
            ProtocolError: If the path is missing or holds the wrong type.
        """
        value = self._lookup(path)
        dotted = format_path(path)
        if value is _MISSING:
            raise ProtocolError(
                message="Unexpected API response",
                detail=f"missing {dotted}",
                path=dotted,
            )
        if not isinstance(value, expected):
            raise ProtocolError(
                message="Unexpected API response",
                detail=f"{dotted} is {type(value).__name__}, not {_type_names(expected)}",
                path=dotted,
            )
        return value


def _type_names(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__
