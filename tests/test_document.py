"""
Tests for response decoding and path lookup.
"""

import pytest

from wikiclient import DecodeError, Document, ProtocolError, decode

SAMPLE = {
    "query": {
        "pages": [
            {"pageid": 1, "title": "Main Page"},
            {"pageid": 2, "title": "Sandbox", "missing": True},
        ],
        "general": {"sitename": "Example Wiki"},
    },
    "batchcomplete": "",
}


# =============================================================================
# DECODE TESTS
# =============================================================================


@pytest.mark.unit
class TestDecode:
    """Tests for decode()."""

    def test_decodes_bytes(self):
        doc = decode(b'{"login": {"result": "Success"}}')

        assert doc.data == {"login": {"result": "Success"}}

    def test_decodes_str(self):
        assert decode('{"a": 1}').data == {"a": 1}

    def test_decodes_non_object_json(self):
        """Test that any JSON value is accepted; shape is checked later."""
        assert decode(b"[1, 2]").data == [1, 2]
        assert decode(b"null").data is None

    @pytest.mark.parametrize(
        "raw",
        [b"", b"<html>Bad Gateway</html>", b'{"unterminated": ', b"\xff\xfe\x00"],
    )
    def test_invalid_json_raises_decode_error(self, raw):
        with pytest.raises(DecodeError):
            decode(raw)

    def test_decode_error_carries_status_and_excerpt(self):
        with pytest.raises(DecodeError) as exc_info:
            decode(b"Service Unavailable", status_code=503)

        assert exc_info.value.status_code == 503
        assert "Service Unavailable" in exc_info.value.detail

    def test_decode_error_excerpt_is_bounded(self):
        with pytest.raises(DecodeError) as exc_info:
            decode(b"x" * 10_000)

        assert len(exc_info.value.detail) < 500


# =============================================================================
# LOOKUP TESTS
# =============================================================================


@pytest.mark.unit
class TestDocumentLookup:
    """Tests for Document path navigation."""

    @pytest.fixture
    def doc(self) -> Document:
        return Document(SAMPLE)

    def test_contains_checks_top_level_only(self, doc: Document):
        assert "query" in doc
        assert "batchcomplete" in doc
        assert "general" not in doc

    def test_contains_on_non_object(self):
        assert "error" not in Document(["error"])
        assert "error" not in Document("error")

    def test_get_object_path(self, doc: Document):
        assert doc.get("query", "general", "sitename") == "Example Wiki"

    def test_get_array_index(self, doc: Document):
        assert doc.get("query", "pages", 1, "title") == "Sandbox"
        assert doc.get("query", "pages", -1, "pageid") == 2

    def test_get_missing_returns_default(self, doc: Document):
        assert doc.get("query", "nope") is None
        assert doc.get("query", "pages", 5) is None
        assert doc.get("query", "nope", default="fallback") == "fallback"

    def test_get_wrong_key_kind_is_missing(self, doc: Document):
        """Test an int key on an object or a str key on an array is missing."""
        assert doc.get("query", 0) is None
        assert doc.get("query", "pages", "0") is None

    def test_bool_is_not_an_index(self, doc: Document):
        assert doc.get("query", "pages", True) is None

    def test_get_through_scalar_is_missing(self, doc: Document):
        assert doc.get("batchcomplete", "x") is None

    def test_empty_path_returns_root(self, doc: Document):
        assert doc.get() is SAMPLE

    def test_falsy_values_are_found(self, doc: Document):
        """Test empty strings are values, not missing."""
        assert doc.get("batchcomplete") == ""
        assert doc.has("batchcomplete") is True

    def test_has(self, doc: Document):
        assert doc.has("query", "pages", 0) is True
        assert doc.has("query", "pages", 0, "missing") is False

    def test_get_path(self, doc: Document):
        assert doc.get_path("query.general.sitename") == "Example Wiki"
        assert doc.get_path("query.general.lang", default="en") == "en"

    def test_equality(self):
        assert Document({"a": 1}) == Document({"a": 1})
        assert Document({"a": 1}) != Document({"a": 2})


@pytest.mark.unit
class TestDocumentRequire:
    """Tests for Document.require()."""

    @pytest.fixture
    def doc(self) -> Document:
        return Document(SAMPLE)

    def test_require_present(self, doc: Document):
        assert doc.require("query", "general", "sitename", expected=str) == "Example Wiki"

    def test_require_without_type(self, doc: Document):
        assert doc.require("query", "pages", 0, "pageid") == 1

    def test_require_missing_raises(self, doc: Document):
        with pytest.raises(ProtocolError) as exc_info:
            doc.require("login", "result", expected=str)

        assert exc_info.value.path == "login.result"
        assert "missing login.result" in str(exc_info.value)

    def test_require_wrong_type_raises(self, doc: Document):
        with pytest.raises(ProtocolError) as exc_info:
            doc.require("query", "pages", expected=dict)

        assert exc_info.value.path == "query.pages"
        assert "list, not dict" in str(exc_info.value)

    def test_require_accepts_type_tuple(self, doc: Document):
        assert doc.require("query", "pages", 0, "pageid", expected=(int, str)) == 1
