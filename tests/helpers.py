"""
Helpers for reading back what the client sent.

respx records every request; these decode the parameters so tests can
assert on them as plain dictionaries.
"""

from urllib.parse import parse_qs

import httpx


def form_params(request: httpx.Request) -> dict[str, list[str]]:
    """Decode the form-encoded body of a POST request."""
    return parse_qs(request.content.decode(), keep_blank_values=True)


def query_params(request: httpx.Request) -> dict[str, list[str]]:
    """Decode the query string of a GET request."""
    return {key: request.url.params.get_list(key) for key in request.url.params.keys()}
