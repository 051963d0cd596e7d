"""Helpers for building Salesforce REST URLs and encoded request bodies."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode

# characters encodeURIComponent leaves alone, kept for parity with other clients
_QUERY_SAFE = "!'()*"


def url_join(*parts: str) -> str:
    """
    Join URL segments with single slashes.

    Empty segments are skipped, the scheme separator of the first segment is
    preserved and a segment starting with ``?`` is appended as a query string.

    >>> url_join("https://example.com/", "/services/data", "v38.0", "", "query", "?q=x")
    'https://example.com/services/data/v38.0/query?q=x'
    """
    url = ""
    for part in parts:
        if not part:
            continue
        if part.startswith("?"):
            url = url.rstrip("/") + part
        elif not url:
            url = part.rstrip("/")
        else:
            url = url.rstrip("/") + "/" + part.strip("/")
    return url


def encode_query(params: Mapping[str, Any]) -> str:
    """Encode a query string, dropping parameters whose value is None."""
    return urlencode(
        {key: value for key, value in params.items() if value is not None},
        safe=_QUERY_SAFE,
        quote_via=quote,
    )


def encode_form(fields: Mapping[str, Any]) -> str:
    """Encode an ``application/x-www-form-urlencoded`` request body."""
    return encode_query(fields)
