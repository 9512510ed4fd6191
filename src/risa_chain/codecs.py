"""URL component and Base64 codecs with strict validation."""

from __future__ import annotations

import base64
import binascii
import re
from urllib.parse import quote, unquote_to_bytes

# Characters left untouched by encodeURIComponent besides ASCII letters and digits.
URI_COMPONENT_SAFE = "-_.!~*'()"

_MALFORMED_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
_WHITESPACE_RE = re.compile(r"\s+")


def url_encode(text: str) -> str:
    return quote(text, safe=URI_COMPONENT_SAFE)


def url_decode(text: str) -> str:
    match = _MALFORMED_PERCENT_RE.search(text)
    if match is not None:
        position = match.start()
        raise ValueError(
            f"Malformed percent-encoding at position {position}: {text[position:position + 3]!r}"
        )
    try:
        return unquote_to_bytes(text).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError("Malformed percent-encoding: decoded bytes are not valid UTF-8.") from exc


def validate_base64(data: str, *, allow_empty: bool = False) -> str:
    """
    Check that data is standard padded Base64 and return it without whitespace.
    Raises ValueError with a "Base64 validation failed" message otherwise.
    """
    cleaned = _WHITESPACE_RE.sub("", data)
    if not cleaned:
        if allow_empty:
            return cleaned
        raise ValueError("Base64 validation failed: input is empty.")
    if not _BASE64_RE.match(cleaned):
        raise ValueError(
            "Base64 validation failed: input contains characters outside the Base64 alphabet "
            "or misplaced '=' padding."
        )
    if len(cleaned) % 4 != 0:
        raise ValueError(
            f"Base64 validation failed: length {len(cleaned)} is not a multiple of 4."
        )
    return cleaned


def base64_encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def base64_decode(text: str) -> str:
    cleaned = validate_base64(text, allow_empty=True)
    try:
        raw = base64.b64decode(cleaned, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Base64 validation failed: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError("Base64 payload is not valid UTF-8 text.") from exc
