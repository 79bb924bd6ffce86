"""Payload helpers: JSON fence stripping, object parsing and data-URL handling."""

import base64
import binascii
import json
import re
from typing import Any

from lens.core.exceptions import MalformedResponse

_DATA_URL_PREFIX = re.compile(r"^data:(image/[a-zA-Z0-9.+-]+);base64,")


def strip_json_fences(content: str) -> str:
    """Remove markdown code fences wrapping JSON output."""
    content = content.strip()
    if content.startswith("```"):
        first_newline = content.find("\n")
        if first_newline != -1:
            content = content[first_newline + 1 :]
        if content.endswith("```"):
            content = content[:-3].rstrip()
    return content


def parse_json_object(content: str | None, feature: str = "structured content") -> dict[str, Any]:
    """Parse a structured reply into a dict.

    A missing or blank reply parses as {} so field-level defaults can apply.

    Raises:
        MalformedResponse: if the text is not JSON or not a JSON object
    """
    if not content or not content.strip():
        return {}
    try:
        parsed = json.loads(strip_json_fences(content))
    except json.JSONDecodeError as e:
        raise MalformedResponse(feature, f"invalid JSON ({e.msg})") from e
    if not isinstance(parsed, dict):
        raise MalformedResponse(feature, f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_image(value: str | bytes, default_mime: str = "image/png") -> tuple[bytes, str]:
    """Turn a data URL, bare base64 string or raw bytes into (raw bytes, mime type).

    Any data:image/...;base64, prefix is stripped before decoding.

    Raises:
        ValueError: if the string is not valid base64
    """
    if isinstance(value, bytes):
        return value, default_mime
    mime_type = default_mime
    match = _DATA_URL_PREFIX.match(value)
    if match:
        mime_type = match.group(1)
        value = value[match.end():]
    try:
        return base64.b64decode(value, validate=True), mime_type
    except binascii.Error as e:
        raise ValueError("image is not valid base64") from e


def coerce_str_list(value: Any, limit: int | None = None) -> list[str]:
    """Keep the non-empty items of a JSON array as strings; anything else is []."""
    if not isinstance(value, list):
        return []
    items = [str(item).strip() for item in value if item is not None and str(item).strip()]
    return items if limit is None else items[:limit]


def coerce_str(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, dict | list):
        return default
    return str(value).strip() or default
