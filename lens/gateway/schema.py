"""Builders for the response-schema descriptors sent with structured requests.

Produces the OpenAPI-subset dicts google-genai accepts as response_schema
(types named OBJECT, ARRAY, STRING, NUMBER, INTEGER).
"""

from typing import Any


def _with_description(node: dict[str, Any], description: str | None) -> dict[str, Any]:
    if description:
        node["description"] = description
    return node


def string(description: str | None = None, enum: list[str] | None = None) -> dict[str, Any]:
    node: dict[str, Any] = {"type": "STRING"}
    if enum:
        node["enum"] = list(enum)
    return _with_description(node, description)


def number(description: str | None = None) -> dict[str, Any]:
    return _with_description({"type": "NUMBER"}, description)


def integer(description: str | None = None) -> dict[str, Any]:
    return _with_description({"type": "INTEGER"}, description)


def array(items: dict[str, Any], description: str | None = None) -> dict[str, Any]:
    return _with_description({"type": "ARRAY", "items": items}, description)


def string_list(description: str | None = None) -> dict[str, Any]:
    return array(string(), description)


def obj(
    properties: dict[str, dict[str, Any]],
    required: list[str] | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    node: dict[str, Any] = {"type": "OBJECT", "properties": properties}
    if required:
        node["required"] = list(required)
    return _with_description(node, description)
