"""Render pydantic validation errors as one human-readable message."""

from collections.abc import Iterable, Mapping
from typing import Any

# Request bodies arrive under this location prefix in FastAPI's RequestValidationError.
_LOCATION_PREFIXES = ("body", "query", "path", "header")


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "value"


def describe_error(error: Mapping[str, Any]) -> str:
    """One sentence for a single pydantic error dict, naming the field in quotes."""
    field = _field_name(error.get("loc", ()))
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f'"{field}" is required'
    if kind == "string_too_short":
        if ctx.get("min_length") == 1:
            return f'"{field}" is not allowed to be empty'
        return f'"{field}" length must be at least {ctx.get("min_length")} characters long'
    if kind == "string_too_long":
        return f'"{field}" length must be less than or equal to {ctx.get("max_length")} characters long'
    if kind == "string_type":
        return f'"{field}" must be a string'
    if kind == "json_invalid":
        return "Request body must be valid JSON"
    if kind in ("model_attributes_type", "dict_type", "model_type"):
        return f'"{field}" must be of type object'
    if kind == "value_error" and field.split(".")[-1] == "email":
        return f'"{field}" must be a valid email'
    msg = str(error.get("msg", "is invalid"))
    return f'"{field}" {msg[0].lower() + msg[1:] if msg else "is invalid"}'


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """Join every violation, in the order reported, into a single message."""
    return ", ".join(describe_error(e) for e in errors)
