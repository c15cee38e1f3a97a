"""Type-safe field parsing helpers for run-spec execution.

This module centralizes primitive parsing so run-spec executors can stay
concise and produce consistent validation errors.
"""

from __future__ import annotations

from typing import Mapping

from core.errors import ImportRunSpecError


def required_string(args: Mapping[str, object], field_name: str) -> str:
    """Read a required string field from a run-spec job."""
    value = optional_string(args, field_name)
    if value is None:
        raise ImportRunSpecError(f"Run-spec job is missing required field '{field_name}'.")
    return value


def optional_string(args: Mapping[str, object], field_name: str) -> str | None:
    """Read an optional string field from a run-spec job."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    raise ImportRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")


def optional_raw_string(args: Mapping[str, object], field_name: str, default_value: str) -> str:
    """Read a string field without trimming, so whitespace delimiters survive."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, str):
        return value
    raise ImportRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")


def optional_int(args: Mapping[str, object], field_name: str) -> int | None:
    """Read an optional integer field from a run-spec job."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ImportRunSpecError(f"Run-spec field '{field_name}' must be an integer.")
    return value


def int_with_default(args: Mapping[str, object], field_name: str, default_value: int) -> int:
    """Read an integer field while preserving explicit zero values."""
    value = optional_int(args, field_name)
    return default_value if value is None else value


def optional_bool(
    args: Mapping[str, object],
    field_name: str,
    default_value: bool,
) -> bool:
    """Read an optional boolean field from a run-spec job."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool):
        return value
    raise ImportRunSpecError(f"Run-spec field '{field_name}' must be true/false.")


def optional_string_list(args: Mapping[str, object], field_name: str) -> tuple[str, ...] | None:
    """Read a list of strings, accepting a comma-separated string too."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        return tuple(entry.strip() for entry in value.split(",") if entry.strip())
    if isinstance(value, list) and all(isinstance(entry, str) for entry in value):
        return tuple(entry.strip() for entry in value if entry.strip())
    raise ImportRunSpecError(
        f"Run-spec field '{field_name}' must be a list of strings or a comma-separated string."
    )
