"""Run option builders shared by CLI and run-spec entry points.

This module turns loosely typed option values (comma-separated lists,
``FIELD:SENTINEL:REPLACEMENT`` coercion strings) into typed run options.
"""

from __future__ import annotations

import json
from typing import Iterable, Sequence

from core.constants import SUPPORTED_INPUT_FORMATS
from core.errors import ImportConfigError
from core.types import DEFAULT_COERCION_RULES, CoercionRule, InputFormat


def split_option_list(raw_value: str | Sequence[str] | None) -> tuple[str, ...]:
    """Split a comma-separated option into trimmed, non-empty entries."""
    if raw_value is None:
        return ()
    entries: Iterable[str] = raw_value.split(",") if isinstance(raw_value, str) else raw_value
    return tuple(entry.strip() for entry in entries if entry.strip())


def parse_input_format(raw_value: str | None) -> InputFormat:
    """Validate an input format name.

    Raises:
        ImportConfigError: If the format is missing or unsupported.
    """
    if raw_value in SUPPORTED_INPUT_FORMATS:
        return raw_value  # type: ignore[return-value]
    supported_rows = ", ".join(SUPPORTED_INPUT_FORMATS)
    raise ImportConfigError(
        f"You must provide an import type. Got {raw_value!r}; use one of: {supported_rows}."
    )


def parse_coercion_rule(rule_text: str) -> CoercionRule:
    """Parse ``FIELD:SENTINEL:REPLACEMENT`` into a coercion rule.

    The replacement is decoded as JSON when possible, so ``Status::0``
    maps an empty ``Status`` to the number 0 and ``UserId:NULL:`` maps
    the string ``NULL`` to an empty string.

    Raises:
        ImportConfigError: If the text does not have three parts.
    """
    parts = rule_text.split(":", 2)
    if len(parts) != 3 or not parts[0].strip():
        raise ImportConfigError(
            f"Invalid coercion rule '{rule_text}'. Use FIELD:SENTINEL:REPLACEMENT, "
            "for example 'UserId:NULL:'."
        )
    field_name, sentinel, raw_replacement = parts
    return CoercionRule(
        field_name=field_name.strip(),
        sentinel=sentinel,
        replacement=_decode_replacement(raw_replacement),
    )


def build_coercion_rules(
    rule_texts: Sequence[str] | None,
    disable_defaults: bool,
) -> tuple[CoercionRule, ...]:
    """Resolve coercion rules from explicit rules or the defaults."""
    if rule_texts:
        return tuple(parse_coercion_rule(rule_text) for rule_text in rule_texts)
    if disable_defaults:
        return ()
    return DEFAULT_COERCION_RULES


def _decode_replacement(raw_replacement: str) -> object:
    try:
        return json.loads(raw_replacement)
    except json.JSONDecodeError:
        return raw_replacement
