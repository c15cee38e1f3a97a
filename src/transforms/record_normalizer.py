"""Record normalization for bulk indexing.

This module turns raw decoded records into index instructions.
Stages run in a fixed order: export-wrapper unwrapping, ignore-path
redaction, the user transform hook, key extraction, and sentinel
coercions. Coercions run last so a transform still sees raw values.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from core.constants import (
    BULK_ACTION_NAME,
    DATE_WRAPPER_KEY,
    NUMBER_LONG_WRAPPER_KEY,
    OBJECT_ID_WRAPPER_KEY,
    RECORD_ID_FIELD,
)
from core.errors import ImportDecodeError, ImportTransformError
from core.types import CoercionRule, IndexInstruction, RawRecord, RunOptions
from transforms.field_paths import FieldPath, parse_ignore_paths, remove_field_path
from transforms.transform_loader import TransformCallable

_FRACTION_PATTERN = re.compile(r"\.(\d+)")


class RecordNormalizer:
    """Apply one run's normalization settings to each record."""

    def __init__(self, options: RunOptions, transform: TransformCallable | None = None) -> None:
        """Create a normalizer.

        Args:
            options: Run options carrying index, ignore paths, and coercions.
            transform: Optional user transform hook.

        Raises:
            ImportConfigError: If an ignore path is unsupported.
        """
        self._options = options
        self._ignore_paths = parse_ignore_paths(options.ignore_paths)
        self._transform = transform

    @property
    def ignore_paths(self) -> tuple[FieldPath, ...]:
        """Parsed ignore paths applied to every record."""
        return self._ignore_paths

    def normalize(self, record: RawRecord) -> RawRecord:
        """Unwrap, redact, and transform one record.

        Args:
            record: Raw decoded record; may be mutated in place.

        Returns:
            The normalized record, before key extraction.

        Raises:
            ImportDecodeError: If a date wrapper cannot be parsed.
            ImportTransformError: If the transform hook fails.
        """
        unwrap_export_values(record)
        for field_path in self._ignore_paths:
            remove_field_path(record, field_path)
        return apply_record_transform(record, self._transform)

    def build_instruction(self, record: RawRecord) -> IndexInstruction:
        """Normalize a record and pair it with its bulk action metadata."""
        normalized = self.normalize(record)
        instruction = build_index_instruction(normalized, self._options)
        apply_coercions(instruction.document, self._options.coercion_rules)
        return instruction


def unwrap_export_values(record: RawRecord) -> RawRecord:
    """Replace top-level ``$oid`` and ``$date`` wrappers with native values.

    Only single-key wrapper mappings are recognized; nested mappings
    below the top level are left untouched.
    """
    for field_name, value in record.items():
        if not isinstance(value, dict) or len(value) != 1:
            continue
        if OBJECT_ID_WRAPPER_KEY in value:
            record[field_name] = str(value[OBJECT_ID_WRAPPER_KEY])
        elif DATE_WRAPPER_KEY in value:
            record[field_name] = parse_export_date(field_name, value[DATE_WRAPPER_KEY])
    return record


def parse_export_date(field_name: str, raw_value: object) -> datetime:
    """Parse a ``$date`` wrapper payload into a UTC-aware datetime.

    Args:
        field_name: Field being unwrapped, for error context.
        raw_value: ISO-8601 string, epoch milliseconds, or ``$numberLong`` mapping.

    Returns:
        Parsed datetime; naive timestamps are treated as UTC.

    Raises:
        ImportDecodeError: If the payload is not a recognizable timestamp.
    """
    if isinstance(raw_value, dict) and set(raw_value) == {NUMBER_LONG_WRAPPER_KEY}:
        raw_value = raw_value[NUMBER_LONG_WRAPPER_KEY]
    try:
        if isinstance(raw_value, (int, float)) and not isinstance(raw_value, bool):
            return _from_epoch_millis(raw_value)
        if isinstance(raw_value, str):
            text = raw_value.strip()
            if text.lstrip("-").isdigit():
                return _from_epoch_millis(int(text))
            if text.endswith("Z"):
                text = f"{text[:-1]}+00:00"
            text = _FRACTION_PATTERN.sub(_pad_fraction, text, count=1)
            parsed = datetime.fromisoformat(text)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    except (ValueError, OverflowError, OSError) as error:
        raise ImportDecodeError(
            f"Invalid $date value for field '{field_name}': {raw_value!r}. "
            "Use an ISO-8601 timestamp or epoch milliseconds."
        ) from error
    raise ImportDecodeError(
        f"Invalid $date value for field '{field_name}': expected string or number, "
        f"got {type(raw_value).__name__}."
    )


def apply_record_transform(record: RawRecord, transform: TransformCallable | None) -> RawRecord:
    """Run the user transform hook.

    A truthy mapping result replaces the record; a falsy result keeps
    the (possibly mutated) input record.

    Raises:
        ImportTransformError: If the hook raises or returns a non-mapping.
    """
    if transform is None:
        return record
    try:
        result: Any = transform(record)
    except Exception as error:
        raise ImportTransformError(
            f"Transform hook failed for record with {RECORD_ID_FIELD}="
            f"{record.get(RECORD_ID_FIELD)!r}: {error}. Fix the transform file and retry."
        ) from error
    if not result:
        return record
    if not isinstance(result, dict):
        raise ImportTransformError(
            "Transform hook must return a record mapping or nothing, "
            f"got {type(result).__name__}."
        )
    return result


def build_index_instruction(record: RawRecord, options: RunOptions) -> IndexInstruction:
    """Move a record's ``_id`` into bulk metadata and the key alias field.

    The action carries only the index and the optional key. Clusters
    from version 8 reject ``_type``, so the document type is never sent.
    """
    metadata: dict[str, object] = {"_index": options.index_name}
    record_id = record.get(RECORD_ID_FIELD)
    if record_id is not None and record_id != "":
        metadata["_id"] = str(record_id)
        record[options.key_alias_field] = record_id
        del record[RECORD_ID_FIELD]
    return IndexInstruction(action={BULK_ACTION_NAME: metadata}, document=record)


def apply_coercions(record: RawRecord, rules: tuple[CoercionRule, ...]) -> RawRecord:
    """Replace top-level sentinel values, matching type and value exactly."""
    for rule in rules:
        if rule.field_name not in record:
            continue
        value = record[rule.field_name]
        if type(value) is type(rule.sentinel) and value == rule.sentinel:
            record[rule.field_name] = rule.replacement
    return record


def _from_epoch_millis(milliseconds: int | float) -> datetime:
    return datetime.fromtimestamp(milliseconds / 1000, tz=timezone.utc)


def _pad_fraction(match: re.Match[str]) -> str:
    """Fit fractional seconds to the six digits ``fromisoformat`` accepts on 3.10."""
    digits = match.group(1)[:6]
    return f".{digits.ljust(6, '0')}"
