"""Field-path parsing and in-place deletion.

This module resolves ignore-path expressions such as ``a.b``,
``a.b[0].c``, ``a.b[*].c`` and ``a.b.*.c`` against nested record values and
removes the addressed fields. Missing data is never an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from core.constants import (
    FIELD_PATH_WILDCARD,
    FIELD_PATH_WILDCARD_MARKER,
    FIELD_PATH_WILDCARD_SEGMENT,
    IGNORE_PATH_SEPARATOR,
)
from core.errors import ImportConfigError

PathSegment = str | int

_SEGMENT_PATTERN = re.compile(r"^(?P<name>[^\[\]]+)(?P<indices>(?:\[\d+\])*)$")
_INDEX_PATTERN = re.compile(r"\[(\d+)\]")
_MISSING = object()


@dataclass(frozen=True)
class FieldPath:
    """Parsed ignore-path expression.

    Attributes:
        expression: Trimmed expression, bare ``*`` segments in bracket form.
        segments: Plain path, or the array base path for wildcard paths.
        remainder: Path removed from every array element, None for plain paths.
    """

    expression: str
    segments: tuple[PathSegment, ...]
    remainder: tuple[PathSegment, ...] | None = None

    @property
    def is_wildcard(self) -> bool:
        """Return whether this path fans out over array elements."""
        return self.remainder is not None


def parse_ignore_paths(raw_paths: str | Iterable[str] | None) -> tuple[FieldPath, ...]:
    """Parse configured ignore paths.

    Args:
        raw_paths: Comma-separated expressions, or an iterable of expressions.

    Returns:
        Parsed paths in configuration order; malformed entries are dropped.

    Raises:
        ImportConfigError: If an expression uses more than one wildcard.
    """
    if raw_paths is None:
        return ()
    if isinstance(raw_paths, str):
        expressions: Iterable[str] = raw_paths.split(IGNORE_PATH_SEPARATOR)
    else:
        expressions = raw_paths
    parsed_paths: list[FieldPath] = []
    for expression in expressions:
        field_path = parse_field_path(expression)
        if field_path is not None:
            parsed_paths.append(field_path)
    return tuple(parsed_paths)


def parse_field_path(expression: str) -> FieldPath | None:
    """Parse one expression, returning None when it is malformed.

    Raises:
        ImportConfigError: If the expression uses more than one wildcard.
    """
    trimmed = _fold_wildcard_segments(expression.strip())
    if not trimmed:
        return None
    wildcard_count = trimmed.count(FIELD_PATH_WILDCARD)
    if wildcard_count > 1:
        raise ImportConfigError(
            f"Unsupported ignore path '{trimmed}': only one '[*]' wildcard is allowed "
            "per path. Split the path or remove the nested wildcard."
        )
    if wildcard_count == 0:
        segments = _parse_segments(trimmed)
        if segments is None:
            return None
        return FieldPath(expression=trimmed, segments=segments)
    marker_index = trimmed.find(FIELD_PATH_WILDCARD_MARKER)
    if marker_index <= 0:
        return None
    base_segments = _parse_segments(trimmed[:marker_index])
    remainder = _parse_segments(trimmed[marker_index + len(FIELD_PATH_WILDCARD_MARKER) :])
    if base_segments is None or remainder is None:
        return None
    return FieldPath(expression=trimmed, segments=base_segments, remainder=remainder)


def remove_field_path(record: dict[str, object], field_path: FieldPath) -> None:
    """Delete the field(s) addressed by a path, in place.

    Plain paths remove one nested value. Wildcard paths remove the
    remainder from every mapping element of the base array.
    """
    if field_path.remainder is None:
        _unset(record, field_path.segments)
        return
    target = _resolve(record, field_path.segments)
    if not isinstance(target, list):
        return
    for element in target:
        _unset(element, field_path.remainder)


def _fold_wildcard_segments(path_text: str) -> str | None:
    """Rewrite bare ``*`` segments (``a.*.b``) into bracket form (``a[*].b``)."""
    folded: list[str] = []
    for part in path_text.split("."):
        if part != FIELD_PATH_WILDCARD_SEGMENT:
            folded.append(part)
        elif not folded:
            return None
        else:
            folded[-1] = f"{folded[-1]}{FIELD_PATH_WILDCARD}"
    return ".".join(folded)


def _parse_segments(path_text: str) -> tuple[PathSegment, ...] | None:
    segments: list[PathSegment] = []
    for part in path_text.split("."):
        match = _SEGMENT_PATTERN.match(part)
        if match is None:
            return None
        segments.append(match.group("name"))
        segments.extend(int(index) for index in _INDEX_PATTERN.findall(match.group("indices")))
    return tuple(segments)


def _resolve(value: object, segments: tuple[PathSegment, ...]) -> object:
    current = value
    for segment in segments:
        current = _step(current, segment)
        if current is _MISSING:
            return _MISSING
    return current


def _step(container: object, segment: PathSegment) -> object:
    if isinstance(container, dict):
        return container.get(str(segment), _MISSING)
    if isinstance(container, list):
        index = _list_index(container, segment)
        return _MISSING if index is None else container[index]
    return _MISSING


def _unset(value: object, segments: tuple[PathSegment, ...]) -> None:
    parent = _resolve(value, segments[:-1])
    last_segment = segments[-1]
    if isinstance(parent, dict):
        parent.pop(str(last_segment), None)
        return
    if isinstance(parent, list):
        index = _list_index(parent, last_segment)
        # Cleared, not popped: later indices keep their positions.
        if index is not None:
            parent[index] = None


def _list_index(container: list[object], segment: PathSegment) -> int | None:
    if isinstance(segment, int):
        index = segment
    elif segment.isdigit():
        index = int(segment)
    else:
        return None
    return index if index < len(container) else None
