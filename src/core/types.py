"""Shared typed models.

This module defines immutable data models used by decoders, the
normalizer, the submission client, and the import pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from core.constants import (
    DEFAULT_BULK_SIZE,
    DEFAULT_CSV_DELIMITER,
    DEFAULT_CSV_QUOTE,
    DEFAULT_KEY_ALIAS_FIELD,
    DEFAULT_REQUEST_TIMEOUT_MS,
)

RawRecord = dict[str, Any]
InputFormat = Literal["mongo", "json", "csv"]
PipelineState = Literal[
    "idle",
    "streaming",
    "submitting",
    "classifying",
    "continuing",
    "aborted",
    "done",
]


@dataclass(frozen=True)
class CoercionRule:
    """Sentinel replacement applied to one top-level field.

    Attributes:
        field_name: Top-level record field to inspect.
        sentinel: Exact value that triggers replacement.
        replacement: Value written when the field equals the sentinel.
    """

    field_name: str
    sentinel: object
    replacement: object


DEFAULT_COERCION_RULES: tuple[CoercionRule, ...] = (
    CoercionRule(field_name="Status", sentinel="", replacement=0),
    CoercionRule(field_name="UserId", sentinel="NULL", replacement=""),
)


@dataclass(frozen=True)
class DelimitedOptions:
    """Delimited-text decoding options.

    Attributes:
        fields: Explicit column names, or None to use header-row mode.
        header_fields: Read column names from the first row.
        delimiter: Field delimiter, or ``tab`` for a tab character.
        quote: Quote character; empty disables quoting.
        auto_parse: Convert integer and float literals to numbers.
    """

    fields: tuple[str, ...] | None = None
    header_fields: bool = False
    delimiter: str = DEFAULT_CSV_DELIMITER
    quote: str = DEFAULT_CSV_QUOTE
    auto_parse: bool = False


@dataclass(frozen=True)
class RunOptions:
    """Import run options resolved once per run.

    Attributes:
        source_path: Input file path.
        input_format: Input encoding (mongo export, JSON document, or CSV).
        host: Elasticsearch host URL.
        index_name: Target index name.
        doc_type: Document type named on the command line; reported, never sent.
        bulk_size: Records per bulk request.
        request_timeout_ms: Per-request timeout in milliseconds.
        ignore_paths: Field-path expressions removed from every record.
        warn_errors: Log failures and continue instead of aborting.
        transform_path: Optional Python file exporting ``transform(record)``.
        delimited: Delimited-text decoding options.
        coercion_rules: Sentinel replacements applied after transform.
        key_alias_field: Document field receiving the original ``_id`` value.
    """

    source_path: str
    input_format: InputFormat
    host: str
    index_name: str
    doc_type: str | None = None
    bulk_size: int = DEFAULT_BULK_SIZE
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    ignore_paths: tuple[str, ...] = ()
    warn_errors: bool = False
    transform_path: str | None = None
    delimited: DelimitedOptions = field(default_factory=DelimitedOptions)
    coercion_rules: tuple[CoercionRule, ...] = DEFAULT_COERCION_RULES
    key_alias_field: str = DEFAULT_KEY_ALIAS_FIELD


@dataclass(frozen=True)
class IndexInstruction:
    """Bulk action metadata paired with its document body.

    Attributes:
        action: Bulk action line, e.g. ``{"index": {"_index": "users"}}``.
        document: Normalized document body.
    """

    action: Mapping[str, Mapping[str, object]]
    document: RawRecord

    @property
    def document_key(self) -> str | None:
        """Return the explicit document key, if any."""
        for metadata in self.action.values():
            key = metadata.get("_id")
            return None if key is None else str(key)
        return None


@dataclass(frozen=True)
class ItemError:
    """Structured error returned for one submitted document.

    Attributes:
        position: Zero-based document position inside the batch.
        document_key: Explicit document key when one was sent.
        kind: Error type reported by the backend.
        reason: Human-readable error reason.
        caused_by: Optional nested cause reason.
    """

    position: int
    document_key: str | None
    kind: str
    reason: str
    caused_by: str | None = None


@dataclass(frozen=True)
class SubmissionResult:
    """Uniform outcome of one bulk submission.

    Attributes:
        submitted_count: Documents sent in the request.
        item_errors: Per-document failures in submission order.
        transport_error: Set when the request failed as a whole.
    """

    submitted_count: int
    item_errors: tuple[ItemError, ...] = ()
    transport_error: str | None = None

    @property
    def failed_count(self) -> int:
        """Return documents that are failed or of unknown status."""
        if self.transport_error is not None:
            return self.submitted_count
        return len(self.item_errors)

    @property
    def succeeded(self) -> bool:
        """Return whether every document was acknowledged."""
        return self.failed_count == 0


@dataclass(frozen=True)
class BatchReport:
    """Classified outcome of one batch."""

    batch_number: int
    record_count: int
    failed_count: int
    item_errors: tuple[ItemError, ...]
    transport_error: str | None
    fatal: bool


@dataclass(frozen=True)
class ImportSummary:
    """Aggregate totals for a finished or aborted run.

    Attributes:
        batch_count: Batches submitted.
        record_count: Documents submitted.
        failed_count: Documents reported failed, including whole failed batches.
        aborted: Whether the run stopped on a fatal batch failure.
    """

    batch_count: int
    record_count: int
    failed_count: int
    aborted: bool
