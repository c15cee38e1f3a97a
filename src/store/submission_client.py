"""Bulk submission with uniform result descriptors.

This module sends one batch of index instructions per backend call and
converts the heterogeneous bulk response into a ``SubmissionResult``.
It never retries; a failed request marks the whole batch as failed.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from core.errors import ImportConfigError, SubmissionTransportError
from core.types import IndexInstruction, ItemError, SubmissionResult


class BulkBackend(Protocol):
    """Remote service accepting alternating action/document operations."""

    def bulk(
        self,
        operations: list[Mapping[str, object]],
        timeout_seconds: float,
    ) -> Mapping[str, Any]: ...


class SubmissionClient:
    """Submit batches through a bulk backend with a fixed timeout."""

    def __init__(self, backend: BulkBackend, request_timeout_ms: int) -> None:
        if isinstance(request_timeout_ms, bool) or request_timeout_ms <= 0:
            raise ImportConfigError(
                f"Invalid request timeout {request_timeout_ms!r}: expected a positive "
                "number of milliseconds. Set --timeout to a value such as 30000."
            )
        self._backend = backend
        self._timeout_seconds = request_timeout_ms / 1000

    def submit(self, batch: Sequence[IndexInstruction]) -> SubmissionResult:
        """Send one batch in a single bulk request.

        Args:
            batch: Ordered index instructions.

        Returns:
            Result carrying item errors, or a transport error for the whole batch.
        """
        operations = flatten_instructions(batch)
        try:
            response = self._backend.bulk(operations, self._timeout_seconds)
        except SubmissionTransportError as error:
            return SubmissionResult(submitted_count=len(batch), transport_error=str(error))
        return parse_bulk_response(batch, response)


def flatten_instructions(batch: Sequence[IndexInstruction]) -> list[Mapping[str, object]]:
    """Expand instruction pairs into the bulk body's alternating lines."""
    operations: list[Mapping[str, object]] = []
    for instruction in batch:
        operations.append(instruction.action)
        operations.append(instruction.document)
    return operations


def parse_bulk_response(
    batch: Sequence[IndexInstruction],
    response: Mapping[str, Any],
) -> SubmissionResult:
    """Collect per-item errors from a bulk response.

    Args:
        batch: Submitted instructions, in request order.
        response: Decoded bulk response body.

    Returns:
        Submission result for the batch.
    """
    raw_items = response.get("items") or []
    item_errors: list[ItemError] = []
    for position, item in enumerate(raw_items):
        item_error = _extract_item_error(batch, position, item)
        if item_error is not None:
            item_errors.append(item_error)
    if response.get("errors") and not item_errors:
        return SubmissionResult(
            submitted_count=len(batch),
            transport_error="Bulk response reported errors without item details.",
        )
    return SubmissionResult(submitted_count=len(batch), item_errors=tuple(item_errors))


def _extract_item_error(
    batch: Sequence[IndexInstruction],
    position: int,
    item: object,
) -> ItemError | None:
    if not isinstance(item, Mapping):
        return None
    for action_result in item.values():
        if not isinstance(action_result, Mapping) or action_result.get("error") is None:
            continue
        return _build_item_error(batch, position, action_result)
    return None


def _build_item_error(
    batch: Sequence[IndexInstruction],
    position: int,
    action_result: Mapping[str, Any],
) -> ItemError:
    raw_error = action_result["error"]
    if position < len(batch):
        document_key = batch[position].document_key
    else:
        document_key = action_result.get("_id")
    if not isinstance(raw_error, Mapping):
        return ItemError(
            position=position,
            document_key=document_key,
            kind="unknown",
            reason=str(raw_error),
        )
    cause = raw_error.get("caused_by")
    return ItemError(
        position=position,
        document_key=document_key,
        kind=str(raw_error.get("type", "unknown")),
        reason=str(raw_error.get("reason", "")),
        caused_by=str(cause.get("reason")) if isinstance(cause, Mapping) else None,
    )
