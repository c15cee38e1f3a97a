"""Batch outcome classification and reporting.

This module decides whether a submitted batch is fatal for the run
and emits the structured per-batch and per-item report events.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.types import BatchReport, SubmissionResult

_LOGGER = get_logger(__name__)


def classify_submission(
    batch_number: int,
    result: SubmissionResult,
    warn_errors: bool,
) -> BatchReport:
    """Classify one submission result.

    Args:
        batch_number: One-based batch sequence number.
        result: Submission outcome.
        warn_errors: Whether failures should be reported without aborting.

    Returns:
        Batch report; fatal when any document failed outside warn mode.
    """
    failed_count = result.failed_count
    return BatchReport(
        batch_number=batch_number,
        record_count=result.submitted_count,
        failed_count=failed_count,
        item_errors=result.item_errors,
        transport_error=result.transport_error,
        fatal=failed_count > 0 and not warn_errors,
    )


def log_batch_report(report: BatchReport, warn_errors: bool) -> None:
    """Log a batch summary, preceded by every failure it contains."""
    if report.failed_count == 0:
        _LOGGER.info("batch_sent", batch=report.batch_number, records=report.record_count)
        return
    log_failure = _LOGGER.warning if warn_errors else _LOGGER.error
    if report.transport_error is not None:
        log_failure(
            "batch_transport_error",
            batch=report.batch_number,
            error=report.transport_error,
        )
    for item_error in report.item_errors:
        log_failure(
            "item_error",
            batch=report.batch_number,
            position=item_error.position,
            document_key=item_error.document_key,
            kind=item_error.kind,
            reason=item_error.reason,
            caused_by=item_error.caused_by,
        )
    log_failure(
        "batch_failed",
        batch=report.batch_number,
        records=report.record_count,
        errors=report.failed_count,
    )
