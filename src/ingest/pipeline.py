"""Import orchestration for bulk indexing runs.

This module coordinates source decoding, record normalization,
batching, submission, and the continue-or-abort decision for each
batch. It reports outcomes as values; process exit is the caller's call.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from core.logging_config import get_logger
from core.types import (
    BatchReport,
    ImportSummary,
    IndexInstruction,
    PipelineState,
    RawRecord,
    RunOptions,
)
from ingest.batch_report import classify_submission, log_batch_report
from ingest.batching import iter_batches, validate_batch_size
from ingest.input_reader import read_input_records
from store.elasticsearch_backend import create_bulk_backend
from store.submission_client import BulkBackend, SubmissionClient
from transforms.record_normalizer import RecordNormalizer
from transforms.transform_loader import load_record_transform

_LOGGER = get_logger(__name__)


class ImportPipelineRunner:
    """Stateful runner that submits one batch at a time."""

    def __init__(
        self,
        options: RunOptions,
        normalizer: RecordNormalizer,
        submitter: SubmissionClient,
    ) -> None:
        self._options = options
        self._bulk_size = validate_batch_size(options.bulk_size)
        self._normalizer = normalizer
        self._submitter = submitter
        self._state: PipelineState = "idle"
        self._reports: list[BatchReport] = []
        self._record_count = 0
        self._failed_count = 0

    @property
    def state(self) -> PipelineState:
        """Current pipeline state."""
        return self._state

    @property
    def reports(self) -> tuple[BatchReport, ...]:
        """Reports for every batch submitted so far."""
        return tuple(self._reports)

    def run(self, records: Iterable[RawRecord]) -> ImportSummary:
        """Normalize, batch, and submit records until done or aborted.

        Args:
            records: Raw records in source order; consumed lazily and
                closed, when closable, once the run stops.

        Returns:
            Aggregate summary; ``aborted`` is set after a fatal batch.

        Raises:
            ImportDecodeError: If a record cannot be normalized.
            ImportTransformError: If the transform hook fails.
        """
        self._state = "streaming"
        try:
            for batch in iter_batches(self._iter_instructions(records), self._bulk_size):
                report = self._process_batch(batch)
                if report.fatal:
                    self._state = "aborted"
                    return self._finish()
                self._state = "continuing"
        finally:
            _close_records(records)
        self._state = "done"
        return self._finish()

    def _iter_instructions(self, records: Iterable[RawRecord]) -> Iterator[IndexInstruction]:
        for record in records:
            yield self._normalizer.build_instruction(record)

    def _process_batch(self, batch: tuple[IndexInstruction, ...]) -> BatchReport:
        self._state = "submitting"
        result = self._submitter.submit(batch)
        self._state = "classifying"
        report = classify_submission(len(self._reports) + 1, result, self._options.warn_errors)
        self._reports.append(report)
        self._record_count += report.record_count
        self._failed_count += report.failed_count
        log_batch_report(report, self._options.warn_errors)
        return report

    def _finish(self) -> ImportSummary:
        summary = ImportSummary(
            batch_count=len(self._reports),
            record_count=self._record_count,
            failed_count=self._failed_count,
            aborted=self._state == "aborted",
        )
        _log_import_finished(self._options, summary)
        return summary


def run_import(options: RunOptions, backend: BulkBackend | None = None) -> ImportSummary:
    """Run one import from source file to index.

    Configuration is validated and the transform hook loaded before
    the first request is sent.

    Args:
        options: Run options.
        backend: Optional bulk backend; defaults to an Elasticsearch client.

    Returns:
        Aggregate summary of the run.

    Raises:
        ImportConfigError: If options, source file, or transform file are invalid.
        ImportDecodeError: If input records are malformed.
        ImportTransformError: If the transform hook fails.
    """
    validate_batch_size(options.bulk_size)
    transform = load_record_transform(options.transform_path)
    normalizer = RecordNormalizer(options, transform)
    records = read_input_records(options)
    bulk_backend = backend if backend is not None else create_bulk_backend(options)
    submitter = SubmissionClient(bulk_backend, options.request_timeout_ms)
    runner = ImportPipelineRunner(options, normalizer, submitter)
    return runner.run(records)


def _log_import_finished(options: RunOptions, summary: ImportSummary) -> None:
    """Log run completion with aggregate totals."""
    fields = {
        "source_path": options.source_path,
        "index": options.index_name,
        "doc_type": options.doc_type,
        "batches": summary.batch_count,
        "records": summary.record_count,
        "errors": summary.failed_count,
    }
    if summary.aborted:
        _LOGGER.error("import_aborted", **fields)
        return
    _LOGGER.info("import_completed", **fields)


def _close_records(records: Iterable[RawRecord]) -> None:
    """Close a streaming source so its file handle is released."""
    close = getattr(records, "close", None)
    if callable(close):
        close()
