"""Python SDK for import operations.

This module exposes a high-level client for single imports and
declarative run-spec execution.
"""

from __future__ import annotations

from typing import Callable

from core.config import ImportConfig
from core.run_spec_execution import execute_run_spec_file
from core.types import ImportSummary, RunOptions
from ingest.pipeline import run_import
from store.submission_client import BulkBackend

BackendFactory = Callable[[RunOptions], BulkBackend]


class ImportClient:
    """Primary SDK entry point for import workflows."""

    def __init__(
        self,
        config: ImportConfig | None = None,
        backend_factory: BackendFactory | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional process-level defaults.
            backend_factory: Optional bulk backend factory; defaults to Elasticsearch.
        """
        self._config = config or ImportConfig.from_env()
        self._backend_factory = backend_factory

    @property
    def config(self) -> ImportConfig:
        """Process-level defaults used for omitted options."""
        return self._config

    def import_file(self, options: RunOptions) -> ImportSummary:
        """Import one source file into an index.

        Args:
            options: Run options.

        Returns:
            Aggregate run summary.

        Raises:
            ImportConfigError: If options or files are invalid.
            ImportDecodeError: If input records are malformed.
            ImportTransformError: If the transform hook fails.
        """
        backend = self._backend_factory(options) if self._backend_factory else None
        return run_import(options, backend)

    def run_spec(self, spec_file: str) -> tuple[ImportSummary, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            One summary per executed job.
        """
        return execute_run_spec_file(self, spec_file)
