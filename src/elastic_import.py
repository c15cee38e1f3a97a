"""Public SDK surface for elastic import.

This module provides a stable import path for library users.
It re-exports the primary client and typed option models.
"""

from __future__ import annotations

from core.config import ImportConfig
from core.types import (
    CoercionRule,
    DelimitedOptions,
    ImportSummary,
    IndexInstruction,
    RunOptions,
    SubmissionResult,
)
from ingest.pipeline import ImportPipelineRunner, run_import
from store.import_sdk import ImportClient
from store.submission_client import BulkBackend, SubmissionClient
from transforms.record_normalizer import RecordNormalizer

__all__ = [
    "BulkBackend",
    "CoercionRule",
    "DelimitedOptions",
    "ImportClient",
    "ImportConfig",
    "ImportPipelineRunner",
    "ImportSummary",
    "IndexInstruction",
    "RecordNormalizer",
    "RunOptions",
    "SubmissionClient",
    "SubmissionResult",
    "run_import",
]
