"""Elastic import exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class ImportToolError(Exception):
    """Base exception for all import failures."""


class ImportConfigError(ImportToolError):
    """Raised for invalid run options or runtime configuration."""


class ImportDecodeError(ImportToolError):
    """Raised for malformed input records."""


class ImportTransformError(ImportToolError):
    """Raised when a user transform hook fails or returns an invalid value."""


class SubmissionTransportError(ImportToolError):
    """Raised when a bulk request fails before returning per-item statuses."""


class ImportRunSpecError(ImportToolError):
    """Raised for invalid or unsupported run-spec configuration."""


class ImportDependencyError(ImportToolError):
    """Raised when a required runtime dependency is missing."""
