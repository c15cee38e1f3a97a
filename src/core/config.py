"""Runtime configuration model for elastic import.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_BULK_SIZE, DEFAULT_LOG_LEVEL, DEFAULT_REQUEST_TIMEOUT_MS
from core.errors import ImportConfigError


@dataclass(frozen=True)
class ImportConfig:
    """Validated process-level defaults.

    Attributes:
        bulk_size: Default records per bulk request.
        request_timeout_ms: Default per-request timeout in milliseconds.
        log_level: Default log level name.
    """

    bulk_size: int
    request_timeout_ms: int
    log_level: str

    @classmethod
    def from_env(cls) -> "ImportConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ImportConfigError: If environment values are invalid.
        """
        bulk_size = _parse_positive_int(
            "ELASTIC_IMPORT_BULK_SIZE",
            os.getenv("ELASTIC_IMPORT_BULK_SIZE", str(DEFAULT_BULK_SIZE)),
        )
        request_timeout_ms = _parse_positive_int(
            "ELASTIC_IMPORT_TIMEOUT_MS",
            os.getenv("ELASTIC_IMPORT_TIMEOUT_MS", str(DEFAULT_REQUEST_TIMEOUT_MS)),
        )
        log_level = os.getenv("ELASTIC_IMPORT_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            bulk_size=bulk_size,
            request_timeout_ms=request_timeout_ms,
            log_level=log_level,
        )


def _parse_positive_int(variable_name: str, raw_value: str) -> int:
    """Parse a positive integer environment value.

    Args:
        variable_name: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        ImportConfigError: If value is not a positive integer.
    """
    try:
        parsed_value = int(raw_value)
    except ValueError as error:
        raise ImportConfigError(
            f"Invalid {variable_name} value: expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a positive number."
        ) from error
    if parsed_value <= 0:
        raise ImportConfigError(
            f"Invalid {variable_name} value: expected a positive integer, got {parsed_value}."
        )
    return parsed_value
