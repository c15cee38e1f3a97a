"""Elasticsearch bulk backend.

This module adapts the official ``elasticsearch`` client to the
``BulkBackend`` contract used by the submission client.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.errors import ImportDependencyError, SubmissionTransportError
from core.types import RunOptions


class ElasticsearchBulkBackend:
    """Bulk backend backed by one Elasticsearch client."""

    def __init__(self, client: Any, failure_types: tuple[type[BaseException], ...]) -> None:
        self._client = client
        self._failure_types = failure_types

    def bulk(
        self,
        operations: list[Mapping[str, object]],
        timeout_seconds: float,
    ) -> Mapping[str, Any]:
        """Send one bulk request.

        Raises:
            SubmissionTransportError: If the request times out or is rejected.
        """
        try:
            response = self._client.options(request_timeout=timeout_seconds).bulk(
                operations=operations
            )
        except self._failure_types as error:
            raise SubmissionTransportError(f"Bulk request failed: {error}") from error
        return response.body


def create_bulk_backend(options: RunOptions) -> ElasticsearchBulkBackend:
    """Create the Elasticsearch backend for one run.

    Args:
        options: Run options carrying host and request timeout.

    Returns:
        Configured bulk backend.

    Raises:
        ImportDependencyError: If the elasticsearch package is missing.
    """
    try:
        import elasticsearch
    except ImportError as error:
        raise ImportDependencyError(
            "Bulk import requires the elasticsearch package, but it is not installed. "
            "Install elasticsearch to submit documents."
        ) from error
    client = elasticsearch.Elasticsearch(
        normalize_host(options.host),
        request_timeout=options.request_timeout_ms / 1000,
    )
    failure_types = (elasticsearch.ApiError, elasticsearch.TransportError)
    return ElasticsearchBulkBackend(client, failure_types)


def normalize_host(host: str) -> str:
    """Add an http scheme to bare ``host:port`` values."""
    stripped = host.strip()
    if "://" in stripped:
        return stripped
    return f"http://{stripped}"
