"""Typed run-spec parsing for declarative import jobs.

This module loads and validates YAML run-spec files. A run-spec lists
import jobs that share connection defaults, so repeated loads of the
same cluster can be kept under version control.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence, cast

from core.errors import ImportDependencyError, ImportRunSpecError

SUPPORTED_DEFAULT_KEYS = frozenset(
    {"host", "index", "type", "bulk_size", "timeout", "warn_errors"}
)
SUPPORTED_JOB_KEYS = frozenset(
    {
        "file",
        "format",
        "host",
        "index",
        "type",
        "bulk_size",
        "timeout",
        "ignore",
        "warn_errors",
        "transform_file",
        "fields",
        "header_fields",
        "delimiter",
        "quote",
        "csv_parse",
        "key_field",
        "coercions",
    }
)


@dataclass(frozen=True)
class RunSpec:
    """Validated run-spec root object."""

    version: int
    defaults: Mapping[str, object]
    jobs: tuple[Mapping[str, object], ...]


def load_run_spec(spec_path: str) -> RunSpec:
    """Load and validate a YAML run-spec from disk.

    Args:
        spec_path: File path to YAML run-spec.

    Returns:
        Fully validated run-spec object.

    Raises:
        ImportDependencyError: If PyYAML is unavailable.
        ImportRunSpecError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(spec_path)
    root_mapping = _expect_mapping(payload, "run spec root")
    _validate_keys(root_mapping, {"version", "defaults", "jobs"}, "run spec root")
    version = _parse_version(root_mapping)
    defaults = _parse_defaults(root_mapping)
    jobs = _parse_jobs(root_mapping)
    return RunSpec(version=version, defaults=defaults, jobs=jobs)


def merge_job_args(spec: RunSpec, job: Mapping[str, object]) -> dict[str, object]:
    """Overlay one job's fields on the run-spec defaults."""
    merged = dict(spec.defaults)
    merged.update(job)
    return merged


def _load_yaml_payload(spec_path: str) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise ImportDependencyError(
            "YAML run-spec support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    spec_file = Path(spec_path).expanduser().resolve()
    if not spec_file.exists():
        raise ImportRunSpecError(
            f"Run spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(spec_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise ImportRunSpecError(
            f"Failed to read run spec at {spec_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise ImportRunSpecError(
            f"Failed to parse YAML run spec at {spec_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise ImportRunSpecError(f"Run spec at {spec_file} is empty. Define 'version' and 'jobs'.")
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise ImportRunSpecError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise ImportRunSpecError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise ImportRunSpecError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise ImportRunSpecError("Run spec field 'version' must be an integer. Set version: 1.")
    if raw_version != 1:
        raise ImportRunSpecError(f"Unsupported run spec version {raw_version}. Use version: 1.")
    return raw_version


def _parse_defaults(root_mapping: Mapping[str, object]) -> Mapping[str, object]:
    raw_defaults = root_mapping.get("defaults")
    if raw_defaults is None:
        return {}
    defaults_mapping = _expect_mapping(raw_defaults, "run spec defaults")
    _validate_keys(defaults_mapping, SUPPORTED_DEFAULT_KEYS, "run spec defaults")
    return defaults_mapping


def _parse_jobs(root_mapping: Mapping[str, object]) -> tuple[Mapping[str, object], ...]:
    raw_jobs = root_mapping.get("jobs")
    if raw_jobs is None:
        raise ImportRunSpecError(
            "Run spec missing required field 'jobs'. Add a non-empty list of import jobs."
        )
    job_rows = _expect_sequence(raw_jobs, "run spec jobs")
    if len(job_rows) == 0:
        raise ImportRunSpecError("Run spec field 'jobs' must include at least one job.")
    parsed_jobs = []
    for index, job_value in enumerate(job_rows):
        context = f"run spec job #{index + 1}"
        job_mapping = _expect_mapping(job_value, context)
        _validate_keys(job_mapping, SUPPORTED_JOB_KEYS, context)
        parsed_jobs.append(job_mapping)
    return tuple(parsed_jobs)


def _validate_keys(
    mapping: Mapping[str, object],
    allowed_keys: frozenset[str] | set[str],
    context: str,
) -> None:
    unknown_keys = sorted(set(mapping) - set(allowed_keys))
    if unknown_keys:
        raise ImportRunSpecError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")
