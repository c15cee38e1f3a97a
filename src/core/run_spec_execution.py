"""Shared run-spec execution engine for CLI and SDK workflows.

This module maps validated run-spec jobs to client import calls so
different entry points execute one declarative path without drift.
"""

from __future__ import annotations

from typing import Mapping, Protocol

from core.config import ImportConfig
from core.constants import DEFAULT_CSV_DELIMITER, DEFAULT_CSV_QUOTE, DEFAULT_KEY_ALIAS_FIELD
from core.errors import ImportRunSpecError
from core.run_option_builders import parse_input_format
from core.run_spec import RunSpec, load_run_spec, merge_job_args
from core.run_spec_fields import (
    int_with_default,
    optional_bool,
    optional_raw_string,
    optional_string,
    optional_string_list,
    required_string,
)
from core.types import (
    DEFAULT_COERCION_RULES,
    CoercionRule,
    DelimitedOptions,
    ImportSummary,
    RunOptions,
)


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    @property
    def config(self) -> ImportConfig: ...

    def import_file(self, options: RunOptions) -> ImportSummary: ...


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[ImportSummary, ...]:
    """Load and execute a run-spec file, returning one summary per job run."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[ImportSummary, ...]:
    """Execute jobs in order, stopping after the first aborted job."""
    summaries: list[ImportSummary] = []
    for job in spec.jobs:
        options = build_job_run_options(merge_job_args(spec, job), client.config)
        summary = client.import_file(options)
        summaries.append(summary)
        if summary.aborted:
            break
    return tuple(summaries)


def build_job_run_options(args: Mapping[str, object], config: ImportConfig) -> RunOptions:
    """Build run options for one merged job mapping."""
    fields = optional_string_list(args, "fields")
    return RunOptions(
        source_path=required_string(args, "file"),
        input_format=parse_input_format(required_string(args, "format")),
        host=required_string(args, "host"),
        index_name=required_string(args, "index"),
        doc_type=optional_string(args, "type"),
        bulk_size=int_with_default(args, "bulk_size", config.bulk_size),
        request_timeout_ms=int_with_default(args, "timeout", config.request_timeout_ms),
        ignore_paths=optional_string_list(args, "ignore") or (),
        warn_errors=optional_bool(args, "warn_errors", default_value=False),
        transform_path=optional_string(args, "transform_file"),
        delimited=DelimitedOptions(
            fields=fields or None,
            header_fields=optional_bool(args, "header_fields", default_value=False),
            delimiter=optional_raw_string(args, "delimiter", DEFAULT_CSV_DELIMITER),
            quote=optional_raw_string(args, "quote", DEFAULT_CSV_QUOTE),
            auto_parse=optional_bool(args, "csv_parse", default_value=False),
        ),
        coercion_rules=_parse_coercions(args.get("coercions")),
        key_alias_field=optional_string(args, "key_field") or DEFAULT_KEY_ALIAS_FIELD,
    )


def _parse_coercions(raw_value: object) -> tuple[CoercionRule, ...]:
    if raw_value is None:
        return DEFAULT_COERCION_RULES
    if not isinstance(raw_value, list):
        raise ImportRunSpecError("Run-spec field 'coercions' must be a list of rules.")
    rules: list[CoercionRule] = []
    for index, raw_rule in enumerate(raw_value):
        if not isinstance(raw_rule, Mapping) or set(raw_rule) != {
            "field",
            "sentinel",
            "replacement",
        }:
            raise ImportRunSpecError(
                f"Invalid coercion rule #{index + 1}: expected keys field, sentinel, replacement."
            )
        field_name = raw_rule["field"]
        if not isinstance(field_name, str) or not field_name.strip():
            raise ImportRunSpecError(f"Invalid coercion rule #{index + 1}: 'field' must be text.")
        rules.append(
            CoercionRule(
                field_name=field_name.strip(),
                sentinel=raw_rule["sentinel"],
                replacement=raw_rule["replacement"],
            )
        )
    return tuple(rules)
