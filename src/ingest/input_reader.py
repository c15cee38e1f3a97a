"""Source record readers for import.

This module decodes mongo export streams, whole JSON documents, and
delimited text into raw record mappings. Export streams are read
lazily line by line; the other formats are decoded fully in memory.
"""

from __future__ import annotations

import csv
import json
import re
from pathlib import Path
from typing import Iterable, Iterator

from core.constants import EXPORT_FILE_ENCODING, TAB_DELIMITER_ALIAS
from core.errors import ImportConfigError, ImportDecodeError
from core.types import DelimitedOptions, RawRecord, RunOptions

_INTEGER_PATTERN = re.compile(r"^[-+]?\d+$")
_FLOAT_PATTERN = re.compile(r"^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$")


def read_input_records(options: RunOptions) -> Iterable[RawRecord]:
    """Open the configured source with the decoder for its format.

    Args:
        options: Run options naming the source path and input format.

    Returns:
        Lazy iterator for export streams, list for JSON and delimited text.

    Raises:
        ImportConfigError: If the file is missing or the format is unknown.
        ImportDecodeError: If an eagerly decoded source is malformed.
    """
    source_path = Path(options.source_path).expanduser()
    if not source_path.is_file():
        raise ImportConfigError(
            f"The file '{source_path}' doesn't exist. Provide an existing input file."
        )
    if options.input_format == "mongo":
        return iter_export_records(source_path)
    if options.input_format == "json":
        return read_json_records(source_path)
    if options.input_format == "csv":
        return read_delimited_records(source_path, options.delimited)
    raise ImportConfigError(
        f"Unsupported input format '{options.input_format}'. Use one of: mongo, json, csv."
    )


def iter_export_records(file_path: Path) -> Iterator[RawRecord]:
    """Yield one record per line of a mongo export file.

    Args:
        file_path: Path to newline-delimited JSON export.

    Yields:
        Parsed record mappings; blank lines are skipped.

    Raises:
        ImportDecodeError: If a line is not a JSON object.
    """
    with file_path.open("r", encoding=EXPORT_FILE_ENCODING) as handle:
        for line_number, line in enumerate(handle, 1):
            if not line.strip():
                continue
            yield _parse_export_line(file_path, line, line_number)


def read_json_records(file_path: Path) -> list[RawRecord]:
    """Read a JSON document holding one record or an array of records.

    Args:
        file_path: Path to JSON file.

    Returns:
        Ordered records.

    Raises:
        ImportDecodeError: If the document is invalid or not object-shaped.
    """
    try:
        payload = json.loads(file_path.read_text(encoding=EXPORT_FILE_ENCODING))
    except json.JSONDecodeError as error:
        raise ImportDecodeError(
            f"Failed to parse JSON document at {file_path}: {error.msg} "
            f"(line {error.lineno}). Fix the JSON syntax and retry import."
        ) from error
    if isinstance(payload, dict):
        return [payload]
    if not isinstance(payload, list):
        raise ImportDecodeError(
            f"Invalid JSON document at {file_path}: expected an object or an array "
            f"of objects, got {type(payload).__name__}."
        )
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            raise ImportDecodeError(
                f"Invalid JSON record #{index + 1} at {file_path}: expected an object, "
                f"got {type(record).__name__}."
            )
    return payload


def read_delimited_records(file_path: Path, options: DelimitedOptions) -> list[RawRecord]:
    """Read delimited text rows into records keyed by column name.

    Args:
        file_path: Path to delimited text file.
        options: Column, delimiter, quote, and parsing options.

    Returns:
        Ordered records; values are raw strings unless ``auto_parse`` is set.

    Raises:
        ImportConfigError: If column or delimiter options are invalid.
        ImportDecodeError: If a row is malformed.
    """
    _validate_column_options(options)
    reader_kwargs = _build_reader_kwargs(options)
    records: list[RawRecord] = []
    columns = list(options.fields) if options.fields else None
    with file_path.open("r", encoding=EXPORT_FILE_ENCODING, newline="") as handle:
        reader = csv.reader(handle, **reader_kwargs)
        try:
            for row in reader:
                if not row:
                    continue
                if columns is None:
                    columns = row
                    continue
                records.append(_build_row_record(file_path, reader.line_num, columns, row, options))
        except csv.Error as error:
            raise ImportDecodeError(
                f"Failed to parse delimited text at {file_path}:{reader.line_num}: {error}."
            ) from error
    return records


def _parse_export_line(file_path: Path, line: str, line_number: int) -> RawRecord:
    """Parse and validate one export line."""
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise ImportDecodeError(
            f"Failed to parse export record at {file_path}:{line_number}: "
            f"{error.msg}. Fix the JSON syntax and retry import."
        ) from error
    if not isinstance(payload, dict):
        raise ImportDecodeError(
            f"Invalid export record at {file_path}:{line_number}: "
            f"expected a JSON object, got {type(payload).__name__}."
        )
    return payload


def _validate_column_options(options: DelimitedOptions) -> None:
    if bool(options.fields) == options.header_fields:
        raise ImportConfigError(
            "You must provide either the fields of the CSV file (--fields) "
            "or set the --header-fields option, but not both."
        )


def _build_reader_kwargs(options: DelimitedOptions) -> dict[str, object]:
    delimiter = "\t" if options.delimiter == TAB_DELIMITER_ALIAS else options.delimiter
    if len(delimiter) != 1:
        raise ImportConfigError(
            f"Invalid delimiter {options.delimiter!r}: expected one character or 'tab'."
        )
    if not options.quote:
        return {"delimiter": delimiter, "quoting": csv.QUOTE_NONE}
    if len(options.quote) != 1:
        raise ImportConfigError(f"Invalid quote {options.quote!r}: expected one character.")
    return {"delimiter": delimiter, "quotechar": options.quote, "quoting": csv.QUOTE_MINIMAL}


def _build_row_record(
    file_path: Path,
    line_number: int,
    columns: list[str],
    row: list[str],
    options: DelimitedOptions,
) -> RawRecord:
    if len(row) != len(columns):
        raise ImportDecodeError(
            f"Invalid delimited row at {file_path}:{line_number}: expected "
            f"{len(columns)} fields, got {len(row)}. Check the delimiter and quote options."
        )
    values: list[object] = [_parse_scalar(value) for value in row] if options.auto_parse else row
    return dict(zip(columns, values))


def _parse_scalar(value: str) -> object:
    """Convert integer and float literals; keep everything else as text."""
    if _INTEGER_PATTERN.match(value):
        return int(value)
    if _FLOAT_PATTERN.match(value):
        return float(value)
    return value
