"""Import command wiring for the elastic-import CLI."""

from __future__ import annotations

import argparse
from typing import Any

from core.config import ImportConfig
from core.constants import DEFAULT_CSV_DELIMITER, DEFAULT_CSV_QUOTE, DEFAULT_KEY_ALIAS_FIELD
from core.run_option_builders import build_coercion_rules, parse_input_format, split_option_list
from core.types import DelimitedOptions, ImportSummary, RunOptions
from store.import_sdk import ImportClient


def add_import_command(subparsers: Any, config: ImportConfig) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Import a file into an Elasticsearch index")
    parser.add_argument("file", help="Input file path")
    parser.add_argument("host", help="Elasticsearch host, e.g. http://localhost:9200")
    parser.add_argument("index", help="Target index name")
    parser.add_argument("type", help="Document type; use _doc for typeless clusters")
    format_group = parser.add_mutually_exclusive_group(required=True)
    format_group.add_argument(
        "--mongo",
        dest="input_format",
        action="store_const",
        const="mongo",
        help="Imports from mongo-export file",
    )
    format_group.add_argument(
        "--json", dest="input_format", action="store_const", const="json", help="Imports from json file"
    )
    format_group.add_argument(
        "--csv", dest="input_format", action="store_const", const="csv", help="Imports from csv file"
    )
    parser.add_argument(
        "-b",
        "--bulk-size",
        type=int,
        default=config.bulk_size,
        help="Records sent to the Elasticsearch server for each request",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        help="Comma separated fields to ignore: 'field.sub', 'field.sub[0].other' or "
        "'field.sub[*].other'",
    )
    parser.add_argument(
        "-w",
        "--warn-errors",
        action="store_true",
        help="Warn on error instead of stopping the import",
    )
    parser.add_argument(
        "-t",
        "--transform-file",
        help="Path to a Python file exporting transform(record)",
    )
    parser.add_argument("-f", "--fields", help="Comma separated field names for CSV import")
    parser.add_argument(
        "-H",
        "--header-fields",
        action="store_true",
        help="Use the first CSV line as field names",
    )
    parser.add_argument(
        "-d",
        "--delimiter",
        default=DEFAULT_CSV_DELIMITER,
        help="CSV field delimiter; use 'tab' for tabs",
    )
    parser.add_argument(
        "-q",
        "--quote",
        default=DEFAULT_CSV_QUOTE,
        help="Character surrounding CSV fields; defaults to none",
    )
    parser.add_argument(
        "-p",
        "--csv-parse",
        action="store_true",
        help="Convert numeric CSV values to numbers",
    )
    parser.add_argument(
        "-T",
        "--timeout",
        type=int,
        default=config.request_timeout_ms,
        help="Milliseconds before a bulk request is aborted",
    )
    parser.add_argument(
        "--coerce",
        action="append",
        metavar="FIELD:SENTINEL:REPLACEMENT",
        help="Replace a sentinel field value after transform; repeatable",
    )
    parser.add_argument(
        "--no-coercions",
        action="store_true",
        help="Disable the default Status/UserId sentinel coercions",
    )
    parser.add_argument(
        "--key-field",
        default=DEFAULT_KEY_ALIAS_FIELD,
        help="Document field that receives the original _id value",
    )


def run_import_command(client: ImportClient, args: argparse.Namespace) -> int:
    """Execute one import and print its summary."""
    summary = client.import_file(build_import_run_options(args))
    print_import_summary(summary)
    return 1 if summary.aborted else 0


def build_import_run_options(args: argparse.Namespace) -> RunOptions:
    """Build run options from parsed import arguments."""
    fields = split_option_list(args.fields)
    return RunOptions(
        source_path=args.file,
        input_format=parse_input_format(args.input_format),
        host=args.host,
        index_name=args.index,
        doc_type=args.type,
        bulk_size=args.bulk_size,
        request_timeout_ms=args.timeout,
        ignore_paths=split_option_list(args.ignore),
        warn_errors=args.warn_errors,
        transform_path=args.transform_file,
        delimited=DelimitedOptions(
            fields=fields or None,
            header_fields=args.header_fields,
            delimiter=args.delimiter,
            quote=args.quote,
            auto_parse=args.csv_parse,
        ),
        coercion_rules=build_coercion_rules(args.coerce, args.no_coercions),
        key_alias_field=args.key_field,
    )


def print_import_summary(summary: ImportSummary) -> None:
    """Print one tab-separated summary row."""
    status = "aborted" if summary.aborted else "completed"
    print(
        f"{status}\t"
        f"batches={summary.batch_count}\t"
        f"records={summary.record_count}\t"
        f"errors={summary.failed_count}"
    )
