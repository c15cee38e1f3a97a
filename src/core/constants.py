"""Core constants used across import modules.

This module centralizes defaults and literal record markers.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_BULK_SIZE = 1000
DEFAULT_REQUEST_TIMEOUT_MS = 30000
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("trace", "debug", "info", "warn", "error")
SUPPORTED_INPUT_FORMATS = ("mongo", "json", "csv")
DEFAULT_CSV_DELIMITER = ","
TAB_DELIMITER_ALIAS = "tab"
DEFAULT_CSV_QUOTE = ""
OBJECT_ID_WRAPPER_KEY = "$oid"
DATE_WRAPPER_KEY = "$date"
NUMBER_LONG_WRAPPER_KEY = "$numberLong"
RECORD_ID_FIELD = "_id"
DEFAULT_KEY_ALIAS_FIELD = "SakeId"
BULK_ACTION_NAME = "index"
FIELD_PATH_WILDCARD = "[*]"
FIELD_PATH_WILDCARD_MARKER = "[*]."
FIELD_PATH_WILDCARD_SEGMENT = "*"
IGNORE_PATH_SEPARATOR = ","
EXPORT_FILE_ENCODING = "utf-8"
