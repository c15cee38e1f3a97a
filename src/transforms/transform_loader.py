"""User transform hook loader.

This module loads user-provided Python transform files.
It validates a transform(record) callable contract.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import Any, Callable, cast

from core.errors import ImportConfigError

TransformCallable = Callable[[dict[str, Any]], Any]

TRANSFORM_FUNCTION_NAME = "transform"


def load_record_transform(transform_path: str | None) -> TransformCallable | None:
    """Load a record transform callable when provided.

    Args:
        transform_path: Optional path to Python transform file.

    Returns:
        Callable transform or None when path is omitted.

    Raises:
        ImportConfigError: If path is invalid or callable is missing.
    """
    if transform_path is None:
        return None
    resolved_path = Path(transform_path).expanduser().resolve()
    if not resolved_path.is_file():
        raise ImportConfigError(
            f"Transform file not found at {resolved_path}. "
            "Provide a valid --transform-file path."
        )
    module = _load_python_module(resolved_path)
    transform_fn = getattr(module, TRANSFORM_FUNCTION_NAME, None)
    if transform_fn is None or not callable(transform_fn):
        raise ImportConfigError(
            f"Invalid transform file at {resolved_path}: "
            "missing callable transform(record)."
        )
    return cast(TransformCallable, transform_fn)


def _load_python_module(module_path: Path) -> Any:
    """Load Python module from file path."""
    spec = importlib.util.spec_from_file_location("elastic_import_user_transform", str(module_path))
    if spec is None or spec.loader is None:
        raise ImportConfigError(
            f"Failed to load transform module at {module_path}. Verify the file path and syntax."
        )
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as error:
        raise ImportConfigError(
            f"Failed to import transform file at {module_path}: "
            f"{type(error).__name__}: {error}. Fix the file so it imports cleanly and retry."
        ) from error
    return module
