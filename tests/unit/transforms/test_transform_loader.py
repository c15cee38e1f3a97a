"""Unit tests for transform hook loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import ImportConfigError
from tests.fixture_paths import fixture_path
from transforms.transform_loader import load_record_transform


def test_load_record_transform_returns_none_without_path() -> None:
    """Omitting transform path should return None."""
    transform = load_record_transform(None)

    assert transform is None


def test_load_record_transform_raises_for_missing_file(tmp_path: Path) -> None:
    """Missing transform file should raise config error."""
    with pytest.raises(ImportConfigError):
        load_record_transform(str(tmp_path / "missing.py"))


def test_load_record_transform_raises_without_callable() -> None:
    """Files without transform(record) should be rejected."""
    with pytest.raises(ImportConfigError):
        load_record_transform(str(fixture_path("transforms/no_function.py")))


@pytest.mark.parametrize(
    ("source_text", "error_name"),
    [
        ("def transform(record)\n    return record\n", "SyntaxError"),
        ("import missing_transform_dependency_xyz\n", "ModuleNotFoundError"),
        ("raise RuntimeError('setup failed')\n", "RuntimeError"),
    ],
)
def test_load_record_transform_wraps_import_failures(
    tmp_path: Path,
    source_text: str,
    error_name: str,
) -> None:
    """Files that fail while importing should raise config errors."""
    transform_file = tmp_path / "transform.py"
    transform_file.write_text(source_text, encoding="utf-8")

    with pytest.raises(ImportConfigError, match=error_name):
        load_record_transform(str(transform_file))


def test_load_record_transform_loads_callable() -> None:
    """Valid transform file should load a working callable."""
    transform = load_record_transform(str(fixture_path("transforms/tag_transform.py")))
    record: dict[str, object] = {"Status": ""}

    assert transform is not None
    assert transform(record) is None
    assert record == {"Status": "", "imported": True, "raw_status_seen": True}
