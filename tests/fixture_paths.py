"""Shared fixture path helpers for tests."""

from __future__ import annotations

from pathlib import Path


def fixture_path(relative_path: str) -> Path:
    """Resolve a path under tests/fixtures, e.g. ``input/records.json``."""
    tests_root = Path(__file__).resolve().parent
    return tests_root / "fixtures" / relative_path
