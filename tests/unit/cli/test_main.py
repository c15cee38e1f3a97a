"""Unit tests for CLI entry points."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.main import main
from tests.bulk_fakes import FakeBulkBackend
from tests.fixture_paths import fixture_path


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeBulkBackend:
    fake_backend = FakeBulkBackend()
    monkeypatch.setattr("ingest.pipeline.create_bulk_backend", lambda options: fake_backend)
    for variable_name in (
        "ELASTIC_IMPORT_BULK_SIZE",
        "ELASTIC_IMPORT_TIMEOUT_MS",
        "ELASTIC_IMPORT_LOG_LEVEL",
    ):
        monkeypatch.delenv(variable_name, raising=False)
    return fake_backend


def _summary_rows(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.startswith(("completed", "aborted"))]


def test_import_json_prints_summary(
    backend: FakeBulkBackend,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """A successful import should print a completed row and exit zero."""
    exit_code = main(
        [
            "import",
            str(fixture_path("input/records.json")),
            "localhost:9200",
            "users",
            "_doc",
            "--json",
            "-b",
            "2",
            "-i",
            "password,items[*].b",
        ]
    )

    assert exit_code == 0
    assert _summary_rows(capsys.readouterr().out) == [
        "completed\tbatches=2\trecords=3\terrors=0"
    ]
    assert "password" not in backend.documents[1]


def test_import_requires_input_format(backend: FakeBulkBackend) -> None:
    """Omitting --mongo, --json, or --csv should be a usage error."""
    with pytest.raises(SystemExit) as error:
        main(["import", str(fixture_path("input/records.json")), "h", "users", "_doc"])

    assert error.value.code == 2


def test_import_rejects_conflicting_formats(backend: FakeBulkBackend) -> None:
    """Only one input format flag may be given."""
    with pytest.raises(SystemExit):
        main(
            [
                "import",
                str(fixture_path("input/records.json")),
                "h",
                "users",
                "_doc",
                "--json",
                "--csv",
            ]
        )


def test_import_missing_file_exits_non_zero(backend: FakeBulkBackend, tmp_path: Path) -> None:
    """A missing input file should fail before any request is sent."""
    exit_code = main(["import", str(tmp_path / "missing.json"), "h", "users", "_doc", "--json"])

    assert exit_code == 1
    assert backend.calls == []


def test_import_with_custom_type_sends_typeless_actions(backend: FakeBulkBackend) -> None:
    """A named document type should be accepted but left out of bulk actions."""
    exit_code = main(["import", str(fixture_path("input/records.json")), "h", "users", "user", "--json"])

    assert exit_code == 0
    assert backend.actions
    assert all("_type" not in action["index"] for action in backend.actions)


def test_import_broken_transform_exits_non_zero(backend: FakeBulkBackend, tmp_path: Path) -> None:
    """A transform file that fails to import should fail before any request."""
    transform_file = tmp_path / "transform.py"
    transform_file.write_text("def transform(record)\n", encoding="utf-8")

    exit_code = main(
        [
            "import",
            str(fixture_path("input/records.json")),
            "h",
            "users",
            "_doc",
            "--json",
            "--transform-file",
            str(transform_file),
        ]
    )

    assert exit_code == 1
    assert backend.calls == []


def test_import_aborts_on_item_errors(
    monkeypatch: pytest.MonkeyPatch,
    backend: FakeBulkBackend,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Failed documents without warn mode should abort with exit code one."""
    failing_backend = FakeBulkBackend({0: [0]})
    monkeypatch.setattr("ingest.pipeline.create_bulk_backend", lambda options: failing_backend)

    exit_code = main(
        ["import", str(fixture_path("input/records.json")), "h", "users", "_doc", "--json", "-b", "1"]
    )

    assert exit_code == 1
    assert len(failing_backend.calls) == 1
    assert _summary_rows(capsys.readouterr().out) == ["aborted\tbatches=1\trecords=1\terrors=1"]


def test_import_warn_errors_finishes_run(
    monkeypatch: pytest.MonkeyPatch,
    backend: FakeBulkBackend,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Warn mode should finish every batch and exit zero."""
    failing_backend = FakeBulkBackend({0: [0]})
    monkeypatch.setattr("ingest.pipeline.create_bulk_backend", lambda options: failing_backend)

    exit_code = main(
        [
            "import",
            str(fixture_path("input/records.json")),
            "h",
            "users",
            "_doc",
            "--json",
            "-b",
            "1",
            "--warn-errors",
        ]
    )

    assert exit_code == 0
    assert len(failing_backend.calls) == 3
    assert _summary_rows(capsys.readouterr().out) == [
        "completed\tbatches=3\trecords=3\terrors=1"
    ]


def test_import_csv_with_custom_coercion(backend: FakeBulkBackend) -> None:
    """CSV options and explicit coercions should shape the documents."""
    exit_code = main(
        [
            "import",
            str(fixture_path("input/users.csv")),
            "h",
            "users",
            "_doc",
            "--csv",
            "-H",
            "-p",
            "--coerce",
            "name:Ada:null",
        ]
    )

    assert exit_code == 0
    assert backend.documents == [
        {"id": 1, "name": None, "age": 36},
        {"id": 2, "name": "Bob", "age": 41.5},
    ]


def test_import_rejects_invalid_environment(
    monkeypatch: pytest.MonkeyPatch,
    backend: FakeBulkBackend,
) -> None:
    """Invalid environment defaults should exit non-zero."""
    monkeypatch.setenv("ELASTIC_IMPORT_BULK_SIZE", "zero")

    exit_code = main(["import", str(fixture_path("input/records.json")), "h", "i", "_doc", "--json"])

    assert exit_code == 1
    assert backend.calls == []


def test_run_spec_prints_one_row_per_job(
    backend: FakeBulkBackend,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Run-spec command should execute every job in order."""
    spec_file = tmp_path / "import.yaml"
    spec_file.write_text(
        "\n".join(
            [
                "version: 1",
                "defaults:",
                "  host: localhost:9200",
                "  index: users",
                "  type: _doc",
                "jobs:",
                f"  - file: {fixture_path('input/records.json')}",
                "    format: json",
                f"  - file: {fixture_path('input/export.jsonl')}",
                "    format: mongo",
                "    index: posts",
                "",
            ]
        ),
        encoding="utf-8",
    )

    exit_code = main(["run-spec", str(spec_file)])

    assert exit_code == 0
    assert _summary_rows(capsys.readouterr().out) == [
        "completed\tbatches=1\trecords=3\terrors=0",
        "completed\tbatches=1\trecords=3\terrors=0",
    ]
    assert backend.actions[-1]["index"]["_index"] == "posts"
