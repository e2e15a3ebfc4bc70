from __future__ import annotations

import json
import shutil
from pathlib import Path

import orjson
import pytest

from cli import main


def _copy_mini_app_fixture(root: Path) -> None:
    fixture_repo = Path(__file__).parent / "fixtures" / "mini_app"
    shutil.copytree(fixture_repo, root)


def _write_clean_repo(root: Path) -> None:
    module_dir = root / "src" / "app" / "core"
    module_dir.mkdir(parents=True)
    (module_dir / "core.module.ts").write_text(
        "@NgModule({ imports: [HttpClientModule] })\nexport class CoreModule {}\n",
        encoding="utf-8",
    )


def test_cli_analyze_console_smoke(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_app_fixture(repo_root)

    exit_code = main(["analyze", str(repo_root)])

    assert exit_code == 0
    captured = capsys.readouterr()
    assert "=== Module Architecture Report ===" in captured.out
    assert "Dependency Violations (2)" in captured.out


def test_cli_analyze_fail_on_violations(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_app_fixture(repo_root)

    assert main(["analyze", str(repo_root), "--fail-on-violations"]) == 1


def test_cli_analyze_clean_project_passes_gate(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _write_clean_repo(repo_root)

    exit_code = main(["analyze", str(repo_root), "--fail-on-violations"])

    assert exit_code == 0
    assert "No dependency violations or cycles found." in capsys.readouterr().out


def test_cli_analyze_json_to_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_app_fixture(repo_root)
    out = tmp_path / "report.json"

    exit_code = main(
        ["analyze", str(repo_root), "--format", "json", "--out", str(out)]
    )

    assert exit_code == 0
    assert f"Report written to: {out}" in capsys.readouterr().err
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["metrics"]["total_modules"] == 5


def test_cli_analyze_records_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    records = tmp_path / "records.json"
    records.write_bytes(
        orjson.dumps(
            [
                {
                    "identity": "A",
                    "origin_path": "a.ts",
                    "kind": "Feature",
                    "declared_dependencies": ["B"],
                },
                {
                    "identity": "B",
                    "origin_path": "b.ts",
                    "kind": "Feature",
                    "declared_dependencies": ["A"],
                },
            ]
        )
    )

    exit_code = main(
        ["analyze", str(tmp_path), "--records", str(records), "--format", "json"]
    )

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["circular_dependencies"] == [["A", "B"]]
    assert len(payload["dependency_violations"]) == 2


def test_cli_analyze_duplicate_records_is_fatal(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    records = tmp_path / "records.json"
    records.write_bytes(
        orjson.dumps(
            [
                {"identity": "A", "origin_path": "a.ts"},
                {"identity": "A", "origin_path": "b.ts"},
            ]
        )
    )

    exit_code = main(["analyze", str(tmp_path), "--records", str(records)])

    assert exit_code == 2
    assert "error:" in capsys.readouterr().err


def test_cli_analyze_missing_root_is_fatal(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(["analyze", str(tmp_path / "missing")])

    assert exit_code == 2
    assert "Project root is not a directory" in capsys.readouterr().err


def test_cli_analyze_bad_config_is_fatal(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _write_clean_repo(repo_root)
    (repo_root / "ngarch.toml").write_text("bogus = 1\n", encoding="utf-8")

    exit_code = main(["analyze", str(repo_root)])

    assert exit_code == 2
    assert "Invalid config" in capsys.readouterr().err


def test_cli_graph_writes_dot(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_app_fixture(repo_root)
    out = tmp_path / "deps.dot"

    exit_code = main(["graph", str(repo_root), "--out", str(out)])

    assert exit_code == 0
    assert f"Dependency graph written to: {out}" in capsys.readouterr().out
    assert out.read_text(encoding="utf-8").startswith("digraph modules {\n")


def test_cli_graph_default_output_in_cwd(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_app_fixture(repo_root)
    monkeypatch.chdir(tmp_path)

    exit_code = main(["graph", str(repo_root)])

    assert exit_code == 0
    assert (tmp_path / "dependency-graph.dot").is_file()


def test_cli_validate_includes_path_and_message(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    records = tmp_path / "missing-records.json"

    exit_code = main(["validate", str(records)])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert f"{records}:" in captured.err
    assert "Records file does not exist." in captured.err


def test_cli_validate_ok(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    records = tmp_path / "records.json"
    records.write_bytes(orjson.dumps([{"identity": "A", "origin_path": "a.ts"}]))

    exit_code = main(["validate", str(records)])

    assert exit_code == 0
    assert "1 module records OK" in capsys.readouterr().out


def test_cli_verify_roundtrip(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_app_fixture(repo_root)
    report = tmp_path / "report.json"

    assert (
        main(["analyze", str(repo_root), "--format", "json", "--out", str(report)])
        == 0
    )
    assert main(["verify", str(repo_root), "--report", str(report)]) == 0


def test_cli_verify_detects_drift(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_app_fixture(repo_root)
    report = tmp_path / "report.json"
    main(["analyze", str(repo_root), "--format", "json", "--out", str(report)])

    (repo_root / "src" / "app" / "shared" / "shared.module.ts").unlink()
    capsys.readouterr()

    exit_code = main(["verify", str(repo_root), "--report", str(report)])

    assert exit_code == 1
    assert "SharedModule" in capsys.readouterr().err


def test_cli_verify_missing_report_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _write_clean_repo(repo_root)
    report = tmp_path / "missing.json"

    exit_code = main(["verify", str(repo_root), "--report", str(report)])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert f"report: {report}" in captured.err
    assert "Report file does not exist" in captured.err


def test_cli_verify_records_file_roundtrip(tmp_path: Path) -> None:
    records = tmp_path / "records.json"
    records.write_bytes(
        orjson.dumps(
            [
                {
                    "identity": "CoreModule",
                    "origin_path": "core.module.ts",
                    "kind": "Core",
                    "declared_dependencies": ["UsersModule"],
                },
                {
                    "identity": "UsersModule",
                    "origin_path": "users.module.ts",
                    "kind": "Feature",
                },
            ]
        )
    )
    report = tmp_path / "report.json"
    common = [str(tmp_path), "--records", str(records)]

    assert main(["analyze", *common, "--format", "json", "--out", str(report)]) == 0
    assert main(["verify", *common, "--report", str(report)]) == 0

    records.write_bytes(
        orjson.dumps([{"identity": "CoreModule", "origin_path": "core.module.ts"}])
    )
    assert main(["verify", *common, "--report", str(report)]) == 1


def test_cli_verify_missing_root_is_fatal(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    report = tmp_path / "report.json"
    report.write_text("{}\n", encoding="utf-8")

    exit_code = main(["verify", str(tmp_path / "missing"), "--report", str(report)])

    assert exit_code == 2
    assert "Project root is not a directory" in capsys.readouterr().err


def test_cli_verify_malformed_records_is_fatal(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    report = tmp_path / "report.json"
    report.write_text("{}\n", encoding="utf-8")
    records = tmp_path / "missing-records.json"

    exit_code = main(
        ["verify", str(tmp_path), "--records", str(records), "--report", str(report)]
    )

    assert exit_code == 2
    assert "Records file does not exist." in capsys.readouterr().err
