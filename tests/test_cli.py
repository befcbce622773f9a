from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

from typer.testing import CliRunner

from foliosite.cli import app


def test_build_generates_pages(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project()

    result = runner.invoke(app, ["build", "--config", str(project)])

    assert result.exit_code == 0, result.output
    assert "Build complete" in result.output
    assert (project / "index.html").exists()
    assert (project / "reading.html").exists()


def test_build_with_verify_and_report(make_project: Callable[..., Path], tmp_path: Path) -> None:
    runner = CliRunner()
    project = make_project()
    report = tmp_path / "build-report.json"

    result = runner.invoke(
        app,
        ["build", "--config", str(project / "foliosite.yml"), "--verify", "--report", str(report)],
    )

    assert result.exit_code == 0, result.output
    assert "Verification passed" in result.output
    assert json.loads(report.read_text(encoding="utf-8"))["collections"]["reading"] == 1


def test_build_failure_exits_non_zero(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project()
    (project / "data" / "featured.json").write_text(
        json.dumps([{"id": "x", "title": "X", "timeframe": "2025", "problem": "p", "impact": "i", "bogus": 1}]),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["build", "--config", str(project)])

    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "bogus" in result.output
    assert not (project / "index.html").exists()


def test_build_reports_missing_assets(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project(with_images=False)

    result = runner.invoke(app, ["build", "--config", str(project)])

    assert result.exit_code == 0, result.output
    assert "Missing assets" in result.output


def test_validate_reports_counts(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project()

    result = runner.invoke(app, ["validate", "--config", str(project)])

    assert result.exit_code == 0, result.output
    assert "Content valid" in result.output
    assert not (project / "index.html").exists()


def test_validate_failure(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project()
    (project / "data" / "skills.json").unlink()

    result = runner.invoke(app, ["validate", "--config", str(project)])

    assert result.exit_code == 1
    assert "Validation failed" in result.output


def test_verify_requires_built_pages(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project()

    result = runner.invoke(app, ["verify", "--config", str(project)])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_verify_after_build(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project()
    assert runner.invoke(app, ["build", "--config", str(project)]).exit_code == 0

    result = runner.invoke(app, ["verify", "--config", str(project), "--strict"])

    assert result.exit_code == 0, result.output
    assert "Verification passed" in result.output


def test_verify_fails_on_tampered_page(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project()
    assert runner.invoke(app, ["build", "--config", str(project)]).exit_code == 0
    index = project / "index.html"
    index.write_text(index.read_text(encoding="utf-8") + '<a href="javascript:void(0)">x</a>', encoding="utf-8")

    result = runner.invoke(app, ["verify", "--config", str(project)])

    assert result.exit_code == 1
    assert "unsafe-scheme" in result.output


def test_missing_config_file_is_a_usage_error(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["build", "--config", str(tmp_path / "missing.yml")])

    assert result.exit_code == 2


def test_asset_root_outside_output_is_a_usage_error(make_project: Callable[..., Path]) -> None:
    runner = CliRunner()
    project = make_project()
    (project / "foliosite.yml").write_text("output_dir: public\nasset_root: .\n", encoding="utf-8")

    result = runner.invoke(app, ["build", "--config", str(project)])

    assert result.exit_code == 2
    assert not (project / "public").exists()
