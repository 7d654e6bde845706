"""CLI smoke tests through typer's CliRunner (offline, no network)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ontoalgebra.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _offline_env(monkeypatch) -> None:
    for var in ("LLM_API_KEY", "LLM_PROVIDER", "LLM_MODEL", "LLM_BASE_URL", "ONTOALGEBRA_VERBOSITY"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # handlers bound to the runner's captured stderr
    logger = logging.getLogger("ontoalgebra")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def _dump(tmp_path: Path, name: str, obj) -> str:
    path = tmp_path / name
    path.write_text(json.dumps(obj), encoding="utf-8")
    return str(path)


def test_operations_lists_all_kinds() -> None:
    result = runner.invoke(app, ["operations"])
    assert result.exit_code == 0
    for op in ("addition", "subtraction", "merge", "composition", "division", "transformation"):
        assert op in result.stdout
    assert "addition        Addition (Sum) - Simple union of two ontologies" in result.stdout
    assert "\u2014" not in result.stdout


def test_validate_valid(tmp_path, person) -> None:
    result = runner.invoke(app, ["validate", _dump(tmp_path, "p.json", person)])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"valid": True, "errors": []}


def test_validate_invalid_exits_nonzero(tmp_path) -> None:
    result = runner.invoke(app, ["validate", _dump(tmp_path, "bad.json", {"id": "x"})])
    assert result.exit_code == 1
    assert "Ontology must have a name" in result.stdout


def test_to_turtle_stdout(tmp_path, factory) -> None:
    result = runner.invoke(app, ["to-turtle", _dump(tmp_path, "f.json", factory)])
    assert result.exit_code == 0
    assert result.stdout.startswith("@prefix : <http://example.org/factory-production#> .")
    assert ":Batch_2025_11_01 a :ProductionBatch ." in result.stdout


def test_to_turtle_file(tmp_path, person) -> None:
    out = tmp_path / "out" / "person.ttl"
    result = runner.invoke(app, ["to-turtle", _dump(tmp_path, "p.json", person), "--out", str(out)])
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8").endswith("\n")


def test_to_turtle_rejects_invalid(tmp_path) -> None:
    result = runner.invoke(app, ["to-turtle", _dump(tmp_path, "bad.json", {"name": "No id"})])
    assert result.exit_code == 1


def test_export_graph(tmp_path, ghg) -> None:
    out = tmp_path / "ghg.nt"
    result = runner.invoke(
        app, ["export-graph", _dump(tmp_path, "g.json", ghg), "--out", str(out), "--format", "nt"]
    )
    assert result.exit_code == 0
    assert "triples=" in result.stdout
    assert "<http://example.org/ghg-report#Entry_1>" in out.read_text(encoding="utf-8")


def test_export_graph_unknown_format(tmp_path, ghg) -> None:
    out = tmp_path / "ghg.x"
    result = runner.invoke(
        app, ["export-graph", _dump(tmp_path, "g.json", ghg), "--out", str(out), "--format", "yaml"]
    )
    assert result.exit_code == 1
    assert not out.exists()


def test_prompt(tmp_path, person, factory) -> None:
    a = _dump(tmp_path, "a.json", person)
    b = _dump(tmp_path, "b.json", factory)
    result = runner.invoke(app, ["prompt", "merge", "--a", a, "--b", b])
    assert result.exit_code == 0
    assert result.stdout.startswith("# Task: Ontology Merge (Alignment-based Union)")
    assert "## Required Output Fields:" in result.stdout


def test_prompt_unknown_operation(tmp_path, person) -> None:
    a = _dump(tmp_path, "a.json", person)
    result = runner.invoke(app, ["prompt", "multiplication", "--a", a, "--b", a])
    assert result.exit_code == 1


def test_prompt_missing_operand(tmp_path, person) -> None:
    result = runner.invoke(app, ["prompt", "merge", "--a", _dump(tmp_path, "a.json", person)])
    assert result.exit_code == 1


def test_execute_offline(tmp_path, person) -> None:
    a = _dump(tmp_path, "a.json", person)
    out = tmp_path / "result.json"
    result = runner.invoke(app, ["execute", "addition", "--a", a, "--b", a, "--out", str(out)])
    assert result.exit_code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["metadata"]["operation"] == "addition"


def test_test_llm_offline() -> None:
    result = runner.invoke(app, ["test-llm"])
    assert result.exit_code == 0
    status = json.loads(result.stdout)
    assert status["connected"] is True
    assert status["hasApiKey"] is False


def test_examples(tmp_path) -> None:
    result = runner.invoke(app, ["examples", "--out", str(tmp_path / "ex")])
    assert result.exit_code == 0
    names = sorted(p.name for p in (tmp_path / "ex").iterdir())
    assert names == ["factory.json", "ghg.json", "person.json"]
    person = json.loads((tmp_path / "ex" / "person.json").read_text(encoding="utf-8"))
    assert person["id"] == "person-ontology"
