from __future__ import annotations

from dotenv import load_dotenv
load_dotenv()

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from pydantic import ValidationError

from ontoalgebra.dispatcher import OperationDispatcher
from ontoalgebra.errors import ExtractionError, OntologyAlgebraError
from ontoalgebra.examples import EXAMPLE_ONTOLOGIES
from ontoalgebra.ontology_to_ttl import to_graph, to_turtle
from ontoalgebra.operations import list_operations
from ontoalgebra.validator import validate_ontology
from ontoalgebra.verbosity import default_verbosity, get_logger, setup_logging

app = typer.Typer(add_completion=False, help="ontoalgebra CLI — validate, serialize and run ontology operations.")

_log = get_logger("ontoalgebra.cli")

GRAPH_FORMATS = ("turtle", "xml", "nt", "json-ld")

# -------------------------
# Helpers
# -------------------------

def read_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))

def write_json(path: str, obj: Any) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")

def write_text(path: str, text: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_text(text, encoding="utf-8")

def _request(operation: str, a: Optional[str], b: Optional[str], aux: Optional[str]) -> Dict[str, Any]:
    aux_obj = read_json(aux) if aux else None
    return {
        "operation": operation,
        "ontologyA": read_json(a) if a else None,
        "ontologyB": read_json(b) if b else None,
        "interfaceSpec": aux_obj,
        "mappingRules": aux_obj,
    }

def _fail(exc: Exception) -> None:
    typer.echo(f"ERROR: {exc}", err=True)
    raise typer.Exit(code=1)


# -------------------------
# Commands
# -------------------------

@app.callback()
def main_callback(
    verbose: int = typer.Option(default_verbosity(), "--verbose", "-v", count=True, help="-v info, -vv debug"),
):
    setup_logging(verbose)


@app.command("operations")
def cmd_operations():
    """
    List the available ontology operations.
    """
    for op in list_operations():
        typer.echo(f"{op['id']:<15} {op['name']} - {op['description']}")


@app.command("validate")
def cmd_validate(
    file: str = typer.Argument(..., help="Path to an ontology JSON file"),
):
    """
    Validate an ontology structure. Exits with code 1 when invalid.
    """
    report = validate_ontology(read_json(file))
    typer.echo(report.model_dump_json(indent=2))
    if not report.valid:
        raise typer.Exit(code=1)


@app.command("to-turtle")
def cmd_to_turtle(
    file: str = typer.Argument(..., help="Path to an ontology JSON file"),
    out: Optional[str] = typer.Option(None, help="Output path for TTL (stdout when omitted)"),
):
    """
    Project an ontology into deterministic Turtle text.
    """
    onto = read_json(file)
    report = validate_ontology(onto)
    if not report.valid:
        _fail(ValueError("; ".join(report.errors)))
    ttl = to_turtle(onto)
    if out:
        write_text(out, ttl)
        typer.echo(f"OK to-turtle: out={out}")
    else:
        typer.echo(ttl, nl=False)


@app.command("export-graph")
def cmd_export_graph(
    file: str = typer.Argument(..., help="Path to an ontology JSON file"),
    out: str = typer.Option(..., help="Output path"),
    fmt: str = typer.Option("turtle", "--format", help=f"RDF format: {', '.join(GRAPH_FORMATS)}"),
    namespace: Optional[str] = typer.Option(None, help="Base namespace override"),
):
    """
    Export an ontology as RDF through rdflib.
    """
    if fmt not in GRAPH_FORMATS:
        _fail(ValueError(f"Unsupported format: {fmt}"))
    g = to_graph(read_json(file), base_ns=namespace)
    Path(out).parent.mkdir(parents=True, exist_ok=True)
    g.serialize(destination=out, format=fmt)
    typer.echo(f"OK export-graph: triples={len(g)} out={out}")


@app.command("prompt")
def cmd_prompt(
    operation: str = typer.Argument(..., help="Operation id (see `operations`)"),
    a: Optional[str] = typer.Option(None, "--a", help="Ontology A JSON (source / full)"),
    b: Optional[str] = typer.Option(None, "--b", help="Ontology B JSON (target / known)"),
    aux: Optional[str] = typer.Option(None, "--aux", help="Interface spec or mapping rules JSON"),
):
    """
    Print the LLM task text for an operation without executing it.
    """
    try:
        preview = OperationDispatcher().preview(_request(operation, a, b, aux))
    except (OntologyAlgebraError, ValidationError) as exc:
        _fail(exc)
    typer.echo(preview["prompt"], nl=False)


@app.command("execute")
def cmd_execute(
    operation: str = typer.Argument(..., help="Operation id (see `operations`)"),
    a: Optional[str] = typer.Option(None, "--a", help="Ontology A JSON (source / full)"),
    b: Optional[str] = typer.Option(None, "--b", help="Ontology B JSON (target / known)"),
    aux: Optional[str] = typer.Option(None, "--aux", help="Interface spec or mapping rules JSON"),
    out: Optional[str] = typer.Option(None, help="Output path for the result JSON (stdout when omitted)"),
    temperature: Optional[float] = typer.Option(None, help="Sampling temperature"),
    max_tokens: Optional[int] = typer.Option(None, help="Token budget for the answer"),
    provider: Optional[str] = typer.Option(None, help="Override LLM_PROVIDER"),
    model: Optional[str] = typer.Option(None, help="Override LLM_MODEL"),
):
    """
    Run an operation through the LLM collaborator (offline answers without LLM_API_KEY).
    """
    request = _request(operation, a, b, aux)
    request["options"] = {"temperature": temperature, "maxTokens": max_tokens}
    try:
        dispatcher = OperationDispatcher.from_env(provider=provider, model=model)
        result = asyncio.run(dispatcher.execute(request))
    except ExtractionError as exc:
        _log.debug("Raw LLM output:\n%s", exc.raw_text)
        _fail(exc)
    except (OntologyAlgebraError, ValidationError) as exc:
        _fail(exc)

    if out:
        write_json(out, result)
        typer.echo(f"OK execute: operation={operation} out={out}")
    else:
        typer.echo(json.dumps(result, ensure_ascii=False, indent=2))


@app.command("test-llm")
def cmd_test_llm(
    provider: Optional[str] = typer.Option(None, help="Override LLM_PROVIDER"),
    model: Optional[str] = typer.Option(None, help="Override LLM_MODEL"),
):
    """
    Check the collaborator connection.
    """
    try:
        dispatcher = OperationDispatcher.from_env(provider=provider, model=model)
    except ValidationError as exc:
        _fail(exc)
    status = asyncio.run(dispatcher.test_connection())
    typer.echo(json.dumps(status, indent=2))
    if not status["connected"]:
        raise typer.Exit(code=1)


@app.command("examples")
def cmd_examples(
    out: str = typer.Option("./examples", help="Output folder for the example ontologies"),
):
    """
    Write the bundled example ontologies (person, factory, ghg) as JSON files.
    """
    for name, onto in EXAMPLE_ONTOLOGIES.items():
        write_json(str(Path(out) / f"{name}.json"), onto)
    typer.echo(f"OK examples: {', '.join(EXAMPLE_ONTOLOGIES)} out={out}")


def main():
    app()


if __name__ == "__main__":
    main()
