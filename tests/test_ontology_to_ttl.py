"""Tests for the Turtle projection and the rdflib graph export."""

from __future__ import annotations

import copy

import pytest
from rdflib import Graph, Literal, Namespace
from rdflib.compare import isomorphic
from rdflib.namespace import RDF, RDFS, XSD

from ontoalgebra.ontology import Ontology
from ontoalgebra.ontology_to_ttl import to_graph, to_turtle
from ontoalgebra.validator import validate_ontology

PROPERTY = "<http://www.w3.org/1999/02/22-rdf-syntax-ns#Property>"


@pytest.fixture
def tiny():
    return {
        "id": "t",
        "name": "Tiny",
        "classes": [
            {"id": "A", "superClasses": ["B", "C"]},
            {"id": "B"},
            {"id": "C"},
        ],
        "relations": [
            {"id": "r", "domain": "A", "range": "B", "type": "object"},
            {"id": "d", "domain": "A", "range": "xsd:string", "type": "datatype"},
        ],
        "axioms": [],
        "instances": [
            {
                "id": "i",
                "classId": "A",
                "properties": {
                    "d": "x",
                    "r": ":j",
                    "n": {"value": "1", "type": "xsd:integer"},
                },
            }
        ],
    }


class TestToTurtle:
    def test_exact_layout(self, tiny) -> None:
        expected = "\n".join([
            "@prefix : <http://example.org/t#> .",
            "@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .",
            "@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .",
            "# Ontology: Tiny",
            "",
            "# Classes",
            ":A a rdfs:Class .",
            ":A rdfs:subClassOf :B .",
            ":A rdfs:subClassOf :C .",
            ":B a rdfs:Class .",
            ":C a rdfs:Class .",
            "",
            "# Relations",
            f":r a {PROPERTY} .",
            ":r rdfs:domain :A .",
            ":r rdfs:range :B .",
            f":d a {PROPERTY} .",
            ":d rdfs:domain :A .",
            ":d rdfs:range xsd:string .",
            "",
            "# Instances",
            ":i a :A .",
            ':i :d "x" .',
            ":i :r :j .",
            ':i :n "1"^^xsd:integer .',
        ]) + "\n"
        assert to_turtle(tiny) == expected

    def test_deterministic(self, factory) -> None:
        assert to_turtle(factory) == to_turtle(copy.deepcopy(factory))

    def test_model_and_mapping_agree(self, person) -> None:
        assert to_turtle(Ontology.model_validate(person)) == to_turtle(person)

    def test_empty_blocks_keep_headings(self) -> None:
        ttl = to_turtle({"id": "e", "name": "Empty", "classes": [], "relations": [], "axioms": [], "instances": []})
        assert ttl.endswith("# Classes\n\n# Relations\n\n# Instances\n")

    def test_missing_domain_and_range_emit_no_triples(self) -> None:
        onto = {"id": "o", "name": "O", "classes": [], "relations": [{"id": "p", "type": "object"}], "instances": []}
        ttl = to_turtle(onto)
        assert f":p a {PROPERTY} ." in ttl
        assert "rdfs:domain" not in ttl and "rdfs:range" not in ttl

    def test_typed_literal_wins_over_reference(self) -> None:
        onto = {
            "id": "o",
            "name": "O",
            "classes": [],
            "relations": [],
            "instances": [{"id": "i", "classId": "A", "properties": {"p": {"value": ":x", "type": "xsd:string"}}}],
        }
        assert ':i :p ":x"^^xsd:string .' in to_turtle(onto)

    def test_incomplete_record_is_plain_literal(self) -> None:
        onto = {
            "id": "o",
            "name": "O",
            "classes": [],
            "relations": [],
            "instances": [{"id": "i", "classId": "A", "properties": {"p": {"value": "1"}, "q": 3, "b": True}}],
        }
        ttl = to_turtle(onto)
        assert ':i :p "{\\"value\\": \\"1\\"}" .' in ttl
        assert ':i :q "3" .' in ttl
        assert ':i :b "true" .' in ttl

    def test_literal_escaping(self) -> None:
        onto = {
            "id": "o",
            "name": "O",
            "classes": [],
            "relations": [],
            "instances": [{"id": "i", "classId": "A", "properties": {"note": 'say "hi"\nback\\slash'}}],
        }
        assert ':i :note "say \\"hi\\"\\nback\\\\slash" .' in to_turtle(onto)

    @pytest.mark.parametrize("name", ["person", "factory", "ghg"])
    def test_output_is_parseable_turtle(self, name, request) -> None:
        g = Graph().parse(data=to_turtle(request.getfixturevalue(name)), format="turtle")
        assert len(g) > 0


class TestToGraph:
    @pytest.mark.parametrize("name", ["person", "factory", "ghg"])
    def test_graph_matches_text_projection(self, name, request) -> None:
        onto = request.getfixturevalue(name)
        parsed = Graph().parse(data=to_turtle(onto), format="turtle")
        assert isomorphic(parsed, to_graph(onto))

    def test_triples(self, factory) -> None:
        g = to_graph(factory)
        BASE = Namespace("http://example.org/factory-production#")
        assert (BASE.ProductionBatch, RDF.type, RDFS.Class) in g
        assert (BASE.quantity, RDFS.range, XSD.decimal) in g
        assert (BASE.batchOf, RDFS.range, BASE.Product) in g
        assert (BASE.Batch_2025_11_01, BASE.batchOf, BASE.WidgetX) in g
        assert (BASE.Batch_2025_11_01, BASE.quantity, Literal("1000", datatype=XSD.decimal)) in g

    def test_base_namespace_override(self, person) -> None:
        g = to_graph(person, base_ns="http://acme.test/onto/")
        BASE = Namespace("http://acme.test/onto/")
        assert (BASE.Employee, RDFS.subClassOf, BASE.Person) in g
        assert (BASE.john, BASE.hasName, Literal("John Doe")) in g


class TestLooseFields:
    """Fields the validator does not inspect must not break either projection."""

    @pytest.fixture
    def loose(self):
        return {
            "id": "m",
            "name": "Loose",
            "classes": [
                {"id": "A", "superClasses": 5},
                {"id": "B", "superClasses": "A"},
            ],
            "relations": [],
            "axioms": [],
            "instances": [
                {"id": "i", "classId": "A", "properties": ["x"]},
                {"id": "k", "classId": "B", "properties": 7},
            ],
        }

    def test_loose_ontology_is_valid(self, loose) -> None:
        assert validate_ontology(loose).valid is True

    def test_turtle_ignores_malformed_fields(self, loose) -> None:
        ttl = to_turtle(loose)
        assert "rdfs:subClassOf" not in ttl
        assert ttl.endswith("# Instances\n:i a :A .\n:k a :B .\n")

    def test_graph_ignores_malformed_fields(self, loose) -> None:
        g = to_graph(loose)
        assert list(g.triples((None, RDFS.subClassOf, None))) == []
        parsed = Graph().parse(data=to_turtle(loose), format="turtle")
        assert isomorphic(parsed, g)

    @pytest.mark.parametrize("class_id", [None, ""])
    def test_untyped_instance(self, class_id) -> None:
        onto = {
            "id": "u",
            "name": "Untyped",
            "classes": [],
            "relations": [],
            "axioms": [],
            "instances": [{"id": "i", "classId": class_id, "properties": {"p": "x"}}],
        }
        ttl = to_turtle(onto)
        assert ":i a " not in ttl
        assert ':i :p "x" .' in ttl

        g = to_graph(onto)
        assert list(g.triples((None, RDF.type, None))) == []
        assert isomorphic(Graph().parse(data=ttl, format="turtle"), g)
