# ontoalgebra/examples.py
"""Example ontologies: person, factory production, GHG reporting."""
from __future__ import annotations

import copy
from typing import Any, Dict


def _cls(cid: str, name: str, supers=None, **metadata: Any) -> Dict[str, Any]:
    return {"id": cid, "name": name, "superClasses": list(supers or []), "metadata": metadata}


def _rel(rid: str, name: str, domain: str, rng: str, rtype: str, constraints=None, **metadata: Any) -> Dict[str, Any]:
    return {
        "id": rid,
        "name": name,
        "domain": domain,
        "range": rng,
        "type": rtype,
        "constraints": constraints or {},
        "metadata": metadata,
    }


PERSON = {
    "id": "person-ontology",
    "name": "Person Ontology",
    "version": "1.0",
    "metadata": {"description": "Simple ontology for person information"},
    "classes": [
        _cls("Person", "Person", description="A human being"),
        _cls("Employee", "Employee", ["Person"], description="A person employed by an organization"),
        _cls("Address", "Address", description="Physical address"),
    ],
    "relations": [
        _rel("hasName", "has name", "Person", "xsd:string", "datatype", {"functional": True}),
        _rel("hasAddress", "has address", "Person", "Address", "object"),
        _rel("worksAt", "works at", "Employee", "xsd:string", "datatype"),
    ],
    "axioms": [
        {
            "id": "employee-subclass",
            "type": "subClassOf",
            "statement": {"subClass": "Employee", "superClass": "Person"},
            "description": "Employee is a subclass of Person",
        }
    ],
    "instances": [
        {
            "id": "john",
            "classId": "Employee",
            "properties": {"hasName": "John Doe", "worksAt": "Acme Corp"},
            "metadata": {},
        }
    ],
    "vocabulary": {},
}

FACTORY = {
    "id": "factory-production",
    "name": "Factory Production",
    "version": "1.0",
    "metadata": {"description": "Ontology for factory production tracking"},
    "classes": [
        _cls("Factory", "Factory"),
        _cls("ProductionBatch", "Production Batch"),
        _cls("Product", "Product"),
    ],
    "relations": [
        _rel("produces", "produces", "Factory", "ProductionBatch", "object"),
        _rel("batchOf", "batch of", "ProductionBatch", "Product", "object"),
        _rel("quantity", "quantity", "ProductionBatch", "xsd:decimal", "datatype"),
        _rel("timestamp", "timestamp", "ProductionBatch", "xsd:dateTime", "datatype"),
    ],
    "axioms": [],
    "instances": [
        {"id": "F1", "classId": "Factory", "properties": {}, "metadata": {"name": "Factory 1"}},
        {
            "id": "Batch_2025_11_01",
            "classId": "ProductionBatch",
            "properties": {
                "batchOf": ":WidgetX",
                "quantity": {"value": "1000", "type": "xsd:decimal"},
                "timestamp": {"value": "2025-11-01T08:00:00", "type": "xsd:dateTime"},
            },
            "metadata": {},
        },
        {"id": "WidgetX", "classId": "Product", "properties": {}, "metadata": {"name": "Widget X"}},
    ],
    "vocabulary": {},
}

GHG = {
    "id": "ghg-report",
    "name": "GHG Report",
    "version": "1.0",
    "metadata": {"description": "Ontology for GHG emission reporting"},
    "classes": [
        _cls("EmissionReport", "Emission Report"),
        _cls("EmissionEntry", "Emission Entry"),
        _cls("EmissionSource", "Emission Source"),
    ],
    "relations": [
        _rel("hasSource", "has source", "EmissionReport", "EmissionEntry", "object"),
        _rel("sourceFor", "source for", "EmissionEntry", "xsd:string", "datatype",
             description="Reference to production batch"),
        _rel("activity", "activity", "EmissionEntry", "xsd:decimal", "datatype",
             description="Activity amount (e.g., production quantity)"),
        _rel("emissionFactor", "emission factor", "EmissionEntry", "xsd:decimal", "datatype",
             description="Emission factor (e.g., kgCO2e per unit)"),
        _rel("emissions", "emissions", "EmissionEntry", "xsd:decimal", "datatype",
             description="Calculated emissions (kgCO2e)"),
    ],
    "axioms": [],
    "instances": [
        {
            "id": "Entry_1",
            "classId": "EmissionEntry",
            "properties": {
                "sourceFor": "Batch_2025_11_01",
                "activity": {"value": "1000", "type": "xsd:decimal"},
                "emissionFactor": {"value": "0.75", "type": "xsd:decimal"},
                "emissions": {"value": "750", "type": "xsd:decimal"},
            },
            "metadata": {},
        }
    ],
    "vocabulary": {},
}

EXAMPLE_ONTOLOGIES: Dict[str, Dict[str, Any]] = {
    "person": PERSON,
    "factory": FACTORY,
    "ghg": GHG,
}


def get_example(name: str) -> Dict[str, Any]:
    """Deep copy of a bundled example, safe to modify."""
    try:
        return copy.deepcopy(EXAMPLE_ONTOLOGIES[name])
    except KeyError:
        raise KeyError(f"Unknown example: {name} (available: {', '.join(EXAMPLE_ONTOLOGIES)})") from None
