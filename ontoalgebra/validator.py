# ontoalgebra/validator.py
"""
Structural validation of a dynamic ontology.

Works on raw mappings as well as ``Ontology`` models so that untrusted
collaborator output can be diagnosed without first being coerced.
Never raises: malformed input becomes an error string.

Not checked (lenient on purpose, see DESIGN.md):
  - axiom statements referencing live class / relation ids
  - instance ``classId`` referencing a declared class
  - cycles in ``superClasses``
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Set

from pydantic import BaseModel, Field

from ontoalgebra.ontology import as_mapping, is_scalar_type

COLLECTION_FIELDS = ("classes", "relations", "axioms", "instances")


class ValidationReport(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)


def _get(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, Mapping) else None


def _resolves(ref: Any, known: Set[str]) -> bool:
    return isinstance(ref, str) and ref in known


def _class_ids(classes: list) -> Set[str]:
    ids = set()
    for c in classes:
        cid = _get(c, "id")
        if isinstance(cid, str):
            ids.add(cid)
    return ids


def validate_ontology(ontology: Any) -> ValidationReport:
    data = as_mapping(ontology)
    errors: List[str] = []

    if not _get(data, "id"):
        errors.append("Ontology must have an id")
    if not _get(data, "name"):
        errors.append("Ontology must have a name")
    for field in COLLECTION_FIELDS:
        if not isinstance(_get(data, field), list):
            errors.append(f"{field} must be a list")

    classes = _get(data, "classes")
    relations = _get(data, "relations")
    if isinstance(classes, list) and isinstance(relations, list):
        known = _class_ids(classes)
        for rel in relations:
            if _get(rel, "type") != "object":
                continue
            rel_id = _get(rel, "id")
            domain = _get(rel, "domain")
            rng = _get(rel, "range")
            if domain and not _resolves(domain, known):
                errors.append(f"Relation {rel_id} references unknown domain class {domain}")
            if rng and not _resolves(rng, known) and not is_scalar_type(rng):
                errors.append(f"Relation {rel_id} references unknown range class {rng}")

    return ValidationReport(valid=not errors, errors=errors)
