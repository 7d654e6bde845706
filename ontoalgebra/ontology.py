# ontoalgebra/ontology.py
"""
Dynamic ontology model: O = (C, R, A, I, Σ)

  C — classes          R — relations
  A — axioms           I — instance space
  Σ — vocabulary (shared prefixes / terms)

Wire names are camelCase (``superClasses``, ``classId``) so that the
models round-trip the JSON exchanged with the LLM collaborator.
Open bags (metadata, constraints, statement, vocabulary, properties)
are schema-free dicts.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Range / datatype tags carrying this prefix are external scalar types,
# not references to a declared class.
SCALAR_TYPE_PREFIX = "xsd:"

# Property values starting with this marker point to another instance.
REFERENCE_PREFIX = ":"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class OntologyClass(_WireModel):
    id: str
    name: str = ""
    super_classes: List[str] = Field(default_factory=list, alias="superClasses")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Relation(_WireModel):
    id: str
    name: str = ""
    domain: Optional[str] = None
    range: Optional[str] = None
    type: str = "object"
    constraints: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Axiom(_WireModel):
    id: str
    type: str
    statement: Dict[str, Any] = Field(default_factory=dict)
    description: str = ""


class Instance(_WireModel):
    id: str
    class_id: Optional[str] = Field(None, alias="classId")
    properties: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Ontology(_WireModel):
    id: str
    name: str
    version: str = "1.0"
    metadata: Dict[str, Any] = Field(default_factory=dict)

    classes: List[OntologyClass] = Field(default_factory=list)
    relations: List[Relation] = Field(default_factory=list)
    axioms: List[Axiom] = Field(default_factory=list)
    instances: List[Instance] = Field(default_factory=list)

    vocabulary: Dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Wire-shaped mapping (camelCase keys, unset optionals dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def class_ids(self) -> List[str]:
        return [c.id for c in self.classes]


def is_scalar_type(tag: Any) -> bool:
    return isinstance(tag, str) and tag.startswith(SCALAR_TYPE_PREFIX)


def is_reference(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(REFERENCE_PREFIX)


def as_mapping(ontology: Any) -> Any:
    """Return the wire mapping for a model; other values pass through untouched."""
    if isinstance(ontology, Ontology):
        return ontology.to_dict()
    return ontology


def create_empty(id: str, name: str) -> Ontology:
    """Empty ontology template stamped with its creation time."""
    return Ontology(
        id=id,
        name=name,
        version="1.0",
        metadata={
            "created": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "description": "",
        },
    )
