# ontoalgebra/operations.py
"""
Operation contracts for the dynamic ontology algebra.

Each of the six operations is a closed ``OperationKind`` paired with an
``OperationContract``: the task text sent to the LLM collaborator (inputs
embedded verbatim as JSON, ordered instructions) plus the exact output
shape it must return.

  addition        O_A ⊕ O_B           disjoint union
  subtraction     O_A \\ O_B           set difference
  merge           pushout with alignment
  composition     pushout along an interface
  division        find O_x with O_known ⊕ O_x ≈ O_full
  transformation  map source data onto a target schema
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ontoalgebra.errors import MissingOperandError, UnknownOperationError
from ontoalgebra.ontology import as_mapping


class OperationKind(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MERGE = "merge"
    COMPOSITION = "composition"
    DIVISION = "division"
    TRANSFORMATION = "transformation"


class OperationContract(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    name: str
    description: str
    heading: str
    preamble: str
    input_labels: List[str]
    auxiliary_label: Optional[str] = None
    auxiliary_default: Optional[Dict[str, Any]] = None
    instructions: List[str]
    required_fields: List[str]
    constraints: List[str] = Field(default_factory=list)
    output_example: Dict[str, Any]


def parse_operation(value: Any) -> OperationKind:
    """Resolve an operation id at the boundary; anything else is rejected."""
    if isinstance(value, OperationKind):
        return value
    try:
        return OperationKind(value)
    except ValueError:
        raise UnknownOperationError(value, [k.value for k in OperationKind]) from None


# ── Output examples ─────────────────────────────────────────────────

def _result_example(ontology_id: str, name: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "id": ontology_id,
        "name": name,
        "version": "1.0",
        "metadata": metadata or {},
        "classes": [
            {"id": "ClassId", "name": "Class name", "superClasses": [], "metadata": {}},
        ],
        "relations": [
            {
                "id": "relationId",
                "name": "relation name",
                "domain": "ClassId",
                "range": "xsd:string",
                "type": "datatype",
                "constraints": {},
                "metadata": {},
            },
        ],
        "axioms": [
            {
                "id": "axiomId",
                "type": "subClassOf",
                "statement": {"subClass": "ClassId", "superClass": "ParentClassId"},
                "description": "human-readable description",
            },
        ],
        "instances": [
            {"id": "instanceId", "classId": "ClassId", "properties": {"relationId": "value"}, "metadata": {}},
        ],
        "vocabulary": {},
    }


def _step(head: str, *details: str) -> str:
    return "\n".join([head] + [f"   - {d}" for d in details])


# ── Contracts ───────────────────────────────────────────────────────

_ADDITION = OperationContract(
    kind=OperationKind.ADDITION,
    name="Addition (Sum)",
    description="Simple union of two ontologies without considering alignments",
    heading="Ontology Addition (Disjoint Union)",
    preamble=(
        "You are performing a SIMPLE ADDITION (disjoint union) of two ontologies.\n"
        "This operation creates a union WITHOUT trying to align or merge similar concepts.\n"
        "All classes, relations, and instances from both ontologies are preserved as separate entities."
    ),
    input_labels=["Ontology A", "Ontology B"],
    instructions=[
        "Combine all classes from both ontologies (keep them separate even if names are similar)",
        "Combine all relations from both ontologies",
        "Combine all axioms from both ontologies",
        "Combine all instances from both ontologies",
        "Prefix class/relation IDs to avoid collisions (e.g., A_Person, B_Human)",
        "Note any potential name conflicts but DO NOT merge them",
    ],
    required_fields=[
        "result",
        "metadata.operation",
        "metadata.sourceOntologies",
        "metadata.conflicts",
        "metadata.statistics",
    ],
    constraints=['`metadata.operation` is "addition"'],
    output_example={
        "result": _result_example("combined-ontology-id", "A + B"),
        "metadata": {
            "operation": "addition",
            "sourceOntologies": ["A", "B"],
            "conflicts": ["list of potential name conflicts"],
            "statistics": {"totalClasses": 0, "totalRelations": 0, "totalInstances": 0},
        },
    },
)

_SUBTRACTION = OperationContract(
    kind=OperationKind.SUBTRACTION,
    name="Subtraction (Difference)",
    description="Remove components of ontology B from ontology A",
    heading="Ontology Subtraction (Set Difference)",
    preamble=(
        "You are performing SUBTRACTION: removing all elements of Ontology B from Ontology A.\n"
        "This operation removes classes, relations, axioms, and instances that appear in B from A."
    ),
    input_labels=["Ontology A (base)", "Ontology B (to remove)"],
    instructions=[
        "Identify matching elements between A and B (by ID or semantic similarity)",
        _step(
            "Remove from A:",
            "Classes that match B's classes",
            "Relations that match B's relations",
            "Axioms that reference removed classes/relations",
            "Instances of removed classes",
        ),
        "Ensure referential integrity (remove dangling references)",
        "Document what was removed and why",
    ],
    required_fields=[
        "result",
        "metadata.operation",
        "metadata.removed.classes",
        "metadata.removed.relations",
        "metadata.removed.instances",
        "metadata.reasoning",
    ],
    constraints=['`metadata.operation` is "subtraction"'],
    output_example={
        "result": _result_example("subtracted-ontology-id", "A - B"),
        "metadata": {
            "operation": "subtraction",
            "removed": {
                "classes": ["list of removed class IDs"],
                "relations": ["list of removed relation IDs"],
                "instances": ["list of removed instance IDs"],
            },
            "reasoning": ["explanations for each removal"],
        },
    },
)

MERGE_CONFIDENCE_THRESHOLD = 0.8

_MERGE = OperationContract(
    kind=OperationKind.MERGE,
    name="Merge (Alignment-based Union)",
    description="Merge two ontologies by identifying alignments and resolving conflicts",
    heading="Ontology Merge (Alignment-based Union)",
    preamble=(
        "You are performing an INTELLIGENT MERGE of two ontologies.\n"
        "This operation identifies semantic correspondences (alignments) between concepts "
        "and merges them appropriately."
    ),
    input_labels=["Ontology A", "Ontology B"],
    instructions=[
        _step(
            "**Alignment Phase**: Identify correspondences between A and B",
            "Find semantically equivalent classes (e.g., Person ≡ Human)",
            "Find equivalent relations (e.g., hasName ≡ name)",
            "Assign confidence scores (0.0 to 1.0)",
        ),
        _step(
            f"**Merge Phase**: For each alignment with confidence > {MERGE_CONFIDENCE_THRESHOLD}:",
            "Unify the concepts under a single ID",
            "Merge their properties and constraints",
            "Resolve conflicts (e.g., different cardinalities)",
        ),
        _step(
            "**Conflict Resolution**: For contradictions:",
            "List all detected conflicts",
            "Propose 2-3 resolution strategies for each",
            "Select the most reasonable one",
        ),
        "**Integration**: Add non-aligned elements from both ontologies",
    ],
    required_fields=[
        "result",
        "alignments",
        "conflicts",
        "metadata.operation",
        "metadata.alignmentCount",
        "metadata.conflictCount",
    ],
    constraints=[
        "`alignments[].confidence` is a number between 0.0 and 1.0",
        "`metadata.alignmentCount` equals the length of `alignments`",
        "`metadata.conflictCount` equals the length of `conflicts`",
    ],
    output_example={
        "result": _result_example("merged-ontology-id", "A ∪ B (merged)"),
        "alignments": [
            {
                "sourceA": "class/relation ID from A",
                "sourceB": "class/relation ID from B",
                "confidence": 0.95,
                "reasoning": "explanation",
            }
        ],
        "conflicts": [
            {
                "description": "conflict description",
                "resolutionStrategies": ["strategy 1", "strategy 2"],
                "selectedStrategy": "strategy 1",
                "reasoning": "why this was chosen",
            }
        ],
        "metadata": {"operation": "merge", "alignmentCount": 1, "conflictCount": 1},
    },
)

_COMPOSITION = OperationContract(
    kind=OperationKind.COMPOSITION,
    name="Composition (Interface-based Connection)",
    description="Compose two ontologies by connecting through a shared interface",
    heading="Ontology Composition (Interface-based)",
    preamble=(
        "You are performing COMPOSITION: connecting two ontologies through a shared interface.\n"
        "Ontology A's output types should match Ontology B's input types through the interface."
    ),
    input_labels=["Ontology A", "Ontology B"],
    auxiliary_label="Interface Specification",
    auxiliary_default={"description": "Auto-detect compatible interfaces"},
    instructions=[
        _step(
            "**Interface Detection**: Identify compatible connection points",
            "Output classes/relations from A that can feed into B",
            "Input classes/relations in B that can receive from A",
            'Example: A\'s "ProductionBatch" → B\'s "EmissionEntry.sourceFor"',
        ),
        _step(
            "**Connection**: Create linking relations",
            "Add relations that connect A's outputs to B's inputs",
            "Ensure type compatibility",
        ),
        _step(
            "**Composition**: Build the composed ontology",
            "Include all elements from A and B",
            "Add interface relations",
            "Propagate constraints",
        ),
    ],
    required_fields=[
        "result",
        "interface.connections",
        "metadata.operation",
        "metadata.connectionCount",
    ],
    constraints=["`metadata.connectionCount` equals the length of `interface.connections`"],
    output_example={
        "result": _result_example("composed-ontology-id", "A ∘ B (composed)"),
        "interface": {
            "connections": [
                {
                    "fromA": "class/relation ID",
                    "toB": "class/relation ID",
                    "linkRelation": "new relation connecting them",
                    "reasoning": "explanation",
                }
            ]
        },
        "metadata": {"operation": "composition", "connectionCount": 1},
    },
)

DIVISION_CERTAINTY = ("high", "medium", "low")

_DIVISION = OperationContract(
    kind=OperationKind.DIVISION,
    name="Division (Inverse/Decomposition)",
    description="Given a merged ontology and one component, reconstruct the missing component",
    heading="Ontology Division (Inverse Problem)",
    preamble=(
        "You are performing DIVISION: reconstructing a missing ontology component.\n"
        "Given the full (merged) ontology and one known component, infer what the unknown "
        "component should be."
    ),
    input_labels=["Full Ontology (merged result)", "Known Component"],
    instructions=[
        _step(
            "**Difference Analysis**: Identify elements in Full that are NOT in Known",
            "Classes unique to Full",
            "Relations unique to Full",
            "Instances and axioms not explained by Known",
        ),
        _step(
            "**Pattern Inference**: Look for coherent patterns in the difference",
            "Group related classes/relations",
            "Identify the conceptual domain of the missing component",
        ),
        _step(
            "**Reconstruction**: Build the most plausible unknown component",
            "Apply Occam's razor (simplest explanation)",
            "Ensure it's coherent and self-contained",
            "When composed with Known, it should approximate Full",
        ),
        "**Validation**: Check that Known + Unknown ≈ Full",
    ],
    required_fields=[
        "result",
        "analysis.uniqueToFull.classes",
        "analysis.uniqueToFull.relations",
        "analysis.uniqueToFull.instances",
        "analysis.inferredDomain",
        "analysis.certainty",
        "validation.compositionCheck",
        "validation.discrepancies",
        "metadata.alternativeSolutions",
    ],
    constraints=["`analysis.certainty` is one of " + ", ".join(f'"{c}"' for c in DIVISION_CERTAINTY)],
    output_example={
        "result": _result_example("reconstructed-ontology-id", "Unknown component (O_B)"),
        "analysis": {
            "uniqueToFull": {"classes": ["IDs"], "relations": ["IDs"], "instances": ["IDs"]},
            "inferredDomain": "description of what the unknown component represents",
            "certainty": "medium",
        },
        "validation": {
            "compositionCheck": "whether Known + Unknown ≈ Full",
            "discrepancies": ["any elements that don't fit perfectly"],
        },
        "metadata": {
            "operation": "division",
            "alternativeSolutions": ["descriptions of other possible reconstructions"],
        },
    },
)

_TRANSFORMATION = OperationContract(
    kind=OperationKind.TRANSFORMATION,
    name="Transformation (Schema Mapping)",
    description="Transform source ontology data into the structure of a target schema",
    heading="Ontology Transformation (Schema Mapping)",
    preamble=(
        "You are performing TRANSFORMATION: restating the data of a source ontology in the "
        "vocabulary of a target schema.\n"
        "Ontology A carries the source data; Ontology B defines the target classes and relations."
    ),
    input_labels=["Ontology A (source data)", "Ontology B (target schema)"],
    auxiliary_label="Mapping Rules",
    auxiliary_default={"description": "Infer mappings from the source data to the target schema"},
    instructions=[
        _step(
            "**Schema Analysis**: Relate the source to the target",
            "Match source classes to target classes",
            "Match source relations to target relations (consider domain and range)",
        ),
        _step(
            "**Mapping**: Apply the mapping rules (infer them when none are given)",
            "Create target instances for every mappable source instance",
            "Rename properties to target relation IDs",
            "Write values as typed literals using the target relation's range (e.g. xsd:decimal)",
            "Keep references between instances consistent",
        ),
        _step(
            "**Computed Properties**: Derive target properties that have no direct source value",
            "Example: emissions = activity × emissionFactor",
            "Record the formula and inputs used for every computed value",
        ),
        "**Unmapped Elements**: List source elements without a target counterpart; do not drop them silently",
        "**Data Quality**: Report missing values, type mismatches and assumptions made",
        "Record the transformation in `result.metadata.transformation`",
    ],
    required_fields=[
        "result",
        "result.metadata.transformation",
        "transformation_metadata.mappings_applied",
        "transformation_metadata.computed_properties",
        "transformation_metadata.unmapped_elements",
        "transformation_metadata.data_quality",
    ],
    constraints=["`result` follows the classes and relations of Ontology B"],
    output_example={
        "result": _result_example(
            "transformed-ontology-id",
            "A → B (transformed)",
            metadata={
                "operation": "transformation",
                "transformation": {"source": "source ontology ID", "target": "target schema ID"},
            },
        ),
        "transformation_metadata": {
            "mappings_applied": [
                {"source": "source element ID", "target": "target element ID", "rule": "mapping rule used"}
            ],
            "computed_properties": [
                {
                    "instance": "target instance ID",
                    "property": "target relation ID",
                    "formula": "how the value was derived",
                    "value": "computed value",
                }
            ],
            "unmapped_elements": ["source element IDs without a target counterpart"],
            "data_quality": {"completeness": "high/medium/low", "issues": ["detected data issues"]},
        },
    },
)

CONTRACTS: Dict[OperationKind, OperationContract] = {
    c.kind: c
    for c in (_ADDITION, _SUBTRACTION, _MERGE, _COMPOSITION, _DIVISION, _TRANSFORMATION)
}

_missing = set(OperationKind) - set(CONTRACTS)
if _missing:
    raise RuntimeError(f"No contract for operations: {sorted(k.value for k in _missing)}")


def get_contract(operation: Any) -> OperationContract:
    return CONTRACTS[parse_operation(operation)]


def list_operations() -> List[Dict[str, str]]:
    return [
        {"id": kind.value, "name": c.name, "description": c.description}
        for kind, c in CONTRACTS.items()
    ]


# ── Rendering ───────────────────────────────────────────────────────

def _dump(obj: Any) -> str:
    return json.dumps(as_mapping(obj), ensure_ascii=False, indent=2)


def build_prompt(
    operation: Any,
    ontology_a: Any,
    ontology_b: Any,
    auxiliary: Optional[Dict[str, Any]] = None,
) -> str:
    """Render the full task text for one operation.

    ``auxiliary`` is the interface spec (composition) or mapping rules
    (transformation); other operations ignore it.
    """
    contract = get_contract(operation)
    if ontology_a is None:
        raise MissingOperandError("ontologyA", contract.kind.value)
    if ontology_b is None:
        raise MissingOperandError("ontologyB", contract.kind.value)

    parts = [
        f"# Task: {contract.heading}",
        contract.preamble,
        f"## Input {contract.input_labels[0]}:\n{_dump(ontology_a)}",
        f"## Input {contract.input_labels[1]}:\n{_dump(ontology_b)}",
    ]
    if contract.auxiliary_label:
        aux = auxiliary if auxiliary is not None else contract.auxiliary_default
        parts.append(f"## {contract.auxiliary_label}:\n{_dump(aux)}")

    steps = "\n".join(f"{i}. {s}" for i, s in enumerate(contract.instructions, 1))
    parts.append(f"## Instructions:\n{steps}")

    fields = "\n".join(f"- `{f}`" for f in contract.required_fields)
    section = f"## Required Output Fields:\n{fields}"
    if contract.constraints:
        section += "\n\nConstraints:\n" + "\n".join(f"- {c}" for c in contract.constraints)
    parts.append(section)

    parts.append(f"## Output Format (JSON):\n{_dump(contract.output_example)}")
    parts.append("Generate the complete result following this schema. Respond with the JSON object only.")
    return "\n\n".join(parts) + "\n"


def missing_output_fields(operation: Any, payload: Any) -> List[str]:
    """Required dotted paths that are absent from a recovered payload."""
    contract = get_contract(operation)
    missing = []
    for path in contract.required_fields:
        node = payload
        for key in path.split("."):
            if not isinstance(node, dict) or key not in node:
                missing.append(path)
                break
            node = node[key]
    return missing
