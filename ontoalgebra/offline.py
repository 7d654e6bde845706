# ontoalgebra/offline.py
"""
Canned collaborator answers used when no LLM credential is configured.

Looked up by operation kind; operations without a dedicated entry get
the generic answer.  Always serialized fresh so callers never share
mutable state.
"""
from __future__ import annotations

import json
from typing import Any, Dict

from ontoalgebra.operations import OperationKind


def _empty_result(ontology_id: str, name: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": ontology_id,
        "name": name,
        "version": "1.0",
        "metadata": metadata,
        "classes": [],
        "relations": [],
        "axioms": [],
        "instances": [],
        "vocabulary": {},
    }


OFFLINE_RESPONSES: Dict[OperationKind, Dict[str, Any]] = {
    OperationKind.ADDITION: {
        "result": _empty_result(
            "mock-addition-result", "Mock Addition Result", {"operation": "addition", "mock": True}
        ),
        "metadata": {
            "operation": "addition",
            "sourceOntologies": ["A", "B"],
            "conflicts": [],
            "statistics": {"totalClasses": 0, "totalRelations": 0, "totalInstances": 0},
        },
    },
    OperationKind.MERGE: {
        "result": _empty_result(
            "mock-merge-result", "Mock Merge Result", {"operation": "merge", "mock": True}
        ),
        "alignments": [
            {
                "sourceA": "Person",
                "sourceB": "Human",
                "confidence": 0.95,
                "reasoning": "Semantically equivalent concepts",
            }
        ],
        "conflicts": [],
        "metadata": {"operation": "merge", "alignmentCount": 1, "conflictCount": 0},
    },
}

GENERIC_RESPONSE: Dict[str, Any] = {
    "result": _empty_result("mock-result", "Mock Result", {"mock": True}),
    "metadata": {"operation": "unknown", "mock": True},
}


def offline_response(operation: OperationKind) -> str:
    return json.dumps(OFFLINE_RESPONSES.get(operation, GENERIC_RESPONSE), ensure_ascii=False)
