# ontoalgebra — dynamic ontology algebra
#
# Ontology model, validation and Turtle projection, plus the contracts
# under which an LLM collaborator performs addition, subtraction, merge,
# composition, division and transformation of ontologies.

from ontoalgebra.dispatcher import OperationDispatcher
from ontoalgebra.extraction import extract_json
from ontoalgebra.ontology import Ontology, create_empty
from ontoalgebra.ontology_to_ttl import to_graph, to_turtle
from ontoalgebra.operations import OperationKind, build_prompt, list_operations
from ontoalgebra.validator import ValidationReport, validate_ontology

__all__ = [
    "Ontology",
    "OperationDispatcher",
    "OperationKind",
    "ValidationReport",
    "build_prompt",
    "create_empty",
    "extract_json",
    "list_operations",
    "to_graph",
    "to_turtle",
    "validate_ontology",
]
