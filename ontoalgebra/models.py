# ontoalgebra/models.py
"""Pydantic request models for operation dispatch."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ontoalgebra.errors import MissingOperandError
from ontoalgebra.ontology import as_mapping
from ontoalgebra.operations import OperationKind, parse_operation


class GenerationOptions(BaseModel):
    """Sampling options forwarded to the collaborator; ``None`` means provider default."""
    model_config = ConfigDict(populate_by_name=True)

    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0, alias="maxTokens")


class OperationRequest(BaseModel):
    """One operation invocation as received from the (external) routing layer."""
    model_config = ConfigDict(populate_by_name=True)

    operation: OperationKind
    ontology_a: Optional[Dict[str, Any]] = Field(None, alias="ontologyA")
    ontology_b: Optional[Dict[str, Any]] = Field(None, alias="ontologyB")

    interface_spec: Optional[Dict[str, Any]] = Field(
        None, validation_alias=AliasChoices("interfaceSpec", "interface", "interface_spec")
    )
    mapping_rules: Optional[Dict[str, Any]] = Field(
        None, validation_alias=AliasChoices("mappingRules", "mapping_rules")
    )

    options: GenerationOptions = Field(default_factory=GenerationOptions)

    @field_validator("operation", mode="before")
    @classmethod
    def _known_operation(cls, v: Any) -> OperationKind:
        # UnknownOperationError is not a ValueError, so pydantic lets it through
        return parse_operation(v)

    @field_validator("ontology_a", "ontology_b", mode="before")
    @classmethod
    def _ontology_mapping(cls, v: Any) -> Any:
        return as_mapping(v)

    def require_operands(self) -> None:
        if self.ontology_a is None:
            raise MissingOperandError("ontologyA", self.operation.value)
        if self.ontology_b is None:
            raise MissingOperandError("ontologyB", self.operation.value)

    def auxiliary(self) -> Optional[Dict[str, Any]]:
        """Interface spec for composition, mapping rules for transformation."""
        if self.operation is OperationKind.COMPOSITION:
            return self.interface_spec
        if self.operation is OperationKind.TRANSFORMATION:
            return self.mapping_rules
        return None
