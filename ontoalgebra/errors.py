# ontoalgebra/errors.py
"""Error taxonomy for operation dispatch."""
from __future__ import annotations

from typing import Iterable, Optional


class OntologyAlgebraError(Exception):
    """Base class for every failure raised to the caller."""


class UnknownOperationError(OntologyAlgebraError):
    def __init__(self, operation: object, valid: Iterable[str] = ()) -> None:
        self.operation = operation
        self.valid_operations = list(valid)
        msg = f"Invalid operation: {operation}"
        if self.valid_operations:
            msg += f" (expected one of: {', '.join(self.valid_operations)})"
        super().__init__(msg)


class MissingOperandError(OntologyAlgebraError):
    def __init__(self, operand: str, operation: str) -> None:
        self.operand = operand
        self.operation = operation
        super().__init__(f"{operand} is required for operation '{operation}'")


class CollaboratorInvocationError(OntologyAlgebraError):
    """Transport, auth or rate-limit failure while reaching the collaborator."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ExtractionError(OntologyAlgebraError):
    """No JSON object could be recovered from the collaborator output."""

    def __init__(self, raw_text: str) -> None:
        self.raw_text = raw_text
        preview = " ".join(raw_text.split())[:120]
        super().__init__(f"Could not extract valid JSON from LLM response: {preview!r}")


class StructuralValidationWarning(UserWarning):
    """The recovered result failed structural validation; attached, never raised."""
