# ontoalgebra/dispatcher.py
"""
Operation dispatcher.

  request → arity check → contract → collaborator → JSON extraction
          → structural validation of ``result`` → response

Stateless between invocations.  An invalid ``result`` does not fail the
operation: the diagnostic is attached under ``validation`` and the
caller decides whether the imperfect result is still useful.
"""
from __future__ import annotations

import warnings
from typing import Any, Dict, Optional, Union

from ontoalgebra.collaborator import Collaborator, CollaboratorSettings, create_collaborator
from ontoalgebra.errors import StructuralValidationWarning
from ontoalgebra.extraction import extract_json
from ontoalgebra.models import GenerationOptions, OperationRequest
from ontoalgebra.offline import offline_response
from ontoalgebra.operations import OperationKind, build_prompt, missing_output_fields
from ontoalgebra.validator import ValidationReport, validate_ontology
from ontoalgebra.verbosity import get_logger

_log = get_logger("ontoalgebra.dispatcher")

RequestLike = Union[OperationRequest, Dict[str, Any]]


def _summary(ontology: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if ontology is None:
        return None
    classes = ontology.get("classes")
    relations = ontology.get("relations")
    return {
        "id": ontology.get("id"),
        "name": ontology.get("name"),
        "classCount": len(classes) if isinstance(classes, list) else 0,
        "relationCount": len(relations) if isinstance(relations, list) else 0,
    }


def _attach_validation(payload: Dict[str, Any], report: ValidationReport) -> None:
    diagnostic = report.model_dump()
    existing = payload.get("validation")
    # division's own schema already carries a ``validation`` object
    if isinstance(existing, dict):
        existing.update(diagnostic)
    else:
        payload["validation"] = diagnostic


class OperationDispatcher:
    """Runs ontology operations through a collaborator (or offline answers)."""

    def __init__(
        self,
        collaborator: Optional[Collaborator] = None,
        settings: Optional[CollaboratorSettings] = None,
    ) -> None:
        self.collaborator = collaborator
        self.settings = settings or getattr(collaborator, "settings", None) or CollaboratorSettings()

    @classmethod
    def from_settings(cls, settings: CollaboratorSettings) -> "OperationDispatcher":
        return cls(create_collaborator(settings), settings)

    @classmethod
    def from_env(cls, **overrides: Any) -> "OperationDispatcher":
        return cls.from_settings(CollaboratorSettings.from_env(**overrides))

    @property
    def offline(self) -> bool:
        return self.collaborator is None

    # ── Stages ──────────────────────────────────────────────────────

    @staticmethod
    def _parse(request: RequestLike) -> OperationRequest:
        if isinstance(request, OperationRequest):
            return request
        return OperationRequest.model_validate(request)

    def _contract(self, req: OperationRequest) -> str:
        req.require_operands()
        return build_prompt(req.operation, req.ontology_a, req.ontology_b, req.auxiliary())

    async def _invoke(self, kind: OperationKind, prompt: str, options: GenerationOptions) -> str:
        if self.collaborator is None:
            _log.info("Using offline response for %s", kind.value)
            return offline_response(kind)
        return await self.collaborator.execute(prompt, options)

    # ── Public API ──────────────────────────────────────────────────

    async def execute(self, request: RequestLike) -> Dict[str, Any]:
        req = self._parse(request)
        kind = req.operation
        prompt = self._contract(req)
        _log.info("Executing %s (prompt=%d chars, offline=%s)", kind.value, len(prompt), self.offline)

        text = await self._invoke(kind, prompt, req.options)
        payload = extract_json(text)

        missing = missing_output_fields(kind, payload)
        if missing:
            _log.warning("%s response is missing fields: %s", kind.value, ", ".join(missing))

        if payload.get("result") is not None:
            report = validate_ontology(payload["result"])
            if not report.valid:
                _log.warning("LLM produced invalid ontology for %s: %s", kind.value, report.errors)
                warnings.warn(
                    StructuralValidationWarning(
                        f"{kind.value} result failed validation: {'; '.join(report.errors)}"
                    ),
                    stacklevel=2,
                )
                _attach_validation(payload, report)

        return payload

    def preview(self, request: RequestLike) -> Dict[str, Any]:
        """Render the contract without calling the collaborator."""
        req = self._parse(request)
        return {
            "operation": req.operation.value,
            "prompt": self._contract(req),
            "inputSummary": {
                "ontologyA": _summary(req.ontology_a),
                "ontologyB": _summary(req.ontology_b),
            },
        }

    async def test_connection(self) -> Dict[str, Any]:
        connected = True if self.collaborator is None else await self.collaborator.test_connection()
        return {
            "connected": connected,
            "provider": self.settings.provider,
            "model": self.settings.model,
            "hasApiKey": self.settings.has_api_key,
        }
