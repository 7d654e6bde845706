"""Shared fixtures: example ontologies and a stub LLM collaborator."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from ontoalgebra.collaborator import CollaboratorSettings
from ontoalgebra.examples import get_example
from ontoalgebra.models import GenerationOptions


@pytest.fixture
def person() -> Dict[str, Any]:
    return get_example("person")


@pytest.fixture
def factory() -> Dict[str, Any]:
    return get_example("factory")


@pytest.fixture
def ghg() -> Dict[str, Any]:
    return get_example("ghg")


@pytest.fixture
def scenario_a() -> Dict[str, Any]:
    """Minimal ontology with one class and one datatype relation."""
    return {
        "id": "p1",
        "name": "People",
        "classes": [{"id": "Person"}],
        "relations": [{"id": "hasName", "domain": "Person", "range": "xsd:string", "type": "datatype"}],
        "axioms": [],
        "instances": [],
    }


class StubCollaborator:
    """Records prompts and answers with a fixed text (or raises)."""

    def __init__(self, reply: str = "{}", error: Optional[BaseException] = None, connected: bool = True) -> None:
        self.reply = reply
        self.error = error
        self.connected = connected
        self.calls: List[Dict[str, Any]] = []
        self.settings = CollaboratorSettings(provider="openai", api_key="sk-test")

    async def execute(self, prompt: str, options: GenerationOptions) -> str:
        self.calls.append({"prompt": prompt, "options": options})
        if self.error is not None:
            raise self.error
        return self.reply

    async def test_connection(self) -> bool:
        return self.connected


@pytest.fixture
def stub_collaborator():
    return StubCollaborator
