# ontoalgebra/collaborator.py
"""
Bindings to the external LLM collaborator.

Env vars:
  LLM_PROVIDER   — ``openai`` (default) or ``anthropic``
  LLM_API_KEY    — credential; when unset the dispatcher answers offline
  LLM_MODEL      — model id (provider default when unset)
  LLM_BASE_URL   — API base URL (provider default when unset)
  LLM_TIMEOUT    — transport timeout in seconds (default 120)

Neither binding retries: any transport failure or non-2xx answer is
raised as ``CollaboratorInvocationError`` and retry policy belongs to
the caller.
"""
from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Protocol

import httpx
import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, field_validator, model_validator

from ontoalgebra.errors import CollaboratorInvocationError, ExtractionError
from ontoalgebra.extraction import extract_json
from ontoalgebra.models import GenerationOptions
from ontoalgebra.verbosity import get_logger

_log = get_logger("ontoalgebra.collaborator")

# ── Config ───────────────────────────────────────────────────────────

PROVIDERS = ("openai", "anthropic")

DEFAULT_MODELS = {
    "openai": "gpt-4-turbo-preview",
    "anthropic": "claude-3-5-sonnet-20241022",
}

DEFAULT_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "anthropic": "https://api.anthropic.com/v1",
}

DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 4000
ANTHROPIC_VERSION = "2023-06-01"

SYSTEM_PROMPT = (
    "You are an expert in ontology engineering and formal knowledge representation. "
    "Always respond with valid JSON following the specified schema."
)

CONNECTION_TEST_PROMPT = 'Respond with valid JSON: {"status": "ok", "message": "test successful"}'


class CollaboratorSettings(BaseModel):
    provider: str = "openai"
    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    timeout: float = 120.0

    @field_validator("provider", mode="before")
    @classmethod
    def _known_provider(cls, v: Any) -> str:
        name = str(v or "openai").strip().lower()
        if name not in PROVIDERS:
            raise ValueError(f"Unsupported provider: {v}")
        return name

    @model_validator(mode="after")
    def _provider_defaults(self) -> "CollaboratorSettings":
        if not self.model:
            self.model = DEFAULT_MODELS[self.provider]
        if not self.base_url:
            self.base_url = DEFAULT_BASE_URLS[self.provider]
        self.base_url = self.base_url.rstrip("/")
        return self

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, **overrides: Any) -> "CollaboratorSettings":
        """Read ``LLM_*`` env vars; non-``None`` overrides win."""
        values: Dict[str, Any] = {
            "provider": os.getenv("LLM_PROVIDER", "openai"),
            "api_key": os.getenv("LLM_API_KEY") or None,
            "model": os.getenv("LLM_MODEL") or None,
            "base_url": os.getenv("LLM_BASE_URL") or None,
            "timeout": float(os.getenv("LLM_TIMEOUT", "120")),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _temperature(options: GenerationOptions) -> float:
    return DEFAULT_TEMPERATURE if options.temperature is None else options.temperature


def _max_tokens(options: GenerationOptions) -> int:
    return options.max_tokens or DEFAULT_MAX_TOKENS


# ── Interface ───────────────────────────────────────────────────────

class Collaborator(Protocol):
    settings: CollaboratorSettings

    async def execute(self, prompt: str, options: GenerationOptions) -> str: ...

    async def test_connection(self) -> bool: ...


class _BaseCollaborator:
    def __init__(self, settings: CollaboratorSettings) -> None:
        self.settings = settings
        _log.info("LLM collaborator: provider=%s model=%s", settings.provider, settings.model)

    async def execute(self, prompt: str, options: GenerationOptions) -> str:
        raise NotImplementedError

    async def test_connection(self) -> bool:
        try:
            text = await self.execute(CONNECTION_TEST_PROMPT, GenerationOptions())
            return extract_json(text).get("status") == "ok"
        except (CollaboratorInvocationError, ExtractionError) as exc:
            _log.warning("LLM connection test failed: %s", exc)
            return False


# ── Chat-completions binding (OpenAI SDK) ───────────────────────────

class OpenAIChatCollaborator(_BaseCollaborator):
    def __init__(self, settings: CollaboratorSettings, client: Optional[AsyncOpenAI] = None) -> None:
        super().__init__(settings)
        self.client = client or AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=0,
        )

    async def execute(self, prompt: str, options: GenerationOptions) -> str:
        _log.debug("chat.completions request: %d prompt chars", len(prompt))
        try:
            resp = await self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=_temperature(options),
                max_tokens=_max_tokens(options),
                response_format={"type": "json_object"},
            )
        except openai.APIStatusError as exc:
            raise CollaboratorInvocationError(
                f"OpenAI API error: {exc.message}", status_code=exc.status_code
            ) from exc
        except openai.APIError as exc:
            raise CollaboratorInvocationError(f"OpenAI API error: {exc}") from exc

        if not resp.choices or resp.choices[0].message.content is None:
            raise CollaboratorInvocationError("OpenAI API error: empty completion")
        return resp.choices[0].message.content


# ── Messages binding (raw HTTP) ─────────────────────────────────────

class AnthropicMessagesCollaborator(_BaseCollaborator):
    def __init__(self, settings: CollaboratorSettings, client: Optional[httpx.AsyncClient] = None) -> None:
        super().__init__(settings)
        self._client = client

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.settings.api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.settings.timeout) as client:
            yield client

    async def execute(self, prompt: str, options: GenerationOptions) -> str:
        payload = {
            "model": self.settings.model,
            "max_tokens": _max_tokens(options),
            "temperature": _temperature(options),
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
        }
        _log.debug("messages request: %d prompt chars", len(prompt))
        try:
            async with self._http() as client:
                resp = await client.post(
                    f"{self.settings.base_url}/messages",
                    json=payload,
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            raise CollaboratorInvocationError(f"Anthropic API error: {exc}") from exc

        if not resp.is_success:
            raise CollaboratorInvocationError(
                f"Anthropic API error: {_error_detail(resp)}", status_code=resp.status_code
            )

        try:
            blocks = resp.json().get("content") or []
        except ValueError as exc:
            raise CollaboratorInvocationError("Anthropic API error: response is not JSON") from exc
        text = "".join(b.get("text", "") for b in blocks if isinstance(b, dict) and b.get("type") == "text")
        if not text:
            raise CollaboratorInvocationError("Anthropic API error: no text content in response")
        return text


def _error_detail(resp: httpx.Response) -> str:
    try:
        return resp.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return resp.reason_phrase or f"HTTP {resp.status_code}"


_BINDINGS = {
    "openai": OpenAIChatCollaborator,
    "anthropic": AnthropicMessagesCollaborator,
}


def create_collaborator(settings: CollaboratorSettings) -> Optional[Collaborator]:
    """Binding for the configured provider, or ``None`` (offline) without a credential."""
    if not settings.has_api_key:
        _log.info("No LLM API key configured - using offline responses")
        return None
    return _BINDINGS[settings.provider](settings)
