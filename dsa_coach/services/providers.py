from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from dsa_coach.core.config import Settings
from dsa_coach.core.errors import ConfigurationError, GenerationFailure
from dsa_coach.schemas.chat import ChatTurn

logger = logging.getLogger(__name__)

GEMINI = "gemini"
OPENAI = "openai"
MEGALLM = "megallm"
GROQ = "groq"

PROVIDER_LABELS = {
    GEMINI: "Gemini",
    OPENAI: "OpenAI",
    MEGALLM: "MegaLLM",
    GROQ: "Groq",
}

_MESSAGE_TYPES = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


@dataclass(frozen=True)
class SamplingOptions:
    temperature: float = 0.7
    max_tokens: int = 500


class CompletionBackend(Protocol):
    name: str

    async def complete(self, messages: Sequence[ChatTurn], options: SamplingOptions) -> str: ...


def to_langchain_messages(messages: Sequence[ChatTurn]) -> list[BaseMessage]:
    return [_MESSAGE_TYPES[turn.role](content=turn.content) for turn in messages]


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else getattr(part, "text", str(part))
            for part in content
        )
    return str(content or "")


class ChatModelBackend:
    """
    Chat-completions backend reached through an OpenAI-compatible endpoint.

    The client is built once; a backend without an API key can still be registered
    and only fails when it is asked to complete.
    """

    def __init__(
        self,
        name: str,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        credential_name: Optional[str] = None,
        max_retries: int = 0,
    ) -> None:
        self.name = name
        self.model = model
        self._credential_name = credential_name or f"{name.upper()}_API_KEY"
        self._llm: Optional[ChatOpenAI] = None
        if not api_key:
            logger.warning("%s environment variable is not set", self._credential_name)
            return
        self._llm = ChatOpenAI(
            model=model,
            api_key=api_key,
            base_url=base_url,
            max_retries=max_retries,
        )

    @property
    def is_configured(self) -> bool:
        return self._llm is not None

    async def complete(self, messages: Sequence[ChatTurn], options: SamplingOptions) -> str:
        if self._llm is None:
            raise ConfigurationError(f"{self._credential_name} is not configured")

        response = await self._llm.bind(
            temperature=options.temperature,
            max_tokens=options.max_tokens,
        ).ainvoke(to_langchain_messages(messages))
        return _content_text(response.content)


def build_backends(settings: Settings) -> Dict[str, CompletionBackend]:
    retries = settings.llm_max_retries
    return {
        GEMINI: ChatModelBackend(
            GEMINI,
            model=settings.gemini_model,
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            max_retries=retries,
        ),
        OPENAI: ChatModelBackend(
            OPENAI,
            model=settings.openai_model,
            api_key=settings.openai_api_key,
            max_retries=retries,
        ),
        MEGALLM: ChatModelBackend(
            MEGALLM,
            model=settings.megallm_model,
            api_key=settings.megallm_api_key,
            base_url=settings.megallm_base_url,
            max_retries=retries,
        ),
        GROQ: ChatModelBackend(
            GROQ,
            model=settings.groq_model,
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url,
            max_retries=retries,
        ),
    }


class ProviderDispatcher:
    """
    Routes a prepared conversation to exactly one registered backend.
    """

    def __init__(self, backends: Mapping[str, CompletionBackend], default_provider: str = GROQ) -> None:
        self._backends = {name.lower(): backend for name, backend in backends.items()}
        default = default_provider.lower()
        if default not in self._backends:
            raise ValueError(f"Default provider '{default_provider}' is not registered")
        self._default = default

    @property
    def default_provider(self) -> str:
        return self._default

    @property
    def providers(self) -> list[str]:
        return sorted(self._backends)

    def select(self, provider: Optional[str]) -> str:
        if provider:
            name = provider.strip().lower()
            if name in self._backends:
                return name
            logger.info("Unknown AI provider %r, falling back to %s", provider, self._default)
        return self._default

    async def dispatch(
        self,
        provider: Optional[str],
        messages: Sequence[ChatTurn],
        options: SamplingOptions,
    ) -> str:
        name = self.select(provider)
        logger.info("Using AI provider: %s", name)
        try:
            return await self._backends[name].complete(messages, options)
        except Exception as exc:  # noqa: BLE001
            logger.error("%s API error: %s", name, exc)
            raise GenerationFailure(name, PROVIDER_LABELS.get(name)) from exc


def build_dispatcher(settings: Settings) -> ProviderDispatcher:
    backends = build_backends(settings)
    default = settings.default_ai_provider
    if default not in backends:
        logger.warning("DEFAULT_AI_PROVIDER %r is not supported, using %s", default, GROQ)
        default = GROQ
    return ProviderDispatcher(backends, default_provider=default)
