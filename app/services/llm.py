# =============================================================================
# Multi-Provider LLM Abstraction — Streamed Completions
# =============================================================================
#
# Common interface for the chat completions that draft each appeal section,
# with implementations for Anthropic (Claude) and any OpenAI-compatible API
# (OpenAI, DeepSeek, Qwen, ...).
#
# Every completion is STREAMED. Sections are drafted one at a time and the
# browser shows progress as tokens arrive, so each provider forwards text
# deltas to an optional async callback and also returns the concatenated
# text once the stream ends.
#
# Timeouts are per call (llm_timeout_seconds); retries are whatever the SDK
# does by default.
#
# ARCHITECTURE:
#   LLMProvider (Protocol)
#   ├── AnthropicProvider        — messages.stream(), system as kwarg
#   ├── OpenAICompatibleProvider — chat.completions stream=True,
#   │                              system as first message
#   └── get_llm_provider()       — singleton factory, reads from config
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from app.config import settings

logger = logging.getLogger(__name__)

# Receives each text delta as it streams in
DeltaCallback = Callable[[str], Awaitable[None]]


# ---------------------------------------------------------------------------
# Data Structures
# ---------------------------------------------------------------------------


@dataclass
class LLMResponse:
    """
    Standardised result of one streamed completion.

    Token counts come from the provider's final usage report and are 0
    when the provider does not send one.
    """

    content: str
    model: str
    input_tokens: int
    output_tokens: int


# ---------------------------------------------------------------------------
# Protocol Definition
# ---------------------------------------------------------------------------


class LLMProvider(Protocol):
    """Anything with a streaming `complete()` can draft sections."""

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        on_delta: DeltaCallback | None = None,
    ) -> LLMResponse:
        """
        Stream a completion and return the full text.

        Args:
            messages: "user"/"assistant" messages (no "system" role).
            system: System prompt; placed per provider convention.
            temperature: Override sampling temperature.
            max_tokens: Override the output cap.
            on_delta: Awaited with each text fragment, in order.
        """
        ...


# ---------------------------------------------------------------------------
# Implementation 1: Anthropic (Claude)
# ---------------------------------------------------------------------------


class AnthropicProvider:
    """
    Claude via the native async SDK.

    Anthropic takes the system prompt as a top-level `system=` kwarg, not
    as a message with role "system".
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
    ) -> None:
        from anthropic import AsyncAnthropic

        resolved_key = api_key or settings.llm_api_key or settings.anthropic_api_key
        if not resolved_key:
            raise ValueError(
                "No Anthropic API key configured. Set LLM_API_KEY or "
                "ANTHROPIC_API_KEY in .env"
            )

        self._client = AsyncAnthropic(api_key=resolved_key)
        self._model = model or settings.llm_model
        self._temperature = settings.llm_temperature
        self._max_tokens = settings.llm_section_max_tokens
        self._timeout = settings.llm_timeout_seconds

        logger.info("Initialized AnthropicProvider (model=%s)", self._model)

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        on_delta: DeltaCallback | None = None,
    ) -> LLMResponse:
        kwargs: dict = {
            "model": self._model,
            "messages": messages,
            "max_tokens": max_tokens if max_tokens is not None else self._max_tokens,
            "temperature": temperature if temperature is not None else self._temperature,
            "timeout": self._timeout,
        }
        if system:
            kwargs["system"] = system

        parts: list[str] = []
        async with self._client.messages.stream(**kwargs) as stream:
            async for text in stream.text_stream:
                if not text:
                    continue
                parts.append(text)
                if on_delta:
                    await on_delta(text)
            final = await stream.get_final_message()

        return LLMResponse(
            content="".join(parts),
            model=final.model or self._model,
            input_tokens=final.usage.input_tokens,
            output_tokens=final.usage.output_tokens,
        )


# ---------------------------------------------------------------------------
# Implementation 2: OpenAI-Compatible
# ---------------------------------------------------------------------------


class OpenAICompatibleProvider:
    """
    Any API that speaks the OpenAI chat completions protocol.

    Switching vendors is a config change:
        LLM_PROVIDER=openai_compatible
        LLM_BASE_URL=https://api.deepseek.com/v1
        LLM_API_KEY=your-key
        LLM_MODEL=deepseek-chat
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
    ) -> None:
        from openai import AsyncOpenAI

        resolved_key = api_key or settings.llm_api_key or settings.openai_api_key
        if not resolved_key:
            raise ValueError(
                "No API key configured for OpenAI-compatible provider. "
                "Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )

        client_kwargs: dict = {"api_key": resolved_key}
        resolved_base_url = base_url or settings.llm_base_url
        if resolved_base_url:
            client_kwargs["base_url"] = resolved_base_url

        self._client = AsyncOpenAI(**client_kwargs)
        self._model = model or settings.llm_model
        self._temperature = settings.llm_temperature
        self._max_tokens = settings.llm_section_max_tokens
        self._timeout = settings.llm_timeout_seconds

        logger.info(
            "Initialized OpenAICompatibleProvider (model=%s, base_url=%s)",
            self._model,
            resolved_base_url or "https://api.openai.com/v1",
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        on_delta: DeltaCallback | None = None,
    ) -> LLMResponse:
        all_messages: list[dict[str, str]] = []
        if system:
            all_messages.append({"role": "system", "content": system})
        all_messages.extend(messages)

        stream = await self._client.chat.completions.create(
            model=self._model,
            messages=all_messages,
            max_tokens=max_tokens if max_tokens is not None else self._max_tokens,
            temperature=temperature if temperature is not None else self._temperature,
            stream=True,
            stream_options={"include_usage": True},
            timeout=self._timeout,
        )

        parts: list[str] = []
        model = self._model
        input_tokens = 0
        output_tokens = 0

        async for chunk in stream:
            if chunk.model:
                model = chunk.model
            # With include_usage the last chunk has usage and no choices
            if chunk.usage:
                input_tokens = chunk.usage.prompt_tokens
                output_tokens = chunk.usage.completion_tokens
            if not chunk.choices:
                continue
            text = chunk.choices[0].delta.content
            if not text:
                continue
            parts.append(text)
            if on_delta:
                await on_delta(text)

        return LLMResponse(
            content="".join(parts),
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

_provider: AnthropicProvider | OpenAICompatibleProvider | None = None


def get_llm_provider() -> AnthropicProvider | OpenAICompatibleProvider:
    """
    Return the configured LLM provider (lazy singleton).

    - "anthropic" → AnthropicProvider
    - "openai_compatible" → OpenAICompatibleProvider
    """
    global _provider
    if _provider is None:
        if settings.llm_provider == "anthropic":
            _provider = AnthropicProvider()
        else:
            _provider = OpenAICompatibleProvider()
    return _provider
