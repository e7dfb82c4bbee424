"""LLM provider abstraction for agent interactions.

Every backend implements ``complete``; the game only ever calls
``get_text``, which wraps the prompt with the shared system prompt and
splits the reply into thinking and content.
"""

from __future__ import annotations

import asyncio
import logging
import os
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from .parsing import AIResponse, parse_ai_response

logger = logging.getLogger("llm")

SYSTEM_PROMPT = """You are playing Just One, a cooperative word guessing game.
Clue-givers each write ONE word to help a teammate guess a secret mystery word.
Identical clues cancel each other out, so be helpful but original.
The guesser sees only the surviving clues and gets a single guess.

Always answer in exactly this format:
THINKING: <your short reasoning>
CLUE: <one word>      (when asked for a clue)
GUESS: <one word>     (when asked for a guess)"""


@dataclass
class LLMResponse:
    """Response from an LLM call."""
    content: str
    model: str
    input_tokens: int
    output_tokens: int
    latency_ms: float
    raw_response: dict[str, Any] | None = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers (the agent gateway)."""

    model: str = "unknown"
    system_prompt: str = SYSTEM_PROMPT

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        """Generate a completion from the LLM."""
        pass

    async def get_text(self, prompt: str) -> AIResponse:
        """Send one game prompt and return the parsed ``THINKING``/content pair.

        Raises whatever the transport raises; converting failures into game
        data is the agents' job.
        """
        messages = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": prompt},
        ]
        response = await self.complete(messages)
        parsed = parse_ai_response(response.content)
        return parsed.model_copy(update={
            "model": response.model,
            "latency_ms": response.latency_ms,
            "input_tokens": response.input_tokens,
            "output_tokens": response.output_tokens,
        })


class HTTPProvider(LLMProvider):
    """Shared POST-and-retry logic for the HTTP backends."""

    timeout: float = 60.0
    max_retries: int = 3

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        # Tests inject an httpx.MockTransport here.
        self._transport = transport

    async def _post_json(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST a JSON body, retrying 429/5xx and network errors with backoff."""
        last_error: Exception | None = None
        request_headers = {"Content-Type": "application/json", **(headers or {})}

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(transport=self._transport) as client:
                    response = await client.post(
                        url,
                        headers=request_headers,
                        params=params,
                        json=body,
                        timeout=self.timeout,
                    )
            except (httpx.RemoteProtocolError, httpx.ReadError, httpx.ConnectError, httpx.TimeoutException) as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = 2 ** attempt
                    logger.warning(f"Network error ({type(e).__name__}), retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries}): {e}")
                    await asyncio.sleep(wait_time)
                    continue
                raise RuntimeError(f"Network error after {self.max_retries} attempts: {e}") from e

            if response.status_code == 200:
                return response.json()

            try:
                error_data = response.json()
                error_msg = error_data.get("error", {}).get("message", response.text)
            except Exception:
                error_msg = response.text

            last_error = RuntimeError(f"{type(self).__name__} API error ({response.status_code}): {error_msg}")
            if (response.status_code >= 500 or response.status_code == 429) and attempt < self.max_retries - 1:
                wait_time = 2 ** attempt
                logger.warning(f"API error {response.status_code}, retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries})")
                await asyncio.sleep(wait_time)
                continue
            raise last_error

        raise RuntimeError(f"Failed after {self.max_retries} attempts") from last_error


class OpenAIProvider(HTTPProvider):
    """LLM provider using the OpenAI chat completions API."""

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: str | None = None,
        base_url: str = "https://api.openai.com/v1",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(transport)
        self.model = model
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.base_url = base_url

        if not self.api_key:
            raise ValueError(
                "OpenAI API key required. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        """Generate a completion using OpenAI API."""
        start_time = time.perf_counter()

        data = await self._post_json(
            f"{self.base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            body={
                "model": self.model,
                "messages": messages,
                "temperature": temperature,
                "max_completion_tokens": max_tokens,
            },
        )

        latency_ms = (time.perf_counter() - start_time) * 1000

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        usage = data.get("usage", {})

        return LLMResponse(
            content=content,
            model=self.model,
            input_tokens=usage.get("prompt_tokens", 0),
            output_tokens=usage.get("completion_tokens", 0),
            latency_ms=latency_ms,
            raw_response=data,
        )


class AnthropicProvider(HTTPProvider):
    """LLM provider using Anthropic API directly."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        base_url: str = "https://api.anthropic.com/v1",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(transport)
        self.model = model
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.base_url = base_url

        if not self.api_key:
            raise ValueError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY environment variable "
                "or pass api_key parameter."
            )

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        """Generate a completion using Anthropic API."""
        start_time = time.perf_counter()

        system_message = None
        anthropic_messages = []

        for msg in messages:
            if msg["role"] == "system":
                system_message = msg["content"]
            else:
                anthropic_messages.append({
                    "role": msg["role"],
                    "content": msg["content"],
                })

        request_body: dict[str, Any] = {
            "model": self.model,
            "messages": anthropic_messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        if system_message:
            request_body["system"] = system_message

        data = await self._post_json(
            f"{self.base_url}/messages",
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": "2023-06-01",
            },
            body=request_body,
        )

        latency_ms = (time.perf_counter() - start_time) * 1000

        blocks = data.get("content") or [{}]
        content = blocks[0].get("text") or ""
        usage = data.get("usage", {})

        return LLMResponse(
            content=content,
            model=self.model,
            input_tokens=usage.get("input_tokens", 0),
            output_tokens=usage.get("output_tokens", 0),
            latency_ms=latency_ms,
            raw_response=data,
        )


class GoogleProvider(HTTPProvider):
    """LLM provider using the Gemini generateContent API."""

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        api_key: str | None = None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(transport)
        self.model = model
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        self.base_url = base_url

        if not self.api_key:
            raise ValueError(
                "Google API key required. Set GOOGLE_API_KEY environment variable "
                "or pass api_key parameter."
            )

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        """Generate a completion using the Gemini API.

        Gemini has no system role here, so all messages are folded into a
        single text part.
        """
        start_time = time.perf_counter()

        text = "\n\n".join(msg["content"] for msg in messages)

        data = await self._post_json(
            f"{self.base_url}/models/{self.model}:generateContent",
            params={"key": self.api_key},
            body={
                "contents": [{"parts": [{"text": text}]}],
                "generationConfig": {
                    "temperature": temperature,
                    "maxOutputTokens": max_tokens,
                    "thinkingConfig": {"thinkingBudget": 0},
                },
            },
        )

        latency_ms = (time.perf_counter() - start_time) * 1000

        candidates = data.get("candidates") or [{}]
        parts = (candidates[0].get("content") or {}).get("parts") or [{}]
        content = parts[0].get("text") or ""
        usage = data.get("usageMetadata", {})

        return LLMResponse(
            content=content,
            model=self.model,
            input_tokens=usage.get("promptTokenCount", 0),
            output_tokens=usage.get("candidatesTokenCount", 0),
            latency_ms=latency_ms,
            raw_response=data,
        )


class OllamaProvider(HTTPProvider):
    """LLM provider for a local Ollama server."""

    timeout = 120.0

    def __init__(
        self,
        model: str = "llama3.1",
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(transport)
        self.model = model
        # Ollama needs no key; api_key is accepted so the factory stays uniform.
        self.base_url = (
            base_url or os.environ.get("OLLAMA_BASE_URL") or "http://localhost:11434"
        ).rstrip("/")

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        """Generate a completion using Ollama's /api/generate endpoint."""
        start_time = time.perf_counter()

        prompt = "\n\n".join(msg["content"] for msg in messages)

        data = await self._post_json(
            f"{self.base_url}/api/generate",
            body={
                "model": self.model,
                "prompt": prompt,
                "stream": False,
                "options": {"temperature": temperature, "num_predict": max_tokens},
            },
        )

        latency_ms = (time.perf_counter() - start_time) * 1000

        return LLMResponse(
            content=data.get("response") or "",
            model=self.model,
            input_tokens=data.get("prompt_eval_count", 0),
            output_tokens=data.get("eval_count", 0),
            latency_ms=latency_ms,
            raw_response=data,
        )


MOCK_CLUES = ["Big", "Round", "Fast", "Blue", "Small", "Bright", "Soft", "Hard"]
MOCK_GUESSES = ["Elephant", "Pizza", "Rainbow", "Computer", "Ocean", "Guitar", "Mountain"]


class MockProvider(LLMProvider):
    """Mock LLM provider for testing and demo games.

    With ``responses`` it cycles through them verbatim. Without, it answers
    like a player: a random clue for clue prompts, a random guess for guess
    prompts.
    """

    def __init__(
        self,
        responses: list[str] | None = None,
        model: str = "mock-model",
        seed: int | str | None = None,
        delay: float = 0.0,
    ):
        self.responses = responses
        self.model = model
        self.delay = delay
        self.call_count = 0
        self.last_messages: list[dict[str, str]] = []
        self._rng = random.Random(seed)

    def _invent_reply(self, prompt: str) -> str:
        if "GUESS:" in prompt:
            guess = self._rng.choice(MOCK_GUESSES)
            return f'THINKING: Looking at the clues, I think the answer is "{guess}".\nGUESS: {guess}'
        if "CLUE:" in prompt:
            clue = self._rng.choice(MOCK_CLUES)
            return f'THINKING: I need to give a clue. I\'ll go with "{clue}".\nCLUE: {clue}'
        return "THINKING: This is a mock AI response for testing purposes.\nCLUE: MOCK_RESPONSE"

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        """Return a mock response."""
        self.last_messages = messages

        if self.delay:
            await asyncio.sleep(self.delay)

        if self.responses:
            content = self.responses[self.call_count % len(self.responses)]
        else:
            content = self._invent_reply(messages[-1]["content"])
        self.call_count += 1

        return LLMResponse(
            content=content,
            model=self.model,
            input_tokens=len(str(messages)) // 4,
            output_tokens=len(content) // 4,
            latency_ms=10.0,
            raw_response=None,
        )


PROVIDERS: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "google": GoogleProvider,
    "ollama": OllamaProvider,
    "mock": MockProvider,
}


def create_provider(
    provider_type: str = "mock",
    model: str | None = None,
    api_key: str | None = None,
    **kwargs,
) -> LLMProvider:
    """Factory function to create LLM providers."""
    if provider_type not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider_type}. Options: {list(PROVIDERS.keys())}")

    provider_cls = PROVIDERS[provider_type]

    provider_kwargs: dict[str, Any] = {}
    if model:
        provider_kwargs["model"] = model
    if api_key:
        provider_kwargs["api_key"] = api_key
    provider_kwargs.update(kwargs)

    return provider_cls(**provider_kwargs)
