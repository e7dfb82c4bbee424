"""Core module with the agent gateway and shared parsing."""

from .trace import AgentTrace
from .parsing import AIResponse, parse_ai_response, clean_single_word
from .llm import (
    SYSTEM_PROMPT,
    LLMProvider,
    LLMResponse,
    HTTPProvider,
    OpenAIProvider,
    AnthropicProvider,
    GoogleProvider,
    OllamaProvider,
    MockProvider,
    PROVIDERS,
    create_provider,
)

__all__ = [
    # Tracing
    "AgentTrace",
    # Parsing
    "AIResponse",
    "parse_ai_response",
    "clean_single_word",
    # LLM providers
    "SYSTEM_PROMPT",
    "LLMProvider",
    "LLMResponse",
    "HTTPProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "OllamaProvider",
    "MockProvider",
    "PROVIDERS",
    "create_provider",
]
