"""Build the configured LLM provider."""
from __future__ import annotations

from typing import TYPE_CHECKING

from study_reviewer.errors import ConfigurationError

if TYPE_CHECKING:
    from study_reviewer.config import Settings
    from study_reviewer.providers.base import LLMProvider

PROVIDERS = ("groq", "openai", "anthropic", "ollama")


def get_llm(settings: Settings) -> LLMProvider:
    s = settings
    if s.llm_provider == "groq":
        from study_reviewer.providers.llm_groq import GroqProvider
        return GroqProvider(model=s.llm_model, timeout=s.llm_timeout)
    elif s.llm_provider == "openai":
        from study_reviewer.providers.llm_openai import OpenAIProvider
        return OpenAIProvider(model=s.llm_model, timeout=s.llm_timeout)
    elif s.llm_provider == "anthropic":
        from study_reviewer.providers.llm_anthropic import AnthropicProvider
        return AnthropicProvider(model=s.llm_model, timeout=s.llm_timeout)
    elif s.llm_provider == "ollama":
        from study_reviewer.providers.llm_ollama import OllamaProvider
        return OllamaProvider(base_url=s.ollama_url, model=s.llm_model, timeout=s.llm_timeout)
    raise ConfigurationError(f"Unknown LLM provider: {s.llm_provider}")
