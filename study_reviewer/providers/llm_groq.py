from __future__ import annotations

from study_reviewer.providers.llm_openai import OpenAIProvider


class GroqProvider(OpenAIProvider):
    """Groq's hosted Llama models through its OpenAI-compatible endpoint."""

    api_key_env = "GROQ_API_KEY"
    base_url = "https://api.groq.com/openai/v1"
    label = "groq"

    def __init__(self, model: str = "llama-3.3-70b-versatile", timeout: float = 120.0):
        super().__init__(model=model, timeout=timeout)
