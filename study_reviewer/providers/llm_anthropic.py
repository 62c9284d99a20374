from __future__ import annotations

import os

from study_reviewer.errors import ConfigurationError
from study_reviewer.providers.base import LLMProvider


class AnthropicProvider(LLMProvider):
    def __init__(self, model: str = "claude-sonnet-4-20250514", timeout: float = 120.0):
        import anthropic
        api_key = os.environ.get("ANTHROPIC_API_KEY", "")
        if not api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is not configured")
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
        )
        self.model = model

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.2,
        system: str | None = None,
        max_tokens: int = 4096,
    ) -> str:
        kwargs = {}
        if system:
            kwargs["system"] = system
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        return message.content[0].text

    def name(self) -> str:
        return f"anthropic/{self.model}"
