from __future__ import annotations

import logging
import os
import time

from study_reviewer.errors import ConfigurationError
from study_reviewer.providers.base import LLMProvider

log = logging.getLogger("study_reviewer.llm")


class OpenAIProvider(LLMProvider):
    api_key_env = "OPENAI_API_KEY"
    base_url: str | None = None
    label = "openai"

    def __init__(self, model: str = "gpt-4o-mini", timeout: float = 120.0):
        import openai
        api_key = os.environ.get(self.api_key_env, "")
        if not api_key:
            raise ConfigurationError(f"{self.api_key_env} is not configured")
        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=self.base_url,
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
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        log.info("── PROMPT (%s) ──\n%s", self.name(), prompt)
        t0 = time.monotonic()
        resp = await self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
            messages=messages,
        )
        content = resp.choices[0].message.content or ""
        log.info("── RESPONSE (%.1fs) ──\n%s", time.monotonic() - t0, content)
        return content

    def name(self) -> str:
        return f"{self.label}/{self.model}"
