from __future__ import annotations

import logging
from abc import ABC, abstractmethod

log = logging.getLogger("study_reviewer.llm")


class LLMProvider(ABC):
    @abstractmethod
    async def generate(
        self,
        prompt: str,
        temperature: float = 0.2,
        system: str | None = None,
        max_tokens: int = 4096,
    ) -> str:
        ...

    @abstractmethod
    def name(self) -> str:
        ...


async def check_connection(llm: LLMProvider) -> bool:
    """Ask the model to say hello. Returns False on any failure."""
    try:
        reply = await llm.generate('Say "Hello" if you can hear me.', max_tokens=10)
    except Exception as e:
        log.warning("Connection check failed for %s: %s", llm.name(), e)
        return False
    return "hello" in (reply or "").lower()
