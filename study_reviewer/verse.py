"""Daily encouragement verse, fetched from bible-api.com and cached briefly."""
from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from urllib.parse import quote

import httpx

_log = logging.getLogger("study_reviewer.verse")

VERSE_REFERENCES = [
    "Jeremiah 29:11",
    "Philippians 4:13",
    "Psalm 23:1",
    "Proverbs 3:5-6",
    "Joshua 1:9",
    "1 Peter 5:7",
    "Psalm 27:1",
    "Romans 8:28",
    "Philippians 4:6-7",
    "Matthew 11:28",
    "Isaiah 40:31",
    "Psalm 34:18",
    "Psalm 46:1",
    "Proverbs 16:3",
    "2 Timothy 1:7",
    "Deuteronomy 31:8",
    "John 14:27",
    "Psalm 37:4",
    "Proverbs 18:10",
    "Isaiah 40:29",
    "Hebrews 11:1",
    "Psalm 118:24",
    "Romans 12:12",
    "Lamentations 3:22-23",
    "Philippians 4:19",
    "Colossians 3:23",
    "Romans 15:13",
    "Psalm 91:1-2",
    "Isaiah 41:10",
    "Matthew 6:33",
]


@dataclass(frozen=True)
class Verse:
    text: str
    reference: str

    def to_dict(self) -> dict:
        return {"text": self.text, "reference": self.reference}


def reference_for_day(day: date) -> str:
    return VERSE_REFERENCES[day.timetuple().tm_yday % len(VERSE_REFERENCES)]


def clean_verse_text(text: str) -> str:
    text = re.sub(r"\d+\s*", "", text)
    return re.sub(r"\s+", " ", text).strip()


class VerseService:
    """Holds at most one cached verse, valid for *ttl_seconds*."""

    def __init__(
        self,
        api_url: str = "https://bible-api.com",
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], date] = date.today,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._today = today
        self.timeout = timeout
        self._transport = transport
        self._cached: Verse | None = None
        self._fetched_at = 0.0

    def cached(self) -> Verse | None:
        if self._cached is not None and self._clock() - self._fetched_at < self.ttl_seconds:
            return self._cached
        return None

    async def get_verse(self) -> tuple[Verse | None, bool]:
        """Return ``(verse, from_cache)``. The verse is None if the lookup failed."""
        hit = self.cached()
        if hit is not None:
            return hit, True

        verse = await self._fetch(reference_for_day(self._today()))
        if verse is not None:
            self._cached = verse
            self._fetched_at = self._clock()
        return verse, False

    async def _fetch(self, reference: str) -> Verse | None:
        url = f"{self.api_url}/{quote(reference)}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, params={"translation": "kjv"})
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            _log.warning("Verse lookup failed for %s: %s", reference, e)
            return None

        text = data.get("text") if isinstance(data, dict) else None
        if not text:
            _log.warning("Verse lookup for %s returned no text", reference)
            return None
        return Verse(text=clean_verse_text(text), reference=data.get("reference") or reference)
