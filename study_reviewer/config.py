from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "llm_provider": "groq",
    "llm_model": "llama-3.3-70b-versatile",
    "ollama_url": "http://localhost:11434",
    "llm_temperature": 0.2,
    "llm_max_tokens": 4096,
    "llm_timeout": 120.0,
    "subject": "board exam",
    "db_path": "reviewer.db",
    "max_upload_mb": 50,
    "max_archive_mb": 100,
    "max_compression_ratio": 200.0,
    "min_content_chars": 50,
    "content_char_limit": 10000,
    "stored_content_limit": 5000,
    "max_question_count": 50,
    "mixed_split": [0.5, 0.25],
    "verse_api_url": "https://bible-api.com",
    "verse_cache_seconds": 3600,
}


@dataclass
class Settings:
    llm_provider: str = DEFAULTS["llm_provider"]
    llm_model: str = DEFAULTS["llm_model"]
    ollama_url: str = DEFAULTS["ollama_url"]
    llm_temperature: float = DEFAULTS["llm_temperature"]
    llm_max_tokens: int = DEFAULTS["llm_max_tokens"]
    llm_timeout: float = DEFAULTS["llm_timeout"]
    subject: str = DEFAULTS["subject"]
    db_path: str = DEFAULTS["db_path"]
    max_upload_mb: int = DEFAULTS["max_upload_mb"]
    max_archive_mb: int = DEFAULTS["max_archive_mb"]
    max_compression_ratio: float = DEFAULTS["max_compression_ratio"]
    min_content_chars: int = DEFAULTS["min_content_chars"]
    content_char_limit: int = DEFAULTS["content_char_limit"]
    stored_content_limit: int = DEFAULTS["stored_content_limit"]
    max_question_count: int = DEFAULTS["max_question_count"]
    mixed_split: list[float] = field(default_factory=lambda: list(DEFAULTS["mixed_split"]))
    verse_api_url: str = DEFAULTS["verse_api_url"]
    verse_cache_seconds: int = DEFAULTS["verse_cache_seconds"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def db_full_path(self) -> Path:
        return self.project_root / self.db_path

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def max_archive_bytes(self) -> int:
        return self.max_archive_mb * 1024 * 1024

    def to_dict(self) -> dict:
        return {
            "llm_provider": self.llm_provider,
            "llm_model": self.llm_model,
            "ollama_url": self.ollama_url,
            "llm_temperature": self.llm_temperature,
            "llm_max_tokens": self.llm_max_tokens,
            "llm_timeout": self.llm_timeout,
            "subject": self.subject,
            "db_path": self.db_path,
            "max_upload_mb": self.max_upload_mb,
            "max_archive_mb": self.max_archive_mb,
            "max_compression_ratio": self.max_compression_ratio,
            "min_content_chars": self.min_content_chars,
            "content_char_limit": self.content_char_limit,
            "stored_content_limit": self.stored_content_limit,
            "max_question_count": self.max_question_count,
            "mixed_split": list(self.mixed_split),
            "verse_api_url": self.verse_api_url,
            "verse_cache_seconds": self.verse_cache_seconds,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
