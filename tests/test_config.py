"""Tests for settings defaults and config.json persistence."""
from __future__ import annotations

import json
from unittest.mock import patch

from study_reviewer.config import DEFAULTS, Settings, load_settings, save_settings


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.llm_provider == "groq"
        assert s.llm_model == "llama-3.3-70b-versatile"
        assert s.subject == "board exam"
        assert s.max_upload_mb == 50
        assert s.min_content_chars == 50
        assert s.content_char_limit == 10000
        assert s.stored_content_limit == 5000
        assert s.mixed_split == [0.5, 0.25]
        assert s.verse_cache_seconds == 3600
        assert s.max_archive_mb == 100
        assert s.max_compression_ratio == 200.0

    def test_to_dict_matches_defaults(self):
        d = Settings().to_dict()
        assert set(d) == set(DEFAULTS)
        assert len(d) == 18
        assert d == DEFAULTS

    def test_max_upload_bytes(self):
        assert Settings(max_upload_mb=2).max_upload_bytes == 2 * 1024 * 1024

    def test_db_full_path_under_project_root(self):
        s = Settings(db_path="data/test.db")
        assert s.db_full_path == s.project_root / "data" / "test.db"

    def test_mixed_split_not_shared(self):
        a, b = Settings(), Settings()
        a.mixed_split[0] = 0.9
        assert b.mixed_split == [0.5, 0.25]


class TestLoadSave:
    def test_missing_file_gives_defaults(self, tmp_path):
        with patch("study_reviewer.config.CONFIG_PATH", tmp_path / "config.json"):
            assert load_settings() == Settings()

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"llm_provider": "ollama", "tts_voice": "nova"}))
        with patch("study_reviewer.config.CONFIG_PATH", path):
            s = load_settings()
        assert s.llm_provider == "ollama"
        assert not hasattr(s, "tts_voice")

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "config.json"
        with patch("study_reviewer.config.CONFIG_PATH", path):
            save_settings(Settings(subject="nursing board exam", max_question_count=30))
            s = load_settings()
        assert s.subject == "nursing board exam"
        assert s.max_question_count == 30
        assert json.loads(path.read_text())["subject"] == "nursing board exam"
