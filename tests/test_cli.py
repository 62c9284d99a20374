"""Tests for the command-line entry point."""
from __future__ import annotations

from unittest.mock import patch

import pytest
from conftest import build_pptx, slide_xml

from study_reviewer.__main__ import _parse_flag, main
from study_reviewer.errors import ConfigurationError


class TestParseFlag:
    def test_present(self):
        assert _parse_flag(["FILE", "--count", "12"], "--count", "10") == "12"

    def test_absent(self):
        assert _parse_flag(["FILE"], "--count", "10") == "10"

    def test_dangling(self):
        assert _parse_flag(["FILE", "--count"], "--count", "10") == "10"


class TestExtractCommand:
    def test_prints_text_and_metadata(self, tmp_path, monkeypatch, capsys):
        deck = tmp_path / "bio.pptx"
        deck.write_bytes(build_pptx({
            1: slide_xml("Cell Theory", "All living things are composed of one or more cells."),
        }))
        monkeypatch.setattr("sys.argv", ["study_reviewer", "extract", str(deck)])
        with patch("study_reviewer.config.CONFIG_PATH", tmp_path / "config.json"):
            main()
        out = capsys.readouterr().out
        assert "[Slide 1]\nCell Theory" in out
        assert "slideCount: 1" in out

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr("sys.argv", ["study_reviewer", "extract", str(tmp_path / "nope.pdf")])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1


def test_unknown_command(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["study_reviewer", "frobnicate"])
    with pytest.raises(SystemExit):
        main()
    assert "Unknown command" in capsys.readouterr().out


class HelloLLM:
    def __init__(self, reply="Hello!"):
        self.reply = reply

    async def generate(self, prompt, temperature=0.2, system=None, max_tokens=4096) -> str:
        return self.reply

    def name(self) -> str:
        return "hello-llm"


class TestCheckCommand:
    def test_ok(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["study_reviewer", "check"])
        with patch("study_reviewer.config.CONFIG_PATH", tmp_path / "config.json"), \
             patch("study_reviewer.providers.registry.get_llm", return_value=HelloLLM()):
            main()
        out = capsys.readouterr().out
        assert "Checking hello-llm..." in out
        assert out.rstrip().endswith("OK")

    def test_no_greeting(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["study_reviewer", "check"])
        with patch("study_reviewer.config.CONFIG_PATH", tmp_path / "config.json"), \
             patch("study_reviewer.providers.registry.get_llm", return_value=HelloLLM(reply="")):
            with pytest.raises(SystemExit) as exc:
                main()
        assert exc.value.code == 1
        assert "No response from the model" in capsys.readouterr().out

    def test_configuration_error(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["study_reviewer", "check"])
        with patch("study_reviewer.config.CONFIG_PATH", tmp_path / "config.json"), \
             patch("study_reviewer.providers.registry.get_llm",
                   side_effect=ConfigurationError("ANTHROPIC_API_KEY is not set")):
            with pytest.raises(SystemExit) as exc:
                main()
        assert exc.value.code == 1
        assert "Configuration error: ANTHROPIC_API_KEY is not set" in capsys.readouterr().out


class TestGenerateCommand:
    def test_non_numeric_count(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["study_reviewer", "generate", str(tmp_path / "bio.pptx"), "--count", "abc"])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1
        assert "Invalid --count: abc" in capsys.readouterr().out

    def test_non_numeric_port(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["study_reviewer", "serve", "--port", "http"])
        with patch("uvicorn.run") as run:
            with pytest.raises(SystemExit):
                main()
        run.assert_not_called()
        assert "Invalid --port: http" in capsys.readouterr().out
