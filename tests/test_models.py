"""Tests for data models."""
from __future__ import annotations

from study_reviewer.models import (
    QUESTION_KINDS,
    QUESTION_TYPES,
    ExtractionMetadata,
    ExtractionResult,
    GeneratedQuestion,
    QuizScore,
)


class TestExtractionResult:
    def test_success(self):
        r = ExtractionResult.success("Cell theory", ExtractionMetadata(slide_count=2))
        assert r.ok
        assert r.error is None
        assert r.to_dict() == {"success": True, "content": "Cell theory", "metadata": {"slideCount": 2}}

    def test_whitespace_only_success_becomes_failure(self):
        r = ExtractionResult.success(" \n\t ")
        assert not r.ok
        assert r.text == ""
        assert r.error

    def test_failure(self):
        r = ExtractionResult.failure("Unsupported file type: .txt")
        assert not r.ok
        assert r.text == ""
        assert r.to_dict() == {"success": False, "error": "Unsupported file type: .txt"}

    def test_success_without_metadata(self):
        assert "metadata" not in ExtractionResult.success("text").to_dict()


class TestExtractionMetadata:
    def test_pdf_fields(self):
        meta = ExtractionMetadata(page_count=3, title="Review")
        assert meta.to_dict() == {"pageCount": 3, "title": "Review"}

    def test_empty(self):
        assert ExtractionMetadata().to_dict() == {}


class TestGeneratedQuestion:
    def test_identification_omits_options(self):
        q = GeneratedQuestion(type="identification", question_text="_____ divides.", correct_answer="Mitosis")
        assert q.to_dict() == {
            "type": "identification",
            "question_text": "_____ divides.",
            "correct_answer": "Mitosis",
        }

    def test_options_copied(self):
        options = ["True", "False"]
        q = GeneratedQuestion(type="true_false", question_text="x", correct_answer="True", options=options)
        d = q.to_dict()
        d["options"].append("Maybe")
        assert options == ["True", "False"]


class TestQuestionTypes:
    def test_mixed_is_selector_only(self):
        assert "mixed" in QUESTION_TYPES
        assert "mixed" not in QUESTION_KINDS


class TestQuizScore:
    def test_percentage_rounds(self):
        assert QuizScore(score=2, total=3).percentage == 67

    def test_zero_total(self):
        assert QuizScore(score=0, total=0).percentage == 0
