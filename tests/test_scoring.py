"""Tests for quiz grading."""
from __future__ import annotations

from study_reviewer.scoring import grade_answers, normalize_answer


def _q(qid: str, answer: str) -> dict:
    return {"id": qid, "correct_answer": answer}


class TestNormalize:
    def test_case_and_whitespace(self):
        assert normalize_answer("  Metaphase ") == "metaphase"

    def test_none(self):
        assert normalize_answer(None) == ""


class TestGrade:
    def test_all_correct(self):
        questions = [_q("1", "Nucleus"), _q("2", "True")]
        result = grade_answers(questions, {"1": "nucleus", "2": " TRUE "})
        assert result.score == 2
        assert result.total == 2
        assert result.percentage == 100

    def test_unanswered_is_wrong(self):
        questions = [_q("1", "Nucleus"), _q("2", "True"), _q("3", "Metaphase")]
        result = grade_answers(questions, {"1": "Nucleus"})
        assert result.score == 1
        assert result.percentage == 33

    def test_empty_correct_answer_never_matches(self):
        result = grade_answers([_q("1", "")], {"1": ""})
        assert result.score == 0

    def test_correct_answers_reported(self):
        questions = [_q("a", "Nucleus"), _q("b", "False")]
        result = grade_answers(questions, {})
        assert result.correct_answers == {"a": "Nucleus", "b": "False"}

    def test_no_questions(self):
        result = grade_answers([], {})
        assert result.total == 0
        assert result.percentage == 0
