"""Grade a submitted quiz attempt."""
from __future__ import annotations

from study_reviewer.models import QuizScore


def normalize_answer(answer) -> str:
    if answer is None:
        return ""
    return str(answer).strip().lower()


def grade_answers(questions: list[dict], answers: dict[str, str]) -> QuizScore:
    """Score *answers* (question id -> answer) against stored questions.

    Comparison is case-insensitive and ignores surrounding whitespace.
    Unanswered questions, and questions stored without a correct answer,
    count as wrong.
    """
    result = QuizScore(score=0, total=len(questions))
    for q in questions:
        result.correct_answers[q["id"]] = q["correct_answer"]
        expected = normalize_answer(q["correct_answer"])
        if expected and normalize_answer(answers.get(q["id"])) == expected:
            result.score += 1
    return result
