"""Turn extracted study material into quiz questions with one LLM call."""
from __future__ import annotations

import json
import logging
import math
import re
import sqlite3
from typing import TYPE_CHECKING

from study_reviewer.errors import (
    ConfigurationError,
    MalformedResponseError,
    QuestionGenerationError,
    RemoteCallError,
    StorageError,
)
from study_reviewer.models import (
    QUESTION_KINDS,
    QUESTION_TYPES,
    TRUE_FALSE_OPTIONS,
    GeneratedQuestion,
)
from study_reviewer.prompts import (
    BASE_INSTRUCTION,
    SYSTEM_PROMPT,
    TYPE_PROMPTS,
    format_mixed_counts,
)

if TYPE_CHECKING:
    from study_reviewer.config import Settings
    from study_reviewer.db import Database
    from study_reviewer.providers.base import LLMProvider

_log = logging.getLogger("study_reviewer.qgen")

CONTENT_CHAR_LIMIT = 10000
DEFAULT_SUBJECT = "board exam"

# Fractions of a mixed quiz given to multiple_choice and identification;
# true_false receives whatever the floors leave over.
DEFAULT_MIXED_SPLIT = (0.5, 0.25)


def split_mixed_count(count: int, split: tuple[float, float] | list[float] = DEFAULT_MIXED_SPLIT) -> dict[str, int]:
    """Deterministically divide *count* across the three concrete question types."""
    mc_share, id_share = split
    if mc_share < 0 or id_share < 0 or mc_share + id_share > 1:
        raise ValueError(f"Invalid mixed split: {list(split)}")
    multiple_choice = math.floor(count * mc_share)
    identification = math.floor(count * id_share)
    return {
        "multiple_choice": multiple_choice,
        "identification": identification,
        "true_false": count - multiple_choice - identification,
    }


def build_prompt(
    content: str,
    question_type: str,
    count: int,
    *,
    char_limit: int = CONTENT_CHAR_LIMIT,
    mixed_split: tuple[float, float] | list[float] = DEFAULT_MIXED_SPLIT,
    subject: str = DEFAULT_SUBJECT,
) -> str:
    base = BASE_INSTRUCTION.format(subject=subject, content=content[:char_limit])
    if question_type == "mixed":
        body = format_mixed_counts(split_mixed_count(count, mixed_split))
    else:
        body = TYPE_PROMPTS[question_type].format(count=count)
    return f"{base}\n\n{body}"


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _coerce_question(item: dict, index: int, question_type: str, raw: str) -> GeneratedQuestion:
    qtype = item.get("type")
    if qtype not in QUESTION_KINDS:
        if question_type == "mixed":
            raise MalformedResponseError(
                f"Question {index + 1} has no valid type (got {qtype!r})", raw,
            )
        qtype = question_type

    options = item.get("options")
    if qtype == "identification":
        options = None
    elif isinstance(options, list) and options:
        options = [_as_text(o) for o in options]
    elif qtype == "true_false":
        options = list(TRUE_FALSE_OPTIONS)
    else:
        options = None

    explanation = item.get("explanation")
    explanation = _as_text(explanation) or None

    question = GeneratedQuestion(
        type=qtype,
        question_text=_as_text(item.get("question_text")) or f"Question {index + 1}",
        correct_answer=_as_text(item.get("correct_answer")),
        options=options,
        explanation=explanation,
    )
    if question.options and question.correct_answer not in question.options:
        _log.warning(
            "Question %d: correct answer %r is not among its options", index + 1, question.correct_answer,
        )
    return question


def parse_questions(response: str, question_type: str) -> list[GeneratedQuestion]:
    """Decode a completion response into :class:`GeneratedQuestion` objects.

    Code fences are stripped first.  Anything that is not a JSON array of
    objects raises :class:`MalformedResponseError` carrying the raw text.
    Missing fields get defaults instead of rejecting the batch.
    """
    cleaned = strip_code_fence(response)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        _log.error("Could not parse questions: %s\nRaw response:\n%s", e, response)
        raise MalformedResponseError("Failed to parse generated questions", response) from e

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        _log.error("Expected a JSON array of objects\nRaw response:\n%s", response)
        raise MalformedResponseError(
            "Failed to parse generated questions: expected a JSON array of objects", response,
        )

    return [_coerce_question(item, i, question_type, response) for i, item in enumerate(data)]


async def generate_questions(
    llm: LLMProvider,
    content: str,
    question_type: str,
    count: int,
    *,
    char_limit: int = CONTENT_CHAR_LIMIT,
    mixed_split: tuple[float, float] | list[float] = DEFAULT_MIXED_SPLIT,
    subject: str = DEFAULT_SUBJECT,
    temperature: float = 0.2,
    max_tokens: int = 4096,
) -> list[GeneratedQuestion]:
    """Generate up to *count* questions from *content* with a single LLM call.

    Never retries and never pads: the model may return fewer questions than
    asked for.  Raises a :class:`QuestionGenerationError` subclass on failure.
    """
    if question_type not in QUESTION_TYPES:
        raise QuestionGenerationError(f"Unknown question type: {question_type}")
    if count < 1:
        raise QuestionGenerationError("Question count must be at least 1")

    prompt = build_prompt(
        content, question_type, count,
        char_limit=char_limit, mixed_split=mixed_split, subject=subject,
    )

    _log.info("Generating %d %s questions with %s", count, question_type, llm.name())
    try:
        response = await llm.generate(
            prompt,
            temperature=temperature,
            system=SYSTEM_PROMPT.format(subject=subject),
            max_tokens=max_tokens,
        )
    except ConfigurationError:
        raise
    except Exception as e:
        _log.warning("Completion call failed: %s", e)
        raise RemoteCallError(f"Failed to generate questions: {e}") from e

    questions = parse_questions(response or "", question_type)
    if len(questions) > count:
        _log.info("Model returned %d questions, keeping the first %d", len(questions), count)
        questions = questions[:count]
    _log.info("Parsed %d questions", len(questions))
    return questions


def title_from_filename(filename: str) -> str:
    title = re.sub(r"\.[^/.]+$", "", filename)
    title = re.sub(r"[-_]", " ", title)
    title = re.sub(r"\s+", " ", title).strip()
    return title or "Quiz"


async def generate_quiz(
    llm: LLMProvider,
    db: Database,
    settings: Settings,
    content: str,
    filename: str,
    question_type: str,
    count: int,
) -> dict:
    """Generate questions for an uploaded document and store them as a quiz."""
    questions = await generate_questions(
        llm, content, question_type, count,
        char_limit=settings.content_char_limit,
        mixed_split=settings.mixed_split,
        subject=settings.subject,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )
    if not questions:
        raise QuestionGenerationError("Failed to generate questions. Please try again.")

    try:
        quiz = db.create_quiz_with_questions(
            title=title_from_filename(filename),
            source_filename=filename,
            source_content=content[: settings.stored_content_limit],
            question_type=question_type,
            questions=questions,
        )
    except sqlite3.Error as e:
        _log.error("Could not save quiz for %s: %s", filename, e)
        raise StorageError(f"Failed to save quiz: {e}") from e
    _log.info("Saved quiz %s (%d questions)", quiz["id"], len(questions))
    return {
        "quizId": quiz["id"],
        "title": quiz["title"],
        "questionCount": len(questions),
    }
