"""FastAPI application with all routes."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from study_reviewer.config import Settings, load_settings, save_settings
from study_reviewer.db import Database
from study_reviewer.errors import ReviewerError
from study_reviewer.extraction import extract_document, require_min_content
from study_reviewer.models import QUESTION_TYPES
from study_reviewer.providers.registry import get_llm
from study_reviewer.question_generator import generate_quiz
from study_reviewer.scoring import grade_answers
from study_reviewer.verse import VerseService

_log = logging.getLogger("study_reviewer.app")

app = FastAPI(title="Study Reviewer")

# Global state (initialized in startup)
_db: Database | None = None
_settings: Settings | None = None
_verse: VerseService | None = None


def get_db() -> Database:
    assert _db is not None
    return _db


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_verse_service() -> VerseService:
    global _verse
    if _verse is None:
        s = get_settings()
        _verse = VerseService(api_url=s.verse_api_url, ttl_seconds=s.verse_cache_seconds)
    return _verse


def _get_llm():
    return get_llm(get_settings())


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


async def _json_object(request: Request) -> dict | None:
    """The request body as a JSON object, or None if it is not one."""
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


@app.on_event("startup")
async def startup():
    global _db, _settings
    if _db is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _db = Database(_settings.db_full_path)


@app.on_event("shutdown")
async def shutdown():
    if _db:
        _db.close()


# ── API: Upload ───────────────────────────────────────────────────────────

@app.post("/api/upload")
async def api_upload(request: Request):
    s = get_settings()
    form = await request.form()
    upload = form.get("file")
    if upload is None or isinstance(upload, str):
        return _error("No file provided")

    data = await upload.read()
    if len(data) > s.max_upload_bytes:
        return _error(f"File too large. Maximum size is {s.max_upload_mb}MB.")

    filename = upload.filename or ""
    result = require_min_content(
        extract_document(
            data,
            filename,
            max_uncompressed_bytes=s.max_archive_bytes,
            max_compression_ratio=s.max_compression_ratio,
        ),
        s.min_content_chars,
    )
    if not result.ok:
        _log.info("Upload rejected (%s): %s", filename, result.error)
        return _error(result.error or "Failed to parse file")
    return result.to_dict()


# ── API: Generate quiz ────────────────────────────────────────────────────

@app.post("/api/generate")
async def api_generate(request: Request):
    s = get_settings()
    body = await _json_object(request)
    if body is None:
        return _error("Request body must be a JSON object")
    content = body.get("content")
    filename = body.get("filename")
    question_type = body.get("questionType")
    count = body.get("questionCount")

    if not content or not filename or not question_type or not count:
        return _error("Missing required fields")
    if not isinstance(content, str) or not isinstance(filename, str):
        return _error("content and filename must be strings")
    if question_type not in QUESTION_TYPES:
        return _error(f"Unknown question type: {question_type}")
    if not isinstance(count, int) or isinstance(count, bool) or not 1 <= count <= s.max_question_count:
        return _error(f"Question count must be between 1 and {s.max_question_count}")

    try:
        llm = _get_llm()
        result = await generate_quiz(llm, get_db(), s, content, filename, question_type, count)
    except (ReviewerError, ValueError) as e:
        _log.warning("Generation failed: %s", e)
        return _error(str(e), 500)
    return {"success": True, **result}


# ── API: Quizzes ──────────────────────────────────────────────────────────

@app.get("/api/quizzes")
async def api_quizzes():
    db = get_db()
    quizzes = [
        {**quiz, "attempts": db.get_attempts_by_quiz_id(quiz["id"])}
        for quiz in db.get_all_quizzes()
    ]
    return {"success": True, "quizzes": quizzes}


@app.get("/api/quiz/{quiz_id}")
async def api_quiz(quiz_id: str):
    db = get_db()
    quiz = db.get_quiz(quiz_id)
    if not quiz:
        return _error("Quiz not found", 404)
    return {"success": True, "quiz": {**quiz, "questions": db.get_questions_by_quiz_id(quiz_id)}}


@app.delete("/api/quiz/{quiz_id}")
async def api_quiz_delete(quiz_id: str):
    if not get_db().delete_quiz(quiz_id):
        return _error("Quiz not found", 404)
    return {"success": True}


@app.post("/api/quiz/{quiz_id}/submit")
async def api_quiz_submit(quiz_id: str, request: Request):
    body = await _json_object(request)
    if body is None:
        return _error("Request body must be a JSON object")
    answers = body.get("answers")
    time_spent = body.get("timeSpent") or 0

    if not isinstance(answers, dict):
        return _error("Answers are required")
    if not isinstance(time_spent, (int, float)) or isinstance(time_spent, bool) or time_spent < 0:
        return _error("timeSpent must be a non-negative number of seconds")

    db = get_db()
    quiz = db.get_quiz(quiz_id)
    questions = db.get_questions_by_quiz_id(quiz_id)
    if not quiz or not questions:
        return _error("Quiz not found", 404)

    graded = grade_answers(questions, answers)
    attempt = db.create_attempt(
        quiz_id,
        score=graded.score,
        total=graded.total,
        answers=answers,
        time_spent=int(time_spent),
    )
    return {
        "success": True,
        "attemptId": attempt["id"],
        "score": graded.score,
        "total": graded.total,
        "percentage": graded.percentage,
        "correctAnswers": graded.correct_answers,
    }


@app.get("/api/attempts/{attempt_id}")
async def api_attempt(attempt_id: str):
    attempt = get_db().get_attempt(attempt_id)
    if not attempt:
        return _error("Attempt not found", 404)
    return {"success": True, "attempt": attempt}


# ── API: Bookmarks ────────────────────────────────────────────────────────

@app.get("/api/bookmarks")
async def api_bookmarks(quizId: str | None = None):
    return {"success": True, "bookmarks": get_db().get_bookmarked_questions(quizId)}


@app.post("/api/bookmarks")
async def api_bookmark_create(request: Request):
    body = await _json_object(request)
    if body is None:
        return _error("Request body must be a JSON object")
    question_id = body.get("questionId")
    quiz_id = body.get("quizId")
    if not question_id or not quiz_id:
        return _error("Missing questionId or quizId")
    if not isinstance(question_id, str) or not isinstance(quiz_id, str):
        return _error("questionId and quizId must be strings")

    db = get_db()
    question = db.get_question(question_id)
    if not question or question["quiz_id"] != quiz_id:
        return _error("Question not found", 404)

    bookmark = db.create_bookmark(question_id, quiz_id)
    if not bookmark:
        return _error("Failed to create bookmark or already exists")
    return {"success": True, "bookmark": bookmark}


@app.delete("/api/bookmarks")
async def api_bookmark_delete(questionId: str | None = None):
    if not questionId:
        return _error("Missing questionId")
    if not get_db().delete_bookmark(questionId):
        return _error("Failed to delete bookmark", 404)
    return {"success": True}


@app.get("/api/bookmarks/check")
async def api_bookmark_check(questionId: str | None = None):
    if not questionId:
        return _error("Missing questionId")
    return {"success": True, "isBookmarked": get_db().is_bookmarked(questionId)}


# ── API: Study notes ──────────────────────────────────────────────────────

@app.get("/api/notes")
async def api_notes(questionId: str | None = None, quizId: str | None = None):
    db = get_db()
    if questionId:
        return {"success": True, "note": db.get_study_note(questionId)}
    if quizId:
        return {"success": True, "notes": db.get_study_notes_by_quiz_id(quizId)}
    return _error("Missing questionId or quizId")


@app.post("/api/notes")
async def api_note_save(request: Request):
    body = await _json_object(request)
    if body is None:
        return _error("Request body must be a JSON object")
    question_id = body.get("questionId")
    quiz_id = body.get("quizId")
    note_text = body.get("noteText") or ""
    if not isinstance(note_text, str):
        return _error("noteText must be a string")
    note_text = note_text.strip()
    if not question_id or not quiz_id or not note_text:
        return _error("Missing questionId, quizId or noteText")
    if not isinstance(question_id, str) or not isinstance(quiz_id, str):
        return _error("questionId and quizId must be strings")

    db = get_db()
    question = db.get_question(question_id)
    if not question or question["quiz_id"] != quiz_id:
        return _error("Question not found", 404)
    return {"success": True, "note": db.save_study_note(question_id, quiz_id, note_text)}


@app.delete("/api/notes")
async def api_note_delete(questionId: str | None = None):
    if not questionId:
        return _error("Missing questionId")
    if not get_db().delete_study_note(questionId):
        return _error("Failed to delete study note", 404)
    return {"success": True}


# ── API: Stats ────────────────────────────────────────────────────────────

@app.get("/api/stats")
async def api_stats():
    return get_db().get_stats()


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    global _verse
    body = await _json_object(request)
    if body is None:
        return _error("Request body must be a JSON object")
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    for k, v in body.items():
        if k in known:
            setattr(s, k, v)
    save_settings(s)
    _verse = None  # rebuilt with the new URL / TTL on next request
    return s.to_dict()


# ── API: Verse ────────────────────────────────────────────────────────────

@app.get("/api/verse")
async def api_verse():
    verse, cached = await get_verse_service().get_verse()
    if verse is None:
        return _error("Failed to fetch verse from API", 500)
    return {"success": True, "verse": verse.to_dict(), "cached": cached}
