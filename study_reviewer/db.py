from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path

from study_reviewer.models import GeneratedQuestion

SCHEMA = """
CREATE TABLE IF NOT EXISTS quizzes (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    source_filename TEXT NOT NULL,
    source_content TEXT NOT NULL,
    question_type TEXT NOT NULL,
    total_questions INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_quizzes_created_at ON quizzes(created_at DESC);

CREATE TABLE IF NOT EXISTS questions (
    id TEXT PRIMARY KEY,
    quiz_id TEXT NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
    type TEXT NOT NULL,
    question_text TEXT NOT NULL,
    correct_answer TEXT NOT NULL,
    options_json TEXT,
    explanation TEXT,
    order_num INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_questions_quiz_id ON questions(quiz_id);

CREATE TABLE IF NOT EXISTS attempts (
    id TEXT PRIMARY KEY,
    quiz_id TEXT NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
    score INTEGER NOT NULL DEFAULT 0,
    total INTEGER NOT NULL DEFAULT 0,
    answers_json TEXT NOT NULL DEFAULT '{}',
    time_spent INTEGER NOT NULL DEFAULT 0,
    completed_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_attempts_quiz_id ON attempts(quiz_id);

CREATE TABLE IF NOT EXISTS bookmarks (
    id TEXT PRIMARY KEY,
    question_id TEXT NOT NULL UNIQUE REFERENCES questions(id) ON DELETE CASCADE,
    quiz_id TEXT NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS study_notes (
    id TEXT PRIMARY KEY,
    question_id TEXT NOT NULL UNIQUE REFERENCES questions(id) ON DELETE CASCADE,
    quiz_id TEXT NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
    note_text TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _question_row(row: sqlite3.Row) -> dict:
    d = dict(row)
    options = d.pop("options_json", None)
    d["options"] = json.loads(options) if options else None
    return d


def _attempt_row(row: sqlite3.Row) -> dict:
    d = dict(row)
    d["answers"] = json.loads(d.pop("answers_json") or "{}")
    return d


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    # ── Quizzes ───────────────────────────────────────────────────────────

    def _insert_quiz(
        self,
        title: str,
        source_filename: str,
        source_content: str,
        question_type: str,
        total_questions: int,
    ) -> str:
        quiz_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO quizzes (id, title, source_filename, source_content, "
            "question_type, total_questions, created_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (quiz_id, title, source_filename, source_content, question_type,
             total_questions, _now()),
        )
        return quiz_id

    def create_quiz(
        self,
        title: str,
        source_filename: str,
        source_content: str,
        question_type: str,
        total_questions: int,
    ) -> dict:
        with self.conn:
            quiz_id = self._insert_quiz(
                title, source_filename, source_content, question_type, total_questions,
            )
        return self.get_quiz(quiz_id)

    def create_quiz_with_questions(
        self,
        title: str,
        source_filename: str,
        source_content: str,
        question_type: str,
        questions: list[GeneratedQuestion],
    ) -> dict:
        """Store a quiz and its questions in one transaction; nothing is kept on failure."""
        with self.conn:
            quiz_id = self._insert_quiz(
                title, source_filename, source_content, question_type, len(questions),
            )
            self._insert_questions(quiz_id, questions)
        return self.get_quiz(quiz_id)

    def get_quiz(self, quiz_id: str) -> dict | None:
        row = self.conn.execute(
            "SELECT * FROM quizzes WHERE id = ?", (quiz_id,)
        ).fetchone()
        return dict(row) if row else None

    def get_all_quizzes(self) -> list[dict]:
        """Newest first."""
        rows = self.conn.execute(
            "SELECT * FROM quizzes ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
        return [dict(r) for r in rows]

    def delete_quiz(self, quiz_id: str) -> bool:
        cur = self.conn.execute("DELETE FROM quizzes WHERE id = ?", (quiz_id,))
        self.conn.commit()
        return cur.rowcount > 0

    def get_quiz_count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) FROM quizzes").fetchone()
        return row[0]

    # ── Questions ─────────────────────────────────────────────────────────

    def _insert_questions(self, quiz_id: str, questions: list[GeneratedQuestion]) -> None:
        for order_num, q in enumerate(questions, 1):
            self.conn.execute(
                "INSERT INTO questions (id, quiz_id, type, question_text, correct_answer, "
                "options_json, explanation, order_num) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    str(uuid.uuid4()),
                    quiz_id,
                    q.type,
                    q.question_text,
                    q.correct_answer,
                    json.dumps(q.options) if q.options is not None else None,
                    q.explanation,
                    order_num,
                ),
            )

    def create_questions(self, quiz_id: str, questions: list[GeneratedQuestion]) -> list[dict]:
        """Store *questions* in order; ``order_num`` starts at 1. All or nothing."""
        with self.conn:
            self._insert_questions(quiz_id, questions)
        return self.get_questions_by_quiz_id(quiz_id)

    def get_questions_by_quiz_id(self, quiz_id: str) -> list[dict]:
        rows = self.conn.execute(
            "SELECT * FROM questions WHERE quiz_id = ? ORDER BY order_num ASC",
            (quiz_id,),
        ).fetchall()
        return [_question_row(r) for r in rows]

    def get_question(self, question_id: str) -> dict | None:
        row = self.conn.execute(
            "SELECT * FROM questions WHERE id = ?", (question_id,)
        ).fetchone()
        return _question_row(row) if row else None

    def get_question_count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) FROM questions").fetchone()
        return row[0]

    # ── Attempts ──────────────────────────────────────────────────────────

    def create_attempt(
        self,
        quiz_id: str,
        score: int,
        total: int,
        answers: dict[str, str],
        time_spent: int = 0,
    ) -> dict:
        attempt_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO attempts (id, quiz_id, score, total, answers_json, time_spent, "
            "completed_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (attempt_id, quiz_id, score, total, json.dumps(answers), time_spent, _now()),
        )
        self.conn.commit()
        return self.get_attempt(attempt_id)

    def get_attempt(self, attempt_id: str) -> dict | None:
        row = self.conn.execute(
            "SELECT * FROM attempts WHERE id = ?", (attempt_id,)
        ).fetchone()
        return _attempt_row(row) if row else None

    def get_attempts_by_quiz_id(self, quiz_id: str) -> list[dict]:
        rows = self.conn.execute(
            "SELECT * FROM attempts WHERE quiz_id = ? ORDER BY completed_at DESC, rowid DESC",
            (quiz_id,),
        ).fetchall()
        return [_attempt_row(r) for r in rows]

    def get_all_attempts(self) -> list[dict]:
        rows = self.conn.execute(
            "SELECT * FROM attempts ORDER BY completed_at DESC, rowid DESC"
        ).fetchall()
        return [_attempt_row(r) for r in rows]

    # ── Bookmarks ─────────────────────────────────────────────────────────

    def create_bookmark(self, question_id: str, quiz_id: str) -> dict | None:
        """Bookmark a question. Returns None if it is already bookmarked."""
        bookmark_id = str(uuid.uuid4())
        cur = self.conn.execute(
            "INSERT OR IGNORE INTO bookmarks (id, question_id, quiz_id, created_at) "
            "VALUES (?, ?, ?, ?)",
            (bookmark_id, question_id, quiz_id, _now()),
        )
        self.conn.commit()
        if cur.rowcount == 0:
            return None
        row = self.conn.execute(
            "SELECT * FROM bookmarks WHERE id = ?", (bookmark_id,)
        ).fetchone()
        return dict(row)

    def delete_bookmark(self, question_id: str) -> bool:
        cur = self.conn.execute(
            "DELETE FROM bookmarks WHERE question_id = ?", (question_id,)
        )
        self.conn.commit()
        return cur.rowcount > 0

    def is_bookmarked(self, question_id: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM bookmarks WHERE question_id = ?", (question_id,)
        ).fetchone()
        return row is not None

    def get_bookmarked_questions(self, quiz_id: str | None = None) -> list[dict]:
        """Bookmarks joined with their question and quiz title, newest first."""
        sql = """
            SELECT b.id AS bookmark_id, b.created_at AS bookmarked_at,
                   q.*, z.title AS quiz_title
            FROM bookmarks b
            JOIN questions q ON q.id = b.question_id
            JOIN quizzes z ON z.id = b.quiz_id
        """
        params: tuple = ()
        if quiz_id:
            sql += " WHERE b.quiz_id = ?"
            params = (quiz_id,)
        sql += " ORDER BY b.created_at DESC, b.rowid DESC"
        rows = self.conn.execute(sql, params).fetchall()
        return [_question_row(r) for r in rows]

    # ── Study notes ───────────────────────────────────────────────────────

    def save_study_note(self, question_id: str, quiz_id: str, note_text: str) -> dict:
        """Create the note for a question, or replace its text if one exists."""
        now = _now()
        self.conn.execute(
            "INSERT INTO study_notes (id, question_id, quiz_id, note_text, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(question_id) DO UPDATE SET note_text = excluded.note_text, "
            "updated_at = excluded.updated_at",
            (str(uuid.uuid4()), question_id, quiz_id, note_text, now, now),
        )
        self.conn.commit()
        return self.get_study_note(question_id)

    def get_study_note(self, question_id: str) -> dict | None:
        row = self.conn.execute(
            "SELECT * FROM study_notes WHERE question_id = ?", (question_id,)
        ).fetchone()
        return dict(row) if row else None

    def get_study_notes_by_quiz_id(self, quiz_id: str) -> list[dict]:
        rows = self.conn.execute(
            "SELECT * FROM study_notes WHERE quiz_id = ? ORDER BY created_at DESC, rowid DESC",
            (quiz_id,),
        ).fetchall()
        return [dict(r) for r in rows]

    def delete_study_note(self, question_id: str) -> bool:
        cur = self.conn.execute(
            "DELETE FROM study_notes WHERE question_id = ?", (question_id,)
        )
        self.conn.commit()
        return cur.rowcount > 0

    # ── Stats ─────────────────────────────────────────────────────────────

    def get_stats(self) -> dict:
        attempts = self.conn.execute(
            "SELECT COUNT(*) AS n, COALESCE(SUM(score), 0) AS score, "
            "COALESCE(SUM(total), 0) AS total, COALESCE(SUM(time_spent), 0) AS time_spent "
            "FROM attempts"
        ).fetchone()
        bookmarks = self.conn.execute("SELECT COUNT(*) FROM bookmarks").fetchone()[0]
        notes = self.conn.execute("SELECT COUNT(*) FROM study_notes").fetchone()[0]
        accuracy = round(attempts["score"] / attempts["total"] * 100, 1) if attempts["total"] else 0
        return {
            "total_quizzes": self.get_quiz_count(),
            "total_questions": self.get_question_count(),
            "total_attempts": attempts["n"],
            "accuracy": accuracy,
            "total_time_spent": attempts["time_spent"],
            "bookmarks": bookmarks,
            "study_notes": notes,
        }
