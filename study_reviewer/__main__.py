"""CLI entry point for study-reviewer.

Usage:
  python -m study_reviewer serve [--port PORT] [--host HOST]
  python -m study_reviewer extract FILE
  python -m study_reviewer generate FILE [--type TYPE] [--count N]
  python -m study_reviewer stats
  python -m study_reviewer check
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "extract":
        _extract(args[1:])
    elif command == "generate":
        _generate(args[1:])
    elif command == "stats":
        _stats()
    elif command == "check":
        _check()
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, extract, generate, stats, check")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _int_flag(args: list[str], name: str, default: int) -> int:
    value = _parse_flag(args, name, str(default))
    try:
        return int(value)
    except ValueError:
        print(f"Invalid {name}: {value}")
        sys.exit(1)


def _serve(args: list[str]):
    import uvicorn

    port = _int_flag(args, "--port", 8765)
    host = _parse_flag(args, "--host", "127.0.0.1")
    print(f"Starting Study Reviewer on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "study_reviewer.app:app",
        host=host,
        port=port,
        reload=False,
        timeout_graceful_shutdown=5,
    )


def _load_document(args: list[str]):
    from study_reviewer.config import load_settings
    from study_reviewer.extraction import extract_document, require_min_content

    if not args or args[0].startswith("--"):
        print("Missing FILE argument")
        sys.exit(1)
    path = Path(args[0])
    if not path.exists():
        print(f"File not found: {path}")
        sys.exit(1)

    settings = load_settings()
    result = require_min_content(
        extract_document(
            path.read_bytes(),
            path.name,
            max_uncompressed_bytes=settings.max_archive_bytes,
            max_compression_ratio=settings.max_compression_ratio,
        ),
        settings.min_content_chars,
    )
    if not result.ok:
        print(f"Extraction failed: {result.error}")
        sys.exit(1)
    return path, result, settings


def _extract(args: list[str]):
    _path, result, _settings = _load_document(args)
    print(result.text)
    meta = result.metadata.to_dict() if result.metadata else {}
    if meta:
        print("\n" + ", ".join(f"{k}: {v}" for k, v in meta.items()))


def _generate(args: list[str]):
    from study_reviewer.db import Database
    from study_reviewer.errors import ReviewerError
    from study_reviewer.models import QUESTION_TYPES
    from study_reviewer.providers.registry import get_llm
    from study_reviewer.question_generator import generate_quiz

    question_type = _parse_flag(args, "--type", "multiple_choice")
    count = _int_flag(args, "--count", 10)
    if question_type not in QUESTION_TYPES:
        print(f"Unknown question type: {question_type}")
        print(f"Types: {', '.join(QUESTION_TYPES)}")
        sys.exit(1)

    path, result, settings = _load_document(args)
    if not 1 <= count <= settings.max_question_count:
        print(f"Question count must be between 1 and {settings.max_question_count}")
        sys.exit(1)

    db = Database(settings.db_full_path)
    print(f"Generating {count} {question_type} questions using {settings.llm_provider}...")
    try:
        llm = get_llm(settings)
        quiz = asyncio.run(generate_quiz(
            llm, db, settings, result.text, path.name, question_type, count,
        ))
    except ReviewerError as e:
        print(f"Generation failed: {e}")
        sys.exit(1)
    finally:
        db.close()

    print(f"\nCreated quiz '{quiz['title']}' ({quiz['questionCount']} questions)")
    print(f"Quiz id: {quiz['quizId']}")


def _stats():
    from study_reviewer.config import load_settings
    from study_reviewer.db import Database

    settings = load_settings()
    db = Database(settings.db_full_path)
    stats = db.get_stats()
    db.close()

    print(f"Quizzes:      {stats['total_quizzes']}")
    print(f"Questions:    {stats['total_questions']}")
    print(f"Attempts:     {stats['total_attempts']}")
    print(f"Accuracy:     {stats['accuracy']}%")
    print(f"Bookmarks:    {stats['bookmarks']}")
    print(f"Study notes:  {stats['study_notes']}")


def _check():
    from study_reviewer.config import load_settings
    from study_reviewer.errors import ConfigurationError
    from study_reviewer.providers.base import check_connection
    from study_reviewer.providers.registry import get_llm

    settings = load_settings()
    try:
        llm = get_llm(settings)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    print(f"Checking {llm.name()}...")
    if not asyncio.run(check_connection(llm)):
        print("No response from the model")
        sys.exit(1)
    print("OK")


if __name__ == "__main__":
    main()
