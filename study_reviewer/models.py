from __future__ import annotations

from dataclasses import dataclass, field

# Concrete question kinds; "mixed" is an input-only selector.
QUESTION_KINDS = ("multiple_choice", "identification", "true_false")
QUESTION_TYPES = QUESTION_KINDS + ("mixed",)

TRUE_FALSE_OPTIONS = ["True", "False"]


@dataclass(frozen=True)
class ExtractionMetadata:
    page_count: int | None = None
    slide_count: int | None = None
    title: str | None = None

    def to_dict(self) -> dict:
        d: dict = {}
        if self.page_count is not None:
            d["pageCount"] = self.page_count
        if self.slide_count is not None:
            d["slideCount"] = self.slide_count
        if self.title:
            d["title"] = self.title
        return d


@dataclass(frozen=True)
class ExtractionResult:
    ok: bool
    text: str = ""
    error: str | None = None
    metadata: ExtractionMetadata | None = None

    @classmethod
    def success(cls, text: str, metadata: ExtractionMetadata | None = None) -> ExtractionResult:
        if not " ".join(text.split()):
            return cls.failure("No text content found")
        return cls(ok=True, text=text, metadata=metadata)

    @classmethod
    def failure(cls, error: str) -> ExtractionResult:
        return cls(ok=False, text="", error=error)

    def to_dict(self) -> dict:
        """Upload-boundary shape: ``{success, content?, metadata?, error?}``."""
        if not self.ok:
            return {"success": False, "error": self.error}
        d: dict = {"success": True, "content": self.text}
        if self.metadata is not None:
            d["metadata"] = self.metadata.to_dict()
        return d


@dataclass
class GeneratedQuestion:
    type: str  # multiple_choice | identification | true_false
    question_text: str
    correct_answer: str
    options: list[str] | None = None
    explanation: str | None = None

    def to_dict(self) -> dict:
        d: dict = {
            "type": self.type,
            "question_text": self.question_text,
            "correct_answer": self.correct_answer,
        }
        if self.options is not None:
            d["options"] = list(self.options)
        if self.explanation is not None:
            d["explanation"] = self.explanation
        return d


@dataclass
class QuizScore:
    score: int
    total: int
    correct_answers: dict[str, str] = field(default_factory=dict)

    @property
    def percentage(self) -> int:
        if not self.total:
            return 0
        return round(self.score / self.total * 100)
