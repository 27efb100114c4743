from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Term:
    term: str
    definition: str


@dataclass(frozen=True)
class BankEntry:
    """A term flattened out of its category, for cross-category sourcing."""
    term: str
    definition: str
    category_id: str


@dataclass(frozen=True)
class Category:
    id: str
    label: str
    terms: tuple[Term, ...]
    accent: str = ""

    def entries(self) -> list[BankEntry]:
        return [BankEntry(t.term, t.definition, self.id) for t in self.terms]


@dataclass(frozen=True)
class TermBank:
    categories: tuple[Category, ...] = ()

    def __len__(self) -> int:
        return len(self.categories)

    def __iter__(self):
        return iter(self.categories)

    def category(self, category_id: str) -> Category | None:
        return next((c for c in self.categories if c.id == category_id), None)

    def flat(self) -> list[BankEntry]:
        return [e for c in self.categories for e in c.entries()]

    def term_count(self) -> int:
        return sum(len(c.terms) for c in self.categories)

    def search(self, query: str) -> list[BankEntry]:
        """Case-insensitive substring match on term or definition (2+ chars)."""
        q = query.strip().lower()
        if len(q) < 2:
            return []
        return [
            e for e in self.flat()
            if q in e.term.lower() or q in e.definition.lower()
        ]


@dataclass(frozen=True)
class Question:
    prompt_term: str
    correct_definition: str
    category_id: str
    options: tuple[str, ...]

    def is_correct(self, option: str | None) -> bool:
        return option is not None and option == self.correct_definition


@dataclass(frozen=True)
class ExamSection:
    category_id: str
    label: str
    accent: str
    questions: tuple[Question, ...]


@dataclass(frozen=True)
class AnswerRecord:
    question: Question
    chosen: str | None = None

    @property
    def answered(self) -> bool:
        return self.chosen is not None

    @property
    def is_correct(self) -> bool:
        return self.question.is_correct(self.chosen)

    def to_dict(self) -> dict:
        return {
            "term": self.question.prompt_term,
            "correct_definition": self.question.correct_definition,
            "chosen": self.chosen,
            "correct": self.is_correct,
        }


@dataclass(frozen=True)
class Grade:
    label: str
    description: str = ""


@dataclass(frozen=True)
class QuizResult:
    records: tuple[AnswerRecord, ...]
    correct: int
    total: int
    pct: int
    grade: Grade

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "total": self.total,
            "pct": self.pct,
            "grade": self.grade.label,
            "answers": [r.to_dict() for r in self.records],
        }


@dataclass(frozen=True)
class SectionResult:
    category_id: str
    label: str
    accent: str
    records: tuple[AnswerRecord, ...]
    correct: int
    total: int
    pct: int

    def to_dict(self) -> dict:
        return {
            "category_id": self.category_id,
            "label": self.label,
            "accent": self.accent,
            "correct": self.correct,
            "total": self.total,
            "pct": self.pct,
            "answers": [r.to_dict() for r in self.records],
        }


@dataclass(frozen=True)
class ExamResult:
    sections: tuple[SectionResult, ...]
    correct: int
    total: int
    pct: int
    grade: Grade
    answered: int = 0

    def missed(self) -> list[AnswerRecord]:
        """Wrong or unanswered records, in exam order."""
        return [r for s in self.sections for r in s.records if not r.is_correct]

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "total": self.total,
            "answered": self.answered,
            "pct": self.pct,
            "grade": self.grade.label,
            "grade_description": self.grade.description,
            "sections": [s.to_dict() for s in self.sections],
        }


@dataclass(frozen=True)
class OptionFeedback:
    option: str
    correct: bool
    chosen: bool

    def to_dict(self) -> dict:
        return {"option": self.option, "correct": self.correct, "chosen": self.chosen}
