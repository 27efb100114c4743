"""Assemble a full exam: one section per category, sized by the allocator."""
from __future__ import annotations

import logging

from midterm_quiz.allocator import ALLOCATION_FLOOR, allocate_question_counts
from midterm_quiz.models import ExamSection, TermBank
from midterm_quiz.question_builder import DISTRACTOR_COUNT, build_questions
from midterm_quiz.sampler import Sampler

_log = logging.getLogger("midterm_quiz.exam")

EXAM_TARGET = 100


def plan_exam(
    bank: TermBank,
    target: int = EXAM_TARGET,
    floor: int = ALLOCATION_FLOOR,
    strict: bool = False,
) -> list[dict]:
    """Per-category question counts for an exam, without building questions."""
    counts = allocate_question_counts(
        [len(c.terms) for c in bank], target, floor=floor, strict=strict,
    )
    return [
        {"category_id": c.id, "label": c.label, "terms": len(c.terms), "questions": n}
        for c, n in zip(bank, counts)
    ]


def build_exam(
    bank: TermBank,
    target: int = EXAM_TARGET,
    sampler: Sampler | None = None,
    floor: int = ALLOCATION_FLOOR,
    distractor_count: int = DISTRACTOR_COUNT,
    strict: bool = False,
) -> list[ExamSection]:
    """Build exam sections in category order.

    Questions within a section are shuffled; distractors may come from any
    category in the bank.
    """
    sampler = sampler or Sampler()
    flat = bank.flat()
    counts = allocate_question_counts(
        [len(c.terms) for c in bank], target, floor=floor, strict=strict,
    )

    sections: list[ExamSection] = []
    for category, count in zip(bank, counts):
        questions = build_questions(
            category.entries(), flat, count,
            sampler=sampler, distractor_count=distractor_count,
        )
        sections.append(ExamSection(
            category_id=category.id,
            label=category.label,
            accent=category.accent,
            questions=tuple(questions),
        ))

    _log.info(
        "Built exam: %d sections, %d questions (target %d)",
        len(sections), sum(len(s.questions) for s in sections), target,
    )
    return sections
