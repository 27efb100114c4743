"""Build multiple-choice questions from (term, definition) pairs in the bank."""
from __future__ import annotations

import logging
from typing import Sequence

from midterm_quiz.models import BankEntry, Category, Question, TermBank
from midterm_quiz.sampler import Sampler

_log = logging.getLogger("midterm_quiz.qgen")

DISTRACTOR_COUNT = 3
QUICK_QUIZ_SIZE = 10


def generate_distractors(
    term: str,
    bank: Sequence[BankEntry],
    sampler: Sampler,
    count: int = DISTRACTOR_COUNT,
) -> list[str]:
    """Draw *count* wrong definitions from entries whose term differs from *term*.

    Exclusion is on the term field only, so another term that happens to share
    the same definition text stays eligible.  Returns fewer than *count* when
    the bank is too small.
    """
    pool = [e for e in bank if e.term != term]
    picked = sampler.sample_without_replacement(pool, count)
    if len(picked) < count:
        _log.warning(
            "Only %d distractor(s) available for '%s' (wanted %d)",
            len(picked), term, count,
        )
    return [e.definition for e in picked]


def build_question(
    entry: BankEntry,
    bank: Sequence[BankEntry],
    sampler: Sampler,
    distractor_count: int = DISTRACTOR_COUNT,
) -> Question:
    distractors = generate_distractors(entry.term, bank, sampler, distractor_count)
    options = sampler.shuffle([entry.definition, *distractors])
    return Question(
        prompt_term=entry.term,
        correct_definition=entry.definition,
        category_id=entry.category_id,
        options=tuple(options),
    )


def build_questions(
    pool: Sequence[BankEntry],
    bank: Sequence[BankEntry],
    count: int,
    sampler: Sampler | None = None,
    distractor_count: int = DISTRACTOR_COUNT,
) -> list[Question]:
    """Sample up to *count* entries from *pool* and turn each into a Question.

    Question order follows the sample shuffle, not the pool order.
    """
    sampler = sampler or Sampler()
    picked = sampler.sample_without_replacement(pool, min(count, len(pool)))
    return [build_question(e, bank, sampler, distractor_count) for e in picked]


def build_quick_quiz(
    category: Category,
    bank: TermBank,
    sampler: Sampler | None = None,
    size: int = QUICK_QUIZ_SIZE,
    distractor_count: int = DISTRACTOR_COUNT,
) -> list[Question]:
    """Up to *size* questions on one category, distractors from the whole bank."""
    questions = build_questions(
        category.entries(), bank.flat(), size,
        sampler=sampler, distractor_count=distractor_count,
    )
    _log.info("Built quick quiz for '%s': %d questions", category.label, len(questions))
    return questions
