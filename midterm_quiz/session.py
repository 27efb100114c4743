"""Quiz and exam session state.

Sessions are immutable values: every action returns the next session, or the
same one when the action is not allowed in the current state.  The two modes
lock answers differently:

* Quick quiz: one category, feedback after every answer, answers are
  write-once.
* Exam: every category, answers may be changed freely until ``submit()``;
  correctness is only revealed after submission.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar

from midterm_quiz.allocator import ALLOCATION_FLOOR
from midterm_quiz.exam import EXAM_TARGET, build_exam
from midterm_quiz.grading import exam_grade, percentage, quick_quiz_grade
from midterm_quiz.models import (
    AnswerRecord,
    Category,
    ExamResult,
    ExamSection,
    OptionFeedback,
    Question,
    QuizResult,
    SectionResult,
    TermBank,
)
from midterm_quiz.question_builder import DISTRACTOR_COUNT, QUICK_QUIZ_SIZE, build_quick_quiz
from midterm_quiz.sampler import Sampler

_log = logging.getLogger("midterm_quiz.session")


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    AWAITING_ADVANCE = "awaiting_advance"  # quick quiz: answered, showing feedback
    COMPLETED = "completed"
    SUBMITTED = "submitted"


# ── Quick quiz ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class QuickQuizSession:
    category: Category
    bank: TermBank
    questions: tuple[Question, ...] = ()
    index: int = 0
    answers: tuple[AnswerRecord, ...] = ()
    status: SessionStatus = SessionStatus.NOT_STARTED
    size: int = QUICK_QUIZ_SIZE
    distractor_count: int = DISTRACTOR_COUNT
    sampler: Sampler = field(default_factory=Sampler, compare=False, repr=False)

    mode: ClassVar[str] = "quick"

    @classmethod
    def start(
        cls,
        category: Category,
        bank: TermBank,
        sampler: Sampler | None = None,
        size: int = QUICK_QUIZ_SIZE,
        distractor_count: int = DISTRACTOR_COUNT,
    ) -> QuickQuizSession:
        return cls(category, bank, size=size, distractor_count=distractor_count,
                   sampler=sampler or Sampler()).restart()

    @property
    def current_question(self) -> Question | None:
        if self.status in (SessionStatus.IN_PROGRESS, SessionStatus.AWAITING_ADVANCE):
            return self.questions[self.index]
        return None

    @property
    def selected(self) -> str | None:
        """The option chosen for the current question, once answered."""
        if self.status is SessionStatus.AWAITING_ADVANCE:
            return self.answers[self.index].chosen
        return None

    @property
    def score(self) -> int:
        return sum(1 for r in self.answers if r.is_correct)

    def answer(self, option: str) -> QuickQuizSession:
        if self.status is not SessionStatus.IN_PROGRESS:
            _log.debug("Quick quiz: answer ignored in state %s", self.status.value)
            return self
        q = self.questions[self.index]
        if option not in q.options:
            _log.debug("Quick quiz: '%s' is not an option for '%s'", option, q.prompt_term)
            return self
        return replace(
            self,
            answers=self.answers + (AnswerRecord(q, option),),
            status=SessionStatus.AWAITING_ADVANCE,
        )

    def feedback(self) -> list[OptionFeedback]:
        """Every option of the current question marked correct/chosen.

        Empty until the current question has been answered.
        """
        chosen = self.selected
        if chosen is None:
            return []
        q = self.questions[self.index]
        return [OptionFeedback(opt, q.is_correct(opt), opt == chosen) for opt in q.options]

    def advance(self) -> QuickQuizSession:
        if self.status is not SessionStatus.AWAITING_ADVANCE:
            _log.debug("Quick quiz: advance ignored in state %s", self.status.value)
            return self
        if self.index + 1 >= len(self.questions):
            return replace(self, status=SessionStatus.COMPLETED)
        return replace(self, index=self.index + 1, status=SessionStatus.IN_PROGRESS)

    def restart(self) -> QuickQuizSession:
        """Discard all answers and draw a fresh set of questions."""
        questions = tuple(build_quick_quiz(
            self.category, self.bank, self.sampler,
            size=self.size, distractor_count=self.distractor_count,
        ))
        status = SessionStatus.IN_PROGRESS if questions else SessionStatus.COMPLETED
        return replace(self, questions=questions, index=0, answers=(), status=status)

    def reset(self) -> QuickQuizSession:
        """Back to the not-started state with no questions."""
        return replace(self, questions=(), index=0, answers=(),
                       status=SessionStatus.NOT_STARTED)

    def results(self) -> QuizResult | None:
        if self.status is not SessionStatus.COMPLETED:
            return None
        correct = self.score
        total = len(self.questions)
        return QuizResult(
            records=self.answers,
            correct=correct,
            total=total,
            pct=percentage(correct, total),
            grade=quick_quiz_grade(correct, total),
        )

    def to_dict(self) -> dict:
        q = self.current_question
        data = {
            "mode": self.mode,
            "status": self.status.value,
            "category_id": self.category.id,
            "category_label": self.category.label,
            "accent": self.category.accent,
            "index": self.index,
            "total": len(self.questions),
            "score": self.score,
            "question": None,
            "feedback": [f.to_dict() for f in self.feedback()],
        }
        if q is not None:
            data["question"] = {"term": q.prompt_term, "options": list(q.options)}
        result = self.results()
        if result is not None:
            data["results"] = result.to_dict()
        return data


# ── Exam ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExamSession:
    bank: TermBank
    sections: tuple[ExamSection, ...] = ()
    # ((section, question), option) pairs, sorted by position
    answers: tuple[tuple[tuple[int, int], str], ...] = ()
    status: SessionStatus = SessionStatus.NOT_STARTED
    target: int = EXAM_TARGET
    sampler: Sampler = field(default_factory=Sampler, compare=False, repr=False)

    mode: ClassVar[str] = "exam"

    @classmethod
    def launch(
        cls,
        bank: TermBank,
        target: int = EXAM_TARGET,
        sampler: Sampler | None = None,
        floor: int = ALLOCATION_FLOOR,
        distractor_count: int = DISTRACTOR_COUNT,
        strict: bool = False,
    ) -> ExamSession:
        sampler = sampler or Sampler()
        sections = build_exam(
            bank, target, sampler=sampler, floor=floor,
            distractor_count=distractor_count, strict=strict,
        )
        return cls(bank, sections=tuple(sections), status=SessionStatus.IN_PROGRESS,
                   target=target, sampler=sampler)

    @property
    def total_questions(self) -> int:
        return sum(len(s.questions) for s in self.sections)

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def can_submit(self) -> bool:
        return self.answered_count == self.total_questions

    @property
    def choices(self) -> dict[tuple[int, int], str]:
        """A fresh ``{(section, question): option}`` copy of the answers."""
        return dict(self.answers)

    def chosen(self, section: int, question: int) -> str | None:
        return self.choices.get((section, question))

    def section_answered(self, section: int) -> int:
        return sum(1 for (si, _), _ in self.answers if si == section)

    def _question(self, section: int, question: int) -> Question | None:
        if not 0 <= section < len(self.sections):
            return None
        qs = self.sections[section].questions
        if not 0 <= question < len(qs):
            return None
        return qs[question]

    def answer(self, section: int, question: int, option: str) -> ExamSession:
        """Record (or overwrite) the choice for one question."""
        if self.status is not SessionStatus.IN_PROGRESS:
            _log.debug("Exam: answer ignored in state %s", self.status.value)
            return self
        q = self._question(section, question)
        if q is None or option not in q.options:
            _log.debug("Exam: ignored answer for %d-%d", section, question)
            return self
        answers = self.choices
        answers[(section, question)] = option
        return replace(self, answers=tuple(sorted(answers.items())))

    def submit(self) -> ExamSession:
        """Lock every answer.  Unanswered questions are scored as wrong."""
        if self.status is not SessionStatus.IN_PROGRESS:
            _log.debug("Exam: submit ignored in state %s", self.status.value)
            return self
        if not self.can_submit:
            _log.info("Exam submitted with %d of %d answered",
                      self.answered_count, self.total_questions)
        return replace(self, status=SessionStatus.SUBMITTED)

    def results(self) -> ExamResult | None:
        if self.status is not SessionStatus.SUBMITTED:
            return None
        choices = self.choices
        section_results = []
        for si, sec in enumerate(self.sections):
            records = tuple(
                AnswerRecord(q, choices.get((si, qi)))
                for qi, q in enumerate(sec.questions)
            )
            correct = sum(1 for r in records if r.is_correct)
            section_results.append(SectionResult(
                category_id=sec.category_id,
                label=sec.label,
                accent=sec.accent,
                records=records,
                correct=correct,
                total=len(records),
                pct=percentage(correct, len(records)),
            ))
        correct = sum(s.correct for s in section_results)
        total = self.total_questions
        return ExamResult(
            sections=tuple(section_results),
            correct=correct,
            total=total,
            pct=percentage(correct, total),
            grade=exam_grade(correct, total),
            answered=self.answered_count,
        )

    def to_dict(self) -> dict:
        """Exam state for display.  Carries no correctness before submission."""
        choices = self.choices
        data = {
            "mode": self.mode,
            "status": self.status.value,
            "target": self.target,
            "total": self.total_questions,
            "answered": self.answered_count,
            "can_submit": self.can_submit,
            "sections": [
                {
                    "category_id": sec.category_id,
                    "label": sec.label,
                    "accent": sec.accent,
                    "answered": self.section_answered(si),
                    "questions": [
                        {
                            "term": q.prompt_term,
                            "options": list(q.options),
                            "chosen": choices.get((si, qi)),
                        }
                        for qi, q in enumerate(sec.questions)
                    ],
                }
                for si, sec in enumerate(self.sections)
            ],
        }
        result = self.results()
        if result is not None:
            data["results"] = result.to_dict()
        return data
