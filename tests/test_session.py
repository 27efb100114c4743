"""Tests for the quick-quiz and exam session state machines."""
from __future__ import annotations

import pytest

from midterm_quiz.models import Category, Term, TermBank
from midterm_quiz.sampler import Sampler
from midterm_quiz.session import ExamSession, QuickQuizSession, SessionStatus


def _wrong_option(q):
    return next(o for o in q.options if o != q.correct_definition)


def _answer_all_exam(session, correct=True, limit=None):
    n = 0
    for si, sec in enumerate(session.sections):
        for qi, q in enumerate(sec.questions):
            if limit is not None and n >= limit:
                return session
            session = session.answer(si, qi, q.correct_definition if correct else _wrong_option(q))
            n += 1
    return session


@pytest.fixture
def quiz(ten_term_bank, sampler):
    return QuickQuizSession.start(ten_term_bank.categories[0], ten_term_bank, sampler=sampler)


@pytest.fixture
def exam(exam_bank, sampler):
    return ExamSession.launch(exam_bank, 100, sampler=sampler)


class TestQuickQuizStart:
    def test_starts_in_progress(self, quiz):
        assert quiz.status is SessionStatus.IN_PROGRESS
        assert quiz.index == 0
        assert len(quiz.questions) == 10
        assert quiz.current_question is quiz.questions[0]
        assert quiz.answers == ()

    def test_not_started_has_no_question(self, ten_term_bank):
        s = QuickQuizSession(ten_term_bank.categories[0], ten_term_bank)
        assert s.status is SessionStatus.NOT_STARTED
        assert s.current_question is None
        assert s.answer("anything") is s
        assert s.advance() is s
        assert s.results() is None

    def test_empty_category_completes_immediately(self, sampler):
        empty = Category("0", "Empty", ())
        bank = TermBank((empty, Category("1", "One", (Term("a", "b"),))))
        s = QuickQuizSession.start(empty, bank, sampler=sampler)
        assert s.status is SessionStatus.COMPLETED
        assert s.results().total == 0
        assert s.results().grade.label == "Keep studying"


class TestQuickQuizAnswer:
    def test_answer_reveals_feedback(self, quiz):
        q = quiz.current_question
        after = quiz.answer(q.correct_definition)
        assert after.status is SessionStatus.AWAITING_ADVANCE
        assert after.selected == q.correct_definition
        feedback = after.feedback()
        assert len(feedback) == 4
        assert [f.correct for f in feedback].count(True) == 1
        assert [f.chosen for f in feedback].count(True) == 1

    def test_no_feedback_before_answer(self, quiz):
        assert quiz.feedback() == []
        assert quiz.selected is None

    def test_second_answer_is_ignored(self, quiz):
        q = quiz.current_question
        first = quiz.answer(_wrong_option(q))
        second = first.answer(q.correct_definition)
        assert second is first
        assert len(second.answers) == 1
        assert second.answers[0].chosen == _wrong_option(q)
        assert not second.answers[0].is_correct

    def test_transitions_do_not_mutate(self, quiz):
        q = quiz.current_question
        quiz.answer(q.correct_definition)
        assert quiz.status is SessionStatus.IN_PROGRESS
        assert quiz.answers == ()

    def test_unknown_option_ignored(self, quiz):
        assert quiz.answer("not one of the options") is quiz

    def test_advance_requires_answer(self, quiz):
        assert quiz.advance() is quiz


class TestQuickQuizFlow:
    def test_full_run_completes(self, quiz):
        s = quiz
        for i in range(10):
            assert s.index == i
            s = s.answer(s.current_question.correct_definition).advance()
        assert s.status is SessionStatus.COMPLETED
        assert s.current_question is None
        result = s.results()
        assert result.correct == 10
        assert result.total == 10
        assert result.pct == 100
        assert result.grade.label == "Excellent!"

    def test_mixed_score(self, quiz):
        s = quiz
        for i in range(10):
            q = s.current_question
            s = s.answer(q.correct_definition if i < 7 else _wrong_option(q)).advance()
        result = s.results()
        assert result.correct == 7
        assert result.grade.label == "Almost there"
        assert [r.is_correct for r in result.records] == [True] * 7 + [False] * 3

    def test_results_only_when_completed(self, quiz):
        assert quiz.results() is None
        assert quiz.answer(quiz.current_question.correct_definition).results() is None

    def test_completed_ignores_actions(self, quiz):
        s = quiz
        for _ in range(10):
            s = s.answer(s.current_question.options[0]).advance()
        assert s.answer("x") is s
        assert s.advance() is s

    def test_restart_draws_fresh_questions(self, quiz):
        s = quiz.answer(quiz.current_question.correct_definition).advance()
        restarted = s.restart()
        assert restarted.status is SessionStatus.IN_PROGRESS
        assert restarted.index == 0
        assert restarted.answers == ()
        assert len(restarted.questions) == 10
        assert restarted.questions != quiz.questions

    def test_reset(self, quiz):
        s = quiz.answer(quiz.current_question.correct_definition).reset()
        assert s.status is SessionStatus.NOT_STARTED
        assert s.questions == ()

    def test_to_dict_in_progress(self, quiz):
        data = quiz.to_dict()
        assert data["mode"] == "quick"
        assert data["status"] == "in_progress"
        assert data["question"]["term"] == quiz.current_question.prompt_term
        assert data["feedback"] == []
        assert "results" not in data


class TestExamAnswers:
    def test_launch(self, exam):
        assert exam.status is SessionStatus.IN_PROGRESS
        assert exam.total_questions == 100
        assert exam.answered_count == 0
        assert not exam.can_submit

    def test_answer_overwrites(self, exam):
        q = exam.sections[0].questions[0]
        s = exam.answer(0, 0, _wrong_option(q))
        s = s.answer(0, 0, q.correct_definition)
        assert s.chosen(0, 0) == q.correct_definition
        assert s.answered_count == 1

    def test_answer_any_order(self, exam):
        last = len(exam.sections) - 1
        q = exam.sections[last].questions[-1]
        s = exam.answer(last, len(exam.sections[last].questions) - 1, q.options[2])
        assert s.section_answered(last) == 1
        assert s.section_answered(0) == 0

    def test_answer_order_does_not_matter(self, exam):
        a0 = exam.sections[0].questions[0].options[0]
        a1 = exam.sections[1].questions[0].options[1]
        one = exam.answer(1, 0, a1).answer(0, 0, a0)
        two = exam.answer(0, 0, a0).answer(1, 0, a1)
        assert one == two
        assert one.answers == (((0, 0), a0), ((1, 0), a1))

    def test_invalid_indices_ignored(self, exam):
        opt = exam.sections[0].questions[0].options[0]
        assert exam.answer(99, 0, opt) is exam
        assert exam.answer(0, 999, opt) is exam
        assert exam.answer(-1, 0, opt) is exam

    def test_unknown_option_ignored(self, exam):
        assert exam.answer(0, 0, "not an option") is exam

    def test_can_submit_when_all_answered(self, exam):
        s = _answer_all_exam(exam)
        assert s.answered_count == 100
        assert s.can_submit

    def test_no_correctness_before_submit(self, exam):
        s = _answer_all_exam(exam)
        assert s.results() is None
        data = s.to_dict()
        assert "results" not in data
        q = data["sections"][0]["questions"][0]
        assert set(q) == {"term", "options", "chosen"}


class TestExamSubmit:
    def test_all_correct_is_a_plus(self, exam):
        s = _answer_all_exam(exam).submit()
        assert s.status is SessionStatus.SUBMITTED
        result = s.results()
        assert result.correct == 100
        assert result.total == 100
        assert result.pct == 100
        assert result.grade.label == "A+"
        assert result.missed() == []

    def test_answers_locked_after_submit(self, exam):
        q = exam.sections[0].questions[0]
        s = exam.answer(0, 0, q.correct_definition).submit()
        assert s.answer(0, 0, _wrong_option(q)) is s
        assert s.answer(0, 1, exam.sections[0].questions[1].options[0]) is s
        assert s.chosen(0, 0) == q.correct_definition

    def test_submitted_exam_is_hashable_and_sealed(self, exam):
        q = exam.sections[0].questions[0]
        s = exam.answer(0, 0, q.correct_definition).submit()
        assert hash(s) == hash(s)
        with pytest.raises(TypeError):
            s.answers[(0, 0)] = _wrong_option(q)
        s.choices[(0, 0)] = _wrong_option(q)
        assert s.chosen(0, 0) == q.correct_definition
        assert s.results().correct == 1

    def test_double_submit_ignored(self, exam):
        s = exam.submit()
        assert s.submit() is s

    def test_unanswered_scored_against_full_total(self, exam):
        s = _answer_all_exam(exam, limit=60).submit()
        result = s.results()
        assert result.answered == 60
        assert result.correct == 60
        assert result.total == 100
        assert result.pct == 60
        assert result.grade.label == "C−"
        assert len(result.missed()) == 40
        assert all(r.chosen is None for r in result.missed())

    def test_submit_empty_exam(self, exam):
        result = exam.submit().results()
        assert result.correct == 0
        assert result.grade.label == "F"

    def test_section_results(self, exam):
        s = exam
        for qi, q in enumerate(exam.sections[0].questions):
            s = s.answer(0, qi, q.correct_definition)
        result = s.submit().results()
        first = result.sections[0]
        assert first.correct == first.total == 8
        assert first.pct == 100
        assert result.sections[1].correct == 0
        assert result.sections[1].pct == 0
        assert [sec.category_id for sec in result.sections] == [c.category_id for c in exam.sections]

    def test_wrong_answers_listed(self, exam):
        s = _answer_all_exam(exam, correct=False).submit()
        result = s.results()
        assert result.correct == 0
        assert len(result.missed()) == 100
        assert all(r.chosen is not None for r in result.missed())

    def test_to_dict_after_submit(self, exam):
        data = _answer_all_exam(exam).submit().to_dict()
        assert data["status"] == "submitted"
        assert data["results"]["grade"] == "A+"
        assert data["results"]["grade_description"] == "Outstanding"

    def test_relaunch_is_independent(self, exam_bank):
        a = ExamSession.launch(exam_bank, 100, sampler=Sampler(seed=1))
        b = ExamSession.launch(exam_bank, 100, sampler=Sampler(seed=2))
        a = a.answer(0, 0, a.sections[0].questions[0].options[0])
        assert b.answered_count == 0
