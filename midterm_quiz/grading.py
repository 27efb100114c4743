"""Map a correct/total ratio to a grade label."""
from __future__ import annotations

from midterm_quiz.allocator import round_half_up
from midterm_quiz.models import Grade

# (minimum percentage, label), highest first
QUICK_QUIZ_BANDS = [
    (90, "Excellent!"),
    (75, "Good job!"),
    (60, "Almost there"),
]
QUICK_QUIZ_FALLBACK = "Keep studying"

# (minimum percentage, letter, description), highest first
EXAM_BANDS = [
    (90, "A+", "Outstanding"),
    (85, "A", "Excellent"),
    (80, "A−", "Very Good"),
    (77, "B+", "Good"),
    (73, "B", "Good"),
    (70, "B−", "Satisfactory"),
    (67, "C+", "Adequate"),
    (63, "C", "Adequate"),
    (60, "C−", "Marginal"),
    (50, "D", "Marginal"),
]
EXAM_FALLBACK = ("F", "Failing")


def percentage(correct: int, total: int) -> int:
    """Whole-number percentage, rounded half up.  An empty set scores 0."""
    if total <= 0:
        return 0
    return round_half_up(correct * 100 / total)


def quick_quiz_grade(correct: int, total: int) -> Grade:
    pct = percentage(correct, total)
    for threshold, label in QUICK_QUIZ_BANDS:
        if pct >= threshold:
            return Grade(label)
    return Grade(QUICK_QUIZ_FALLBACK)


def exam_grade(correct: int, total: int) -> Grade:
    """Letter grade over every exam question; unanswered ones count as wrong."""
    pct = percentage(correct, total)
    for threshold, letter, description in EXAM_BANDS:
        if pct >= threshold:
            return Grade(letter, description)
    return Grade(*EXAM_FALLBACK)
