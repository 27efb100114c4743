"""Shared test fixtures."""
from __future__ import annotations

from pathlib import Path

import pytest

from factories import make_category
from midterm_quiz.models import Category, Question, Term, TermBank
from midterm_quiz.sampler import Sampler

DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "midterm_terms.md"


@pytest.fixture
def sampler():
    """A seeded sampler so draws are reproducible within a test."""
    return Sampler(seed=1234)


@pytest.fixture
def small_bank():
    """Three categories, all with enough terms for four distinct options."""
    return TermBank((
        Category("1", "The Changing Face of Business", (
            Term("Business", "All profit-seeking activities and enterprises"),
            Term("Profits", "Rewards for businesspeople who take risks"),
            Term("Capitalism", "Private enterprise system with minimal intervention"),
            Term("Invisible hand", "Competition regulates economic life"),
        ), "#e85d04"),
        Category("2", "Economic Challenges", (
            Term("Demand", "Willingness and ability of buyers to purchase"),
            Term("Supply", "Willingness and ability of sellers to provide"),
            Term("GDP", "Sum of all goods and services produced in a year"),
        ), "#2d6a4f"),
        Category("3", "International Business", (
            Term("Exports", "Domestically produced goods sold abroad"),
            Term("Imports", "Foreign-made products bought domestically"),
            Term("Balance of trade", "Difference between exports and imports"),
            Term("Dumping", "Selling abroad below the domestic price"),
            Term("Tariff", "Tax levied on imported products"),
        ), "#7209b7"),
    ))


@pytest.fixture
def ten_term_bank():
    """One category with exactly ten terms, plus a second for distractors."""
    return TermBank((make_category("A", 10), make_category("B", 6)))


@pytest.fixture
def exam_bank():
    """Eight categories sized like the bundled midterm data (129 terms)."""
    sizes = [11, 17, 18, 12, 17, 15, 20, 19]
    return TermBank(tuple(make_category(str(i + 1), n) for i, n in enumerate(sizes)))


@pytest.fixture
def sample_question():
    return Question(
        prompt_term="Profits",
        correct_definition="Rewards for businesspeople who take risks",
        category_id="1",
        options=(
            "Competition regulates economic life",
            "Rewards for businesspeople who take risks",
            "Tax levied on imported products",
            "Willingness and ability of buyers to purchase",
        ),
    )


@pytest.fixture
def term_md_content():
    """Minimal term-bank markdown for parser testing."""
    return """\
# Business Fundamentals

---

## 1. The Changing Face of Business

*Intro notes that are not part of the table.*

| Term | Definition |
|------|------------|
| **Business** | All profit-seeking activities and enterprises |
| **Profits** | Rewards for businesspeople who take risks |

---

## Glossary Extras

| Term | Definition | Example |
|------|------------|---------|
| **Tariff** | Tax levied on imported products | *A 10% tariff on steel.* |

## 7. Empty Chapter

No table here.
"""
