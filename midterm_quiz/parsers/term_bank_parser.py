"""Parse markdown term tables into a TermBank.

Each category is a level-2 header followed by a table:

  ## 1. The Changing Face of Business
  | Term | Definition |
  |------|------------|
  | **Business** | All profit-seeking activities ... |

Headers of the form ``## <num>. <title>`` use ``<num>`` as the category id;
any other header uses a slug of its text.  Extra table columns are ignored.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Sequence

from midterm_quiz.config import DEFAULTS
from midterm_quiz.models import Category, Term, TermBank

DEFAULT_PALETTE = DEFAULTS["accent_palette"]


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _parse_header(header: str) -> tuple[str, str]:
    m = re.match(r"^(\d+)\.\s+(.+)$", header)
    if m:
        return m.group(1), m.group(2).strip()
    return _slug(header), header


def parse_term_bank_text(text: str) -> list[tuple[str, str, list[Term]]]:
    """Return (id, label, terms) for every header in *text*, in file order."""
    sections: list[tuple[str, str, list[Term]]] = []
    current: list[Term] | None = None

    for line in text.splitlines():
        m = re.match(r"^## (.+)", line)
        if m:
            cat_id, label = _parse_header(m.group(1).strip())
            current = []
            sections.append((cat_id, label, current))
            continue

        if current is None or not line.startswith("|"):
            continue

        # | **term** | definition | ...
        m = re.match(r"\|\s*\*\*(.+?)\*\*\s*\|\s*(.+?)\s*\|", line)
        if m:
            current.append(Term(term=m.group(1).strip(), definition=m.group(2).strip()))

    return sections


def build_term_bank(
    sections: Iterable[tuple[str, str, list[Term]]],
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> TermBank:
    """Drop empty categories and assign accents by position, cycling the palette."""
    categories = []
    for cat_id, label, terms in sections:
        if not terms:
            continue
        accent = palette[len(categories) % len(palette)] if palette else ""
        categories.append(Category(id=cat_id, label=label, terms=tuple(terms), accent=accent))
    return TermBank(tuple(categories))


def load_term_bank(
    paths: Iterable[Path],
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> TermBank:
    """Load every existing file in *paths* into one bank; missing files are skipped."""
    sections: list[tuple[str, str, list[Term]]] = []
    for path in paths:
        if not path.exists():
            continue
        sections.extend(parse_term_bank_text(path.read_text(encoding="utf-8")))
    return build_term_bank(sections, palette)
