"""CLI entry point for midterm-quiz.

Usage:
  python -m midterm_quiz serve [--port PORT] [--host HOST]
  python -m midterm_quiz categories
  python -m midterm_quiz plan [--target N]
  python -m midterm_quiz quiz CATEGORY_ID
"""
from __future__ import annotations

import sys


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "categories":
        _categories()
    elif command == "plan":
        _plan(args[1:])
    elif command == "quiz":
        _quiz(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, categories, plan, quiz")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _load():
    from midterm_quiz.config import load_settings
    from midterm_quiz.parsers.term_bank_parser import load_term_bank

    s = load_settings()
    return s, load_term_bank(s.resolved_term_files(), s.accent_palette)


def _serve(args: list[str]):
    import uvicorn

    port = int(_parse_flag(args, "--port", "8766"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    print(f"Starting Midterm Quiz on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run("midterm_quiz.app:app", host=host, port=port, reload=False)


def _categories():
    _, bank = _load()
    if not len(bank):
        print("No categories found. Add term tables under data/ or set term_files.")
        return
    for c in bank:
        print(f"  {c.id:>4}  {c.label:<45} {len(c.terms):>3} terms")
    print(f"\n  {bank.term_count()} terms in {len(bank)} categories")


def _plan(args: list[str]):
    from midterm_quiz.exam import plan_exam

    s, bank = _load()
    target = int(_parse_flag(args, "--target", str(s.exam_target)))
    rows = plan_exam(bank, target, floor=s.allocation_floor)
    for row in rows:
        print(f"  {row['category_id']:>4}  {row['label']:<45} {row['questions']:>3} / {row['terms']}")
    total = sum(r["questions"] for r in rows)
    print(f"\n  {total} questions (target {target})")


def _quiz(args: list[str]):
    from midterm_quiz.sampler import Sampler
    from midterm_quiz.session import QuickQuizSession, SessionStatus

    if not args:
        print("Usage: python -m midterm_quiz quiz CATEGORY_ID")
        sys.exit(1)
    s, bank = _load()
    category = bank.category(args[0])
    if category is None:
        print(f"Unknown category: {args[0]}")
        sys.exit(1)

    session = QuickQuizSession.start(
        category, bank, sampler=Sampler(seed=s.random_seed),
        size=s.quick_quiz_size, distractor_count=s.distractor_count,
    )
    print(f"{category.label}: {len(session.questions)} questions\n")
    try:
        while session.status is SessionStatus.IN_PROGRESS:
            q = session.current_question
            print(f"[{session.index + 1}/{len(session.questions)}] {q.prompt_term}")
            for i, opt in enumerate(q.options):
                print(f"   {chr(65 + i)}. {opt}")
            choice = input("Answer: ").strip().upper()
            idx = ord(choice[0]) - 65 if choice else -1
            if not 0 <= idx < len(q.options):
                print("Pick one of the listed letters.\n")
                continue
            session = session.answer(q.options[idx])
            if session.answers[-1].is_correct:
                print("Correct!\n")
            else:
                print(f"Wrong. {q.prompt_term}: {q.correct_definition}\n")
            session = session.advance()
    except (EOFError, KeyboardInterrupt):
        print("\nQuiz abandoned.")
        return

    result = session.results()
    if result is not None:
        print(f"Score: {result.correct}/{result.total} ({result.pct}%) - {result.grade.label}")


if __name__ == "__main__":
    main()
