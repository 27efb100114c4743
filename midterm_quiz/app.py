"""FastAPI application exposing quiz and exam sessions as a JSON API."""
from __future__ import annotations

import logging
import uuid

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request

from midterm_quiz.allocator import AllocationError
from midterm_quiz.config import Settings, load_settings, save_settings
from midterm_quiz.exam import plan_exam
from midterm_quiz.models import TermBank
from midterm_quiz.parsers.term_bank_parser import load_term_bank
from midterm_quiz.sampler import Sampler
from midterm_quiz.session import ExamSession, QuickQuizSession

app = FastAPI(title="Midterm Quiz")

_log = logging.getLogger("midterm_quiz.app")

# Global state (initialized in startup)
_bank: TermBank | None = None
_settings: Settings | None = None
_active_sessions: dict[str, QuickQuizSession | ExamSession] = {}


def get_bank() -> TermBank:
    assert _bank is not None
    return _bank


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def _new_sampler() -> Sampler:
    return Sampler(seed=get_settings().random_seed)


def _store(session: QuickQuizSession | ExamSession, session_id: str | None = None) -> dict:
    session_id = session_id or uuid.uuid4().hex
    _active_sessions[session_id] = session
    data = session.to_dict()
    data["session_id"] = session_id
    return data


def _get_session(session_id: str, kind: type) -> QuickQuizSession | ExamSession:
    session = _active_sessions.get(session_id)
    if session is None or not isinstance(session, kind):
        raise HTTPException(404, "Session not found")
    return session


async def _body(request: Request) -> dict:
    try:
        body = await request.json() if await request.body() else {}
    except ValueError:
        raise HTTPException(400, "Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(400, "Expected a JSON object")
    return body


@app.on_event("startup")
async def startup():
    global _bank, _settings
    if _bank is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _bank = load_term_bank(_settings.resolved_term_files(), _settings.accent_palette)
    _log.info("Loaded %d categories, %d terms", len(_bank), _bank.term_count())


# ── API: Term bank ────────────────────────────────────────────────────────

@app.get("/api/categories")
async def api_categories():
    return [
        {"id": c.id, "label": c.label, "accent": c.accent, "terms": len(c.terms)}
        for c in get_bank()
    ]


@app.get("/api/search")
async def api_search(q: str = ""):
    return [
        {"term": e.term, "definition": e.definition, "category_id": e.category_id}
        for e in get_bank().search(q)
    ]


@app.get("/api/exam/plan")
async def api_exam_plan():
    s = get_settings()
    return plan_exam(get_bank(), s.exam_target, floor=s.allocation_floor)


# ── API: Quick quiz ───────────────────────────────────────────────────────

@app.post("/api/quiz/start")
async def api_quiz_start(request: Request):
    body = await _body(request)
    category = get_bank().category(str(body.get("category_id", "")))
    if category is None:
        raise HTTPException(404, "Category not found")
    s = get_settings()
    session = QuickQuizSession.start(
        category, get_bank(), sampler=_new_sampler(),
        size=s.quick_quiz_size, distractor_count=s.distractor_count,
    )
    return _store(session)


@app.post("/api/quiz/{session_id}/answer")
async def api_quiz_answer(session_id: str, request: Request):
    body = await _body(request)
    option = body.get("option")
    if not isinstance(option, str):
        raise HTTPException(400, "'option' must be a string")
    # No await between reading and storing the session
    session = _get_session(session_id, QuickQuizSession)
    return _store(session.answer(option), session_id)


@app.post("/api/quiz/{session_id}/advance")
async def api_quiz_advance(session_id: str):
    session = _get_session(session_id, QuickQuizSession)
    return _store(session.advance(), session_id)


@app.post("/api/quiz/{session_id}/restart")
async def api_quiz_restart(session_id: str):
    session = _get_session(session_id, QuickQuizSession)
    return _store(session.restart(), session_id)


# ── API: Exam ─────────────────────────────────────────────────────────────

@app.post("/api/exam/launch")
async def api_exam_launch():
    s = get_settings()
    try:
        session = ExamSession.launch(
            get_bank(), s.exam_target, sampler=_new_sampler(),
            floor=s.allocation_floor, distractor_count=s.distractor_count,
            strict=s.strict_allocation,
        )
    except AllocationError as e:
        _log.warning("Exam launch refused: %s", e)
        raise HTTPException(409, {"error": str(e), "counts": e.counts, "target": e.target})
    return _store(session)


@app.post("/api/exam/{session_id}/answer")
async def api_exam_answer(session_id: str, request: Request):
    body = await _body(request)
    section, question, option = body.get("section"), body.get("question"), body.get("option")
    if not isinstance(section, int) or not isinstance(question, int) or not isinstance(option, str):
        raise HTTPException(400, "Expected integer 'section', 'question' and string 'option'")
    session = _get_session(session_id, ExamSession)
    return _store(session.answer(section, question, option), session_id)


@app.post("/api/exam/{session_id}/submit")
async def api_exam_submit(session_id: str):
    session = _get_session(session_id, ExamSession)
    return _store(session.submit(), session_id)


# ── API: Sessions ─────────────────────────────────────────────────────────

@app.get("/api/session/{session_id}")
async def api_session(session_id: str):
    session = _active_sessions.get(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
    data = session.to_dict()
    data["session_id"] = session_id
    return data


@app.delete("/api/session/{session_id}")
async def api_session_discard(session_id: str):
    if _active_sessions.pop(session_id, None) is None:
        raise HTTPException(404, "Session not found")
    return {"discarded": session_id}


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await _body(request)
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    for k, v in body.items():
        if k in known:
            setattr(s, k, v)
    save_settings(s)
    return s.to_dict()
