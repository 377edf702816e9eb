from fastapi import APIRouter, HTTPException, Depends, Request
from typing import Optional
import logging

from src.schemas.journey import (
    ActionView,
    ConversionRequest,
    CreateSessionRequest,
    DataPointViewedRequest,
    ResponseRequest,
    ResultView,
    SessionView,
    SetLensRequest,
)
from services.journey_engine.loader import QuestionCatalog
from services.journey_engine.models import InvalidResponseError, SessionNotFoundError
from services.journey_engine.session import JourneySession
from services.journey_engine.store import SessionStore

router = APIRouter()
logger = logging.getLogger(__name__)


def get_session_store(request: Request) -> SessionStore:
    # One store per app, created at startup in main.py
    return request.app.state.session_store

def get_question_catalog(request: Request) -> Optional[QuestionCatalog]:
    return getattr(request.app.state, "question_catalog", None)


def _load_session(store: SessionStore, session_id: str) -> JourneySession:
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        logger.warning(f"Journey session not found: {session_id}")
        raise HTTPException(status_code=404, detail=f"Journey session not found: {session_id}")

def _session_view(session: JourneySession) -> SessionView:
    return SessionView(
        session_id=session.session_id,
        political_lens=session.political_lens,
        scores=session.scores.rounded(),
        progress=session.progress(),
        responses=len(session.ledger),
        seen_data_points=list(session.seen_data_points),
        conversions=len(session.conversions),
    )


@router.post("/journey/sessions", response_model=SessionView, status_code=201)
def create_session(
    request: CreateSessionRequest,
    store: SessionStore = Depends(get_session_store),
):
    """Starts a journey, optionally with the visitor's political lens."""
    session = store.create(request.political_lens)
    return _session_view(session)

@router.get("/journey/sessions/{session_id}", response_model=SessionView)
def read_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    return _session_view(_load_session(store, session_id))

@router.put("/journey/sessions/{session_id}/lens", response_model=SessionView)
def set_lens(
    session_id: str,
    request: SetLensRequest,
    store: SessionStore = Depends(get_session_store),
):
    session = _load_session(store, session_id)
    session.set_lens(request.political_lens)
    store.save(session)
    return _session_view(session)

@router.post("/journey/sessions/{session_id}/responses", response_model=SessionView)
def record_response(
    session_id: str,
    request: ResponseRequest,
    store: SessionStore = Depends(get_session_store),
    catalog: Optional[QuestionCatalog] = Depends(get_question_catalog),
):
    """
    Records an answer. Weight and layer come from the request when a weight is
    given, otherwise from the question catalog.
    """
    session = _load_session(store, session_id)
    try:
        if request.weight is not None:
            session.record_response(
                request.question_id,
                request.answer,
                request.elapsed_seconds,
                request.weight,
                request.layer,
            )
        elif catalog is not None:
            session.record_answer(catalog, request.question_id, request.answer, request.elapsed_seconds)
        else:
            raise InvalidResponseError("No weight given and no question catalog loaded")
    except InvalidResponseError as e:
        logger.error(f"Invalid response for session {session_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    store.save(session)
    return _session_view(session)

@router.post("/journey/sessions/{session_id}/advance", response_model=SessionView)
def advance_layer(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = _load_session(store, session_id)
    session.advance_layer()
    store.save(session)
    return _session_view(session)

@router.post("/journey/sessions/{session_id}/data-points", response_model=SessionView)
def mark_data_point_viewed(
    session_id: str,
    request: DataPointViewedRequest,
    store: SessionStore = Depends(get_session_store),
):
    session = _load_session(store, session_id)
    if session.mark_data_point_viewed(request.data_point_id):
        store.save(session)
    return _session_view(session)

@router.post("/journey/sessions/{session_id}/conversions", response_model=SessionView)
def record_conversion(
    session_id: str,
    request: ConversionRequest,
    store: SessionStore = Depends(get_session_store),
):
    session = _load_session(store, session_id)
    session.record_conversion(request.type, request.details)
    store.save(session)
    return _session_view(session)

@router.post("/journey/sessions/{session_id}/reset", response_model=SessionView)
def reset_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Start over. The response carries the new session id."""
    _load_session(store, session_id)
    session = store.reset(session_id)
    return _session_view(session)

@router.get("/journey/sessions/{session_id}/result", response_model=ResultView)
def read_result(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Result category, ranked actions and narrative for the session's current state."""
    session = _load_session(store, session_id)
    category = session.result_category()
    return ResultView(
        session_id=session.session_id,
        result_category=category.value,
        result_page=session.result_page(),
        conviction_level=session.conviction_level().value,
        scores=session.scores.rounded(),
        actions=[ActionView(**a.model_dump()) for a in session.prioritized_actions()],
        narrative=session.narrative(),
        share_message=session.share_message(),
    )
