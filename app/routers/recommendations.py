from typing import Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from app.auth.deps import get_current_user_id
from app.core.errors import InsufficientWardrobeError, StorageError
from app.recs.config import RecsConfig
from app.recs.sessions import BrowseSession, SessionStore
from app.routers.items_helpers import _build_item_out, _build_outfit_out
from app.schemas.items import Occasion
from app.schemas.recs import AcceptOut, HistoryOut, NavigateIn, OutfitOut, SessionStartIn, WardrobeAnalysisOut
from app.services.recs import RecommendationService
from app.wardrobe.deps import get_item_pool
from app.wardrobe.providers.sql import SqlItemPool

router = APIRouter(tags=["recommendations"])
logger = logging.getLogger("uvicorn.error")

_session_store = SessionStore.from_config(RecsConfig.from_settings())


def get_session_store() -> SessionStore:
    return _session_store


def get_recs_service(
    pool: SqlItemPool = Depends(get_item_pool),
    sessions: SessionStore = Depends(get_session_store),
) -> RecommendationService:
    return RecommendationService(pool, sessions, config=RecsConfig.from_settings())


def _history_out(sess: BrowseSession) -> HistoryOut:
    nav = sess.navigator
    view = nav.view()
    return HistoryOut(
        session_id=sess.id,
        occasion=nav.occasion,
        outfit=_build_outfit_out(view.outfit) if view else None,
        index=view.index if view else 0,
        total=view.total if view else 0,
    )


@router.get("/recommendations", response_model=OutfitOut)
async def recommend_outfit(
    occasion: Optional[Occasion] = Query(None),
    service: RecommendationService = Depends(get_recs_service),
    user_id: str = Depends(get_current_user_id),
):
    outfit = await service.generate_recommendation(user_id, occasion)
    return _build_outfit_out(outfit)


@router.post("/recommendations/sessions", response_model=HistoryOut, status_code=201)
async def start_session(
    payload: SessionStartIn,
    service: RecommendationService = Depends(get_recs_service),
    user_id: str = Depends(get_current_user_id),
):
    sess = service.open_session(user_id)
    try:
        await _select_occasion(service, user_id, sess.id, payload.occasion)
    except StorageError:
        service.end_session(user_id, sess.id)
        raise
    return _history_out(sess)


@router.post("/recommendations/sessions/{session_id}/occasion", response_model=HistoryOut)
async def switch_occasion(
    session_id: str,
    payload: SessionStartIn,
    service: RecommendationService = Depends(get_recs_service),
    user_id: str = Depends(get_current_user_id),
):
    await _select_occasion(service, user_id, session_id, payload.occasion)
    return _history_out(service.session_state(user_id, session_id))


async def _select_occasion(service: RecommendationService, user_id: str, session_id: str, occasion: Optional[str]) -> None:
    try:
        await service.select_occasion(user_id, session_id, occasion)
    except InsufficientWardrobeError as e:
        # the session stays open so the client can retry once items are added
        raise HTTPException(
            status_code=400,
            detail={"code": e.code, "missing": e.missing, "occasion": e.occasion, "session_id": session_id},
        ) from e
    logger.info("recs occasion selected session=%s occasion=%s", session_id, occasion)


@router.get("/recommendations/sessions/{session_id}", response_model=HistoryOut)
async def session_state(
    session_id: str,
    service: RecommendationService = Depends(get_recs_service),
    user_id: str = Depends(get_current_user_id),
):
    return _history_out(service.session_state(user_id, session_id))


@router.post("/recommendations/sessions/{session_id}/navigate", response_model=HistoryOut)
async def navigate_session(
    session_id: str,
    payload: NavigateIn,
    service: RecommendationService = Depends(get_recs_service),
    user_id: str = Depends(get_current_user_id),
):
    await service.navigate_history(user_id, session_id, payload.direction)
    return _history_out(service.session_state(user_id, session_id))


@router.post("/recommendations/sessions/{session_id}/accept", response_model=AcceptOut)
async def accept_outfit(
    session_id: str,
    service: RecommendationService = Depends(get_recs_service),
    user_id: str = Depends(get_current_user_id),
):
    """Log a wear for every item of the current outfit, then move on to a fresh one."""
    result = await service.accept_outfit(user_id, session_id)
    base = _history_out(service.session_state(user_id, session_id))
    return AcceptOut(
        **base.model_dump(),
        worn=[_build_item_out(it) for it in result.worn],
        failed=result.failed,
    )


@router.delete("/recommendations/sessions/{session_id}", status_code=204)
async def end_session(
    session_id: str,
    service: RecommendationService = Depends(get_recs_service),
    user_id: str = Depends(get_current_user_id),
):
    service.end_session(user_id, session_id)
    return None


@router.get("/wardrobe/analysis", response_model=WardrobeAnalysisOut)
async def wardrobe_analysis(
    service: RecommendationService = Depends(get_recs_service),
    user_id: str = Depends(get_current_user_id),
):
    return WardrobeAnalysisOut(counts=await service.wardrobe_analysis(user_id))
