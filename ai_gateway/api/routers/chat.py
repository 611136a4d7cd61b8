"""Chat, suggestion and health endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from ai_gateway.api.dependencies import get_orchestrator, get_session_store, resolve_session
from ai_gateway.api.models import (
    ChatRequest,
    ChatResponse,
    ClearRequest,
    HealthResponse,
    HistoryResponse,
    PreCheckRequest,
    PreCheckResponse,
)
from ai_gateway.config.settings import Settings, get_settings
from ai_gateway.orchestrator.context import SessionStore
from ai_gateway.orchestrator.pipeline import GatewayOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    request: Request,
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Run a query through the compliance gateway."""
    session = resolve_session(request, body.session_id, body.identity, body.language)
    try:
        result = await orchestrator.process(body.message, session, body.language)
    except Exception as e:
        logger.error("Error processing chat request: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e
    return {**result.to_dict(), "session_id": session.session_id}


@router.post("/chat/precheck", response_model=PreCheckResponse)
async def precheck(
    body: PreCheckRequest,
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> PreCheckResponse:
    """Classify a draft query without sending or auditing it."""
    classification = orchestrator.pre_check(body.message)
    blocked_message = (
        orchestrator.classifier.localize(classification, body.language)
        if classification.is_blocked
        else None
    )
    return PreCheckResponse(classification=classification.to_dict(), blocked_message=blocked_message)


@router.post("/chat/clear", response_model=HistoryResponse)
async def clear_chat(
    body: ClearRequest,
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
    sessions: SessionStore = Depends(get_session_store),
) -> HistoryResponse:
    """Reset a session's history to the welcome message."""
    session = sessions.get(body.session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    orchestrator.clear(session, body.language)
    return HistoryResponse(
        session_id=session.session_id, turns=[t.to_dict() for t in session.history.turns]
    )


@router.get("/chat/history/{session_id}", response_model=HistoryResponse)
async def chat_history(
    session_id: str,
    sessions: SessionStore = Depends(get_session_store),
) -> HistoryResponse:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return HistoryResponse(
        session_id=session.session_id, turns=[t.to_dict() for t in session.history.turns]
    )


@router.get("/suggestions")
async def suggestions(
    language: str | None = None,
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> dict[str, list[str]]:
    return {"suggestions": orchestrator.suggested_queries(language)}


@router.get("/disclosure")
async def disclosure(
    language: str | None = None,
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> dict[str, str]:
    """AI transparency notice shown in the chat header."""
    return {"disclosure": orchestrator.disclosure_message(language)}


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Health check."""
    return HealthResponse(status="healthy", version=settings.app_version)
