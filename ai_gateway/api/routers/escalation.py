"""Human escalation endpoint."""

import logging

from fastapi import APIRouter, Depends, Request

from ai_gateway.api.dependencies import get_orchestrator, resolve_session
from ai_gateway.api.models import EscalateRequest, EscalateResponse
from ai_gateway.orchestrator.pipeline import GatewayOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/escalate", response_model=EscalateResponse)
async def escalate(
    body: EscalateRequest,
    request: Request,
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> EscalateResponse:
    """Ask for a human operator. Always answers with a user-facing message."""
    session = resolve_session(request, body.session_id, body.identity, body.language)
    result = await orchestrator.request_human_assistance(
        session,
        body.original_query,
        reason=body.reason,
        language=body.language,
        priority=body.priority,
        contact_preference=body.contact_preference,
    )
    return EscalateResponse(
        escalation_id=result.escalation_id,
        message=result.message,
        delivered=result.delivered,
        queued=result.queued,
        session_id=session.session_id,
    )
