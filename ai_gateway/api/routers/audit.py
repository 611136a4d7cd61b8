"""Audit queue and admin review endpoints."""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ai_gateway.api.dependencies import get_orchestrator
from ai_gateway.api.models import FlushResponse, QueueStatusResponse
from ai_gateway.config.constants import QueryCategory, StatsPeriod
from ai_gateway.config.errors import AuditRemoteError
from ai_gateway.orchestrator.pipeline import GatewayOrchestrator
from ai_gateway.services.audit.models import AuditLogFilters

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/queue", response_model=QueueStatusResponse)
async def queue_status(
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Local durable queue state."""
    return {**orchestrator.status(), "audit_capacity": orchestrator.audit.queue.capacity}


@router.post("/flush", response_model=FlushResponse)
async def flush_queue(
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> FlushResponse:
    """Run one flush cycle now instead of waiting for the timer."""
    await orchestrator.drain()
    flushed = await orchestrator.audit.flush()
    delivered = await orchestrator.escalation.retry_pending()
    logger.info("Manual flush: %s audit entries, %s escalations", flushed, delivered)
    return FlushResponse(
        flushed=flushed,
        escalations_delivered=delivered,
        remaining=orchestrator.audit.pending_count(),
    )


@router.get("/logs")
async def audit_logs(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    user_id: str | None = None,
    query_category: QueryCategory | None = None,
    was_blocked: bool | None = None,
    page: int | None = None,
    page_size: int | None = None,
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    filters = AuditLogFilters(
        start_date=start_date,
        end_date=end_date,
        user_id=user_id,
        query_category=query_category,
        was_blocked=was_blocked,
        page=page,
        page_size=page_size,
    )
    try:
        page_result = await orchestrator.audit.get_audit_logs(filters)
    except AuditRemoteError as e:
        logger.error("Audit log listing failed: %s", e)
        raise HTTPException(status_code=502, detail="Audit service unavailable") from e
    return page_result.to_wire()


@router.get("/stats")
async def audit_stats(
    period: StatsPeriod = StatsPeriod.WEEK,
    orchestrator: GatewayOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Compliance dashboard figures."""
    try:
        stats = await orchestrator.audit.get_compliance_stats(period)
    except AuditRemoteError as e:
        logger.error("Compliance stats failed: %s", e)
        raise HTTPException(status_code=502, detail="Audit service unavailable") from e
    return stats.to_wire()
