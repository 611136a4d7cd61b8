"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from ai_gateway.api.routers.audit import router as audit_router
from ai_gateway.api.routers.chat import router as chat_router
from ai_gateway.api.routers.escalation import router as escalation_router

api_router = APIRouter()

api_router.include_router(chat_router, tags=["chat"])
api_router.include_router(escalation_router, tags=["escalation"])
api_router.include_router(audit_router, prefix="/audit", tags=["audit"])
