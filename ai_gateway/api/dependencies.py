"""FastAPI dependencies."""

from fastapi import Request

from ai_gateway.api.models import IdentityModel
from ai_gateway.orchestrator.context import ANONYMOUS, GatewaySession, Identity, SessionStore
from ai_gateway.orchestrator.pipeline import GatewayOrchestrator


def get_orchestrator(request: Request) -> GatewayOrchestrator:
    """Orchestrator built during application startup."""
    return request.app.state.orchestrator


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def resolve_session(
    request: Request,
    session_id: str | None,
    identity: IdentityModel | None = None,
    language: str | None = None,
) -> GatewaySession:
    """Return the live session for *session_id*, or open a new one."""
    sessions = get_session_store(request)
    if session_id:
        session = sessions.get(session_id)
        if session is not None:
            return session

    session = sessions.create(
        identity=Identity(**identity.model_dump()) if identity else ANONYMOUS,
        language=language,
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )
    get_orchestrator(request).start_conversation(session, language)
    return session
