"""Request/Response models for API endpoints."""

from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints

from ai_gateway.config.constants import ContactPreference, EscalationPriority

# Surrounding whitespace is stripped; blank input is rejected.
QueryText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class IdentityModel(BaseModel):
    """Caller identity as resolved by the host application."""

    email: str | None = Field(None, description="User email, used as the audit user id")
    is_admin: bool = False
    is_teacher: bool = False


class ChatRequest(BaseModel):
    """Request model for chat endpoint."""

    message: QueryText = Field(..., description="User's natural language question")
    session_id: str | None = Field(None, description="Existing session id; a new one is created if absent")
    language: str | None = Field(None, description="Reply language (en, it)")
    identity: IdentityModel | None = None


class ChatResponse(BaseModel):
    """Response model for chat endpoint."""

    success: bool
    message: str
    data: Any = None
    state: str = Field(..., description="Terminal gateway state")
    session_id: str
    compliance: dict[str, Any] = Field(..., description="Classification and disclosure metadata")


class PreCheckRequest(BaseModel):
    message: QueryText = Field(...)
    language: str | None = None


class PreCheckResponse(BaseModel):
    classification: dict[str, Any]
    blocked_message: str | None = Field(None, description="Localized message shown if the query is sent")


class ClearRequest(BaseModel):
    session_id: str
    language: str | None = None


class HistoryResponse(BaseModel):
    session_id: str
    turns: list[dict[str, Any]]


class EscalateRequest(BaseModel):
    """Request for human follow-up."""

    original_query: QueryText = Field(...)
    reason: str | None = None
    session_id: str | None = None
    language: str | None = None
    priority: EscalationPriority = EscalationPriority.MEDIUM
    contact_preference: ContactPreference = ContactPreference.APP
    identity: IdentityModel | None = None


class EscalateResponse(BaseModel):
    escalation_id: str
    message: str
    delivered: bool
    queued: bool
    session_id: str


class QueueStatusResponse(BaseModel):
    audit_pending: int
    audit_capacity: int
    audit_flusher_running: bool
    escalation_pending: int
    audit_tasks_in_flight: int


class FlushResponse(BaseModel):
    flushed: int
    escalations_delivered: int
    remaining: int


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
