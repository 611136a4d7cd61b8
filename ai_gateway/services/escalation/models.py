"""Escalation service models."""

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import Field

from ai_gateway.config.constants import ANONYMOUS_USER, ContactPreference, EscalationPriority
from ai_gateway.services.audit.models import WireModel


class EscalationRequest(WireModel):
    """A user-initiated request for human follow-up."""

    user_id: str = ANONYMOUS_USER
    original_query: str
    reason: str
    priority: EscalationPriority = EscalationPriority.MEDIUM
    contact_preference: ContactPreference = ContactPreference.APP
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class PendingEscalation(WireModel):
    """An escalation held locally under the durable policy."""

    local_id: str
    request: EscalationRequest


@dataclass
class EscalationResult:
    """Outcome shown to the user."""

    escalation_id: str
    message: str
    delivered: bool  # accepted by the remote endpoint
    queued: bool = False  # held locally for retry
