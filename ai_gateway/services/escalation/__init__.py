"""Human escalation module."""

from ai_gateway.services.escalation.models import EscalationRequest, EscalationResult
from ai_gateway.services.escalation.submitter import EscalationSubmitter, create_escalation_queue

__all__ = [
    "EscalationRequest",
    "EscalationResult",
    "EscalationSubmitter",
    "create_escalation_queue",
]
