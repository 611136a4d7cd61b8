"""Gateway state model."""

from dataclasses import dataclass, field
from typing import Any, Optional

from ai_gateway.config.constants import TERMINAL_STATES, QueryState
from ai_gateway.services.classifier.models import QueryClassification

_ALLOWED: dict[QueryState, frozenset[QueryState]] = {
    QueryState.RECEIVED: frozenset({QueryState.CLASSIFIED}),
    QueryState.CLASSIFIED: frozenset({QueryState.BLOCKED, QueryState.ANSWERED, QueryState.FORWARDED}),
    QueryState.FORWARDED: frozenset({QueryState.ANSWERED, QueryState.ERRORED}),
}


class InvalidTransition(RuntimeError):
    pass


@dataclass
class GatewayState:
    """State object for one query as it moves through the gateway."""

    # Input
    query: str
    session_id: str

    current: QueryState = QueryState.RECEIVED
    history: list[QueryState] = field(default_factory=lambda: [QueryState.RECEIVED])

    # Classification
    classification: Optional[QueryClassification] = None

    # Outcome
    response_message: Optional[str] = None
    response_data: Any = None
    error: Optional[str] = None

    def transition(self, to: QueryState) -> None:
        if to not in _ALLOWED.get(self.current, frozenset()):
            raise InvalidTransition(f"{self.current.value} -> {to.value}")
        self.current = to
        self.history.append(to)

    @property
    def is_terminal(self) -> bool:
        return self.current in TERMINAL_STATES


@dataclass
class GatewayResult:
    """What the caller gets back for one query."""

    success: bool
    message: str
    state: QueryState
    classification: QueryClassification
    data: Any = None
    human_escalation_available: bool = True

    def to_dict(self) -> dict[str, Any]:
        c = self.classification
        return {
            "success": self.success,
            "message": self.message,
            "data": self.data,
            "state": self.state.value,
            "compliance": {
                "queryCategory": c.category.value,
                "riskLevel": c.risk_level.value,
                "wasBlocked": c.is_blocked,
                "blockedReason": c.blocked_reason,
                "humanEscalationAvailable": self.human_escalation_available,
                "dataDisclosure": list(c.data_categories),
            },
        }
