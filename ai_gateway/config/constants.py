"""
Constants, enums, and static values.
"""

from enum import Enum


class QueryCategory(str, Enum):
    """Query safety categories."""

    SAFE = "safe"  # General FAQ, no data access needed
    AGGREGATE = "aggregate"  # Statistical data only
    INDIVIDUAL = "individual"  # Individual child data, requires consent
    BLOCKED = "blocked"  # Always forbidden (profiling, analysis)


class RiskLevel(str, Enum):
    """Risk levels for AI operations."""

    MINIMAL = "minimal"
    LOW = "low"
    HIGH = "high"
    PROHIBITED = "prohibited"


class ResponseType(str, Enum):
    """Outcome recorded for an audited interaction."""

    SUCCESS = "success"
    BLOCKED = "blocked"
    ERROR = "error"
    ESCALATED = "escalated"


class UserRole(str, Enum):
    """Roles that can talk to the assistant."""

    PARENT = "parent"
    TEACHER = "teacher"
    ADMIN = "admin"


class EscalationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContactPreference(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    APP = "app"


class EscalationDurability(str, Enum):
    """What happens to an escalation the remote endpoint did not accept."""

    BEST_EFFORT = "best_effort"
    DURABLE = "durable"


class QueryState(str, Enum):
    """Per-query gateway states."""

    RECEIVED = "received"
    CLASSIFIED = "classified"
    BLOCKED = "blocked"
    FORWARDED = "forwarded"
    ANSWERED = "answered"
    ERRORED = "errored"


TERMINAL_STATES = frozenset({QueryState.BLOCKED, QueryState.ANSWERED, QueryState.ERRORED})


class StatsPeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


# Data-category tags
INDIVIDUAL_CHILD_DATA = "individual_child_data"
AGGREGATE_STATISTICS = "aggregate_statistics"

ANONYMOUS_USER = "anonymous"
LOCAL_ID_PREFIX = "local_"
SESSION_ID_PREFIX = "session_"
