"""Audit service models (camelCase on the wire)."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ai_gateway.config.constants import (
    ANONYMOUS_USER,
    QueryCategory,
    ResponseType,
    RiskLevel,
    StatsPeriod,
    UserRole,
)


class WireModel(BaseModel):
    """Base for models exchanged with the remote API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AuditLogEntry(WireModel):
    """One audited AI interaction (GDPR Article 30 record of processing)."""

    id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    user_id: str = ANONYMOUS_USER
    user_role: UserRole = UserRole.PARENT
    session_id: str
    query: str
    query_category: QueryCategory
    risk_level: RiskLevel
    was_blocked: bool
    blocked_reason: str | None = None
    response_type: ResponseType
    data_accessed: list[str] = Field(default_factory=list)
    consent_verified: bool
    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "AuditLogEntry":
        return cls.model_validate(data)


class AuditLogPage(WireModel):
    logs: list[AuditLogEntry] = Field(default_factory=list)
    total: int = 0


class AuditLogFilters(WireModel):
    """Query parameters for the admin log listing."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    user_id: str | None = None
    query_category: QueryCategory | None = None
    was_blocked: bool | None = None
    page: int | None = None
    page_size: int | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for key, value in self.to_wire().items():
            params[key] = str(value).lower() if isinstance(value, bool) else str(value)
        return params


class ComplianceStats(WireModel):
    total_queries: int = 0
    blocked_queries: int = 0
    escalated_queries: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_risk_level: dict[str, int] = Field(default_factory=dict)
    period: StatsPeriod | None = None
