"""HTTP client for the remote audit API."""

import logging
from typing import Any

import httpx

from ai_gateway.config.constants import StatsPeriod
from ai_gateway.config.errors import AuditRemoteError
from ai_gateway.config.settings import Settings
from ai_gateway.services.audit.models import (
    AuditLogEntry,
    AuditLogFilters,
    AuditLogPage,
    ComplianceStats,
)

logger = logging.getLogger(__name__)


class AuditClient:
    """Thin async wrapper over ``/log``, ``/batch``, ``/logs`` and ``/stats``.

    Every failure (transport, HTTP status, malformed body) is raised as
    :class:`AuditRemoteError`.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=settings.audit_api_url.rstrip("/"),
            timeout=settings.request_timeout,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise AuditRemoteError(
                f"{method} {path} returned {e.response.status_code}", e.response.status_code
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise AuditRemoteError(f"{method} {path} failed: {e}") from e
        if not isinstance(body, dict):
            raise AuditRemoteError(f"{method} {path} returned a non-object body")
        return body

    async def log(self, entry: AuditLogEntry) -> str:
        """Persist one entry; return the server-assigned id."""
        body = await self._request("POST", "/log", json=entry.to_wire())
        audit_log_id = body.get("auditLogId")
        if not audit_log_id:
            raise AuditRemoteError("POST /log response has no auditLogId")
        return str(audit_log_id)

    async def batch(self, entries: list[AuditLogEntry]) -> int:
        """Send entries in one request; return the processed count reported."""
        body = await self._request(
            "POST", "/batch", json={"logs": [entry.to_wire() for entry in entries]}
        )
        return int(body.get("processed", len(entries)))

    async def get_logs(self, filters: AuditLogFilters | None = None) -> AuditLogPage:
        params = filters.to_params() if filters else {}
        body = await self._request("GET", "/logs", params=params)
        try:
            return AuditLogPage.model_validate(body)
        except ValueError as e:
            raise AuditRemoteError(f"GET /logs returned an invalid page: {e}") from e

    async def get_stats(self, period: StatsPeriod = StatsPeriod.WEEK) -> ComplianceStats:
        body = await self._request("GET", "/stats", params={"period": period.value})
        try:
            stats = ComplianceStats.model_validate(body)
        except ValueError as e:
            raise AuditRemoteError(f"GET /stats returned invalid stats: {e}") from e
        stats.period = period
        return stats
