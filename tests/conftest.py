"""Pytest configuration and fixtures."""

import json
from typing import Any

import httpx
import pytest

from ai_gateway.config.constants import QueryCategory, ResponseType, RiskLevel
from ai_gateway.config.settings import Settings
from ai_gateway.infrastructure.storage.kv_store import MemoryKeyValueStore
from ai_gateway.orchestrator.context import GatewaySession, Identity, MessageHistory
from ai_gateway.orchestrator.factory import build_orchestrator
from ai_gateway.services.audit.models import AuditLogEntry


class FakeRemote:
    """In-process stand-in for the responder, audit and escalation APIs."""

    def __init__(self) -> None:
        self.audit_up = True
        self.responder_up = True
        self.escalation_up = True
        self.responder_reply: dict[str, Any] | None = None
        self.queries: list[dict[str, Any]] = []
        self.logged: list[dict[str, Any]] = []
        self.batches: list[list[dict[str, Any]]] = []
        self.escalations: list[dict[str, Any]] = []
        self.last_params: dict[str, str] = {}
        self._next_id = 0

    def _server_id(self) -> str:
        self._next_id += 1
        return f"srv-{self._next_id}"

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path.endswith("/query"):
            if not self.responder_up:
                return httpx.Response(503, json={"error": "unavailable"})
            payload = json.loads(request.content)
            self.queries.append(payload)
            reply = self.responder_reply or {
                "success": True,
                "response": {"message": f"Answer to: {payload['query']}"},
            }
            return httpx.Response(200, json=reply)

        if path.endswith("/escalate"):
            if not self.escalation_up:
                return httpx.Response(500, json={"error": "down"})
            self.escalations.append(json.loads(request.content))
            return httpx.Response(
                200, json={"escalationId": f"esc-{len(self.escalations)}", "message": "Received"}
            )

        if not self.audit_up:
            return httpx.Response(503, json={"error": "unavailable"})

        if path.endswith("/log"):
            self.logged.append(json.loads(request.content))
            return httpx.Response(200, json={"auditLogId": self._server_id()})
        if path.endswith("/batch"):
            logs = json.loads(request.content)["logs"]
            self.batches.append(logs)
            return httpx.Response(200, json={"processed": len(logs)})
        if path.endswith("/logs"):
            self.last_params = dict(request.url.params)
            return httpx.Response(200, json={"logs": self.logged, "total": len(self.logged)})
        if path.endswith("/stats"):
            self.last_params = dict(request.url.params)
            return httpx.Response(
                200,
                json={
                    "totalQueries": 12,
                    "blockedQueries": 3,
                    "escalatedQueries": 1,
                    "byCategory": {"safe": 8, "blocked": 3, "aggregate": 1},
                    "byRiskLevel": {"minimal": 8, "prohibited": 3, "low": 1},
                },
            )
        return httpx.Response(404)


@pytest.fixture
def settings(tmp_path):
    """Provide settings fixture."""
    return Settings(
        storage_backend="memory",
        storage_dir=str(tmp_path),
        default_language="en",
        allowed_origins=["http://localhost:4200"],
    )


@pytest.fixture
def store():
    return MemoryKeyValueStore("test")


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def transport(remote):
    return httpx.MockTransport(remote.handle)


@pytest.fixture
def orchestrator(settings, store, transport):
    return build_orchestrator(settings, store=store, transport=transport)


@pytest.fixture
def session():
    return GatewaySession(
        identity=Identity(email="parent@example.com"),
        history=MessageHistory(),
        language="en",
    )


def make_entry(**overrides: Any) -> AuditLogEntry:
    """A plausible audit entry for a safe query."""
    data: dict[str, Any] = {
        "session_id": "session_1_abc",
        "user_id": "parent@example.com",
        "query": "What are the daycare hours?",
        "query_category": QueryCategory.SAFE,
        "risk_level": RiskLevel.MINIMAL,
        "was_blocked": False,
        "response_type": ResponseType.SUCCESS,
        "data_accessed": [],
        "consent_verified": True,
    }
    data.update(overrides)
    return AuditLogEntry(**data)


@pytest.fixture
def entry_factory():
    return make_entry
