"""Tests for the audit client and audit logger."""

import httpx
import pytest

from ai_gateway.config.constants import QueryCategory, StatsPeriod
from ai_gateway.config.errors import AuditRemoteError
from ai_gateway.services.audit.client import AuditClient
from ai_gateway.services.audit.logger import AuditLogger, create_audit_queue
from ai_gateway.services.audit.models import AuditLogEntry, AuditLogFilters


@pytest.fixture
def audit_logger(settings, store, transport):
    client = AuditClient(
        settings, httpx.AsyncClient(base_url=settings.audit_api_url, transport=transport)
    )
    return AuditLogger(settings, client, create_audit_queue(settings, store))


def _without_id(wire):
    return {k: v for k, v in wire.items() if k != "id"}


# ==========================================
#  WIRE FORMAT
# ==========================================


def test_entry_serializes_camel_case(entry_factory):
    wire = entry_factory(blocked_reason=None).to_wire()
    assert wire["userId"] == "parent@example.com"
    assert wire["queryCategory"] == "safe"
    assert wire["riskLevel"] == "minimal"
    assert wire["responseType"] == "success"
    assert wire["dataAccessed"] == []
    assert wire["consentVerified"] is True
    assert "blockedReason" not in wire


def test_entry_from_wire_round_trip(entry_factory):
    entry = entry_factory(id="srv-9")
    assert AuditLogEntry.from_wire(entry.to_wire()) == entry


def test_filters_to_params():
    params = AuditLogFilters(
        user_id="a@b.c", query_category=QueryCategory.BLOCKED, was_blocked=True, page=2
    ).to_params()
    assert params == {"userId": "a@b.c", "queryCategory": "blocked", "wasBlocked": "true", "page": "2"}


# ==========================================
#  RECORD
# ==========================================


@pytest.mark.asyncio
async def test_record_online_returns_server_id(audit_logger, remote, entry_factory):
    entry = entry_factory()
    audit_id = await audit_logger.record(entry)

    assert audit_id == "srv-1"
    assert entry.id == "srv-1"
    assert audit_logger.pending_count() == 0
    assert _without_id(remote.logged[0]) == _without_id(entry.to_wire())


@pytest.mark.asyncio
async def test_record_offline_queues_with_local_id(audit_logger, remote, entry_factory):
    remote.audit_up = False
    entry = entry_factory()

    audit_id = await audit_logger.record(entry)

    assert audit_id.startswith("local_")
    assert entry.id == audit_id
    assert audit_logger.pending_count() == 1


@pytest.mark.asyncio
async def test_record_never_raises_on_malformed_reply(settings, store, entry_factory):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True}))
    client = AuditClient(settings, httpx.AsyncClient(base_url=settings.audit_api_url, transport=transport))
    audit_logger = AuditLogger(settings, client, create_audit_queue(settings, store))

    audit_id = await audit_logger.record(entry_factory())
    assert audit_id.startswith("local_")


# ==========================================
#  FLUSH
# ==========================================


@pytest.mark.asyncio
async def test_three_failures_then_one_flush_empties_queue(audit_logger, remote, entry_factory):
    remote.audit_up = False
    entries = [entry_factory(query=f"question {i}") for i in range(3)]
    for entry in entries:
        await audit_logger.record(entry)
    assert audit_logger.pending_count() == 3

    remote.audit_up = True
    flushed = await audit_logger.flush()

    assert flushed == 3
    assert audit_logger.pending_count() == 0
    assert len(remote.batches) == 1
    sent = remote.batches[0]
    assert [_without_id(w) for w in sent] == [_without_id(e.to_wire()) for e in entries]
    assert [w["id"] for w in sent] == [e.id for e in entries]


@pytest.mark.asyncio
async def test_failed_flush_leaves_queue_unchanged(audit_logger, remote, entry_factory):
    remote.audit_up = False
    for i in range(2):
        await audit_logger.record(entry_factory(query=f"q{i}"))
    before = [e.to_wire() for e in audit_logger.queue.snapshot()]

    flushed = await audit_logger.flush()

    assert flushed == 0
    assert [e.to_wire() for e in audit_logger.queue.snapshot()] == before


@pytest.mark.asyncio
async def test_flush_empty_queue_makes_no_request(audit_logger, remote):
    assert await audit_logger.flush() == 0
    assert remote.batches == []


@pytest.mark.asyncio
async def test_queue_bounded_while_offline(settings, store, transport, remote, entry_factory):
    small = settings.model_copy(update={"audit_queue_capacity": 2})
    client = AuditClient(small, httpx.AsyncClient(base_url=small.audit_api_url, transport=transport))
    audit_logger = AuditLogger(small, client, create_audit_queue(small, store))
    remote.audit_up = False

    for i in range(3):
        await audit_logger.record(entry_factory(query=f"q{i}"))

    assert [e.query for e in audit_logger.queue.snapshot()] == ["q1", "q2"]


@pytest.mark.asyncio
async def test_start_and_stop_background_flush(audit_logger):
    audit_logger.start()
    assert audit_logger.running
    await audit_logger.stop()
    assert not audit_logger.running


# ==========================================
#  ADMIN REVIEW
# ==========================================


@pytest.mark.asyncio
async def test_get_audit_logs(audit_logger, remote, entry_factory):
    await audit_logger.record(entry_factory())
    page = await audit_logger.get_audit_logs(AuditLogFilters(was_blocked=False))

    assert page.total == 1
    assert page.logs[0].query == "What are the daycare hours?"
    assert remote.last_params == {"wasBlocked": "false"}


@pytest.mark.asyncio
async def test_get_compliance_stats(audit_logger, remote):
    stats = await audit_logger.get_compliance_stats(StatsPeriod.MONTH)

    assert stats.total_queries == 12
    assert stats.blocked_queries == 3
    assert stats.by_category["blocked"] == 3
    assert stats.period == StatsPeriod.MONTH
    assert remote.last_params == {"period": "month"}


@pytest.mark.asyncio
async def test_admin_calls_raise_when_remote_down(audit_logger, remote):
    remote.audit_up = False
    with pytest.raises(AuditRemoteError):
        await audit_logger.get_compliance_stats()


def test_new_session_id():
    assert AuditLogger.new_session_id().startswith("session_")
    assert AuditLogger.new_session_id() != AuditLogger.new_session_id()
