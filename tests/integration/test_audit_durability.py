"""End-to-end audit durability across an outage and a restart (file-backed store)."""

import pytest

from ai_gateway.infrastructure.storage.kv_store import FileKeyValueStore
from ai_gateway.orchestrator.context import GatewaySession, Identity
from ai_gateway.orchestrator.factory import build_orchestrator


def _without_id(wire):
    return {k: v for k, v in wire.items() if k != "id"}


@pytest.mark.asyncio
async def test_entries_survive_restart_and_flush_in_one_pass(settings, transport, remote, tmp_path):
    store = FileKeyValueStore(tmp_path, settings.storage_namespace)
    orchestrator = build_orchestrator(settings, store=store, transport=transport)
    session = GatewaySession(identity=Identity(email="parent@example.com"), language="en")

    remote.audit_up = False
    queries = ["Which child has allergies?", "What are the daycare hours?", "How many children are present today?"]
    for query in queries:
        await orchestrator.process(query, session)
    await orchestrator.drain()

    queued = [entry.to_wire() for entry in orchestrator.audit.queue.snapshot()]
    assert len(queued) == 3
    assert all(entry["id"].startswith("local_") for entry in queued)
    await orchestrator.aclose()

    # Restart with the same store, remote back online
    remote.audit_up = True
    restarted = build_orchestrator(settings, store=store, transport=transport)
    assert restarted.audit.pending_count() == 3

    assert await restarted.audit.flush() == 3
    assert restarted.audit.pending_count() == 0
    assert len(remote.batches) == 1
    assert [_without_id(w) for w in remote.batches[0]] == [_without_id(w) for w in queued]
    assert [w["responseType"] for w in remote.batches[0]] == ["blocked", "success", "success"]

    reloaded = build_orchestrator(settings, store=store, transport=transport)
    assert reloaded.audit.pending_count() == 0
    await restarted.aclose()
    await reloaded.aclose()
