"""Audit logger with durable local fallback and periodic batch flush."""

import asyncio
import logging

from ai_gateway.config.constants import StatsPeriod
from ai_gateway.config.errors import AuditRemoteError
from ai_gateway.config.settings import Settings
from ai_gateway.infrastructure.queue.durable_queue import DurableQueue
from ai_gateway.infrastructure.queue.periodic import PeriodicTask
from ai_gateway.infrastructure.storage.kv_store import KeyValueStore
from ai_gateway.services.audit.client import AuditClient
from ai_gateway.services.audit.models import (
    AuditLogEntry,
    AuditLogFilters,
    AuditLogPage,
    ComplianceStats,
)
from ai_gateway.utils.ids import generate_local_id, generate_session_id

logger = logging.getLogger(__name__)


def create_audit_queue(settings: Settings, store: KeyValueStore) -> DurableQueue[AuditLogEntry]:
    """Durable queue of audit entries awaiting remote confirmation."""
    return DurableQueue(
        store=store,
        key=settings.audit_queue_key,
        capacity=settings.audit_queue_capacity,
        serialize=lambda entry: entry.to_wire(),
        deserialize=AuditLogEntry.from_wire,
        identify=lambda entry: entry.id,
    )


class AuditLogger:
    """Records every AI interaction; never fails the caller.

    ``record`` tries the remote API once. On any failure the entry gets a
    local id and goes to the durable queue, and the local id is returned
    straight away. A background task retries the whole queue as one batch
    every ``audit_flush_interval_seconds``: the batch either succeeds and the
    sent entries are removed, or nothing is removed. The interval is fixed,
    there is no backoff.
    """

    def __init__(
        self,
        settings: Settings,
        client: AuditClient,
        queue: DurableQueue[AuditLogEntry],
    ):
        self.settings = settings
        self.client = client
        self.queue = queue
        self._flush_lock = asyncio.Lock()
        self._flusher = PeriodicTask(
            "audit-flush", settings.audit_flush_interval_seconds, self.flush
        )

    async def record(self, entry: AuditLogEntry) -> str:
        """Persist *entry* remotely, or queue it locally; return its id."""
        try:
            entry.id = await self.client.log(entry)
            logger.debug("Audit entry persisted remotely id=%s", entry.id)
            return entry.id
        except AuditRemoteError as e:
            logger.warning("Audit remote persist failed, queueing locally: %s", e)
        except Exception as e:
            logger.error("Unexpected audit persist failure, queueing locally: %s", e, exc_info=True)

        entry.id = generate_local_id()
        self.queue.push(entry)
        logger.info("Audit entry queued locally id=%s (pending=%s)", entry.id, len(self.queue))
        return entry.id

    async def flush(self) -> int:
        """Send the current queue as one batch; return how many entries were cleared."""
        async with self._flush_lock:
            pending = self.queue.snapshot()
            if not pending:
                return 0
            try:
                processed = await self.client.batch(pending)
            except AuditRemoteError as e:
                logger.warning(
                    "Failed to process %s pending audit logs, will retry later: %s", len(pending), e
                )
                return 0
            except Exception as e:
                logger.error("Unexpected failure flushing audit queue: %s", e, exc_info=True)
                return 0

            # Entries pushed while the batch was in flight stay queued.
            removed = self.queue.remove(pending)
            logger.info(
                "Processed %s pending audit logs (remote reported %s)", removed, processed
            )
            return removed

    def start(self) -> None:
        """Start the periodic flush on the running event loop."""
        self._flusher.start()

    async def stop(self) -> None:
        await self._flusher.stop()

    @property
    def running(self) -> bool:
        return self._flusher.running

    def pending_count(self) -> int:
        return len(self.queue)

    @staticmethod
    def new_session_id() -> str:
        """Session id stamped on audit entries, `session_<ms>_<rand>`."""
        return generate_session_id()

    async def get_audit_logs(self, filters: AuditLogFilters | None = None) -> AuditLogPage:
        """Admin listing; raises AuditRemoteError on failure."""
        return await self.client.get_logs(filters)

    async def get_compliance_stats(self, period: StatsPeriod = StatsPeriod.WEEK) -> ComplianceStats:
        """Admin dashboard figures; raises AuditRemoteError on failure."""
        return await self.client.get_stats(period)

    async def close(self) -> None:
        await self.stop()
        await self.client.close()
