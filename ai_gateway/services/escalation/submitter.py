"""Human escalation submission."""

import logging
from typing import Any

import httpx

from ai_gateway.config.constants import EscalationDurability
from ai_gateway.config.errors import EscalationError
from ai_gateway.config.message import get_message
from ai_gateway.config.settings import Settings
from ai_gateway.infrastructure.queue.durable_queue import DurableQueue
from ai_gateway.infrastructure.queue.periodic import PeriodicTask
from ai_gateway.infrastructure.storage.kv_store import KeyValueStore
from ai_gateway.services.escalation.models import (
    EscalationRequest,
    EscalationResult,
    PendingEscalation,
)
from ai_gateway.utils.ids import generate_local_id

logger = logging.getLogger(__name__)


def create_escalation_queue(
    settings: Settings, store: KeyValueStore
) -> DurableQueue[PendingEscalation]:
    return DurableQueue(
        store=store,
        key=settings.escalation_queue_key,
        capacity=settings.audit_queue_capacity,
        serialize=lambda pending: pending.to_wire(),
        deserialize=PendingEscalation.model_validate,
        identify=lambda pending: pending.local_id,
    )


class EscalationSubmitter:
    """Submits escalation requests to ``POST /escalate``.

    The user always gets a friendly message. What happens to a request the
    remote did not accept depends on ``escalation_durability``:

    * ``best_effort``: nothing is kept. The request is lost from the
      compliance record and a warning is logged.
    * ``durable``: the request is queued locally and re-submitted on every
      flush cycle until accepted.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        queue: DurableQueue[PendingEscalation] | None = None,
    ):
        self.settings = settings
        self.durability = EscalationDurability(settings.escalation_durability)
        self._client = client or httpx.AsyncClient(
            base_url=settings.audit_api_url.rstrip("/"),
            timeout=settings.request_timeout,
        )
        if self.durability == EscalationDurability.DURABLE and queue is None:
            raise ValueError("durable escalation policy requires a queue")
        self.queue = queue if self.durability == EscalationDurability.DURABLE else None
        self._retrier = PeriodicTask(
            "escalation-retry", settings.audit_flush_interval_seconds, self.retry_pending
        )

    async def _post(self, request: EscalationRequest) -> dict[str, Any]:
        try:
            response = await self._client.post("/escalate", json=request.to_wire())
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise EscalationError(
                f"POST /escalate returned {e.response.status_code}", e.response.status_code
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise EscalationError(f"POST /escalate failed: {e}") from e
        if not isinstance(body, dict) or not body.get("escalationId"):
            raise EscalationError("POST /escalate response has no escalationId")
        return body

    async def submit(self, request: EscalationRequest, language: str | None = None) -> EscalationResult:
        """Submit *request*; never raises."""
        try:
            body = await self._post(request)
            return EscalationResult(
                escalation_id=str(body["escalationId"]),
                message=str(body.get("message") or get_message("escalation_recorded", language)),
                delivered=True,
            )
        except EscalationError as e:
            logger.warning("Escalation submit failed: %s", e)
        except Exception as e:
            logger.error("Unexpected escalation submit failure: %s", e, exc_info=True)

        local_id = generate_local_id()
        queued = False
        if self.queue is not None:
            self.queue.push(PendingEscalation(local_id=local_id, request=request))
            queued = True
            logger.info("Escalation queued locally id=%s", local_id)
        else:
            logger.warning(
                "Escalation for user=%s not persisted (best_effort policy), local id=%s",
                request.user_id,
                local_id,
            )
        return EscalationResult(
            escalation_id=local_id,
            message=get_message("escalation_recorded", language),
            delivered=False,
            queued=queued,
        )

    async def retry_pending(self) -> int:
        """Re-submit queued escalations oldest first; stop at the first failure."""
        if self.queue is None:
            return 0
        delivered: list[PendingEscalation] = []
        for pending in self.queue.snapshot():
            try:
                body = await self._post(pending.request)
            except EscalationError as e:
                logger.warning("Escalation retry failed, will retry later: %s", e)
                break
            delivered.append(pending)
            logger.info(
                "Queued escalation %s delivered as %s", pending.local_id, body["escalationId"]
            )
        if delivered:
            self.queue.remove(delivered)
        return len(delivered)

    def start(self) -> None:
        if self.queue is not None:
            self._retrier.start()

    async def stop(self) -> None:
        await self._retrier.stop()

    def pending_count(self) -> int:
        return len(self.queue) if self.queue is not None else 0

    async def close(self) -> None:
        await self.stop()
        await self._client.aclose()
