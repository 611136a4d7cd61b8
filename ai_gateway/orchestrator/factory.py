"""Wires settings into a ready-to-use gateway."""

import logging

import httpx

from ai_gateway.config.settings import Settings
from ai_gateway.infrastructure.responder.client import AIResponderClient
from ai_gateway.infrastructure.storage.kv_store import KeyValueStore, create_store
from ai_gateway.orchestrator.pipeline import GatewayOrchestrator
from ai_gateway.services.audit.client import AuditClient
from ai_gateway.services.audit.logger import AuditLogger, create_audit_queue
from ai_gateway.services.classifier.classifier import QueryClassifier
from ai_gateway.services.escalation.submitter import EscalationSubmitter, create_escalation_queue

logger = logging.getLogger(__name__)


def _http_client(
    base_url: str, settings: Settings, transport: httpx.AsyncBaseTransport | None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        timeout=settings.request_timeout,
        transport=transport,
    )


def build_orchestrator(
    settings: Settings,
    store: KeyValueStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GatewayOrchestrator:
    """
    Build the orchestrator and every service behind it.

    Args:
        settings: Application settings
        store: Key-value store for the durable queues; built from settings when omitted
        transport: Optional httpx transport shared by all remote clients

    Returns:
        GatewayOrchestrator (background tasks not started)
    """
    store = store or create_store(
        settings.storage_backend, settings.storage_dir, settings.storage_namespace
    )

    audit_logger = AuditLogger(
        settings,
        AuditClient(settings, _http_client(settings.audit_api_url, settings, transport)),
        create_audit_queue(settings, store),
    )
    escalation = EscalationSubmitter(
        settings,
        client=_http_client(settings.audit_api_url, settings, transport),
        queue=create_escalation_queue(settings, store),
    )
    responder = AIResponderClient(
        settings, _http_client(settings.responder_url, settings, transport)
    )
    logger.info(
        "Gateway built (storage=%s, escalation=%s, pending audit=%s)",
        settings.storage_backend,
        settings.escalation_durability,
        audit_logger.pending_count(),
    )
    return GatewayOrchestrator(
        settings,
        QueryClassifier(default_language=settings.default_language),
        audit_logger,
        escalation,
        responder,
    )
