"""Main gateway orchestrator."""

import asyncio
import logging
import time
from typing import Any

from ai_gateway.config.constants import (
    ContactPreference,
    EscalationPriority,
    QueryState,
    ResponseType,
)
from ai_gateway.config.errors import ResponderError
from ai_gateway.config.message import get_message, resolve_language
from ai_gateway.config.settings import Settings
from ai_gateway.infrastructure.logging.logger import StructuredLogger
from ai_gateway.infrastructure.responder.client import AIResponderClient
from ai_gateway.orchestrator.context import GatewaySession, MessageTurn
from ai_gateway.orchestrator.handlers.greeting import GreetingHandler
from ai_gateway.orchestrator.state import GatewayResult, GatewayState
from ai_gateway.services.audit.logger import AuditLogger
from ai_gateway.services.audit.models import AuditLogEntry
from ai_gateway.services.classifier.classifier import QueryClassifier
from ai_gateway.services.classifier.models import QueryClassification
from ai_gateway.services.escalation.models import EscalationRequest, EscalationResult
from ai_gateway.services.escalation.submitter import EscalationSubmitter

logger = logging.getLogger(__name__)


class GatewayOrchestrator:
    """Runs one query through classify -> block | answer | forward.

    Every query produces exactly one audit record. The record is scheduled
    before the result is returned but not awaited; ``drain`` waits for the
    outstanding ones.
    """

    def __init__(
        self,
        settings: Settings,
        classifier: QueryClassifier,
        audit_logger: AuditLogger,
        escalation: EscalationSubmitter,
        responder: AIResponderClient,
    ):
        self.settings = settings
        self.classifier = classifier
        self.audit = audit_logger
        self.escalation = escalation
        self.responder = responder
        self.greetings = GreetingHandler()
        self.structured = StructuredLogger(__name__)
        self._audit_tasks: set[asyncio.Task[str]] = set()

    def _language(self, session: GatewaySession, language: str | None) -> str:
        return resolve_language(language or session.language, self.settings.default_language)

    # ------------------------------------------------------------------
    # Audit scheduling
    # ------------------------------------------------------------------

    def _build_entry(
        self,
        session: GatewaySession,
        query: str,
        classification: QueryClassification,
        response_type: ResponseType,
        data_accessed: list[str],
        consent_verified: bool,
    ) -> AuditLogEntry:
        return AuditLogEntry(
            user_id=session.identity.user_id,
            user_role=session.identity.user_role,
            session_id=session.session_id,
            query=query,
            query_category=classification.category,
            risk_level=classification.risk_level,
            was_blocked=classification.is_blocked,
            blocked_reason=classification.blocked_reason,
            response_type=response_type,
            data_accessed=data_accessed,
            consent_verified=consent_verified,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
        )

    def _schedule_audit(self, entry: AuditLogEntry, turn: MessageTurn | None = None) -> asyncio.Task[str]:
        task = asyncio.create_task(self.audit.record(entry))
        self._audit_tasks.add(task)

        def _done(t: asyncio.Task[str]) -> None:
            self._audit_tasks.discard(t)
            if t.cancelled():
                logger.warning("Audit record task cancelled for session=%s", entry.session_id)
                return
            if t.exception() is not None:
                logger.error("Audit record task failed: %s", t.exception())
                return
            if turn is not None:
                turn.audit_log_id = t.result()

        task.add_done_callback(_done)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled audit record to settle."""
        while self._audit_tasks:
            await asyncio.gather(*list(self._audit_tasks), return_exceptions=True)

    @property
    def pending_audit_tasks(self) -> int:
        return len(self._audit_tasks)

    # ------------------------------------------------------------------
    # Query path
    # ------------------------------------------------------------------

    async def process(
        self, query: str, session: GatewaySession, language: str | None = None
    ) -> GatewayResult:
        """
        Process one user query.

        Args:
            query: Raw user query
            session: Caller session (identity, history)
            language: Reply language, defaults to the session or settings language

        Returns:
            GatewayResult with the user-visible message and compliance metadata
        """
        lang = self._language(session, language)
        state = GatewayState(query=query, session_id=session.session_id)
        start_time = time.time()

        session.history.append(MessageTurn(role="user", content=query))

        classification = self.classifier.classify(query)
        state.classification = classification
        state.transition(QueryState.CLASSIFIED)
        self.structured.log_step(
            QueryState.CLASSIFIED.value,
            {
                "session_id": session.session_id,
                "category": classification.category.value,
                "risk_level": classification.risk_level.value,
                "rule": classification.rule_name,
            },
        )

        if classification.is_blocked:
            state.transition(QueryState.BLOCKED)
            state.response_message = self.classifier.localize(classification, lang)
            entry = self._build_entry(
                session, query, classification, ResponseType.BLOCKED, [], consent_verified=False
            )
            return self._finish(
                state, session, classification, entry, success=False, start_time=start_time
            )

        canned = self.greetings.handle(query, lang)
        if canned is not None:
            state.transition(QueryState.ANSWERED)
            state.response_message = canned
            entry = self._build_entry(
                session,
                query,
                classification,
                ResponseType.SUCCESS,
                list(classification.data_categories),
                consent_verified=False,
            )
            return self._finish(
                state, session, classification, entry, success=True, start_time=start_time
            )

        state.transition(QueryState.FORWARDED)
        try:
            reply = await self.responder.query(query)
        except ResponderError as e:
            return self._fail(state, session, classification, lang, e, start_time)
        except Exception as e:
            logger.error("Unexpected responder failure: %s", e, exc_info=True)
            return self._fail(state, session, classification, lang, e, start_time)

        state.transition(QueryState.ANSWERED)
        state.response_message = reply.message
        state.response_data = reply.data
        # A decline carries the responder's own message and is still an answer.
        entry = self._build_entry(
            session,
            query,
            classification,
            ResponseType.SUCCESS,
            list(classification.data_categories),
            consent_verified=True,
        )
        return self._finish(
            state, session, classification, entry, success=reply.success, start_time=start_time
        )

    def _fail(
        self,
        state: GatewayState,
        session: GatewaySession,
        classification: QueryClassification,
        lang: str,
        error: Exception,
        start_time: float,
    ) -> GatewayResult:
        state.transition(QueryState.ERRORED)
        state.error = str(error)
        state.response_message = get_message("responder_error", lang)
        self.structured.log_error(
            QueryState.ERRORED.value, error, {"session_id": session.session_id}
        )
        entry = self._build_entry(
            session, state.query, classification, ResponseType.ERROR, [], consent_verified=False
        )
        return self._finish(
            state, session, classification, entry, success=False, start_time=start_time
        )

    def _finish(
        self,
        state: GatewayState,
        session: GatewaySession,
        classification: QueryClassification,
        entry: AuditLogEntry,
        success: bool,
        start_time: float,
    ) -> GatewayResult:
        turn = MessageTurn(
            role="assistant",
            content=state.response_message or "",
            query_category=classification.category,
            was_blocked=classification.is_blocked,
            data=state.response_data,
        )
        self._schedule_audit(entry, turn)
        session.history.append(turn)

        self.structured.log_step(
            state.current.value,
            {"session_id": session.session_id, "success": success},
            duration_ms=(time.time() - start_time) * 1000,
        )
        return GatewayResult(
            success=success,
            message=state.response_message or "",
            state=state.current,
            classification=classification,
            data=state.response_data,
        )

    # ------------------------------------------------------------------
    # Conversation helpers
    # ------------------------------------------------------------------

    def pre_check(self, query: str) -> QueryClassification:
        """Classify without forwarding or auditing, for UI hints."""
        return self.classifier.classify(query)

    def disclosure_message(self, language: str | None = None) -> str:
        return get_message("disclosure", resolve_language(language, self.settings.default_language))

    def suggested_queries(self, language: str | None = None) -> list[str]:
        return self.classifier.suggested_queries(language)

    def start_conversation(self, session: GatewaySession, language: str | None = None) -> None:
        """Append the welcome turn to an empty history."""
        if len(session.history) == 0:
            session.history.append(
                MessageTurn(
                    role="assistant",
                    content=get_message("welcome", self._language(session, language)),
                    is_disclosure=True,
                )
            )

    def clear(self, session: GatewaySession, language: str | None = None) -> None:
        """Reset the history to the welcome turn."""
        session.history.reset()
        self.start_conversation(session, language)

    async def request_human_assistance(
        self,
        session: GatewaySession,
        original_query: str,
        reason: str | None = None,
        language: str | None = None,
        priority: EscalationPriority = EscalationPriority.MEDIUM,
        contact_preference: ContactPreference = ContactPreference.APP,
    ) -> EscalationResult:
        """Submit an escalation for *original_query* and report it in the history."""
        lang = self._language(session, language)
        request = EscalationRequest(
            user_id=session.identity.user_id,
            original_query=original_query,
            reason=reason or get_message("escalation_default_reason", lang),
            priority=priority,
            contact_preference=contact_preference,
        )
        result = await self.escalation.submit(request, lang)

        if result.delivered:
            content = get_message(
                "escalation_submitted",
                lang,
                email=self.settings.support_email,
                phone=self.settings.support_phone or "-",
            )
        else:
            content = result.message

        classification = self.classifier.classify(original_query)
        turn = MessageTurn(role="assistant", content=content, is_escalation=True)
        entry = self._build_entry(
            session, original_query, classification, ResponseType.ESCALATED, [], consent_verified=False
        )
        self._schedule_audit(entry, turn)
        session.history.append(turn)

        logger.info(
            "Escalation %s for session=%s (delivered=%s, queued=%s)",
            result.escalation_id,
            session.session_id,
            result.delivered,
            result.queued,
        )
        return result

    def status(self) -> dict[str, Any]:
        return {
            "audit_pending": self.audit.pending_count(),
            "audit_flusher_running": self.audit.running,
            "escalation_pending": self.escalation.pending_count(),
            "audit_tasks_in_flight": self.pending_audit_tasks,
        }

    async def aclose(self) -> None:
        """Drain outstanding audit records and close all clients."""
        await self.drain()
        for name, closer in (
            ("audit", self.audit.close),
            ("escalation", self.escalation.close),
            ("responder", self.responder.close),
        ):
            try:
                await closer()
            except Exception as e:
                logger.error(f"Error closing {name} resources: {e}", exc_info=True)
        logger.info("Gateway resources closed")
