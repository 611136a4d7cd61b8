"""Conversation history, identity and session management."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ai_gateway.config.constants import ANONYMOUS_USER, QueryCategory, UserRole
from ai_gateway.utils.ids import generate_message_id, generate_session_id

logger = logging.getLogger(__name__)


@dataclass
class MessageTurn:
    """A single turn in the conversation history."""

    role: str  # "user" | "assistant"
    content: str
    id: str = field(default_factory=generate_message_id)
    timestamp: str = ""
    query_category: QueryCategory | None = None
    was_blocked: bool = False
    audit_log_id: str | None = None
    data: object = None
    is_disclosure: bool = False
    is_escalation: bool = False

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now(UTC).isoformat()

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
            "queryCategory": self.query_category.value if self.query_category else None,
            "wasBlocked": self.was_blocked,
            "auditLogId": self.audit_log_id,
            "isDisclosure": self.is_disclosure,
            "isEscalation": self.is_escalation,
        }


Subscriber = Callable[[MessageTurn], None]


class MessageHistory:
    """Ordered message history with publish/subscribe.

    ``append`` stores the turn and then notifies subscribers in subscription
    order. A failing subscriber is logged and skipped.
    """

    def __init__(self, max_turns: int | None = None) -> None:
        self._turns: list[MessageTurn] = []
        self._subscribers: list[Subscriber] = []
        self._max_turns = max_turns

    def append(self, turn: MessageTurn) -> MessageTurn:
        self._turns.append(turn)
        if self._max_turns and len(self._turns) > self._max_turns:
            self._turns = self._turns[-self._max_turns :]
        for subscriber in list(self._subscribers):
            try:
                subscriber(turn)
            except Exception as e:
                logger.error("History subscriber failed: %s", e, exc_info=True)
        return turn

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register *subscriber*; return a callable that unsubscribes it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def reset(self) -> None:
        self._turns = []

    @property
    def turns(self) -> list[MessageTurn]:
        return list(self._turns)

    def __len__(self) -> int:
        return len(self._turns)


@dataclass(frozen=True)
class Identity:
    """Caller identity as resolved by the host application."""

    email: str | None = None
    is_admin: bool = False
    is_teacher: bool = False

    @property
    def user_id(self) -> str:
        return self.email or ANONYMOUS_USER

    @property
    def user_role(self) -> UserRole:
        if self.is_admin:
            return UserRole.ADMIN
        if self.is_teacher:
            return UserRole.TEACHER
        return UserRole.PARENT


ANONYMOUS = Identity()


@dataclass
class GatewaySession:
    """One client session: stable id, identity, history."""

    identity: Identity = ANONYMOUS
    session_id: str = field(default_factory=generate_session_id)
    history: MessageHistory = field(default_factory=MessageHistory)
    language: str | None = None
    user_agent: str | None = None
    ip_address: str | None = None
    created_at: float = field(default_factory=time.time)
    last_access: float = field(default_factory=time.time)


class SessionStore:
    """In-memory session store with idle expiry and a size bound.

    When the store is full, expired sessions are swept first and then the
    least recently used session is evicted.
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        max_history_turns: int | None = None,
        max_sessions: int = 1000,
    ) -> None:
        self._sessions: dict[str, GatewaySession] = {}
        self._ttl = ttl_seconds
        self._max_history_turns = max_history_turns
        self._max_sessions = max_sessions
        self._lock = threading.Lock()

    def get(self, session_id: str) -> GatewaySession | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            now = time.time()
            if now - session.last_access > self._ttl:
                del self._sessions[session_id]
                return None
            session.last_access = now
            return session

    def create(
        self,
        identity: Identity = ANONYMOUS,
        language: str | None = None,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> GatewaySession:
        session = GatewaySession(
            identity=identity,
            history=MessageHistory(self._max_history_turns),
            language=language,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        with self._lock:
            if len(self._sessions) >= self._max_sessions:
                self._evict()
            self._sessions[session.session_id] = session
        return session

    def _expired_ids(self, now: float) -> list[str]:
        return [k for k, v in self._sessions.items() if now - v.last_access > self._ttl]

    def _evict(self) -> None:
        # Caller holds the lock.
        for k in self._expired_ids(time.time()):
            del self._sessions[k]
        if len(self._sessions) >= self._max_sessions:
            oldest = min(self._sessions, key=lambda k: self._sessions[k].last_access)
            del self._sessions[oldest]
            logger.warning("Session store full (%s), evicted session %s", self._max_sessions, oldest)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        """Remove expired sessions and return the count removed."""
        now = time.time()
        with self._lock:
            expired = self._expired_ids(now)
            for k in expired:
                del self._sessions[k]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
