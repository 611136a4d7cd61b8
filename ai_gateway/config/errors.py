"""Exception hierarchy for remote collaborators.

Clients raise these; the services that own the user path absorb them
(audit falls back to the durable queue, escalation to a friendly message,
responder failures to a localized apology).
"""


class GatewayError(Exception):
    """Base class for gateway errors."""


class RemoteServiceError(GatewayError):
    """A remote call failed at the transport or HTTP level."""

    def __init__(self, service: str, message: str, status_code: int | None = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


class AuditRemoteError(RemoteServiceError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__("audit", message, status_code)


class ResponderError(RemoteServiceError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__("responder", message, status_code)


class EscalationError(RemoteServiceError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__("escalation", message, status_code)
