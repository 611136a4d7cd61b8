"""Audit logging module."""

from ai_gateway.services.audit.client import AuditClient
from ai_gateway.services.audit.logger import AuditLogger, create_audit_queue
from ai_gateway.services.audit.models import AuditLogEntry

__all__ = ["AuditClient", "AuditLogEntry", "AuditLogger", "create_audit_queue"]
