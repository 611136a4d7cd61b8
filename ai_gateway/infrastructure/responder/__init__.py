"""AI responder client module."""

from ai_gateway.infrastructure.responder.client import AIResponderClient, ResponderReply

__all__ = ["AIResponderClient", "ResponderReply"]
