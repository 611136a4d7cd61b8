"""Query handlers that answer without the AI responder."""

from ai_gateway.orchestrator.handlers.greeting import GreetingHandler

__all__ = ["GreetingHandler"]
