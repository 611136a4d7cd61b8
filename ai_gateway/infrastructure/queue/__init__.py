"""Durable queue module."""

from ai_gateway.infrastructure.queue.durable_queue import DurableQueue

__all__ = ["DurableQueue"]
