"""Local durable storage module."""

from ai_gateway.infrastructure.storage.kv_store import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    create_store,
)

__all__ = [
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "create_store",
]
