"""Identifier helpers."""

import secrets
import string
import time

from ai_gateway.config.constants import LOCAL_ID_PREFIX, SESSION_ID_PREFIX

_BASE36 = string.digits + string.ascii_lowercase


def _random_suffix(length: int = 9) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_local_id() -> str:
    """Time- and randomness-based id, distinguishable from server ids."""
    return f"{LOCAL_ID_PREFIX}{int(time.time() * 1000)}_{_random_suffix()}"


def generate_session_id() -> str:
    return f"{SESSION_ID_PREFIX}{int(time.time() * 1000)}_{_random_suffix()}"


def generate_message_id() -> str:
    return _random_suffix()
