"""Greeting handler - answers trivial conversational messages without the responder."""

import re

from ai_gateway.config.message import get_message


class GreetingHandler:
    """Handles greetings, thanks and farewells given as the whole message."""

    PATTERNS = {
        "greeting": re.compile(r"^(hello|hi|hey|ciao|buongiorno)[!.]?$"),
        "thanks": re.compile(r"^(thank you|thanks|grazie)[!.]?$"),
        "farewell": re.compile(r"^(bye|goodbye|arrivederci)[!.]?$"),
    }

    def match(self, message: str) -> str | None:
        """Return the reply key for *message*, or None."""
        msg_lower = message.lower().strip()
        for key, pattern in self.PATTERNS.items():
            if pattern.match(msg_lower):
                return key
        return None

    def handle(self, message: str, language: str | None = None) -> str | None:
        """Return the canned reply, or None when *message* is not trivial."""
        key = self.match(message)
        if key is None:
            return None
        return get_message(key, language)
