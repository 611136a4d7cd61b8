"""Compliance classifier for natural-language queries."""

import logging

from ai_gateway.config.message import (
    BLOCKED_PARTS,
    resolve_language,
    translate_alternative,
    translate_reason,
)
from ai_gateway.services.classifier.models import QueryClassification, Rule, SafeQuery
from ai_gateway.services.classifier.rules import (
    SAFE_QUERIES,
    blocked_outcome,
    build_default_rules,
    safe_outcome,
)
from ai_gateway.utils.text_processing import normalize_text

logger = logging.getLogger(__name__)

CLASSIFICATION_FAILED_REASON = "Query could not be classified safely"


class QueryClassifier:
    """Classifies queries before they may reach the AI responder.

    Rules are evaluated in order and the first match wins. Input that no rule
    matches is safe/minimal. Classification never raises: if a predicate
    errors, the query is treated as blocked.
    """

    def __init__(self, rules: list[Rule] | None = None, default_language: str = "it"):
        self.rules = rules if rules is not None else build_default_rules()
        self.default_language = default_language

    def classify(self, query: str) -> QueryClassification:
        """
        Classify a query for safety and compliance.

        Args:
            query: Raw user query

        Returns:
            The outcome of the first matching rule, or the safe default
        """
        raw = (query or "").strip()
        normalized = normalize_text(raw)

        for rule in self.rules:
            text = raw if rule.use_raw_text else normalized
            try:
                matched = rule.predicate(text)
            except Exception as e:
                logger.error(
                    "Classifier rule '%s' failed, blocking query: %s", rule.name, e, exc_info=True
                )
                return blocked_outcome(CLASSIFICATION_FAILED_REASON, None, rule.name)
            if matched:
                logger.debug("Query matched rule '%s' (%s)", rule.name, rule.outcome.category.value)
                return rule.outcome

        return safe_outcome()

    def localize(self, classification: QueryClassification, language: str | None = None) -> str:
        """Render the blocked message: prefix, reason, alternative, human contact."""
        lang = resolve_language(language, self.default_language)
        parts = BLOCKED_PARTS[lang]

        reason = translate_reason(classification.blocked_reason or "", lang)
        message = f"{parts['prefix']}\n{parts['reason'].format(reason=reason)}"
        if classification.suggested_alternative:
            alternative = translate_alternative(classification.suggested_alternative, lang)
            message += "\n\n" + parts["alternative"].format(alternative=alternative)
        message += "\n\n" + parts["contact"]
        return message

    def safe_queries(self) -> list[SafeQuery]:
        """Curated suggestions for the UI."""
        return list(SAFE_QUERIES)

    def suggested_queries(self, language: str | None = None) -> list[str]:
        lang = resolve_language(language, self.default_language)
        return [q.localized(lang) for q in SAFE_QUERIES]
