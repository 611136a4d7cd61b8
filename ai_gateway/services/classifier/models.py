"""Classifier service models."""

from collections.abc import Callable
from dataclasses import dataclass

from ai_gateway.config.constants import QueryCategory, RiskLevel


@dataclass(frozen=True)
class QueryClassification:
    """Risk judgment for one query."""

    category: QueryCategory
    risk_level: RiskLevel
    requires_consent: bool = False
    requires_human_review: bool = False
    blocked_reason: str | None = None
    data_categories: tuple[str, ...] = ()
    suggested_alternative: str | None = None
    blocked_categories: tuple[str, ...] = ()  # what a blocked query targeted; never accessed
    rule_name: str | None = None

    @property
    def is_blocked(self) -> bool:
        return self.category == QueryCategory.BLOCKED

    def to_dict(self) -> dict[str, object]:
        return {
            "category": self.category.value,
            "riskLevel": self.risk_level.value,
            "requiresConsent": self.requires_consent,
            "requiresHumanReview": self.requires_human_review,
            "blockedReason": self.blocked_reason,
            "dataCategories": list(self.data_categories),
            "suggestedAlternative": self.suggested_alternative,
        }


@dataclass(frozen=True)
class Rule:
    """A named predicate and the classification it yields on match."""

    name: str
    predicate: Callable[[str], bool]
    outcome: QueryClassification
    use_raw_text: bool = False  # evaluate against trimmed, un-folded text


@dataclass(frozen=True)
class SafeQuery:
    """A curated query the UI can suggest."""

    query: str
    query_it: str
    category: QueryCategory
    description: str
    description_it: str

    def localized(self, language: str) -> str:
        return self.query_it if language == "it" else self.query
