"""Tests for the query classifier."""

import pytest

from ai_gateway.config.constants import (
    AGGREGATE_STATISTICS,
    INDIVIDUAL_CHILD_DATA,
    QueryCategory,
    RiskLevel,
)
from ai_gateway.config.message import BLOCKED_PARTS
from ai_gateway.services.classifier.classifier import CLASSIFICATION_FAILED_REASON, QueryClassifier
from ai_gateway.services.classifier.models import QueryClassification, Rule
from ai_gateway.services.classifier.rules import (
    NAME_REFERENCE_REASON,
    build_default_rules,
    safe_outcome,
)


@pytest.fixture
def classifier():
    return QueryClassifier(default_language="en")


# ==========================================
#  BLOCKED RULES
# ==========================================


@pytest.mark.parametrize(
    "query,rule",
    [
        ("Which child has allergies?", "child_health"),
        ("What children need medication?", "child_health"),
        ("Show me children's emergency contacts", "child_contact"),
        ("What did Marco eat today?", "child_activity"),
        ("Incident report for yesterday", "incident"),
        ("Who needs a diaper change?", "care_routine"),
        ("Compare children in the blue group", "profiling"),
        ("Photos of children at the party", "child_photos"),
        ("List children by age", "roster_grouping"),
        ("Medication given this morning", "medication"),
        ("What is the staff schedule for Monday?", "staff_schedule"),
    ],
)
def test_blocked_rules(classifier, query, rule):
    result = classifier.classify(query)
    assert result.category == QueryCategory.BLOCKED
    assert result.risk_level == RiskLevel.PROHIBITED
    assert result.data_categories == ()
    assert result.requires_human_review is True
    assert result.rule_name == rule


def test_blocked_reports_targeted_category_separately(classifier):
    result = classifier.classify("Which child has allergies?")
    assert result.blocked_categories == (INDIVIDUAL_CHILD_DATA,)
    assert result.to_dict()["dataCategories"] == []


def test_allergy_scenario(classifier):
    result = classifier.classify("Which child has allergies?")
    assert result.is_blocked
    assert result.blocked_reason == "Query requests individual child health/medical information"
    assert result.suggested_alternative.startswith("For allergy information")


def test_blocked_rules_win_over_safe_rules(classifier):
    # "hello" would match the greeting rule; the blocked rule is evaluated first.
    result = classifier.classify("Hello, which child has allergies?")
    assert result.category == QueryCategory.BLOCKED


# ==========================================
#  SAFE / AGGREGATE / DEFAULT
# ==========================================


@pytest.mark.parametrize(
    "query",
    [
        "What are the daycare hours?",
        "How do I request leave for my child?",
        "Explain the fee payment process",
        "What documents need to be signed?",
        "How do I reach support?",
        "What is the sick policy?",
        "Hello!",
        "Help me write a parent announcement",
        "What are the holiday closures?",
    ],
)
def test_safe_rules(classifier, query):
    result = classifier.classify(query)
    assert result.category == QueryCategory.SAFE
    assert result.risk_level == RiskLevel.MINIMAL
    assert result.data_categories == ()
    assert result.rule_name is not None


def test_presence_count_is_aggregate(classifier):
    result = classifier.classify("How many children are present today?")
    assert result.category == QueryCategory.AGGREGATE
    assert result.risk_level == RiskLevel.LOW
    assert result.data_categories == (AGGREGATE_STATISTICS,)


@pytest.mark.parametrize(
    "query",
    [
        "Attendance rate this month",
        "Fee summary for September",
        "What's on the menu this week?",
        "Show upcoming events",
    ],
)
def test_aggregate_rules(classifier, query):
    assert classifier.classify(query).category == QueryCategory.AGGREGATE


@pytest.mark.parametrize("query", ["Where is the parking lot?", "", "   ", "???"])
def test_unmatched_defaults_to_safe(classifier, query):
    result = classifier.classify(query)
    assert result.category == QueryCategory.SAFE
    assert result.risk_level == RiskLevel.MINIMAL
    assert result.data_categories == ()
    assert result.rule_name is None


def test_greeting_does_not_match_inside_words(classifier):
    result = classifier.classify("this is where his shoes go")
    assert result.rule_name != "greeting"


# ==========================================
#  NAME HEURISTIC
# ==========================================


@pytest.mark.parametrize(
    "query",
    ["Show me Sofia's report", "Tell me about Luca at lunch", "Giulia's attendance last month"],
)
def test_name_reference_is_blocked(classifier, query):
    result = classifier.classify(query)
    assert result.category == QueryCategory.BLOCKED
    assert result.blocked_reason == NAME_REFERENCE_REASON
    assert result.rule_name == "name_reference"


@pytest.mark.parametrize(
    "query", ["Show me the calendar please", "Where is the Monday meeting?", "tell me about lunch"]
)
def test_capitalized_common_words_are_not_names(classifier, query):
    assert classifier.classify(query).category == QueryCategory.SAFE


# ==========================================
#  RULE ENGINE
# ==========================================


def test_first_match_wins():
    first = safe_outcome("first")
    second = safe_outcome("second")
    classifier = QueryClassifier(
        rules=[Rule("first", lambda t: "x" in t, first), Rule("second", lambda t: True, second)]
    )
    assert classifier.classify("x marks").rule_name == "first"
    assert classifier.classify("nothing").rule_name == "second"


def test_failing_predicate_fails_closed():
    def broken(text):
        raise RuntimeError("boom")

    classifier = QueryClassifier(rules=[Rule("broken", broken, safe_outcome("broken"))])
    result = classifier.classify("What are the daycare hours?")
    assert result.category == QueryCategory.BLOCKED
    assert result.risk_level == RiskLevel.PROHIBITED
    assert result.blocked_reason == CLASSIFICATION_FAILED_REASON


def test_default_rule_order():
    names = [rule.name for rule in build_default_rules()]
    assert names.index("child_health") < names.index("opening_hours")
    assert names.index("holidays") < names.index("presence_count")
    assert names[-1] == "name_reference"


# ==========================================
#  LOCALIZATION
# ==========================================


def test_localize_order_english(classifier):
    result = classifier.classify("Which child has allergies?")
    message = classifier.localize(result, "en")
    parts = BLOCKED_PARTS["en"]

    prefix_at = message.index(parts["prefix"])
    reason_at = message.index("Reason: Query requests individual child health/medical information")
    alternative_at = message.index("💡 Alternative: For allergy information")
    contact_at = message.index(parts["contact"])
    assert prefix_at == 0
    assert prefix_at < reason_at < alternative_at < contact_at


def test_localize_italian_translates_reason(classifier):
    result = classifier.classify("Which child has allergies?")
    message = classifier.localize(result, "it")
    assert message.startswith(BLOCKED_PARTS["it"]["prefix"])
    assert "Motivo: La richiesta riguarda informazioni sanitarie individuali del bambino" in message
    assert message.endswith(BLOCKED_PARTS["it"]["contact"])


def test_localize_unknown_reason_is_verbatim(classifier):
    blocked = QueryClassification(
        category=QueryCategory.BLOCKED,
        risk_level=RiskLevel.PROHIBITED,
        blocked_reason="Some brand new reason",
    )
    message = classifier.localize(blocked, "it")
    assert "Motivo: Some brand new reason" in message
    assert "Alternativa" not in message


def test_localize_unknown_language_uses_default(classifier):
    result = classifier.classify("Which child has allergies?")
    assert classifier.localize(result, "fr") == classifier.localize(result, "en")


def test_suggested_queries_localized(classifier):
    english = classifier.suggested_queries("en")
    italian = classifier.suggested_queries("it")
    assert len(english) == len(italian) == len(classifier.safe_queries())
    assert "What are the daycare hours?" in english
    assert "Quali sono gli orari dell'asilo?" in italian


def test_suggested_queries_are_not_blocked(classifier):
    for query in classifier.suggested_queries("en"):
        assert not classifier.classify(query).is_blocked
