"""Ordered rule tables for the query classifier.

Order matters: blocked rules first, then safe, then aggregate, then the
name-reference heuristic. The first matching rule wins and later, more
specific rules are never consulted.
"""

import re
from collections.abc import Callable

from ai_gateway.config.constants import (
    AGGREGATE_STATISTICS,
    INDIVIDUAL_CHILD_DATA,
    QueryCategory,
    RiskLevel,
)
from ai_gateway.services.classifier.models import QueryClassification, Rule, SafeQuery

# =============================================================================
# Blocked: individually identifiable child data (name, pattern, reason, alternative)
# =============================================================================

BLOCKED_PATTERNS: list[tuple[str, str, str, str]] = [
    (
        "child_health",
        r"\b(which|what|who)\s+(child|children|kid|kids)\s+(has|have|had|need|needs)\s+(allerg|medication|special need|disabilit)",
        "Query requests individual child health/medical information",
        "For allergy information, please check directly with your child's teacher or the administration.",
    ),
    (
        "child_contact",
        r"\b(show|list|get|display)\s+(me\s+)?(child|children|kid|kids)('s|s')?\s+(emergency|contact|parent|guardian)",
        "Query requests individual child contact information",
        "Contact information is available in the parent portal under your child's profile.",
    ),
    (
        "child_activity",
        r"\b(what|how)\s+(did|does|is|was)\s+(\w+)\s+(eat|do|behave|perform|sleep|nap)",
        "Query requests individual child activity/behavior data",
        "Daily activity reports for your child are available in the Activities section.",
    ),
    (
        "incident",
        r"\b(incident|accident|injury|hurt)\s+(report|for|about)",
        "Query requests sensitive incident information",
        "Incident reports are confidential. Please contact administration directly.",
    ),
    (
        "care_routine",
        r"\b(diaper|toilet|potty)\s+(change|training|need)",
        "Query requests individual child care information",
        "Care schedules are managed by teachers. Check your child's daily report.",
    ),
    (
        "profiling",
        r"\b(analyze|assess|evaluate|compare|rank)\s+(child|children|kid|kids|student|students)",
        "Query attempts to profile or compare children",
        "Child assessments are not available through AI. Please speak with teachers directly.",
    ),
    (
        "child_photos",
        r"\b(photo|picture|image)s?\s+(of|with|showing)\s+(child|children|kid|kids)",
        "Query requests child photos",
        "Photos are available in the Gallery section with appropriate permissions.",
    ),
    (
        "roster_grouping",
        r"\bchild(ren)?('s)?\s+(by|grouped by|sorted by|list by)\s+(age|group|class)",
        "Query requests child categorization data",
        "Class rosters are available to teachers in the Classes section.",
    ),
    (
        "medication",
        r"\b(medication|medicine|drug)\s+(given|administered|schedule)",
        "Query requests medication information",
        "Medication records are confidential. Contact administration for this information.",
    ),
    (
        "staff_schedule",
        r"\bstaff\s+schedule",
        "Query requests staff personal schedule data",
        "Staff schedules are internal. Contact administration for staffing questions.",
    ),
]

# =============================================================================
# Safe: informational / operational, no data access (name, pattern)
# =============================================================================

SAFE_PATTERNS: list[tuple[str, str]] = [
    ("opening_hours", r"\b(daycare|nursery|school)\s+(hour|hours|time|schedule|open|close)"),
    ("how_to", r"\b(how|what)\s+(do|can|to)\s+(i|we)\s+(request|submit|make|enroll|register|pay)"),
    ("fee_process", r"\b(fee|payment)\s+(structure|process|method|how)"),
    ("documents", r"\b(document|paper|form)s?\s+(need|required|necessary)"),
    ("contact_staff", r"\b(contact|reach|call|email)\s+(admin|support|teacher|staff)"),
    ("policies", r"\b(policy|policies|rule|rules|guideline)"),
    ("greeting", r"\b(hello|hi|hey|ciao|buongiorno|grazie|thanks?)\b"),
    ("help", r"\b(help|assist|support)\s+(me|with)"),
    ("about_app", r"\b(what is|explain|tell me about)\s+(miniminds|the app|this app)"),
    ("translation", r"\b(translate|translation)"),
    ("holidays", r"\b(holiday|vacation|closure|closed)"),
]

# =============================================================================
# Aggregate: statistics and summaries (name, pattern)
# =============================================================================

AGGREGATE_PATTERNS: list[tuple[str, str]] = [
    (
        "presence_count",
        r"\b(how many|count|total|number of)\s+(child|children|kid|kids|student|students)\s+((are|were|is)\s+)?(present|absent|today|enrolled)",
    ),
    ("attendance_rate", r"\b(attendance)\s+(rate|percentage|summary|overview)"),
    ("fee_summary", r"\b(fee|payment)\s+(summary|total|overview|report)"),
    ("menu", r"\b(menu|meal)\s+(this week|today|tomorrow|weekly)"),
    ("upcoming_events", r"\b(upcoming|scheduled|next)\s+(event|events|activity|activities)"),
]

# =============================================================================
# Name-reference heuristic
# =============================================================================

NAME_REFERENCE_REASON = "Query appears to reference a specific child"
NAME_REFERENCE_ALTERNATIVE = (
    "For information about your child, please check the Activities or Profile section directly."
)

# The name group is case-sensitive; the surrounding words are not.
_NAME_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?i:\b(?:what|how|where|when)\s+(?:did|does|is|was|has)\s+)(?P<name>[A-Z][a-z]+)\s"),
    re.compile(r"(?i:\b(?:show|tell|get)\s+(?:me\s+)?(?:about\s+)?)(?P<name>[A-Z][a-z]+)(?:'s)?\s"),
    re.compile(r"\b(?P<name>[A-Z][a-z]+)(?:'s)?\s+(?i:activity|attendance|meal|nap|report)"),
]

# Capitalized words that commonly open a sentence or name a section, not a person.
_NON_NAME_WORDS = frozenset({
    "The", "This", "That", "These", "Those", "My", "Our", "Your", "His", "Her", "Their",
    "Today", "Tomorrow", "Yesterday", "Daily", "Weekly", "Monthly", "Yearly", "Last", "Next",
    "What", "How", "Where", "When", "Which", "Who", "Show", "Tell", "Get", "Me", "About",
    "Is", "Was", "Does", "Did", "Has", "It", "There", "A", "An", "All", "Any", "Class",
    "MiniMinds", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
})


def pattern_predicate(pattern: str) -> Callable[[str], bool]:
    """Compile *pattern* case-insensitively into a text -> bool predicate."""
    compiled = re.compile(pattern, re.IGNORECASE)
    return lambda text: compiled.search(text) is not None


def contains_child_name(text: str) -> bool:
    """True when a capitalized, name-like token sits next to an activity/status word."""
    for pattern in _NAME_PATTERNS:
        for match in pattern.finditer(text):
            if match.group("name") not in _NON_NAME_WORDS:
                return True
    return False


def blocked_outcome(reason: str, alternative: str | None, rule_name: str | None) -> QueryClassification:
    return QueryClassification(
        category=QueryCategory.BLOCKED,
        risk_level=RiskLevel.PROHIBITED,
        requires_consent=False,
        requires_human_review=True,
        blocked_reason=reason,
        data_categories=(),
        suggested_alternative=alternative,
        blocked_categories=(INDIVIDUAL_CHILD_DATA,),
        rule_name=rule_name,
    )


def safe_outcome(rule_name: str | None = None) -> QueryClassification:
    return QueryClassification(
        category=QueryCategory.SAFE,
        risk_level=RiskLevel.MINIMAL,
        rule_name=rule_name,
    )


def aggregate_outcome(rule_name: str) -> QueryClassification:
    return QueryClassification(
        category=QueryCategory.AGGREGATE,
        risk_level=RiskLevel.LOW,
        data_categories=(AGGREGATE_STATISTICS,),
        rule_name=rule_name,
    )


def build_default_rules() -> list[Rule]:
    """Assemble the rule list in evaluation order."""
    rules: list[Rule] = []
    for name, pattern, reason, alternative in BLOCKED_PATTERNS:
        rules.append(
            Rule(name, pattern_predicate(pattern), blocked_outcome(reason, alternative, name))
        )
    for name, pattern in SAFE_PATTERNS:
        rules.append(Rule(name, pattern_predicate(pattern), safe_outcome(name)))
    for name, pattern in AGGREGATE_PATTERNS:
        rules.append(Rule(name, pattern_predicate(pattern), aggregate_outcome(name)))
    rules.append(
        Rule(
            "name_reference",
            contains_child_name,
            blocked_outcome(NAME_REFERENCE_REASON, NAME_REFERENCE_ALTERNATIVE, "name_reference"),
            use_raw_text=True,
        )
    )
    return rules


SAFE_QUERIES: list[SafeQuery] = [
    SafeQuery(
        query="What are the daycare hours?",
        query_it="Quali sono gli orari dell'asilo?",
        category=QueryCategory.SAFE,
        description="Get information about opening and closing times",
        description_it="Informazioni sugli orari di apertura e chiusura",
    ),
    SafeQuery(
        query="How do I request leave for my child?",
        query_it="Come posso richiedere un permesso per mio figlio?",
        category=QueryCategory.SAFE,
        description="Learn how to submit absence requests",
        description_it="Scopri come inviare richieste di assenza",
    ),
    SafeQuery(
        query="Explain the fee payment process",
        query_it="Spiega il processo di pagamento delle rette",
        category=QueryCategory.SAFE,
        description="Understand how to pay daycare fees",
        description_it="Capire come pagare le rette",
    ),
    SafeQuery(
        query="What's on the menu this week?",
        query_it="Cosa c'è nel menu di questa settimana?",
        category=QueryCategory.AGGREGATE,
        description="View the weekly meal plan",
        description_it="Visualizza il menu settimanale",
    ),
    SafeQuery(
        query="How do I update my contact information?",
        query_it="Come aggiorno i miei dati di contatto?",
        category=QueryCategory.SAFE,
        description="Learn how to edit your profile",
        description_it="Scopri come modificare il tuo profilo",
    ),
    SafeQuery(
        query="What documents do I need for enrollment?",
        query_it="Quali documenti servono per l'iscrizione?",
        category=QueryCategory.SAFE,
        description="Get the enrollment requirements checklist",
        description_it="Ottieni la lista dei documenti per l'iscrizione",
    ),
    SafeQuery(
        query="Show upcoming events",
        query_it="Mostra i prossimi eventi",
        category=QueryCategory.AGGREGATE,
        description="See scheduled activities and events",
        description_it="Visualizza le attività e gli eventi programmati",
    ),
    SafeQuery(
        query="How many children are present today?",
        query_it="Quanti bambini sono presenti oggi?",
        category=QueryCategory.AGGREGATE,
        description="Get today's attendance count",
        description_it="Ottieni il conteggio delle presenze di oggi",
    ),
    SafeQuery(
        query="What are the holiday closures?",
        query_it="Quali sono i giorni di chiusura festiva?",
        category=QueryCategory.SAFE,
        description="View scheduled holidays",
        description_it="Visualizza le festività programmate",
    ),
    SafeQuery(
        query="Help me write a parent announcement",
        query_it="Aiutami a scrivere un annuncio per i genitori",
        category=QueryCategory.SAFE,
        description="Get help drafting communications",
        description_it="Ottieni aiuto per redigere comunicazioni",
    ),
]
