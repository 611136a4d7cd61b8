"""
User-facing messages for the AI gateway, keyed by language.
"""

DEFAULT_LANGUAGE = "it"

# =============================================================================
# Blocked Response Parts
# =============================================================================

BLOCKED_PARTS: dict[str, dict[str, str]] = {
    "en": {
        "prefix": "🔒 I cannot process this request.",
        "reason": "Reason: {reason}",
        "alternative": "💡 Alternative: {alternative}",
        "contact": (
            "👤 For assistance, please contact the daycare administration directly "
            "or speak with your child's teacher."
        ),
    },
    "it": {
        "prefix": "🔒 Non posso elaborare questa richiesta.",
        "reason": "Motivo: {reason}",
        "alternative": "💡 Alternativa: {alternative}",
        "contact": (
            "👤 Per assistenza, contatta direttamente l'amministrazione dell'asilo "
            "o parla con l'educatore di tuo figlio."
        ),
    },
}

# English reason/alternative texts are the canonical keys.
REASON_TRANSLATIONS: dict[str, dict[str, str]] = {
    "it": {
        "Query requests individual child health/medical information": "La richiesta riguarda informazioni sanitarie individuali del bambino",
        "Query requests individual child contact information": "La richiesta riguarda informazioni di contatto individuali",
        "Query requests individual child activity/behavior data": "La richiesta riguarda dati di attività/comportamento individuali",
        "Query requests sensitive incident information": "La richiesta riguarda informazioni sensibili sugli incidenti",
        "Query requests individual child care information": "La richiesta riguarda informazioni di cura individuali",
        "Query attempts to profile or compare children": "La richiesta tenta di profilare o confrontare i bambini",
        "Query requests child photos": "La richiesta riguarda foto dei bambini",
        "Query requests child categorization data": "La richiesta riguarda dati di categorizzazione dei bambini",
        "Query requests medication information": "La richiesta riguarda informazioni sui farmaci",
        "Query requests staff personal schedule data": "La richiesta riguarda dati personali del personale",
        "Query appears to reference a specific child": "La richiesta sembra riferirsi a un bambino specifico",
        "Query could not be classified safely": "Non è stato possibile classificare la richiesta in modo sicuro",
    },
}

ALTERNATIVE_TRANSLATIONS: dict[str, dict[str, str]] = {
    "it": {
        "For allergy information, please check directly with your child's teacher or the administration.":
            "Per informazioni sulle allergie, contatta direttamente l'educatore di tuo figlio o l'amministrazione.",
        "Contact information is available in the parent portal under your child's profile.":
            "Le informazioni di contatto sono disponibili nel portale genitori sotto il profilo di tuo figlio.",
        "Daily activity reports for your child are available in the Activities section.":
            "I report giornalieri delle attività di tuo figlio sono disponibili nella sezione Attività.",
        "Incident reports are confidential. Please contact administration directly.":
            "I report degli incidenti sono riservati. Contatta direttamente l'amministrazione.",
        "Care schedules are managed by teachers. Check your child's daily report.":
            "Gli orari di cura sono gestiti dagli educatori. Controlla il report giornaliero di tuo figlio.",
        "Child assessments are not available through AI. Please speak with teachers directly.":
            "Le valutazioni dei bambini non sono disponibili tramite AI. Parla direttamente con gli educatori.",
        "Photos are available in the Gallery section with appropriate permissions.":
            "Le foto sono disponibili nella sezione Galleria con le appropriate autorizzazioni.",
        "Class rosters are available to teachers in the Classes section.":
            "Gli elenchi delle classi sono disponibili per gli educatori nella sezione Classi.",
        "Medication records are confidential. Contact administration for this information.":
            "I registri dei farmaci sono riservati. Contatta l'amministrazione per queste informazioni.",
        "Staff schedules are internal. Contact administration for staffing questions.":
            "Gli orari del personale sono interni. Contatta l'amministrazione per domande sul personale.",
        "For information about your child, please check the Activities or Profile section directly.":
            "Per informazioni su tuo figlio, controlla direttamente la sezione Attività o Profilo.",
    },
}

# =============================================================================
# Conversational Messages
# =============================================================================

CONVERSATION_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "welcome": (
            "Hi! I'm your MiniMinds AI assistant. I can help you with general daycare "
            "information, schedules, procedures, and FAQs. For children's privacy, I cannot "
            "access individual data - for this information, please check the app sections "
            "directly or contact the teachers."
        ),
        "disclosure": (
            "🤖 AI Assistant | You are interacting with an artificial intelligence system. "
            "This AI cannot access individual child data. For personal assistance, contact "
            "the daycare administration."
        ),
        "greeting": "Hello! How can I help you with your daycare today?",
        "thanks": "You're welcome! Is there anything else I can help you with?",
        "farewell": "Goodbye! Have a great day at the daycare!",
        "responder_error": "Sorry, I encountered an error processing your request. Please try again.",
        "escalation_recorded": "Your request has been recorded. An operator will contact you soon.",
        "escalation_submitted": (
            "✅ Your assistance request has been submitted.\n\n"
            "📧 Email: {email}\n📞 Phone: {phone}\n\n"
            "An operator will contact you as soon as possible."
        ),
        "escalation_default_reason": "User requested human assistance",
    },
    "it": {
        "welcome": (
            "Ciao! Sono il tuo assistente AI per MiniMinds. Posso aiutarti con informazioni "
            "generali sull'asilo, orari, procedure e domande frequenti. Per la privacy dei "
            "bambini, non posso accedere a dati individuali - per queste informazioni, consulta "
            "direttamente le sezioni dell'app o contatta gli educatori."
        ),
        "disclosure": (
            "🤖 Assistente AI | Stai interagendo con un sistema di intelligenza artificiale. "
            "Questa AI non può accedere ai dati individuali dei bambini. Per assistenza "
            "personale, contatta l'amministrazione dell'asilo."
        ),
        "greeting": "Ciao! Come posso aiutarti con l'asilo oggi?",
        "thanks": "Prego! C'è qualcos'altro in cui posso aiutarti?",
        "farewell": "Arrivederci! Buona giornata all'asilo!",
        "responder_error": "Mi dispiace, si è verificato un errore. Riprova più tardi.",
        "escalation_recorded": "La tua richiesta è stata registrata. Un operatore ti contatterà presto.",
        "escalation_submitted": (
            "✅ La tua richiesta di assistenza è stata inviata.\n\n"
            "📧 Email: {email}\n📞 Telefono: {phone}\n\n"
            "Un operatore ti contatterà il prima possibile."
        ),
        "escalation_default_reason": "L'utente ha richiesto assistenza umana",
    },
}

# =============================================================================
# Helper Functions
# =============================================================================


def resolve_language(language: str | None, default: str = DEFAULT_LANGUAGE) -> str:
    """Return a supported language code, falling back to *default*."""
    if language:
        primary = language.split("-")[0].lower()
        if primary in CONVERSATION_MESSAGES:
            return primary
    return default if default in CONVERSATION_MESSAGES else DEFAULT_LANGUAGE


def get_message(key: str, language: str | None = None, **kwargs: str) -> str:
    """Get a conversational message by key and language."""
    lang = resolve_language(language)
    template = CONVERSATION_MESSAGES[lang].get(key) or CONVERSATION_MESSAGES["en"].get(key, "")
    return template.format(**kwargs) if kwargs else template


def translate_reason(reason: str, language: str) -> str:
    """Translate a blocked reason; unknown text is returned verbatim."""
    return REASON_TRANSLATIONS.get(language, {}).get(reason, reason)


def translate_alternative(alternative: str, language: str) -> str:
    """Translate a suggested alternative; unknown text is returned verbatim."""
    return ALTERNATIVE_TRANSLATIONS.get(language, {}).get(alternative, alternative)
