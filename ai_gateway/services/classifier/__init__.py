"""Query classification module."""

from ai_gateway.services.classifier.classifier import QueryClassifier
from ai_gateway.services.classifier.models import QueryClassification, Rule, SafeQuery

__all__ = ["QueryClassification", "QueryClassifier", "Rule", "SafeQuery"]
