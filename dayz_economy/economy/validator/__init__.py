"""Well-formedness validation pipeline for economy XML files."""

from economy.validator.models import Diagnostic, Severity, ValidationResult
from economy.validator.pipeline import parse_document, validate
from economy.validator.siblings import SiblingRule, register_rule

__all__ = [
    "Diagnostic",
    "Severity",
    "SiblingRule",
    "ValidationResult",
    "parse_document",
    "register_rule",
    "validate",
]
