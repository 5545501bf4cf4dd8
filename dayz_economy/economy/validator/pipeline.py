"""Validation pipeline: orchestrates all checks in sequence."""

from __future__ import annotations

import logging

from economy.config import ValidatorSettings
from economy.validator.balance import check_balance
from economy.validator.comments import check_comments_and_declaration
from economy.validator.doctype import detect_document_kind
from economy.validator.lexical import check_lexical
from economy.validator.models import BLOCKING_SEVERITIES, Diagnostic, Severity, ValidationResult
from economy.validator.scanner import scan
from economy.validator.siblings import check_duplicate_siblings, rules_for
from economy.validator.structural import StructuralParseError, element_to_dict, parse_xml

logger = logging.getLogger(__name__)


def _fatal(check_name: str, message: str, line: int | None = None) -> ValidationResult:
    return ValidationResult(
        valid=False,
        diagnostics=[
            Diagnostic(
                severity=Severity.critical,
                check_name=check_name,
                message=message,
                line=line,
            )
        ],
    )


def _by_line(issues: list[Diagnostic]) -> list[Diagnostic]:
    return sorted(issues, key=lambda d: d.line or 0)


def _run_checks(text: str, filename: str | None, settings: ValidatorSettings) -> ValidationResult:
    # Step 0: nothing sensible can be checked
    if not text or not text.strip():
        return _fatal("input", "CRITICAL: File is empty or contains only whitespace.")
    if settings.max_input_chars and len(text) > settings.max_input_chars:
        return _fatal(
            "input",
            f"CRITICAL: File is too large to validate ({len(text)} characters, "
            f"limit is {settings.max_input_chars}).",
        )
    if "<" not in text:
        return _fatal(
            "input",
            "CRITICAL: No XML tags found; the file does not appear to contain XML.",
        )

    # Step 1: tokenize; later passes need a complete token stream
    scan_result = scan(text)
    if scan_result.critical is not None:
        return ValidationResult(valid=False, diagnostics=[scan_result.critical])

    kind = detect_document_kind(scan_result.tokens, filename)

    # Step 2: independent passes, all of them run
    passes = [
        check_comments_and_declaration(text, scan_result),
        check_balance(scan_result.tokens),
        check_lexical(scan_result, settings),
        check_duplicate_siblings(scan_result.tokens, rules_for(kind)),
    ]

    # Step 3: aggregate in pass order
    diagnostics: list[Diagnostic] = []
    for issues in passes:
        diagnostics.extend(_by_line(issues))
    valid = not any(d.severity in BLOCKING_SEVERITIES for d in diagnostics)

    logger.debug(
        "Validated %d chars as %s: %d tags, %d diagnostics, valid=%s",
        len(text),
        kind,
        len(scan_result.tokens),
        len(diagnostics),
        valid,
    )
    return ValidationResult(valid=valid, diagnostics=diagnostics, document_kind=kind)


def validate(
    text: str,
    filename: str | None = None,
    settings: ValidatorSettings | None = None,
) -> ValidationResult:
    """Run the full well-formedness pipeline on raw XML text.

    Order: scan, then comments and declaration, balance, lexical and
    duplicate siblings.  Empty input, missing tags and an unterminated
    construct during the scan return immediately with a single critical
    diagnostic.  Malformed input never raises.
    """
    settings = settings or ValidatorSettings()
    try:
        return _run_checks(text, filename, settings)
    except Exception as e:
        logger.error("Validator failed unexpectedly: %s", e, exc_info=True)
        return _fatal("internal", f"CRITICAL: Internal validator error: {e}")


def parse_document(
    text: str,
    filename: str | None = None,
    settings: ValidatorSettings | None = None,
) -> ValidationResult:
    """Validate, then hand the text to the structural parser.

    The parser only runs when validation passed.  If it still rejects the
    document, its message becomes one more critical diagnostic.
    """
    result = validate(text, filename, settings)
    if not result.valid:
        return result

    try:
        root = parse_xml(text)
    except StructuralParseError as e:
        logger.warning("Parser rejected a document that passed validation: %s", e)
        result.diagnostics.append(
            Diagnostic(
                severity=Severity.critical,
                check_name="parser",
                message=f"CRITICAL: XML parser rejected input: {e}",
                line=e.line,
            )
        )
        result.valid = False
        return result

    result.document = element_to_dict(root)
    return result
