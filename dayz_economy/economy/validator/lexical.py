"""Lexical rules: tag names, attributes, entities and stray text."""

from __future__ import annotations

import re

from economy.config import ValidatorSettings
from economy.validator.models import Diagnostic, ScanResult, Severity, TagKind, TagToken, TextSegment
from economy.validator.scanner import ATTRIBUTE_RE, is_quoted, parse_attributes, scan

_TAG_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*\Z")

# Named entities plus numeric character references
_BARE_AMPERSAND_RE = re.compile(r"&(?!(?:amp|lt|gt|quot|apos);|#[0-9]+;|#x[0-9A-Fa-f]+;)")

_WORD_RE = re.compile(r"[A-Za-z]{3}")


# ---------------------------------------------------------------------------
# Tag-level rules
# ---------------------------------------------------------------------------

def check_tag_names(tokens: list[TagToken]) -> list[Diagnostic]:
    """Validate element names, and the shape of closing tags."""
    issues: list[Diagnostic] = []

    for token in tokens:
        name = token.name
        if token.kind == TagKind.closing:
            if token.leading_space or not name:
                reason = (
                    "whitespace is not allowed between '</' and the tag name"
                    if token.leading_space else "the closing tag has no name"
                )
                message = f"ERROR: Invalid closing tag at line {token.line}: {reason}."
            elif token.raw_attributes.strip():
                message = (
                    f"ERROR: Invalid closing tag </{name}> at line {token.line}: "
                    f"closing tags cannot carry attributes."
                )
            else:
                # Names were already checked on the opening tag
                continue
        elif token.leading_space or not name:
            reason = (
                "whitespace is not allowed between '<' and the tag name"
                if token.leading_space else "the tag has no name"
            )
            message = f"ERROR: Invalid tag name at line {token.line}: {reason}."
        elif name.endswith("-"):
            message = (
                f"ERROR: Invalid tag name '<{name}>' at line {token.line}: tag names "
                f"must not end with a hyphen."
            )
        elif not _TAG_NAME_RE.match(name):
            message = (
                f"ERROR: Invalid tag name '<{name}>' at line {token.line}: tag names "
                f"must start with a letter or underscore and contain only letters, "
                f"digits, hyphens, underscores or periods."
            )
        else:
            continue
        issues.append(
            Diagnostic(
                severity=Severity.error,
                check_name="lexical",
                message=message,
                line=token.line,
                context=name,
            )
        )

    return issues


def check_attributes(tokens: list[TagToken]) -> list[Diagnostic]:
    """Flag unquoted values, non name=value text and duplicate attribute names."""
    issues: list[Diagnostic] = []

    for token in tokens:
        raw = token.raw_attributes
        if token.kind == TagKind.closing or not raw.strip():
            continue

        seen: set[str] = set()
        reported: set[str] = set()
        for name, value in parse_attributes(raw):
            if not is_quoted(value):
                bare = value.strip("\"'")
                issues.append(
                    Diagnostic(
                        severity=Severity.error,
                        check_name="lexical",
                        message=(
                            f"ERROR: Malformed attribute '{name}' in <{token.name}> at "
                            f"line {token.line}: attribute values must be enclosed in "
                            f"matching quotes."
                        ),
                        line=token.line,
                        context=f"{name}={value}",
                        suggestion=f'{name}="{bare}"',
                    )
                )
            if name in seen and name not in reported:
                reported.add(name)
                issues.append(
                    Diagnostic(
                        severity=Severity.error,
                        check_name="lexical",
                        message=(
                            f"ERROR: Duplicate attribute '{name}' in <{token.name}> at "
                            f"line {token.line}."
                        ),
                        line=token.line,
                        context=name,
                    )
                )
            seen.add(name)

        leftover = ATTRIBUTE_RE.sub(" ", raw).strip()
        if leftover:
            issues.append(
                Diagnostic(
                    severity=Severity.error,
                    check_name="lexical",
                    message=(
                        f"ERROR: Malformed attribute '{leftover[:40]}' in <{token.name}> "
                        f"at line {token.line}: expected name=\"value\" pairs with "
                        f"values in quotes."
                    ),
                    line=token.line,
                    context=leftover[:40],
                )
            )

    return issues


# ---------------------------------------------------------------------------
# Text content rules
# ---------------------------------------------------------------------------

def check_ampersands(
    texts: list[TextSegment], severity: Severity = Severity.error
) -> list[Diagnostic]:
    """Report '&' in text content that does not start an entity reference."""
    issues: list[Diagnostic] = []
    label = severity.value.upper()

    for segment in texts:
        if segment.cdata:
            continue
        for match in _BARE_AMPERSAND_RE.finditer(segment.content):
            line = segment.line + segment.content.count("\n", 0, match.start())
            issues.append(
                Diagnostic(
                    severity=severity,
                    check_name="lexical",
                    message=(
                        f"{label}: Unescaped ampersand at line {line}: write '&' as "
                        f"&amp; in text content."
                    ),
                    line=line,
                    context=segment.content[match.start():match.start() + 20].split("\n", 1)[0],
                    suggestion="Replace '&' with '&amp;'",
                )
            )

    return issues


def check_stray_text(
    texts: list[TextSegment], min_length: int = 10, excerpt_length: int = 100
) -> list[Diagnostic]:
    """Report text sitting outside every element.

    Short runs and runs without at least three consecutive letters are
    ignored; they are mostly numeric leftovers of broken constructs.
    """
    issues: list[Diagnostic] = []

    for segment in texts:
        if segment.depth or segment.cdata:
            continue
        stripped = segment.content.strip()
        if len(stripped) <= min_length or not _WORD_RE.search(stripped):
            continue

        lead = len(segment.content) - len(segment.content.lstrip())
        line = segment.line + segment.content.count("\n", 0, lead)
        excerpt = stripped[:excerpt_length]
        if len(stripped) > excerpt_length:
            excerpt += "..."
        issues.append(
            Diagnostic(
                severity=Severity.error,
                check_name="lexical",
                message=(
                    f"ERROR: Found invalid text content outside of tags at line "
                    f"{line}: '{excerpt}'"
                ),
                line=line,
                context=excerpt,
            )
        )

    return issues


def outside_text(text: str) -> str:
    """Return what is left of *text* once every element, comment and
    declaration is removed: the concatenated top-level character data.

    Applying this to its own output returns the output unchanged.
    """
    result = scan(text)
    return "".join(s.content for s in result.texts if not s.depth and not s.cdata)


def check_lexical(scan_result: ScanResult, settings: ValidatorSettings) -> list[Diagnostic]:
    return (
        check_tag_names(scan_result.tokens)
        + check_attributes(scan_result.tokens)
        + check_ampersands(scan_result.texts, Severity(settings.ampersand_severity))
        + check_stray_text(
            scan_result.texts, settings.stray_text_min_length, settings.excerpt_length
        )
    )
