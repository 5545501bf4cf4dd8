"""Duplicate sibling detection: schema-aware, keyed by document kind.

The structural parser accepts a repeated single-value tag such as two
``<max>`` inside one ``<event>`` and silently keeps only the last one.
That is not a well-formedness error, but it loses data without telling
anyone, so it is reported here.

Rules are registered per document kind with ``register_rule``; a kind
with no rules gets no duplicate-sibling checking.
"""

from __future__ import annotations

from dataclasses import dataclass

from economy.validator.models import Diagnostic, Severity, TagKind, TagToken
from economy.validator.scanner import attribute_value


@dataclass(frozen=True)
class SiblingRule:
    """Tags that must appear at most once inside each *element*.

    Tracking is suspended inside *grouping* (e.g. ``<children>``), where
    the same tag legitimately repeats once per child.
    """

    kind: str
    element: str
    tags: frozenset[str]
    grouping: str | None = None


_RULES: dict[str, list[SiblingRule]] = {}


def register_rule(rule: SiblingRule) -> None:
    _RULES.setdefault(rule.kind, []).append(rule)


def rules_for(kind: str) -> list[SiblingRule]:
    return list(_RULES.get(kind, ()))


register_rule(
    SiblingRule(
        kind="events",
        element="event",
        grouping="children",
        tags=frozenset({
            "nominal",
            "min",
            "max",
            "lifetime",
            "restock",
            "saferadius",
            "distanceradius",
            "cleanupradius",
            "flags",
            "position",
            "limit",
            "active",
        }),
    )
)

register_rule(
    SiblingRule(
        kind="types",
        element="type",
        tags=frozenset({
            "nominal",
            "lifetime",
            "restock",
            "min",
            "quantmin",
            "quantmax",
            "cost",
            "flags",
            "category",
        }),
    )
)


def _check_rule(tokens: list[TagToken], rule: SiblingRule) -> list[Diagnostic]:
    issues: list[Diagnostic] = []
    depth = 0
    active = False
    element_depth = 0
    grouping_open = 0
    owner = "unknown"
    seen: dict[str, int] = {}

    for token in tokens:
        opening = token.kind == TagKind.opening

        if token.kind == TagKind.closing:
            depth = max(depth - 1, 0)
            if not active:
                continue
            if grouping_open and token.name == rule.grouping:
                grouping_open -= 1
            elif depth <= element_depth:
                active = False
                seen = {}
            continue

        if token.name == rule.element and not grouping_open:
            # A new element starts a fresh set; a self-closing one has no children
            active = opening
            element_depth = depth
            owner = attribute_value(token, "name") or "unknown"
            seen = {}
        elif active and token.name == rule.grouping:
            if opening:
                grouping_open += 1
        elif active and not grouping_open and token.name in rule.tags:
            first = seen.get(token.name)
            if first is None:
                seen[token.name] = token.line
            else:
                issues.append(
                    Diagnostic(
                        severity=Severity.error,
                        check_name="siblings",
                        message=(
                            f'ERROR: <{rule.element}> "{owner}" has a duplicate '
                            f"<{token.name}> tag at line {token.line} (first at line "
                            f"{first}). The parser silently keeps only the last value."
                        ),
                        line=token.line,
                        context=owner,
                        suggestion=f"Remove one of the <{token.name}> tags",
                    )
                )

        if opening:
            depth += 1

    return issues


def check_duplicate_siblings(
    tokens: list[TagToken], rules: list[SiblingRule]
) -> list[Diagnostic]:
    """Run every rule over the token stream."""
    issues: list[Diagnostic] = []
    for rule in rules:
        issues.extend(_check_rule(tokens, rule))
    return issues
