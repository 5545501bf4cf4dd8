"""Comment block, XML declaration and encoding checks."""

from __future__ import annotations

import re

from economy.validator.models import Diagnostic, ScanResult, Severity
from economy.validator.scanner import BOM

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"

_PSEUDO_ATTR_RE = re.compile(r"""([A-Za-z_][\w.:-]*)\s*=\s*(["'])(.*?)\2""")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")
UTF8_NAMES = {"utf-8", "utf8"}


def _stray_terminators(scan: ScanResult) -> int:
    # Inside an element '-->' is ordinary character data
    return sum(
        segment.content.count(COMMENT_CLOSE)
        for segment in scan.texts
        if not segment.depth and not segment.cdata
    )


def check_comment_blocks(scan: ScanResult) -> list[Diagnostic]:
    """Check comment open/close balance and forbidden '--' inside comments.

    Counts come from the scanned comment regions, so markers inside CDATA,
    attribute values or element text are never mistaken for comments.
    """
    issues: list[Diagnostic] = []

    opened = len(scan.comments)
    closed = sum(1 for c in scan.comments if c.closed) + _stray_terminators(scan)
    if opened != closed:
        issues.append(
            Diagnostic(
                severity=Severity.error,
                check_name="comments",
                message=(
                    f"ERROR: Mismatched comment blocks: found {opened} '{COMMENT_OPEN}' "
                    f"but {closed} '{COMMENT_CLOSE}'. A comment is unclosed or has a "
                    f"stray terminator."
                ),
                context=f"{opened} opened / {closed} closed",
            )
        )
    else:
        # Counts can balance while the last comment still runs to end of input
        for comment in scan.comments:
            if not comment.closed:
                issues.append(
                    Diagnostic(
                        severity=Severity.error,
                        check_name="comments",
                        message=(
                            f"ERROR: Unclosed comment starting at line {comment.line}: "
                            f"missing '{COMMENT_CLOSE}'."
                        ),
                        line=comment.line,
                    )
                )

    for comment in scan.comments:
        if not comment.closed:
            continue
        body = comment.body.rstrip("-")
        idx = body.find("--")
        if idx == -1:
            continue
        line = comment.line + body.count("\n", 0, idx)
        issues.append(
            Diagnostic(
                severity=Severity.error,
                check_name="comments",
                message=(
                    f"ERROR: Invalid comment content at line {line}: '--' is not "
                    f"allowed inside a comment."
                ),
                line=line,
                suggestion="Replace '--' with a single hyphen or another separator",
            )
        )

    return issues


def declared_attributes(raw: str) -> dict[str, str]:
    return {m.group(1): m.group(3) for m in _PSEUDO_ATTR_RE.finditer(raw)}


def check_declaration(scan: ScanResult) -> list[Diagnostic]:
    """Check placement and required attributes of ``<?xml ...?>``."""
    issues: list[Diagnostic] = []

    for i, decl in enumerate(scan.declarations):
        if i > 0:
            issues.append(
                Diagnostic(
                    severity=Severity.warning,
                    check_name="comments",
                    message=(
                        f"WARNING: Extra XML declaration at line {decl.line}; only one "
                        f"is allowed and strict parsers will reject it."
                    ),
                    line=decl.line,
                )
            )
            continue

        if not decl.is_first:
            issues.append(
                Diagnostic(
                    severity=Severity.warning,
                    check_name="comments",
                    message=(
                        f"WARNING: XML declaration at line {decl.line} should be the "
                        f"very first thing in the file."
                    ),
                    line=decl.line,
                )
            )

        attrs = declared_attributes(decl.raw_attributes)
        if "version" not in attrs:
            issues.append(
                Diagnostic(
                    severity=Severity.error,
                    check_name="comments",
                    message=(
                        f"ERROR: XML declaration at line {decl.line} is missing the "
                        f"required version attribute."
                    ),
                    line=decl.line,
                    suggestion='<?xml version="1.0" encoding="UTF-8"?>',
                )
            )
        if "encoding" not in attrs:
            issues.append(
                Diagnostic(
                    severity=Severity.warning,
                    check_name="comments",
                    message=(
                        f"WARNING: XML declaration at line {decl.line} has no encoding "
                        f"attribute."
                    ),
                    line=decl.line,
                    suggestion='Add encoding="UTF-8"',
                )
            )

    return issues


def check_encoding(text: str, scan: ScanResult) -> list[Diagnostic]:
    """Warn when non-ASCII content is not backed by a UTF-8 declaration."""
    match = _NON_ASCII_RE.search(text, 1 if text.startswith(BOM) else 0)
    if match is None:
        return []

    declared = None
    if scan.declarations:
        declared = declared_attributes(scan.declarations[0].raw_attributes).get("encoding")
    if declared is not None and declared.lower() in UTF8_NAMES:
        return []

    line = text.count("\n", 0, match.start()) + 1
    reason = (
        f"the declared encoding is '{declared}'" if declared
        else "no UTF-8 encoding is declared"
    )
    return [
        Diagnostic(
            severity=Severity.warning,
            check_name="comments",
            message=(
                f"WARNING: Non-ASCII character at line {line} but {reason}; "
                f"the file may be read with the wrong encoding."
            ),
            line=line,
            context=match.group(),
            suggestion='Save the file as UTF-8 and declare encoding="UTF-8"',
        )
    ]


def check_comments_and_declaration(text: str, scan: ScanResult) -> list[Diagnostic]:
    return check_comment_blocks(scan) + check_declaration(scan) + check_encoding(text, scan)
