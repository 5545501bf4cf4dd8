"""Tag balance check: stack discipline over the scanner's token stream."""

from __future__ import annotations

from economy.validator.models import Diagnostic, OpenTagFrame, Severity, TagKind, TagToken


def check_balance(tokens: list[TagToken]) -> list[Diagnostic]:
    """Verify every opening tag is closed in proper nesting order.

    A mismatched closing tag still pops the stack so that one misplaced tag
    does not cascade into an error for every tag after it.
    """
    issues: list[Diagnostic] = []
    stack: list[OpenTagFrame] = []

    for token in tokens:
        if not token.name:
            continue
        if token.kind == TagKind.opening:
            stack.append(OpenTagFrame(name=token.name, line=token.line))
            continue
        if token.kind == TagKind.self_closing:
            continue

        if not stack:
            issues.append(
                Diagnostic(
                    severity=Severity.error,
                    check_name="balance",
                    message=(
                        f"ERROR: Closing tag </{token.name}> at line {token.line} "
                        f"has no matching opening tag."
                    ),
                    line=token.line,
                    context=token.name,
                )
            )
            continue

        frame = stack.pop()
        if frame.name != token.name:
            issues.append(
                Diagnostic(
                    severity=Severity.error,
                    check_name="balance",
                    message=(
                        f"ERROR: Mismatched tags at line {token.line}: expected "
                        f"</{frame.name}> (opened at line {frame.line}) but found "
                        f"</{token.name}>."
                    ),
                    line=token.line,
                    context=frame.name,
                )
            )

    for frame in stack:
        issues.append(
            Diagnostic(
                severity=Severity.error,
                check_name="balance",
                message=(
                    f"ERROR: Tag <{frame.name}> opened at line {frame.line} is unclosed: "
                    f"no matching </{frame.name}> was found."
                ),
                line=frame.line,
                context=frame.name,
            )
        )

    return issues
