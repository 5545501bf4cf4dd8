"""Tag scanner: one forward pass that turns raw XML text into tag tokens.

Comments, CDATA sections, the XML declaration, other processing
instructions and DOCTYPE blocks are recognised here, so no later pass
ever sees their contents as tags or as text.  Every other check consumes
the resulting ``ScanResult`` instead of re-scanning the raw text.
"""

from __future__ import annotations

import bisect
import re

from economy.validator.models import (
    CommentRegion,
    Declaration,
    Diagnostic,
    ScanResult,
    Severity,
    TagKind,
    TagToken,
    TextSegment,
)

BOM = "\ufeff"

# Quoted attribute values may contain '>' but never '<'.
_TAG_RE = re.compile(r"""<[^<>"']*(?:(?:"[^"<]*"|'[^'<]*')[^<>"']*)*>""")
# Fallback for unbalanced quotes: the lexical pass reports those attributes.
_LOOSE_TAG_RE = re.compile(r"<[^<>]*>")
_NAME_RE = re.compile(r"[^\s/>]*")
_XML_DECL_RE = re.compile(r"<\?xml(?=[\s?])", re.IGNORECASE)

ATTRIBUTE_RE = re.compile(r"""([^\s=/"']+)\s*=\s*("[^"]*"|'[^']*'|\S*)""")


class _LineIndex:
    """Maps character offsets to 1-based line numbers."""

    def __init__(self, text: str) -> None:
        self._newlines = [m.start() for m in re.finditer("\n", text)]

    def line_of(self, offset: int) -> int:
        return bisect.bisect_left(self._newlines, offset) + 1


def parse_attributes(raw: str) -> list[tuple[str, str]]:
    """Split a tag's raw attribute text into (name, raw_value) pairs.

    Values keep their quotes so callers can tell quoted from unquoted.
    """
    return [(m.group(1), m.group(2)) for m in ATTRIBUTE_RE.finditer(raw)]


def is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] in "\"'" and value[-1] == value[0]


def attribute_value(token: TagToken, name: str) -> str | None:
    """Return the unquoted value of attribute *name*, or None if absent."""
    for attr_name, value in parse_attributes(token.raw_attributes):
        if attr_name == name:
            return value[1:-1] if is_quoted(value) else value
    return None


def _snippet(text: str, start: int, width: int = 40) -> str:
    return text[start:start + width].split("\n", 1)[0]


def _incomplete(what: str, line: int, context: str) -> Diagnostic:
    return Diagnostic(
        severity=Severity.critical,
        check_name="scanner",
        message=(
            f"CRITICAL: Incomplete {what} at line {line}: '{context}' is never "
            f"terminated (unclosed {what})."
        ),
        line=line,
        context=context,
    )


def _make_token(inner: str, line: int, offset: int) -> TagToken:
    """Build a token from the text between '<' and '>'."""
    kind = TagKind.opening
    if inner.startswith("/"):
        kind = TagKind.closing
        inner = inner[1:]
    elif inner.rstrip().endswith("/"):
        kind = TagKind.self_closing
        inner = inner.rstrip()[:-1]

    body = inner.lstrip()
    name = _NAME_RE.match(body).group()
    return TagToken(
        kind=kind,
        name=name,
        line=line,
        raw_attributes=body[len(name):],
        offset=offset,
        leading_space=len(body) != len(inner),
    )


def scan(text: str) -> ScanResult:
    """Tokenize *text* into tags, comments, declarations and text segments.

    Stops at the first construct that is never terminated and records a
    critical diagnostic, since nothing after it can be tokenized reliably.
    An unterminated comment is the exception: it swallows the rest of the
    input and is left for the comment checker to report.
    """
    result = ScanResult()
    lines = _LineIndex(text)
    start = 1 if text.startswith(BOM) else 0
    length = len(text)
    depth = 0
    pos = start

    while True:
        lt = text.find("<", pos)
        text_end = lt if lt != -1 else length
        if text_end > pos:
            result.texts.append(
                TextSegment(
                    offset=pos,
                    line=lines.line_of(pos),
                    content=text[pos:text_end],
                    depth=depth,
                )
            )
        if lt == -1:
            break

        line = lines.line_of(lt)

        if text.startswith("<!--", lt):
            close = text.find("-->", lt + 4)
            if close == -1:
                result.comments.append(
                    CommentRegion(line=line, body=text[lt + 4:], closed=False)
                )
                break
            result.comments.append(CommentRegion(line=line, body=text[lt + 4:close]))
            pos = close + 3

        elif text.startswith("<![CDATA[", lt):
            close = text.find("]]>", lt + 9)
            if close == -1:
                result.critical = _incomplete("CDATA section", line, _snippet(text, lt))
                break
            result.texts.append(
                TextSegment(
                    offset=lt + 9,
                    line=line,
                    content=text[lt + 9:close],
                    depth=depth,
                    cdata=True,
                )
            )
            pos = close + 3

        elif text.startswith("<?", lt):
            close = text.find("?>", lt + 2)
            if close == -1:
                result.critical = _incomplete(
                    "processing instruction", line, _snippet(text, lt)
                )
                break
            if _XML_DECL_RE.match(text, lt):
                result.declarations.append(
                    Declaration(
                        line=line,
                        raw_attributes=text[lt + 5:close],
                        is_first=lt == start,
                    )
                )
            pos = close + 2

        elif text.startswith("<!", lt):
            # DOCTYPE and friends, including an internal [ ... ] subset
            gt = text.find(">", lt)
            bracket = text.find("[", lt, gt if gt != -1 else length)
            if bracket != -1:
                subset_end = text.find("]", bracket)
                gt = text.find(">", subset_end) if subset_end != -1 else -1
            if gt == -1:
                result.critical = _incomplete("markup declaration", line, _snippet(text, lt))
                break
            pos = gt + 1

        else:
            match = _TAG_RE.match(text, lt) or _LOOSE_TAG_RE.match(text, lt)
            if match is None:
                result.critical = _incomplete("tag", line, _snippet(text, lt))
                break
            token = _make_token(match.group()[1:-1], line, lt)
            result.tokens.append(token)
            if token.kind == TagKind.opening:
                depth += 1
            elif token.kind == TagKind.closing:
                depth = max(depth - 1, 0)
            pos = match.end()

    return result
