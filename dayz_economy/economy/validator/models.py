"""Validation data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Severity level for validation diagnostics."""

    critical = "critical"
    error = "error"
    warning = "warning"


BLOCKING_SEVERITIES = {Severity.critical, Severity.error}


class Diagnostic(BaseModel):
    """A single validation finding."""

    severity: Severity
    check_name: str
    message: str
    line: int | None = None
    context: str | None = None
    suggestion: str | None = None


class ValidationResult(BaseModel):
    """Aggregated result from the validation pipeline."""

    valid: bool = True
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    document_kind: str = "unknown"
    document: dict[str, Any] | None = None

    @property
    def has_critical(self) -> bool:
        return any(d.severity == Severity.critical for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity in BLOCKING_SEVERITIES]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.warning]

    @property
    def messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    def summary(self) -> dict[str, int]:
        """Count diagnostics per severity."""
        counts = {s.value: 0 for s in Severity}
        for d in self.diagnostics:
            counts[d.severity.value] += 1
        return counts


# ---------------------------------------------------------------------------
# Transient scan structures (never leave a single validate() call)
# ---------------------------------------------------------------------------

class TagKind(str, Enum):
    opening = "opening"
    closing = "closing"
    self_closing = "self_closing"


@dataclass
class TagToken:
    """One tag-like construct found by the scanner."""

    kind: TagKind
    name: str
    line: int
    raw_attributes: str = ""
    offset: int = 0
    leading_space: bool = False


@dataclass
class OpenTagFrame:
    """Stack entry for an opening tag that has not been closed yet."""

    name: str
    line: int


@dataclass
class CommentRegion:
    line: int
    body: str
    closed: bool = True


@dataclass
class Declaration:
    """An ``<?xml ...?>`` declaration and where it appeared."""

    line: int
    raw_attributes: str
    is_first: bool = True


@dataclass
class TextSegment:
    """Character data between two constructs, with its element nesting depth."""

    offset: int
    line: int
    content: str
    depth: int = 0
    cdata: bool = False


@dataclass
class ScanResult:
    tokens: list[TagToken] = field(default_factory=list)
    comments: list[CommentRegion] = field(default_factory=list)
    declarations: list[Declaration] = field(default_factory=list)
    texts: list[TextSegment] = field(default_factory=list)
    critical: Diagnostic | None = None
