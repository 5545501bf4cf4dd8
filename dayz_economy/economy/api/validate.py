"""POST /api/validate and POST /api/parse endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from economy.config import ValidatorSettings
from economy.deps import get_settings
from economy.validator import Diagnostic, parse_document, validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["validate"])


class ValidateRequest(BaseModel):
    """Request body for POST /api/validate and POST /api/parse."""

    content: str = Field(..., description="Raw text of the XML file")
    filename: str | None = Field(
        None, description="Original file name, used to detect the file kind"
    )


class ValidateResponse(BaseModel):
    """Response body for POST /api/validate."""

    valid: bool
    document_kind: str = "unknown"
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    summary: dict[str, int] = Field(default_factory=dict)


class ParseResponse(BaseModel):
    """Response body for POST /api/parse."""

    success: bool = True
    document_kind: str = "unknown"
    document: dict[str, Any] | None = None
    warnings: list[Diagnostic] = Field(default_factory=list)


@router.post("/validate", response_model=ValidateResponse)
def validate_file(
    body: ValidateRequest,
    settings: ValidatorSettings = Depends(get_settings),
) -> ValidateResponse:
    """Check an XML file for well-formedness and return every diagnostic."""
    result = validate(body.content, body.filename, settings)
    if not result.valid:
        logger.info(
            "Validation failed for %s: %d diagnostics",
            body.filename or "<upload>",
            len(result.diagnostics),
        )
    return ValidateResponse(
        valid=result.valid,
        document_kind=result.document_kind,
        diagnostics=result.diagnostics,
        summary=result.summary(),
    )


@router.post("/parse", response_model=ParseResponse)
def parse_file(
    body: ValidateRequest,
    settings: ValidatorSettings = Depends(get_settings),
) -> ParseResponse:
    """Validate and parse an XML file; 400 with the diagnostics if it is unusable."""
    result = parse_document(body.content, body.filename, settings)
    if not result.valid:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Failed to parse XML",
                "details": [d.message for d in result.errors],
            },
        )
    return ParseResponse(
        document_kind=result.document_kind,
        document=result.document,
        warnings=result.warnings,
    )
