"""Validator settings: loaded from the options file or environment."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_MAX_INPUT_CHARS = 64 * 1024 * 1024


class ValidatorSettings(BaseModel):
    """Tunable knobs for the well-formedness validator."""

    ampersand_severity: Literal["error", "warning"] = Field(
        "error", description="Severity for a bare '&' in text content"
    )
    stray_text_min_length: int = Field(
        10, ge=0, description="Stray text this short or shorter is ignored"
    )
    excerpt_length: int = Field(
        100, ge=1, description="Max characters of stray text quoted in a message"
    )
    max_input_chars: int = Field(
        DEFAULT_MAX_INPUT_CHARS, ge=0, description="Reject larger input; 0 disables the limit"
    )


def load_settings() -> ValidatorSettings:
    """Load settings from /data/options.json or env fallback."""
    opts_path = os.environ.get("ECONOMY_OPTIONS_PATH", "/data/options.json")
    if Path(opts_path).exists():
        return ValidatorSettings.model_validate(json.loads(Path(opts_path).read_text()))
    return ValidatorSettings(
        ampersand_severity=os.environ.get("AMPERSAND_SEVERITY", "error"),
        stray_text_min_length=int(os.environ.get("STRAY_TEXT_MIN_LENGTH", "10")),
        excerpt_length=int(os.environ.get("EXCERPT_LENGTH", "100")),
        max_input_chars=int(os.environ.get("MAX_INPUT_CHARS", str(DEFAULT_MAX_INPUT_CHARS))),
    )
