"""Shared test fixtures and configuration."""

import os
import sys
from pathlib import Path

# Add dayz_economy/ to Python path so `from economy.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "dayz_economy"))

import pytest

os.environ["ECONOMY_DEV_MODE"] = "true"

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def load_fixture(fixtures_dir: Path):
    def _load(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")

    return _load
