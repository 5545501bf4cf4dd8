"""Tests for the HTTP validation endpoints."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from economy.main import app


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ECONOMY_OPTIONS_PATH", str(tmp_path / "missing.json"))
    monkeypatch.delenv("AMPERSAND_SEVERITY", raising=False)
    with TestClient(app) as c:
        yield c


def test_validate_valid_file(client: TestClient, load_fixture) -> None:
    resp = client.post(
        "/api/validate",
        json={"content": load_fixture("valid_events.xml"), "filename": "events.xml"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["valid"] is True
    assert data["document_kind"] == "events"
    assert data["diagnostics"] == []
    assert data["summary"] == {"critical": 0, "error": 0, "warning": 0}


def test_validate_reports_diagnostics(client: TestClient, load_fixture) -> None:
    resp = client.post(
        "/api/validate",
        json={"content": load_fixture("invalid_duplicate_tags.xml")},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["valid"] is False
    assert data["summary"]["error"] == 1
    diag = data["diagnostics"][0]
    assert diag["severity"] == "error"
    assert diag["check_name"] == "siblings"
    assert diag["line"] == 6


def test_validate_empty_content(client: TestClient) -> None:
    resp = client.post("/api/validate", json={"content": ""})
    assert resp.status_code == 200
    assert resp.json()["summary"]["critical"] == 1


def test_validate_missing_content(client: TestClient) -> None:
    resp = client.post("/api/validate", json={"filename": "types.xml"})
    assert resp.status_code == 422


def test_parse_returns_document(client: TestClient) -> None:
    resp = client.post(
        "/api/parse",
        json={"content": '<?xml version="1.0"?>\n<types><type name="AKM"/></types>'},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["document_kind"] == "types"
    assert data["document"] == {"types": {"type": {"@_name": "AKM"}}}
    assert len(data["warnings"]) == 1


def test_parse_rejects_invalid(client: TestClient) -> None:
    resp = client.post("/api/parse", json={"content": "<types><type id=5/></types>"})
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["error"] == "Failed to parse XML"
    assert any("Malformed attribute 'id'" in m for m in detail["details"])
