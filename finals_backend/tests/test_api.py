"""
Tests for the HTTP endpoints
"""
import pytest
from fastapi.testclient import TestClient

from finals_backend.app import main


@pytest.fixture
def client(isolated_dirs):
    main.processing_tasks.clear()
    with TestClient(main.app) as test_client:
        yield test_client
    main.processing_tasks.clear()


class TestParseEndpoint:
    def test_parses_text(self, client):
        response = client.post("/api/finals/parse", json={
            "text": "FINAL DAY\n27975\n27975-27976\nWednesday, Dec 10, 2025\n10:15AM-12:15PM\nWENTW 212\n",
            "term": "202610",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["strategy"] == "anchor_scan"
        assert body["term"] == "202610"
        assert body["total"] == 2
        first = body["entries"][0]
        assert first["crn"] == 27975
        assert first["combined_crns"] == [27975, 27976]
        assert first["date"] == "2025-12-10"
        assert first["start_time"] == 1015
        assert first["rooms"] == ["WENTW 212"]

    def test_blank_text(self, client):
        response = client.post("/api/finals/parse", json={"text": "  "})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unrecognized_format(self, client):
        response = client.post("/api/finals/parse", json={"text": "Welcome to the registrar's office"})

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "UNRECOGNIZED_FORMAT"
        assert body["type"] == "UnrecognizedFormatError"


class TestProcessEndpoint:
    def test_upload_status_and_download(self, client, fixture_text):
        response = client.post(
            "/api/finals/process",
            files={"file": ("fall_2024.txt", fixture_text("fall_2024.txt").encode(), "text/plain")},
            data={"term": "202510"},
        )
        assert response.status_code == 200
        task_id = response.json()["task_id"]

        status = client.get(f"/api/status/{task_id}").json()
        assert status["status"] == "completed"
        assert status["result"]["total"] == 3

        download = client.get(f"/api/download/{task_id}")
        assert download.status_code == 200
        assert download.headers["content-type"].startswith("text/csv")
        lines = download.text.strip().splitlines()
        assert lines[0] == "crn,combined_crns,date,start_time,end_time,location"
        assert lines[1].startswith("30001,30001-30002,2024-12-09,1015,1215")

    def test_empty_upload(self, client):
        response = client.post(
            "/api/finals/process",
            files={"file": ("empty.pdf", b"", "application/pdf")},
            data={"term": "202510"},
        )
        assert response.status_code == 400

    def test_oversized_upload(self, client, monkeypatch):
        monkeypatch.setattr(main.settings, "MAX_FILE_SIZE", 10)
        response = client.post(
            "/api/finals/process",
            files={"file": ("big.txt", b"x" * 11, "text/plain")},
            data={"term": "202510"},
        )
        assert response.status_code == 413


def test_unknown_task_status(client):
    assert client.get("/api/status/missing").json()["status"] == "not_found"


def test_unknown_task_download(client):
    assert client.get("/api/download/missing").status_code == 404


def test_download_before_completion(client):
    main.processing_tasks["pending"] = {"status": "processing", "progress": 0}
    assert client.get("/api/download/pending").status_code == 400


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] in ("healthy", "unhealthy")
    assert "timestamp" in body
