import pytest
from pathlib import Path

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

LAYOUT_FIXTURES = {
    "fall_2025.txt": "column_block",
    "spring_2026.txt": "named_section",
    "spring_2025.txt": "anchor_scan",
    "fall_2024.txt": "anchor_scan",
    "summer_2025.txt": "anchor_scan",
}


def read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def fixture_text():
    """Return a loader for the extracted-text fixtures."""
    return read_fixture


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Point upload/download directories at a temporary folder."""
    from finals_backend.app.core import finals_processor
    from finals_backend.app import main

    downloads = tmp_path / "downloads"
    uploads = tmp_path / "uploads"
    downloads.mkdir()
    uploads.mkdir()
    monkeypatch.setattr(finals_processor.settings, "DOWNLOAD_DIR", downloads)
    monkeypatch.setattr(main.settings, "UPLOAD_DIR", uploads)
    return tmp_path
