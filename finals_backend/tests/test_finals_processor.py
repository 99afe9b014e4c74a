"""
Tests for the finals processor (text/PDF ingestion, CSV export, task status)
"""
from datetime import date
from unittest.mock import MagicMock

import pandas as pd
import pymupdf
import pytest

from finals_backend.app.core import FinalsProcessor, ParseResult, entries_to_frame
from finals_backend.app.core.models import ExamEntry
from finals_backend.utils.error_handler import (
    PDFProcessingError,
    UnrecognizedFormatError,
    ValidationError,
)

HEADERLESS_TEXT = "30050\nTuesday, December 10, 2024\n0800-1000\nBEATT 401\n"
PDF_TEXT = "FINAL DAY FINAL TIME FINAL LOCATION\n30050\nTuesday, December 10, 2024\n0800-1000\nBEATT 401"


@pytest.fixture
def processor():
    return FinalsProcessor(reference_year=2025, allow_fallback=False)


def make_pdf(path, text):
    doc = pymupdf.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    doc.save(str(path))
    doc.close()
    return path


class TestParseText:
    def test_detects_layout(self, processor, fixture_text):
        result = processor.parse_text(fixture_text("spring_2025.txt"), term="202520")

        assert isinstance(result, ParseResult)
        assert result.strategy == "anchor_scan"
        assert result.term == "202520"
        assert result.total == 3

    @pytest.mark.parametrize("text", ["", "   \n", None, 42])
    def test_rejects_missing_text(self, processor, text):
        with pytest.raises(ValidationError):
            processor.parse_text(text)

    def test_unknown_format_is_fatal_by_default(self, processor):
        with pytest.raises(UnrecognizedFormatError):
            processor.parse_text(HEADERLESS_TEXT)

    def test_fallback_picks_most_productive_strategy(self):
        processor = FinalsProcessor(allow_fallback=True)
        result = processor.parse_text(HEADERLESS_TEXT)

        assert [e.crn for e in result.entries] == [30050]

    def test_fallback_still_raises_when_nothing_parses(self):
        processor = FinalsProcessor(allow_fallback=True)
        with pytest.raises(UnrecognizedFormatError):
            processor.parse_text("nothing to see here")

    def test_reports_metrics(self, fixture_text):
        monitoring = MagicMock()
        processor = FinalsProcessor(monitoring=monitoring)
        processor.parse_text(fixture_text("fall_2025.txt"), source="fall.pdf")

        monitoring.log_extraction_metrics.assert_called_once_with("fall.pdf", "column_block", 6)


def test_entries_to_frame():
    entries = [ExamEntry(crn=27975, combined_crns=(27975, 27976), date=date(2025, 12, 10),
                         start_time=1015, end_time=1215, location="WENTW 212")]
    frame = entries_to_frame(entries)

    assert list(frame.columns) == ["crn", "combined_crns", "date", "start_time", "end_time", "location"]
    assert frame.iloc[0]["combined_crns"] == "27975-27976"
    assert frame.iloc[0]["date"] == "2025-12-10"
    assert entries_to_frame([]).empty


class TestExtractText:
    def test_reads_plain_text(self, processor, tmp_path):
        path = tmp_path / "schedule.txt"
        path.write_text("30050\n", encoding="utf-8")
        assert processor.extract_text(path) == "30050\n"

    def test_rejects_binary_non_pdf(self, processor, tmp_path):
        path = tmp_path / "schedule.bin"
        path.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(ValidationError):
            processor.extract_text(path)

    def test_reads_pdf_pages(self, processor, tmp_path):
        path = make_pdf(tmp_path / "schedule.pdf", PDF_TEXT)
        text = processor.extract_text(path)

        assert "30050" in text
        assert "BEATT 401" in text

    def test_corrupted_pdf(self, processor, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf")
        with pytest.raises(PDFProcessingError):
            processor.extract_text(path)


class TestProcessFinalsFiles:
    def test_completed_task_writes_csv(self, processor, isolated_dirs, fixture_text):
        upload = isolated_dirs / "uploads" / "spring_2025.txt"
        upload.write_text(fixture_text("spring_2025.txt"), encoding="utf-8")
        tasks = {}

        processor.process_finals_files("task-1", [{"file_path": str(upload), "term": "202520"}], tasks)

        assert tasks["task-1"]["status"] == "completed"
        assert tasks["task-1"]["progress"] == 100
        assert tasks["task-1"]["result"]["total"] == 3
        assert tasks["task-1"]["result"]["files"][0]["strategy"] == "anchor_scan"
        assert tasks["task-1"]["duration"] >= 0
        assert not upload.exists()

        frame = pd.read_csv(processor.csv_path("task-1"))
        assert list(frame["crn"]) == [27975, 27976, 30101]
        assert frame.iloc[2]["location"] == "WENTW 212"

    def test_pdf_upload(self, processor, isolated_dirs):
        upload = make_pdf(isolated_dirs / "uploads" / "fall.pdf", PDF_TEXT)
        tasks = {}

        processor.process_finals_files("task-pdf", [{"file_path": str(upload)}], tasks)

        assert tasks["task-pdf"]["status"] == "completed"
        assert tasks["task-pdf"]["result"]["total"] == 1

    def test_file_errors_are_reported_per_file(self, processor, isolated_dirs):
        broken = isolated_dirs / "uploads" / "broken.pdf"
        broken.write_bytes(b"this is not a pdf")
        tasks = {}

        processor.process_finals_files("task-2", [{"file_path": str(broken)}], tasks)

        assert tasks["task-2"]["status"] == "completed"
        assert tasks["task-2"]["result"]["total"] == 0
        assert "error" in tasks["task-2"]["result"]["files"][0]
        assert not processor.csv_path("task-2").exists()

    def test_unexpected_failure_marks_task_failed(self, processor, isolated_dirs):
        monitoring = MagicMock()
        processor.monitoring = monitoring
        tasks = {}

        processor.process_finals_files("task-3", [{"term": "202520"}], tasks)

        assert tasks["task-3"]["status"] == "failed"
        assert "file_path" in tasks["task-3"]["error"]
        monitoring.log_task_completion.assert_called_once()
        assert monitoring.log_task_completion.call_args[0][:2] == ("task-3", False)
