import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import pandas as pd
import pymupdf

from ..config import Settings
from ..utils.logger import setup_logger
from ...utils.error_handler import (
    PDFProcessingError,
    UnrecognizedFormatError,
    ValidationError,
)
from .dispatcher import STRATEGIES, rank_strategies, select_strategy
from .models import ExamEntry

settings = Settings()

CSV_COLUMNS = ["crn", "combined_crns", "date", "start_time", "end_time", "location"]


@dataclass
class ParseResult:
    strategy: str
    entries: List[ExamEntry] = field(default_factory=list)
    term: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.entries)


def entries_to_frame(entries: List[ExamEntry]) -> pd.DataFrame:
    """Tabular view of exam entries, one row per CRN."""
    rows = [{
        "crn": entry.crn,
        "combined_crns": "-".join(str(crn) for crn in entry.combined_crns),
        "date": entry.date.isoformat(),
        "start_time": entry.start_time,
        "end_time": entry.end_time,
        "location": entry.location,
    } for entry in entries]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


class FinalsProcessor:
    def __init__(self,
                 reference_year: Optional[int] = None,
                 allow_fallback: Optional[bool] = None,
                 monitoring=None):
        self.reference_year = reference_year if reference_year is not None else settings.REFERENCE_YEAR
        self.allow_fallback = settings.ALLOW_FORMAT_FALLBACK if allow_fallback is None else allow_fallback
        self.monitoring = monitoring
        self.logger = setup_logger("finals_processor")

    def parse_text(self, text: str, term: Optional[str] = None, source: str = "text") -> ParseResult:
        """
        Detect the schedule layout and reconstruct its exam entries.

        Args:
            text (str): Layout-preserving text of the finals schedule
            term (str): Scheduling term the caller will file the entries under
            source (str): Name used in logs and metrics

        Returns:
            ParseResult: Chosen strategy name and the parsed entries

        Raises:
            ValidationError: if the text is missing or not a string
            UnrecognizedFormatError: if no strategy accepts the text
        """
        if not isinstance(text, str):
            raise ValidationError("Schedule text must be a string")
        if not text.strip():
            raise ValidationError("Schedule text is required")

        options = {"reference_year": self.reference_year}
        try:
            strategy = select_strategy(text, **options)
            entries = strategy.parse(text)
        except UnrecognizedFormatError:
            if not self.allow_fallback:
                raise
            strategy, entries = rank_strategies(text, **options)
            if strategy is None:
                raise UnrecognizedFormatError(tried=[s.name for s in STRATEGIES])
            self.logger.warning(f"Unknown finals format in {source}; falling back to "
                                f"{strategy.name} ({len(entries)} entries)")

        self.logger.info(f"Finals schedule parser for {source}: {strategy.name}, {len(entries)} entries")
        if self.monitoring is not None:
            self.monitoring.log_extraction_metrics(source, strategy.name, len(entries))

        return ParseResult(strategy=strategy.name, entries=entries, term=term)

    def process_finals_files(self,
                             task_id: str,
                             file_metadata: List[dict],
                             processing_tasks: dict) -> None:
        """
        Process uploaded schedule files and update task status
        """
        started = time.monotonic()
        try:
            processing_tasks[task_id] = {"status": "processing", "progress": 0}
            self.logger.info(f"Starting processing task {task_id}")

            results = []
            all_entries: List[ExamEntry] = []
            total_files = len(file_metadata)

            for index, metadata in enumerate(file_metadata, 1):
                processing_tasks[task_id]["progress"] = (index / total_files) * 100
                file_path = metadata['file_path']

                try:
                    self.logger.info(f"Processing file {index}/{total_files}: {metadata}")
                    text = self.extract_text(file_path)
                    parsed = self.parse_text(text, term=metadata.get('term'), source=Path(file_path).name)
                    all_entries.extend(parsed.entries)
                    results.append({
                        "file": Path(file_path).name,
                        "strategy": parsed.strategy,
                        "total": parsed.total,
                    })
                except (PDFProcessingError, ValidationError, UnrecognizedFormatError) as e:
                    self.logger.error(f"Error processing file {file_path}: {str(e)}")
                    results.append({
                        "file": Path(file_path).name,
                        "error": str(e)
                    })

            if all_entries:
                self._save_to_csv(all_entries, task_id)

            processing_tasks[task_id].update({
                "status": "completed",
                "progress": 100,
                "result": {"files": results, "total": len(all_entries)}
            })

            self._cleanup_files([m['file_path'] for m in file_metadata])

        except Exception as e:
            self.logger.error(f"Task {task_id} failed: {str(e)}")
            processing_tasks[task_id].update({
                "status": "failed",
                "error": str(e)
            })
        finally:
            duration = time.monotonic() - started
            processing_tasks[task_id]["duration"] = duration
            if self.monitoring is not None:
                self.monitoring.log_task_completion(
                    task_id, processing_tasks[task_id]["status"] == "completed", duration)

    def extract_text(self, file_path) -> str:
        """
        Return the layout-ordered text of a schedule file.

        PDFs are read page by page with PyMuPDF; anything else is read as
        UTF-8 text.
        """
        path = Path(file_path)
        if path.suffix.lower() != ".pdf":
            try:
                return path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise ValidationError(f"{path.name} is neither a PDF nor UTF-8 text") from e

        try:
            doc = pymupdf.open(path)
        except Exception as e:
            raise PDFProcessingError(f"Could not open {path.name}: {str(e)}") from e

        try:
            pages = []
            for page_num in range(len(doc)):
                self.logger.info(f"Reading page {page_num + 1} of {len(doc)}")
                pages.append(doc[page_num].get_text("text"))
        finally:
            doc.close()

        return "\n".join(pages)

    def csv_path(self, task_id: str) -> Path:
        return settings.DOWNLOAD_DIR / task_id / f"{task_id}-{settings.FINAL_EXAMS_FILENAME}"

    def _save_to_csv(self, entries: List[ExamEntry], task_id: str) -> Path:
        output_path = self.csv_path(task_id)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        entries_to_frame(entries).to_csv(output_path, index=False)
        self.logger.info(f"Saved {len(entries)} entries to {output_path}")
        return output_path

    def _cleanup_files(self, file_paths: List[str]) -> None:
        """
        Clean up uploaded files after processing
        """
        for file_path in file_paths:
            try:
                Path(file_path).unlink()
                self.logger.debug(f"Cleaned up file: {file_path}")
            except OSError as e:
                self.logger.error(f"Error cleaning up file {file_path}: {str(e)}")

        if not file_paths:
            return
        parent_dir = Path(file_paths[0]).parent
        try:
            if parent_dir.exists() and not any(parent_dir.iterdir()):
                parent_dir.rmdir()
                self.logger.debug(f"Removed empty directory: {parent_dir}")
        except OSError as e:
            self.logger.error(f"Error removing directory: {str(e)}")
