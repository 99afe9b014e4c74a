# finals_backend/app/api/models.py
import datetime
from pydantic import BaseModel
from typing import Optional, Dict, Any, List

from ..core.extractors import location_rooms
from ..core.models import ExamEntry


class ExamEntryModel(BaseModel):
    crn: int
    combined_crns: List[int]
    date: datetime.date
    start_time: int
    end_time: int
    location: Optional[str] = None
    rooms: List[str] = []

    @classmethod
    def from_entry(cls, entry: ExamEntry) -> "ExamEntryModel":
        return cls(
            crn=entry.crn,
            combined_crns=list(entry.combined_crns),
            date=entry.date,
            start_time=entry.start_time,
            end_time=entry.end_time,
            location=entry.location,
            rooms=location_rooms(entry.location),
        )


class ParseRequest(BaseModel):
    text: str
    term: Optional[str] = None


class ParseResponse(BaseModel):
    strategy: str
    term: Optional[str] = None
    total: int
    entries: List[ExamEntryModel]


class ProcessingResponse(BaseModel):
    task_id: str
    status: str


class ProcessingStatus(BaseModel):
    status: str
    progress: Optional[float] = 0
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
