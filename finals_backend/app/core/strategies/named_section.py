import logging
import re
from enum import Enum
from typing import List, Optional, Tuple

from ..constants import CRN_RE, MIN_CRN
from ..extractors import (
    extract_date,
    extract_location,
    extract_time_range,
    is_no_exam_marker,
    preprocess,
)
from ..models import ExamEntry, unique_by_crn
from .base import resolve_reference_year

logger = logging.getLogger(__name__)

INSTRUCTOR_HEADER_RE = re.compile(r"^[ \t]*INSTRUCTOR[ \t]*$", re.M)
EXAM_DATE_HEADER_RE = re.compile(r"^[ \t]*EXAM-DATE[ \t]*$", re.M)


class Section(Enum):
    NONE = "none"
    CRN = "crn"
    EXAM_DATE = "exam_date"
    EXAM_TIME = "exam_time"
    EXAM_ROOM = "exam_room"


SECTION_HEADERS = {
    "CRN": Section.CRN,
    "INSTRUCTOR": Section.NONE,
    "EXAM-DATE": Section.EXAM_DATE,
    "EXAM-TIME-OF-DAY": Section.EXAM_TIME,
    "EXAM-ROOM": Section.EXAM_ROOM,
}


class NamedSectionStrategy:
    """
    Layout with explicit column headers repeated on every page.

    Body lines under ``CRN``/``EXAM-DATE``/``EXAM-TIME-OF-DAY``/``EXAM-ROOM``
    are collected into one list per column. CRN and date lists have the same
    length; a date slot may be a no-exam marker (ONLINE, SEE FACULTY, ...),
    in which case the course has no time or room and the shorter time/room
    lists are not advanced for it.
    """

    name = "named_section"

    def __init__(self, default_year: Optional[int] = None, reference_year: Optional[int] = None):
        self.default_year = default_year
        self.reference_year = reference_year

    @classmethod
    def matches(cls, text: str) -> bool:
        return bool(INSTRUCTOR_HEADER_RE.search(text) and EXAM_DATE_HEADER_RE.search(text))

    def parse(self, text: str) -> List[ExamEntry]:
        normalized = preprocess(text)
        reference_year = resolve_reference_year(self.reference_year, normalized)

        state = Section.NONE
        crns: List[int] = []
        dates: List[str] = []
        times: List[Tuple[int, int]] = []
        rooms: List[str] = []

        for line in (l.strip() for l in normalized.splitlines()):
            if not line:
                continue
            if line in SECTION_HEADERS:
                state = SECTION_HEADERS[line]
                continue

            if state is Section.CRN:
                if CRN_RE.match(line):
                    crns.append(int(line))
            elif state is Section.EXAM_DATE:
                # Keep no-exam markers so this column stays aligned with the CRNs
                if is_no_exam_marker(line) or self._date(line, reference_year):
                    dates.append(line)
            elif state is Section.EXAM_TIME:
                start_time, end_time = extract_time_range(line)
                if start_time is not None:
                    times.append((start_time, end_time))
            elif state is Section.EXAM_ROOM:
                # Drops cross-page noise such as footers and course titles
                location = extract_location(line)
                if location:
                    rooms.append(location)

        if len(crns) != len(dates):
            logger.warning(f"CRN column has {len(crns)} rows but exam-date column has {len(dates)}")

        return self._build_entries(crns, dates, times, rooms, reference_year)

    def _date(self, line, reference_year):
        return extract_date(line, default_year=self.default_year, reference_year=reference_year)

    def _build_entries(self, crns, dates, times, rooms, reference_year):
        entries = []
        slot = 0

        for crn, date_line in zip(crns, dates):
            if crn < MIN_CRN:
                continue
            if is_no_exam_marker(date_line):
                continue

            exam_date = self._date(date_line, reference_year)
            if exam_date is None:
                continue

            start_time, end_time = times[slot] if slot < len(times) else (None, None)
            location = rooms[slot] if slot < len(rooms) else None
            slot += 1

            if start_time is None:
                logger.debug(f"CRN {crn} has a date but no exam time; dropped")
                continue

            entries.append(ExamEntry(
                crn=crn,
                combined_crns=(crn,),
                date=exam_date,
                start_time=start_time,
                end_time=end_time,
                location=location,
            ))

        return unique_by_crn(entries)
