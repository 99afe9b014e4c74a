import logging
import re
from functools import partial
from typing import List, Optional

from ..blocks import classify_line, group_typed_blocks, parse_crn_line
from ..extractors import extract_date, extract_location, extract_time_range, preprocess
from ..models import ExamEntry, LineTag, TypedBlock, unique_by_crn
from .base import resolve_reference_year

logger = logging.getLogger(__name__)

MATCH_RE = re.compile(r"COMBINED\s+CRNs", re.I)
HEADER_LINE_RE = re.compile(
    r"COURSE\s+SECTION|COMBINED\s+CRNs|EXAM-DATE|EXAM-TIME|EXAM-ROOM|FALL\s+\d{4}\s+FINAL|Page\s+\d+",
    re.I,
)


class ColumnBlockStrategy:
    """
    Layout where the extractor emits whole table columns one after another:
    all CRN lines, then all dates, then all times, then all rooms.

    Rows are rebuilt by zipping blocks of equal length: each date block pairs
    with the nearest preceding CRN block and the nearest following time (and
    optionally location) block that hold the same number of rows.
    """

    name = "column_block"

    def __init__(self, default_year: Optional[int] = None, reference_year: Optional[int] = None):
        self.default_year = default_year
        self.reference_year = reference_year

    @classmethod
    def matches(cls, text: str) -> bool:
        return MATCH_RE.search(text) is not None

    def parse(self, text: str) -> List[ExamEntry]:
        normalized = preprocess(text)
        lines = [line.strip() for line in normalized.splitlines()]
        lines = [line for line in lines if line and not HEADER_LINE_RE.search(line)]

        parse_date = partial(extract_date,
                             default_year=self.default_year,
                             reference_year=resolve_reference_year(self.reference_year, normalized))
        blocks = group_typed_blocks(
            [(line, classify_line(line)) for line in lines],
            {
                LineTag.CRN: parse_crn_line,
                LineTag.DATE: parse_date,
                LineTag.TIME: extract_time_range,
                LineTag.LOCATION: extract_location,
            },
        )

        crn_blocks = [b for b in blocks if b.tag is LineTag.CRN]
        time_blocks = [b for b in blocks if b.tag is LineTag.TIME]
        location_blocks = [b for b in blocks if b.tag is LineTag.LOCATION]

        entries = []
        for date_block in (b for b in blocks if b.tag is LineTag.DATE):
            entries.extend(self._zip_rows(date_block, crn_blocks, time_blocks, location_blocks))

        return unique_by_crn(entries)

    def _zip_rows(self, date_block: TypedBlock, crn_blocks, time_blocks, location_blocks):
        size = len(date_block)

        crn_block = _last([b for b in crn_blocks
                           if b.end_idx < date_block.start_idx and len(b) == size])
        if crn_block is None:
            logger.debug(f"No CRN block of {size} rows before line {date_block.start_idx}")
            return []

        time_block = _first([b for b in time_blocks
                             if b.start_idx > date_block.start_idx and len(b) == size])
        if time_block is None:
            logger.debug(f"No time block of {size} rows after line {date_block.start_idx}")
            return []

        location_block = _first([b for b in location_blocks
                                 if b.start_idx > time_block.start_idx and len(b) == size])

        entries = []
        for i in range(size):
            crns = crn_block.rows[i]
            exam_date = date_block.rows[i]
            start_time, end_time = time_block.rows[i]
            location = location_block.rows[i] if location_block else None

            if not crns or exam_date is None or start_time is None or end_time is None:
                continue

            for crn in crns:
                entries.append(ExamEntry(
                    crn=crn,
                    combined_crns=tuple(crns),
                    date=exam_date,
                    start_time=start_time,
                    end_time=end_time,
                    location=location,
                ))
        return entries


def _first(blocks):
    return blocks[0] if blocks else None


def _last(blocks):
    return blocks[-1] if blocks else None
