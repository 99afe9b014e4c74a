import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Set, Tuple

from ..constants import CRN_CHAIN_RE, CRN_RE, MIN_CRN
from ..extractors import extract_date, extract_location, extract_time_range, preprocess
from ..models import ExamEntry, unique_by_crn
from .base import resolve_reference_year

logger = logging.getLogger(__name__)

MATCH_RE = re.compile(r"FINAL\s+(?:DAY|DATE)|MULTI-SECTION\s+CRNS", re.I)


@dataclass
class _Record:
    crn: int
    combined_crns: Tuple[int, ...]
    date: Optional[date] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    location: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.date is not None and self.start_time is not None and self.end_time is not None


class AnchorScanStrategy:
    """
    Layout where each course's fields sit on nearby lines after its CRN.

    A standalone 5-digit line opens a record, optionally followed by a
    dash-joined chain of the CRNs sharing the exam slot. The scan then takes
    the first date, the first time range after it, and the line right after
    the time as the room. Rows that carry no date borrow the schedule of a
    sibling with the same combined-CRN group.
    """

    name = "anchor_scan"

    def __init__(self, default_year: Optional[int] = None, reference_year: Optional[int] = None):
        self.default_year = default_year
        self.reference_year = reference_year

    @classmethod
    def matches(cls, text: str) -> bool:
        return MATCH_RE.search(text) is not None

    def parse(self, text: str) -> List[ExamEntry]:
        normalized = preprocess(text)
        lines = [line.strip() for line in normalized.splitlines()]
        lines = [line for line in lines if line]
        reference_year = resolve_reference_year(self.reference_year, normalized)

        records = [self._scan_record(lines, i, reference_year)
                   for i, line in enumerate(lines)
                   if CRN_RE.match(line) and int(line) >= MIN_CRN]

        backfill(records)

        complete = []
        for record in records:
            if record.complete:
                complete.append(record)
            else:
                logger.debug(f"CRN {record.crn} has no exam date/time after backfill; dropped")

        anchored = {record.crn for record in records}
        return unique_by_crn(self._expand_groups(complete, anchored))

    def _scan_record(self, lines: List[str], anchor: int, reference_year: Optional[int]) -> _Record:
        crn = int(lines[anchor])
        record = _Record(crn=crn, combined_crns=(crn,))
        j = anchor + 1

        if j < len(lines) and CRN_CHAIN_RE.match(lines[j]):
            chain = tuple(int(value) for value in lines[j].split("-") if int(value) >= MIN_CRN)
            record.combined_crns = chain if crn in chain else (crn,) + chain
            j += 1

        while j < len(lines):
            line = lines[j]
            if CRN_RE.match(line):
                break

            if record.date is None:
                record.date = extract_date(line,
                                           default_year=self.default_year,
                                           reference_year=reference_year)
                j += 1
                continue

            start_time, end_time = extract_time_range(line)
            if start_time is not None:
                record.start_time, record.end_time = start_time, end_time
                if j + 1 < len(lines) and not CRN_RE.match(lines[j + 1]):
                    record.location = extract_location(lines[j + 1])
                break

            j += 1

        return record

    def _expand_groups(self, records: List[_Record], anchored: Set[int]) -> List[ExamEntry]:
        """
        One entry per complete record, plus group members that never had their own anchor.

        ``anchored`` holds every scanned anchor, dropped ones included, so a CRN
        whose own record stayed incomplete is not revived through another chain.
        """
        entries = []
        for record in records:
            members = [record.crn] + [crn for crn in record.combined_crns
                                      if crn != record.crn and crn not in anchored]
            for crn in members:
                entries.append(ExamEntry(
                    crn=crn,
                    combined_crns=record.combined_crns,
                    date=record.date,
                    start_time=record.start_time,
                    end_time=record.end_time,
                    location=record.location,
                ))
        return entries


def backfill(records: List[_Record]) -> None:
    """Copy date/time (and room if missing) from a dated sibling in the same group."""
    donors: Dict[Tuple[int, ...], _Record] = {}
    for record in records:
        if record.date is not None:
            donors.setdefault(tuple(sorted(record.combined_crns)), record)

    for record in records:
        if record.date is not None:
            continue
        donor = donors.get(tuple(sorted(record.combined_crns)))
        if donor is None:
            continue
        record.date = donor.date
        record.start_time = donor.start_time
        record.end_time = donor.end_time
        if record.location is None:
            record.location = donor.location
