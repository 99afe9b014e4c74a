"""
Line classification and block grouping for column-major layouts.

When the extractor walks a table column by column, every value of one column
lands on consecutive lines. ``classify_line`` tags each line with the column it
can belong to and ``group_typed_blocks`` folds consecutive same-tag lines into
``TypedBlock`` runs that can later be zipped back into rows.
"""

import re
from typing import Any, Callable, Dict, List, Sequence, Tuple

from .extractors import extract_time_range
from .models import LineTag, TypedBlock
from .constants import MIN_CRN

CRN_ONLY_RE = re.compile(r"^\d{5}(?:-\d{5})*$")
CRN_GROUP_RE = re.compile(r"\d{5}(?:-\d{5})*")
MERGED_CRN_PAIR_RE = re.compile(r"(\d{5})(\d{5})")
WEEKDAY_OPENING_RE = re.compile(r"^(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday),", re.I)
BUILDING_CODE_RE = re.compile(r"[A-Z]{4,6}\s+\S")
LOCATION_ONLY_RES = (
    re.compile(r"^[A-Z]{4,6}\s+[\dA-Z]{3,}(?:/[\dA-Z]+)*\s*$", re.I),  # "WENTW 212", "CEIS 414A/B"
    re.compile(r"^[A-Z][A-Za-z]+\s+(?:Auditorium|Hall|Center|Room)\s*$", re.I),
    re.compile(r"^(?:ONLINE|TBA|VIRTUAL|SEE FACULTY)", re.I),
)

RowParser = Callable[[str], Any]


def normalize_merged_crns(line: str) -> str:
    """Split merged CRN pairs: "1458814589" -> "14588-14589"."""
    return MERGED_CRN_PAIR_RE.sub(r"\1-\2", line)


def parse_crn_line(line: str) -> List[int]:
    """All CRNs on a line, in order, without duplicates."""
    crns = []
    for group in CRN_GROUP_RE.findall(normalize_merged_crns(line)):
        for value in group.split("-"):
            crn = int(value)
            if crn >= MIN_CRN and crn not in crns:
                crns.append(crn)
    return crns


def is_crn_line(line: str) -> bool:
    return CRN_ONLY_RE.match(normalize_merged_crns(line)) is not None


def is_date_line(line: str) -> bool:
    return WEEKDAY_OPENING_RE.match(line) is not None


def is_time_line(line: str) -> bool:
    start, _ = extract_time_range(line)
    if start is None:
        return False
    # "Wednesday, Dec 10 ... 10:15AM-12:15PM" is a date line
    if is_date_line(line):
        return False
    # a building code makes it a location line
    if BUILDING_CODE_RE.search(line):
        return False
    return True


def is_location_line(line: str) -> bool:
    return any(pattern.match(line) for pattern in LOCATION_ONLY_RES)


def classify_line(line: str) -> LineTag:
    """Tag a line; the predicates are checked in a fixed order."""
    if is_crn_line(line):
        return LineTag.CRN
    if is_date_line(line):
        return LineTag.DATE
    if is_time_line(line):
        return LineTag.TIME
    if is_location_line(line):
        return LineTag.LOCATION
    return LineTag.OTHER


def group_typed_blocks(tagged_lines: Sequence[Tuple[str, LineTag]],
                       parsers: Dict[LineTag, RowParser]) -> List[TypedBlock]:
    """
    Fold consecutive lines with the same tag into blocks.

    Only tags with a parser produce blocks; each row holds the parser's value
    for its line (which may be None when the line did not fully parse).
    """
    blocks = []
    current = None

    for idx, (line, tag) in enumerate(tagged_lines):
        if current is not None and current.tag != tag:
            blocks.append(current)
            current = None

        parser = parsers.get(tag)
        if parser is None:
            continue

        if current is None:
            current = TypedBlock(tag=tag, start_idx=idx, end_idx=idx)
        current.end_idx = idx
        current.rows.append(parser(line))

    if current is not None:
        blocks.append(current)
    return blocks
