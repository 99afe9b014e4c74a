"""
Primitive extractors shared by every finals schedule layout.

All helpers are pure functions over a single line (or the whole document for
``preprocess``/``document_year``). None of them raise on malformed input: a
line that does not fit a grammar simply yields ``None``.
"""

import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from .constants import (
    ABBR_MONTH_DATE_RE,
    BARE_BUILDING_RE,
    BUILDING_ROOM_RE,
    FULL_MONTH_DATE_RE,
    MILITARY_TIME_RANGE_RE,
    MONTH_ABBRS,
    MONTH_NAMES,
    NAMED_VENUE_RE,
    NO_EXAM_RE,
    NUMERIC_DATE_RE,
    PREPROCESS_SUBSTITUTIONS,
    ROOM_TOKEN_RE,
    SEASON_HEADER_RE,
    SEASON_YEAR_RE,
    SEE_FACULTY_RE,
    TIME_RANGE_HOUR_END_RE,
    TIME_RANGE_RE,
    VIRTUAL_LOCATION_RE,
    WEEKDAY_MONTH_DAY_RE,
    WEEKDAY_NAMES,
)

logger = logging.getLogger(__name__)

YEAR_SEARCH_SPAN = 6

TimeRange = Tuple[Optional[int], Optional[int]]


def preprocess(text: str) -> str:
    """Strip known extraction artefacts (amendment markers, footers, etc.)."""
    for pattern, replacement in PREPROCESS_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text


def document_year(text: str) -> Optional[int]:
    """Year of the first season header ("FALL 2025") in the document."""
    match = SEASON_YEAR_RE.search(text)
    return int(match.group(1)) if match else None


def extract_date(line: str,
                 default_year: Optional[int] = None,
                 reference_year: Optional[int] = None) -> Optional[date]:
    """
    Parse the first date found in a line.

    Tries MM/DD/YYYY, then "December 8, 2025", then "Dec 8, 2025". A year-less
    "Monday, Dec 8" is accepted last: ``default_year`` is used when given,
    otherwise the year is inferred from the weekday around ``reference_year``.

    Returns:
        The date, or None when nothing matches or the values are not a real
        calendar date.
    """
    try:
        return _match_date(line, default_year, reference_year)
    except ValueError as e:
        logger.warning(f"Failed to parse date from: {line.strip()} - {str(e)}")
        return None


def _match_date(line, default_year, reference_year):
    match = NUMERIC_DATE_RE.search(line)
    if match:
        month, day, year = (int(g) for g in match.groups())
        return date(year, month, day)

    match = FULL_MONTH_DATE_RE.search(line)
    if match:
        month = MONTH_NAMES.index(match.group(1).capitalize()) + 1
        return date(int(match.group(3)), month, int(match.group(2)))

    match = ABBR_MONTH_DATE_RE.search(line)
    if match:
        month = MONTH_ABBRS.index(match.group(1).capitalize()) + 1
        return date(int(match.group(3)), month, int(match.group(2)))

    match = WEEKDAY_MONTH_DAY_RE.search(line)
    if match:
        weekday = WEEKDAY_NAMES.index(match.group(1).capitalize())
        month = MONTH_ABBRS.index(match.group(2).capitalize()) + 1
        day = int(match.group(3))
        if default_year is not None:
            return date(default_year, month, day)
        return infer_year(month, day, weekday, reference_year)

    return None


def infer_year(month: int, day: int, weekday: int,
               reference_year: Optional[int] = None) -> Optional[date]:
    """Closest date to ``reference_year`` whose month/day falls on ``weekday``."""
    reference = reference_year or date.today().year
    candidates = []
    for year in range(reference - YEAR_SEARCH_SPAN, reference + YEAR_SEARCH_SPAN + 1):
        try:
            candidate = date(year, month, day)
        except ValueError:
            continue  # Feb 29 outside leap years
        if candidate.weekday() == weekday:
            candidates.append(candidate)

    if not candidates:
        return None
    return min(candidates, key=lambda d: (abs(d.year - reference), -d.year))


def to_24h(hour: int, meridian: str) -> int:
    """12AM -> 0, 12PM -> 12, 9PM -> 21."""
    hour %= 12
    if meridian.upper() == "PM":
        hour += 12
    return hour


def extract_time_range(line: str) -> TimeRange:
    """
    Parse a time range into HHMM integers.

    Accepts "8:00AM-10:00AM", "10:15 AM - 12:15 PM", "9:00AM - 1PM" and
    military "0800-1000". Returns (None, None) when no range is present.
    """
    match = TIME_RANGE_RE.search(line)
    if match:
        start = to_24h(int(match.group(1)), match.group(3)) * 100 + int(match.group(2))
        end = to_24h(int(match.group(4)), match.group(6)) * 100 + int(match.group(5))
        return start, end

    match = TIME_RANGE_HOUR_END_RE.search(line)
    if match:
        start = to_24h(int(match.group(1)), match.group(3)) * 100 + int(match.group(2))
        end = to_24h(int(match.group(4)), match.group(5)) * 100
        return start, end

    match = MILITARY_TIME_RANGE_RE.search(line)
    if match:
        start, end = int(match.group(1)), int(match.group(2))
        if _valid_hhmm(start) and _valid_hhmm(end):
            return start, end

    return None, None


def _valid_hhmm(value: int) -> bool:
    return value // 100 < 24 and value % 100 < 60


def extract_location(line: str) -> Optional[str]:
    """
    Parse an exam room from a line; first grammar to match wins.

    Building codes with rooms ("WENTW 212", "CEIS 414A/B") are expanded, named
    venues ("WATSN Auditorium") kept as written, and ONLINE/TBA/VIRTUAL and
    SEE FACULTY normalised to upper case.
    """
    # Page headers such as "SPRING 2026" otherwise read as building + room
    if SEASON_HEADER_RE.fullmatch(line.strip()):
        return None

    match = BUILDING_ROOM_RE.search(line)
    if match:
        building, rooms = match.group(1), match.group(2)
        if "/" in rooms:
            return expand_room_list(building, rooms)
        return f"{building} {rooms}"

    match = NAMED_VENUE_RE.search(line)
    if match:
        return match.group(1).strip()

    match = VIRTUAL_LOCATION_RE.search(line)
    if match:
        return match.group(1).upper()

    # Checked before the bare building code to avoid a partial match
    if SEE_FACULTY_RE.search(line):
        return "SEE FACULTY"

    match = BARE_BUILDING_RE.search(line)
    if match:
        return match.group(1)

    return None


def expand_room_list(building: str, rooms: str) -> str:
    """
    Expand a slash-separated room list against its building code.

    "002/004" -> "BLDG 002 / BLDG 004"; "414A/B" -> "BLDG 414A / BLDG 414B",
    where a letter-only token borrows the number of the preceding room.
    """
    parts = rooms.split("/")
    if len(parts) == 1:
        return f"{building} {rooms}"

    base_number = None
    expanded = []
    for part in parts:
        number = re.match(r"\d+", part)
        if number:
            base_number = number.group()
            expanded.append(f"{building} {part}")
        elif base_number and part.isalpha():
            expanded.append(f"{building} {base_number}{part}")
        else:
            expanded.append(f"{building} {part}")
    return " / ".join(expanded)


def is_no_exam_marker(line: str) -> bool:
    """True when the whole line says there is no physical exam."""
    return NO_EXAM_RE.fullmatch(line.strip()) is not None


def location_rooms(location: Optional[str]) -> List[str]:
    """Room tokens ("CEIS 414A") of an expanded location; [] for non-rooms."""
    if not location:
        return []
    rooms = []
    for part in location.split(" / "):
        match = ROOM_TOKEN_RE.match(part.strip())
        if match:
            rooms.append(f"{match.group(1)} {match.group(2)}")
    return rooms
