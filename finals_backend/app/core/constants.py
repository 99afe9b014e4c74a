import re

MONTH_NAMES = ["January", "February", "March", "April", "May", "June", "July",
               "August", "September", "October", "November", "December"]

MONTH_ABBRS = [name[:3] for name in MONTH_NAMES]

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

MIN_CRN = 10000

NO_EXAM_MARKERS = ("ONLINE", "TBA", "VIRTUAL", "SEE FACULTY")

# (pattern, replacement) pairs applied to the whole document
PREPROCESS_SUBSTITUTIONS = (
    (re.compile(r"^\*\s+", re.M), ""),                              # "* ARCH1500 ..." amended rows
    (re.compile(r"Date & Time Change\s*$", re.I | re.M), ""),       # amendment annotation column
    (re.compile(r"FINAL SCHEDULE INFORMATION.*$", re.I | re.M), ""),
    (re.compile(r"Schedule as of [\d/]+\s*$", re.I | re.M), ""),    # footer datestamp
    (re.compile(r"UPDATED\s+(?=FALL|SPRING|SUMMER)", re.I), ""),
)

_MONTH_ALTERNATION = "|".join(MONTH_NAMES)
_ABBR_ALTERNATION = "|".join(MONTH_ABBRS)
_WEEKDAY_ALTERNATION = "|".join(WEEKDAY_NAMES)

NUMERIC_DATE_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
FULL_MONTH_DATE_RE = re.compile(rf"({_MONTH_ALTERNATION})\s+(\d{{1,2}}),?\s+(\d{{4}})", re.I)
ABBR_MONTH_DATE_RE = re.compile(rf"({_ABBR_ALTERNATION})\s+(\d{{1,2}}),?\s+(\d{{4}})", re.I)
# "Monday, Dec 8" / "Monday, December 8" with no year
WEEKDAY_MONTH_DAY_RE = re.compile(
    rf"\b({_WEEKDAY_ALTERNATION}),?\s+({_ABBR_ALTERNATION})[a-z]*\.?\s+(\d{{1,2}})\b(?!,?\s*\d{{4}})",
    re.I,
)

TIME_RANGE_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)\s*-\s*(\d{1,2}):(\d{2})\s*(AM|PM)", re.I)
TIME_RANGE_HOUR_END_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)\s*-\s*(\d{1,2})\s*(AM|PM)", re.I)
MILITARY_TIME_RANGE_RE = re.compile(r"\b(\d{4})\s*-\s*(\d{4})\b")

SEASON_HEADER_RE = re.compile(r"(?:SPRING|FALL|SUMMER|WINTER)\s+\d{4}", re.I)
SEASON_YEAR_RE = re.compile(r"\b(?:SPRING|FALL|SUMMER|WINTER)\s+(\d{4})\b", re.I)
# Room must start with a digit and be at least 3 chars so "SCHEDULE" or "01" never match
BUILDING_ROOM_RE = re.compile(r"([A-Z]{4,6})\s+(\d[\dA-Z]{2,}(?:/[\dA-Z]+)*)\s*$", re.I)
NAMED_VENUE_RE = re.compile(r"([A-Z][A-Za-z]+\s+(?:Auditorium|Hall|Center|Room))\s*$")
VIRTUAL_LOCATION_RE = re.compile(r"(ONLINE|TBA|VIRTUAL)", re.I)
SEE_FACULTY_RE = re.compile(r"SEE FACULTY", re.I)
BARE_BUILDING_RE = re.compile(r"^([A-Z]{4,6})\s*$")
ROOM_TOKEN_RE = re.compile(r"^([A-Z]+)\s+(\d+[A-Z]?)$", re.I)
NO_EXAM_RE = re.compile(r"(?:ONLINE|TBA|VIRTUAL|SEE FACULTY)", re.I)

CRN_RE = re.compile(r"^\d{5}$")
CRN_CHAIN_RE = re.compile(r"^\d{5}(?:-\d{5})+$")
