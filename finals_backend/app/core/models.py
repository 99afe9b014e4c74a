import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from .constants import MIN_CRN


class LineTag(str, Enum):
    """Classification of a single extracted line."""
    CRN = "crn"
    DATE = "date"
    TIME = "time"
    LOCATION = "location"
    OTHER = "other"


@dataclass(frozen=True)
class ExamEntry:
    """One course section's final exam slot."""
    crn: int
    combined_crns: Tuple[int, ...]
    date: datetime.date
    start_time: int
    end_time: int
    location: Optional[str] = None

    def __post_init__(self):
        if self.crn < MIN_CRN:
            raise ValueError(f"CRN must be at least {MIN_CRN}: {self.crn}")
        if self.crn not in self.combined_crns:
            raise ValueError(f"CRN {self.crn} missing from combined CRNs {self.combined_crns}")


@dataclass
class TypedBlock:
    """A maximal run of consecutive lines sharing one tag."""
    tag: LineTag
    start_idx: int
    end_idx: int
    rows: List[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def unique_by_crn(entries: Iterable[ExamEntry]) -> List[ExamEntry]:
    """Keep the first entry per CRN in document order."""
    seen = set()
    unique = []
    for entry in entries:
        if entry.crn in seen:
            continue
        seen.add(entry.crn)
        unique.append(entry)
    return unique
