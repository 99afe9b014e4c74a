from typing import List, Optional, Protocol, runtime_checkable

from ..extractors import document_year
from ..models import ExamEntry


@runtime_checkable
class FinalsStrategy(Protocol):
    """A reconstruction strategy for one finals schedule layout."""

    name: str

    @classmethod
    def matches(cls, text: str) -> bool:
        ...

    def parse(self, text: str) -> List[ExamEntry]:
        ...


def resolve_reference_year(reference_year: Optional[int], text: str) -> Optional[int]:
    """Configured reference year, else the year printed in the document header."""
    return reference_year or document_year(text)
