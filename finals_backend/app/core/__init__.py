"""
Finals schedule text reconstruction.
"""

from .dispatcher import STRATEGIES, parse_schedule, select_strategy
from .finals_processor import FinalsProcessor, ParseResult, entries_to_frame
from .models import ExamEntry, LineTag, TypedBlock

__all__ = [
    'STRATEGIES',
    'parse_schedule',
    'select_strategy',
    'FinalsProcessor',
    'ParseResult',
    'entries_to_frame',
    'ExamEntry',
    'LineTag',
    'TypedBlock',
]
