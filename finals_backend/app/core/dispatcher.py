"""
Format detection for finals schedule text.

``STRATEGIES`` is consulted in order and the first strategy whose ``matches``
accepts the text wins:

    NamedSectionStrategy  - named column headers repeated per page (INSTRUCTOR, EXAM-DATE)
    ColumnBlockStrategy   - column blocks with a COMBINED CRNs column
    AnchorScanStrategy    - CRN-anchored rows (FINAL DAY / FINAL DATE / MULTI-SECTION CRNS)
"""

import logging
from typing import List, Optional, Sequence, Tuple, Type

from ...utils.error_handler import UnrecognizedFormatError
from .models import ExamEntry
from .strategies import AnchorScanStrategy, ColumnBlockStrategy, FinalsStrategy, NamedSectionStrategy

logger = logging.getLogger(__name__)

STRATEGIES: Tuple[Type[FinalsStrategy], ...] = (
    NamedSectionStrategy,
    ColumnBlockStrategy,
    AnchorScanStrategy,
)


def select_strategy(text: str,
                    strategies: Sequence[Type[FinalsStrategy]] = STRATEGIES,
                    **options) -> FinalsStrategy:
    """
    Return an instance of the first strategy that accepts the text.

    Raises:
        UnrecognizedFormatError: if no strategy matches.
    """
    for strategy_cls in strategies:
        if strategy_cls.matches(text):
            return strategy_cls(**options)
    raise UnrecognizedFormatError(tried=[s.name for s in strategies])


def rank_strategies(text: str,
                    strategies: Sequence[Type[FinalsStrategy]] = STRATEGIES,
                    **options) -> Tuple[Optional[FinalsStrategy], List[ExamEntry]]:
    """
    Parse with every strategy and keep the one yielding the most entries.

    Ties keep registration order. Returns (None, []) when nothing parses.
    """
    best, best_entries = None, []
    for strategy_cls in strategies:
        strategy = strategy_cls(**options)
        entries = strategy.parse(text)
        logger.debug(f"{strategy.name} produced {len(entries)} entries")
        if len(entries) > len(best_entries):
            best, best_entries = strategy, entries
    return best, best_entries


def parse_schedule(text: str, **options) -> List[ExamEntry]:
    """Select the layout strategy for ``text`` and parse it."""
    return select_strategy(text, **options).parse(text)
