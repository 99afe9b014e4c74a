"""
Reconstruction strategies, one per finals schedule layout.
"""

from .base import FinalsStrategy
from .named_section import NamedSectionStrategy
from .column_block import ColumnBlockStrategy
from .anchor_scan import AnchorScanStrategy

__all__ = ['FinalsStrategy', 'NamedSectionStrategy', 'ColumnBlockStrategy', 'AnchorScanStrategy']
