"""
Utility functions and error handling for the Finals Extractor.
"""

from .error_handler import (
    handle_extraction_error,
    PDFProcessingError,
    ValidationError,
    DataExtractionError,
    UnrecognizedFormatError
)

__all__ = [
    'handle_extraction_error',
    'PDFProcessingError',
    'ValidationError',
    'DataExtractionError',
    'UnrecognizedFormatError'
]
