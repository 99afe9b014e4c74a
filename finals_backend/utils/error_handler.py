import logging
from typing import Dict, Any, Iterable

logger = logging.getLogger(__name__)


class PDFProcessingError(Exception):
    """Raised when an uploaded schedule PDF cannot be opened or read."""


class ValidationError(Exception):
    """Raised when schedule input is missing, empty or of the wrong type."""


class DataExtractionError(Exception):
    """Base class for failures turning schedule text into exam entries."""


class UnrecognizedFormatError(DataExtractionError):
    """Raised when no finals schedule layout accepts the document text."""

    def __init__(self, tried: Iterable[str] = ()):
        self.tried = list(tried)
        message = "Unrecognized finals schedule format"
        if self.tried:
            message += f" (tried: {', '.join(self.tried)})"
        super().__init__(message)


ERROR_CODES = (
    (PDFProcessingError, "PDF_PROCESSING_ERROR"),
    (ValidationError, "VALIDATION_ERROR"),
    (UnrecognizedFormatError, "UNRECOGNIZED_FORMAT"),
    (DataExtractionError, "DATA_EXTRACTION_ERROR"),
)


def handle_extraction_error(error: Exception) -> Dict[str, Any]:
    """
    Log a parsing failure and build the JSON payload returned to API callers.

    Args:
        error (Exception): The caught exception

    Returns:
        Dict[str, Any]: status, message, exception type and a stable error code
    """
    logger.error(f"Error occurred: {str(error)}", exc_info=error)

    code = next((code for error_cls, code in ERROR_CODES if isinstance(error, error_cls)),
                "UNKNOWN_ERROR")

    return {
        "status": "error",
        "message": str(error),
        "type": error.__class__.__name__,
        "code": code,
    }
