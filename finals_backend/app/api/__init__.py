from .models import ExamEntryModel, ParseRequest, ParseResponse, ProcessingResponse, ProcessingStatus

__all__ = ["ExamEntryModel", "ParseRequest", "ParseResponse", "ProcessingResponse", "ProcessingStatus"]
