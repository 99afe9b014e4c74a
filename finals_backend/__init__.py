"""
Finals Schedule Extractor Backend
---------------------------------
A FastAPI-based backend that rebuilds per-course final exam records from the
extracted text of printed finals schedules.
"""

__version__ = '0.1.0'

__all__ = ['__version__']
