"""Services package"""

from .grading_service import GradingService, get_grading_service
from .import_service import QuestionImportService, get_import_service

__all__ = [
    "GradingService",
    "get_grading_service",
    "QuestionImportService",
    "get_import_service",
]
