"""Infrastructure layer package."""

from .excel_repository import load_period, load_periods, save_output_workbook
from .fallback_classifier import FallbackClassifier, GeminiCategoryService, build_fallback_classifier
from .report_exporter import save_summary_json

__all__ = [
    "load_period",
    "load_periods",
    "save_output_workbook",
    "save_summary_json",
    "FallbackClassifier",
    "GeminiCategoryService",
    "build_fallback_classifier",
]
