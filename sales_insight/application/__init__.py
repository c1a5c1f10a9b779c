"""Application layer package."""

from .aggregation import CategoryTree, aggregate, compare_periods
from .classification_service import ClassificationResult, classify_periods
from .report_service import ReportResult, run_reporting_pipeline
from .sorting import SortOptions, sort_and_filter

__all__ = [
    "CategoryTree",
    "aggregate",
    "compare_periods",
    "ClassificationResult",
    "classify_periods",
    "SortOptions",
    "sort_and_filter",
    "ReportResult",
    "run_reporting_pipeline",
]
