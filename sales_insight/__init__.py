"""Sales insight package."""

from .application import ReportResult, run_reporting_pipeline
from .config import Settings, load_settings
from .ingestion import normalize_frame, read_period, write_output_excel

__all__ = [
    "Settings",
    "load_settings",
    "normalize_frame",
    "read_period",
    "write_output_excel",
    "ReportResult",
    "run_reporting_pipeline",
]
