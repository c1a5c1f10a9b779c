"""Infrastructure adapter for Excel-based data repository."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import polars as pl

from sales_insight.domain.models import Period
from sales_insight.ingestion import read_period, write_output_excel


def load_period(path: Path) -> Period:
    return read_period(path)


def load_periods(paths: Sequence[Path]) -> list[Period]:
    if not paths:
        raise ValueError("At least one input file is required")
    return [load_period(Path(path)) for path in paths]


def save_output_workbook(
    path: Path,
    sheets: dict[str, pl.DataFrame],
    percent_columns: Iterable[str] = (),
) -> tuple[bool, str]:
    try:
        write_output_excel(path, sheets, percent_columns)
    except PermissionError as exc:
        return False, str(exc)
    return True, ""
