"""Excel ingestion/output helpers with Polars-first and openpyxl fallback."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Sequence

import polars as pl
import structlog

from sales_insight.domain.models import LineItem, Period

logger = structlog.get_logger(__name__)

# Export headers vary by sales channel; the first column (in sheet order) matching wins.
HEADER_PATTERNS: dict[str, re.Pattern[str]] = {
    "product_name": re.compile(r"상품명|품목명|Item|Product Name", re.IGNORECASE),
    "paid_quantity": re.compile(r"결제상품수량|주문수량|Qty|Quantity", re.IGNORECASE),
    "paid_amount": re.compile(r"결제금액|매출액|판매금액|Total Amount", re.IGNORECASE),
    "refund_quantity": re.compile(r"환불수량|반품수량|Refund Qty", re.IGNORECASE),
    "refund_amount": re.compile(r"환불금액|반품금액|Refund Amount", re.IGNORECASE),
    "paid_count": re.compile(r"결제수|주문건수|Payment Count|Order Count", re.IGNORECASE),
    "refund_count": re.compile(r"환불건수|반품건수|Refund Count", re.IGNORECASE),
}
METRIC_FIELDS: list[str] = [
    "paid_quantity",
    "refund_quantity",
    "paid_count",
    "refund_count",
    "paid_amount",
    "refund_amount",
]
PERCENT_FORMAT = "0.00%"


def _import_openpyxl() -> tuple[Any, Any]:
    try:
        from openpyxl import Workbook, load_workbook
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("openpyxl is required for Excel fallback I/O.") from exc
    return Workbook, load_workbook


def _normalize_headers(raw_headers: Sequence[Any]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for idx, value in enumerate(raw_headers):
        base = str(value).strip() if value not in (None, "") else f"column_{idx + 1}"
        count = seen.get(base, 0)
        name = base if count == 0 else f"{base}_{count + 1}"
        seen[base] = count + 1
        headers.append(name)
    return headers


def _read_excel_polars(path: Path, **kwargs: Any) -> Any:
    """Use larger schema sampling when supported to avoid dtype inference warnings."""
    try:
        return pl.read_excel(path, infer_schema_length=10000, **kwargs)  # type: ignore[arg-type]
    except TypeError:
        return pl.read_excel(path, **kwargs)  # type: ignore[arg-type]


def _frame_from_polars_result(frame: Any) -> pl.DataFrame:
    if isinstance(frame, dict):
        first_key = next(iter(frame.keys()), None)
        if first_key is None:
            return pl.DataFrame()
        return frame[first_key]
    return frame


def _read_with_polars(path: Path) -> pl.DataFrame:
    if not hasattr(pl, "read_excel"):
        raise RuntimeError("polars.read_excel is not available in this environment.")
    return _frame_from_polars_result(_read_excel_polars(path, sheet_id=1))


def _read_with_openpyxl(path: Path) -> pl.DataFrame:
    _, load_workbook = _import_openpyxl()
    workbook = load_workbook(path, read_only=True, data_only=True)
    if not workbook.sheetnames:
        workbook.close()
        raise ValueError(f"No sheets found in {path}")

    worksheet = workbook[workbook.sheetnames[0]]
    row_iter = worksheet.iter_rows(values_only=True)
    header_row = next(row_iter, None)
    if header_row is None:
        workbook.close()
        return pl.DataFrame()

    headers = _normalize_headers(header_row)
    records: list[dict[str, Any]] = []
    for values in row_iter:
        if values is None or all(value is None for value in values):
            continue
        row_data: dict[str, Any] = {}
        for idx, name in enumerate(headers):
            row_data[name] = values[idx] if idx < len(values) else None
        records.append(row_data)

    workbook.close()
    if not records:
        return pl.DataFrame({name: [] for name in headers})
    return pl.DataFrame(records, infer_schema_length=None)


def read_sheet(path: str | Path) -> pl.DataFrame:
    """Read the first sheet of a workbook as a raw frame."""
    excel_path = Path(path)
    if not excel_path.exists():
        raise FileNotFoundError(f"Input Excel file not found: {excel_path}")
    try:
        return _read_with_polars(excel_path)
    except Exception:
        return _read_with_openpyxl(excel_path)


def resolve_columns(headers: Iterable[str]) -> Dict[str, str | None]:
    header_list = [str(header) for header in headers]
    return {
        field: next((header for header in header_list if pattern.search(header)), None)
        for field, pattern in HEADER_PATTERNS.items()
    }


def _metric_text_expr(column_name: str) -> pl.Expr:
    return pl.col(column_name).cast(pl.Utf8, strict=False).str.strip_chars()


def _metric_parsed_expr(column_name: str) -> pl.Expr:
    return _metric_text_expr(column_name).str.replace_all(",", "").cast(pl.Float64, strict=False)


def _metric_expr(column_name: str | None, alias: str) -> pl.Expr:
    if column_name is None:
        return pl.lit(0.0, dtype=pl.Float64).alias(alias)
    return _metric_parsed_expr(column_name).fill_null(0.0).alias(alias)


def _product_name_expr(column_name: str) -> pl.Expr:
    return pl.col(column_name).cast(pl.Utf8, strict=False).str.strip_chars().fill_null("").alias("product_name")


def _keep_row_expr() -> pl.Expr:
    has_name = pl.col("product_name") != ""
    has_activity = (
        (pl.col("paid_quantity") > 0)
        | (pl.col("paid_amount") > 0)
        | ((pl.col("paid_quantity") - pl.col("refund_quantity")) > 0)
        | ((pl.col("paid_count") - pl.col("refund_count")) > 0)
    )
    return (has_name & has_activity).alias("__keep")


def normalize_frame(df: pl.DataFrame) -> list[LineItem]:
    """Map a raw sheet with arbitrary headers onto canonical line items.

    Rows without a product name, or without any positive paid/net activity,
    are dropped.
    """
    if df.is_empty():
        return []
    columns = resolve_columns(df.columns)
    name_column = columns["product_name"]
    if name_column is None:
        return []

    normalized = df.select(
        [_product_name_expr(name_column)] + [_metric_expr(columns[field], field) for field in METRIC_FIELDS]
    ).with_columns(_keep_row_expr())

    items: list[LineItem] = []
    for raw, row in zip(df.iter_rows(named=True), normalized.iter_rows(named=True)):
        if not row["__keep"]:
            continue
        items.append(LineItem.from_row(row, raw=raw))
    return items


def read_period(path: str | Path) -> Period:
    """Read one export file into a Period named after the file stem."""
    excel_path = Path(path)
    items = normalize_frame(read_sheet(excel_path))
    if not items:
        raise ValueError(f"No usable sales rows found in {excel_path}")
    logger.info("Loaded period", path=str(excel_path), items=len(items))
    return Period.from_items(excel_path.stem, items)


def _excel_cell_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (int, bool, str)):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return value
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _write_with_polars(path: Path, sheets: Dict[str, pl.DataFrame], percent_columns: set[str]) -> bool:
    if not sheets:
        return False
    try:
        from xlsxwriter import Workbook

        with Workbook(str(path)) as workbook:
            for sheet_name, frame in sheets.items():
                formats = {column: PERCENT_FORMAT for column in frame.columns if column in percent_columns}
                frame.write_excel(
                    workbook=workbook,
                    worksheet=str(sheet_name)[:31],
                    column_formats=formats or None,
                    autofit=True,
                )
        return True
    except Exception:
        return False


def _write_with_openpyxl(path: Path, sheets: Dict[str, pl.DataFrame], percent_columns: set[str]) -> None:
    Workbook, _ = _import_openpyxl()
    workbook = Workbook()
    default_sheet = workbook.active
    workbook.remove(default_sheet)

    for sheet_name, frame in sheets.items():
        worksheet = workbook.create_sheet(title=str(sheet_name)[:31])
        worksheet.append(frame.columns)
        percent_idx = [idx for idx, column in enumerate(frame.columns, start=1) if column in percent_columns]
        for row in frame.iter_rows(named=False):
            worksheet.append([_excel_cell_value(value) for value in row])
            for col_idx in percent_idx:
                worksheet.cell(row=worksheet.max_row, column=col_idx).number_format = PERCENT_FORMAT

    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)


def write_output_excel(
    path: str | Path,
    sheets: Dict[str, pl.DataFrame],
    percent_columns: Iterable[str] = (),
) -> None:
    """Write output Excel with Polars-first and openpyxl fallback."""
    excel_path = Path(path)
    excel_path.parent.mkdir(parents=True, exist_ok=True)
    percent_set = set(percent_columns)

    if _write_with_polars(excel_path, sheets, percent_set):
        return
    _write_with_openpyxl(excel_path, sheets, percent_set)
