"""
Report file serializer.

Turns denormalized report rows (ordered dicts sharing one key set) into a
downloadable CSV or XLSX artifact held entirely in memory.
"""
import io
from dataclasses import dataclass
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from app.schemas.report import ReportFormat

CSV_CONTENT_TYPE = "text/csv"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
NO_DATA = "No data found"

Row = Dict[str, Any]


@dataclass
class ReportFile:
    content: bytes
    filename: str
    content_type: str


def build_report_file(rows: List[Row], base_name: str, fmt: ReportFormat, sheet_name: str) -> ReportFile:
    if fmt == ReportFormat.CSV:
        return build_csv(rows, base_name)
    return build_xlsx(rows, base_name, sheet_name)


def _text(value: Any) -> str:
    # 20.0 renders as "20", the way spreadsheet users expect whole days.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _csv_field(value: Any) -> str:
    if value is None:
        return ""
    return '"' + _text(value).replace('"', '""') + '"'


def build_csv(rows: List[Row], base_name: str) -> ReportFile:
    filename = f"{base_name}.csv"
    if not rows:
        return ReportFile(NO_DATA.encode("utf-8"), filename, CSV_CONTENT_TYPE)

    headers = list(rows[0].keys())
    lines = [",".join(f'"{header}"' for header in headers)]
    for row in rows:
        lines.append(",".join(_csv_field(row.get(header)) for header in headers))
    return ReportFile("\n".join(lines).encode("utf-8"), filename, CSV_CONTENT_TYPE)


def build_xlsx(rows: List[Row], base_name: str, sheet_name: str) -> ReportFile:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]

    if not rows:
        ws["A1"] = NO_DATA
    else:
        headers = list(rows[0].keys())
        ws.append(headers)

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        header_border = Border(bottom=Side(style="thin"))
        for cell in ws[1]:
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")
            cell.border = header_border

        for row in rows:
            ws.append(["" if row.get(header) is None else row.get(header) for header in headers])

        # Auto-fit: at least 10, at most 40 characters wide
        for column_index, column_cells in enumerate(ws.iter_cols(min_row=1, max_row=ws.max_row), start=1):
            width = 10
            for cell in column_cells:
                length = len(_text(cell.value)) if cell.value else 0
                width = max(width, min(length + 2, 40))
            ws.column_dimensions[get_column_letter(column_index)].width = width

        ws.auto_filter.ref = f"A1:{get_column_letter(len(headers))}1"

    buffer = io.BytesIO()
    wb.save(buffer)
    return ReportFile(buffer.getvalue(), f"{base_name}.xlsx", XLSX_CONTENT_TYPE)
