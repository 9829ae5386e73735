from io import BytesIO
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from ..models import LunchType, ProcessedShift, DailyWorkerRecord, RawRecord
from .normalizer import parse_timestamp

DATETIME_FORMAT = 'yyyy-mm-dd hh:mm:ss'
DATE_FORMAT = 'yyyy-mm-dd'

SHIFT_HEADERS = [
    'Person', 'Group', 'Date', 'Clock In', 'Lunch Out', 'Lunch In', 'Clock Out',
    'Worked Hours', 'Worked Time', 'Lunch Type', 'Warnings',
]
DAILY_HEADERS = [
    'Name', 'Tax ID', 'Date', 'Arrival', 'Departure', 'Total Time', 'Category', 'Group',
]
RECORD_HEADERS = ['Person', 'Date/Time', 'Group', 'Tax ID', 'Category']

HEADER_FILL = PatternFill(fill_type='solid', fgColor='1E3A8A')
WARNING_FILL = PatternFill(fill_type='solid', fgColor='FFF3CD')
ARTIFICIAL_FILL = PatternFill(fill_type='solid', fgColor='FDE2E4')
HEADER_FONT = Font(bold=True, color='FFFFFF')

# Excel limits sheet titles to 31 characters and forbids a few symbols
_INVALID_TITLE_CHARS = set('[]:*?/\\')


def _write_header(ws: Worksheet, headers: list[str]) -> None:
    ws.append(headers)
    for cell in ws[1]:
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal='center')
    ws.freeze_panes = 'A2'


def _autosize(ws: Worksheet, headers: list[str]) -> None:
    for idx, header in enumerate(headers, start=1):
        width = len(header)
        for (value,) in ws.iter_rows(min_row=2, min_col=idx, max_col=idx, values_only=True):
            if value is not None:
                width = max(width, min(len(str(value)), 60))
        ws.column_dimensions[get_column_letter(idx)].width = width + 2


def _to_bytes(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _sheet_title(label: str) -> str:
    cleaned = ''.join('_' if ch in _INVALID_TITLE_CHARS else ch for ch in label).strip()
    return (cleaned or 'Sheet')[:31]


def _fill_shift_sheet(ws: Worksheet, shifts: list[ProcessedShift]) -> None:
    _write_header(ws, SHIFT_HEADERS)
    for shift in shifts:
        ws.append([
            shift.person,
            shift.group or '',
            shift.date,
            shift.start_time,
            shift.lunch_start,
            shift.lunch_end,
            shift.end_time,
            round(shift.worked_hours, 2),
            shift.worked_time_str,
            shift.lunch_type.value,
            '; '.join(shift.warnings),
        ])
        row = ws.max_row
        ws.cell(row=row, column=3).number_format = DATE_FORMAT
        for col in (4, 5, 6, 7):
            ws.cell(row=row, column=col).number_format = DATETIME_FORMAT
        if shift.lunch_type == LunchType.ARTIFICIAL:
            ws.cell(row=row, column=10).fill = ARTIFICIAL_FILL
        if shift.warnings:
            ws.cell(row=row, column=11).fill = WARNING_FILL
    _autosize(ws, SHIFT_HEADERS)


def export_shifts(shifts: list[ProcessedShift]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = 'Shifts'
    _fill_shift_sheet(ws, shifts)
    return _to_bytes(wb)


def export_labeled(labeled: dict[str, list[ProcessedShift]]) -> bytes:
    """One sheet per shift band, in band order."""
    wb = Workbook()
    wb.remove(wb.active)
    used = set()
    for label, shifts in labeled.items():
        title = _sheet_title(label)
        suffix = 2
        while title in used:
            title = _sheet_title(f"{label[:27]} {suffix}")
            suffix += 1
        used.add(title)
        _fill_shift_sheet(wb.create_sheet(title), shifts)
    if not wb.worksheets:
        _fill_shift_sheet(wb.create_sheet('Shifts'), [])
    return _to_bytes(wb)


def export_daily(records: list[DailyWorkerRecord]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = 'Daily'
    _write_header(ws, DAILY_HEADERS)
    for rec in records:
        ws.append([
            rec.name, rec.tax_id, rec.date, rec.arrival, rec.departure,
            rec.total_time_str, rec.category, rec.group,
        ])
        row = ws.max_row
        ws.cell(row=row, column=3).number_format = DATE_FORMAT
        ws.cell(row=row, column=4).number_format = DATETIME_FORMAT
        ws.cell(row=row, column=5).number_format = DATETIME_FORMAT
    _autosize(ws, DAILY_HEADERS)
    return _to_bytes(wb)


def export_records(records: list[RawRecord]) -> bytes:
    """Write raw punches in a layout the punch parser reads back."""
    wb = Workbook()
    ws = wb.active
    ws.title = 'Punches'
    extra_headers = []
    for rec in records:
        for key in rec.extra:
            if key not in extra_headers and key not in RECORD_HEADERS:
                extra_headers.append(key)
    headers = RECORD_HEADERS + extra_headers
    _write_header(ws, headers)
    for rec in records:
        timestamp = parse_timestamp(rec.timestamp)
        ws.append([
            rec.person,
            timestamp if timestamp is not None else rec.timestamp,
            rec.group,
            rec.tax_id,
            rec.category,
        ] + [rec.extra.get(key) for key in extra_headers])
        if timestamp is not None:
            ws.cell(row=ws.max_row, column=2).number_format = DATETIME_FORMAT
    _autosize(ws, headers)
    return _to_bytes(wb)


def export_table(rows: list[dict]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = 'Data'
    headers = []
    for row in rows:
        for key in row:
            if key not in headers:
                headers.append(key)
    _write_header(ws, headers or ['-'])
    for row in rows:
        ws.append([row.get(h) for h in headers])
    _autosize(ws, headers)
    return _to_bytes(wb)
