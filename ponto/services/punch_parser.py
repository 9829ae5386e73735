import logging
from datetime import date, time, datetime
from openpyxl import load_workbook
from ..models import RawRecord

logger = logging.getLogger(__name__)

HEADER_SEARCH_ROWS = 5

PERSON_HEADERS = ('pessoa', 'person', 'nome', 'name')
DATETIME_HEADERS = ('data/hora', 'datahora', 'date/time', 'timestamp')
DATE_HEADERS = ('data', 'date')
TIME_HEADERS = ('hora', 'time')
GROUP_HEADERS = ('grupo', 'group')
TAX_ID_HEADERS = ('cpf', 'tax id')
CATEGORY_HEADERS = ('categoria', 'category')


class MissingColumnsError(ValueError):
    """The sheet lacks the person or date/time columns entirely."""


def _find(col_map: dict, names) -> int | None:
    for name in names:
        if name in col_map:
            return col_map[name]
    return None


def _find_header(rows) -> tuple[int | None, list]:
    for row_idx, row in enumerate(rows, start=1):
        cells = [str(v).strip() if v is not None else '' for v in row]
        lowered = {c.lower() for c in cells if c}
        if lowered & set(PERSON_HEADERS) and lowered & set(DATETIME_HEADERS + DATE_HEADERS + TIME_HEADERS):
            return row_idx, cells
    return None, []


def _combine(date_raw, time_raw):
    """Merge separate date and time cells into one raw timestamp value."""
    if date_raw is None or time_raw is None:
        return None
    if isinstance(date_raw, datetime):
        date_raw = date_raw.date()
    if isinstance(time_raw, datetime):
        time_raw = time_raw.time()
    if isinstance(date_raw, date) and isinstance(time_raw, time):
        return datetime.combine(date_raw, time_raw)
    if isinstance(date_raw, date):
        date_raw = date_raw.strftime('%Y-%m-%d')
    if isinstance(time_raw, time):
        time_raw = time_raw.strftime('%H:%M:%S')
    return f"{str(date_raw).strip()} {str(time_raw).strip()}"


def _cell(row, idx):
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def parse_punch_workbook(source) -> list[RawRecord]:
    """Parse a time-clock export and return its rows as RawRecord objects.

    `source` is a path or a binary file object. The header row is searched
    in the first rows of the active sheet; the timestamp may be a single
    Data/Hora column or separate Data and Hora columns. Timestamps are left
    raw for the normalizer.
    """
    wb = load_workbook(source, read_only=True, data_only=True)
    try:
        ws = wb.active
        header_row, headers = _find_header(ws.iter_rows(min_row=1, max_row=HEADER_SEARCH_ROWS, values_only=True))
        if header_row is None:
            raise MissingColumnsError("Could not find header row with person and date/time columns")

        col_map = {}
        for i, val in enumerate(headers):
            if val:
                col_map.setdefault(val.lower(), i)

        person_col = _find(col_map, PERSON_HEADERS)
        datetime_col = _find(col_map, DATETIME_HEADERS)
        date_col = _find(col_map, DATE_HEADERS)
        time_col = _find(col_map, TIME_HEADERS)
        group_col = _find(col_map, GROUP_HEADERS)
        tax_col = _find(col_map, TAX_ID_HEADERS)
        category_col = _find(col_map, CATEGORY_HEADERS)

        if person_col is None or (datetime_col is None and (date_col is None or time_col is None)):
            raise MissingColumnsError(f"Missing required columns. Found: {[h for h in headers if h]}")

        known = {person_col, datetime_col, date_col, time_col, group_col, tax_col, category_col}
        if datetime_col is not None:
            # date/time columns next to a combined one are plain extras
            known -= {date_col, time_col}
            known.add(datetime_col)

        records = []
        for row_idx, row in enumerate(ws.iter_rows(min_row=header_row + 1, values_only=True), start=header_row + 1):
            if all(v is None or str(v).strip() == '' for v in row):
                continue

            if datetime_col is not None:
                timestamp = _cell(row, datetime_col)
            else:
                timestamp = _combine(_cell(row, date_col), _cell(row, time_col))

            extra = {
                headers[i]: value
                for i, value in enumerate(row)
                if i < len(headers) and headers[i] and i not in known and value is not None
            }
            records.append(RawRecord(
                row=row_idx,
                person=_cell(row, person_col),
                timestamp=timestamp,
                group=_cell(row, group_col),
                tax_id=str(_cell(row, tax_col) or '').strip(),
                category=str(_cell(row, category_col) or '').strip(),
                extra=extra,
            ))
    finally:
        wb.close()

    logger.info("Parsed %d punch rows", len(records))
    return records


def read_table(source) -> list[dict]:
    """Read the active sheet as a list of dicts keyed by the first non-empty row."""
    wb = load_workbook(source, read_only=True, data_only=True)
    try:
        ws = wb.active
        headers = None
        rows = []
        for row in ws.iter_rows(values_only=True):
            if headers is None:
                if any(v is not None and str(v).strip() for v in row):
                    headers = [str(v).strip() if v is not None else '' for v in row]
                continue
            if all(v is None or str(v).strip() == '' for v in row):
                continue
            rows.append({h: row[i] if i < len(row) else None for i, h in enumerate(headers) if h})
    finally:
        wb.close()
    return rows
