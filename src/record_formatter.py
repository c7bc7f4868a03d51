from dateutil import parser as date_parser

from src.models import MeasurementRecord

# Sheet column order: date, weight, body fat, body water, muscle
COLUMNS = ("date", "weight", "body_fat", "body_water", "body_muscle")
HISTORY_LABELS = ("weight", "body_fat", "body_water", "muscle")
MISSING_CELL = "-"
MIN_POPULATED_CELLS = 2

def _optional_cell(value):
    return "" if value is None else value

def to_sheet_row(record):
    """
    Builds the row appended to the sheet for a record.

    Always returns exactly one cell per column; absent values are empty
    strings so later columns stay aligned.
    """
    return [
        record.date.isoformat(),
        record.weight,
        _optional_cell(record.body_fat),
        _optional_cell(record.body_water),
        _optional_cell(record.body_muscle),
    ]

def _is_blank(cell):
    return cell is None or (isinstance(cell, str) and not cell.strip())

def _cell_number(cell):
    if _is_blank(cell):
        return None
    return float(cell)

def from_sheet_row(row):
    """
    Rebuilds a MeasurementRecord from a stored row (same column order as to_sheet_row).

    Raises:
        ValueError: If the date or weight cell is missing or unreadable.
    """
    cells = list(row) + [""] * (len(COLUMNS) - len(row))
    if _is_blank(cells[0]) or _is_blank(cells[1]):
        raise ValueError(f"Row has no date or weight: {row!r}")

    return MeasurementRecord(
        date=date_parser.parse(str(cells[0])).date(),
        weight=float(cells[1]),
        body_fat=_cell_number(cells[2]),
        body_water=_cell_number(cells[3]),
        body_muscle=_cell_number(cells[4]),
    )

def _display_cell(row, index):
    if index >= len(row) or _is_blank(row[index]):
        return MISSING_CELL
    cell = row[index]
    return cell if isinstance(cell, str) else str(cell)

def format_history_line(row):
    """
    Formats one stored row for the history reply.

    Returns None for rows with fewer than two populated cells.
    """
    populated = sum(1 for cell in row if not _is_blank(cell))
    if populated < MIN_POPULATED_CELLS:
        return None

    values = ", ".join(
        f"{label}={_display_cell(row, index)}"
        for index, label in enumerate(HISTORY_LABELS, start=1)
    )
    return f"{_display_cell(row, 0)}: {values}"

def format_history(rows):
    """Formats stored rows into reply lines, skipping incomplete rows."""
    lines = []
    for row in rows:
        line = format_history_line(row)
        if line is not None:
            lines.append(line)
    return lines

def format_record_summary(record):
    """One-line description of a record for logs."""
    return (
        f"{record.date.isoformat()}, weight={record.weight:.2f}, "
        f"body_fat={record.body_fat}, body_water={record.body_water}, "
        f"body_muscle={record.body_muscle}"
    )
