"""
CSV serialization of crawl records.

Every header cell is quoted, quote characters inside values are doubled, and a value
is wrapped in quotes only when it contains the delimiter or a newline. Rows
are joined with "\\n" and there is no trailing newline.
"""

from typing import Any, Iterator, List, Mapping, Sequence, Union

from pydantic import BaseModel

from allotment_scraper.core.schemas import AllotmentRecord
from allotment_scraper.utils.helpers import parse_int_cell
from allotment_scraper.utils.constants import CSV_DELIMITER, INTEGER_FIELDS

RecordLike = Union[BaseModel, Mapping[str, Any]]


def _as_dict(record: RecordLike) -> Mapping[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump()
    return record


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        escaped = value.replace('"', '""')
        if CSV_DELIMITER in escaped or "\n" in escaped:
            return f'"{escaped}"'
        return escaped
    return str(value)


def records_to_csv(records: Sequence[RecordLike]) -> str:
    """
    Convert records sharing one schema into CSV text.

    The header is taken from the first record's field names; every record is
    written in that field order. Order of rows is preserved as given.

    Args:
        records: Pydantic models or plain mappings

    Returns:
        CSV text, or "" when there are no records
    """
    if not records:
        return ""

    rows = [_as_dict(record) for record in records]
    headers = list(rows[0].keys())

    lines = [CSV_DELIMITER.join(f'"{header}"' for header in headers)]
    for row in rows:
        lines.append(CSV_DELIMITER.join(_format_value(row.get(header)) for header in headers))
    return "\n".join(lines)


def _split_rows(text: str) -> Iterator[List[str]]:
    """Tokenize text written by records_to_csv into rows of raw field strings."""
    row: List[str] = []
    field: List[str] = []
    quoted = False
    i = 0
    n = len(text)
    while i < n:
        char = text[i]
        if quoted:
            if char == '"':
                if i + 1 < n and text[i + 1] == '"':
                    field.append('"')
                    i += 1
                else:
                    quoted = False
            else:
                field.append(char)
        elif char == '"':
            if i + 1 < n and text[i + 1] == '"':
                # Doubled quote in a field that was not wrapped
                field.append('"')
                i += 1
            else:
                quoted = True
        elif char == CSV_DELIMITER:
            row.append("".join(field))
            field = []
        elif char == "\n":
            row.append("".join(field))
            yield row
            row, field = [], []
        else:
            field.append(char)
        i += 1
    row.append("".join(field))
    yield row


def csv_to_records(text: str) -> List[AllotmentRecord]:
    """
    Parse CSV text produced by records_to_csv back into records.

    Empty fields become None and the integer columns are converted back.
    """
    if not text:
        return []

    rows = _split_rows(text)
    headers = next(rows)
    records: List[AllotmentRecord] = []
    for raw in rows:
        values = {}
        for header, cell in zip(headers, raw):
            if cell == "":
                values[header] = None
            elif header in INTEGER_FIELDS:
                values[header] = parse_int_cell(cell)
            else:
                values[header] = cell
        records.append(AllotmentRecord(**values))
    return records
