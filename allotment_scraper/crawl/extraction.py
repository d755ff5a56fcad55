"""
Table extraction - Turns a settled results page into AllotmentRecords.

Contains:
- extract_records: parse the results table of a page
"""

from typing import List

from bs4 import BeautifulSoup

from allotment_scraper.core.errors import ExtractionError
from allotment_scraper.core.schemas import AllotmentRecord
from allotment_scraper.utils.constants import INTEGER_FIELDS, RECORD_FIELDS, RESULTS_TABLE_SELECTOR
from allotment_scraper.utils.helpers import parse_int_cell


def extract_records(html: str, table_selector: str = RESULTS_TABLE_SELECTOR) -> List[AllotmentRecord]:
    """
    Parse the allotment table out of a results page.

    Row 0 is the header. A data row counts only if it has more than one <td>,
    which drops the decorative single-cell rows the site inserts. Cells are
    mapped to RECORD_FIELDS by position; missing trailing cells become None.

    Args:
        html: Full HTML of the settled results page
        table_selector: CSS selector of the results table

    Returns:
        Records in table order; empty when the page has no table or only a header

    Raises:
        ExtractionError: The page itself is empty, so it was not a results view
    """
    if not html or not html.strip():
        raise ExtractionError("Results page is empty")

    soup = BeautifulSoup(html, "lxml")
    if soup.body is None:
        raise ExtractionError("Results page has no <body>")

    table = soup.select_one(table_selector)
    if table is None:
        return []

    records: List[AllotmentRecord] = []
    for row in table.find_all("tr")[1:]:
        cells = row.find_all("td")
        if len(cells) <= 1:
            continue

        values = {}
        for index, field in enumerate(RECORD_FIELDS):
            text = cells[index].get_text(" ", strip=True) if index < len(cells) else None
            values[field] = parse_int_cell(text) if field in INTEGER_FIELDS else text
        records.append(AllotmentRecord(**values))

    return records
