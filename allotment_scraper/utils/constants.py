"""
Constants module - All configuration constants for the Allotment Scraper.

Centralizes:
- Gateway URL and browser identity
- Form / results selectors for the allotment site
- Placeholder values for each dropdown
- Default timeouts
"""

from typing import List

# ============================================================================
# SITE
# ============================================================================

# Direct access to the form page is sometimes denied, so the crawl starts at
# the home page and follows the allotment link from there.
TARGET_URL = "https://tgeapcet.nic.in/default.aspx"

# Mobile Chrome identity; the site serves the same form to headless sessions
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 10; K) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/130.0.0.0 Mobile Safari/537.3"
)

DEFAULT_OUTPUT_DIR = "2025 phase 2 data"
SUMMARY_FILENAME = "crawl_summary.json"

# ============================================================================
# DOM CONTRACT
# ============================================================================

COLLEGE_SELECTOR = "#MainContent_DropDownList1"
BRANCH_SELECTOR = "#MainContent_DropDownList2"
SUBMIT_BUTTON_SELECTOR = "#MainContent_btn_allot"
RESULTS_TABLE_SELECTOR = "table.sortable"
ALLOTMENT_LINK_SELECTOR = "a[href$='college_allotment.aspx']"

# "--Select--" entries. The two dropdowns use different sentinel values.
COLLEGE_PLACEHOLDER_VALUE = ""
BRANCH_PLACEHOLDER_VALUE = "0"

# ============================================================================
# RECORD LAYOUT
# ============================================================================

# Column order of the results table, also the CSV header
RECORD_FIELDS: List[str] = [
    "sno",
    "hallticketno",
    "rank",
    "name",
    "sex",
    "caste",
    "region",
    "seatcategory",
]
INTEGER_FIELDS = frozenset({"sno", "rank"})

CSV_DELIMITER = ","

# ============================================================================
# TIMEOUTS (in milliseconds)
# ============================================================================

DEFAULT_NAVIGATION_TIMEOUT = 60000
DEFAULT_ELEMENT_TIMEOUT = 30000
DEFAULT_RESULTS_TIMEOUT = 5000
