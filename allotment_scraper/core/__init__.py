"""Core components: session state, browser navigator, schemas and errors."""

from allotment_scraper.core.errors import ScraperError, NavigationError, WaitTimeoutError, ExtractionError
from allotment_scraper.core.schemas import Option, AllotmentRecord, LeafResult, Abandonment, CrawlReport
from allotment_scraper.core.state import SessionState
from allotment_scraper.core.navigator import FormNavigator

__all__ = [
    "ScraperError",
    "NavigationError",
    "WaitTimeoutError",
    "ExtractionError",
    "Option",
    "AllotmentRecord",
    "LeafResult",
    "Abandonment",
    "CrawlReport",
    "SessionState",
    "FormNavigator",
]
