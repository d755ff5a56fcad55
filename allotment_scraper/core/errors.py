"""Exception hierarchy shared by the navigator, extractor and orchestrator."""


class ScraperError(Exception):
    """Base class for every error raised by the allotment scraper."""


class NavigationError(ScraperError):
    """A navigation or selection step did not reach the expected page state."""


class WaitTimeoutError(NavigationError):
    """A bounded wait for an element or a page settle was exceeded."""


class ExtractionError(ScraperError):
    """The results view was reached but could not be read."""
