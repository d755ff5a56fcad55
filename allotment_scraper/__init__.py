"""
Allotment Scraper - Crawls the cascading college/branch allotment form.

Core workflow: gateway page -> allotment form -> every (college, branch)
pair -> results table -> one CSV per pair with allotments.
"""

from allotment_scraper.config import CrawlSettings, load_settings
from allotment_scraper.core.navigator import FormNavigator
from allotment_scraper.crawl.orchestrator import CrawlOrchestrator, crawl
from allotment_scraper.output.storage import CsvStorage


__version__ = "1.0.0"
__all__ = ["CrawlSettings", "load_settings", "FormNavigator", "CrawlOrchestrator", "crawl", "CsvStorage"]
