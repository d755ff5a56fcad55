"""Crawl loop and results-table extraction."""

from allotment_scraper.crawl.extraction import extract_records
from allotment_scraper.crawl.orchestrator import CrawlOrchestrator, crawl

__all__ = ["extract_records", "CrawlOrchestrator", "crawl"]
