"""
Command line entry point.

    allotment-scraper --output "2025 phase 2 data" --headed

Runs one full crawl, writes a CSV per (college, branch) that has allotments
and a crawl_summary.json beside them.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from allotment_scraper.config import CrawlSettings, load_settings
from allotment_scraper.core.errors import ScraperError
from allotment_scraper.core.navigator import FormNavigator
from allotment_scraper.core.schemas import CrawlReport
from allotment_scraper.crawl.orchestrator import crawl
from allotment_scraper.output.storage import CsvStorage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="allotment-scraper",
        description="Download allotment results for every college and branch.",
    )
    parser.add_argument("--url", dest="target_url", help="Gateway page of the allotment site")
    parser.add_argument("--output", dest="output_dir", help="Base directory for the CSV files")
    parser.add_argument(
        "--headed",
        dest="headless",
        action="store_false",
        default=None,
        help="Show the browser window instead of running headless",
    )
    parser.add_argument("--navigation-timeout", dest="navigation_timeout_ms", type=int, help="Page settle timeout (ms)")
    parser.add_argument("--element-timeout", dest="element_timeout_ms", type=int, help="Element wait timeout (ms)")
    parser.add_argument(
        "--results-timeout",
        dest="results_timeout_ms",
        type=int,
        help="How long to wait for the results table after submitting (ms)",
    )
    parser.add_argument("--no-summary", action="store_true", help="Do not write crawl_summary.json")
    return parser


async def run_crawl(settings: CrawlSettings, write_summary: bool = True) -> CrawlReport:
    storage = CsvStorage(settings.output_dir)
    async with FormNavigator(settings) as navigator:
        report = await crawl(navigator, storage, settings.selectors.results_table)
    if write_summary:
        path = storage.save_summary(report)
        print(f"📄 Summary written to {path}")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings(
            target_url=args.target_url,
            output_dir=args.output_dir,
            headless=args.headless,
            navigation_timeout_ms=args.navigation_timeout_ms,
            element_timeout_ms=args.element_timeout_ms,
            results_timeout_ms=args.results_timeout_ms,
        )
    except ValueError as e:
        # pydantic's ValidationError is a ValueError too
        parser.error(f"invalid settings: {e}")

    print(f"🚀 Starting the scraper (output: {settings.output_dir})")
    try:
        report = asyncio.run(run_crawl(settings, write_summary=not args.no_summary))
    except ScraperError as e:
        print(f"❌ Crawl aborted: {e}", file=sys.stderr)
        return 1

    print(
        f"🎉 Done: {report.files_written} files, {report.empty_leaves} empty, "
        f"{report.failed_leaves} failed, {len(report.abandoned)} colleges abandoned"
    )
    for leaf in report.leaves:
        if leaf.status == "FAILED":
            print(f"   ❌ {leaf.key}: {leaf.reason}")
    for abandoned in report.abandoned:
        print(f"   ⚠️ {abandoned.top.label}: {abandoned.reason}")
    return 0
