"""
Crawl orchestrator - Walks every (college, branch) pair of the allotment form.

Per crawl:
    open entry point -> list colleges ->
        for each college: select it, list branches ->
            for each branch: run leaf -> recover

A leaf ends as RECORDS (CSV written), EMPTY (no rows, nothing written) or
FAILED (navigation or extraction error). Recovery goes back to the form; if
that fails, the rest of the current college's branches are abandoned and the
crawl moves on to the next college.
"""

import datetime
from typing import Optional

from allotment_scraper.core.errors import ExtractionError, NavigationError
from allotment_scraper.core.navigator import FormNavigator
from allotment_scraper.core.schemas import Abandonment, CrawlReport, LeafResult, Option
from allotment_scraper.crawl.extraction import extract_records
from allotment_scraper.output.serializer import records_to_csv
from allotment_scraper.output.storage import CsvStorage
from allotment_scraper.utils.constants import RESULTS_TABLE_SELECTOR
from allotment_scraper.utils.helpers import StructuredLogger


def _now() -> str:
    return datetime.datetime.now().isoformat(timespec="seconds")


class CrawlOrchestrator:
    """
    Drives a FormNavigator over the full college x branch space.

    Strictly sequential: a leaf is finished (including the way back to the
    form) before the next one starts.
    """

    def __init__(
        self,
        navigator: FormNavigator,
        storage: CsvStorage,
        results_table_selector: str = RESULTS_TABLE_SELECTOR,
    ):
        self.navigator = navigator
        self.storage = storage
        self.results_table_selector = results_table_selector
        self.log = StructuredLogger("Crawler")

    async def run(self) -> CrawlReport:
        """
        Crawl everything once.

        Raises:
            NavigationError: The form could not be reached or its colleges
                could not be listed, so there is nothing to crawl.
            OSError: An output file could not be written.
        """
        report = CrawlReport(started_at=_now())
        self.log.info("Starting allotment crawl")

        try:
            await self.navigator.open_entry_point()
            colleges = await self.navigator.list_top_level_options()
            report.top_level_options = colleges

            for college in colleges:
                await self._crawl_college(college, report)

            self.log.success(
                f"Crawl complete: {report.leaves_attempted} branches attempted, "
                f"{report.files_written} files written, {report.empty_leaves} empty, "
                f"{report.failed_leaves} failed, {len(report.abandoned)} colleges abandoned"
            )
        finally:
            report.finished_at = _now()
            report.logs = list(self.log.get_logs())
        return report

    async def _crawl_college(self, college: Option, report: CrawlReport) -> None:
        self.log.info(f"Processing college: {college.label} (Code: {college.value})")

        try:
            await self.navigator.select_top_level(college.value)
            branches = await self.navigator.list_second_level_options()
        except NavigationError as e:
            self.log.error(f"Could not list branches for {college.label}; skipping college. Error: {e}")
            report.abandoned.append(Abandonment(top=college, reason=str(e)))
            return

        for index, branch in enumerate(branches):
            report.leaves.append(await self._run_leaf(college, branch))

            if not await self._recover(college, branch):
                remaining = [b.label for b in branches[index + 1:]]
                self.log.error(
                    f"Abandoning {len(remaining)} remaining branches of {college.label} "
                    "after failing to return to the form"
                )
                report.abandoned.append(
                    Abandonment(
                        top=college,
                        reason=f"Could not return to the form after {branch.label}",
                        skipped=remaining,
                    )
                )
                return

    async def _run_leaf(self, college: Option, branch: Option) -> LeafResult:
        key = f"{college.label} -> {branch.label}"
        self.log.info(f"  Fetching data for branch: {branch.label}")

        try:
            await self.navigator.submit_leaf(college.value, branch.value)
        except NavigationError as e:
            self.log.error(f"  Could not fetch data for {key}. Skipping. Error: {e}")
            return LeafResult(top=college, second=branch, status="FAILED", reason=str(e))

        try:
            html = await self.navigator.results_html()
            records = extract_records(html, self.results_table_selector)
        except ExtractionError as e:
            self.log.error(f"  Could not read results for {key}. Skipping. Error: {e}")
            return LeafResult(top=college, second=branch, status="FAILED", reason=str(e))

        self.log.info(f"  Scraped {len(records)} records for {branch.label}")
        if not records:
            self.log.info(f"  No data found for {branch.label}. Skipping file creation.")
            return LeafResult(top=college, second=branch, status="EMPTY")

        path = self.storage.save(college.label, branch.label, records_to_csv(records))
        self.log.success(f"  Data saved to {path}")
        return LeafResult(
            top=college,
            second=branch,
            status="RECORDS",
            record_count=len(records),
            output_path=str(path),
        )

    async def _recover(self, college: Option, branch: Option) -> bool:
        """Return to the selection form; False if the session looks stuck."""
        try:
            await self.navigator.return_to_form()
            return True
        except NavigationError as e:
            self.log.error(f"  Failed to go back after {college.label} -> {branch.label}, potentially stuck: {e}")
            return False


async def crawl(navigator: FormNavigator, storage: CsvStorage, results_table_selector: Optional[str] = None) -> CrawlReport:
    """Convenience wrapper: one orchestrated crawl with the given collaborators."""
    orchestrator = CrawlOrchestrator(
        navigator,
        storage,
        results_table_selector=results_table_selector or RESULTS_TABLE_SELECTOR,
    )
    return await orchestrator.run()
