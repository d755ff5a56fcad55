"""
Form Navigator - Owns the Playwright session that drives the allotment form.

The site is a server-rendered ASP.NET form: choosing a college posts the page
back to populate the branch dropdown, and submitting renders the results on a
new history entry. Every state-changing step here waits for the network to go
idle (the settle event) within a bounded timeout, and records the resulting
selection in a SessionState that nothing else writes to.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from allotment_scraper.config import CrawlSettings
from allotment_scraper.core.errors import ExtractionError, NavigationError, WaitTimeoutError
from allotment_scraper.core.schemas import Option
from allotment_scraper.core.state import SessionState
from allotment_scraper.utils.helpers import StructuredLogger

_OPTIONS_SCRIPT = "el => Array.from(el.options).map(o => ({label: o.text, value: o.value}))"

_SETTLED = "networkidle"


class FormNavigator:
    """
    Browser wrapper exposing the cascading college -> branch form as a
    handful of blocking-until-settled operations.

    Usage:
        async with FormNavigator(settings) as nav:
            await nav.open_entry_point()
            colleges = await nav.list_top_level_options()
    """

    def __init__(self, settings: Optional[CrawlSettings] = None):
        self.settings = settings or CrawlSettings()
        self.selectors = self.settings.selectors
        self.state = SessionState()
        self.log = StructuredLogger("Navigator")
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._gateway: Optional[Page] = None
        self.page: Optional[Page] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def launch(self) -> None:
        """Start Playwright, launch Chromium and open the gateway tab."""
        if self._playwright:
            return
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.settings.headless)
        # User agent lives on the context so the tab opened by the
        # allotment link gets it too.
        self._context = await self._browser.new_context(user_agent=self.settings.user_agent)
        self._gateway = await self._context.new_page()
        self.log.info(f"Browser launched (headless={self.settings.headless})")

    async def close(self) -> None:
        """Close the browser; safe to call more than once."""
        try:
            if self._browser:
                await self._browser.close()
        except PlaywrightError as e:
            self.log.warning(f"Browser did not close cleanly: {e}")
        finally:
            try:
                if self._playwright:
                    await self._playwright.stop()
            except PlaywrightError as e:
                self.log.warning(f"Playwright did not stop cleanly: {e}")
            finally:
                self._playwright = None
                self._browser = None
                self._context = None
                self._gateway = None
                self.page = None
                self.state = SessionState()

    async def __aenter__(self) -> "FormNavigator":
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _bounded(self, action: str):
        """Translate Playwright failures inside the block into package errors."""
        try:
            yield
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(f"Timed out while trying to {action}: {e}") from e
        except PlaywrightError as e:
            raise NavigationError(f"Failed to {action}: {e}") from e

    def _form_page(self) -> Page:
        if self.page is None:
            raise NavigationError("Form page is not open; call open_entry_point() first")
        return self.page

    async def _read_options(self, selector: str, placeholder: str) -> List[Option]:
        page = self._form_page()
        async with self._bounded(f"read options of {selector}"):
            await page.wait_for_selector(selector, timeout=self.settings.element_timeout_ms)
            raw: List[Dict[str, Any]] = await page.eval_on_selector(selector, _OPTIONS_SCRIPT)
        return [
            Option(label=(item.get("label") or "").strip(), value=item.get("value") or "")
            for item in raw
            if (item.get("value") or "") != placeholder
        ]

    # ------------------------------------------------------------------
    # Form operations
    # ------------------------------------------------------------------

    async def open_entry_point(self) -> None:
        """
        Load the gateway page and follow the allotment link to the form.

        The link opens the form in a new tab, which becomes the working page.

        Raises:
            NavigationError: The link or the form did not materialize in time.
        """
        if self._gateway is None:
            await self.launch()

        url = self.settings.target_url
        nav_timeout = self.settings.navigation_timeout_ms
        element_timeout = self.settings.element_timeout_ms

        async with self._bounded(f"open {url}"):
            await self._gateway.goto(url, wait_until=_SETTLED, timeout=nav_timeout)
            self.state.view = "GATEWAY"
            self.log.info(f"Navigated to {url}")

            self.log.info("Waiting for the college allotment link...")
            await self._gateway.wait_for_selector(self.selectors.entry_link, timeout=element_timeout)

            async with self._context.expect_page(timeout=nav_timeout) as page_info:
                await self._gateway.click(self.selectors.entry_link)
            page = await page_info.value
            await page.wait_for_load_state(_SETTLED, timeout=nav_timeout)
            await page.wait_for_selector(self.selectors.top_level, timeout=element_timeout)

        self.page = page
        self.state.view = "FORM"
        self.state.forget_selection()
        self.log.success("Allotment form loaded")

    async def list_top_level_options(self) -> List[Option]:
        """Colleges currently offered, without the '--Select--' entry."""
        options = await self._read_options(self.selectors.top_level, self.selectors.top_placeholder)
        self.log.info(f"Found {len(options)} colleges")
        return options

    async def select_top_level(self, value: str) -> None:
        """
        Choose a college and wait for the postback that repopulates branches.

        Always performs the selection, even when the value looks active.
        """
        page = self._form_page()
        async with self._bounded(f"select college {value!r}"):
            async with page.expect_navigation(wait_until=_SETTLED, timeout=self.settings.navigation_timeout_ms):
                await page.select_option(self.selectors.top_level, value)
        self.state.view = "FORM"
        self.state.top = value
        self.state.second = None

    async def list_second_level_options(self) -> List[Option]:
        """Branches for the college selected last, without the '--Select--' entry."""
        if self.state.top is None:
            raise NavigationError("No college is selected; call select_top_level() first")
        options = await self._read_options(self.selectors.second_level, self.selectors.second_placeholder)
        self.log.info(f"Found {len(options)} branches for college {self.state.top!r}")
        return options

    async def submit_leaf(self, top_value: str, second_value: str) -> None:
        """
        Bring the form to (college, branch) and submit it.

        The college is re-selected first because going back from the previous
        results page does not reliably restore it.

        Raises:
            NavigationError: Any step did not settle as expected.
        """
        await self.select_top_level(top_value)

        page = self._form_page()
        nav_timeout = self.settings.navigation_timeout_ms
        async with self._bounded(f"submit branch {second_value!r} of college {top_value!r}"):
            await page.wait_for_selector(self.selectors.second_level, timeout=self.settings.element_timeout_ms)
            # Branch selection updates the form in place, no navigation
            await page.select_option(self.selectors.second_level, second_value)
            self.state.second = second_value
            async with page.expect_navigation(wait_until=_SETTLED, timeout=nav_timeout):
                await page.click(self.selectors.submit)
        self.state.view = "RESULTS"

        try:
            await page.wait_for_selector(
                self.selectors.results_table,
                state="attached",
                timeout=self.settings.results_timeout_ms,
            )
        except PlaywrightTimeoutError:
            # Settled page without a table means "no allotments"
            self.log.debug(f"No results table for {top_value!r}/{second_value!r}")
        except PlaywrightError as e:
            raise NavigationError(
                f"Results page for {top_value!r}/{second_value!r} became unusable: {e}"
            ) from e

    async def results_html(self) -> str:
        """
        HTML of the settled results page, for the table extractor.

        Raises:
            ExtractionError: The page content could not be read.
        """
        page = self._form_page()
        try:
            return await page.content()
        except PlaywrightError as e:
            raise ExtractionError(f"Could not read results page: {e}") from e

    async def return_to_form(self) -> None:
        """
        Go back one history entry and wait for the form to be usable again.

        Raises:
            NavigationError: The form did not come back in time.
        """
        page = self._form_page()
        async with self._bounded("go back to the selection form"):
            response = await page.go_back(wait_until=_SETTLED, timeout=self.settings.navigation_timeout_ms)
            if response is None:
                # Cached history entries come back without a response object
                self.log.debug("History navigation returned no response; checking for the form")
            await page.wait_for_selector(self.selectors.top_level, timeout=self.settings.element_timeout_ms)
        self.state.view = "FORM"
        self.state.forget_selection()
