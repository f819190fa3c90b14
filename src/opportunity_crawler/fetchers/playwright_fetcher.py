from __future__ import annotations

import logging

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError

from opportunity_crawler.config import BrowserSettings

from .base import NavigationError, PageFetcher, PageSession

logger = logging.getLogger(__name__)

_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class PlaywrightSession(PageSession):
    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
        navigation_timeout_ms: int,
    ) -> None:
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page = page
        self.navigation_timeout_ms = navigation_timeout_ms

    def navigate(self, url: str) -> None:
        try:
            self._page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.navigation_timeout_ms,
            )
        except PlaywrightError as exc:
            raise NavigationError(f"navigation to {url} failed: {exc}") from exc

    def settle(self, seconds: float) -> None:
        if seconds > 0:
            self._page.wait_for_timeout(seconds * 1000)

    def content(self) -> str:
        return self._page.content()

    def close(self) -> None:
        try:
            self._context.close()
            self._browser.close()
        except PlaywrightError as exc:
            logger.warning("Error while closing browser: %s", exc)
        finally:
            self._playwright.stop()


class PlaywrightFetcher(PageFetcher):
    """Headless Chromium; renders client-side content before capture."""

    def __init__(self, settings: BrowserSettings) -> None:
        self.settings = settings

    def open_session(self) -> PageSession:
        playwright = sync_playwright().start()
        try:
            browser = playwright.chromium.launch(
                headless=self.settings.headless,
                args=_LAUNCH_ARGS,
            )
            context = browser.new_context(user_agent=self.settings.user_agent)
            page = context.new_page()
        except Exception:
            playwright.stop()
            raise

        logger.debug("Opened headless browser session")
        return PlaywrightSession(
            playwright,
            browser,
            context,
            page,
            navigation_timeout_ms=self.settings.navigation_timeout_ms,
        )
