from __future__ import annotations

import requests

from opportunity_crawler.config import BrowserSettings

from .base import NavigationError, PageFetcher, PageSession


class RequestsSession(PageSession):
    """Static HTML only; pages that render client-side come back sparse."""

    def __init__(self, session: requests.Session, timeout_seconds: float) -> None:
        self._session = session
        self.timeout_seconds = timeout_seconds
        self._html = ""

    def navigate(self, url: str) -> None:
        try:
            response = self._session.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise NavigationError(f"request to {url} failed: {exc}") from exc
        self._html = response.text

    def settle(self, seconds: float) -> None:
        return None

    def content(self) -> str:
        return self._html

    def close(self) -> None:
        self._session.close()


class RequestsFetcher(PageFetcher):
    def __init__(self, settings: BrowserSettings) -> None:
        self.settings = settings

    def open_session(self) -> PageSession:
        session = requests.Session()
        session.headers.update(
            {
                "User-Agent": self.settings.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            }
        )
        return RequestsSession(session, timeout_seconds=self.settings.navigation_timeout_ms / 1000)
