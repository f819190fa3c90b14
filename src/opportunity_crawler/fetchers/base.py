from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType


class NavigationError(RuntimeError):
    """Raised when a page could not be loaded."""


class PageSession(ABC):
    """One open browsing session; pages are visited one at a time."""

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Load ``url``, raising NavigationError on failure."""

    @abstractmethod
    def settle(self, seconds: float) -> None:
        """Give client-side rendering time to populate the page."""

    @abstractmethod
    def content(self) -> str:
        """Return the current document as HTML."""

    @abstractmethod
    def close(self) -> None:
        """Release the session's resources."""

    def __enter__(self) -> PageSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


class PageFetcher(ABC):
    @abstractmethod
    def open_session(self) -> PageSession:
        """Start a session that can navigate to pages."""
