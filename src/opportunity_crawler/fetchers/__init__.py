"""Page fetchers and retrying navigation."""

from .base import NavigationError, PageFetcher, PageSession
from .playwright_fetcher import PlaywrightFetcher
from .requests_fetcher import RequestsFetcher
from .retry import fetch_with_retry

__all__ = [
    "NavigationError",
    "PageFetcher",
    "PageSession",
    "PlaywrightFetcher",
    "RequestsFetcher",
    "fetch_with_retry",
]
