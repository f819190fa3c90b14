from __future__ import annotations

from enum import Enum
from typing import Protocol

from bs4 import BeautifulSoup

from opportunity_crawler.models import Opportunity


class ExtractorKind(str, Enum):
    """Closed set of page layouts the crawler knows how to read."""

    ACCORDION = "accordion"
    TABLE = "table"
    HEADINGS = "headings"
    LINKS = "links"
    JOB_LISTINGS = "job_listings"


class ExtractionError(RuntimeError):
    """Raised when a page does not have the structure its extractor expects."""


class Extractor(Protocol):
    def __call__(
        self,
        soup: BeautifulSoup,
        source_url: str,
        *,
        category: str | None = None,
    ) -> list[Opportunity]:
        """Extract opportunity records from a parsed page."""
