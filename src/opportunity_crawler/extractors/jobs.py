from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag

from opportunity_crawler.models import DEFAULT_DEADLINE, Opportunity, OpportunityKind
from opportunity_crawler.utils.text import normalize_whitespace
from opportunity_crawler.utils.url_utils import resolve_url

from .base import ExtractorKind
from .registry import register_extractor

logger = logging.getLogger(__name__)

JOB_CATEGORY = "Government Recruitment"
JOB_DESCRIPTION = "See listing for details"
MIN_LINK_TEXT_LENGTH = 3

# Tried in order; only the first selector that matches any element is used.
JOB_CARD_SELECTORS = [
    ".job-card",
    ".job-listing",
    ".job-item",
    ".vacancy",
    ".vacancy-item",
    ".career-item",
    "ul.jobs li",
    ".jobs-list li",
    ".card",
]

_TITLE_SELECTORS = [".job-title", ".title", ".position", "h2", "h3", "h4", "h5"]
_COMPANY_SELECTORS = [".company", ".company-name", ".employer", ".department", ".organisation"]
_LOCATION_SELECTORS = [".location", ".job-location", ".place"]
_DEADLINE_SELECTORS = [".deadline", ".last-date", ".closing-date"]
_JOB_KEYWORDS = re.compile(r"job|opening|vacanc", re.IGNORECASE)


@register_extractor(ExtractorKind.JOB_LISTINGS)
def extract_job_listings(
    soup: BeautifulSoup,
    source_url: str,
    *,
    category: str | None = None,
) -> list[Opportunity]:
    """Read a recruitment page whose markup is not known in advance.

    Structured job cards are preferred. The first card selector that matches
    anything is the only one used; when its cards yield no record the crude
    anchor scan runs instead.
    """
    for selector in JOB_CARD_SELECTORS:
        elements = soup.select(selector)
        if not elements:
            continue

        jobs = _extract_cards(elements, source_url, category=category)
        logger.info(
            "Job cards matched selector %r on %s (%d records)",
            selector,
            source_url,
            len(jobs),
        )
        if jobs:
            return jobs
        break

    jobs = _scan_job_links(soup, source_url, category=category)
    logger.info("No usable job cards on %s; link scan found %d records", source_url, len(jobs))
    return jobs


def _extract_cards(
    elements: list[Tag],
    source_url: str,
    *,
    category: str | None,
) -> list[Opportunity]:
    jobs: list[Opportunity] = []
    seen_names: set[str] = set()

    for element in elements:
        title = _first_text(element, _TITLE_SELECTORS) or normalize_whitespace(element.get_text())
        if not title:
            continue

        company = _first_text(element, _COMPANY_SELECTORS)
        name = f"{title} at {company}" if company else title
        if name in seen_names:
            continue
        seen_names.add(name)

        link = element.find("a", href=True)
        if link is None and element.name == "a" and element.get("href"):
            link = element

        jobs.append(
            Opportunity.create(
                name=name,
                kind=OpportunityKind.JOB,
                category=company or category or JOB_CATEGORY,
                source_url=resolve_url(link.get("href") if link else None, source_url),
                description=_first_text(element, _LOCATION_SELECTORS) or JOB_DESCRIPTION,
                deadline=_first_text(element, _DEADLINE_SELECTORS) or DEFAULT_DEADLINE,
            )
        )

    return jobs


def _scan_job_links(
    soup: BeautifulSoup,
    source_url: str,
    *,
    category: str | None,
) -> list[Opportunity]:
    jobs: list[Opportunity] = []
    seen_names: set[str] = set()

    for anchor in soup.find_all("a"):
        text = normalize_whitespace(anchor.get_text())
        href = str(anchor.get("href") or "")
        if len(text) <= MIN_LINK_TEXT_LENGTH:
            continue
        if not (_JOB_KEYWORDS.search(text) or _JOB_KEYWORDS.search(href)):
            continue
        if text in seen_names:
            continue
        seen_names.add(text)

        jobs.append(
            Opportunity.create(
                name=text,
                kind=OpportunityKind.JOB,
                category=category or JOB_CATEGORY,
                source_url=resolve_url(href, source_url),
                description=JOB_DESCRIPTION,
            )
        )

    return jobs


def _first_text(element: Tag, selectors: list[str]) -> str:
    for selector in selectors:
        match = element.select_one(selector)
        if match is not None:
            text = normalize_whitespace(match.get_text())
            if text:
                return text
    return ""
