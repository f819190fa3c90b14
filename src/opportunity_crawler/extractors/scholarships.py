from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from opportunity_crawler.models import DEFAULT_DEADLINE, Opportunity, OpportunityKind
from opportunity_crawler.utils.text import contains_phrase, normalize_whitespace
from opportunity_crawler.utils.url_utils import resolve_url

from .base import ExtractorKind
from .registry import register_extractor

logger = logging.getLogger(__name__)

ACCORDION_CATEGORY = "Central/State Scheme (NSP)"
ACCORDION_DESCRIPTION = "Please visit the portal for detailed eligibility."
ACCORDION_ROW_SELECTOR = ".accordion-body .row.mb-4.border-1.border-bottom"
TABLE_CATEGORY = "J&K Social Welfare Department"
TABLE_DESCRIPTION = "Social Welfare Scheme"
TABLE_AMOUNT = "Varies"
TABLE_HEADER_SENTINEL = "name of scheme"
HEADINGS_CATEGORY = "J&K Tribal Affairs"
HEADINGS_DESCRIPTION = "Tribal Scholarship Scheme"
LINKS_CATEGORY = "J&K Higher Education"
LINKS_DESCRIPTION = "Higher Education Scholarship"

_DEADLINE_MARKERS = ("Closed on", "Open till")
_OPEN_DATE_MARKER = "Open from"
_KEYWORD = "scholarship"


@register_extractor(ExtractorKind.ACCORDION)
def extract_accordion(
    soup: BeautifulSoup,
    source_url: str,
    *,
    category: str | None = None,
) -> list[Opportunity]:
    """Read portals that group schemes into per-ministry accordion sections.

    The section button text becomes the category; each scheme row carries
    its title in an ``h6`` and its application window in loose ``span``
    labels. Repeated titles on the same page are emitted once.
    """
    schemes: list[Opportunity] = []
    seen_names: set[str] = set()

    for section in soup.select(".accordion-item"):
        button = section.select_one(".accordion-button")
        section_label = normalize_whitespace(button.get_text()) if button else ""

        for row in section.select(ACCORDION_ROW_SELECTOR):
            title = normalize_whitespace(" ".join(heading.get_text() for heading in row.find_all("h6")))
            if not title or title in seen_names:
                continue

            deadline, open_date = _scan_date_labels(row)
            seen_names.add(title)
            schemes.append(
                Opportunity.create(
                    name=title,
                    kind=OpportunityKind.SCHOLARSHIP,
                    category=section_label or category or ACCORDION_CATEGORY,
                    source_url=source_url,
                    description=ACCORDION_DESCRIPTION,
                    deadline=deadline,
                    open_date=open_date,
                )
            )

    return schemes


def _scan_date_labels(row: Tag) -> tuple[str, str | None]:
    deadline = DEFAULT_DEADLINE
    open_date = None
    for span in row.find_all("span"):
        text = span.get_text()
        if any(marker in text for marker in _DEADLINE_MARKERS):
            deadline = normalize_whitespace(text)
        if _OPEN_DATE_MARKER in text:
            open_date = normalize_whitespace(text)
    return deadline, open_date


@register_extractor(ExtractorKind.TABLE)
def extract_table(
    soup: BeautifulSoup,
    source_url: str,
    *,
    category: str | None = None,
) -> list[Opportunity]:
    schemes: list[Opportunity] = []
    for row in soup.select("table tr"):
        cells = row.find_all("td")
        if len(cells) < 2:
            continue

        name = normalize_whitespace(cells[1].get_text())
        if not name or contains_phrase(name, TABLE_HEADER_SENTINEL):
            continue

        details = normalize_whitespace(cells[2].get_text()) if len(cells) > 2 else ""
        schemes.append(
            Opportunity.create(
                name=name,
                kind=OpportunityKind.SCHOLARSHIP,
                category=category or TABLE_CATEGORY,
                source_url=source_url,
                description=details or TABLE_DESCRIPTION,
                amount=TABLE_AMOUNT,
            )
        )
    return schemes


@register_extractor(ExtractorKind.HEADINGS)
def extract_headings(
    soup: BeautifulSoup,
    source_url: str,
    *,
    category: str | None = None,
) -> list[Opportunity]:
    schemes: list[Opportunity] = []
    for heading in soup.select("h3, h4"):
        title = normalize_whitespace(heading.get_text())
        if not contains_phrase(title, _KEYWORD):
            continue

        # Only an immediately adjacent paragraph describes the heading.
        sibling = heading.find_next_sibling()
        summary = ""
        if sibling is not None and sibling.name == "p":
            summary = normalize_whitespace(sibling.get_text())

        schemes.append(
            Opportunity.create(
                name=title,
                kind=OpportunityKind.SCHOLARSHIP,
                category=category or HEADINGS_CATEGORY,
                source_url=source_url,
                description=summary or HEADINGS_DESCRIPTION,
            )
        )
    return schemes


@register_extractor(ExtractorKind.LINKS)
def extract_links(
    soup: BeautifulSoup,
    source_url: str,
    *,
    category: str | None = None,
) -> list[Opportunity]:
    # Repeated links produce repeated records; storage keys collapse them.
    schemes: list[Opportunity] = []
    for anchor in soup.find_all("a"):
        text = normalize_whitespace(anchor.get_text())
        if not contains_phrase(text, _KEYWORD):
            continue

        schemes.append(
            Opportunity.create(
                name=text,
                kind=OpportunityKind.SCHOLARSHIP,
                category=category or LINKS_CATEGORY,
                source_url=resolve_url(anchor.get("href"), source_url),
                description=LINKS_DESCRIPTION,
            )
        )

    logger.debug("Link scan on %s matched %d anchors", source_url, len(schemes))
    return schemes
