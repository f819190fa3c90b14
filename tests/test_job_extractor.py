from __future__ import annotations

from bs4 import BeautifulSoup

from opportunity_crawler.extractors import extract_job_listings
from opportunity_crawler.models import OpportunityKind

SOURCE_URL = "https://recruitment.example.gov.in/careers"


def _extract(html: str, **kwargs: object) -> list:
    return extract_job_listings(BeautifulSoup(html, "html.parser"), SOURCE_URL, **kwargs)


def test_first_matching_card_selector_wins_and_link_scan_is_skipped() -> None:
    html = """
    <div class="job-card">
      <h3 class="job-title">Junior Assistant</h3>
      <span class="company">Revenue Department</span>
      <span class="location">Srinagar</span>
      <span class="last-date">Last date: 30-11-2026</span>
      <a href="/jobs/123">Apply</a>
    </div>
    <div class="job-card">
      <h3 class="job-title">Junior Assistant</h3>
      <span class="company">Revenue Department</span>
    </div>
    <div class="job-card">
      <h3 class="job-title">Naib Tehsildar</h3>
    </div>
    <div class="vacancy"><h3>Should not be read</h3></div>
    <a href="/notices">Latest Vacancies</a>
    """
    records = _extract(html)

    assert [record.name for record in records] == [
        "Junior Assistant at Revenue Department",
        "Naib Tehsildar",
    ]
    first, second = records
    assert first.kind is OpportunityKind.JOB
    assert first.category == "Revenue Department"
    assert first.description == "Srinagar"
    assert first.deadline == "Last date: 30-11-2026"
    assert first.source_url == "https://recruitment.example.gov.in/jobs/123"
    assert second.description == "See listing for details"
    assert second.category == "Government Recruitment"
    assert second.source_url == SOURCE_URL


def test_later_selector_is_used_when_earlier_ones_match_nothing() -> None:
    html = """
    <ul class="jobs">
      <li><a href="https://jobs.example.org/42">Lecturer Physics</a></li>
    </ul>
    """
    records = _extract(html, category="Higher Education Department")

    assert len(records) == 1
    assert records[0].name == "Lecturer Physics"
    assert records[0].category == "Higher Education Department"
    assert records[0].source_url == "https://jobs.example.org/42"


def test_link_scan_runs_when_no_card_selector_matches() -> None:
    html = """
    <a href="/files/notice.pdf">Vacancy notice 2026</a>
    <a href="/files/notice.pdf">Vacancy notice 2026</a>
    <a href="/jobs/55">Apply</a>
    <a href="/jobs/56">Job</a>
    <a href="/">Home</a>
    <a href="/openings">Current openings</a>
    """
    records = _extract(html)

    assert [record.name for record in records] == [
        "Vacancy notice 2026",
        "Apply",
        "Current openings",
    ]
    assert records[0].source_url == "https://recruitment.example.gov.in/files/notice.pdf"
    assert all(record.kind is OpportunityKind.JOB for record in records)


def test_link_scan_runs_when_cards_match_but_yield_no_records() -> None:
    html = """
    <div class="job-card">   </div>
    <a href="/recruitment">Recruitment for Constables</a>
    <a href="/vacancies">Vacancies</a>
    """
    records = _extract(html)

    assert [record.name for record in records] == ["Vacancies"]


def test_first_matching_selector_ends_card_search_even_when_empty() -> None:
    html = """
    <div class="job-card"> </div>
    <div class="vacancy"><h3>Clerk</h3></div>
    <a href="/openings">Current openings</a>
    """
    records = _extract(html)

    assert [record.name for record in records] == ["Current openings"]
    assert records[0].source_url == "https://recruitment.example.gov.in/openings"


def test_no_jobs_anywhere_yields_empty_list() -> None:
    assert _extract("<p>Nothing to see</p><a href='/about'>About us</a>") == []
