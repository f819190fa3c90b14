from __future__ import annotations

import pytest

from opportunity_crawler.config import TargetSettings
from opportunity_crawler.extractors import ExtractorKind
from opportunity_crawler.fetchers import NavigationError, PageFetcher, PageSession
from opportunity_crawler.service import CrawlService

TABLE_HTML = """
<table>
  <tr><td>#</td><td>Name of Scheme</td><td>Details</td></tr>
  <tr><td>1</td><td>Widow Pension</td><td>Monthly support</td></tr>
</table>
"""
HEADINGS_HTML = "<h3>Merit Scholarship</h3><p>For toppers.</p>"


class StaticSession(PageSession):
    def __init__(self, pages: dict[str, str], failing: set[str]) -> None:
        self.pages = pages
        self.failing = failing
        self.navigations: list[str] = []
        self.settled: list[float] = []
        self.closed = False
        self._current = ""

    def navigate(self, url: str) -> None:
        self.navigations.append(url)
        if url in self.failing:
            raise NavigationError(f"net::ERR_CONNECTION_TIMED_OUT at {url}")
        self._current = self.pages[url]

    def settle(self, seconds: float) -> None:
        self.settled.append(seconds)

    def content(self) -> str:
        return self._current

    def close(self) -> None:
        self.closed = True


class StaticFetcher(PageFetcher):
    def __init__(self, session: StaticSession) -> None:
        self.session = session
        self.opened = 0

    def open_session(self) -> PageSession:
        self.opened += 1
        return self.session


def _service(session: StaticSession, targets: list[TargetSettings]) -> CrawlService:
    return CrawlService(
        targets=targets,
        fetcher=StaticFetcher(session),
        settle_delay=5.0,
        sleep=lambda _: None,
    )


def test_failed_site_contributes_nothing_and_later_sites_still_run() -> None:
    down = TargetSettings(name="Down Portal", url="https://down.gov.in", extractor=ExtractorKind.ACCORDION)
    welfare = TargetSettings(name="JK Social Welfare", url="https://jkdswd.nic.in", extractor=ExtractorKind.TABLE)
    tribal = TargetSettings(name="JK Tribal Affairs", url="https://tribal.jk.gov.in", extractor=ExtractorKind.HEADINGS)
    session = StaticSession(
        pages={welfare.url: TABLE_HTML, tribal.url: HEADINGS_HTML},
        failing={down.url},
    )

    result = _service(session, [down, welfare, tribal]).crawl()

    assert [record.name for record in result.records] == ["Widow Pension", "Merit Scholarship"]
    assert session.navigations == [down.url, down.url, down.url, welfare.url, tribal.url]
    assert session.settled == [5.0, 5.0]
    assert session.closed
    assert result.per_target == {"Down Portal": 0, "JK Social Welfare": 1, "JK Tribal Affairs": 1}
    assert not result.ok
    assert len(result.errors) == 1
    assert "Down Portal" in result.errors[0]


def test_extractor_error_is_isolated_to_its_site(monkeypatch: pytest.MonkeyPatch) -> None:
    from opportunity_crawler import service as service_module

    real_get_extractor = service_module.get_extractor

    def _broken(soup, source_url, *, category=None):
        raise AttributeError("'NoneType' object has no attribute 'get_text'")

    def _get_extractor(kind: ExtractorKind):
        if kind is ExtractorKind.LINKS:
            return _broken
        return real_get_extractor(kind)

    monkeypatch.setattr(service_module, "get_extractor", _get_extractor)

    broken = TargetSettings(name="Higher Ed", url="https://he.jk.gov.in", extractor=ExtractorKind.LINKS)
    welfare = TargetSettings(name="JK Social Welfare", url="https://jkdswd.nic.in", extractor=ExtractorKind.TABLE)
    session = StaticSession(pages={broken.url: "<a>x</a>", welfare.url: TABLE_HTML}, failing=set())

    result = _service(session, [broken, welfare]).crawl()

    assert [record.name for record in result.records] == ["Widow Pension"]
    assert len(result.errors) == 1
    assert "Higher Ed extraction failed" in result.errors[0]


def test_empty_page_is_not_an_error() -> None:
    target = TargetSettings(name="Empty", url="https://empty.gov.in", extractor=ExtractorKind.TABLE)
    session = StaticSession(pages={target.url: "<html><body></body></html>"}, failing=set())

    result = _service(session, [target]).crawl()

    assert result.records == []
    assert result.ok
    assert result.per_target == {"Empty": 0}


class BrokenFetcher(PageFetcher):
    def open_session(self) -> PageSession:
        raise RuntimeError("Executable doesn't exist at /ms-playwright/chromium")


def test_browser_launch_failure_yields_empty_failed_crawl() -> None:
    target = TargetSettings(name="Any", url="https://any.gov.in", extractor=ExtractorKind.TABLE)
    service = CrawlService(targets=[target], fetcher=BrokenFetcher(), sleep=lambda _: None)

    result = service.crawl()

    assert result.records == []
    assert not result.ok
    assert "could not open page session" in result.errors[0]
