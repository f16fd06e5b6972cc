import subprocess

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PWTimeout

from tests.fakes import LISTING_URL, FakeSession
from utils import browser
from utils.browser import PageLoadError, fetch_page, open_folder


def test_fetch_page_returns_snapshot():
    session = FakeSession()

    snapshot = fetch_page(LISTING_URL, session=session)

    assert session.calls == [LISTING_URL]
    assert snapshot.base_url == LISTING_URL
    assert snapshot.markup == f"data:{LISTING_URL}"


def test_fetch_page_http_error():
    with pytest.raises(PageLoadError):
        fetch_page(LISTING_URL, session=FakeSession(statuses={LISTING_URL: 503}))


def test_fetch_page_network_error():
    with pytest.raises(PageLoadError):
        fetch_page(LISTING_URL, session=FakeSession(errors=[LISTING_URL]))


def test_open_folder_failure_is_reported(workdir, monkeypatch):
    def fail(*args, **kwargs):
        raise subprocess.CalledProcessError(1, args[0])

    monkeypatch.setattr(browser.sys, "platform", "linux")
    monkeypatch.setattr(browser.subprocess, "run", fail)

    assert open_folder(workdir) is False


def test_open_folder_uses_platform_opener(workdir, monkeypatch):
    commands = []
    monkeypatch.setattr(browser.sys, "platform", "darwin")
    monkeypatch.setattr(browser.subprocess, "run", lambda cmd, **kwargs: commands.append(cmd))

    assert open_folder(workdir) is True
    assert commands == [["open", str(workdir)]]


class FakePage:
    def __init__(self, goto_error=None):
        self.goto_error = goto_error
        self.url = ""

    def goto(self, url, **kwargs):
        if self.goto_error:
            raise self.goto_error
        self.url = url + "#rendered"

    def wait_for_selector(self, selector, **kwargs):
        pass

    def wait_for_timeout(self, ms):
        pass

    def content(self):
        return "<html><body><div id='detailInfomation'></div></body></html>"

    def query_selector(self, selector):
        return None


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.closed = False

    def new_page(self):
        return self.page

    def close(self):
        self.closed = True


class FakePlaywright:
    """Stands in for sync_playwright(); launches a single FakeBrowser."""

    def __init__(self, browser=None, launch_error=None):
        self.browser = browser
        self.launch_error = launch_error
        self.chromium = self

    def __call__(self):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def launch(self, **kwargs):
        if self.launch_error:
            raise self.launch_error
        return self.browser


def test_load_listing_page_returns_rendered_snapshot(monkeypatch):
    fake_browser = FakeBrowser(FakePage())
    monkeypatch.setattr(browser, "sync_playwright", FakePlaywright(fake_browser))

    snapshot = browser.load_listing_page(LISTING_URL)

    assert snapshot.markup == FakePage().content()
    assert snapshot.base_url == LISTING_URL + "#rendered"
    assert fake_browser.closed


def test_load_listing_page_timeout_closes_browser(monkeypatch):
    fake_browser = FakeBrowser(FakePage(goto_error=PWTimeout("Timeout 60000ms exceeded")))
    monkeypatch.setattr(browser, "sync_playwright", FakePlaywright(fake_browser))

    with pytest.raises(PageLoadError, match="Timed out"):
        browser.load_listing_page(LISTING_URL)
    assert fake_browser.closed


def test_load_listing_page_missing_browser(monkeypatch):
    error = PlaywrightError("Executable doesn't exist")
    monkeypatch.setattr(browser, "sync_playwright", FakePlaywright(launch_error=error))

    with pytest.raises(PageLoadError, match="Executable doesn't exist"):
        browser.load_listing_page(LISTING_URL)
