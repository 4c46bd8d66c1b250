"""
Shared fixtures: an isolated working directory per test, a zero-wait backoff
and an in-memory stand-in for the async Playwright stack.
"""
import asyncio
import pathlib

import pytest


@pytest.fixture(autouse=True)
def tmp_cwd(tmp_path, monkeypatch):
    """Run each test in an isolated tmp dir."""
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def no_backoff(monkeypatch):
    """Keep the retry loop but skip the waiting."""
    monkeypatch.setattr("site_render.retry.backoff_delay", lambda attempt, **kw: 0.0)


def write_sitemap(path: pathlib.Path, *locs: str, index: bool = False) -> pathlib.Path:
    if index:
        body = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
        xml = f'<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{body}</sitemapindex>'
    else:
        body = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
        xml = f'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{body}</urlset>'
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('<?xml version="1.0" encoding="UTF-8"?>\n' + xml, encoding="utf-8")
    return path


# --------------------------------------------------------------------------- #
# Fake Playwright
# --------------------------------------------------------------------------- #
class FakePlaywright:
    """
    Records every call the session makes. Failure knobs:

    * ``goto_failures[url] = n``  - first *n* navigations to *url* raise (-1 = always)
    * ``launch_failures`` / ``close_failures`` - number of failing attempts
    """

    def __init__(self):
        self.starts = 0
        self.stops = 0
        self.launches = 0
        self.launch_kwargs = {}
        self.context_kwargs = {}
        self.browser_closes = 0
        self.gotos: list[tuple[str, dict]] = []
        self.pages: list["FakePage"] = []
        self.goto_failures: dict[str, int] = {}
        self.launch_failures = 0
        self.close_failures = 0
        self.active = 0
        self.max_active = 0
        self.nav_delay = 0.0

    # async_playwright() → manager with .start()
    def __call__(self):
        return self

    async def start(self):
        self.starts += 1
        return _FakePW(self)


class _FakePW:
    def __init__(self, fake: FakePlaywright):
        self._fake = fake
        self.chromium = self.firefox = self.webkit = _FakeLauncher(fake)

    async def stop(self):
        self._fake.stops += 1


class _FakeLauncher:
    def __init__(self, fake: FakePlaywright):
        self._fake = fake

    async def launch(self, **kw):
        fake = self._fake
        fake.launches += 1
        fake.launch_kwargs = kw
        if fake.launch_failures:
            fake.launch_failures -= 1
            raise RuntimeError("Browser closed unexpectedly")
        return _FakeBrowser(fake)


class _FakeBrowser:
    def __init__(self, fake: FakePlaywright):
        self._fake = fake

    async def new_context(self, **kw):
        self._fake.context_kwargs = kw
        return _FakeContext(self._fake)

    async def close(self):
        fake = self._fake
        fake.browser_closes += 1
        if fake.close_failures:
            fake.close_failures -= 1
            raise RuntimeError("Target closed")


class _FakeContext:
    def __init__(self, fake: FakePlaywright):
        self._fake = fake

    async def new_page(self):
        page = FakePage(self._fake)
        self._fake.pages.append(page)
        return page


class FakePage:
    def __init__(self, fake: FakePlaywright):
        self._fake = fake
        self.url = None
        self.closed = False

    async def goto(self, url, **kw):
        fake = self._fake
        fake.gotos.append((url, kw))
        self.url = url
        fake.active += 1
        fake.max_active = max(fake.max_active, fake.active)
        try:
            await asyncio.sleep(fake.nav_delay)
        finally:
            fake.active -= 1
        left = fake.goto_failures.get(url, 0)
        if left:
            if left > 0:
                fake.goto_failures[url] = left - 1
            raise RuntimeError(f"net::ERR_CONNECTION_RESET at {url}")

    async def content(self):
        return f"<html><body>{self.url}</body></html>"

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_pw(monkeypatch):
    fake = FakePlaywright()
    monkeypatch.setattr("site_render.browser.async_playwright", fake)
    return fake


@pytest.fixture
def make_sitemap():
    return write_sitemap
