"""Playwright bootstrap utilities.

One :class:`BrowserSession` is shared by every render worker of a run:

    session = await launch_with_retries("chromium", retries=3)
    async with session.page() as page:
        await page.goto("https://example.com")
    await close_with_retries(session, retries=3)

Opening pages concurrently on the same browser context is safe, so workers
never coordinate around the session itself.
"""
from __future__ import annotations

import contextlib
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from fake_useragent import UserAgent                     #  UA override

from site_render.constants import DEFAULT_ENGINE, VALID_ENGINES
from site_render.errors import BrowserLifecycleError, ConfigError
from site_render.logger import log
from site_render.retry import retry_async


def pick_ua(browser: str | None = None, os: str | None = None) -> Optional[str]:
    """
    Generate a plausible UA string, or ``None`` to keep the engine's own.

    Only consulted when the caller filters by *browser* or *os*; a failing
    fake-useragent lookup degrades to the engine default.
    """
    if browser is None and os is None:
        return None
    try:
        ua_src = UserAgent(
            browsers=[browser] if browser else None,
            os=[os] if os else None,
        )
        return ua_src.random
    except Exception as exc:  # data file missing / no UA matches the filters
        log.warning("fake-useragent failed (%s) - using the engine's default UA", exc)
        return None


class BrowserSession:
    def __init__(
        self,
        *,
        engine: str = DEFAULT_ENGINE,
        proxy: str | None = None,
        user_agent: str | None = None,
    ):
        if engine not in VALID_ENGINES:
            raise ConfigError(f"Unknown engine: {engine} (choose from {', '.join(sorted(VALID_ENGINES))})")
        self.engine = engine
        self.proxy = proxy
        self.user_agent = user_agent
        self._pw = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    @property
    def started(self) -> bool:
        return self._context is not None

    async def start(self) -> None:
        if self.started:
            return
        self._pw = await async_playwright().start()
        try:
            launcher = getattr(self._pw, self.engine)
            self._browser = await launcher.launch(
                headless=True, proxy={"server": self.proxy} if self.proxy else None
            )
            self._context = await self._browser.new_context(user_agent=self.user_agent)
        except Exception:
            await self._shutdown_quietly()
            raise
        log.debug("%s launched", self.engine)

    async def _shutdown_quietly(self) -> None:
        if self._browser is not None:
            with contextlib.suppress(Exception):
                await self._browser.close()
        if self._pw is not None:
            with contextlib.suppress(Exception):
                await self._pw.stop()
        self._browser = self._context = self._pw = None

    async def close(self) -> None:
        """Close the browser, then stop the driver. Safe to call again after a failure."""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
            self._context = None
        if self._pw is not None:
            await self._pw.stop()
            self._pw = None
        log.debug("%s closed", self.engine)

    @contextlib.asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Open a fresh page; it is closed on every exit path."""
        if self._context is None:
            raise RuntimeError("Session not started – call await start() first")
        page = await self._context.new_page()
        try:
            yield page
        finally:
            try:
                await page.close()
            except Exception as exc:
                log.warning("Failed to close page: %s", exc)


async def launch_with_retries(
    engine: str = DEFAULT_ENGINE,
    *,
    retries: int,
    proxy: str | None = None,
    user_agent: str | None = None,
) -> BrowserSession:
    session = BrowserSession(engine=engine, proxy=proxy, user_agent=user_agent)
    try:
        await retry_async(session.start, retries=retries, what=f"launch {engine}")
    except Exception as exc:
        raise BrowserLifecycleError("launch", str(exc), retries + 1) from exc
    return session


async def close_with_retries(session: BrowserSession, *, retries: int) -> None:
    try:
        await retry_async(session.close, retries=retries, what=f"close {session.engine}")
    except Exception as exc:
        raise BrowserLifecycleError("close", str(exc), retries + 1) from exc
