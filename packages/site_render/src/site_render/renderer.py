from __future__ import annotations

import asyncio
import pathlib
from dataclasses import dataclass

from site_render.browser import BrowserSession
from site_render.constants import DEFAULT_NAV_TIMEOUT_MS, WAIT_UNTIL
from site_render.errors import FileSystemError, RenderError
from site_render.logger import log
from site_render.paths import url_to_path
from site_render.retry import retry_async


@dataclass(frozen=True)
class RenderedArtifact:
    url: str
    path: pathlib.Path
    size: int


async def render_once(
    session: BrowserSession,
    url: str,
    *,
    timeout_ms: int = DEFAULT_NAV_TIMEOUT_MS,
) -> str:
    """Open a page, wait for the network to go idle and return the serialised DOM."""
    async with session.page() as page:
        await page.goto(url, wait_until=WAIT_UNTIL, timeout=timeout_ms)
        return await page.content()


async def render_with_retries(
    session: BrowserSession,
    url: str,
    max_retries: int,
    *,
    timeout_ms: int = DEFAULT_NAV_TIMEOUT_MS,
) -> str:
    """
    Render *url* with up to ``max_retries`` extra attempts.

    Raises:
        RenderError: every attempt failed; carries the URL and the last message.
    """
    try:
        return await retry_async(
            lambda: render_once(session, url, timeout_ms=timeout_ms),
            retries=max_retries,
            what=f"render {url}",
        )
    except Exception as exc:
        raise RenderError(url, str(exc), max_retries + 1) from exc


def _write(path: pathlib.Path, html: str) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.unlink(missing_ok=True)                # stale output from an earlier run
    data = html.encode("utf-8")
    path.write_bytes(data)
    return len(data)


async def save_rendered(path: pathlib.Path, html: str) -> int:
    """Write *html* to *path*, replacing whatever an earlier run left there."""
    try:
        return await asyncio.to_thread(_write, path, html)
    except OSError as exc:
        raise FileSystemError(path, exc, action="write") from exc


async def render_url(
    session: BrowserSession,
    url: str,
    output_root: str | pathlib.Path,
    max_retries: int,
    *,
    timeout_ms: int = DEFAULT_NAV_TIMEOUT_MS,
) -> RenderedArtifact:
    path = url_to_path(url, output_root)
    html = await render_with_retries(session, url, max_retries, timeout_ms=timeout_ms)
    size = await save_rendered(path, html)
    log.info("✔ Rendered %s → %s", url, path)
    return RenderedArtifact(url=url, path=path, size=size)
