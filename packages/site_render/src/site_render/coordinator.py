"""
Render coordinator - one shared browser, *N* workers, one FIFO queue.

Workers are plain asyncio tasks. ``Queue.get_nowait`` is the only way a URL
leaves the queue, so every URL is handed to exactly one worker. The first
worker that gives up on a URL aborts the whole run; its siblings are
cancelled, which closes whatever pages they had open.
"""
from __future__ import annotations

import asyncio
import pathlib
from dataclasses import dataclass, field
from typing import List, Sequence

from site_render.browser import close_with_retries, launch_with_retries
from site_render.constants import DEFAULT_ENGINE, DEFAULT_NAV_TIMEOUT_MS
from site_render.errors import ConfigError, SiteRenderError
from site_render.logger import log
from site_render.renderer import RenderedArtifact, render_url


@dataclass
class RunReport:
    artifacts: List[RenderedArtifact] = field(default_factory=list)

    @property
    def rendered(self) -> int:
        return len(self.artifacts)


async def _worker(
    wid: int,
    queue: "asyncio.Queue[str]",
    report: RunReport,
    render_one,
) -> None:
    while True:
        try:
            url = queue.get_nowait()
        except asyncio.QueueEmpty:
            log.debug("worker-%d: queue drained", wid)
            return
        report.artifacts.append(await render_one(url))


async def run(
    urls: Sequence[str],
    output_root: str | pathlib.Path,
    *,
    parallelism: int,
    max_retries: int,
    engine: str = DEFAULT_ENGINE,
    timeout_ms: int = DEFAULT_NAV_TIMEOUT_MS,
    proxy: str | None = None,
    user_agent: str | None = None,
) -> RunReport:
    """
    Render every URL in *urls* under *output_root*.

    Returns only when the queue drained without a fatal error. Raises
    :class:`RenderError` / :class:`BrowserLifecycleError` /
    :class:`FileSystemError` otherwise; files written so far stay on disk.
    """
    if parallelism < 1:
        raise ConfigError(f"parallel renders must be >= 1, got {parallelism}")
    if max_retries < 0:
        raise ConfigError(f"max retries must be >= 0, got {max_retries}")

    report = RunReport()
    if not urls:
        log.warning("No URLs to render")
        return report

    session = await launch_with_retries(
        engine, retries=max_retries, proxy=proxy, user_agent=user_agent
    )

    queue: asyncio.Queue[str] = asyncio.Queue()
    for url in urls:
        queue.put_nowait(url)

    async def render_one(url: str) -> RenderedArtifact:
        return await render_url(session, url, output_root, max_retries, timeout_ms=timeout_ms)

    log.info("Rendering %d page(s) with %d worker(s)", len(urls), parallelism)
    tasks = [
        asyncio.create_task(_worker(i, queue, report, render_one), name=f"render-worker-{i}")
        for i in range(parallelism)
    ]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        try:
            await close_with_retries(session, retries=max_retries)
        except SiteRenderError as close_exc:
            log.error("%s", close_exc)
        raise

    await close_with_retries(session, retries=max_retries)
    return report
