"""
resolve sitemap → rewrite URLs → render.

Everything that can be checked without touching the network is checked
first, so a bad ``--replace-url`` never costs a sitemap download.
"""
from __future__ import annotations

from typing import List

from site_render import coordinator
from site_render.browser import pick_ua
from site_render.config import RenderConfig
from site_render.logger import log
from site_render.rewrite import rewrite_urls
from site_render.sitemap import resolve_sitemap


async def collect_urls(config: RenderConfig) -> List[str]:
    config.validate()
    rule = config.replacement_rule()
    urls = await resolve_sitemap(config.source)
    log.info("Found %d URL(s) in %s", len(urls), config.source)
    return rewrite_urls(urls, rule)


async def start_rendering(config: RenderConfig) -> coordinator.RunReport:
    urls = await collect_urls(config)
    return await coordinator.run(
        urls,
        config.output,
        parallelism=config.parallel_renders,
        max_retries=config.max_retries,
        engine=config.engine,
        timeout_ms=config.timeout_ms,
        proxy=config.proxy,
        user_agent=pick_ua(config.ua_browser, config.ua_os),
    )
