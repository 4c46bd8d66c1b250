"""
Sitemap resolution - turn a sitemap (or a tree of sitemap indexes) into one
flat, ordered list of page URLs.

Both shapes of the sitemap schema are recognised:

* ``<urlset><url><loc>…</loc></url>…</urlset>``          → pages
* ``<sitemapindex><sitemap><loc>…</loc></sitemap>…``      → nested sitemaps

Nested sitemaps are expanded depth-first, so the final order is a pre-order
flattening of the index tree.
"""
from __future__ import annotations

import asyncio
import pathlib
from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

import requests
from bs4 import BeautifulSoup                   # pip install beautifulsoup4 lxml
from bs4.builder import ParserRejectedMarkup

from site_render.constants import FETCH_TIMEOUT_S, MAX_REDIRECTS
from site_render.errors import FetchError, FileSystemError
from site_render.logger import log

__all__ = [
    "SitemapEntry",
    "fetch_sitemap",
    "read_sitemap",
    "parse_sitemap",
    "is_remote",
    "load_sitemap",
    "resolve_sitemap",
]


@dataclass(frozen=True)
class SitemapEntry:
    kind: Literal["page", "sitemap"]
    loc: str


def is_remote(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


# --------------------------------------------------------------------------- #
# Loading
# --------------------------------------------------------------------------- #
def _get(url: str, max_redirects: int, timeout: float) -> bytes:
    with requests.Session() as http:
        http.max_redirects = max_redirects
        resp = http.get(url, timeout=timeout, allow_redirects=True)
        resp.raise_for_status()
        # raw bytes: the XML declaration, not the HTTP header, names the charset
        return resp.content


async def fetch_sitemap(
    url: str,
    *,
    max_redirects: int = MAX_REDIRECTS,
    timeout: float = FETCH_TIMEOUT_S,
) -> bytes:
    """Download *url* and return its body. Network/HTTP failures → FetchError."""
    log.debug("GET %s", url)
    try:
        return await asyncio.to_thread(_get, url, max_redirects, timeout)
    except requests.RequestException as exc:
        raise FetchError(url, exc) from exc


async def read_sitemap(path: str | pathlib.Path) -> bytes:
    p = pathlib.Path(path)
    try:
        return await asyncio.to_thread(p.read_bytes)
    except OSError as exc:
        raise FileSystemError(p, exc, action="read") from exc


async def load_sitemap(source: str) -> bytes:
    if is_remote(source):
        return await fetch_sitemap(source)
    return await read_sitemap(source)


# --------------------------------------------------------------------------- #
# Parsing
# --------------------------------------------------------------------------- #
def _locs(parent, child_tag: str) -> List[str]:
    out: List[str] = []
    for child in parent.find_all(child_tag, recursive=False):
        loc = child.find("loc", recursive=False)
        text = loc.get_text(strip=True) if loc is not None else ""
        if text:
            out.append(text)
    return out


def parse_sitemap(xml: str | bytes) -> List[SitemapEntry]:
    """
    Return the entries of one sitemap document, in document order.

    Pass *bytes* where possible so the document's own ``encoding=`` declaration
    is honoured. Empty, malformed, undecodable or unrecognised content yields
    ``[]`` rather than an error; lxml recovers what it can from truncated XML.
    """
    if not xml or not xml.strip():
        return []
    try:
        soup = BeautifulSoup(xml, "xml")
    except (ValueError, LookupError, ParserRejectedMarkup) as exc:  # undecodable bytes, unknown codec
        log.warning("Unreadable sitemap document: %s", exc)
        return []

    index = soup.find("sitemapindex")
    if index is not None:
        return [SitemapEntry("sitemap", loc) for loc in _locs(index, "sitemap")]

    urlset = soup.find("urlset")
    if urlset is not None:
        return [SitemapEntry("page", loc) for loc in _locs(urlset, "url")]

    return []


# --------------------------------------------------------------------------- #
# Recursive expansion
# --------------------------------------------------------------------------- #
async def resolve_sitemap(
    source: str,
    *,
    _ancestors: Optional[Sequence[str]] = None,
) -> List[str]:
    """
    Resolve *source* (a URL or a local path) to a flat list of page URLs.

    FetchError / FileSystemError propagate untouched; nothing here is retried.
    """
    ancestors = tuple(_ancestors or ())
    log.info("Processing sitemap: %s", source)
    content = await load_sitemap(source)

    urls: List[str] = []
    for entry in parse_sitemap(content):
        if entry.kind == "page":
            urls.append(entry.loc)
            continue
        if entry.loc == source or entry.loc in ancestors:
            log.warning("Skipping sitemap %s - it references itself via %s", entry.loc, source)
            continue
        log.info("Processing nested sitemap: %s", entry.loc)
        urls.extend(await resolve_sitemap(entry.loc, _ancestors=(*ancestors, source)))

    log.debug("%s → %d url(s)", source, len(urls))
    return urls
