"""
URL → output file mapping.

The rule set is part of the tool's observable contract (people deploy the
output directory as-is), so it is kept deliberately small:

=========================  ===============================
URL path                   file
=========================  ===============================
``/`` or empty             ``<root>/index.html``
``/docs/``                 ``<root>/docs/index.html``
``/docs/intro``            ``<root>/docs/intro/index.html``
``/docs/intro.html``       ``<root>/docs/intro.html``
=========================  ===============================

A last segment *with* an extension is used verbatim. Query strings,
fragments and the host are ignored. Dot segments are collapsed and can never
climb above *root*.
"""
from __future__ import annotations

import pathlib
import urllib.parse
from typing import List

from site_render.constants import INDEX_FILE
from site_render.errors import InvalidURL


def _segments(url_path: str) -> tuple[List[str], bool]:
    """Return (normalised segments, path-denotes-a-directory)."""
    out: List[str] = []
    is_dir = url_path == "" or url_path.endswith("/")
    raw = url_path.split("/")
    for i, seg in enumerate(raw):
        marker = urllib.parse.unquote(seg)      # '%2e%2e' is '..' too
        last = i == len(raw) - 1
        if marker in (".", ".."):
            if marker == ".." and out:
                out.pop()
            if last:
                is_dir = True
            continue
        if seg:
            out.append(seg)
    return out, is_dir


def url_to_path(url: str, output_root: str | pathlib.Path) -> pathlib.Path:
    """Map *url* to the file its rendered markup is written to. Pure function."""
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidURL(f"{url!r} is not an http/https URL")

    root = pathlib.Path(output_root)
    segments, is_dir = _segments(parsed.path)

    if not segments:
        return root / INDEX_FILE
    if is_dir or not pathlib.PurePosixPath(segments[-1]).suffix:
        return root.joinpath(*segments, INDEX_FILE)
    return root.joinpath(*segments)
