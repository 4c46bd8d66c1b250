"""
Logging for the renderer.

Library modules only ever do

```python
from site_render.logger import log
log.info("Processing sitemap: %s", source)
```

The CLI calls :func:`configure_logging` once per command with the ``-v``
count. ``SITERENDER_LOGLEVEL`` (a level name such as ``DEBUG`` or
``WARNING``) beats the flag, which is handy for CI runs:

```bash
SITERENDER_LOGLEVEL=WARNING siterender render --sitemap-url … -o dist
```

``urllib3`` (pulled in by *requests* for sitemap downloads) is held at WARNING
unless ``-vvv`` is given, so ``-vv`` shows our own DEBUG lines only.
"""

import logging, os

from site_render.constants import ENV_PREFIX

_FMT = "%(asctime)s  %(levelname)-8s  %(name)s › %(message)s"
_ENV_VAR = f"{ENV_PREFIX}LOGLEVEL"
_NOISY = ("urllib3",)


def resolve_level(verbose: int, env_value: str | None = None) -> int:
    """0/1 → INFO, ≥2 → DEBUG; a known level name in *env_value* wins."""
    if env_value:
        level = logging.getLevelName(env_value.strip().upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if verbose >= 2 else logging.INFO


def configure_logging(verbose: int) -> None:
    root = logging.getLogger()
    if root.handlers:  # already configured (embedding app, test runner, 2nd call)
        return
    env_value = os.getenv(_ENV_VAR)
    level = resolve_level(verbose, env_value)
    logging.basicConfig(level=level, format=_FMT)
    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose >= 3 else logging.WARNING)
    if env_value and level != logging.getLevelName(env_value.strip().upper()):
        log.warning("Ignoring %s=%r - not a logging level", _ENV_VAR, env_value)


log = logging.getLogger("site_render")
