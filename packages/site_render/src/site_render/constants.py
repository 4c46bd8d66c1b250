"""
Single place for constants that are used across the package.
"""

import os
from typing import Final, Set

VALID_ENGINES: Final[Set[str]] = {"chromium", "firefox", "webkit"}

DEFAULT_ENGINE: Final = "chromium"

# --------------------------- runtime defaults --------------------------- #
DEFAULT_PARALLEL_RENDERS: Final[int] = os.cpu_count() or 1
DEFAULT_MAX_RETRIES: Final[int] = 3
DEFAULT_NAV_TIMEOUT_MS: Final[int] = 60_000
WAIT_UNTIL: Final = "networkidle"

# sitemap download
MAX_REDIRECTS: Final[int] = 10
FETCH_TIMEOUT_S: Final[float] = 30.0

# backoff: min(2**attempt * BASE, CAP) + uniform(0, JITTER)   (seconds)
BACKOFF_BASE_S: Final[float] = 1.0
BACKOFF_CAP_S: Final[float] = 8.0
BACKOFF_JITTER_S: Final[float] = 1.0

INDEX_FILE: Final = "index.html"

# prefix for every environment variable the CLI reads
ENV_PREFIX: Final = "SITERENDER_"
