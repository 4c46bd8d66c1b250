from __future__ import annotations

import pathlib
from dataclasses import dataclass
from typing import Optional

from site_render.constants import (
    DEFAULT_ENGINE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_NAV_TIMEOUT_MS,
    DEFAULT_PARALLEL_RENDERS,
    VALID_ENGINES,
)
from site_render.errors import ConfigError
from site_render.rewrite import UrlReplacementRule


@dataclass
class RenderConfig:
    """Everything one run needs. Build it, then call :meth:`validate`."""

    output: pathlib.Path
    sitemap_file: Optional[pathlib.Path] = None
    sitemap_url: Optional[str] = None
    replace_url: Optional[str] = None
    parallel_renders: int = DEFAULT_PARALLEL_RENDERS
    max_retries: int = DEFAULT_MAX_RETRIES
    engine: str = DEFAULT_ENGINE
    timeout_ms: int = DEFAULT_NAV_TIMEOUT_MS
    proxy: Optional[str] = None
    ua_browser: Optional[str] = None
    ua_os: Optional[str] = None

    @property
    def source(self) -> str:
        """The sitemap to start from, as a URL or a local path string."""
        return self.sitemap_url if self.sitemap_url else str(self.sitemap_file)

    def replacement_rule(self) -> Optional[UrlReplacementRule]:
        return UrlReplacementRule.parse(self.replace_url) if self.replace_url else None

    def validate(self) -> "RenderConfig":
        if bool(self.sitemap_file) == bool(self.sitemap_url):
            raise ConfigError("Exactly one of --sitemap-file or --sitemap-url must be provided")
        if self.output is None or not str(self.output):
            raise ConfigError("--output is required")
        if self.parallel_renders < 1:
            raise ConfigError(f"--parallel-renders must be >= 1, got {self.parallel_renders}")
        if self.max_retries < 0:
            raise ConfigError(f"--max-retries must be >= 0, got {self.max_retries}")
        if self.timeout_ms < 0:
            raise ConfigError(f"--timeout must be >= 0, got {self.timeout_ms}")
        if self.engine not in VALID_ENGINES:
            raise ConfigError(
                f"Unknown engine: {self.engine} (choose from {', '.join(sorted(VALID_ENGINES))})"
            )
        self.replacement_rule()                 # malformed rule fails here
        return self
