"""Domain-specific exceptions.

Library code only ever *raises* these; turning them into an exit code is the
job of :mod:`site_render.cli`.
"""

from __future__ import annotations


class SiteRenderError(Exception):
    """Base class for all site-render errors."""


class ConfigError(SiteRenderError):
    """Invalid or missing option, detected before any network/browser work."""


class InvalidURL(ConfigError):
    """URL did not start with http/https or could not be parsed."""


class FetchError(SiteRenderError):
    """Remote sitemap could not be downloaded."""

    def __init__(self, url: str, cause: BaseException):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to fetch sitemap from {url}: {cause}")


class FileSystemError(SiteRenderError):
    """Local sitemap could not be read or an output file could not be written."""

    def __init__(self, path, cause: BaseException, action: str = "read"):
        self.path = path
        self.cause = cause
        self.action = action
        super().__init__(f"Failed to {action} {path}: {cause}")


class RenderError(SiteRenderError):
    """A page kept failing after every retry."""

    def __init__(self, url: str, message: str, attempts: int):
        self.url = url
        self.attempts = attempts
        super().__init__(f"Failed to render {url} after {attempts} attempt(s): {message}")


class BrowserLifecycleError(SiteRenderError):
    """Launching or closing the shared browser kept failing."""

    def __init__(self, action: str, message: str, attempts: int):
        self.action = action
        self.attempts = attempts
        super().__init__(f"Failed to {action} browser after {attempts} attempt(s): {message}")
