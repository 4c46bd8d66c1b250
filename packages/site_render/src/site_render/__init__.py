"""Public package API."""

__version__ = "0.1.0"

from .config import RenderConfig  # re-export for external users
from .pipeline import collect_urls, start_rendering

__all__ = ["RenderConfig", "collect_urls", "start_rendering", "__version__"]
