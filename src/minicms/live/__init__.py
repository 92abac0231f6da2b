"""Live reload of the menu configuration."""

from .reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
