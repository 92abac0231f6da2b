"""Application keys for type-safe app configuration access."""

from aiohttp import web

from minicms.core.loader import MenuLoader
from minicms.live import LiveReloadManager

loader_key = web.AppKey("loader", MenuLoader)
verbose_key = web.AppKey("verbose", bool)
live_reload_enabled_key = web.AppKey("live_reload_enabled", bool)
live_reload_manager_key = web.AppKey("live_reload_manager", LiveReloadManager)
