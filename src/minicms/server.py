"""aiohttp server for minicms.

Application factory and route registration.
"""

from aiohttp import web

from minicms.api.config import create_config_routes
from minicms.api.menu import create_menu_routes
from minicms.app_keys import (
    live_reload_enabled_key,
    live_reload_manager_key,
    loader_key,
    verbose_key,
)
from minicms.config import Config
from minicms.core.loader import MenuLoader
from minicms.live import LiveReloadManager
from minicms.live.reload import create_live_reload_routes


def create_app(config: Config, *, verbose: bool = False) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        verbose: Include diagnostic details in error responses

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    loader = MenuLoader(config)

    app[loader_key] = loader
    app[verbose_key] = verbose

    app.router.add_routes(create_menu_routes())
    app.router.add_routes(create_config_routes())

    # Live reload watches the config file, so it needs one
    config_path = config.config_path
    live_reload_enabled = config.live_reload.enabled and config_path is not None
    app[live_reload_enabled_key] = live_reload_enabled
    if live_reload_enabled and config_path is not None:
        manager = LiveReloadManager(config_path, loader)
        app[live_reload_manager_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[live_reload_manager_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_manager_key].stop()


def run_server(config: Config, *, verbose: bool = False) -> None:
    """Run the server.

    Args:
        config: Application configuration
        verbose: Include diagnostic details in error responses
    """
    app = create_app(config, verbose=verbose)
    web.run_app(app, host=config.server.host, port=config.server.port)
