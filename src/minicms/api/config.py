"""Config API endpoint."""

from aiohttp import web

from minicms.app_keys import live_reload_enabled_key, loader_key


def create_config_routes() -> list[web.RouteDef]:
    return [web.get("/api/config", get_config)]


async def get_config(request: web.Request) -> web.Response:
    config = request.app[loader_key].config
    return web.json_response(
        {
            "liveReloadEnabled": request.app[live_reload_enabled_key],
            "defaultLanguage": config.menu.default_language,
        },
    )
