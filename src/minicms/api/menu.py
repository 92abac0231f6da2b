"""Menu API endpoints.

Serves the menu tree built for the requesting viewer, and the list of
attachment targets offered to page editors.
"""

from aiohttp import web

from minicms.app_keys import loader_key, verbose_key
from minicms.core.access import Viewer
from minicms.core.builder import DuplicateIdentifierError

# Set by the host in front of the service
VIEWER_HEADER = "X-Viewer"
VIEWER_ROLES_HEADER = "X-Viewer-Roles"


def create_menu_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/menu", get_menu),
        web.get("/api/menu/targets", get_menu_targets),
    ]


def viewer_from_request(request: web.Request) -> Viewer:
    """Build the viewer from host-provided headers."""
    username = request.headers.get(VIEWER_HEADER, "guest")
    roles = request.headers.get(VIEWER_ROLES_HEADER, "")
    return Viewer.from_roles(username, roles.split(","))


async def get_menu(request: web.Request) -> web.Response:
    loader = request.app[loader_key]
    builder = loader.load()
    language = request.query.get("lang") or loader.config.menu.default_language

    try:
        root = builder.build(viewer_from_request(request), language=language)
    except DuplicateIdentifierError as e:
        return _duplicate_identifiers_response(request, e)

    return web.json_response({"items": [child.to_dict() for child in root.sorted_children()]})


async def get_menu_targets(request: web.Request) -> web.Response:
    builder = request.app[loader_key].load()

    try:
        targets = builder.identifiable_menus(viewer_from_request(request))
    except DuplicateIdentifierError as e:
        return _duplicate_identifiers_response(request, e)

    return web.json_response({"targets": targets})


def _duplicate_identifiers_response(
    request: web.Request,
    error: DuplicateIdentifierError,
) -> web.Response:
    body: dict[str, object] = {"error": "Invalid menu configuration"}
    if request.app[verbose_key]:
        body["identifiers"] = error.identifiers
    return web.json_response(body, status=500)
