"""WebSocket-based live reload for the menu configuration.

Watches the configuration file, reloads the menu loader when it changes and
notifies connected clients so they fetch the menu again.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from minicms.core.loader import MenuLoader

logger = logging.getLogger(__name__)

MENU_API_PATH = "/api/menu"


class LiveReloadManager:
    """Manages WebSocket connections and config file watching.

    Coordinates between the file watcher, the menu loader and connected
    WebSocket clients.
    """

    def __init__(self, config_path: Path, loader: MenuLoader) -> None:
        """Initialize the live reload manager.

        Args:
            config_path: Configuration file to watch
            loader: Menu loader to reload on changes
        """
        self._config_path = config_path.resolve()
        self._loader = loader
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start watching the configuration file."""
        if self._watch_task is not None:
            return
        logger.debug(f"Watching {self._config_path} for menu changes")
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop watching and close all client connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Keep a client connected until it goes away.

        Clients only listen; anything they send is ignored.
        """
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)
        logger.debug(f"Live reload client connected from {request.remote}")

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files(self) -> None:
        """Watch the config file directory and react to config changes."""
        async for changes in awatch(self._config_path.parent):
            if not any(self._is_config_change(change, path) for change, path in changes):
                continue
            await self.handle_config_change()

    def _is_config_change(self, change: Change, path_str: str) -> bool:
        if change == Change.deleted:
            return False
        return Path(path_str).resolve() == self._config_path

    async def handle_config_change(self) -> None:
        """Reload the configuration and notify clients if it was valid."""
        if self._loader.reload():
            await self._broadcast_reload(MENU_API_PATH)

    async def _broadcast_reload(self, path: str) -> None:
        """Tell connected clients to fetch the given API path again."""
        if not self._connections:
            return

        message = json.dumps({"type": "reload", "path": path})
        logger.debug(f"Notifying {len(self._connections)} clients of menu change")

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket.

    Args:
        manager: LiveReloadManager instance

    Returns:
        List of route definitions
    """
    return [web.get("/ws/live-reload", manager.handle_websocket)]
