"""Menu builder loading with reload support.

Keeps one MenuBuilder wired to the collaborators described by the
configuration, and swaps it when the configuration file changes.
"""

import logging
from dataclasses import replace

from minicms.config import Config
from minicms.core.access import RoleAccessControl
from minicms.core.builder import MenuBuilder
from minicms.core.feed import StaticNavigationFeed
from minicms.core.pages import InMemoryPageRepository

logger = logging.getLogger(__name__)


def create_builder(config: Config) -> MenuBuilder:
    """Create a builder over the pages, roles and navigation of a config."""
    return MenuBuilder(
        config,
        InMemoryPageRepository(config.pages),
        RoleAccessControl(config.capabilities),
        StaticNavigationFeed(config.navigation.primary, config.navigation.secondary),
        strict_identifiers=config.menu.strict_identifiers,
    )


class MenuLoader:
    """Lazily created, cached MenuBuilder.

    The builder itself holds no tree, so sharing it between requests is
    safe: every build() call returns a new tree.
    """

    __slots__ = ("_builder", "_config")

    def __init__(self, config: Config) -> None:
        self._config = config
        self._builder: MenuBuilder | None = None

    @property
    def config(self) -> Config:
        return self._config

    def load(self) -> MenuBuilder:
        """Get the builder, creating it if needed."""
        if self._builder is None:
            self._builder = create_builder(self._config)
        return self._builder

    def invalidate(self) -> None:
        """Drop the cached builder."""
        self._builder = None

    def reload(self) -> bool:
        """Re-read the configuration file and drop the cached builder.

        Server and live reload settings are kept from the running
        configuration. A broken file leaves the current configuration in
        place.

        Returns:
            True if the configuration was reloaded
        """
        path = self._config.config_path
        if path is None:
            return False

        try:
            fresh = Config.load(path)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to reload configuration from {path}: {e}")
            return False

        self._config = replace(
            fresh,
            server=self._config.server,
            live_reload=self._config.live_reload,
        )
        self.invalidate()
        logger.info(f"Reloaded configuration from {path}")
        return True
