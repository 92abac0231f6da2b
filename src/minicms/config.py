"""Configuration management for minicms.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from minicms.core.feed import NavigationEntry
from minicms.core.pages import Page
from minicms.core.types import MENU_TARGET_NONE

CONFIG_FILENAME = "minicms.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class MenuConfig:
    """Menu configuration."""

    rootmenuitems: str = ""
    adminmenuitems: str = ""
    default_language: str | None = None
    strict_identifiers: bool = False


@dataclass
class NavigationConfig:
    """Host navigation items merged into the menu."""

    primary: list[NavigationEntry] = field(default_factory=list)
    secondary: list[NavigationEntry] = field(default_factory=list)


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    menu: MenuConfig
    navigation: NavigationConfig
    live_reload: LiveReloadConfig
    capabilities: dict[str, list[str]] = field(default_factory=dict)
    pages: list[Page] = field(default_factory=list)
    config_path: Path | None = None

    def get_config(self, name: str) -> str | None:
        """Read a menu setting by name.

        Args:
            name: "rootmenuitems" or "adminmenuitems"

        Returns:
            Setting value, None for unknown names
        """
        if name == "rootmenuitems":
            return self.menu.rootmenuitems
        if name == "adminmenuitems":
            return self.menu.adminmenuitems
        return None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for minicms.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(
            server=ServerConfig(),
            menu=MenuConfig(),
            navigation=NavigationConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        return cls(
            server=cls._parse_server(data.get("server")),
            menu=cls._parse_menu(data.get("menu")),
            navigation=cls._parse_navigation(data.get("navigation")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            capabilities=cls._parse_access(data.get("access")),
            pages=cls._parse_pages(data.get("pages")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_menu(cls, data: object) -> MenuConfig:
        """Parse menu configuration section.

        Args:
            data: Raw menu section data

        Returns:
            MenuConfig instance
        """
        if data is None:
            return MenuConfig()

        if not isinstance(data, dict):
            raise ValueError("menu section must be a dictionary")

        rootmenuitems = data.get("rootmenuitems", "")
        if not isinstance(rootmenuitems, str):
            raise ValueError("menu.rootmenuitems must be a string")

        adminmenuitems = data.get("adminmenuitems", "")
        if isinstance(adminmenuitems, list):
            if not all(isinstance(item, str) for item in adminmenuitems):
                raise ValueError("menu.adminmenuitems items must be strings")
            adminmenuitems = ",".join(adminmenuitems)
        elif not isinstance(adminmenuitems, str):
            raise ValueError("menu.adminmenuitems must be a string or a list of strings")

        default_language = data.get("default_language")
        if default_language is not None and not isinstance(default_language, str):
            raise ValueError("menu.default_language must be a string")

        strict_identifiers = data.get("strict_identifiers", False)
        if not isinstance(strict_identifiers, bool):
            raise ValueError("menu.strict_identifiers must be a boolean")

        return MenuConfig(
            rootmenuitems=rootmenuitems,
            adminmenuitems=adminmenuitems,
            default_language=default_language or None,
            strict_identifiers=strict_identifiers,
        )

    @classmethod
    def _parse_navigation(cls, data: object) -> NavigationConfig:
        """Parse navigation configuration section.

        Args:
            data: Raw navigation section data

        Returns:
            NavigationConfig instance
        """
        if data is None:
            return NavigationConfig()

        if not isinstance(data, dict):
            raise ValueError("navigation section must be a dictionary")

        return NavigationConfig(
            primary=cls._parse_entries(data.get("primary"), "navigation.primary"),
            secondary=cls._parse_entries(data.get("secondary"), "navigation.secondary"),
        )

    @classmethod
    def _parse_entries(cls, data: object, section: str) -> list[NavigationEntry]:
        if data is None:
            return []

        if not isinstance(data, list):
            raise ValueError(f"{section} must be a list of tables")

        entries: list[NavigationEntry] = []
        for item in data:
            if not isinstance(item, dict):
                raise ValueError(f"{section} items must be tables")

            label = item.get("label")
            if not isinstance(label, str):
                raise ValueError(f"{section}.label must be a string")

            url = item.get("url")
            if url is not None and not isinstance(url, str):
                raise ValueError(f"{section}.url must be a string")

            key = item.get("key", "")
            if not isinstance(key, str):
                raise ValueError(f"{section}.key must be a string")

            layouts = item.get("layouts", [])
            if not isinstance(layouts, list) or not all(isinstance(x, str) for x in layouts):
                raise ValueError(f"{section}.layouts must be a list of strings")

            entries.append(NavigationEntry(label=label, url=url, key=key, layouts=tuple(layouts)))
        return entries

    @classmethod
    def _parse_access(cls, data: object) -> dict[str, list[str]]:
        """Parse access section mapping capabilities to role short names."""
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("access section must be a dictionary")

        capabilities: dict[str, list[str]] = {}
        for name, roles in data.items():
            if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
                raise ValueError(f"access.{name} must be a list of strings")
            capabilities[name] = list(roles)
        return capabilities

    @classmethod
    def _parse_pages(cls, data: object) -> list[Page]:
        """Parse the pages array.

        Args:
            data: Raw pages array

        Returns:
            Pages in file order
        """
        if data is None:
            return []

        if not isinstance(data, list):
            raise ValueError("pages must be an array of tables")

        pages: list[Page] = []
        seen_ids: set[int] = set()
        for item in data:
            if not isinstance(item, dict):
                raise ValueError("pages items must be tables")

            page_id = item.get("id")
            if not isinstance(page_id, int) or isinstance(page_id, bool):
                raise ValueError("pages.id must be an integer")
            if page_id in seen_ids:
                raise ValueError("pages.id values must be unique")
            seen_ids.add(page_id)

            for name in ("title", "short_name", "identifier", "parent_menu"):
                if name in item and not isinstance(item[name], str):
                    raise ValueError(f"pages.{name} must be a string")
            if not isinstance(item.get("title"), str):
                raise ValueError("pages.title must be a string")

            for name in ("parent_id", "menu_sort_order"):
                value = item.get(name, 0)
                if not isinstance(value, int) or isinstance(value, bool):
                    raise ValueError(f"pages.{name} must be an integer")

            roles = item.get("roles", [])
            if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
                raise ValueError("pages.roles must be a list of strings")

            pages.append(
                Page(
                    id=page_id,
                    title=item["title"],
                    short_name=item.get("short_name", ""),
                    identifier=item.get("identifier", ""),
                    parent_id=item.get("parent_id", 0),
                    parent_menu=item.get("parent_menu", MENU_TARGET_NONE),
                    menu_sort_order=item.get("menu_sort_order", 0),
                    roles=tuple(roles),
                ),
            )
        return pages

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        return LiveReloadConfig(enabled=enabled)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(self, server=server, live_reload=live_reload)
