"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest
from minicms.config import Config, MenuConfig, ServerConfig
from minicms.core.feed import NavigationEntry
from minicms.core.pages import Page


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        """Load config from explicit path."""
        config_file = tmp_path / "minicms.toml"
        config_file.write_text('''
[server]
host = "0.0.0.0"
port = 3000

[menu]
rootmenuitems = """
Courses|courses
-All courses|allcourses|/course/
"""
adminmenuitems = "managepages,settings"
default_language = "fr"
strict_identifiers = true

[access]
managepages = ["manager", "editingteacher"]

[[navigation.primary]]
label = "Home"
url = "/"

[[navigation.secondary]]
key = "managepages"
label = "Manage pages"
url = "/admin/pages"
layouts = ["mcmslayout"]

[[pages]]
id = 1
title = "About us"
short_name = "About"
identifier = "about"
parent_menu = "top"
menu_sort_order = 3
roles = ["guest", "student"]

[[pages]]
id = 2
title = "Team"
parent_id = 1

[live_reload]
enabled = false
''')

        config = Config.load(config_file)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.menu.rootmenuitems.splitlines() == [
            "Courses|courses",
            "-All courses|allcourses|/course/",
        ]
        assert config.menu.adminmenuitems == "managepages,settings"
        assert config.menu.default_language == "fr"
        assert config.menu.strict_identifiers is True
        assert config.capabilities == {"managepages": ["manager", "editingteacher"]}
        assert config.navigation.primary == [NavigationEntry(label="Home", url="/")]
        assert config.navigation.secondary == [
            NavigationEntry(
                label="Manage pages",
                url="/admin/pages",
                key="managepages",
                layouts=("mcmslayout",),
            ),
        ]
        assert config.pages == [
            Page(
                id=1,
                title="About us",
                short_name="About",
                identifier="about",
                parent_menu="top",
                menu_sort_order=3,
                roles=("guest", "student"),
            ),
            Page(id=2, title="Team", parent_id=1),
        ]
        assert config.live_reload.enabled is False
        assert config.config_path == config_file

    def test__missing_explicit_path__raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Config.load(tmp_path / "nonexistent.toml")

    def test__no_config_file__returns_defaults(self, tmp_path: Path) -> None:
        """Return defaults when nothing is discovered."""
        with patch("minicms.config.Path.cwd", return_value=tmp_path):
            config = Config.load()

        assert config.server == ServerConfig()
        assert config.menu == MenuConfig()
        assert config.pages == []
        assert config.config_path is None

    def test__discovers_config_in_parent(self, tmp_path: Path) -> None:
        """Search parent directories for minicms.toml."""
        config_file = tmp_path / "minicms.toml"
        config_file.write_text("[server]\nport = 9999\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        with patch("minicms.config.Path.cwd", return_value=nested):
            config = Config.load()

        assert config.server.port == 9999
        assert config.config_path == config_file

    def test__admin_items_as_list(self, tmp_path: Path) -> None:
        config_file = tmp_path / "minicms.toml"
        config_file.write_text('[menu]\nadminmenuitems = ["managepages", "users"]\n')

        config = Config.load(config_file)

        assert config.menu.adminmenuitems == "managepages,users"

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ('server = "x"', "server section must be a dictionary"),
            ('[server]\nport = "80"', "server.port must be an integer"),
            ("[menu]\nrootmenuitems = 3", "menu.rootmenuitems must be a string"),
            ('[menu]\nstrict_identifiers = "yes"', "menu.strict_identifiers must be a boolean"),
            ('[access]\nmanagepages = "manager"', "access.managepages must be a list of strings"),
            ('[[navigation.primary]]\nurl = "/"', "navigation.primary.label must be a string"),
            ('[[pages]]\ntitle = "No id"', "pages.id must be an integer"),
            ('[[pages]]\nid = 1', "pages.title must be a string"),
            ('[[pages]]\nid = 1\ntitle = "T"\nparent_id = "2"', "pages.parent_id must be an integer"),
            ('[[pages]]\nid = 1\ntitle = "T"\nroles = "guest"', "pages.roles must be a list of strings"),
            (
                '[[pages]]\nid = 1\ntitle = "A"\n\n[[pages]]\nid = 1\ntitle = "B"',
                "pages.id values must be unique",
            ),
            ("[live_reload]\nenabled = 1", "live_reload.enabled must be a boolean"),
        ],
    )
    def test__invalid_values__raise(self, tmp_path: Path, content: str, message: str) -> None:
        config_file = tmp_path / "minicms.toml"
        config_file.write_text(content)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)

    def test__invalid_toml__raises_value_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "minicms.toml"
        config_file.write_text("[menu\n")

        with pytest.raises(ValueError, match="Invalid TOML"):
            Config.load(config_file)


class TestGetConfig:
    """Tests for Config.get_config()."""

    def test_menu_settings(self, test_config: Config) -> None:
        assert test_config.get_config("rootmenuitems") == test_config.menu.rootmenuitems
        assert test_config.get_config("adminmenuitems") == "managepages,settings"

    def test_unknown_setting(self, test_config: Config) -> None:
        assert test_config.get_config("theme") is None


class TestWithOverrides:
    """Tests for Config.with_overrides()."""

    def test__overrides_applied(self, test_config: Config) -> None:
        config = test_config.with_overrides(host="0.0.0.0", port=9000, live_reload_enabled=True)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 9000
        assert config.live_reload.enabled is True

    def test__original_unchanged(self, test_config: Config) -> None:
        test_config.with_overrides(port=9000)

        assert test_config.server.port == 8080

    def test__none_keeps_values(self, test_config: Config) -> None:
        config = test_config.with_overrides()

        assert config.server == test_config.server
        assert config.live_reload == test_config.live_reload
