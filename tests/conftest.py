"""Shared test fixtures."""

from pathlib import Path

import pytest
from minicms.config import (
    Config,
    LiveReloadConfig,
    MenuConfig,
    NavigationConfig,
    ServerConfig,
)
from minicms.core.access import RoleAccessControl, Viewer
from minicms.core.feed import NavigationEntry
from minicms.core.pages import Page

MENU_DEFINITION = """\
First level first item|firstlevel|http://www.example.com/
-Second level first item|secondlevel|http://www.example.com/partners/|en
-Second level second item|secondlevelseconditem|http://www.example.com/hq/
--Third level first item||http://www.example.com/jobs/
-Second level third item|http://www.example.com/development/
First level first item|firstlevelfr|http://www.example.com/|fr
First level first item|firstlevelen|http://www.example.com/|en
"""


@pytest.fixture
def menu_definition() -> str:
    """Menu definition with three levels and language restricted lines."""
    return MENU_DEFINITION


@pytest.fixture
def access() -> RoleAccessControl:
    """Access control where managers can manage pages."""
    return RoleAccessControl({"managepages": ["manager"]})


@pytest.fixture
def manager() -> Viewer:
    return Viewer(username="manager", roles=frozenset({"manager"}))


@pytest.fixture
def student() -> Viewer:
    return Viewer(username="student", roles=frozenset({"student"}))


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration without a backing file.

    Holds the sample definition, two pages and host navigation entries.
    Live reload is disabled.
    """
    return Config(
        server=ServerConfig(),
        menu=MenuConfig(
            rootmenuitems=MENU_DEFINITION,
            adminmenuitems="managepages,settings",
        ),
        navigation=NavigationConfig(
            primary=[NavigationEntry(label="Home", url="/")],
            secondary=[
                NavigationEntry(label="Manage pages", url="/admin/pages", key="managepages"),
                NavigationEntry(label="Users", url="/admin/users", key="users"),
                NavigationEntry(label="Settings", url="/admin/settings", key="settings"),
            ],
        ),
        live_reload=LiveReloadConfig(enabled=False),
        capabilities={"managepages": ["manager"]},
        pages=[
            Page(id=1, title="About us", short_name="About", identifier="about", parent_menu="top"),
            Page(
                id=2,
                title="Staff room",
                identifier="staffroom",
                parent_menu="firstlevel",
                roles=("manager", "teacher"),
            ),
        ],
    )
