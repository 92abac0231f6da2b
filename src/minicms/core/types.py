"""Core type definitions."""

from typing import NewType, Protocol

# Link of a menu node, either absolute http(s) or site-relative ("/course/")
MenuURL = NewType("MenuURL", str)

# Attachment targets with a special meaning for pages
MENU_TARGET_NONE = "none"
MENU_TARGET_TOP = "top"

# Capability allowing a viewer to manage pages (and see the admin subtree)
MANAGE_PAGES_CAPABILITY = "managepages"

# Page layout passed to the host navigation feed for secondary items
PAGE_LAYOUT_NAME = "mcmslayout"


class ConfigProvider(Protocol):
    """Site-wide settings store.

    Known names are ``rootmenuitems`` (menu definition text) and
    ``adminmenuitems`` (comma separated allow-list of secondary keys).
    """

    def get_config(self, name: str) -> str | None: ...
