"""Menu builder.

Composes the menu shown on CMS pages from the configured definition text,
the pages the viewer may see and the host's navigation items. A new tree is
built on every call.
"""

import logging
from collections import Counter

from minicms.core.access import AccessControl, Viewer
from minicms.core.definition import DefinitionParser
from minicms.core.feed import NavigationFeed, StaticNavigationFeed
from minicms.core.menu import MenuNode
from minicms.core.pages import PageAttacher, PageRepository
from minicms.core.types import (
    MANAGE_PAGES_CAPABILITY,
    MENU_TARGET_NONE,
    MENU_TARGET_TOP,
    PAGE_LAYOUT_NAME,
    ConfigProvider,
)

logger = logging.getLogger(__name__)

ROOT_LABEL = "root"

# Host items go after definition lines and pages, the admin node last
AUXILIARY_SORT_KEY = 9000
ADMIN_SORT_KEY = 10000

ADMIN_NODE_IDENTIFIER = "administrationsite"
ADMIN_NODE_LABEL = "Site administration"


class DuplicateIdentifierError(ValueError):
    """Raised in strict mode when two menu nodes share an identifier."""

    def __init__(self, identifiers: list[str]) -> None:
        self.identifiers = identifiers
        super().__init__(f"Duplicate menu identifiers: {', '.join(identifiers)}")


class MenuBuilder:
    """Builds the menu tree for a viewer."""

    def __init__(
        self,
        config: ConfigProvider,
        repository: PageRepository,
        access: AccessControl,
        feed: NavigationFeed | None = None,
        *,
        strict_identifiers: bool = False,
    ) -> None:
        """Initialize builder.

        Args:
            config: Settings store holding rootmenuitems and adminmenuitems
            repository: Page records
            access: Authorization collaborator
            feed: Host navigation items, None for no host items
            strict_identifiers: Reject menus where an identifier is used twice
        """
        self._config = config
        self._repository = repository
        self._access = access
        self._feed = feed if feed is not None else StaticNavigationFeed()
        self._strict_identifiers = strict_identifiers
        self._parser = DefinitionParser()
        self._attacher = PageAttacher(repository, access)

    def build(
        self,
        viewer: Viewer,
        *,
        definition_text: str | None = None,
        language: str | None = None,
    ) -> MenuNode:
        """Build the menu.

        Args:
            viewer: User the menu is built for
            definition_text: Menu definition, None reads rootmenuitems
            language: Active language, None disables language filtering

        Returns:
            Sorted menu root

        Raises:
            DuplicateIdentifierError: In strict mode, if identifiers clash
        """
        if definition_text is None:
            definition_text = self._config.get_config("rootmenuitems") or ""

        root = MenuNode(ROOT_LABEL)
        role_short_names = self._access.role_short_names(viewer)
        root.adopt(self._parser.parse(definition_text, language, role_short_names))

        self._attacher.attach(root, self._repository.list_all_pages(), viewer)

        for entry in self._feed.primary_navigation_items():
            root.add_child(entry.label, entry.key or None, entry.url, AUXILIARY_SORT_KEY)

        if self._access.has_capability(viewer, MANAGE_PAGES_CAPABILITY):
            self._add_admin_node(root)

        root.sort_recursive()

        if self._strict_identifiers:
            _check_unique_identifiers(root)

        return root

    def identifiable_menus(
        self,
        viewer: Viewer,
        *,
        definition_text: str | None = None,
    ) -> dict[str, str]:
        """Get the choices offered for a page's parent menu.

        Args:
            viewer: User the menu is built for
            definition_text: Menu definition, None reads rootmenuitems

        Returns:
            Mapping of attachment target to label, starting with the
            "none" and "top" targets
        """
        root = self.build(viewer, definition_text=definition_text)
        targets = {MENU_TARGET_NONE: "None", MENU_TARGET_TOP: "Top"}
        for node in root.walk():
            if node.identifier and node.identifier not in targets:
                targets[node.identifier] = node.label
        return targets

    def _add_admin_node(self, root: MenuNode) -> None:
        allowed = {
            key.strip()
            for key in (self._config.get_config("adminmenuitems") or "").split(",")
            if key.strip()
        }
        admin = root.add_child(ADMIN_NODE_LABEL, ADMIN_NODE_IDENTIFIER, None, ADMIN_SORT_KEY)
        for entry in self._feed.secondary_navigation_items(PAGE_LAYOUT_NAME):
            if entry.key in allowed:
                admin.add_child(entry.label, entry.key, entry.url)


def _check_unique_identifiers(root: MenuNode) -> None:
    counts = Counter(node.identifier for node in root.walk() if node.identifier)
    duplicates = sorted(identifier for identifier, count in counts.items() if count > 1)
    if duplicates:
        logger.warning(f"Menu has duplicate identifiers: {duplicates}")
        raise DuplicateIdentifierError(duplicates)
