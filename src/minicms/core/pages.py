"""Pages and their placement in the menu.

Pages are records owned by the CMS storage. Each may ask to appear in the
menu below a named menu node, below the node of its parent page, or at the
top level.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from yarl import URL

from minicms.core.access import AccessControl, Viewer
from minicms.core.menu import MenuNode
from minicms.core.types import MENU_TARGET_NONE, MENU_TARGET_TOP, MenuURL

logger = logging.getLogger(__name__)

PAGE_URL_PREFIX = "/page"


@dataclass(frozen=True)
class Page:
    """Page record data used by the menu."""

    id: int
    title: str
    short_name: str = ""
    identifier: str = ""
    parent_id: int = 0
    parent_menu: str = MENU_TARGET_NONE
    menu_sort_order: int = 0
    roles: tuple[str, ...] = ()

    @property
    def menu_label(self) -> str:
        return self.short_name or self.title

    def canonical_url(self) -> MenuURL:
        """URL of the page, keyed by identifier when the page has one.

        Characters not allowed in a path are percent-encoded.
        """
        key = self.identifier or str(self.id)
        return MenuURL(str(URL.build(path=f"{PAGE_URL_PREFIX}/{key}")))


class PageRepository(Protocol):
    """Read access to page records."""

    def list_all_pages(self) -> list[Page]: ...

    def get_page(self, page_id: int) -> Page | None: ...


class InMemoryPageRepository:
    """Page repository backed by a list, in creation order."""

    __slots__ = ("_id_index", "_pages")

    def __init__(self, pages: Iterable[Page] = ()) -> None:
        self._pages = list(pages)
        self._id_index = {page.id: page for page in self._pages}

    def list_all_pages(self) -> list[Page]:
        return list(self._pages)

    def get_page(self, page_id: int) -> Page | None:
        return self._id_index.get(page_id)


class PageAttacher:
    """Attaches visible pages to a menu tree."""

    def __init__(self, repository: PageRepository, access: AccessControl) -> None:
        """Initialize attacher.

        Args:
            repository: Source of parent page records
            access: Decides which pages the viewer may see
        """
        self._repository = repository
        self._access = access

    def attach(self, root: MenuNode, pages: Iterable[Page], viewer: Viewer) -> None:
        """Attach every page the viewer may see below its target node.

        Pages are handled in order, so a page is found as a target only by
        pages coming after it. Pages whose target is missing from the tree
        are left out.

        Args:
            root: Menu root, modified in place
            pages: Pages to place
            viewer: User the menu is built for
        """
        for page in pages:
            if not self._access.is_authorized_to_view(viewer, page):
                continue

            target = self.resolve_target(page)
            if not target:
                logger.debug(f"Page {page.id} has no menu target, skipping")
                continue

            if not self._attach_page(root, page, target, is_root=True):
                logger.debug(f"Menu target {target!r} of page {page.id} not found, skipping")

    def resolve_target(self, page: Page) -> str | None:
        """Get the identifier of the node a page should hang below.

        Args:
            page: Page to place

        Returns:
            Node identifier, "top" for the root, None when the parent page
            is missing or has no identifier
        """
        if page.parent_menu and page.parent_menu != MENU_TARGET_NONE:
            return page.parent_menu

        if page.parent_id > 0:
            parent = self._repository.get_page(page.parent_id)
            if parent is None:
                return None
            return parent.identifier or None

        return MENU_TARGET_TOP

    def _attach_page(self, node: MenuNode, page: Page, target: str, *, is_root: bool) -> bool:
        """Add the page below the first matching node, in pre-order."""
        if node.identifier == target or (is_root and target == MENU_TARGET_TOP):
            node.add_child(
                page.menu_label,
                page.identifier or None,
                page.canonical_url(),
                page.menu_sort_order or None,
            )
            node.sorted_children()
            return True

        for child in list(node.sorted_children()):
            if self._attach_page(child, page, target, is_root=False):
                return True
        return False
