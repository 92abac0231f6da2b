"""Host navigation feed.

Navigation items owned by the host application, merged into the menu:
primary items at the top level, secondary items below the administration
node.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class NavigationEntry:
    """Navigation item supplied by the host."""

    label: str
    url: str | None = None
    key: str = ""
    layouts: tuple[str, ...] = ()


class NavigationFeed(Protocol):
    """Host navigation collaborator."""

    def primary_navigation_items(self) -> list[NavigationEntry]: ...

    def secondary_navigation_items(self, page_layout: str) -> list[NavigationEntry]: ...


class StaticNavigationFeed:
    """Navigation feed with fixed entries.

    Secondary entries listing layouts are only returned for those layouts.
    """

    def __init__(
        self,
        primary: Iterable[NavigationEntry] = (),
        secondary: Iterable[NavigationEntry] = (),
    ) -> None:
        self._primary = list(primary)
        self._secondary = list(secondary)

    def primary_navigation_items(self) -> list[NavigationEntry]:
        return list(self._primary)

    def secondary_navigation_items(self, page_layout: str) -> list[NavigationEntry]:
        return [
            entry
            for entry in self._secondary
            if not entry.layouts or page_layout in entry.layouts
        ]
