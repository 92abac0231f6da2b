"""Menu tree nodes.

A menu is a tree of MenuNode instances hanging off a synthetic root.
Children are kept in insertion order and stably re-sorted by sort key
whenever they are read.
"""

from __future__ import annotations

import re
import weakref
from collections.abc import Iterable, Iterator
from typing import TypedDict

_DIVIDER_RE = re.compile(r"^#+$")


class MenuNodeDict(TypedDict):
    """Dictionary representation of a menu node for renderers."""

    text: str
    url: str | None
    title: str
    sort: int
    children: list[MenuNodeDict]
    haschildren: bool
    divider: bool


class MenuNode:
    """Vertex of the menu tree.

    The parent is held through a weak reference so that a discarded tree
    does not stay alive through its children.
    """

    __slots__ = (
        "__weakref__",
        "_children",
        "_last_sort_key",
        "_parent",
        "identifier",
        "label",
        "link",
        "sort_key",
    )

    def __init__(
        self,
        label: str,
        identifier: str | None = None,
        link: str | None = None,
        sort_key: int = 0,
    ) -> None:
        """Initialize a detached node.

        Use add_child() to grow a tree; it takes care of the sort key
        defaulting and parent bookkeeping.

        Args:
            label: Display text, a run of "#" makes a divider
            identifier: Name other lines and pages use to attach below this node
            link: Target URL, None for structural nodes
            sort_key: Ordering value among siblings
        """
        self.label = label
        self.identifier = identifier or None
        self.link = link
        self.sort_key = int(sort_key)
        self._parent: weakref.ref[MenuNode] | None = None
        self._children: list[MenuNode] = []
        self._last_sort_key = 0

    def __repr__(self) -> str:
        return (
            f"MenuNode(label={self.label!r}, identifier={self.identifier!r}, "
            f"sort_key={self.sort_key})"
        )

    @property
    def parent(self) -> MenuNode | None:
        """Parent node, None for a root (or when the parent was discarded)."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_divider(self) -> bool:
        return bool(_DIVIDER_RE.match(self.label))

    def add_child(
        self,
        label: str,
        identifier: str | None = None,
        link: str | None = None,
        sort_key: int | None = None,
    ) -> MenuNode:
        """Create a child node and append it.

        Args:
            label: Display text
            identifier: Optional attachment name
            link: Optional URL
            sort_key: Explicit sort key; None or 0 means one more than the
                last sort key issued by this node

        Returns:
            The new child node
        """
        if not sort_key:
            sort_key = self._last_sort_key + 1
        child = MenuNode(label, identifier, link, sort_key)
        child._parent = weakref.ref(self)
        self._children.append(child)
        self._last_sort_key = child.sort_key
        return child

    def remove_child(self, node: MenuNode) -> bool:
        """Remove a node from this subtree.

        Direct children are checked first, then each child's subtree.

        Returns:
            True if the node was found and removed
        """
        for idx, child in enumerate(self._children):
            if child is node:
                del self._children[idx]
                return True
        return any(child.remove_child(node) for child in self._children)

    def adopt(self, children: Iterable[MenuNode]) -> None:
        """Replace the children of this node with the given nodes.

        The adopted nodes keep their sort keys. The counter used by
        add_child() is left untouched.
        """
        self._children = []
        for child in children:
            child._parent = weakref.ref(self)
            self._children.append(child)

    def sorted_children(self) -> list[MenuNode]:
        """Sort children by sort key (stable) and return them."""
        self._children.sort(key=lambda child: child.sort_key)
        return self._children

    def has_children(self) -> bool:
        return len(self._children) > 0

    def sort_recursive(self) -> None:
        """Sort every level of this subtree."""
        for child in self.sorted_children():
            child.sort_recursive()

    def walk(self) -> Iterator[MenuNode]:
        """Iterate over this node and its descendants in pre-order."""
        yield self
        for child in self.sorted_children():
            yield from child.walk()

    def to_dict(self) -> MenuNodeDict:
        """Convert to dictionary for JSON serialization."""
        children = self.sorted_children()
        return {
            "text": self.label,
            "url": self.link,
            "title": self.label,
            "sort": self.sort_key,
            "children": [child.to_dict() for child in children],
            "haschildren": bool(children),
            "divider": self.is_divider,
        }
