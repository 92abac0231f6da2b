"""Viewer access control.

The menu only asks three questions of the host's authorization layer,
captured by the AccessControl protocol. RoleAccessControl answers them
from static role lists.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from minicms.core.pages import Page


@dataclass(frozen=True)
class Viewer:
    """User the menu is built for."""

    username: str = "guest"
    roles: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_roles(cls, username: str, roles: Iterable[str]) -> Viewer:
        return cls(username=username, roles=frozenset(r.strip() for r in roles if r.strip()))


class AccessControl(Protocol):
    """Authorization collaborator."""

    def is_authorized_to_view(self, viewer: Viewer, page: Page) -> bool: ...

    def role_short_names(self, viewer: Viewer) -> frozenset[str]: ...

    def has_capability(self, viewer: Viewer, capability: str) -> bool: ...


class RoleAccessControl:
    """Access control based on role short names.

    A page listing no roles is public. Otherwise the viewer needs at least
    one of the page's roles. Capabilities are granted per role.
    """

    def __init__(self, capabilities: Mapping[str, Iterable[str]] | None = None) -> None:
        """Initialize access control.

        Args:
            capabilities: Capability name to the role short names granting it
        """
        self._capabilities = {
            name: frozenset(roles) for name, roles in (capabilities or {}).items()
        }

    def is_authorized_to_view(self, viewer: Viewer, page: Page) -> bool:
        if not page.roles:
            return True
        return not viewer.roles.isdisjoint(page.roles)

    def role_short_names(self, viewer: Viewer) -> frozenset[str]:
        return viewer.roles

    def has_capability(self, viewer: Viewer, capability: str) -> bool:
        granted = self._capabilities.get(capability)
        if not granted:
            return False
        return not viewer.roles.isdisjoint(granted)
