"""Menu definition text parser.

Converts the administrator-authored definition into a forest of MenuNode.
One item per line, fields separated by pipes:

    text|identifier|url|languages|roles

Leading hyphens on the text give the depth of the item. Languages is a
comma separated list of language codes the line is shown for. Roles is a
comma separated list of role short names the line is hidden from.

Example:
    Courses|courses
    -All courses|allcourses|/course/
    -###
    -FAQ|faq|https://example.com/faq
    -Registered only|registered|/my/|en|guest
    Mobile app|mobileapp|https://example.com/app
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from yarl import URL

from minicms.core.menu import MenuNode
from minicms.core.types import MenuURL

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True)
class DefinitionLine:
    """One non-blank line of a menu definition."""

    line_number: int
    depth: int
    label: str
    identifier: str | None = None
    url: MenuURL | None = None
    languages: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()

    def is_visible(self, language: str | None, role_short_names: frozenset[str]) -> bool:
        """Check the line's language and role filters.

        Args:
            language: Active language, None disables language filtering
            role_short_names: Role short names held by the viewer

        Returns:
            True if the viewer should see the line
        """
        if language and self.languages and language not in self.languages:
            return False
        # Roles act as a deny list: any shared role hides the line
        return not (self.roles and role_short_names.intersection(self.roles))


class DefinitionParser:
    """Parser for menu definition text."""

    def parse(
        self,
        text: str | None,
        language: str | None = None,
        role_short_names: frozenset[str] = frozenset(),
    ) -> list[MenuNode]:
        """Build the menu forest described by a definition.

        Lines hidden by language or role are attached first and removed
        once the whole text has been read, so their visible descendants
        still find their parent while walking the text.

        Args:
            text: Definition text, empty or None gives an empty forest
            language: Active language code, None disables language filtering
            role_short_names: Role short names held by the viewer

        Returns:
            Top level nodes, detached from the parser's synthetic root
        """
        root = MenuNode("root")
        if not text:
            return []

        cursor = root
        cursor_depth = 0
        hidden: list[MenuNode] = []
        for line in tokenize(text):
            while cursor_depth - line.depth >= 0:
                parent = cursor.parent
                if parent is None:
                    break
                cursor = parent
                cursor_depth -= 1

            cursor = cursor.add_child(
                line.label,
                line.identifier,
                line.url,
                line.line_number,
            )
            cursor_depth += 1

            if not line.is_visible(language, role_short_names):
                logger.debug(f"Hiding menu line {line.line_number} ({line.label!r})")
                hidden.append(cursor)

        for node in hidden:
            parent = node.parent
            if parent is not None:
                parent.remove_child(node)

        return list(root.sorted_children())


@lru_cache(maxsize=32)
def tokenize(text: str) -> tuple[DefinitionLine, ...]:
    """Split definition text into parsed lines.

    Pure function of the text, so results are cached per definition.

    Args:
        text: Definition text

    Returns:
        Parsed non-blank lines, in order
    """
    lines: list[DefinitionLine] = []
    for idx, raw_line in enumerate(text.split("\n")):
        line = raw_line.strip()
        if not line:
            continue
        lines.append(_parse_line(line, idx + 1))
    return tuple(lines)


def _parse_line(line: str, line_number: int) -> DefinitionLine:
    """Parse one trimmed, non-blank definition line."""
    label = ""
    identifier: str | None = None
    url: MenuURL | None = None
    languages: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()

    for i, setting in enumerate(line.split("|")):
        setting = setting.strip()
        if not setting:
            continue
        if i == 0:
            label = setting.lstrip("-")
        elif i == 1:
            identifier = setting.lstrip("-") or None
        elif i == 2:
            url = parse_url(setting)
            if url is None:
                logger.debug(f"Ignoring invalid URL on menu line {line_number}: {setting!r}")
        elif i == 3:
            languages = _split_list(setting)
        elif i == 4:
            roles = _split_list(setting)

    depth = len(line) - len(line.lstrip("-")) + 1
    return DefinitionLine(
        line_number=line_number,
        depth=depth,
        label=label,
        identifier=identifier,
        url=url,
        languages=languages,
        roles=roles,
    )


def parse_url(value: str) -> MenuURL | None:
    """Validate a menu link.

    Accepts absolute http(s) URLs with a host and site-relative paths
    starting with a single slash.

    Args:
        value: Raw URL text

    Returns:
        Normalized URL, None if the text is not a usable link
    """
    # Hosts are decoded lazily, so bad IDNA labels only fail on access
    try:
        url = URL(value)
        if url.scheme:
            if url.scheme not in _ALLOWED_SCHEMES or not url.host:
                return None
        elif url.host or not value.startswith("/"):
            return None
        return MenuURL(str(url))
    except (TypeError, ValueError):
        return None


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())
