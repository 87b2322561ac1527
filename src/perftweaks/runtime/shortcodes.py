"""Shortcode registry and leftover-shortcode stripping."""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional

ShortcodeHandler = Callable[..., str]

# Matches [tag], [tag attr="x"], [tag /] and [tag]...[/tag] for any tag name.
# Group 1/6 carry the extra brackets of escaped [[tag]] markup, group 2 is the
# tag, 3 the attributes, 4 the self-closing slash, 5 the enclosed content.
SHORTCODE_RE = re.compile(
    r"""
    \[
    (\[?)
    ([A-Za-z][\w-]*)
    (?![\w-])
    (
        [^\]/]*
        (?:/(?!\])[^\]/]*)*?
    )
    (?:
        (/)\]
    |
        \]
        (?:
            (
                [^\[]*
                (?:\[(?!/\2\])[^\[]*)*
            )
            \[/\2\]
        )?
    )
    (\]?)
    """,
    re.VERBOSE,
)


class ShortcodeRegistry:
    """Tags currently provided by the host's active extensions."""

    def __init__(self) -> None:
        self._tags: Dict[str, Optional[ShortcodeHandler]] = {}

    def add(self, tag: str, handler: Optional[ShortcodeHandler] = None) -> None:
        self._tags[tag] = handler

    def remove(self, tag: str) -> None:
        self._tags.pop(tag, None)

    def exists(self, tag: str) -> bool:
        return tag in self._tags

    def __contains__(self, tag: str) -> bool:
        return self.exists(tag)


def strip_unregistered(content: str, registry: ShortcodeRegistry) -> str:
    """Remove shortcodes whose tag is not registered, enclosed content included.

    Registered tags and escaped ``[[tag]]`` markup are kept verbatim.
    """

    def _replace(match: re.Match) -> str:
        if match.group(1) == "[" and match.group(6) == "]":
            return match.group(0)
        if registry.exists(match.group(2)):
            return match.group(0)
        # A lone extra bracket on either side is literal text
        return match.group(1) + match.group(6)

    return SHORTCODE_RE.sub(_replace, content)


__all__ = ["SHORTCODE_RE", "ShortcodeRegistry", "strip_unregistered"]
