"""UI theme definitions and selection helpers.

Themes are ANSI palettes for tree rows printed by the CLI. ``plain`` emits no
escape sequences and is used for ``--no-color`` and non-TTY output.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    tree_marker: str
    tree_container: str
    tree_leaf: str
    tree_kind: str
    tree_loading: str
    checkbox_checked: str
    checkbox_partial: str
    checkbox_unchecked: str
    search_highlight: str
    search_highlight_end: str
    heading: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    tree_marker="\033[38;5;44m",
    tree_container="\033[1;34m",
    tree_leaf="\033[38;5;252m",
    tree_kind="\033[2;38;5;250m",
    tree_loading="\033[38;5;214m",
    checkbox_checked="\033[38;5;42m",
    checkbox_partial="\033[38;5;214m",
    checkbox_unchecked="\033[2;38;5;250m",
    search_highlight="\033[7;1m",
    search_highlight_end="\033[27;22m",
    heading="\033[1;38;5;81m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    tree_marker="",
    tree_container="",
    tree_leaf="",
    tree_kind="",
    tree_loading="",
    checkbox_checked="",
    checkbox_partial="",
    checkbox_unchecked="",
    search_highlight="",
    search_highlight_end="",
    heading="",
)

_THEMES = {theme.name: theme for theme in (DEFAULT_THEME, PLAIN_THEME)}


def available_theme_names() -> list[str]:
    return sorted(_THEMES)


def get_theme(name: str | None) -> UITheme:
    """Resolve a theme by name, falling back to the default palette."""
    if name is None:
        return DEFAULT_THEME
    return _THEMES.get(name.strip().lower(), DEFAULT_THEME)
