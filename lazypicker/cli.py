"""Command-line front door for lazypicker.

Loads a catalog (or the bundled demo), replays expand/check/search actions
against a ``TreeSession`` on the asyncio loop, and prints the resulting tree
plus, optionally, the selected-only mirror view.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from . import config
from .runtime.resolver import TimedCatalogResolver, demo_catalog
from .runtime.session import TreeSession
from .tree_model.build import load_catalog
from .tree_model.rendering import format_tree_rows
from .tree_model.types import DuplicateNodeIdError, Nodes
from .ui_theme import PLAIN_THEME, UITheme, available_theme_names, get_theme


def _non_negative_float(value: str) -> float:
    """argparse type for non-negative delays in seconds."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse a lazily loaded catalog tree and select objects with tri-state checkboxes."
    )
    parser.add_argument("catalog", nargs="?", default=None, help="Catalog JSON file. Defaults to the demo catalog.")
    parser.add_argument("--delay", type=_non_negative_float, default=None, help="Simulated fetch delay in seconds.")
    parser.add_argument("--expand", action="append", default=[], metavar="ID", help="Expand a container (repeatable).")
    parser.add_argument("--check", action="append", default=[], metavar="ID", help="Check a node (repeatable).")
    parser.add_argument("--uncheck", action="append", default=[], metavar="ID", help="Uncheck a node (repeatable).")
    parser.add_argument("--toggle", action="append", default=[], metavar="ID", help="Click a node's checkbox (repeatable).")
    parser.add_argument(
        "--apply-pattern",
        action="append",
        default=[],
        nargs=2,
        metavar=("ID", "PATTERN"),
        help="Check children of ID whose names match the regex PATTERN, uncheck the rest.",
    )
    parser.add_argument("--search", default="", help="Only show nodes matching this text, with their ancestors.")
    parser.add_argument("--selected", action="store_true", help="Also print the selected-only mirror tree.")
    parser.add_argument("--info", action="append", default=[], metavar="ID", help="Print details for a node.")
    parser.add_argument("--no-checkboxes", action="store_true", help="Hide checkbox glyphs.")
    parser.add_argument("--checkbox-position", choices=config.CHECKBOX_POSITIONS, default=None)
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument(
        "--save-preferences",
        action="store_true",
        help="Persist --delay, --checkbox-position and --theme as defaults.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log fetch activity to stderr.")
    return parser


def _load_roots(catalog: str | None) -> tuple[Nodes, dict[str, Nodes]]:
    if catalog is None:
        return demo_catalog()
    path = Path(catalog)
    if not path.exists():
        raise SystemExit(f"Catalog not found: {path}")
    try:
        return load_catalog(path)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Invalid catalog: {exc}") from exc


def describe_node(session: TreeSession, node_id: str) -> str:
    """Format the info card for ``node_id``: kind, id, location, child count."""
    node = session.get_node(node_id)
    if node is None:
        return f"{node_id}: not found"
    lines = [
        node.name,
        f"  Type: {node.kind.capitalize().replace('_', ' ')}",
        f"  ID: {node.id}",
        f"  Location: {' → '.join(session.node_location(node_id))}",
        f"  State: {session.check_state(node_id).value}",
    ]
    if node.is_container:
        lines.append(f"  Items: {len(node.children or ())} direct items")
    return "\n".join(lines)


async def run_actions(session: TreeSession, args: argparse.Namespace) -> list[str]:
    """Replay CLI actions in order; returns user-facing warnings."""
    warnings: list[str] = []
    for node_id in args.expand:
        if session.get_node(node_id) is None:
            warnings.append(f"Unknown node id: {node_id}")
            continue
        session.on_toggle_expand(node_id, True)
        await session.wait_idle()

    for node_id in args.check:
        session.on_check_change(node_id, True)
    for node_id in args.uncheck:
        session.on_check_change(node_id, False)
    for node_id in args.toggle:
        session.toggle_check(node_id)
    for node_id, pattern in args.apply_pattern:
        error = session.apply_pattern(node_id, pattern)
        if error is not None:
            warnings.append(f"Invalid pattern {pattern!r}: {error}")

    if args.search:
        session.set_search_query(args.search)
    return warnings


def render_session(
    session: TreeSession,
    args: argparse.Namespace,
    *,
    checkbox_position: str,
    theme: UITheme,
) -> str:
    out: list[str] = [f"{theme.heading}Catalog{theme.reset}"]
    out.extend(
        format_tree_rows(
            session.visible_nodes,
            session.expanded_ids,
            show_checkboxes=not args.no_checkboxes,
            checkbox_position=checkbox_position,
            search_query=session.search_query,
            theme=theme,
            lookup=session.get_node,
        )
    )
    if args.selected:
        out.append("")
        out.append(f"{theme.heading}Selected Objects{theme.reset} ({len(session.get_checked_items())} checked)")
        out.extend(format_tree_rows(session.selected_nodes, session.selected_expanded_ids, show_checkboxes=False, theme=theme))
    for node_id in args.info:
        out.append("")
        out.append(describe_node(session, node_id))
    return "\n".join(out) + "\n"


def main() -> None:
    """Parse CLI arguments, replay actions on the catalog, and print the trees."""
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    roots, children_by_parent = _load_roots(args.catalog)
    delay = args.delay if args.delay is not None else config.load_fetch_delay_seconds()
    checkbox_position = args.checkbox_position or config.load_checkbox_position()
    theme_name = args.theme or config.load_theme_name()
    theme = PLAIN_THEME if args.no_color or not sys.stdout.isatty() else get_theme(theme_name)

    if args.save_preferences:
        if args.delay is not None:
            config.save_fetch_delay_seconds(args.delay)
        if args.checkbox_position is not None:
            config.save_checkbox_position(args.checkbox_position)
        if args.theme is not None:
            config.save_theme_name(args.theme)

    try:
        session = TreeSession(roots, TimedCatalogResolver(children_by_parent, delay_seconds=delay))
    except DuplicateNodeIdError as exc:
        raise SystemExit(f"Invalid catalog: {exc}") from exc

    warnings = asyncio.run(run_actions(session, args))
    for warning in warnings:
        sys.stderr.write(warning + "\n")
    sys.stdout.write(render_session(session, args, checkbox_position=checkbox_position, theme=theme))


if __name__ == "__main__":
    main()
