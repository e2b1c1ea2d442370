"""Command-line driver for lazyselect.

Loads a JSON option catalog, replays typed text and keys through a session,
and prints the resulting menu rows and committed value.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .option_tree import MenuView, OptionRow, is_creatable, option_from_data, option_to_data, options_from_data
from .runtime.timers import ImmediateTimers
from .session import SelectConfig, SelectSession, SelectValue


def _split_keys(value: str) -> list[str]:
    """argparse type for comma-separated key tokens."""
    keys = [part.strip() for part in value.split(",") if part.strip()]
    if not keys:
        raise argparse.ArgumentTypeError("expected at least one key")
    return keys


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SystemExit(f"Cannot read {path}: {exc}") from exc
    except ValueError as exc:
        raise SystemExit(f"Invalid JSON in {path}: {exc}") from exc


def _parse_value(raw: str | None, is_multi: bool) -> SelectValue:
    if raw is None:
        return [] if is_multi else None
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise SystemExit(f"Invalid --value JSON: {exc}") from exc
    if data is None:
        return [] if is_multi else None
    try:
        if isinstance(data, list):
            return [option_from_data(item) for item in data]  # type: ignore[misc]
        node = option_from_data(data)
    except ValueError as exc:
        raise SystemExit(f"Invalid --value: {exc}") from exc
    return [node] if is_multi else node  # type: ignore[return-value,list-item]


def _row_label(row: OptionRow, view: MenuView) -> str:
    if is_creatable(row.node):
        return view.create_option_message
    return str(getattr(row.node, "label", ""))


def render_menu(view: MenuView) -> str:
    """Render rows as indented text with highlight and selection markers."""
    out: list[str] = []
    if view.show_loading:
        out.append("  Loading...")
    if view.show_no_options:
        out.append(f"  {view.no_options_message}")
    for row in view.rows:
        marker = ">" if row.highlighted else " "
        selected = "*" if row.selected else " "
        indent = "  " * row.depth
        suffix = "/" if row.kind == "group" else ""
        out.append(f"{marker}{selected} {indent}{_row_label(row, view)}{suffix}")
    return "\n".join(out) + "\n"


def value_to_json(value: SelectValue) -> str:
    if value is None:
        return "null"
    if isinstance(value, list):
        return json.dumps([option_to_data(leaf) for leaf in value])
    return json.dumps(option_to_data(value))


def main() -> None:
    """Parse CLI arguments, replay input through a session, print the menu."""
    parser = argparse.ArgumentParser(
        description="Replay typed text and keys through a headless select session."
    )
    parser.add_argument("options", help="Path to a JSON list of options/groups.")
    parser.add_argument("--query", default=None, help="Text typed into the search input.")
    parser.add_argument(
        "--keys",
        type=_split_keys,
        default=[],
        help="Comma-separated keys to replay (UP, DOWN, PAGE_UP, PAGE_DOWN, HOME, END, ENTER, BACKSPACE).",
    )
    parser.add_argument("--value", default=None, help="Initial committed value as JSON.")
    parser.add_argument("--multi", action="store_true", help="Enable multi-select.")
    parser.add_argument("--creatable", action="store_true", help="Offer to create typed values.")
    parser.add_argument("--clearable", action="store_true", help="Allow backspace to clear the value.")
    parser.add_argument("--verbose", action="store_true", help="Log session transitions to stderr.")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    path = Path(args.options)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    raw_options = _load_json(path)
    if not isinstance(raw_options, list):
        raise SystemExit("Options file must contain a JSON list.")
    try:
        options = options_from_data(raw_options)
    except ValueError as exc:
        raise SystemExit(f"Invalid options: {exc}") from exc

    holder: list[SelectSession] = []

    def on_change(value: SelectValue) -> None:
        holder[0].set_value(value)

    session = SelectSession(
        SelectConfig(
            options=options,
            value=_parse_value(args.value, args.multi),
            on_change=on_change,
            is_multi=args.multi,
            is_creatable=args.creatable,
            is_clearable=args.clearable,
            on_create=lambda text: text,
            debounce_seconds=0.0,
        ),
        timers=ImmediateTimers(),
    )
    holder.append(session)
    session.open()
    if args.query:
        session.input_change(args.query)
    for key in args.keys:
        session.handle_key(key)

    sys.stdout.write(render_menu(session.view()))
    sys.stdout.write(f"value: {value_to_json(session.value)}\n")


if __name__ == "__main__":
    main()
