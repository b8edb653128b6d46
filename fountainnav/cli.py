"""
Command line entry point: open the navigator, print an outline or move a scene.
"""

import argparse
import sys
from typing import List, Optional

from .config import ConfigManager, DisplayOptions
from .document import ScreenplayDocument
from .log import configure_logging, get_logger
from .reorder import Position

logger = get_logger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fountainnav",
        description="Outline navigator for Fountain screenplays written in Markdown.",
    )
    parser.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVELS,
                        help="Logging level (default: from config, WARNING)")
    sub = parser.add_subparsers(dest="command")

    open_cmd = sub.add_parser("open", help="Open the navigator (default command)")
    open_cmd.add_argument("file", nargs="?", help="Document to open (default: last opened)")

    outline_cmd = sub.add_parser("outline", help="Print the outline of a document")
    outline_cmd.add_argument("file")
    outline_cmd.add_argument("--preview", action="store_true", help="Show scene previews")
    outline_cmd.add_argument("--numbers", action="store_true", help="Number the scenes")
    outline_cmd.add_argument("--characters", action="store_true", help="List speaking characters")
    outline_cmd.add_argument("--tasks", action="store_true", help="List checklist tasks")

    move_cmd = sub.add_parser("move", help="Move a scene before or after another scene")
    move_cmd.add_argument("file")
    move_cmd.add_argument("scene", type=int, help="Scene to move (1-based)")
    move_cmd.add_argument("target", type=int, help="Scene to move next to (1-based)")
    where = move_cmd.add_mutually_exclusive_group()
    where.add_argument("--before", dest="position", action="store_const",
                       const=Position.BEFORE, help="Insert before the target (default)")
    where.add_argument("--after", dest="position", action="store_const",
                       const=Position.AFTER, help="Insert after the target")
    move_cmd.set_defaults(position=Position.BEFORE)

    return parser


def _open(file: Optional[str]) -> int:
    from .app import FountainNavigator

    path = file or ConfigManager.get_last_document()
    FountainNavigator(path).run()
    return 0


def _outline(args) -> int:
    document = ScreenplayDocument(args.file)
    options = DisplayOptions(
        preview=args.preview,
        scene_numbers=args.numbers,
        characters=args.characters,
        tasks=args.tasks,
    )
    print(document.export_outline(options), end="")
    return 0


def _move(args) -> int:
    if args.scene == args.target:
        print("Scene and target are the same; nothing to move.", file=sys.stderr)
        return 1
    document = ScreenplayDocument(args.file)
    document.move_scene(args.scene - 1, args.target - 1, args.position)
    print(f"Moved scene {args.scene} {args.position.value} scene {args.target}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    tui = args.command in (None, "open")
    try:
        configure_logging(args.log_level or ConfigManager.get_log_level(), tui=tui)
        if tui:
            return _open(getattr(args, "file", None))
        if args.command == "outline":
            return _outline(args)
        return _move(args)
    except (OSError, ValueError, IndexError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
