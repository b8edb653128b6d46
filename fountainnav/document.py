"""
Document store - reads a screenplay file and writes new text atomically.
"""

import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from .config import DisplayOptions
from .facts import SceneFacts, scene_facts
from .log import get_logger
from .outline import BOM, ItemKind, OutlineItem, parse_outline, scene_end, scene_items, scene_numbers, scene_starts
from .reorder import Position, move_scene

logger = get_logger(__name__)


FOUNTAIN_CLASS = "fountain"
FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*(?:\n|$)", re.DOTALL)
KEY_RE = re.compile(r"^([A-Za-z_][\w-]*)\s*:\s*(.*)$")
LIST_ITEM_RE = re.compile(r"^\s+-\s*(.+)$")


def _unquote(value: str) -> str:
    return value.strip().strip("\"'").strip()


def frontmatter_classes(text: str) -> List[str]:
    """Values of the `cssclasses` key in the leading frontmatter block."""
    match = FRONTMATTER_RE.match(text.lstrip(BOM))
    if not match:
        return []

    classes = []
    in_classes = False
    for line in match.group(1).split("\n"):
        key_match = KEY_RE.match(line)
        if key_match:
            in_classes = key_match.group(1) == "cssclasses"
            value = key_match.group(2).strip()
            if in_classes and value:
                if value.startswith("[") and value.endswith("]"):
                    value = value[1:-1]
                classes.extend(_unquote(v) for v in value.split(",") if _unquote(v))
            continue

        item_match = LIST_ITEM_RE.match(line)
        if in_classes and item_match:
            classes.append(_unquote(item_match.group(1)))

    return classes


def is_fountain_text(text: str) -> bool:
    return FOUNTAIN_CLASS in frontmatter_classes(text)


def format_outline_entry(
    item: OutlineItem,
    number: Optional[int] = None,
    facts: Optional[SceneFacts] = None,
    options: Optional[DisplayOptions] = None,
) -> str:
    """Render one outline item as text, honouring the display toggles."""
    options = options or DisplayOptions()
    if item.kind is ItemKind.SECTION:
        indent = "  " * ((item.level or 1) - 1)
        return f"{indent}{'#' * (item.level or 1)} {item.text}"
    if item.kind is ItemKind.SYNOPSIS:
        return f"    = {item.text}"
    if item.kind is ItemKind.NOTE:
        return f"    [[{item.text}]]"

    heading = item.text
    if options.scene_numbers and number is not None:
        heading = f"{number}. {heading}"
    if facts and facts.tasks:
        heading += " ✎"

    parts = [heading]
    if facts:
        if options.preview and facts.preview:
            parts.append(f"    {facts.preview}")
        if options.characters and facts.characters:
            parts.append(f"    Characters: {', '.join(facts.characters)}")
        if options.tasks:
            for task in facts.tasks:
                box = "☑" if task.checked else "☐"
                parts.append(f"    {box} {task.text}")
    return "\n".join(parts)


class ScreenplayDocument:
    """A single fountain document on disk."""

    def __init__(self, path):
        self.path = Path(path)
        self.name = self.path.stem

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8-sig")

    def write(self, text: str):
        """Replace the document contents atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
                tmp.write(text)
            if self.path.exists():
                shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.info("Wrote %s (%d lines)", self.path, text.count("\n") + 1)

    def lines(self) -> List[str]:
        return self.read().split("\n")

    def is_fountain(self) -> bool:
        """Check for `cssclasses: fountain` in the frontmatter."""
        return is_fountain_text(self.read())

    def outline(self) -> List[OutlineItem]:
        return parse_outline(self.read())

    def scenes(self) -> List[OutlineItem]:
        return scene_items(self.outline())

    def facts_for(self, index: int, items: Optional[List[OutlineItem]] = None,
                  lines: Optional[List[str]] = None) -> SceneFacts:
        """Facts for the scene at outline position `index`."""
        if lines is None:
            lines = self.lines()
        if items is None:
            items = parse_outline("\n".join(lines))
        item = items[index]
        if not item.is_scene:
            raise ValueError(f"Outline item {index} is a {item.kind.value}, not a scene")
        return scene_facts(lines, item.line, scene_end(items, index, len(lines)))

    def move_scene(self, from_scene: int, to_scene: int, position: Position) -> str:
        """Move a scene (0-based scene indices) and persist the new text."""
        text = self.read()
        lines = text.split("\n")
        starts = scene_starts(parse_outline(text))
        new_lines = move_scene(lines, starts, from_scene, to_scene, position)
        new_text = "\n".join(new_lines)
        self.write(new_text)
        logger.info("Moved scene %d %s scene %d in %s",
                    from_scene + 1, Position(position).value, to_scene + 1, self.path)
        return new_text

    def export_outline(self, options: Optional[DisplayOptions] = None) -> str:
        """Plain-text outline of the document."""
        lines = self.lines()
        items = parse_outline("\n".join(lines))
        numbers = scene_numbers(items)

        entries = [f"{self.name} - Outline", ""]
        for index, item in enumerate(items):
            facts = self.facts_for(index, items, lines) if item.is_scene else None
            entries.append(format_outline_entry(item, numbers.get(index), facts, options))
        return "\n".join(entries) + "\n"
