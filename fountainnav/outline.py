"""
Outline parser - turns a Fountain-in-Markdown document into a flat list of
sections, scenes, synopses and notes.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .log import get_logger

logger = get_logger(__name__)


FRONTMATTER_FENCE = "---"
BOM = "\ufeff"

SECTION_RE = re.compile(r"^(#{1,6})\s+(.+)$")
SCENE_RE = re.compile(r"^(INT|EXT|INT\./EXT|I/E)[.\s]", re.IGNORECASE)
FORCED_SCENE_RE = re.compile(r"^\.[A-Z]")
SYNOPSIS_RE = re.compile(r"^=\s*(.+)$")
NOTE_RE = re.compile(r"^\[\[(.+?)\]\]$")


class ItemKind(str, Enum):
    SECTION = "section"
    SCENE = "scene"
    SYNOPSIS = "synopsis"
    NOTE = "note"


@dataclass(frozen=True)
class OutlineItem:
    """One structural unit of the document."""

    kind: ItemKind
    text: str
    line: int
    level: Optional[int] = None

    @property
    def is_scene(self) -> bool:
        return self.kind is ItemKind.SCENE


def is_scene_heading(line: str) -> bool:
    """True for INT/EXT style headings and forced `.HEADING` lines."""
    return bool(SCENE_RE.match(line) or FORCED_SCENE_RE.match(line))


def classify_line(line: str, index: int) -> Optional[OutlineItem]:
    """Classify a single line, or return None when it is not an outline item."""
    match = SECTION_RE.match(line)
    if match:
        return OutlineItem(ItemKind.SECTION, match.group(2).strip(), index, len(match.group(1)))

    if is_scene_heading(line):
        text = line[1:] if line.startswith(".") else line
        return OutlineItem(ItemKind.SCENE, text.strip(), index)

    match = SYNOPSIS_RE.match(line)
    if match:
        return OutlineItem(ItemKind.SYNOPSIS, match.group(1).strip(), index)

    match = NOTE_RE.match(line)
    if match:
        return OutlineItem(ItemKind.NOTE, match.group(1), index)

    return None


def parse_outline(text: str) -> List[OutlineItem]:
    """Parse document text into outline items ordered by line."""
    items = []
    in_frontmatter = False

    for index, line in enumerate(text.lstrip(BOM).split("\n")):
        if line.strip() == FRONTMATTER_FENCE:
            in_frontmatter = not in_frontmatter
            continue
        if in_frontmatter:
            continue

        item = classify_line(line, index)
        if item is not None:
            items.append(item)

    logger.debug("Parsed %d outline items (%d scenes)", len(items), len(scene_items(items)))
    return items


def scene_items(items: Sequence[OutlineItem]) -> List[OutlineItem]:
    """Scenes only, in document order."""
    return [item for item in items if item.is_scene]


def scene_starts(items: Sequence[OutlineItem]) -> List[int]:
    """Start line of every scene, in document order."""
    return [item.line for item in items if item.is_scene]


def scene_end(items: Sequence[OutlineItem], index: int, line_count: int) -> int:
    """Inclusive last line of the scene at outline position `index`.

    A scene runs up to the line before the next scene heading; sections,
    synopses and notes in between belong to its body. The last scene runs
    to the end of the document.
    """
    for item in items[index + 1:]:
        if item.is_scene:
            return item.line - 1
    return line_count - 1


def scene_numbers(items: Sequence[OutlineItem]) -> Dict[int, int]:
    """Map outline position -> 1-based scene number."""
    numbers = {}
    for index, item in enumerate(items):
        if item.is_scene:
            numbers[index] = len(numbers) + 1
    return numbers


def outline_changed(old: Sequence[OutlineItem], new: Sequence[OutlineItem]) -> bool:
    """Shallow comparison used to decide whether a re-render is needed."""
    if len(old) != len(new):
        return True
    return any(
        a.kind != b.kind or a.text != b.text or a.line != b.line
        for a, b in zip(old, new)
    )
