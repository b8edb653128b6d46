"""
fountainnav - outline, scene facts and scene reordering for Fountain
screenplays embedded in Markdown.
"""

from .facts import SceneFacts, Task, extract_characters, extract_preview, extract_tasks, scene_facts
from .outline import (
    ItemKind,
    OutlineItem,
    outline_changed,
    parse_outline,
    scene_end,
    scene_items,
    scene_numbers,
    scene_starts,
)
from .reorder import Position, move_scene, move_scene_in_text

__version__ = "0.1.0"

__all__ = [
    "ItemKind",
    "OutlineItem",
    "Position",
    "SceneFacts",
    "Task",
    "extract_characters",
    "extract_preview",
    "extract_tasks",
    "move_scene",
    "move_scene_in_text",
    "outline_changed",
    "parse_outline",
    "scene_end",
    "scene_facts",
    "scene_items",
    "scene_numbers",
    "scene_starts",
]
