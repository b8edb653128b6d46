"""
Scene reordering - moves one scene block before or after another scene.
"""

from enum import Enum
from typing import List, Sequence

from .log import get_logger
from .outline import parse_outline, scene_starts as outline_scene_starts

logger = get_logger(__name__)


class Position(str, Enum):
    BEFORE = "before"
    AFTER = "after"


def scene_span(scene_starts: Sequence[int], index: int, line_count: int):
    """Inclusive (start, end) lines of the scene at `index` in the scene list."""
    start = scene_starts[index]
    if index + 1 < len(scene_starts):
        end = scene_starts[index + 1] - 1
    else:
        end = line_count - 1
    return start, end


def move_scene(
    lines: Sequence[str],
    scene_starts: Sequence[int],
    from_index: int,
    to_index: int,
    position: Position,
) -> List[str]:
    """Return a new line list with scene `from_index` moved next to `to_index`.

    The moved block is everything from the scene heading up to the next
    scene heading. Indices refer to the scene list, not the outline.
    """
    if from_index == to_index:
        raise ValueError(f"Cannot move scene {from_index} relative to itself")
    for index in (from_index, to_index):
        if not 0 <= index < len(scene_starts):
            raise IndexError(f"Scene index {index} out of range (0-{len(scene_starts) - 1})")
    position = Position(position)

    from_start, from_end = scene_span(scene_starts, from_index, len(lines))
    result = list(lines)
    block = result[from_start:from_end + 1]
    del result[from_start:from_end + 1]
    removed = len(block)

    # Boundaries that lay after the cut moved up by the block length
    def shifted(line: int) -> int:
        return line - removed if line > from_start else line

    insert_at = shifted(scene_starts[to_index])
    if position is Position.AFTER:
        if to_index + 1 < len(scene_starts):
            insert_at = shifted(scene_starts[to_index + 1])
        else:
            insert_at = len(result)

    result[insert_at:insert_at] = block
    logger.debug(
        "Moved scene %d (lines %d-%d) %s scene %d, inserted at line %d",
        from_index, from_start, from_end, position.value, to_index, insert_at,
    )
    return result


def move_scene_in_text(text: str, from_index: int, to_index: int, position: Position) -> str:
    """Parse `text`, move one scene and return the rewritten document."""
    lines = text.split("\n")
    starts = outline_scene_starts(parse_outline(text))
    return "\n".join(move_scene(lines, starts, from_index, to_index, position))
