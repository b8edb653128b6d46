"""
Per-scene facts: preview text, speaking characters and checklist tasks.

Each extractor scans the body of one scene (the lines after its heading up to
and including `end`) and never looks outside the document.
"""

import re
from dataclasses import dataclass, field
from typing import List, Sequence

from .outline import NOTE_RE, SYNOPSIS_RE, is_scene_heading

PREVIEW_MAX_LINES = 3
PREVIEW_MAX_CHARS = 200
CHARACTER_NAME_MAX = 30

HEADING_MARKER_RE = re.compile(r"^#{1,6}\s+")
TASK_MARKER_RE = re.compile(r"^- \[[ xX]\]")
TASK_RE = re.compile(r"^- \[([ xX])\]\s*(.+)$")
TRANSITION_RE = re.compile(r"^[A-Z\s]+TO:$")

SPEAKER_CUE_RE = re.compile(r"^[A-Z][A-Z\s]+(\s*\(.*\))?$")
PARENTHETICAL_RE = re.compile(r"^\(.*\)$")
CAPS_ONLY_RE = re.compile(r"^[A-Z\s]+$")
TRAILING_PARENTHETICAL_RE = re.compile(r"\s*\(.*\)$")


@dataclass(frozen=True)
class Task:
    checked: bool
    text: str
    line: int


@dataclass
class SceneFacts:
    preview: str = ""
    characters: List[str] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)


def _body(lines: Sequence[str], start: int, end: int):
    """Yield (line number, text) for the scene body."""
    for index in range(start + 1, end + 1):
        yield index, lines[index]


def _is_preview_noise(line: str) -> bool:
    return bool(
        is_scene_heading(line)
        or SYNOPSIS_RE.match(line)
        or NOTE_RE.match(line)
        or HEADING_MARKER_RE.match(line)
        or TASK_MARKER_RE.match(line)
        or TRANSITION_RE.match(line)
    )


def extract_preview(lines: Sequence[str], start: int, end: int) -> str:
    """First few lines of action/dialogue, joined and cut to 200 characters."""
    preview_lines = []
    for _, line in _body(lines, start, end):
        if len(preview_lines) >= PREVIEW_MAX_LINES:
            break
        if not line.strip():
            continue
        if _is_preview_noise(line):
            continue
        preview_lines.append(line.strip())

    return " ".join(preview_lines)[:PREVIEW_MAX_CHARS]


def _normalize_name(cue: str) -> str:
    name = TRAILING_PARENTHETICAL_RE.sub("", cue.strip())
    if not 0 < len(name) < CHARACTER_NAME_MAX:
        return ""
    return name[0].upper() + name[1:].lower()


def extract_characters(lines: Sequence[str], start: int, end: int) -> List[str]:
    """Names of speakers in the scene, in order of first appearance."""
    characters = {}
    last = len(lines) - 1

    for index, line in _body(lines, start, end):
        if not line:
            continue

        prev_line = lines[index - 1] if index > 0 else ""
        next_line = lines[index + 1] if index < last else ""

        if prev_line.strip() or not SPEAKER_CUE_RE.match(line):
            continue
        # A cue is followed by dialogue or a parenthetical, not another caps line
        if not next_line:
            continue
        if not PARENTHETICAL_RE.match(next_line) and CAPS_ONLY_RE.match(next_line):
            continue

        name = _normalize_name(line)
        if name:
            characters.setdefault(name, None)

    return list(characters)


def extract_tasks(lines: Sequence[str], start: int, end: int) -> List[Task]:
    """Checklist items (`- [ ]` / `- [x]`) with their absolute line numbers."""
    tasks = []
    for index, line in _body(lines, start, end):
        match = TASK_RE.match(line)
        if match:
            tasks.append(Task(
                checked=match.group(1) != " ",
                text=match.group(2).strip(),
                line=index,
            ))
    return tasks


def scene_facts(lines: Sequence[str], start: int, end: int) -> SceneFacts:
    return SceneFacts(
        preview=extract_preview(lines, start, end),
        characters=extract_characters(lines, start, end),
        tasks=extract_tasks(lines, start, end),
    )
