"""
Fountain Navigator - a terminal outline for screenplays written in Markdown.
"""

from typing import List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, ListItem, ListView, Static, TextArea

from .config import ConfigManager, DisplayOptions
from .document import ScreenplayDocument, format_outline_entry, is_fountain_text
from .facts import SceneFacts
from .log import get_logger
from .outline import OutlineItem, outline_changed, parse_outline, scene_items, scene_numbers
from .reorder import Position

logger = get_logger(__name__)


NO_DOCUMENT = "No active document"
NOT_FOUNTAIN = 'Add "cssclasses: fountain" to frontmatter'
NO_SCENES = "No scenes found"
POLL_SECONDS = 2.0


def _pick(entries, number: str):
    """1-based lookup from user input; None when out of range."""
    try:
        position = int(number)
    except ValueError:
        return None
    if 1 <= position <= len(entries):
        return entries[position - 1]
    return None


class SaveConfirmDialog(Screen):
    """Asks what to do with unsaved edits before leaving the editor."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", priority=True),
        Binding("left", "focus_previous", "Previous", show=False, priority=True),
        Binding("right", "focus_next", "Next", show=False, priority=True),
    ]

    CSS = """
    SaveConfirmDialog {
        align: center middle;
    }

    #dialog {
        width: 60;
        height: 11;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    #message {
        height: 5;
        content-align: center middle;
    }

    #buttons {
        height: 3;
        layout: horizontal;
        align: center middle;
    }

    #buttons Button {
        margin: 0 1;
        min-width: 16;
    }
    """

    def __init__(self, document_name: str):
        super().__init__()
        self.document_name = document_name

    def compose(self) -> ComposeResult:
        with Container(id="dialog"):
            yield Static(Text(f"'{self.document_name}' has unsaved changes.\nWrite them to disk?"), id="message")
            with Container(id="buttons"):
                yield Button("Save", variant="success", id="save")
                yield Button("Discard", variant="warning", id="discard")
                yield Button("Cancel", variant="primary", id="cancel")

    def on_mount(self):
        self.query_one("#cancel", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id)

    def action_cancel(self):
        self.dismiss("cancel")

    def action_focus_next(self):
        self.focus_next()

    def action_focus_previous(self):
        self.focus_previous()


class HelpScreen(Screen):
    """Keys and commands of the navigator."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("q", "close", "Close"),
    ]

    HELP_TEXT = """
# Fountain Navigator - Help

## Display
- **P**: Toggle preview text
- **N**: Toggle scene numbers
- **C**: Toggle characters
- **T**: Toggle tasks

## Navigation
- **Enter / E**: Open the editor at the selected item
- **R**: Reload the document
- **Q**: Quit

## Commands
- **move 3 before 1**: Move scene 3 in front of scene 1
- **move 2 after 5**: Move scene 2 behind scene 5
- **scene 4**: Open the editor at scene 4
- **task 2**: Open the editor at task 2 of the selected scene
- **goto 120**: Open the editor at line 120

## Editor
- **Ctrl+S**: Save
- **Esc**: Back to the outline

Scenes carry everything up to the next scene heading when moved:
sections, synopses, notes and tasks included.

The document needs `cssclasses: fountain` in its frontmatter.
"""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(self.HELP_TEXT, id="help_content")
        yield Footer()

    def action_close(self):
        self.app.pop_screen()


class TextEditorScreen(Screen):
    """Edits the document with the cursor placed on a given line."""

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("escape", "close_with_save_check", "Back", priority=True),
    ]

    def __init__(self, document: ScreenplayDocument, line: int = 0):
        super().__init__()
        self.document = document
        self.start_line = line
        self.original_content = document.read()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(Text(f"# Editing: {self.document.name}  (line {self.start_line + 1})"), id="editor_title")
        yield TextArea(text=self.original_content, id="text_editor")
        yield Footer()

    def on_mount(self):
        """Reveal the requested line."""
        text_area = self.query_one("#text_editor", TextArea)
        last_line = max(text_area.document.line_count - 1, 0)
        text_area.move_cursor((min(max(self.start_line, 0), last_line), 0), center=True)
        text_area.focus()

    @property
    def has_changes(self) -> bool:
        return self.query_one("#text_editor", TextArea).text != self.original_content

    def action_save(self):
        """Write the editor contents back to the document."""
        content = self.query_one("#text_editor", TextArea).text
        try:
            self.document.write(content)
        except OSError as e:
            logger.exception("Saving %s failed", self.document.path)
            self.notify(f"Save failed: {e}", severity="error")
            return False
        self.original_content = content
        self.notify(f"Saved {self.document.name}")
        return True

    def action_close_with_save_check(self):
        if not self.has_changes:
            self.dismiss(False)
            return

        def handle_save_choice(choice):
            if choice == "save":
                if self.action_save():
                    self.dismiss(True)
            elif choice == "discard":
                self.dismiss(False)

        self.app.push_screen(SaveConfirmDialog(self.document.name), handle_save_choice)


class NavigatorScreen(Screen):
    """Outline list with scene facts, display toggles and a command line."""

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("e", "edit", "Edit"),
        Binding("p", "toggle('preview')", "Preview"),
        Binding("n", "toggle('scene_numbers')", "Numbers"),
        Binding("c", "toggle('characters')", "Characters"),
        Binding("t", "toggle('tasks')", "Tasks"),
        Binding("r", "reload", "Reload"),
        Binding("?", "show_help", "Help"),
    ]

    def __init__(self, document: Optional[ScreenplayDocument], options: DisplayOptions):
        super().__init__()
        self.document = document
        self.options = options
        self.items: List[OutlineItem] = []
        self.lines: List[str] = []
        self.selected_index: Optional[int] = None
        self.status_message: Optional[str] = None

    def compose(self) -> ComposeResult:
        title = self.document.name if self.document else "Fountain Navigator"
        yield Header()
        yield Horizontal(
            Vertical(
                Static(Text(f"# {title}"), id="document_title"),
                ListView(id="outline_list"),
                id="left_panel"
            ),
            Vertical(
                Static("# Scene", id="detail_title"),
                Static("", id="scene_detail"),
                id="right_panel"
            )
        )
        yield Input(placeholder="Enter command (move 3 before 1, scene 2, goto 40)", id="command_input")
        yield Footer()

    def on_mount(self):
        self.refresh_outline(force=True)
        self.set_interval(POLL_SECONDS, self.refresh_outline)

    def show_message(self, message: str):
        """Replace the outline with a single status line."""
        if message == self.status_message:
            return
        self.status_message = message
        self.items = []
        self.lines = []
        self.selected_index = None
        outline_list = self.query_one("#outline_list", ListView)
        outline_list.clear()
        outline_list.append(ListItem(Static(Text(message))))
        self.query_one("#scene_detail", Static).update("")

    def refresh_outline(self, force: bool = False):
        """Re-read the document and re-render when the outline changed."""
        if self.document is None or not self.document.exists():
            self.show_message(NO_DOCUMENT)
            return

        try:
            text = self.document.read()
        except OSError as e:
            logger.exception("Reading %s failed", self.document.path)
            self.show_message(f"Cannot read document: {e}")
            return

        if not is_fountain_text(text):
            self.show_message(NOT_FOUNTAIN)
            return

        items = parse_outline(text)
        if not items:
            self.show_message(NO_SCENES)
            return

        self.lines = text.split("\n")
        if force or outline_changed(self.items, items):
            self.items = items
            self.rebuild_outline_list()

    def scene_facts(self, index: int) -> SceneFacts:
        return self.document.facts_for(index, self.items, self.lines)

    def rebuild_outline_list(self):
        """Rebuild the outline list from the parsed items."""
        self.status_message = None
        outline_list = self.query_one("#outline_list", ListView)
        outline_list.clear()

        numbers = scene_numbers(self.items)
        for index, item in enumerate(self.items):
            facts = self.scene_facts(index) if item.is_scene else None
            entry = format_outline_entry(item, numbers.get(index), facts, self.options)
            list_item = ListItem(Static(Text(entry)), classes=f"outline-{item.kind.value}")
            list_item.item_index = index
            list_item.source_line = item.line
            outline_list.append(list_item)

        if self.selected_index is not None and self.selected_index < len(self.items):
            self.update_detail(self.selected_index)

    def update_detail(self, index: int):
        """Show every fact of the selected scene in the side panel."""
        detail = self.query_one("#scene_detail", Static)
        item = self.items[index]
        if not item.is_scene:
            detail.update(Text(f"{item.kind.value.title()}: {item.text}\n\nLine {item.line + 1}"))
            return

        facts = self.scene_facts(index)
        number = scene_numbers(self.items)[index]
        text = f"{number}. {item.text}\nLine {item.line + 1}\n\n"
        text += f"{facts.preview or '(no preview)'}\n\n"
        if facts.characters:
            text += f"Characters: {', '.join(facts.characters)}\n\n"
        for task_number, task in enumerate(facts.tasks, 1):
            box = "☑" if task.checked else "☐"
            text += f"{task_number}. {box} {task.text}  (line {task.line + 1})\n"
        detail.update(Text(text))

    def on_list_view_highlighted(self, event):
        if hasattr(event.item, "item_index"):
            self.selected_index = event.item.item_index
            self.update_detail(self.selected_index)

    def on_list_view_selected(self, event):
        if hasattr(event.item, "source_line"):
            self.open_editor(event.item.source_line)

    def on_input_submitted(self, event):
        command = event.value.strip()
        self.query_one("#command_input", Input).value = ""
        if command:
            self.execute_command(command)

    def execute_command(self, command: str):
        """Run a typed command against the outline."""
        parts = command.split()
        cmd = parts[0].lower()

        if not self.items:
            self.notify("Nothing to navigate", severity="warning")
            return

        if cmd == "move" and len(parts) == 4 and parts[2].lower() in ("before", "after"):
            try:
                from_num, to_num = int(parts[1]), int(parts[3])
            except ValueError:
                self.notify("Invalid command format", severity="error")
                return
            self.move_scene(from_num, to_num, Position(parts[2].lower()))

        elif cmd == "scene" and len(parts) == 2:
            scene = _pick(scene_items(self.items), parts[1])
            if scene is None:
                self.notify("Invalid scene number", severity="error")
            else:
                self.open_editor(scene.line)

        elif cmd == "task" and len(parts) == 2:
            self.open_task(parts[1])

        elif cmd == "goto" and len(parts) == 2:
            try:
                self.open_editor(int(parts[1]) - 1)
            except ValueError:
                self.notify("Invalid line number", severity="error")

        else:
            self.notify("Unknown command. Try: move 3 before 1, scene 2, task 1, goto 40", severity="error")

    def move_scene(self, from_num: int, to_num: int, position: Position):
        """Move scene `from_num` before/after scene `to_num` (1-based)."""
        if from_num == to_num:
            self.notify("Scene is already there", severity="warning")
            return
        try:
            self.document.move_scene(from_num - 1, to_num - 1, position)
        except IndexError:
            self.notify("Invalid scene number", severity="error")
            return
        except (OSError, ValueError) as e:
            logger.exception("Moving scene %d failed", from_num)
            self.notify(f"Move failed: {e}", severity="error")
            return
        self.refresh_outline(force=True)
        self.notify(f"Moved scene {from_num} {position.value} scene {to_num}")

    def open_task(self, number: str):
        index = self.selected_index
        if index is None or index >= len(self.items) or not self.items[index].is_scene:
            self.notify("Select a scene first", severity="warning")
            return
        task = _pick(self.scene_facts(index).tasks, number)
        if task is None:
            self.notify("Invalid task number", severity="error")
        else:
            self.open_editor(task.line)

    def open_editor(self, line: int):
        try:
            editor = TextEditorScreen(self.document, line)
        except OSError as e:
            logger.exception("Opening %s failed", self.document.path)
            self.notify(f"Cannot open document: {e}", severity="error")
            self.refresh_outline(force=True)
            return
        self.app.push_screen(editor, self.on_editor_closed)

    def on_editor_closed(self, result=None):
        self.refresh_outline(force=True)

    def action_edit(self):
        """Edit at the selected item, or at the top of the document."""
        if not self.items:
            return
        line = 0
        if self.selected_index is not None and self.selected_index < len(self.items):
            line = self.items[self.selected_index].line
        self.open_editor(line)

    def action_toggle(self, name: str):
        """Flip a display option and remember it."""
        value = self.options.toggle(name)
        ConfigManager.save_display_options(self.options)
        self.notify(f"{name.replace('_', ' ').capitalize()}: {'on' if value else 'off'}")
        self.refresh_outline(force=True)

    def action_reload(self):
        self.refresh_outline(force=True)

    def action_show_help(self):
        self.app.push_screen(HelpScreen())

    def action_quit(self):
        self.app.exit()


class FountainNavigator(App):
    """Main application."""

    TITLE = "Fountain Navigator"

    CSS = """
    #left_panel {
        width: 60%;
    }

    #right_panel {
        width: 40%;
    }

    #document_title {
        margin: 1;
    }

    #detail_title {
        margin: 1;
    }

    #scene_detail {
        margin: 1;
        height: 80%;
        overflow: auto;
    }

    .outline-section {
        text-style: bold;
    }

    .outline-synopsis, .outline-note {
        color: $text-muted;
    }

    #command_input {
        margin: 1;
    }

    #editor_title {
        margin: 1;
    }

    #text_editor {
        margin: 1;
        height: 90%;
    }

    #help_content {
        margin: 2;
        padding: 1;
        overflow: auto;
    }
    """

    def __init__(self, document_path=None, options: Optional[DisplayOptions] = None):
        super().__init__()
        self.document = ScreenplayDocument(document_path) if document_path else None
        self.options = options if options is not None else ConfigManager.get_display_options()
        if self.document is not None:
            self.sub_title = self.document.name

    def on_mount(self):
        """Open the navigator on the current document."""
        if self.document is not None and self.document.exists():
            ConfigManager.set_last_document(str(self.document.path))
        self.push_screen(NavigatorScreen(self.document, self.options))
