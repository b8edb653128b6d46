"""Headless tests for the textual navigator."""

import asyncio

from textual.widgets import ListView, TextArea

from fountainnav.app import FountainNavigator, NavigatorScreen, TextEditorScreen
from fountainnav.config import ConfigManager, DisplayOptions
from fountainnav.outline import parse_outline, scene_items


def run_app(app, scenario):
    async def runner():
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            await scenario(app, pilot)

    asyncio.run(runner())


def test_navigator_lists_outline(document_path, sample_text):
    async def scenario(app, pilot):
        screen = app.screen
        assert isinstance(screen, NavigatorScreen)
        assert screen.items == parse_outline(sample_text)
        assert len(screen.query_one("#outline_list", ListView).children) == 6

    run_app(FountainNavigator(document_path, DisplayOptions()), scenario)
    assert ConfigManager.get_last_document() == str(document_path.resolve())


def test_navigator_reports_non_fountain_document(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("INT. ROOM\nJust notes.", encoding="utf-8")

    async def scenario(app, pilot):
        screen = app.screen
        assert screen.items == []
        assert len(screen.query_one("#outline_list", ListView).children) == 1

    run_app(FountainNavigator(path, DisplayOptions()), scenario)


def test_navigator_without_document():
    async def scenario(app, pilot):
        assert app.screen.items == []

    run_app(FountainNavigator(None, DisplayOptions()), scenario)


def test_move_command_rewrites_document(document_path):
    async def scenario(app, pilot):
        screen = app.screen
        screen.execute_command("move 1 after 2")
        await pilot.pause()
        assert [s.text for s in scene_items(screen.items)] == [
            "EXT. GARDEN - CONTINUOUS", "INT. KITCHEN - DAY", "FLASHBACK",
        ]

    run_app(FountainNavigator(document_path, DisplayOptions()), scenario)
    titles = [s.text for s in scene_items(parse_outline(document_path.read_text(encoding="utf-8")))]
    assert titles[0] == "EXT. GARDEN - CONTINUOUS"


def test_move_to_same_scene_is_ignored(document_path, sample_text):
    async def scenario(app, pilot):
        app.screen.execute_command("move 2 before 2")
        await pilot.pause()

    run_app(FountainNavigator(document_path, DisplayOptions()), scenario)
    assert document_path.read_text(encoding="utf-8") == sample_text


def test_toggle_is_remembered(document_path):
    async def scenario(app, pilot):
        app.screen.action_toggle("tasks")
        await pilot.pause()

    run_app(FountainNavigator(document_path, DisplayOptions()), scenario)
    assert ConfigManager.get_display_options().tasks is True


def test_scene_command_opens_editor_at_heading(document_path):
    async def scenario(app, pilot):
        app.screen.execute_command("scene 2")
        await pilot.pause()
        assert isinstance(app.screen, TextEditorScreen)
        assert app.screen.query_one("#text_editor", TextArea).cursor_location == (20, 0)

        await pilot.press("escape")
        await pilot.pause()
        assert isinstance(app.screen, NavigatorScreen)

    run_app(FountainNavigator(document_path, DisplayOptions()), scenario)


def test_editor_on_deleted_document_is_reported(document_path):
    async def scenario(app, pilot):
        document_path.unlink()
        app.screen.execute_command("goto 3")
        await pilot.pause()
        assert isinstance(app.screen, NavigatorScreen)
        assert app.screen.items == []

    run_app(FountainNavigator(document_path, DisplayOptions()), scenario)


def test_status_message_is_not_rebuilt_on_poll(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("INT. ROOM\nJust notes.", encoding="utf-8")

    async def scenario(app, pilot):
        outline_list = app.screen.query_one("#outline_list", ListView)
        shown = list(outline_list.children)

        app.screen.refresh_outline()
        await pilot.pause()
        assert list(outline_list.children) == shown

        path.write_text("---\ncssclasses: fountain\n---\nINT. ROOM", encoding="utf-8")
        app.screen.refresh_outline()
        await pilot.pause()
        assert [item.text for item in app.screen.items] == ["INT. ROOM"]

    run_app(FountainNavigator(path, DisplayOptions()), scenario)
