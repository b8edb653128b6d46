"""Tests for the command line entry point."""

import pytest

from fountainnav import cli
from fountainnav.outline import parse_outline, scene_items
from fountainnav.reorder import Position


def scene_titles(path):
    return [item.text for item in scene_items(parse_outline(path.read_text(encoding="utf-8")))]


def test_outline_command(document_path, capsys):
    assert cli.main(["outline", str(document_path), "--numbers", "--characters"]) == 0

    out = capsys.readouterr().out
    assert "1. INT. KITCHEN - DAY" in out
    assert "Characters: Mara, John" in out
    assert "Mara pours coffee" not in out


def test_move_command(document_path, capsys):
    assert cli.main(["move", str(document_path), "1", "2", "--after"]) == 0

    assert "Moved scene 1 after scene 2" in capsys.readouterr().out
    assert scene_titles(document_path) == [
        "EXT. GARDEN - CONTINUOUS", "INT. KITCHEN - DAY", "FLASHBACK",
    ]


def test_move_defaults_to_before(document_path):
    args = cli.build_parser().parse_args(["move", str(document_path), "3", "1"])
    assert args.position is Position.BEFORE

    assert cli.main(["move", str(document_path), "3", "1"]) == 0
    assert scene_titles(document_path)[0] == "FLASHBACK"


def test_move_same_scene_is_refused(document_path, sample_text, capsys):
    assert cli.main(["move", str(document_path), "2", "2"]) == 1

    assert "nothing to move" in capsys.readouterr().err
    assert document_path.read_text(encoding="utf-8") == sample_text


def test_move_unknown_scene_reports_error(document_path, capsys):
    assert cli.main(["move", str(document_path), "1", "9"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_missing_file_reports_error(tmp_path, capsys):
    assert cli.main(["outline", str(tmp_path / "missing.md")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_open_uses_last_document(monkeypatch, document_path):
    opened = []

    class FakeNavigator:
        def __init__(self, path):
            opened.append(path)

        def run(self):
            pass

    monkeypatch.setattr("fountainnav.app.FountainNavigator", FakeNavigator)
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli.ConfigManager, "get_last_document", staticmethod(lambda: str(document_path)))

    assert cli.main([]) == 0
    assert cli.main(["open", "other.md"]) == 0
    assert opened == [str(document_path), "other.md"]


def test_unknown_command_exits():
    with pytest.raises(SystemExit):
        cli.main(["frobnicate"])


def test_log_level_option_is_validated(document_path):
    with pytest.raises(SystemExit):
        cli.main(["--log-level", "verbose", "outline", str(document_path)])


def test_log_level_option_is_case_insensitive():
    assert cli.build_parser().parse_args(["--log-level", "debug", "outline", "x.md"]).log_level == "DEBUG"


def test_bad_configured_log_level_reports_error(document_path, capsys):
    config = cli.ConfigManager.load_config()
    config["log_level"] = "verbose"
    cli.ConfigManager.save_config(config)

    assert cli.main(["outline", str(document_path)]) == 1
    assert "Error:" in capsys.readouterr().err
