import pytest

from fountainnav import config


SAMPLE = """---
cssclasses: fountain
title: The Kitchen
---
# Act One

INT. KITCHEN - DAY
= A quiet morning

Mara pours coffee. The radio hums.

MARA
Is anyone awake?

JOHN (O.S.)
Barely.

- [ ] check the radio prop
- [x] cast the voice of John

EXT. GARDEN - CONTINUOUS

[[remember to foreshadow]]

John steps out with two cups.

CUT TO:

.FLASHBACK

Rain on the window."""


@pytest.fixture
def sample_text():
    return SAMPLE


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.fountainnav."""
    config_file = tmp_path / "home" / "config.json"
    monkeypatch.setattr(config, "CONFIG_FILE", config_file)
    return config_file


@pytest.fixture
def document_path(tmp_path, sample_text):
    path = tmp_path / "kitchen.md"
    path.write_text(sample_text, encoding="utf-8")
    return path
