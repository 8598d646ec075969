import random

import pytest

from lexiflow.config import SettingsManager
from lexiflow.services import StudySessionStore


@pytest.fixture
def settings(tmp_path):
    SettingsManager.reset_instance()
    manager = SettingsManager(str(tmp_path / "settings.json"))
    yield manager
    SettingsManager.reset_instance()


@pytest.fixture
def import_dir(tmp_path):
    return tmp_path / "imports"


@pytest.fixture
def store(settings, import_dir):
    return StudySessionStore(settings, import_dir=import_dir, rng=random.Random(7))


@pytest.fixture
def write_deck(tmp_path):
    def _write(name, content):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def animals_csv(write_deck):
    return write_deck(
        "animals.csv",
        "Word,Meaning\n"
        "cat,a feline\n"
        "dog,a canine\n"
        "cow,a bovine\n"
        "owl,a bird\n"
        "eel,a fish\n",
    )
