"""Shared test fixtures for memory journal tests."""

import copy

import pytest

import memory_journal.helpers.config as cfg
from memory_journal.helpers.db import init_db
from memory_journal.player.api import ApiError
from memory_journal.player.audio.controller import AudioController
from memory_journal.player.audio.output import VirtualAudioOutput
from memory_journal.player.events import GestureListeners
from memory_journal.player.scheduler import Scheduler


LIBRARY = [
    {"name": "a.mp3", "url": "/music/a.mp3"},
    {"name": "b.mp3", "url": "/music/b.mp3"},
    {"name": "c.mp3", "url": "/music/c.mp3"},
]


@pytest.fixture()
def journal_paths(tmp_path, monkeypatch):
    """Point every configured directory at a temp tree."""
    public = tmp_path / "public"
    paths = {
        "base": tmp_path,
        "public": public,
        "uploads": public / "uploads",
        "music": public / "music",
        "db": tmp_path / "Database" / "memories.db",
        "previews": tmp_path / "Previews",
    }
    for key in ("public", "uploads", "music", "previews"):
        paths[key].mkdir(parents=True, exist_ok=True)
    paths["db"].parent.mkdir(parents=True, exist_ok=True)

    monkeypatch.setattr(cfg, "BASE_DIR", tmp_path)
    monkeypatch.setattr(cfg, "PUBLIC_DIR", public)
    monkeypatch.setattr(cfg, "UPLOADS_DIR", paths["uploads"])
    monkeypatch.setattr(cfg, "MUSIC_DIR", paths["music"])
    monkeypatch.setattr(cfg, "DB_PATH", paths["db"])
    monkeypatch.setattr(cfg, "PREVIEW_DIR", paths["previews"])
    return paths


@pytest.fixture()
def music_files(journal_paths):
    """Music dir with two tracks and a file that is not audio."""
    music = journal_paths["music"]
    for name in ("b.mp3", "a.mp3", "notes.txt"):
        (music / name).write_bytes(b"\x00" * 16)
    return ["a.mp3", "b.mp3"]


@pytest.fixture()
def journal_db(journal_paths):
    init_db()
    return journal_paths["db"]


@pytest.fixture()
def client(journal_db):
    from memory_journal.server import APP

    APP.config["TESTING"] = True
    with APP.test_client() as test_client:
        yield test_client


class FakeApi:
    """In-memory stand-in for JournalApi."""

    def __init__(self, files=None, settings=None):
        self.files = copy.deepcopy(LIBRARY if files is None else files)
        self.settings = {"global_playlist": [], "volume": 0.3} if settings is None else dict(settings)
        self.memories = {}
        self.puts = []
        self.library_calls = 0
        self.fail_library = False
        self.fail_settings = False
        self.fail_put = False
        self.fail_memory = False

    def get_music_files(self):
        self.library_calls += 1
        if self.fail_library:
            raise ApiError("/api/music/files -> 500", 500)
        return copy.deepcopy(self.files)

    def get_audio_settings(self):
        if self.fail_settings:
            raise ApiError("/api/audio/settings -> 500", 500)
        return copy.deepcopy(self.settings)

    def put_audio_settings(self, payload):
        if self.fail_put:
            raise ApiError("/api/audio/settings -> 500", 500)
        self.puts.append(copy.deepcopy(payload))
        self.settings.update(payload)
        return copy.deepcopy(self.settings)

    def list_memories(self):
        return list(self.memories.values())

    def get_memory(self, memory_id):
        if self.fail_memory or memory_id not in self.memories:
            raise ApiError(f"/api/memories/{memory_id} -> 404", 404)
        return copy.deepcopy(self.memories[memory_id])

    def create_memory(self, fields, image_path=None):
        memory_id = f"m{len(self.memories) + 1}"
        self.memories[memory_id] = {"id": memory_id, **fields}
        return copy.deepcopy(self.memories[memory_id])

    def update_memory(self, memory_id, fields, image_path=None):
        self.memories[memory_id].update(fields)
        return copy.deepcopy(self.memories[memory_id])

    def delete_memory(self, memory_id):
        self.memories.pop(memory_id)
        return {"message": "Memory dissolved into the void"}


@pytest.fixture()
def scheduler():
    return Scheduler()


@pytest.fixture()
def gestures():
    return GestureListeners()


@pytest.fixture()
def fake_api():
    return FakeApi(settings={"global_playlist": ["a.mp3", "b.mp3", "c.mp3"], "volume": 0.5})


@pytest.fixture()
def output(scheduler):
    return VirtualAudioOutput(clock=scheduler.now)


@pytest.fixture()
def controller(fake_api, output, scheduler, gestures):
    return AudioController(fake_api, output, scheduler, gestures)


@pytest.fixture()
def loaded_controller(controller):
    controller.ensure_loaded()
    return controller
