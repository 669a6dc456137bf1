"""Tests for the audio controller: playback contexts, fades, retries and playlist persistence."""

import pytest

import memory_journal.helpers.config as cfg
from memory_journal.player.api import ApiError
from memory_journal.player.audio.controller import AudioController
from memory_journal.player.audio.session import PlaybackMode
from memory_journal.player.events import KEY_DOWN, POINTER_DOWN

from conftest import FakeApi


@pytest.fixture()
def timing(monkeypatch):
    monkeypatch.setattr(cfg, "FADE_IN_MS", 1000)
    monkeypatch.setattr(cfg, "VOLUME_SAVE_DELAY_MS", 400)


def memory(memory_id="m1", playlist=("c.mp3", "a.mp3")):
    return {"id": memory_id, "title": "Lantern night", "music_playlist": list(playlist)}


class TestLoading:
    def test_loads_settings_against_library(self, loaded_controller, output):
        session = loaded_controller.session
        assert [item["name"] for item in session.library] == ["a.mp3", "b.mp3", "c.mp3"]
        assert session.global_playlist == ["a.mp3", "b.mp3", "c.mp3"]
        assert session.target_volume == 0.5
        assert output.volume == 0.5

    def test_library_is_fetched_once(self, controller, fake_api):
        controller.ensure_loaded()
        controller.ensure_loaded()
        assert fake_api.library_calls == 1

    def test_failed_load_is_retried(self, controller, fake_api):
        fake_api.fail_library = True
        with pytest.raises(ApiError):
            controller.ensure_loaded()
        fake_api.fail_library = False
        controller.ensure_loaded()
        assert fake_api.library_calls == 2
        assert controller.session.global_playlist == ["a.mp3", "b.mp3", "c.mp3"]

    def test_settings_failure_uses_defaults(self, controller, fake_api):
        fake_api.fail_settings = True
        session = controller.ensure_loaded()
        assert session.global_playlist == ["a.mp3", "b.mp3", "c.mp3"]
        assert session.target_volume == cfg.DEFAULT_VOLUME

    def test_stale_settings_are_normalized(self, output, scheduler, gestures):
        api = FakeApi(settings={"global_playlist": ["gone.mp3"], "volume": 1.4})
        session = AudioController(api, output, scheduler, gestures).ensure_loaded()
        assert session.global_playlist == ["a.mp3", "b.mp3", "c.mp3"]
        assert session.target_volume == 1.0

    def test_library_is_deduplicated_and_sorted(self, output, scheduler, gestures):
        files = [
            {"name": "Zeta.mp3", "url": "/music/Zeta.mp3"},
            {"name": "alpha.mp3", "url": "/music/alpha.mp3"},
            {"name": "alpha.mp3", "url": "/music/other.mp3"},
            {"name": 3, "url": "/music/3"},
        ]
        session = AudioController(FakeApi(files=files), output, scheduler, gestures).ensure_loaded()
        assert [item["name"] for item in session.library] == ["alpha.mp3", "Zeta.mp3"]
        assert session.track_url("alpha.mp3") == "/music/alpha.mp3"


class TestGlobalPlayback:
    def test_negative_index_wraps_to_last(self, loaded_controller, output):
        assert loaded_controller.play_global_track(-1)
        assert loaded_controller.session.global_track_index == 2
        assert output.track_name == "c.mp3"
        assert output.url == "/music/c.mp3"
        assert not output.paused

    def test_track_end_advances_and_wraps(self, loaded_controller, output):
        loaded_controller.play_global_track(2)
        output.finish()
        assert output.track_name == "a.mp3"
        assert loaded_controller.session.global_track_index == 0

    def test_empty_playlist_does_nothing(self, loaded_controller, output):
        loaded_controller.session.global_playlist = []
        assert not loaded_controller.play_global_track(0)
        assert output.play_calls == 0

    def test_next_and_previous(self, loaded_controller, output):
        loaded_controller.play_global_track(0)
        loaded_controller.next_track()
        assert output.track_name == "b.mp3"
        loaded_controller.previous_track()
        loaded_controller.previous_track()
        assert output.track_name == "c.mp3"

    def test_play_resumes_without_reload(self, loaded_controller, output):
        loaded_controller.play_global_track(1)
        loaded_controller.toggle_play_pause()
        assert output.paused
        loads = output.loads
        loaded_controller.toggle_play_pause()
        assert not output.paused
        assert output.loads == loads

    def test_status(self, loaded_controller):
        loaded_controller.play_global_track(1)
        status = loaded_controller.status()
        assert status["mode"] == "global"
        assert status["track"] == "b.mp3"
        assert status["paused"] is False
        assert status["volume"] == 0.5


class TestBlockedPlayback:
    def test_retry_on_next_gesture(self, loaded_controller, output, gestures):
        output.blocked = True
        assert not loaded_controller.play_global_track(0)
        assert gestures.count(POINTER_DOWN) == 1
        assert gestures.count(KEY_DOWN) == 1

        output.blocked = False
        gestures.dispatch(KEY_DOWN)
        assert not output.paused
        assert output.track_name == "a.mp3"
        assert gestures.count(POINTER_DOWN) == 0

    def test_only_latest_retry_is_kept(self, loaded_controller, output, gestures):
        output.blocked = True
        loaded_controller.play_global_track(0)
        loaded_controller.play_global_track(2)
        assert gestures.count(POINTER_DOWN) == 1

        output.blocked = False
        gestures.dispatch(POINTER_DOWN)
        assert output.track_name == "c.mp3"
        assert not output.paused

    def test_intro_audio_retries_after_load_failure(self, controller, fake_api, output, gestures):
        fake_api.fail_library = True
        assert not controller.start_intro_audio()
        assert gestures.count(POINTER_DOWN) == 1

        fake_api.fail_library = False
        gestures.dispatch(POINTER_DOWN)
        assert output.track_name == "a.mp3"
        assert not output.paused


class TestUnplayableTracks:
    def test_missing_track_is_skipped_without_gesture_retry(self, loaded_controller, output, gestures):
        output.missing = {"b.mp3"}
        assert loaded_controller.play_global_track(1)
        assert output.track_name == "c.mp3"
        assert loaded_controller.session.global_track_index == 2
        assert not output.paused
        assert gestures.count(POINTER_DOWN) == 0
        assert gestures.count(KEY_DOWN) == 0

    def test_track_end_skips_missing_track(self, loaded_controller, output):
        output.missing = {"b.mp3"}
        loaded_controller.play_global_track(0)
        output.finish()
        assert output.track_name == "c.mp3"
        output.finish()
        assert output.track_name == "a.mp3"

    def test_all_tracks_missing_stops_after_one_pass(self, loaded_controller, output, gestures):
        output.missing = {"a.mp3", "b.mp3", "c.mp3"}
        assert not loaded_controller.play_global_track(0)
        assert output.loads == 3
        assert output.play_calls == 0
        assert gestures.count(POINTER_DOWN) == 0

    def test_memory_playlist_skips_missing_track(self, loaded_controller, output):
        output.missing = {"c.mp3"}
        loaded_controller.start_memory_playback(memory())
        assert output.track_name == "a.mp3"
        assert loaded_controller.session.current_memory_playback.index == 1

    def test_blocked_output_still_waits_for_gesture(self, loaded_controller, output, gestures):
        output.missing = {"a.mp3"}
        output.blocked = True
        assert not loaded_controller.play_global_track(0)
        assert output.track_name == "b.mp3"
        assert gestures.count(POINTER_DOWN) == 1


class TestMemoryPlayback:
    def test_memory_playlist_plays_and_restores_position(self, loaded_controller, output, scheduler):
        loaded_controller.play_global_track(1)
        scheduler.advance(2000)
        output.poll()
        assert output.current_time == pytest.approx(2.0)

        assert loaded_controller.start_memory_playback(memory())
        session = loaded_controller.session
        assert session.mode == PlaybackMode.MEMORY
        assert output.track_name == "c.mp3"
        assert session.global_resume.index == 1
        assert session.global_resume.was_playing

        assert loaded_controller.restore_global_playback()
        assert session.mode == PlaybackMode.GLOBAL
        assert session.current_memory_playback is None
        assert session.global_resume is None
        assert output.track_name == "b.mp3"
        assert output.current_time == pytest.approx(2.0)
        assert not output.paused

    def test_second_restore_is_noop(self, loaded_controller, output):
        loaded_controller.play_global_track(0)
        loaded_controller.start_memory_playback(memory())
        loaded_controller.restore_global_playback()
        loads, plays = output.loads, output.play_calls
        assert not loaded_controller.restore_global_playback()
        assert (output.loads, output.play_calls) == (loads, plays)

    def test_restore_keeps_paused_global(self, loaded_controller, output):
        loaded_controller.play_global_track(2)
        loaded_controller.pause()
        loaded_controller.start_memory_playback(memory())
        assert not output.paused

        loaded_controller.restore_global_playback()
        assert output.track_name == "c.mp3"
        assert output.paused
        assert output.volume == 0.5

    def test_switching_memories_keeps_first_snapshot(self, loaded_controller):
        loaded_controller.play_global_track(1)
        loaded_controller.start_memory_playback(memory("m1"))
        loaded_controller.start_memory_playback(memory("m2", ["a.mp3"]))
        session = loaded_controller.session
        assert session.current_memory_playback.memory_id == "m2"
        assert session.global_resume.index == 1

    def test_memory_without_usable_tracks_keeps_global(self, loaded_controller, output):
        loaded_controller.play_global_track(1)
        assert not loaded_controller.start_memory_playback(memory(playlist=["gone.mp3"]))
        session = loaded_controller.session
        assert session.mode == PlaybackMode.GLOBAL
        assert session.global_track_index == 1
        assert session.global_resume is None
        assert output.track_name == "b.mp3"

    def test_memory_playlist_is_filtered_and_loops(self, loaded_controller, output):
        loaded_controller.start_memory_playback(memory(playlist=["c.mp3", "gone.mp3", "c.mp3", "a.mp3"]))
        assert loaded_controller.session.current_memory_playback.playlist == ["c.mp3", "a.mp3"]
        output.finish()
        assert output.track_name == "a.mp3"
        output.finish()
        assert output.track_name == "c.mp3"
        assert loaded_controller.session.mode == PlaybackMode.MEMORY

    def test_play_global_track_leaves_memory_context(self, loaded_controller):
        loaded_controller.start_memory_playback(memory())
        loaded_controller.play_global_track(0)
        assert loaded_controller.session.mode == PlaybackMode.GLOBAL
        assert loaded_controller.session.current_memory_playback is None


class TestVolume:
    def test_intro_audio_fades_in(self, timing, controller, output, scheduler):
        assert controller.start_intro_audio()
        assert output.volume == 0.0
        assert controller.fading

        scheduler.advance(500)
        assert output.volume == pytest.approx(0.25)
        scheduler.advance(600)
        assert output.volume == pytest.approx(0.5)
        assert not controller.fading

    def test_set_volume_cancels_fade_and_clamps(self, timing, controller, output):
        controller.start_intro_audio()
        assert controller.set_volume(1.4) == 1.0
        assert not controller.fading
        assert output.volume == 1.0
        assert controller.set_volume("loud") == 1.0

    def test_volume_save_is_debounced(self, timing, loaded_controller, fake_api, scheduler):
        loaded_controller.set_volume(0.8)
        scheduler.advance(200)
        loaded_controller.set_volume(0.9)
        scheduler.advance(300)
        assert fake_api.puts == []
        scheduler.advance(100)
        assert fake_api.puts == [{"volume": 0.9}]

    def test_volume_save_failure_is_logged(self, timing, loaded_controller, fake_api, scheduler):
        fake_api.fail_put = True
        loaded_controller.set_volume(0.2)
        scheduler.advance(400)
        assert loaded_controller.session.target_volume == 0.2


class TestPlaylistEditing:
    def test_add_ignores_unknown_and_duplicates(self, loaded_controller):
        loaded_controller.session.global_playlist = ["a.mp3"]
        assert loaded_controller.add_to_global_playlist(["c.mp3", "a.mp3", "nope.mp3"]) == ["a.mp3", "c.mp3"]

    def test_remove_keeps_cursor_on_current_track(self, loaded_controller):
        loaded_controller.play_global_track(2)
        assert loaded_controller.remove_from_global_playlist(["a.mp3"]) == ["b.mp3", "c.mp3"]
        assert loaded_controller.session.global_track_index == 1

    def test_move_track(self, loaded_controller):
        assert loaded_controller.move_global_track(0, 1) == 1
        assert loaded_controller.session.global_playlist == ["b.mp3", "a.mp3", "c.mp3"]
        assert loaded_controller.move_global_track(0, -1) == 0

    def test_memory_draft(self, loaded_controller):
        assert loaded_controller.set_memory_draft(["b.mp3", "gone.mp3"]) == ["b.mp3"]
        loaded_controller.add_to_memory_draft(["a.mp3"])
        assert loaded_controller.move_memory_draft_track(1, -1) == 0
        assert loaded_controller.session.memory_playlist_draft == ["a.mp3", "b.mp3"]
        assert loaded_controller.remove_from_memory_draft(["a.mp3"]) == ["b.mp3"]


class TestSaveGlobalPlaylist:
    def test_emptying_pauses_and_readding_resumes(self, timing, loaded_controller, fake_api, output):
        loaded_controller.play_global_track(0)
        loaded_controller.session.global_playlist = []

        assert loaded_controller.save_global_playlist() == []
        assert fake_api.puts[-1] == {"global_playlist": []}
        assert output.paused
        assert loaded_controller.session.paused_for_empty

        loaded_controller.add_to_global_playlist(["b.mp3"])
        loaded_controller.save_global_playlist()
        assert not output.paused
        assert output.track_name == "b.mp3"
        assert loaded_controller.fading
        assert not loaded_controller.session.paused_for_empty

    def test_manual_pause_is_not_resumed(self, loaded_controller, output):
        loaded_controller.play_global_track(0)
        loaded_controller.pause()
        loaded_controller.save_global_playlist()
        assert output.paused

    def test_playing_selection_is_not_interrupted(self, loaded_controller, output):
        loaded_controller.play_global_track(1)
        loads = output.loads
        loaded_controller.remove_from_global_playlist(["a.mp3"])
        loaded_controller.save_global_playlist()
        assert output.loads == loads
        assert output.track_name == "b.mp3"
        assert not output.paused

    def test_emptying_in_memory_mode_keeps_playing(self, loaded_controller, output):
        loaded_controller.start_memory_playback(memory())
        loaded_controller.session.global_playlist = []
        loaded_controller.save_global_playlist()
        assert not output.paused
        assert not loaded_controller.session.paused_for_empty

    def test_failed_save_raises(self, loaded_controller, fake_api):
        fake_api.fail_put = True
        with pytest.raises(ApiError):
            loaded_controller.save_global_playlist()
