import os

import pygame
import pytest

from memory_journal.player.audio import pygame_output
from memory_journal.player.audio.output import PlaybackRejected, TrackLoadError, VirtualAudioOutput
from memory_journal.player.audio.pygame_output import PygameAudioOutput, create_audio_output


class FakeMusic:
    """Stand-in for `pygame.mixer.music`; `get_pos` counts played ms since the last `play()`."""

    def __init__(self):
        self.loaded = None
        self.unreadable = set()
        self.plays = []
        self.pos = -1
        self.busy = False
        self.paused = False
        self.volume = 1.0

    def load(self, path):
        if os.path.basename(path) in self.unreadable:
            raise pygame.error("Unrecognized audio format")
        self.loaded = path

    def play(self, loops=0, start=0.0, fade_ms=0):
        self.plays.append(start)
        self.pos = 0
        self.busy = True
        self.paused = False

    def pause(self):
        self.paused = True

    def unpause(self):
        self.paused = False

    def stop(self):
        self.busy = False
        self.pos = -1

    def get_pos(self):
        return self.pos

    def get_busy(self):
        return self.busy and not self.paused

    def set_volume(self, value):
        self.volume = value

    def get_volume(self):
        return self.volume

    def run(self, ms):
        if self.busy and not self.paused:
            self.pos += ms


@pytest.fixture()
def music(journal_paths, monkeypatch):
    fake = FakeMusic()
    monkeypatch.setattr(pygame.mixer, "music", fake)
    monkeypatch.setattr(pygame.mixer, "get_init", lambda: (44100, -16, 2))
    return fake


@pytest.fixture()
def pygame_out(music):
    out = PygameAudioOutput()
    out.load("a.mp3", "/music/a.mp3")
    return out


class TestPosition:
    def test_position_survives_pause_and_resume(self, pygame_out, music):
        pygame_out.seek(10)
        pygame_out.play()
        music.run(1000)
        assert pygame_out.current_time == pytest.approx(11.0)

        pygame_out.pause()
        music.run(5000)
        assert pygame_out.current_time == pytest.approx(11.0)

        pygame_out.play()
        music.run(1000)
        assert pygame_out.current_time == pytest.approx(12.0)
        assert music.plays == [10.0]

    def test_repeated_pauses_do_not_double_count(self, pygame_out, music):
        pygame_out.play()
        for _ in range(3):
            music.run(1000)
            pygame_out.pause()
            pygame_out.play()
        assert pygame_out.current_time == pytest.approx(3.0)

    def test_seek_while_playing_restarts_from_offset(self, pygame_out, music):
        pygame_out.play()
        music.run(4000)
        pygame_out.seek(30)
        music.run(500)
        assert pygame_out.current_time == pytest.approx(30.5)
        assert music.plays == [0.0, 30.0]

    def test_seek_while_paused_stays_paused(self, pygame_out, music):
        pygame_out.play()
        music.run(2000)
        pygame_out.pause()
        pygame_out.seek(7)
        assert pygame_out.paused
        assert music.paused
        assert pygame_out.current_time == pytest.approx(7.0)

        pygame_out.play()
        music.run(1000)
        assert pygame_out.current_time == pytest.approx(8.0)

    def test_seek_before_play_sets_start(self, pygame_out, music):
        pygame_out.seek(-3)
        assert pygame_out.current_time == 0.0
        pygame_out.seek(4)
        assert music.plays == []
        pygame_out.play()
        assert music.plays == [4.0]

    def test_load_resets_position(self, pygame_out, music):
        pygame_out.play()
        music.run(3000)
        pygame_out.load("b.mp3", "/music/b.mp3")
        assert pygame_out.current_time == 0.0
        assert pygame_out.paused
        assert pygame_out.track_name == "b.mp3"


class TestTrackEnd:
    def test_poll_reports_end_once(self, pygame_out, music):
        ended = []
        pygame_out.set_ended_callback(lambda: ended.append(pygame_out.track_name))
        pygame_out.play()
        music.run(1000)
        pygame_out.poll()
        assert ended == []

        music.stop()
        pygame_out.poll()
        pygame_out.poll()
        assert ended == ["a.mp3"]
        assert pygame_out.paused
        assert pygame_out.current_time == 0.0

    def test_paused_track_is_not_ended(self, pygame_out, music):
        ended = []
        pygame_out.set_ended_callback(lambda: ended.append(True))
        pygame_out.play()
        pygame_out.pause()
        pygame_out.poll()
        assert ended == []


class TestErrors:
    def test_unreadable_file_raises_load_error(self, pygame_out, music):
        music.unreadable.add("broken.mp3")
        with pytest.raises(TrackLoadError):
            pygame_out.load("broken.mp3", "/music/broken.mp3")
        assert pygame_out.track_name == "a.mp3"

    def test_play_without_source_is_rejected(self, music):
        with pytest.raises(PlaybackRejected):
            PygameAudioOutput().play()

    def test_volume_is_clamped(self, pygame_out, music):
        pygame_out.volume = 1.7
        assert music.volume == 1.0
        pygame_out.volume = -1
        assert pygame_out.volume == 0.0


class TestCreateAudioOutput:
    def test_uses_pygame_when_mixer_is_available(self, music):
        assert isinstance(create_audio_output(lambda: 0.0), PygameAudioOutput)

    def test_falls_back_to_virtual_output(self, monkeypatch):
        def no_device():
            raise pygame.error("No available audio device")

        monkeypatch.setattr(pygame_output, "init_mixer", no_device)
        out = create_audio_output(lambda: 0.0)
        assert isinstance(out, VirtualAudioOutput)
