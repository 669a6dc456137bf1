"""Tests for the software renderer, the chime synthesizer, the silent output and the intro preview."""

import numpy as np
import pytest
from PIL import Image

from memory_journal.player.audio.chime import (
    chime_envelope, chime_frequency, synthesize_chime, to_pcm16)
from memory_journal.player.audio.output import PlaybackRejected, VirtualAudioOutput
from memory_journal.player.preview import render_intro_preview
from memory_journal.player.render.base import SCREEN, Affine
from memory_journal.player.render.pillow_renderer import PillowRenderer

WHITE = (255, 255, 255, 1)


def pixel(renderer, x, y):
    return tuple(int(v) for v in np.asarray(renderer.to_image())[y, x])


class TestPillowRenderer:
    def test_clear(self):
        renderer = PillowRenderer(20, 10)
        renderer.clear((255, 0, 0, 1))
        assert pixel(renderer, 5, 5) == (255, 0, 0)

    def test_fill_circle(self):
        renderer = PillowRenderer(100, 100)
        renderer.clear((0, 0, 0, 1))
        renderer.fill_circle(50, 50, 10, (0, 0, 255, 1))
        assert pixel(renderer, 50, 50) == (0, 0, 255)
        assert pixel(renderer, 5, 5) == (0, 0, 0)

    def test_global_alpha(self):
        renderer = PillowRenderer(10, 10)
        renderer.set_alpha(0.5)
        renderer.fill_rect(0, 0, 10, 10, WHITE)
        assert pixel(renderer, 4, 4) == (128, 128, 128)

    def test_screen_composite_lightens(self):
        renderer = PillowRenderer(10, 10)
        renderer.clear((128, 128, 128, 1))
        renderer.set_composite(SCREEN)
        renderer.fill_rect(0, 0, 10, 10, (128, 128, 128, 1))
        assert 188 <= pixel(renderer, 4, 4)[0] <= 196

    def test_linear_gradient(self):
        renderer = PillowRenderer(100, 4)
        gradient = renderer.linear_gradient(0, 0, 100, 0)
        gradient.add_stop(0, (0, 0, 0, 1)).add_stop(1, WHITE)
        renderer.fill_rect(0, 0, 100, 4, gradient)
        row = [pixel(renderer, x, 2)[0] for x in (5, 50, 95)]
        assert row == sorted(row)
        assert row[0] < 30 and row[2] > 225

    def test_translate_moves_shapes(self):
        renderer = PillowRenderer(100, 50)
        with renderer.saved():
            renderer.translate(80, 20)
            renderer.fill_circle(0, 0, 5, WHITE)
        assert pixel(renderer, 80, 20) == (255, 255, 255)
        assert renderer.state.transform.e == 0

    def test_clip_circle(self):
        renderer = PillowRenderer(60, 60)
        renderer.clip_circle(10, 10, 5)
        renderer.fill_rect(0, 0, 60, 60, WHITE)
        assert pixel(renderer, 10, 10) == (255, 255, 255)
        assert pixel(renderer, 50, 50) == (0, 0, 0)

    def test_blur_spreads_coverage(self):
        renderer = PillowRenderer(40, 40)
        renderer.set_blur(4)
        renderer.fill_rect(15, 15, 10, 10, WHITE)
        assert pixel(renderer, 12, 20)[0] > 0
        assert pixel(renderer, 20, 20)[0] > 100

    def test_save_png(self, tmp_path):
        renderer = PillowRenderer(32, 16)
        renderer.fill_circle(16, 8, 4, WHITE)
        path = tmp_path / "frame.png"
        renderer.save_png(path)
        with Image.open(path) as image:
            assert image.format == "PNG"
            assert image.size == (32, 16)

    def test_affine_inverse(self):
        transform = Affine().multiply(Affine(e=5, f=-3)).multiply(Affine(0, 1, -1, 0))
        x, y = transform.apply(2, 7)
        assert transform.inverse().apply(x, y) == pytest.approx((2, 7))


class TestChime:
    def test_length_and_gain(self):
        samples = synthesize_chime()
        assert samples.dtype == np.float32
        assert len(samples) == 19845
        assert np.max(np.abs(samples)) <= 0.0801
        assert np.max(np.abs(samples[-500:])) < 0.002

    def test_sweep_and_envelope(self):
        t = np.array([0.0, 0.35, 0.44])
        np.testing.assert_allclose(chime_frequency(t), [880.0, 440.0, 440.0])
        env = chime_envelope(np.array([0.0, 0.02, 0.4]))
        np.testing.assert_allclose(env, [0.0, 0.08, 0.001], atol=1e-9)

    def test_pcm_layout(self):
        samples = synthesize_chime()
        stereo = to_pcm16(samples)
        assert stereo.shape == (19845, 2)
        assert stereo.dtype == np.int16
        assert stereo.flags["C_CONTIGUOUS"]
        assert to_pcm16(samples, channels=1).shape == (19845,)


class TestVirtualAudioOutput:
    def test_track_ends_after_length(self, scheduler):
        output = VirtualAudioOutput(clock=scheduler.now, track_length=2.0)
        ended = []
        output.set_ended_callback(lambda: ended.append(output.track_name))
        output.load("a.mp3", "/music/a.mp3")
        output.play()
        scheduler.advance(1500)
        output.poll()
        assert ended == []
        scheduler.advance(600)
        output.poll()
        assert ended == ["a.mp3"]
        assert output.paused

    def test_play_without_source_is_rejected(self):
        with pytest.raises(PlaybackRejected):
            VirtualAudioOutput().play()


class TestIntroPreview:
    def test_writes_one_png_per_frame(self, tmp_path):
        paths = render_intro_preview(output_dir=str(tmp_path), width=96, height=54,
                                     frame_times=(3200, 500), seed=4)
        assert [p.rsplit("_", 1)[-1] for p in paths] == ["00500ms.png", "03200ms.png"]
        with Image.open(paths[0]) as early, Image.open(paths[1]) as lit:
            assert early.size == (96, 54)
            assert np.asarray(lit).mean() > np.asarray(early).mean()
