"""
==========================
Audio - Prompt Chime
==========================

Synthesizes the short chime played when the intro prompt appears or shakes: a 0.45 s triangle
tone sweeping exponentially from 880 Hz to 440 Hz over 0.35 s, with a 20 ms linear attack to a
peak gain of 0.08 followed by an exponential decay to 0.001 at 0.4 s.

Usage:
>>> from memory_journal.player.audio.chime import synthesize_chime, to_pcm16
>>> samples = synthesize_chime()
>>> pcm = to_pcm16(samples, channels=2)

*Author: Sudharshan TK*\n
*Created: 2025-09-08*
"""

import numpy as np

SAMPLE_RATE = 44100

CHIME_DURATION = 0.45
SWEEP_START_HZ = 880.0
SWEEP_END_HZ = 440.0
SWEEP_DURATION = 0.35
ATTACK_DURATION = 0.02
PEAK_GAIN = 0.08
DECAY_END = 0.4
FLOOR_GAIN = 0.001


def chime_frequency(t: np.ndarray) -> np.ndarray:
    ratio = SWEEP_END_HZ / SWEEP_START_HZ
    progress = np.clip(t / SWEEP_DURATION, 0.0, 1.0)
    return SWEEP_START_HZ * np.power(ratio, progress)


def chime_envelope(t: np.ndarray) -> np.ndarray:
    attack = PEAK_GAIN * np.clip(t / ATTACK_DURATION, 0.0, 1.0)
    decay_progress = np.clip((t - ATTACK_DURATION) / (DECAY_END - ATTACK_DURATION), 0.0, 1.0)
    decay = PEAK_GAIN * np.power(FLOOR_GAIN / PEAK_GAIN, decay_progress)
    return np.where(t < ATTACK_DURATION, attack, decay)


def synthesize_chime(sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """
    Render the chime as mono float32 samples in [-1, 1].
    """
    num_samples = int(round(CHIME_DURATION * sample_rate))
    t = np.arange(num_samples, dtype=np.float64) / sample_rate
    # integrate the swept frequency to get a continuous phase
    phase = 2 * np.pi * np.cumsum(chime_frequency(t)) / sample_rate
    triangle = (2 / np.pi) * np.arcsin(np.sin(phase))
    return (triangle * chime_envelope(t)).astype(np.float32)


def to_pcm16(samples: np.ndarray, channels: int = 2) -> np.ndarray:
    """
    Convert float samples to int16 PCM shaped `(n, channels)`, C-contiguous.
    """
    pcm = np.clip(samples * 32767.0, -32768, 32767).astype(np.int16)
    if channels == 1:
        return np.ascontiguousarray(pcm)
    return np.ascontiguousarray(np.repeat(pcm[:, None], channels, axis=1))
