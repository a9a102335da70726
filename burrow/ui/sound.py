"""Synthesised retro sound effects for game events.

Every ``GameEvent`` maps to a short waveform built with numpy: decaying
sine sweeps, noise bursts and little chimes.  ``synthesize`` is pure and
needs no audio device; ``PygameSoundSink`` turns its output into
``pygame.mixer.Sound`` objects and plays them as an ``EventSink``.
"""

from __future__ import annotations

import logging

import numpy as np
import pygame
from numpy.random import Generator

from burrow.simulation.events import GameEvent

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050
_AMPLITUDE = 32767

# Chime notes: C5, E5, G5
_CHIME = (523.25, 659.25, 783.99)


def _times(seconds: float, sample_rate: int) -> np.ndarray:
    return np.arange(int(seconds * sample_rate)) / sample_rate


def _sweep(
    start_hz: float,
    end_hz: float,
    seconds: float,
    sample_rate: int,
    decay: float,
) -> np.ndarray:
    """Sine whose pitch glides exponentially, under an exponential decay."""
    t = _times(seconds, sample_rate)
    freq = start_hz * (end_hz / start_hz) ** (t / seconds)
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate
    return np.sin(phase) * np.exp(-t * decay)


def _mine(sample_rate: int, rng: Generator) -> np.ndarray:
    # Pickaxe on rock: noise plus a ringing 800 Hz partial
    t = _times(0.1, sample_rate)
    rel = t / 0.1
    noise = rng.uniform(-1.0, 1.0, t.size)
    ring = np.sin(2 * np.pi * 800 * rel) * np.exp(-rel * 40)
    return (noise * 0.3 + ring * 0.7) * np.exp(-rel * 25) * 0.4


def _chop(sample_rate: int, rng: Generator) -> np.ndarray:
    return _sweep(150, 60, 0.15, sample_rate, decay=30) * 0.4


def _build(sample_rate: int, rng: Generator) -> np.ndarray:
    low = _sweep(400, 200, 0.08, sample_rate, decay=50)
    high = _sweep(1200, 800, 0.08, sample_rate, decay=90)
    return (low + high) * 0.125


def _task_complete(sample_rate: int, rng: Generator) -> np.ndarray:
    note_len = int(0.15 * sample_rate)
    offset = int(0.08 * sample_rate)
    out = np.zeros(offset * (len(_CHIME) - 1) + note_len)
    t = _times(0.15, sample_rate)[:note_len]
    envelope = np.minimum(t / 0.02, 1.0) * np.exp(-t * 25)
    for i, freq in enumerate(_CHIME):
        start = i * offset
        out[start : start + note_len] += np.sin(2 * np.pi * freq * t) * envelope
    return out * 0.2


def _eat(sample_rate: int, rng: Generator) -> np.ndarray:
    # Three short crunches
    bite_len = int(0.05 * sample_rate)
    offset = int(0.08 * sample_rate)
    out = np.zeros(offset * 2 + bite_len)
    decay = np.exp(-np.arange(bite_len) / bite_len * 6)
    for i in range(3):
        start = i * offset
        out[start : start + bite_len] += rng.uniform(-1.0, 1.0, bite_len) * decay
    return out * 0.2


def _sleep(sample_rate: int, rng: Generator) -> np.ndarray:
    t = _times(0.3, sample_rate)
    freq = 220 + (196 - 220) * t / 0.3
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate
    envelope = np.minimum(t / 0.1, 1.0) * np.exp(-np.maximum(t - 0.1, 0) * 20)
    return np.sin(phase) * envelope * 0.15


def _alert(sample_rate: int, rng: Generator) -> np.ndarray:
    t = _times(0.3, sample_rate)
    freq = np.where((t >= 0.1) & (t < 0.2), 660.0, 880.0)
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate
    return np.sign(np.sin(phase)) * np.exp(-t * 15) * 0.25


def _select(sample_rate: int, rng: Generator) -> np.ndarray:
    return _sweep(600, 400, 0.04, sample_rate, decay=100) * 0.15


_RECIPES = {
    GameEvent.MINE: _mine,
    GameEvent.CHOP: _chop,
    GameEvent.BUILD: _build,
    GameEvent.TASK_COMPLETE: _task_complete,
    GameEvent.EAT: _eat,
    GameEvent.SLEEP: _sleep,
    GameEvent.ALERT: _alert,
    GameEvent.SELECT: _select,
}


def synthesize(
    event: GameEvent,
    sample_rate: int = SAMPLE_RATE,
    rng: Generator | None = None,
    volume: float = 1.0,
) -> np.ndarray:
    """Render the waveform for ``event`` as mono signed 16-bit samples.

    Args:
        event: Which effect to render.
        sample_rate: Samples per second.
        rng: Generator for noise-based effects; a fixed seed is used when
            omitted so output is reproducible.
        volume: Master gain in [0, 1].

    Returns:
        A 1-D ``int16`` array.
    """
    if rng is None:
        rng = np.random.default_rng(0)
    wave = _RECIPES[event](sample_rate, rng) * max(0.0, min(1.0, volume))
    return (np.clip(wave, -1.0, 1.0) * _AMPLITUDE).astype(np.int16)


class PygameSoundSink:
    """EventSink that plays synthesised effects through ``pygame.mixer``.

    Sounds are rendered once at construction.  If the mixer cannot be
    opened (no audio device), the sink stays silent.

    Attributes:
        enabled: When False, events are ignored.
        volume: Master gain in [0, 1].
    """

    def __init__(self, volume: float = 0.3) -> None:
        self.enabled = True
        self.volume = max(0.0, min(1.0, volume))
        self._sounds: dict[GameEvent, pygame.mixer.Sound] = {}
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as exc:
            logger.warning("Audio unavailable, running silent: %s", exc)
            self.enabled = False
            return

        # The mixer may open with more channels than requested
        channels = (pygame.mixer.get_init() or (SAMPLE_RATE, -16, 1))[2]
        rng = np.random.default_rng(0)
        for event in GameEvent:
            samples = synthesize(event, SAMPLE_RATE, rng, self.volume)
            if channels > 1:
                samples = np.repeat(samples[:, np.newaxis], channels, axis=1)
            buffer = np.ascontiguousarray(samples).tobytes()
            self._sounds[event] = pygame.mixer.Sound(buffer=buffer)

    def emit(self, event: GameEvent) -> None:
        if not self.enabled:
            return
        sound = self._sounds.get(event)
        if sound is not None:
            sound.play()
