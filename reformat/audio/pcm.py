"""
Narration audio.

The speech boundary returns raw PCM: 16-bit little-endian, mono, 24 kHz,
base64-encoded. Samples are normalized to float32 in [-1.0, 1.0) before
playback.

Playback is scoped: `NarrationPlayer.playing(clip)` opens the output
device on entry and always closes it on exit, whether playback finished,
was stopped by the user, or failed.
"""

from __future__ import annotations

import base64
import binascii
import wave
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import numpy as np
from loguru import logger

from reformat.core.errors import PlaybackError

SAMPLE_RATE = 24_000
CHANNELS = 1
PCM_SCALE = 32768.0


@dataclass(frozen=True)
class PcmClip:
    """Decoded narration, ready for an output device."""

    samples: np.ndarray
    sample_rate: int = SAMPLE_RATE

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Length in seconds at normal speed."""
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate

    def duration_at(self, speed: float) -> float:
        if speed <= 0:
            raise ValueError(f"Playback speed must be positive, got {speed}")
        return self.duration / speed


def decode_pcm(audio_b64: str, sample_rate: int = SAMPLE_RATE) -> PcmClip:
    """Decode base64 int16 PCM into a float32 clip."""
    try:
        raw = base64.b64decode(audio_b64)
    except binascii.Error as e:
        raise PlaybackError(f"Narration audio is not valid base64: {e}") from e

    # A trailing odd byte is not a full sample
    usable = len(raw) - (len(raw) % 2)
    ints = np.frombuffer(raw[:usable], dtype="<i2")
    samples = ints.astype(np.float32) / PCM_SCALE
    return PcmClip(samples=samples, sample_rate=sample_rate)


class AudioSink(Protocol):
    """An output device. Implementations wrap a real audio backend."""

    def open(self, sample_rate: int, channels: int) -> None: ...

    def write(self, samples: np.ndarray) -> None: ...

    def close(self) -> None: ...


class NarrationPlayer:
    """Plays clips on a sink at the learner's narration speed."""

    def __init__(self, sink: AudioSink, speed: float = 1.0):
        if speed <= 0:
            raise ValueError(f"Playback speed must be positive, got {speed}")
        self.sink = sink
        self.speed = speed
        self.is_playing = False

    def effective_rate(self, clip: PcmClip) -> int:
        """Device rate that plays the clip at `speed`."""
        return int(round(clip.sample_rate * self.speed))

    @contextmanager
    def playing(self, clip: PcmClip) -> Iterator[PcmClip]:
        """Acquire the device for one clip; released on any exit."""
        try:
            self.sink.open(self.effective_rate(clip), CHANNELS)
        except OSError as e:
            raise PlaybackError(f"Audio device unavailable: {e}") from e

        self.is_playing = True
        logger.debug(f"Narration started ({clip.duration_at(self.speed):.1f}s at {self.speed}x)")
        try:
            yield clip
        finally:
            self.is_playing = False
            self.sink.close()
            logger.debug("Narration device released")

    def play(self, clip: PcmClip) -> None:
        """Write the whole clip to the device."""
        with self.playing(clip) as active:
            try:
                self.sink.write(active.samples)
            except OSError as e:
                raise PlaybackError(f"Audio device failed during playback: {e}") from e


class WavFileSink:
    """Writes narration to a 16-bit mono WAV file instead of a live device."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._wav: wave.Wave_write | None = None

    def open(self, sample_rate: int, channels: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._wav = wave.open(str(self.path), "wb")
        self._wav.setnchannels(channels)
        self._wav.setsampwidth(2)
        self._wav.setframerate(sample_rate)

    def write(self, samples: np.ndarray) -> None:
        if self._wav is None:
            raise OSError("WAV sink is not open")
        ints = np.clip(np.round(samples * PCM_SCALE), -PCM_SCALE, PCM_SCALE - 1).astype("<i2")
        self._wav.writeframes(ints.tobytes())

    def close(self) -> None:
        if self._wav is not None:
            self._wav.close()
            self._wav = None
