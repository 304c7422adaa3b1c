"""
Narration decoding and scoped playback.
"""

from reformat.audio.pcm import (
    SAMPLE_RATE,
    AudioSink,
    NarrationPlayer,
    PcmClip,
    WavFileSink,
    decode_pcm,
)

__all__ = ["SAMPLE_RATE", "AudioSink", "NarrationPlayer", "PcmClip", "WavFileSink", "decode_pcm"]
