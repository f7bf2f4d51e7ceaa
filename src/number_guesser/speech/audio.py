"""WAV decoding for synthesized speech."""

from __future__ import annotations

import io
import wave
from dataclasses import dataclass

from number_guesser.errors import AudioDecodeError


@dataclass(slots=True, frozen=True)
class AudioClip:
    """Raw PCM frames plus the parameters needed to play them."""

    frames: bytes
    sample_rate: int
    channels: int
    sample_width: int

    @property
    def frame_count(self) -> int:
        return len(self.frames) // (self.channels * self.sample_width)

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / self.sample_rate


def decode_wav(payload: bytes) -> AudioClip:
    if not payload:
        raise AudioDecodeError("Empty audio payload")

    try:
        with wave.open(io.BytesIO(payload), "rb") as reader:
            clip = AudioClip(
                frames=reader.readframes(reader.getnframes()),
                sample_rate=reader.getframerate(),
                channels=reader.getnchannels(),
                sample_width=reader.getsampwidth(),
            )
    except (wave.Error, EOFError) as exc:
        raise AudioDecodeError(f"Failed to decode WAV: {exc}") from exc

    if clip.sample_rate <= 0 or not clip.frames:
        raise AudioDecodeError("WAV payload contains no audio frames")
    return clip
