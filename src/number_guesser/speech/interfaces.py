"""Contracts for speech synthesis and playback."""

from typing import Protocol

from .audio import AudioClip


class SpeechSynthesizer(Protocol):
    """Converts narration text into audio bytes."""

    async def synthesize(self, text: str, *, timeout: float | None = None) -> bytes:
        """Return encoded audio for the given text."""


class AudioOutputDevice(Protocol):
    """Interface for a speaker/audio sink."""

    def play(self, clip: AudioClip, volume: float) -> None:
        """Start playback of ``clip`` and return without waiting for it to end."""

    def is_playing(self) -> bool:
        """Whether the last started clip is still playing."""

    def stop(self) -> None:
        """Stop playback immediately."""
