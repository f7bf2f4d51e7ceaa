"""Best-effort speech playback for narration lines."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from number_guesser.errors import AudioDecodeError, TransportError

from .audio import decode_wav
from .interfaces import AudioOutputDevice, SpeechSynthesizer

PING_TEXT = "ping"


@dataclass(slots=True)
class SpeechPlayerConfig:
    """Configurable controls for spoken narration."""

    volume: float = 1.0
    poll_interval_seconds: float = 0.05
    ping_timeout_seconds: float = 5.0
    log_lines: bool = False


class SpeechPlayer:
    """Synthesizes narration and plays it; failures never escape ``speak``."""

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        output_device: AudioOutputDevice,
        config: SpeechPlayerConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._synthesizer = synthesizer
        self._output_device = output_device
        self._config = config or SpeechPlayerConfig()
        self._logger = logger or logging.getLogger("number_guesser.speech.player")

    @property
    def volume(self) -> float:
        return max(0.0, min(1.0, self._config.volume))

    async def speak(self, text: str) -> bool:
        """Speak ``text`` and return once playback has finished.

        Returns ``False`` without raising when the text is blank or the
        synthesizer, decoder or device fails. Cancellation stops playback.
        """
        if not text or not text.strip():
            return False

        try:
            payload = await self._synthesizer.synthesize(text)
            clip = decode_wav(payload)
        except TransportError as exc:
            self._logger.warning(
                "speech_transport_failed",
                extra={"error": str(exc), "status_code": exc.status_code},
            )
            return False
        except AudioDecodeError as exc:
            self._logger.warning("speech_decode_failed", extra={"error": str(exc)})
            return False

        if self._config.log_lines:
            self._logger.info("speech_line", extra={"text": text})

        try:
            self._output_device.play(clip, self.volume)
        except Exception as exc:  # noqa: BLE001 - playback is best-effort.
            self._logger.warning("speech_playback_failed", extra={"error": f"{type(exc).__name__}: {exc}"})
            return False

        try:
            while self._output_device.is_playing():
                await asyncio.sleep(self._config.poll_interval_seconds)
        except asyncio.CancelledError:
            self._output_device.stop()
            raise
        return True

    async def ping(self) -> bool:
        """Short-timeout reachability check; fetched audio is not played."""
        try:
            await self._synthesizer.synthesize(PING_TEXT, timeout=self._config.ping_timeout_seconds)
        except TransportError as exc:
            self._logger.info("speech_ping_failed", extra={"error": str(exc)})
            return False
        return True
