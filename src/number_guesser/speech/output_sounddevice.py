"""Speaker playback backend powered by ``sounddevice``."""

from __future__ import annotations

from .audio import AudioClip
from .interfaces import AudioOutputDevice

_DTYPES = {1: "uint8", 2: "int16", 4: "int32"}


class SounddeviceOutputDevice(AudioOutputDevice):
    """Plays decoded WAV clips on the default output device."""

    def __init__(self, *, device: int | str | None = None) -> None:
        try:
            import numpy as np
            import sounddevice as sd
        except (ImportError, OSError) as exc:  # pragma: no cover - import guard
            raise RuntimeError(
                "Audio output backend unavailable. Install extras with: pip install 'number-guesser[audio]'"
            ) from exc
        self._np = np
        self._sd = sd
        self._device = device
        self._stream_started = False

    def play(self, clip: AudioClip, volume: float) -> None:
        dtype = _DTYPES.get(clip.sample_width)
        if dtype is None:
            raise ValueError(f"Unsupported sample width: {clip.sample_width}")

        samples = self._np.frombuffer(clip.frames, dtype=dtype).astype(self._np.float32)
        if dtype == "uint8":
            samples = (samples - 128.0) / 128.0
        else:
            samples /= float(self._np.iinfo(dtype).max)
        samples = samples.reshape(-1, clip.channels) * max(0.0, min(1.0, volume))

        self._sd.play(samples, samplerate=clip.sample_rate, device=self._device)
        self._stream_started = True

    def is_playing(self) -> bool:
        if not self._stream_started:
            return False
        try:
            return bool(self._sd.get_stream().active)
        except RuntimeError:
            return False

    def stop(self) -> None:
        self._sd.stop()
        self._stream_started = False
