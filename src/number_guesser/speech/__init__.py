"""Speech synthesis and playback module boundaries."""

from .audio import AudioClip, decode_wav
from .interfaces import AudioOutputDevice, SpeechSynthesizer
from .player import SpeechPlayer, SpeechPlayerConfig
from .synthesizer import HttpSpeechSynthesizer

__all__ = [
    "AudioClip",
    "AudioOutputDevice",
    "HttpSpeechSynthesizer",
    "SpeechPlayer",
    "SpeechPlayerConfig",
    "SpeechSynthesizer",
    "decode_wav",
]
