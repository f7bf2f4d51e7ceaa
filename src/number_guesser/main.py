"""CLI startup entrypoint for Number Guesser."""

from __future__ import annotations

import asyncio

import typer
from rich import print

from number_guesser.cli import ConsoleNarrationSink, InteractiveGame
from number_guesser.config import settings
from number_guesser.game import PhaseBuilder, RangeTracker
from number_guesser.generation import AvailabilityProbe, GenerationClient
from number_guesser.orchestrator import NarrationOrchestrator
from number_guesser.speech import HttpSpeechSynthesizer, SpeechPlayer, SpeechPlayerConfig
from number_guesser.speech.interfaces import AudioOutputDevice
from number_guesser.telemetry import LoggingTelemetry, configure_logging

app = typer.Typer(help="Number Guesser: a narrated guess-the-number game")


@app.callback()
def _main(log_level: str = typer.Option(None, help="Override NUMBER_GUESSER_LOG_LEVEL")) -> None:
    configure_logging(log_level or settings.log_level)


def _build_client() -> GenerationClient:
    return GenerationClient(
        settings.generation_host,
        settings.generation_model,
        timeout_seconds=settings.generation_timeout_seconds,
    )


def _build_probe(client: GenerationClient) -> AvailabilityProbe:
    return AvailabilityProbe(client, timeout_seconds=settings.probe_timeout_seconds)


def _build_output_device() -> AudioOutputDevice:
    from number_guesser.speech.output_sounddevice import SounddeviceOutputDevice

    return SounddeviceOutputDevice()


def _require_output_device() -> AudioOutputDevice:
    try:
        return _build_output_device()
    except RuntimeError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)


def _build_speech_player(synthesizer: HttpSpeechSynthesizer, output_device: AudioOutputDevice) -> SpeechPlayer:
    return SpeechPlayer(
        synthesizer=synthesizer,
        output_device=output_device,
        config=SpeechPlayerConfig(
            volume=settings.speech_volume,
            ping_timeout_seconds=settings.speech_ping_timeout_seconds,
            log_lines=settings.speech_log_lines,
        ),
    )


def _build_synthesizer() -> HttpSpeechSynthesizer:
    return HttpSpeechSynthesizer(settings.speech_endpoint, timeout_seconds=settings.speech_timeout_seconds)


def _build_orchestrator(
    client: GenerationClient,
    sink: ConsoleNarrationSink,
    speech: SpeechPlayer | None,
    *,
    speak_sequentially: bool = False,
) -> NarrationOrchestrator:
    return NarrationOrchestrator(
        tracker=RangeTracker(settings.min_value, settings.max_value),
        phases=PhaseBuilder(
            default_spice=settings.default_spice,
            hot_after_attempts=settings.hot_after_attempts,
            min_value=settings.min_value,
            max_value=settings.max_value,
        ),
        client=client,
        probe=_build_probe(client),
        sink=sink,
        speech=speech,
        telemetry=LoggingTelemetry() if settings.telemetry_enabled else None,
        speak_sequentially=speak_sequentially,
    )


@app.command()
def start() -> None:
    """Show runtime backend configuration."""
    print(
        {
            "app_name": settings.app_name,
            "generation_host": settings.generation_host,
            "generation_model": settings.generation_model,
            "range": [settings.min_value, settings.max_value],
            "default_spice": settings.default_spice,
            "hot_after_attempts": settings.hot_after_attempts,
            "speech_enabled": settings.speech_enabled,
            "speech_endpoint": settings.speech_endpoint,
        }
    )


@app.command()
def probe() -> None:
    """Check whether the generation backend returns narration."""

    async def _run() -> bool:
        client = _build_client()
        try:
            return await _build_probe(client).probe()
        finally:
            await client.aclose()

    available = asyncio.run(_run())
    print({"generation_host": settings.generation_host, "available": available})
    if not available:
        raise typer.Exit(code=1)


@app.command()
def play(
    speech: bool = typer.Option(None, "--speech/--no-speech", help="Speak narration through the TTS server"),
    sequential: bool = typer.Option(False, help="Wait for each spoken line before accepting input"),
) -> None:
    """Play an interactive game in the terminal."""
    speech_enabled = settings.speech_enabled if speech is None else speech
    output_device = _require_output_device() if speech_enabled else None

    async def _run() -> None:
        client = _build_client()
        synthesizer = _build_synthesizer() if output_device else None
        try:
            player = _build_speech_player(synthesizer, output_device) if synthesizer and output_device else None
            orchestrator = _build_orchestrator(
                client,
                ConsoleNarrationSink(),
                player,
                speak_sequentially=sequential,
            )
            await InteractiveGame(orchestrator).run()
        finally:
            await client.aclose()
            if synthesizer:
                await synthesizer.aclose()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        print({"play": "interrupted"})


@app.command()
def speak(text: str) -> None:
    """Speak a single line through the TTS server."""
    output_device = _require_output_device()

    async def _run() -> bool:
        synthesizer = _build_synthesizer()
        try:
            return await _build_speech_player(synthesizer, output_device).speak(text)
        finally:
            await synthesizer.aclose()

    spoken = asyncio.run(_run())
    print({"spoken": spoken})
    if not spoken:
        raise typer.Exit(code=1)


@app.command("ping-speech")
def ping_speech() -> None:
    """Check whether the TTS server is reachable."""

    async def _run() -> bool:
        synthesizer = _build_synthesizer()
        player = SpeechPlayer(
            synthesizer=synthesizer,
            output_device=_NullOutputDevice(),
            config=SpeechPlayerConfig(ping_timeout_seconds=settings.speech_ping_timeout_seconds),
        )
        try:
            return await player.ping()
        finally:
            await synthesizer.aclose()

    reachable = asyncio.run(_run())
    print({"speech_endpoint": settings.speech_endpoint, "reachable": reachable})
    if not reachable:
        raise typer.Exit(code=1)


class _NullOutputDevice:
    """Silent device for reachability checks, which never play audio."""

    def play(self, clip, volume: float) -> None:
        return None

    def is_playing(self) -> bool:
        return False

    def stop(self) -> None:
        return None


if __name__ == "__main__":
    app()
