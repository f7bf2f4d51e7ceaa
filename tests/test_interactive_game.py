from __future__ import annotations

import asyncio
import io

from rich.console import Console

from conftest import GenerateBackend, unreachable
from number_guesser.cli import ConsoleNarrationSink, InteractiveGame, PlayerInput, parse_player_input
from number_guesser.game import PhaseBuilder, RangeTracker
from number_guesser.generation import AvailabilityProbe, GenerationClient
from number_guesser.models import NarrationPhase, OrchestratorState
from number_guesser.orchestrator import NarrationOrchestrator


def test_parse_player_input_accepts_aliases() -> None:
    assert parse_player_input("h") is PlayerInput.HIGHER
    assert parse_player_input(" Lower ") is PlayerInput.LOWER
    assert parse_player_input("c") is PlayerInput.CORRECT
    assert parse_player_input("r") is PlayerInput.REPLAY
    assert parse_player_input("exit") is PlayerInput.QUIT
    assert parse_player_input("") is None
    assert parse_player_input("maybe") is None


def test_interactive_game_plays_until_quit() -> None:
    backend = GenerateBackend(unreachable)
    output = io.StringIO()
    console = Console(file=output, width=120)
    sink = ConsoleNarrationSink(console)
    inputs = iter(["h", "???", "c", "h", "q"])

    async def _read_line(prompt: str) -> str:
        return next(inputs)

    async def _run() -> NarrationOrchestrator:
        http = backend.client()
        client = GenerationClient("http://ollama.local:11434", "glados", http_client=http)
        orchestrator = NarrationOrchestrator(
            tracker=RangeTracker(0, 10),
            phases=PhaseBuilder(default_spice="medium", hot_after_attempts=6, min_value=0, max_value=10),
            client=client,
            probe=AvailabilityProbe(client, timeout_seconds=1.0),
            sink=sink,
        )
        try:
            await InteractiveGame(orchestrator, read_line=_read_line, console=console).run()
        finally:
            await http.aclose()
        return orchestrator

    orchestrator = asyncio.run(_run())

    phases = [line.phase for line in sink.history]
    assert phases[:2] == [NarrationPhase.INTRO, NarrationPhase.ASK]
    assert phases[-1] is NarrationPhase.WIN
    assert orchestrator.state is OrchestratorState.CONCLUDED
    printed = output.getvalue()
    assert "Think of a number from 0 to 10" in printed
    assert "Unrecognized input '???'" in printed
    assert "Solved on try" in printed


def test_interactive_game_stops_on_end_of_input() -> None:
    backend = GenerateBackend(unreachable)
    sink = ConsoleNarrationSink(Console(file=io.StringIO()))

    async def _read_line(prompt: str) -> str:
        raise EOFError

    async def _run() -> None:
        http = backend.client()
        client = GenerationClient("http://ollama.local:11434", "glados", http_client=http)
        orchestrator = NarrationOrchestrator(
            tracker=RangeTracker(0, 10),
            phases=PhaseBuilder(default_spice="medium", hot_after_attempts=6, min_value=0, max_value=10),
            client=client,
            probe=AvailabilityProbe(client, timeout_seconds=1.0),
            sink=sink,
        )
        try:
            await InteractiveGame(orchestrator, read_line=_read_line).run()
        finally:
            await http.aclose()

    asyncio.run(_run())

    assert len(sink.history) == 2
