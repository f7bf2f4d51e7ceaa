"""Console presentation layer and interactive input loop."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

from rich.console import Console

from number_guesser.models import NarrationResult, NarrationSource, OrchestratorState
from number_guesser.orchestrator import NarrationOrchestrator


class PlayerInput(str, Enum):
    """Feedback a player can give at the prompt."""

    HIGHER = "higher"
    LOWER = "lower"
    CORRECT = "correct"
    REPLAY = "replay"
    QUIT = "quit"


_ALIASES: dict[str, PlayerInput] = {
    "h": PlayerInput.HIGHER,
    "+": PlayerInput.HIGHER,
    "l": PlayerInput.LOWER,
    "-": PlayerInput.LOWER,
    "c": PlayerInput.CORRECT,
    "y": PlayerInput.CORRECT,
    "r": PlayerInput.REPLAY,
    "q": PlayerInput.QUIT,
    "exit": PlayerInput.QUIT,
}

PROMPT_HINT = "[h]igher / [l]ower / [c]orrect / [r]eplay / [q]uit"


def parse_player_input(raw: str) -> PlayerInput | None:
    text = raw.strip().lower()
    if not text:
        return None
    if text in _ALIASES:
        return _ALIASES[text]
    try:
        return PlayerInput(text)
    except ValueError:
        return None


class ConsoleNarrationSink:
    """Prints each narration line; generated lines are styled differently from fallback ones."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()
        self.history: list[NarrationResult] = []

    def publish(self, result: NarrationResult) -> None:
        self.history.append(result)
        style = "bold magenta" if result.source is NarrationSource.GENERATED else "cyan"
        self._console.print(result.text, style=style, markup=False, highlight=False)


class InteractiveGame:
    """Feeds console input into the orchestrator until the player quits."""

    def __init__(
        self,
        orchestrator: NarrationOrchestrator,
        *,
        read_line: Callable[[str], Awaitable[str]] | None = None,
        console: Console | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._read_line = read_line or _read_line_in_thread
        self._console = console or Console()

    async def run(self) -> None:
        await self._orchestrator.start()
        try:
            while True:
                if self._orchestrator.state is OrchestratorState.CONCLUDED:
                    self._console.print("Game over: [r]eplay or [q]uit", style="dim", markup=False)
                try:
                    raw = await self._read_line(f"{PROMPT_HINT} > ")
                except EOFError:
                    break

                choice = parse_player_input(raw)
                if choice is None:
                    self._console.print(f"Unrecognized input {raw.strip()!r}.", style="yellow", markup=False)
                    continue
                if choice is PlayerInput.QUIT:
                    break
                await self.dispatch(choice)
        finally:
            await self._orchestrator.aclose()

    async def dispatch(self, choice: PlayerInput) -> list[NarrationResult]:
        if choice is PlayerInput.HIGHER:
            return await self._orchestrator.higher()
        if choice is PlayerInput.LOWER:
            return await self._orchestrator.lower()
        if choice is PlayerInput.CORRECT:
            return await self._orchestrator.correct()
        if choice is PlayerInput.REPLAY:
            return await self._orchestrator.replay()
        return []


async def _read_line_in_thread(prompt: str) -> str:
    # Blocking input runs off the event loop so speech playback keeps going.
    return await asyncio.to_thread(input, prompt)
