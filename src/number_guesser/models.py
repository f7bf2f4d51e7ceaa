"""Domain types shared by the game, narration and presentation layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NarrationPhase(str, Enum):
    """Named points in the game's narrative lifecycle."""

    INTRO = "intro"
    ASK = "ask"
    WIN = "win"
    ERROR = "error"


class NarrationSource(str, Enum):
    GENERATED = "generated"
    FALLBACK = "fallback"


class OrchestratorState(str, Enum):
    """Lifecycle states of a narration session."""

    IDLE = "idle"
    INTRODUCING = "introducing"
    AWAITING_FEEDBACK = "awaiting_feedback"
    ERROR_RECOVERY = "error_recovery"
    CONCLUDED = "concluded"


@dataclass(slots=True, frozen=True)
class SearchRange:
    low: int
    high: int

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.low <= value < self.high


@dataclass(slots=True, frozen=True)
class GuessState:
    current_guess: int | None
    attempt_count: int
    game_over: bool


@dataclass(slots=True, frozen=True)
class NarrationResult:
    """One player-visible narration line."""

    phase: NarrationPhase
    text: str
    source: NarrationSource
