"""Prompt payloads and fallback lines for each narration phase."""

from __future__ import annotations

import json
from dataclasses import dataclass

from number_guesser.models import GuessState, NarrationPhase

HOT_SPICE = "hot"

INTRO_FALLBACK = "Think of a number from {min_value} to {max_value}; answer higher or lower."
ASK_FALLBACK = "I guess {guess}. Higher or lower?"
WIN_FALLBACK = "It's {guess}. Solved on try {attempt}."
ERROR_FALLBACK = "Signals conflict. Reset the test."


@dataclass(slots=True, frozen=True)
class PromptPayload:
    """Everything the orchestrator needs to narrate one phase."""

    phase: NarrationPhase
    spice: str
    prompt: str
    fallback: str
    suffix: str = ""

    def finish(self, text: str) -> str:
        """Attach the phase suffix (if any) to generated or fallback text."""
        return f"{text}{self.suffix}"


class PhaseBuilder:
    """Maps a phase plus guess state onto the backend's JSON prompt line."""

    def __init__(self, *, default_spice: str, hot_after_attempts: int, min_value: int, max_value: int) -> None:
        self._default_spice = default_spice
        self._hot_after_attempts = hot_after_attempts
        self._min_value = min_value
        self._max_value = max_value

    def spice_for(self, attempt: int) -> str:
        return HOT_SPICE if attempt >= self._hot_after_attempts else self._default_spice

    def build(self, phase: NarrationPhase, state: GuessState, *, reason: str | None = None) -> PromptPayload:
        spice = self.spice_for(state.attempt_count)

        if phase is NarrationPhase.INTRO:
            fields: dict[str, object] = {"mode": "intro", "spice": spice}
            fallback = INTRO_FALLBACK.format(min_value=self._min_value, max_value=self._max_value)
        elif phase is NarrationPhase.ASK:
            guess = self._require_guess(phase, state)
            fields = {"mode": "ask", "guess": guess, "attempt": state.attempt_count, "spice": spice}
            fallback = ASK_FALLBACK.format(guess=guess)
        elif phase is NarrationPhase.WIN:
            guess = self._require_guess(phase, state)
            fields = {"mode": "win", "guess": guess, "attempt": state.attempt_count, "spice": spice}
            fallback = WIN_FALLBACK.format(guess=guess, attempt=state.attempt_count)
        else:
            fields = {"mode": "error", "spice": spice}
            fallback = ERROR_FALLBACK

        return PromptPayload(
            phase=phase,
            spice=spice,
            prompt=encode_prompt_line(fields),
            fallback=fallback,
            suffix=f" [{reason}]" if reason else "",
        )

    @staticmethod
    def _require_guess(phase: NarrationPhase, state: GuessState) -> int:
        if state.current_guess is None:
            raise ValueError(f"The {phase.value} phase needs a current guess")
        return state.current_guess


def encode_prompt_line(fields: dict[str, object]) -> str:
    """Compact JSON line; the backend's Modelfile expects exactly this shape."""
    return json.dumps(fields, separators=(",", ":"))
