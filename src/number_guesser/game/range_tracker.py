"""Inclusive search bounds and the current guess for one game."""

from __future__ import annotations

import random

from number_guesser.errors import RangeConflict
from number_guesser.models import GuessState, SearchRange


class RangeTracker:
    """Narrows ``[low, high)`` from higher/lower feedback.

    ``high`` is exclusive, so a configured ``0..100`` becomes ``[0, 101)``.
    """

    def __init__(self, min_value: int, max_value: int, *, rng: random.Random | None = None) -> None:
        if min_value > max_value:
            raise ValueError(f"min_value ({min_value}) must not exceed max_value ({max_value})")
        self._min_value = min_value
        self._max_value = max_value
        self._rng = rng or random.Random()
        self.reset()

    @property
    def min_value(self) -> int:
        return self._min_value

    @property
    def max_value(self) -> int:
        return self._max_value

    @property
    def search_range(self) -> SearchRange:
        return SearchRange(low=self._low, high=self._high)

    @property
    def state(self) -> GuessState:
        return GuessState(current_guess=self._guess, attempt_count=self._attempt, game_over=self._game_over)

    def reset(self) -> None:
        self._low = self._min_value
        self._high = self._max_value + 1
        self._guess: int | None = None
        self._attempt = 0
        self._game_over = False

    def apply_higher(self) -> SearchRange:
        guess = self._require_guess()
        return self._commit(guess + 1, self._high)

    def apply_lower(self) -> SearchRange:
        guess = self._require_guess()
        return self._commit(self._low, guess)

    def next_guess(self) -> int:
        if self._game_over:
            raise RuntimeError("Cannot draw a guess after the game is over")
        self._guess = self._rng.randrange(self._low, self._high)
        self._attempt += 1
        return self._guess

    def conclude(self) -> None:
        self._game_over = True

    def _require_guess(self) -> int:
        if self._game_over:
            raise RuntimeError("Feedback is not accepted after the game is over")
        if self._guess is None:
            raise RuntimeError("Feedback requires a current guess")
        return self._guess

    def _commit(self, low: int, high: int) -> SearchRange:
        # Bounds stay at their last valid values when the interval would be empty.
        if low >= high:
            raise RangeConflict(low=low, high=high)
        self._low = low
        self._high = high
        return self.search_range
