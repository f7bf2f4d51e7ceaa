"""Error taxonomy shared by the game core, generation and speech layers."""

from __future__ import annotations


class NumberGuesserError(Exception):
    """Base class for all number-guesser errors."""


class TransportError(NumberGuesserError):
    """Network unreachable, timeout, or non-success status on an outbound call."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MalformedResponseError(NumberGuesserError):
    """Success status, but the payload could not be parsed or was empty."""


class GenerationError(NumberGuesserError):
    """A narration request did not produce usable text.

    ``cause`` holds the underlying :class:`TransportError` or
    :class:`MalformedResponseError` for diagnostics.
    """

    def __init__(self, cause: TransportError | MalformedResponseError) -> None:
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.cause = cause


class RangeConflict(NumberGuesserError):
    """Player feedback left an empty search interval."""

    reason = "(logic) low >= high"

    def __init__(self, low: int, high: int) -> None:
        super().__init__(f"{self.reason}: low={low} high={high}")
        self.low = low
        self.high = high


class AudioDecodeError(NumberGuesserError):
    """Speech payload was received but is not playable audio."""
