"""Pure game logic: search bounds and phase prompts."""

from .phases import PhaseBuilder, PromptPayload
from .range_tracker import RangeTracker

__all__ = ["PhaseBuilder", "PromptPayload", "RangeTracker"]
