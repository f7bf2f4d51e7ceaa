"""Text generation backend integration."""

from .availability import AvailabilityProbe
from .client import GenerationClient, GenerationOutcome

__all__ = ["AvailabilityProbe", "GenerationClient", "GenerationOutcome"]
