"""Preflight reachability check for the generation backend."""

from __future__ import annotations

import logging

from number_guesser.game.phases import encode_prompt_line

from .client import GenerationClient

PROBE_PROMPT_LINE = encode_prompt_line({"mode": "intro", "spice": "medium"})


class AvailabilityProbe:
    """Classifies the backend as available only when it returns real narration."""

    def __init__(
        self,
        client: GenerationClient,
        *,
        timeout_seconds: float = 5.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._logger = logger or logging.getLogger("number_guesser.generation.availability")

    async def probe(self) -> bool:
        outcome = await self._client.generate(PROBE_PROMPT_LINE, timeout=self._timeout_seconds)
        if outcome.ok:
            self._logger.info("generation_probe_ok", extra={"url": self._client.url})
            return True

        self._logger.info(
            "generation_probe_failed",
            extra={"url": self._client.url, "error": str(outcome.error)},
        )
        return False
