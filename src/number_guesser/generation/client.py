"""Single-shot client for an Ollama-compatible ``/api/generate`` endpoint."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import httpx

from number_guesser.errors import GenerationError, MalformedResponseError, TransportError

_BODY_EXCERPT_CHARS = 200


@dataclass(slots=True, frozen=True)
class GenerationOutcome:
    """Narration text on success, or the error that prevented it."""

    text: str | None = None
    error: GenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.text is not None


class GenerationClient:
    """Sends one prompt line per call and normalizes every failure into an outcome."""

    def __init__(
        self,
        host: str,
        model: str,
        *,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._url = f"{host.rstrip('/')}/api/generate"
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient()
        self._logger = logger or logging.getLogger("number_guesser.generation.client")

    @property
    def url(self) -> str:
        return self._url

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    def build_request_body(self, prompt_line: str) -> dict:
        # ``prompt`` is itself a JSON-encoded string; the backend expects it double-encoded.
        return {"model": self._model, "prompt": prompt_line, "stream": False}

    async def generate(self, prompt_line: str, *, timeout: float | None = None) -> GenerationOutcome:
        """Request narration for ``prompt_line``. Exactly one attempt, never raises for backend faults."""
        try:
            text = await self._request(prompt_line, timeout=timeout or self._timeout_seconds)
        except (TransportError, MalformedResponseError) as exc:
            self._logger.warning(
                "generation_failed",
                extra={
                    "url": self._url,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                    "status_code": getattr(exc, "status_code", None),
                },
            )
            return GenerationOutcome(error=GenerationError(exc))

        self._logger.debug("generation_succeeded", extra={"url": self._url, "chars": len(text)})
        return GenerationOutcome(text=text)

    async def _request(self, prompt_line: str, *, timeout: float) -> str:
        try:
            response = await self._http.post(self._url, json=self.build_request_body(prompt_line), timeout=timeout)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request timed out after {timeout}s") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text[:_BODY_EXCERPT_CHARS],
            )

        return parse_narration(response.text)


def parse_narration(body: str) -> str:
    """Extract the trimmed ``response`` field from a generate reply."""
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Unparseable body: {body[:_BODY_EXCERPT_CHARS]!r}") from exc

    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")

    narration = payload.get("response")
    if not isinstance(narration, str) or not narration.strip():
        raise MalformedResponseError("Empty response field")
    return narration.strip()
