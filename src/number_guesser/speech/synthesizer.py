"""HTTP client for a local text-to-speech server returning WAV audio."""

from __future__ import annotations

import httpx

from number_guesser.errors import TransportError


class HttpSpeechSynthesizer:
    """Fetches ``GET {endpoint}/?text=...`` and returns the raw audio body."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = f"{endpoint.rstrip('/')}/"
        self._timeout_seconds = timeout_seconds
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient()

    @property
    def url(self) -> str:
        return self._url

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def synthesize(self, text: str, *, timeout: float | None = None) -> bytes:
        effective_timeout = timeout or self._timeout_seconds
        try:
            response = await self._http.get(self._url, params={"text": text}, timeout=effective_timeout)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Speech request timed out after {effective_timeout}s") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            raise TransportError(f"HTTP {response.status_code}", status_code=response.status_code)
        return response.content
