from __future__ import annotations

import io
import json
import wave
from collections.abc import Callable

import httpx
import pytest


class GenerateBackend:
    """Scriptable stand-in for the ``/api/generate`` endpoint."""

    def __init__(self, reply: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.reply = reply or (lambda request: httpx.Response(200, json={"response": "  Generated line.  "}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.reply(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def prompts(self) -> list[dict]:
        return [json.loads(json.loads(request.content)["prompt"]) for request in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


def timed_out(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


def malformed(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="{not json")


def blank_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"response": "   "})


def make_wav(frame_count: int = 160, sample_rate: int = 16_000) -> bytes:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(1)
        writer.setsampwidth(2)
        writer.setframerate(sample_rate)
        writer.writeframes(b"\x00\x01" * frame_count)
    return buffer.getvalue()


@pytest.fixture
def wav_bytes() -> bytes:
    return make_wav()
