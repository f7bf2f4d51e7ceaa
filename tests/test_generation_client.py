from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from conftest import GenerateBackend, blank_response, malformed, timed_out, unreachable
from number_guesser.errors import MalformedResponseError, TransportError
from number_guesser.generation import AvailabilityProbe, GenerationClient
from number_guesser.generation.client import parse_narration


def _generate(backend: GenerateBackend, prompt_line: str = '{"mode":"intro","spice":"medium"}'):
    async def _run():
        http = backend.client()
        client = GenerationClient("http://ollama.local:11434/", "glados", http_client=http)
        try:
            return await client.generate(prompt_line)
        finally:
            await http.aclose()

    return asyncio.run(_run())


def test_generate_posts_double_encoded_prompt() -> None:
    backend = GenerateBackend()
    prompt_line = '{"mode":"ask","guess":50,"attempt":1,"spice":"medium"}'

    outcome = _generate(backend, prompt_line)

    assert outcome.ok
    assert outcome.text == "Generated line."
    request = backend.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://ollama.local:11434/api/generate"
    body = json.loads(request.content)
    assert body == {"model": "glados", "prompt": prompt_line, "stream": False}
    assert isinstance(body["prompt"], str)


@pytest.mark.parametrize(
    ("reply", "cause"),
    [
        (unreachable, TransportError),
        (timed_out, TransportError),
        (lambda request: httpx.Response(503, text="loading model"), TransportError),
        (malformed, MalformedResponseError),
        (blank_response, MalformedResponseError),
        (lambda request: httpx.Response(200, json={"done": True}), MalformedResponseError),
        (lambda request: httpx.Response(200, json=["a list"]), MalformedResponseError),
    ],
)
def test_generate_normalizes_failures(reply, cause) -> None:
    backend = GenerateBackend(reply)

    outcome = _generate(backend)

    assert not outcome.ok
    assert outcome.text is None
    assert isinstance(outcome.error.cause, cause)
    assert backend.calls == 1


def test_non_success_status_keeps_status_and_body() -> None:
    outcome = _generate(GenerateBackend(lambda request: httpx.Response(500, text="boom")))

    assert outcome.error.cause.status_code == 500
    assert outcome.error.cause.body == "boom"


def test_parse_narration_trims_response() -> None:
    assert parse_narration('{"response": "\\n Hello, test subject. \\n"}') == "Hello, test subject."
    with pytest.raises(MalformedResponseError):
        parse_narration('{"response": 42}')


def _probe(backend: GenerateBackend) -> bool:
    async def _run() -> bool:
        http = backend.client()
        client = GenerationClient("http://ollama.local:11434", "glados", http_client=http)
        try:
            return await AvailabilityProbe(client, timeout_seconds=1.5).probe()
        finally:
            await http.aclose()

    return asyncio.run(_run())


def test_probe_available_on_real_narration() -> None:
    backend = GenerateBackend()

    assert _probe(backend) is True
    assert backend.calls == 1
    assert backend.prompts() == [{"mode": "intro", "spice": "medium"}]
    assert backend.requests[0].extensions["timeout"]["read"] == 1.5


@pytest.mark.parametrize("reply", [unreachable, timed_out, malformed, blank_response])
def test_probe_unavailable_on_any_failure(reply) -> None:
    assert _probe(GenerateBackend(reply)) is False
