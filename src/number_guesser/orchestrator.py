"""Narration state machine tying game feedback to the generation backend."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

from number_guesser.errors import RangeConflict
from number_guesser.game import PhaseBuilder, RangeTracker
from number_guesser.generation import AvailabilityProbe, GenerationClient
from number_guesser.models import NarrationPhase, NarrationResult, NarrationSource, OrchestratorState
from number_guesser.speech import SpeechPlayer
from number_guesser.telemetry import Telemetry

T = TypeVar("T")


class NarrationSink(Protocol):
    """Presentation layer that displays narration lines."""

    def publish(self, result: NarrationResult) -> None:
        """Show one narration line to the player."""


class NarrationOrchestrator:
    """Drives one guessing session and emits exactly one narration per phase.

    Inputs are serialized, so the narration for a phase is always published
    before the next transition is computed. ``replay`` cancels whatever the
    previous session still has in flight and ignores its late results.
    """

    def __init__(
        self,
        *,
        tracker: RangeTracker,
        phases: PhaseBuilder,
        client: GenerationClient,
        probe: AvailabilityProbe,
        sink: NarrationSink,
        speech: SpeechPlayer | None = None,
        telemetry: Telemetry | None = None,
        speak_sequentially: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._tracker = tracker
        self._phases = phases
        self._client = client
        self._probe = probe
        self._sink = sink
        self._speech = speech
        self._telemetry = telemetry
        self._speak_sequentially = speak_sequentially
        self._logger = logger or logging.getLogger("number_guesser.orchestrator")

        self._state = OrchestratorState.IDLE
        self._backend_available: bool | None = None
        self._session_id = 0
        self._lock = asyncio.Lock()
        self._inflight: set[asyncio.Task] = set()
        self._speech_task: asyncio.Task | None = None

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def backend_available(self) -> bool | None:
        """Cached probe verdict for the current session; ``None`` before the probe."""
        return self._backend_available

    @property
    def tracker(self) -> RangeTracker:
        return self._tracker

    async def start(self) -> list[NarrationResult]:
        """Probe the backend, then narrate the intro and the first guess."""
        session = self._session_id
        async with self._lock:
            if not self._is_current(session) or self._state is not OrchestratorState.IDLE:
                self._logger.info("start_ignored", extra={"state": self._state.value})
                return []
            return await self._begin_session(session)

    async def replay(self) -> list[NarrationResult]:
        """Abandon the current session and start a fresh one."""
        self._session_id += 1
        session = self._session_id
        await self._cancel_inflight()
        self._logger.info("session_replay", extra={"session": session})

        async with self._lock:
            if not self._is_current(session):
                return []
            self._tracker.reset()
            self._backend_available = None
            self._state = OrchestratorState.IDLE
            return await self._begin_session(session)

    async def higher(self) -> list[NarrationResult]:
        return await self._feedback(self._tracker.apply_higher, "higher")

    async def lower(self) -> list[NarrationResult]:
        return await self._feedback(self._tracker.apply_lower, "lower")

    async def correct(self) -> list[NarrationResult]:
        session = self._session_id
        async with self._lock:
            if not self._accepts_feedback(session, "correct"):
                return []

            self._tracker.conclude()
            result = await self._narrate(session, NarrationPhase.WIN)
            if not self._is_current(session):
                return []

            self._state = OrchestratorState.CONCLUDED
            self._emit_telemetry("game_won", {"attempts": self._tracker.state.attempt_count})
            return [result] if result else []

    async def aclose(self) -> None:
        """Cancel pending generation and speech work."""
        self._session_id += 1
        await self._cancel_inflight()

    async def _begin_session(self, session: int) -> list[NarrationResult]:
        self._state = OrchestratorState.INTRODUCING
        available = await self._run_tracked(session, self._probe.probe)
        if not self._is_current(session):
            return []
        self._backend_available = bool(available)

        results: list[NarrationResult] = []
        intro = await self._narrate(session, NarrationPhase.INTRO)
        if not self._is_current(session):
            return results
        if intro:
            results.append(intro)

        results.extend(await self._ask(session))
        if self._is_current(session):
            self._state = OrchestratorState.AWAITING_FEEDBACK
        return results

    async def _feedback(self, apply: Callable[[], object], label: str) -> list[NarrationResult]:
        session = self._session_id
        async with self._lock:
            if not self._accepts_feedback(session, label):
                return []

            try:
                apply()
            except RangeConflict as exc:
                return await self._recover(session, exc)

            return await self._ask(session)

    async def _recover(self, session: int, conflict: RangeConflict) -> list[NarrationResult]:
        self._state = OrchestratorState.ERROR_RECOVERY
        current = self._tracker.search_range
        self._logger.info(
            "range_conflict",
            extra={"low": current.low, "high": current.high, "rejected_low": conflict.low, "rejected_high": conflict.high},
        )
        self._emit_telemetry("range_conflict", {"low": current.low, "high": current.high})

        result = await self._narrate(session, NarrationPhase.ERROR, reason=conflict.reason)
        if not self._is_current(session):
            return []
        self._state = OrchestratorState.AWAITING_FEEDBACK
        return [result] if result else []

    async def _ask(self, session: int) -> list[NarrationResult]:
        self._tracker.next_guess()
        result = await self._narrate(session, NarrationPhase.ASK)
        return [result] if result else []

    async def _narrate(
        self,
        session: int,
        phase: NarrationPhase,
        *,
        reason: str | None = None,
    ) -> NarrationResult | None:
        payload = self._phases.build(phase, self._tracker.state, reason=reason)
        text, source = payload.fallback, NarrationSource.FALLBACK

        if self._backend_available:
            outcome = await self._run_tracked(session, lambda: self._client.generate(payload.prompt))
            if outcome is None:
                return None
            if outcome.ok:
                text, source = outcome.text, NarrationSource.GENERATED
            else:
                self._logger.info("narration_fallback", extra={"phase": phase.value, "error": str(outcome.error)})

        if not self._is_current(session):
            return None

        result = NarrationResult(phase=phase, text=payload.finish(text), source=source)
        self._sink.publish(result)
        self._logger.debug("narration_emitted", extra={"phase": phase.value, "source": source.value})
        self._emit_telemetry(
            "narration_emitted",
            {"phase": phase.value, "source": source.value, "spice": payload.spice, "session": session},
        )
        await self._dispatch_speech(session, result.text)
        return result

    async def _dispatch_speech(self, session: int, text: str) -> None:
        if self._speech is None:
            return

        # Lines are spoken in publish order, one synthesizer call at a time.
        task = asyncio.create_task(self._speak_after(self._speech_task, text), name="narration-speech")
        task.add_done_callback(self._on_speech_done)
        self._track(task)
        self._speech_task = task

        if self._speak_sequentially:
            await self._await_tracked(session, task)

    async def _speak_after(self, previous: asyncio.Task | None, text: str) -> bool:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        return await self._speech.speak(text)

    async def _run_tracked(self, session: int, factory: Callable[[], Awaitable[T]]) -> T | None:
        task = asyncio.ensure_future(factory())
        self._track(task)
        return await self._await_tracked(session, task)

    async def _await_tracked(self, session: int, task: asyncio.Future) -> object | None:
        try:
            return await task
        except asyncio.CancelledError:
            if not self._is_current(session):
                return None
            raise

    def _track(self, task: asyncio.Future) -> None:
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _cancel_inflight(self) -> None:
        pending = [task for task in self._inflight if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            self._logger.info("inflight_cancelled", extra={"count": len(pending)})

    def _on_speech_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.warning("speech_task_failed", extra={"error": f"{type(exc).__name__}: {exc}"})

    def _accepts_feedback(self, session: int, label: str) -> bool:
        if self._is_current(session) and self._state is OrchestratorState.AWAITING_FEEDBACK:
            return True
        self._logger.info("feedback_ignored", extra={"feedback": label, "state": self._state.value})
        return False

    def _is_current(self, session: int) -> bool:
        return session == self._session_id

    def _emit_telemetry(self, event_name: str, payload: dict) -> None:
        if self._telemetry is not None:
            self._telemetry.emit(event_name, payload)
