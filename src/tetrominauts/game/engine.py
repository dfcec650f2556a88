"""Asyncio front of the game: one writer, ordered commands, timed animations.

``GameEngine`` owns the current ``ViewState``. Commands are queued by
``dispatch`` and reduced one at a time by a worker task. Multi-frame
transitions (line clear flash, screen wipe) run as a separate task that is the
only writer until its last frame is published. While it runs, gameplay
commands and ticks are reduced against the animated snapshot, where their
preconditions fail, and reset/settings commands are held back and replayed in
arrival order once the animation ends.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

from . import actions
from .core import Frame, TetrominautsGame
from .state import ViewState


logger = logging.getLogger(__name__)

Listener = Callable[[ViewState], None]

DEFERRED_WHILE_ANIMATING = (actions.Reset,) + actions.SETTINGS_COMMANDS


class GameEngine:
    def __init__(self, game: Optional[TetrominautsGame] = None) -> None:
        self.game = game or TetrominautsGame()
        self._state = self.game.initial_state()
        self.generation = 0
        self._listeners: List[Listener] = []
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._animation: Optional[asyncio.Task] = None
        self._deferred: Deque[actions.Command] = deque()
        self._failure: Optional[Exception] = None

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def animating(self) -> bool:
        return self._animation is not None and not self._animation.done()

    @property
    def accepting(self) -> bool:
        """True while started and not stopped by a failed transition."""
        return self._queue is not None and self._failure is None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> None:
        if self._worker is not None:
            return
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._run())

    async def close(self) -> None:
        """Abandon any animation and stop the worker; the last published state stays current.

        A failed transition is re-raised here once more.
        """
        try:
            for task in (self._animation, self._worker):
                if task is None:
                    continue
                if not task.done():
                    task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                except Exception as exc:
                    if exc is not self._failure:
                        raise
        finally:
            self._animation = None
            self._worker = None
            self._queue = None
            self._deferred.clear()
        failure, self._failure = self._failure, None
        if failure is not None:
            raise failure

    async def __aenter__(self) -> "GameEngine":
        await self.start()
        return self

    async def __aexit__(self, *_) -> None:
        await self.close()

    def dispatch(self, command: actions.Command) -> None:
        """Queue ``command``; never blocks."""
        if not isinstance(command, actions.Command):
            raise TypeError(f"not a game command: {command!r}")
        self._raise_failure()
        if self._queue is None:
            raise RuntimeError("engine is not started")
        self._queue.put_nowait(command)

    async def settle(self) -> ViewState:
        """Wait until the queue is drained and no animation is in flight."""
        assert self._queue is not None, "engine is not started"
        while True:
            self._raise_failure()
            await self._queue.join()
            self._raise_failure()
            if self.animating:
                await asyncio.shield(self._animation)
                continue
            if self._queue.empty() and not self._deferred:
                return self._state

    def _raise_failure(self) -> None:
        if self._failure is not None:
            raise self._failure

    def _fail(self, exc: Exception) -> None:
        logger.error("game engine stopped: %r", exc)
        self._failure = exc
        self._deferred.clear()
        # unblock settle(); nothing will reduce these anymore
        assert self._queue is not None
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            command = await self._queue.get()
            try:
                self._handle(command)
            except Exception as exc:
                self._fail(exc)
                raise
            finally:
                self._queue.task_done()

    def _handle(self, command: actions.Command) -> None:
        if self.animating and isinstance(command, DEFERRED_WHILE_ANIMATING):
            self._deferred.append(command)
            return
        transition = self.game.reduce(self._state, command)
        self._publish(transition.state)
        if transition.animation:
            logger.debug("animating %d frame(s) for %s", len(transition.animation), type(command).__name__)
            self._animation = asyncio.create_task(self._animate(transition.animation))

    async def _animate(self, frames: Tuple[Frame, ...]) -> None:
        for frame in frames:
            self._publish(frame.state)
            if frame.delay > 0:
                await asyncio.sleep(frame.delay)
        self._animation = None
        while self._deferred and not self.animating:
            try:
                self._handle(self._deferred.popleft())
            except Exception as exc:
                # reported by the next dispatch(), settle() or close()
                self._fail(exc)
                return

    def _publish(self, state: ViewState) -> None:
        if state is self._state:
            return
        self._state = state
        self.generation += 1
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("snapshot listener failed")


class TickDriver:
    """Periodic source of ``GameTick``; the period follows the current game speed."""

    def __init__(self, engine: GameEngine) -> None:
        self.engine = engine
        self._task: Optional[asyncio.Task] = None
        self._running: Optional[asyncio.Event] = None

    @property
    def period(self) -> float:
        speed = max(1, self.engine.state.game_speed)
        return self.engine.game.config.tick_base_interval / speed

    def start(self) -> None:
        if self._task is not None:
            return
        self._running = asyncio.Event()
        self._running.set()
        self._task = asyncio.create_task(self._run())

    def pause(self) -> None:
        if self._running is not None:
            self._running.clear()

    def resume(self) -> None:
        if self._running is not None:
            self._running.set()

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _run(self) -> None:
        assert self._running is not None
        while True:
            await asyncio.sleep(self.period)
            await self._running.wait()
            if not self.engine.accepting:
                logger.debug("engine stopped, tick driver exiting")
                return
            self.engine.dispatch(actions.GAME_TICK)
