"""Single-instance periodic activities bound to a remote session."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from transitions import Machine


def current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


def cancel_task(task: asyncio.Task[None] | None) -> None:
    """Cancel *task* unless it is the task currently running this code.

    A timer callback that ends up tearing down its own role (an idle timeout
    calling disconnect) must be allowed to finish instead of being cancelled
    mid-flight.
    """
    if task is None or task.done():
        return
    if task is not current_task():
        task.cancel()


class PeriodicMonitor:
    """Run :meth:`tick` every ``interval`` seconds until stopped.

    At most one loop task exists per monitor: :meth:`start` cancels the
    previous loop before scheduling a new one.
    """

    if TYPE_CHECKING:
        # FSM generated methods and attributes for static analysis
        fsm_state: str
        activate: Callable[[], None]
        deactivate: Callable[[], None]

    STATE_IDLE = "idle"
    STATE_RUNNING = "running"
    STATE_STOPPED = "stopped"

    name = "monitor"

    def __init__(self, *, interval: float, logger: logging.Logger) -> None:
        self._interval = interval
        self._logger = logger
        self._task: asyncio.Task[None] | None = None
        self._stop_requested = False
        self.ticks = 0

        self.state_machine = Machine(
            model=self,
            states=[self.STATE_IDLE, self.STATE_RUNNING, self.STATE_STOPPED],
            initial=self.STATE_IDLE,
            ignore_invalid_triggers=True,
            model_attribute="fsm_state",
        )
        self.state_machine.add_transition(trigger="activate", source="*", dest=self.STATE_RUNNING)
        self.state_machine.add_transition(trigger="deactivate", source="*", dest=self.STATE_STOPPED)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None and self._task is current_task():
            # Restarted from inside our own tick; the live loop already covers it.
            self._stop_requested = False
            self.activate()
            return
        cancel_task(self._task)
        self._stop_requested = False
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"atvremote-{self.name}")
        self.activate()

    def stop(self) -> None:
        cancel_task(self._task)
        if self._task is not None and self._task is current_task():
            self._stop_requested = True
        else:
            self._task = None
        self.deactivate()

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval)
                self.ticks += 1
                try:
                    await self.tick()
                except Exception:
                    self._logger.exception("%s tick failed", self.name)
                if self._stop_requested:
                    self._stop_requested = False
                    self._task = None
                    return
        except asyncio.CancelledError:
            self._logger.debug("%s loop cancelled", self.name)
            raise

    async def tick(self) -> None:
        raise NotImplementedError


__all__ = ["PeriodicMonitor", "cancel_task", "current_task"]
