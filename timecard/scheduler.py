"""Cancellable delayed tasks and the debounce used for auto-saving."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .core.logging import get_logger

logger = get_logger(__name__)

Task = Callable[[], None]


class TaskHandle:
    """Handle returned by ``Scheduler.schedule``."""

    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler:
    """Base scheduler interface."""

    def schedule(self, fn: Task, delay: float) -> TaskHandle:
        raise NotImplementedError


class _TimerHandle(TaskHandle):
    def __init__(self, timer: threading.Timer) -> None:
        self.timer = timer

    def cancel(self) -> None:
        self.timer.cancel()


class TimerScheduler(Scheduler):
    """Runs tasks on ``threading.Timer`` threads."""

    def schedule(self, fn: Task, delay: float) -> TaskHandle:
        timer = threading.Timer(delay, fn)
        timer.daemon = True
        timer.start()
        return _TimerHandle(timer)


@dataclass(order=True)
class _PendingTask(TaskHandle):
    due: float
    sequence: int
    fn: Task = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Virtual clock; tasks run only when the owner calls ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._tasks: List[_PendingTask] = []
        self._sequence = 0

    def schedule(self, fn: Task, delay: float) -> TaskHandle:
        self._sequence += 1
        task = _PendingTask(due=self.now + delay, sequence=self._sequence, fn=fn)
        self._tasks.append(task)
        return task

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running due tasks in order. Returns how many ran."""
        target = self.now + seconds
        ran = 0
        while True:
            due = sorted(task for task in self._tasks if not task.cancelled and task.due <= target)
            if not due:
                break
            task = due[0]
            self._tasks.remove(task)
            self.now = task.due
            task.fn()
            ran += 1
        self._tasks = [task for task in self._tasks if not task.cancelled]
        self.now = target
        return ran


class Debouncer:
    """Run ``action`` once activity has been quiet for ``delay`` seconds.

    Each ``trigger`` cancels the pending run and schedules a new one. A run
    that was already underway when superseded sees a stale generation and
    does nothing.
    """

    def __init__(self, scheduler: Scheduler, delay: float, action: Task) -> None:
        self.scheduler = scheduler
        self.delay = delay
        self.action = action
        self._handle: Optional[TaskHandle] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self._handle = self.scheduler.schedule(lambda: self._fire(generation), self.delay)

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None

    def flush(self) -> bool:
        """Run a pending action now. Returns False when nothing was pending."""
        with self._lock:
            if self._handle is None:
                return False
            self._generation += 1
            self._handle.cancel()
            self._handle = None
        self.action()
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
        logger.debug("debounce_fired", delay=self.delay)
        self.action()
