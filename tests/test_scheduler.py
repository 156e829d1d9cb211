import threading

from timecard.scheduler import Debouncer, ManualScheduler, Scheduler, TaskHandle, TimerScheduler


def test_debounce_fires_once_after_quiet_window():
    scheduler = ManualScheduler()
    calls = []
    debouncer = Debouncer(scheduler, 1.0, lambda: calls.append(scheduler.now))

    debouncer.trigger()
    scheduler.advance(0.5)
    debouncer.trigger()
    scheduler.advance(0.75)
    assert calls == []

    scheduler.advance(0.25)
    assert calls == [1.5]
    assert not debouncer.pending

    scheduler.advance(5)
    assert calls == [1.5]


def test_flush_runs_pending_action_immediately():
    scheduler = ManualScheduler()
    calls = []
    debouncer = Debouncer(scheduler, 1.0, lambda: calls.append("saved"))

    assert debouncer.flush() is False
    debouncer.trigger()
    assert debouncer.flush() is True
    assert calls == ["saved"]

    scheduler.advance(2)
    assert calls == ["saved"]


def test_cancel_drops_pending_action():
    scheduler = ManualScheduler()
    calls = []
    debouncer = Debouncer(scheduler, 1.0, lambda: calls.append("saved"))

    debouncer.trigger()
    debouncer.cancel()
    scheduler.advance(2)

    assert calls == []
    assert scheduler.pending == 0


class _UncancellableHandle(TaskHandle):
    def cancel(self) -> None:
        pass


class RecordingScheduler(Scheduler):
    """Keeps scheduled tasks so a test can run them after they were cancelled."""

    def __init__(self) -> None:
        self.tasks = []

    def schedule(self, fn, delay):
        self.tasks.append(fn)
        return _UncancellableHandle()


def test_superseded_run_already_underway_does_nothing():
    scheduler = RecordingScheduler()
    calls = []
    debouncer = Debouncer(scheduler, 1.0, lambda: calls.append("saved"))

    debouncer.trigger()
    debouncer.trigger()
    scheduler.tasks[0]()
    assert calls == []
    assert debouncer.pending

    scheduler.tasks[1]()
    assert calls == ["saved"]
    assert not debouncer.pending


def test_flushed_run_already_underway_does_nothing():
    scheduler = RecordingScheduler()
    calls = []
    debouncer = Debouncer(scheduler, 1.0, lambda: calls.append("saved"))

    debouncer.trigger()
    debouncer.flush()
    scheduler.tasks[0]()

    assert calls == ["saved"]


def test_manual_scheduler_runs_tasks_in_due_order():
    scheduler = ManualScheduler()
    order = []
    scheduler.schedule(lambda: order.append("late"), 2)
    scheduler.schedule(lambda: order.append("early"), 1)

    assert scheduler.advance(3) == 2
    assert order == ["early", "late"]


def test_timer_scheduler_runs_on_background_thread():
    fired = threading.Event()
    debouncer = Debouncer(TimerScheduler(), 0.01, fired.set)

    debouncer.trigger()

    assert fired.wait(2)
