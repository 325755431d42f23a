import time

from chat_core.client.toast import ToastCenter, use_toast


class ManualScheduler:
    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def fire_all(self):
        for _, cb in self.pending:
            cb()
        self.pending = []


def test_show_assigns_monotonic_ids():
    center = ToastCenter(scheduler=None)
    first = center.show("Saved")
    second = center.show("Oops", description="try again", type="error")
    assert (first, second) == (1, 2)
    assert [t.title for t in center.toasts] == ["Saved", "Oops"]
    assert center.toasts[1].description == "try again"
    assert center.toasts[0].duration == 3.0


def test_positive_duration_dismisses_only_when_elapsed():
    scheduler = ManualScheduler()
    center = ToastCenter(scheduler=scheduler)
    tid = center.show("Copied", duration=1.5)
    assert scheduler.pending[0][0] == 1.5
    assert [t.id for t in center.toasts] == [tid]
    scheduler.fire_all()
    assert center.toasts == []


def test_zero_duration_never_auto_dismisses():
    scheduler = ManualScheduler()
    center = ToastCenter(scheduler=scheduler)
    center.show("Sticky", duration=0)
    assert scheduler.pending == []
    assert len(center.toasts) == 1


def test_without_timers_nothing_is_scheduled():
    center = ToastCenter(scheduler=None)
    center.show("Server side", duration=2)
    assert len(center.toasts) == 1


def test_dismiss_and_clear():
    center = ToastCenter(scheduler=None)
    a = center.show("a")
    center.show("b")
    center.dismiss(999)
    assert len(center.toasts) == 2
    center.dismiss(a)
    assert [t.title for t in center.toasts] == ["b"]
    center.clear()
    assert center.toasts == []


def test_real_timer_expires():
    center = ToastCenter()
    center.show("Short lived", duration=0.05)
    assert len(center.toasts) == 1
    deadline = time.time() + 2.0
    while center.toasts and time.time() < deadline:
        time.sleep(0.01)
    assert center.toasts == []


def test_use_toast_is_shared():
    assert use_toast() is use_toast()
