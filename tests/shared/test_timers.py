"""
🧪 test_timers.py — unit-тести для VirtualScheduler, Debouncer та RecurringTimer
"""

import pytest

from fxwidget.shared.utils.timers import Debouncer, RecurringTimer, VirtualScheduler


def test_debouncer_fires_once_after_last_trigger():
    scheduler = VirtualScheduler()
    fired = []
    debouncer = Debouncer(scheduler, 0.5, lambda: fired.append(scheduler.time()))

    for _ in range(5):
        debouncer.trigger()
        scheduler.advance(0.02)

    # Останній trigger був на ~0.08 с, отже виклик очікується на ~0.58 с
    scheduler.advance(0.4)
    assert fired == []
    assert debouncer.pending

    scheduler.advance(0.2)
    assert fired == [pytest.approx(0.58)]
    assert not debouncer.pending


def test_debouncer_cancel():
    scheduler = VirtualScheduler()
    fired = []
    debouncer = Debouncer(scheduler, 0.5, lambda: fired.append(1))
    debouncer.trigger()
    debouncer.cancel()
    scheduler.advance(1)
    assert fired == []


def test_recurring_timer_ticks_until_cancelled():
    scheduler = VirtualScheduler()
    ticks = []
    timer = RecurringTimer(scheduler, 600, lambda: ticks.append(scheduler.time()))
    timer.start()

    scheduler.advance(1800)
    assert ticks == [600, 1200, 1800]

    timer.cancel()
    scheduler.advance(1800)
    assert len(ticks) == 3
    assert scheduler.pending == 0


def test_recurring_timer_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        RecurringTimer(VirtualScheduler(), 0, lambda: None)
