# ⏱️ fxwidget/shared/utils/timers.py
"""
⏱️ Планувальники та таймери, які можна скасувати.

🔹 `Scheduler` — мінімальний контракт: `time()` та `call_later()` з хендлом, що має `cancel()`.
🔹 `LoopScheduler` — продакшн-реалізація поверх asyncio event loop.
🔹 `VirtualScheduler` — керований віртуальний годинник для тестів (`advance()`).
🔹 `Debouncer` — trailing-edge debounce, `RecurringTimer` — періодичний виклик.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# 🔁 Event loop та TimerHandle
import heapq															# 🧮 Черга віртуальних таймерів
import itertools														# 🔢 Стабільний порядок однакових дедлайнів
import logging															# 🧾 Логи таймерів
from typing import Any, Callable, List, Optional, Protocol, Tuple		# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from fxwidget.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.timers")


# ================================
# 🧠 КОНТРАКТИ
# ================================
class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Джерело часу та відкладених викликів."""

    def time(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


# ================================
# 🔁 ASYNCIO-РЕАЛІЗАЦІЯ
# ================================
class LoopScheduler:
    """Делегує в `loop.call_later`; loop береться ліниво з поточного контексту."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def time(self) -> float:
        return self._get_loop().time()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        return self._get_loop().call_later(max(0.0, float(delay)), callback, *args)


# ================================
# 🧪 ВІРТУАЛЬНИЙ ГОДИННИК
# ================================
class VirtualTimerHandle:
    """Хендл віртуального таймера."""

    __slots__ = ("when", "callback", "args", "cancelled")

    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple[Any, ...]) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """
    Детермінований планувальник: час рухається тільки через `advance()`.

    Колбеки, заплановані під час `advance()`, теж виконуються, якщо їхній дедлайн
    потрапляє у вікно просування.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._queue: List[Tuple[float, int, VirtualTimerHandle]] = []
        self._counter = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> VirtualTimerHandle:
        handle = VirtualTimerHandle(self._now + max(0.0, float(delay)), callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Кількість таймерів, що ще не спрацювали і не скасовані."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """Просуває час і виконує всі прострочені колбеки. Повертає кількість викликів."""
        deadline = self._now + max(0.0, float(seconds))
        fired = 0
        while self._queue and self._queue[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._queue)
            self._now = when
            if handle.cancelled:
                continue
            handle.callback(*handle.args)
            fired += 1
        self._now = deadline
        return fired


# ================================
# 🕒 DEBOUNCE
# ================================
class Debouncer:
    """
    Trailing-edge debounce: колбек виконується через `delay` секунд після
    останнього `trigger()`. Кожен новий `trigger()` скасовує попередній таймер.
    """

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], Any]) -> None:
        self._scheduler = scheduler
        self._delay = float(delay)
        self._callback = callback
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        self.cancel()
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()


# ================================
# 🔁 ПЕРІОДИЧНИЙ ТАЙМЕР
# ================================
class RecurringTimer:
    """Викликає `callback` кожні `interval` секунд до `cancel()`."""

    def __init__(self, scheduler: Scheduler, interval: float, callback: Callable[[], Any]) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._scheduler = scheduler
        self._interval = float(interval)
        self._callback = callback
        self._handle: Optional[TimerHandle] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        """Перезапускає відлік з нуля."""
        self.cancel()
        self._handle = self._scheduler.call_later(self._interval, self._tick)
        logger.debug("🔁 Recurring timer armed (interval=%.1fs)", self._interval)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("⏹️ Recurring timer cancelled")

    def _tick(self) -> None:
        self._handle = self._scheduler.call_later(self._interval, self._tick)
        self._callback()


__all__ = [
    "Debouncer",
    "LoopScheduler",
    "RecurringTimer",
    "Scheduler",
    "TimerHandle",
    "VirtualScheduler",
    "VirtualTimerHandle",
]
