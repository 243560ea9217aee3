# 🧰 fxwidget/shared/utils/__init__.py
"""
🧰 Пакет утиліт: логування, таймери, фонові задачі.
"""

from __future__ import annotations

# 🔠 Логування
from .logger import (
    LOG_NAME,
    get_logger,
    init_logging,
    init_logging_from_config,
    mask_secret,
)

# ⏱️ Таймери
from .timers import Debouncer, LoopScheduler, RecurringTimer, Scheduler, VirtualScheduler

# 🧵 Фонові задачі
from .tasks import BackgroundTasks

__all__ = [
    # logging
    "LOG_NAME",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    "mask_secret",
    # timers
    "Debouncer",
    "LoopScheduler",
    "RecurringTimer",
    "Scheduler",
    "VirtualScheduler",
    # tasks
    "BackgroundTasks",
]
