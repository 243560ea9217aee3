# 🧵 fxwidget/shared/utils/tasks.py
"""
🧵 Реєстр фонових asyncio-задач.

Тримає сильні посилання на задачі (інакше GC може їх прибрати), логує винятки,
дозволяє дочекатися всіх (`drain`) або скасувати їх при завершенні (`cancel_all`).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from typing import Any, Coroutine, Optional, Set

# 🧩 Внутрішні модулі проєкту
from fxwidget.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.tasks")


class BackgroundTasks:
    """Фонові задачі одного власника (сесії, репозиторію)."""

    def __init__(self, owner: str) -> None:
        self._owner = owner
        self._tasks: Set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: Optional[str] = None) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "🔥 Background task failed (%s/%s): %s",
                self._owner,
                task.get_name(),
                exc,
                exc_info=exc,
            )

    async def drain(self) -> None:
        """Чекає, доки не завершаться всі задачі, включно з тими, що породжені під час очікування."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("🧹 %s: cancelled %d background task(s)", self._owner, len(tasks))


__all__ = ["BackgroundTasks"]
