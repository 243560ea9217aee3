# 🛠️ fxwidget/errors/error_handler.py
"""
🛠️ `make_error_handler` — обгортка для команд бота.

Виняток із команди не доходить до PTB: його отримує `ExceptionHandlerService`
разом з `Update`, щоб відповісти саме в той чат. `CancelledError` пролітає далі.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Optional

# 🧩 Внутрішні модулі проєкту
from fxwidget.shared.utils.logger import LOG_NAME
from .exception_handler_service import ExceptionHandlerService

logger = logging.getLogger(f"{LOG_NAME}.errors.handler")

CommandCallback = Callable[..., Awaitable[Any]]


def _find_update(args: tuple, kwargs: dict) -> Optional[Update]:
    candidate = kwargs.get("update")
    if isinstance(candidate, Update):
        return candidate
    return next((arg for arg in args if isinstance(arg, Update)), None)


def make_error_handler(service: ExceptionHandlerService) -> Callable[[CommandCallback], CommandCallback]:
    """Повертає декоратор, що направляє винятки команди у `service`."""

    def decorator(func: CommandCallback) -> CommandCallback:
        @functools.wraps(func)
        async def guarded(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.debug("🧯 %s raised %s", func.__name__, type(exc).__name__)
                await service.handle(exc, _find_update(args, kwargs))
                return None

        return guarded

    return decorator


__all__ = ["make_error_handler"]
