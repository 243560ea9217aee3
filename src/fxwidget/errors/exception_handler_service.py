# 🛡️ fxwidget/errors/exception_handler_service.py
"""
🛡️ Єдина точка обробки винятків Telegram-команд конвертера.

🔹 Сторонні винятки (httpx, Telegram) перетворюються на `AppError` стратегіями.
🔹 Помилки конвертера (`UserVisibleError`) користувач бачить дослівно.
🔹 Усе інше логуємо з трасою, а в чат іде одне загальне повідомлення.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update											# 🤖 Подія, на яку відповідаємо

# 🔠 Системні імпорти
import asyncio
import logging
from typing import Iterable, List, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from fxwidget.bot.ui import static_messages as msg
from fxwidget.shared.errors import AppError, UserVisibleError
from fxwidget.shared.utils.logger import LOG_NAME
from .strategies import IErrorHandlingStrategy

logger = logging.getLogger(f"{LOG_NAME}.errors")


class ExceptionHandlerService:
    """🛡️ Перетворює виняток на відповідь користувачу."""

    def __init__(self, strategies: Iterable[IErrorHandlingStrategy]) -> None:
        self._strategies: Tuple[IErrorHandlingStrategy, ...] = tuple(strategies)
        logger.debug("🛡️ Error strategies: %s", [type(s).__name__ for s in self._strategies])

    @property
    def strategies(self) -> List[IErrorHandlingStrategy]:
        return list(self._strategies)

    # ================================
    # 📥 ОБРОБКА
    # ================================
    async def handle(self, error: BaseException, update: Optional[Update]) -> None:
        """
        Логує виняток і відповідає в чат. Скасування задачі не перехоплюється.
        """
        if isinstance(error, asyncio.CancelledError):
            raise error

        app_error = self.convert_error(error)
        chat = self._chat_label(update)

        if isinstance(app_error, UserVisibleError):
            logger.warning(
                "⚠️ [%s] chat=%s: %s",
                app_error.error_code,
                chat,
                app_error.message,
                extra=app_error.to_log_extra(),
            )
            await self._reply(update, app_error.message)
            return

        logger.error("💥 Unexpected %s in chat=%s", type(error).__name__, chat, exc_info=error)
        await self._reply(update, msg.ERROR_CRITICAL)

    def convert_error(self, error: BaseException) -> Optional[AppError]:
        """`AppError` повертається як є; інші винятки проходять через стратегії по черзі."""
        if isinstance(error, AppError):
            return error
        if not isinstance(error, Exception):
            return None

        for strategy in self._strategies:
            try:
                converted = strategy.handle(error)
            except Exception:
                logger.exception("🧩 %s could not convert %s", type(strategy).__name__, type(error).__name__)
                continue
            if converted is not None:
                return converted
        return None

    # ================================
    # 🧰 ДОПОМІЖНЕ
    # ================================
    @staticmethod
    def _chat_label(update: Optional[Update]) -> str:
        chat = getattr(update, "effective_chat", None) if update else None
        chat_id = getattr(chat, "id", None)
        return str(chat_id) if isinstance(chat_id, int) else "-"

    @staticmethod
    async def _reply(update: Optional[Update], text: str) -> None:
        message = getattr(update, "effective_message", None) if update else None
        if message is None:
            logger.debug("📭 No message to answer: %s", text)
            return
        try:
            await message.reply_text(text)
        except Exception:
            logger.warning("📤 Error reply was not delivered", exc_info=True)


__all__ = ["ExceptionHandlerService"]
