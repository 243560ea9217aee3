# 📜 fxwidget/errors/strategies.py
"""
📜 Стратегії, що перекладають сторонні винятки на мову `AppError`.

🔹 `HttpxErrorStrategy` — збої транспорту до Fixer, які вилетіли повз `FixerClient`.
🔹 `TelegramErrorStrategy` — флуд-контроль і загальні помилки Bot API.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx
from telegram.error import RetryAfter, TelegramError

# 🔠 Системні імпорти
import logging
from datetime import timedelta
from typing import Optional, Protocol, Union

# 🧩 Внутрішні модулі проєкту
from fxwidget.bot.ui import static_messages as msg
from fxwidget.shared.errors import AppError, NetworkFailure, UserVisibleError
from fxwidget.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.errors.strategies")


class IErrorHandlingStrategy(Protocol):
    """Повертає `AppError` для знайомого винятку або None."""

    def handle(self, error: Exception) -> Optional[AppError]: ...


# ================================
# 🌐 HTTPX
# ================================
class HttpxErrorStrategy:
    """🌐 httpx → `NetworkFailure` із людським повідомленням."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if not isinstance(error, httpx.HTTPError):
            return None

        endpoint = self._endpoint(error)
        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            text = msg.ERROR_HTTP_STATUS.format(status_code=status)
        elif isinstance(error, httpx.TimeoutException):
            status, text = None, msg.ERROR_HTTP_TIMEOUT
        elif isinstance(error, httpx.ConnectError):
            status, text = None, msg.ERROR_HTTP_CONNECTION
        else:
            return None

        logger.debug("🌐 %s on %s", type(error).__name__, endpoint)
        return NetworkFailure(text, endpoint=endpoint, status_code=status, details=str(error))

    @staticmethod
    def _endpoint(error: httpx.HTTPError) -> str:
        try:
            return error.request.url.path or "-"
        except RuntimeError:											# 🚫 Виняток створено без request
            return "-"


# ================================
# 🤖 TELEGRAM
# ================================
class TelegramErrorStrategy:
    """🤖 Помилки Bot API → `UserVisibleError`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if isinstance(error, RetryAfter):
            seconds = self._seconds(error.retry_after)
            logger.debug("⏳ Flood control: retry after %ss", seconds)
            return UserVisibleError(msg.ERROR_TELEGRAM_RETRY_AFTER.format(seconds=seconds), details=str(error))
        if isinstance(error, TelegramError):
            return UserVisibleError(msg.ERROR_TELEGRAM_GENERAL, details=str(error))
        return None

    @staticmethod
    def _seconds(retry_after: Union[int, float, timedelta]) -> int:
        if isinstance(retry_after, timedelta):
            return int(retry_after.total_seconds())
        return int(retry_after)


__all__ = ["HttpxErrorStrategy", "IErrorHandlingStrategy", "TelegramErrorStrategy"]
