# 🚨 fxwidget/shared/errors.py
"""
🚨 Ієрархія доменних винятків конвертера.

🔹 `AppError` — базовий виняток застосунку, `UserVisibleError` — текст можна показати користувачу.
🔹 `ConverterError` та п'ять видів збоїв: валідація, відсутні курси, відповідь провайдера,
   мережа, арифметика.
🔹 Кожен виняток уміє віддати `to_log_extra()` для структурованих логів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Dict, Optional										# 📐 Типізація


# ================================
# 🧠 БАЗОВІ ВИНЯТКИ
# ================================
class AppError(Exception):
    """🧠 Базовий виняток застосунку."""

    error_code: str = "app_error"

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message											# 💬 Текст для користувача/логів
        self.details = details											# 🔎 Технічні подробиці

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для `logger.extra`."""
        extra: Dict[str, object] = {"error_code": self.error_code}
        if self.details:
            extra["details"] = self.details
        return extra


class UserVisibleError(AppError):
    """👀 Помилка, текст якої безпечно показати користувачу як є."""

    error_code = "user_visible"


class ConverterError(UserVisibleError):
    """💱 Спільний предок усіх збоїв конвертера."""

    error_code = "converter_error"


# ================================
# 🧾 ВИДИ ЗБОЇВ
# ================================
class ValidationFailure(ConverterError):
    """✋ Порожній ключ, невалідна сума або код валюти."""

    error_code = "validation"

    def __init__(self, message: str, *, reason: str, details: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.reason = reason											# 🏷️ Короткий опис: "API key required", "Invalid amount"

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["reason"] = self.reason
        return extra


class RatesUnavailable(ConverterError):
    """⏳ Жодне завантаження курсів ще не вдалося — треба оновити й повторити."""

    error_code = "rates_unavailable"

    def __init__(self, message: str = "Loading exchange rates...", *, details: Optional[str] = None) -> None:
        super().__init__(message, details=details)


class ProviderError(ConverterError):
    """🏦 Провайдер курсів повернув структуровану помилку."""

    error_code = "provider_error"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        info: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=info)
        self.code = code												# 🔢 Числовий код провайдера (101, 104, ...)
        self.info = info												# 🗒️ Вільний текст провайдера
        self.endpoint = endpoint										# 🌐 symbols / latest

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["provider_code"] = self.code
        if self.endpoint:
            extra["endpoint"] = self.endpoint
        return extra


class NetworkFailure(ConverterError):
    """🌐 Транспортний збій запиту (таймаут, DNS, HTTP-статус, битий JSON)."""

    error_code = "network_error"

    def __init__(
        self,
        message: str,
        *,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.endpoint = endpoint
        self.status_code = status_code

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.endpoint:
            extra["endpoint"] = self.endpoint
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


class ConversionFailure(ConverterError):
    """🧮 Арифметика дала нескінченний/NaN результат або курсу немає в таблиці."""

    error_code = "conversion_failed"

    def __init__(
        self,
        message: str = "Unable to calculate conversion. Please try again.",
        *,
        missing_code: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.missing_code = missing_code

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.missing_code:
            extra["missing_code"] = self.missing_code
        return extra


__all__ = [
    "AppError",
    "UserVisibleError",
    "ConverterError",
    "ValidationFailure",
    "RatesUnavailable",
    "ProviderError",
    "NetworkFailure",
    "ConversionFailure",
]
