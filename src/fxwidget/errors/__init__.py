# 🚨 fxwidget/errors/__init__.py
"""🚨 Обробка помилок Telegram-шару: стратегії, сервіс, декоратор."""

from __future__ import annotations

from .error_handler import make_error_handler
from .exception_handler_service import ExceptionHandlerService
from .strategies import HttpxErrorStrategy, IErrorHandlingStrategy, TelegramErrorStrategy

__all__ = [
    "ExceptionHandlerService",
    "HttpxErrorStrategy",
    "IErrorHandlingStrategy",
    "TelegramErrorStrategy",
    "make_error_handler",
]
