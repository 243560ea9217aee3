# 🧰 fxwidget/bot/services/__init__.py
"""🧰 Сервіси Telegram-шару."""

from .session_registry import SessionFactory, SessionRegistry

__all__ = ["SessionFactory", "SessionRegistry"]
