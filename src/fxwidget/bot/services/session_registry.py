# 🗂️ fxwidget/bot/services/session_registry.py
"""
🗂️ Реєстр сесій конвертера: одна `ConverterSession` на чат.

🔹 Сесія створюється ліниво на першу команду чату, ключ читається один раз.
🔹 `close_all()` викликається при зупинці застосунку.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# 🔐 Lock на створення сесій
import logging
from typing import Callable, Dict, Optional

# 🧩 Внутрішні модулі проєкту
from fxwidget.application.converter_session import ConverterSession, StateListener
from fxwidget.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.bot.sessions")

SessionFactory = Callable[[int, StateListener], ConverterSession]


class SessionRegistry:
    """🗂️ chat_id → ConverterSession."""

    def __init__(self, factory: SessionFactory) -> None:
        self._factory = factory
        self._sessions: Dict[int, ConverterSession] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def peek(self, chat_id: int) -> Optional[ConverterSession]:
        return self._sessions.get(chat_id)

    async def get(self, chat_id: int, listener: StateListener) -> ConverterSession:
        """Повертає сесію чату, створюючи її та відновлюючи збережений ключ."""
        session = self._sessions.get(chat_id)
        if session is not None:
            return session
        async with self._lock:
            session = self._sessions.get(chat_id)
            if session is None:
                session = self._factory(chat_id, listener)
                self._sessions[chat_id] = session
                await session.load_credential()
                logger.info("🆕 Session created for chat=%s (total=%d)", chat_id, len(self._sessions))
        return session

    async def close_all(self) -> None:
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            await session.close()
        if sessions:
            logger.info("🧹 Closed %d converter session(s)", len(sessions))


__all__ = ["SessionFactory", "SessionRegistry"]
