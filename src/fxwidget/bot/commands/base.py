# 🏛️ fxwidget/bot/commands/base.py
"""🏛️ Базовий контракт фічі: фіча сама реєструє свої хендлери."""

from __future__ import annotations

from abc import ABC, abstractmethod

from telegram.ext import Application


class BaseFeature(ABC):
    @abstractmethod
    def register_handlers(self, application: Application) -> None:
        """Додає хендлери фічі до застосунку."""
