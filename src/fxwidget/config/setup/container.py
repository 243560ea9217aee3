# 📦 fxwidget/config/setup/container.py
"""
📦 Контейнер залежностей Telegram-бота.

🔹 Створює сервіси в правильному порядку DI
🔹 Інкапсулює конфігурацію HTTP-клієнта Fixer, сховища ключів і сесій
🔹 Дає єдину точку доступу до фіч та обробника помилок
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                           # 🧾 Базові засоби логування
from typing import Any, Dict, List, Mapping, Optional                    # 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from fxwidget.application.converter_session import (
    FALLBACK_CURRENCIES,
    ConverterSession,
    StateListener,
)
from fxwidget.bot.commands.base import BaseFeature                       # 🏛️ Контракт фічі
from fxwidget.bot.commands.converter_feature import ConverterFeature     # 💱 Команди конвертера
from fxwidget.bot.services.session_registry import SessionRegistry       # 🗂️ Сесії за chat_id
from fxwidget.config.config_service import ConfigService                 # ⚙️ Конфігурація
from fxwidget.config.setup.constants import CONST, AppConstants          # ⚙️ Глобальні константи
from fxwidget.domain.currency.conversion import DEFAULT_MAX_AMOUNT
from fxwidget.errors.exception_handler_service import ExceptionHandlerService  # 🛡️ Менеджер винятків
from fxwidget.errors.strategies import HttpxErrorStrategy, TelegramErrorStrategy  # 🧱 Набір стратегій помилок
from fxwidget.infrastructure.currency.fixer_client import DEFAULT_BASE_URL, FixerClient
from fxwidget.infrastructure.currency.rate_repository import DEFAULT_REFRESH_INTERVAL_SEC, RateRepository
from fxwidget.infrastructure.storage.credential_store import DEFAULT_CREDENTIAL_KEY, CredentialStore
from fxwidget.infrastructure.storage.json_store import JsonKeyValueStore
from fxwidget.shared.utils.logger import LOG_NAME, init_logging_from_config
from fxwidget.shared.utils.timers import LoopScheduler, Scheduler

logger = logging.getLogger(f"{LOG_NAME}.container")


# ================================
# 🪵 ЛОГУВАННЯ
# ================================
def bootstrap_logging(config: Optional[ConfigService] = None) -> logging.Logger:
    """Піднімає логування з розділу `logging` конфігурації."""
    cfg = config or ConfigService()
    return init_logging_from_config(cfg.section("logging"))


# ================================
# 📦 КОНТЕЙНЕР
# ================================
class Container:
    """📦 Збирає всі залежності бота."""

    def __init__(self, config: ConfigService, *, scheduler: Optional[Scheduler] = None) -> None:
        self.config = config
        self.constants: AppConstants = CONST
        self.scheduler: Scheduler = scheduler or LoopScheduler()

        # 🌐 Мережа
        self.fixer_client = FixerClient(
            base_url=str(config.get("currency_api.base_url", DEFAULT_BASE_URL)),
            timeout=config.get_float("currency_api.timeout_sec", 10.0),
        )

        # 💾 Сховище
        self.key_value_store = JsonKeyValueStore(str(config.get("files.credentials", "data/credentials.json")))

        # 🛡️ Помилки
        self.exception_handler = ExceptionHandlerService([HttpxErrorStrategy(), TelegramErrorStrategy()])

        # 🗂️ Сесії та фічі
        self.sessions = SessionRegistry(self.create_session)
        self.converter_feature = ConverterFeature(
            self.sessions,
            self.constants,
            self.exception_handler,
            parse_mode=config.get("telegram.parse_mode") or None,
        )
        self.features: List[BaseFeature] = [self.converter_feature]
        logger.info("📦 Container ready (features=%d)", len(self.features))

    # ================================
    # 🏭 ФАБРИКИ
    # ================================
    def credential_key_for(self, chat_id: int) -> str:
        base = str(self.config.get("converter.credential_key", DEFAULT_CREDENTIAL_KEY))
        return f"{base}{self.constants.LOGIC.CREDENTIAL_KEY_SEPARATOR}{chat_id}"

    def create_session(self, chat_id: int, listener: StateListener) -> ConverterSession:
        cfg = self.config
        repository = RateRepository(
            self.fixer_client,
            self.scheduler,
            refresh_interval=cfg.get_float("currency_api.refresh_interval_sec", DEFAULT_REFRESH_INTERVAL_SEC),
            fence_stale_responses=cfg.get_bool("currency_api.fence_stale_responses", True),
            owns_provider=False,                                         # 🔌 Клієнт спільний для всіх чатів
        )
        return ConverterSession(
            repository,
            CredentialStore(
                self.key_value_store,
                key=self.credential_key_for(chat_id),
                fallback=str(cfg.get("currency_api.default_access_key") or ""),
            ),
            self.scheduler,
            debounce_sec=cfg.get_float("converter.debounce_sec", 0.5),
            max_amount=cfg.get_float("converter.max_amount", DEFAULT_MAX_AMOUNT),
            default_amount=cfg.get_float("converter.default_amount", 1.0),
            default_source=str(cfg.get("converter.default_source", "EUR")),
            default_target=str(cfg.get("converter.default_target", "USD")),
            fallback_currencies=self._fallback_currencies(),
            listener=listener,
        )

    def _fallback_currencies(self) -> Mapping[str, str]:
        raw: Dict[str, Any] = self.config.get("converter.fallback_currencies") or {}
        if not isinstance(raw, dict) or not raw:
            return FALLBACK_CURRENCIES
        return {str(code).upper(): str(name) for code, name in raw.items()}

    # ================================
    # 🧹 ЗАВЕРШЕННЯ
    # ================================
    async def shutdown(self) -> None:
        """Закриває сесії (таймери, задачі) і спільний HTTP-клієнт."""
        await self.sessions.close_all()
        await self.fixer_client.close()
        logger.info("👋 Container shut down")


__all__ = ["Container", "bootstrap_logging"]
