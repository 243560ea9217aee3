# 🤖 fxwidget/bot/main.py
"""
🤖 Entry-point Telegram-бота конвертера валют.

🔹 `--log-level=` і `--credentials=` з командного рядка стають змінними оточення.
🔹 Збирає `Container` і PTB `Application` з командами конвертера, далі `run_polling`.
🔹 При зупинці закриває сесії (таймери) та HTTP-клієнт.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from dotenv import load_dotenv											# 🌱 .env → os.environ
from telegram.ext import Application, ApplicationBuilder				# 🤖 PTB v21 Application API

# 🔠 Системні імпорти
import logging
import os
import sys																# 🧵 CLI-аргументи
from typing import List, Optional										# 🧮 Анотації

# 🧩 Внутрішні модулі проєкту
from fxwidget.config.config_service import ConfigService				# ⚙️ Завантаження конфігів
from fxwidget.config.setup.bot_registrar import BotRegistrar			# 📋 Реєстрація хендлерів
from fxwidget.config.setup.container import Container, bootstrap_logging  # 📦 DI-контейнер
from fxwidget.shared.utils.logger import LOG_NAME						# 🏷️ Ім'я кореневого логера

logger = logging.getLogger(f"{LOG_NAME}.main")


# ================================
# 🏗️ ЗБИРАННЯ APPLICATION
# ================================
def build_application(token: str, container: Optional[Container] = None) -> Application:
    """
    Application з командами конвертера; контейнер закривається в `post_shutdown`.
    """
    container = container or Container(ConfigService())

    async def _on_shutdown(_: Application) -> None:
        await container.shutdown()										# 🧹 Таймери, задачі, HTTP-клієнт

    application = (
        ApplicationBuilder()
        .token(token)
        .post_shutdown(_on_shutdown)										# 🧹 Прибирання при зупинці
        .build()
    )
    application.bot_data["container"] = container						# 📦 Для дебагу/тестів

    BotRegistrar(application, container).register_handlers()
    logger.info("✅ Application готовий до запуску")
    return application


# ================================
# ⚙️ КОМАНДНИЙ РЯДОК
# ================================
def _apply_cli_flags_to_env(args: List[str]) -> None:
    """
    Мапить CLI-прапорці на ENV змінні: `--log-level=DEBUG`, `--credentials=path`.
    """
    def value(prefix: str) -> Optional[str]:
        for arg in args:
            if arg.startswith(prefix + "="):
                return arg.split("=", 1)[1]
        return None

    level = value("--log-level")
    if level:
        os.environ["FXWIDGET_LOG_LEVEL"] = level.upper()
    credentials = value("--credentials")
    if credentials:
        os.environ["FXWIDGET_CREDENTIALS_FILE"] = credentials


def _resolve_token(config: ConfigService) -> str:
    token = os.getenv("BOT_TOKEN") or os.getenv("TELEGRAM_TOKEN") or config.get("telegram.bot_token")
    if not token:
        logger.critical("🚨 Не знайдено токен Telegram")
        raise RuntimeError("Set BOT_TOKEN (or TELEGRAM_TOKEN) in environment.")
    return str(token)


# ================================
# 🚀 ENTRYPOINT
# ================================
def run() -> None:
    """
    Консольна команда `fxwidget-bot`.
    """
    _apply_cli_flags_to_env(list(sys.argv[1:]))
    load_dotenv()															# 🌱 Змінні з .env

    config = ConfigService()
    bootstrap_logging(config)												# 🪵 Логування з розділу logging

    application = build_application(_resolve_token(config), Container(config))
    logger.info("🤖 Bot is starting…")
    application.run_polling()
    logger.info("👋 Bot stopped")


if __name__ == "__main__":
    run()
