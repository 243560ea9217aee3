# 🧾 fxwidget/config/setup/bot_registrar.py
"""
🧾 Підключає фічі контейнера до PTB `Application`.

Кожна фіча (`BaseFeature`) сама додає свої `CommandHandler`; тут лише обхід
списку та глобальний error-handler, який віддає все `ExceptionHandlerService`.
"""

# 🌐 Зовнішні бібліотеки
from telegram import Update
from telegram.ext import Application, ContextTypes

# 🔠 Системні імпорти
import logging

# 🧩 Внутрішні модулі проєкту
from fxwidget.config.setup.container import Container
from fxwidget.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.registrar")


class BotRegistrar:
    """🔌 Реєстрація команд конвертера та обробника помилок."""

    def __init__(self, application: Application, container: Container) -> None:
        self.app = application
        self.container = container

    def register_handlers(self) -> None:
        names = []
        for feature in self.container.features:
            feature.register_handlers(self.app)
            names.append(type(feature).__name__)
        self.app.add_error_handler(self.on_error)
        logger.info("🔌 Features registered: %s", ", ".join(names) or "-")

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Помилки поза обгорнутими хендлерами (polling, job queue) теж доходять до сервісу."""
        if context.error is None:
            return
        try:
            await self.container.exception_handler.handle(
                context.error, update if isinstance(update, Update) else None
            )
        except Exception:
            logger.exception("💥 Error handler itself failed")
