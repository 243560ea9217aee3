# 💱 fxwidget/bot/commands/converter_feature.py
"""
💱 Команди конвертера валют.

🔹 Реєструє `/start`, `/help`, `/key`, `/showkey`, `/amount`, `/from`, `/to`, `/swap`,
   `/convert`, `/currencies`, `/status`
🔹 Кожен чат має власну `ConverterSession` (через `SessionRegistry`)
🔹 Результати автоконвертації та помилки оновлення курсів надсилаються в чат самі
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Bot, Update                                           # ✉️ Подія від Telegram
from telegram.error import TelegramError                                   # 🤖 Помилки Telegram API
from telegram.ext import Application, CommandHandler, ContextTypes         # 🤖 Реєстрація команд у застосунку

# 🔠 Системні імпорти
import logging                                                             # 🧾 Логування операцій
from typing import List, Optional                                          # 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from fxwidget.application.converter_session import ConverterSession, StateListener
from fxwidget.application.state import ConverterState
from fxwidget.bot.commands.base import BaseFeature                         # 🏛️ Базовий контракт фічі
from fxwidget.bot.services.session_registry import SessionRegistry         # 🗂️ Сесії за chat_id
from fxwidget.bot.ui import static_messages as msg                         # 📝 Статичні повідомлення
from fxwidget.bot.ui.formatters.converter_formatter import ConverterFormatter
from fxwidget.config.setup.constants import AppConstants                   # ⚙️ Константи застосунку
from fxwidget.domain.currency.interfaces import normalize_code
from fxwidget.errors.error_handler import make_error_handler               # 🛡️ Обгортка для безпечного виклику
from fxwidget.errors.exception_handler_service import ExceptionHandlerService
from fxwidget.shared.utils.logger import LOG_NAME, mask_secret             # 🏷️ Ім'я кореневого логера

logger = logging.getLogger(f"{LOG_NAME}.bot.converter")


# ================================
# 💼 ФІЧА КОНВЕРТЕРА
# ================================
class ConverterFeature(BaseFeature):
    """
    💱 Інкапсулює взаємодію користувача з конвертером.
    """

    def __init__(
        self,
        sessions: SessionRegistry,
        constants: AppConstants,
        exception_handler: ExceptionHandlerService,
        formatter: Optional[ConverterFormatter] = None,
        parse_mode: Optional[str] = None,
    ) -> None:
        self.sessions = sessions                                           # 🗂️ Реєстр сесій
        self.const = constants                                             # ⚙️ Команди та UI-константи
        self.formatter = formatter or ConverterFormatter()                 # 📝 Форматер стану
        self.parse_mode = parse_mode or constants.UI.DEFAULT_PARSE_MODE
        self._safe = make_error_handler(exception_handler)                 # 🛡️ Фабрика безпечних викликів
        logger.info("💱 ConverterFeature initialised")

    # ================================
    # 🔌 РЕЄСТРАЦІЯ КОМАНД
    # ================================
    def register_handlers(self, application: Application) -> None:
        commands = self.const.LOGIC.COMMANDS
        mapping = {
            commands.START: self.start,
            commands.HELP: self.help,
            commands.KEY: self.set_key,
            commands.SHOW_KEY: self.show_key,
            commands.AMOUNT: self.set_amount,
            commands.FROM: self.set_source,
            commands.TO: self.set_target,
            commands.SWAP: self.swap,
            commands.CONVERT: self.convert,
            commands.CURRENCIES: self.currencies,
            commands.STATUS: self.status,
        }
        for command, handler in mapping.items():
            application.add_handler(CommandHandler(command, self._safe(handler)))
        logger.info("📝 Converter commands registered (%d)", len(mapping))

    # ================================
    # ▶️ /START, /HELP
    # ================================
    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._session(update, context)                               # 🔑 Відновлюємо збережений ключ
        await self._reply(update, f"{msg.WELCOME}\n\n{msg.HELP}")

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._reply(update, msg.HELP)

    # ================================
    # 🔑 КЛЮЧ
    # ================================
    async def set_key(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        raw = " ".join(context.args or []).strip()
        if not raw:
            await self._reply(update, msg.KEY_USAGE)
            return

        await self._hide_secret_message(update)
        session = await self._session(update, context)
        state = await session.set_credential(raw)
        await self._reply(update, msg.KEY_SAVED.format(masked=mask_secret(state.credential)))

    async def show_key(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        session = await self._session(update, context)
        if not session.state.has_credential:
            await self._reply(update, msg.KEY_NOT_SET)
            return
        await self._reply(update, msg.KEY_REVEALED.format(key=session.state.credential_display(reveal=True)))

    # ================================
    # ✏️ ВВІД
    # ================================
    async def set_amount(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        args = context.args or []
        if not args:
            await self._reply(update, msg.AMOUNT_USAGE)
            return
        session = await self._session(update, context)
        state = session.set_amount(args[0])
        if state.amount <= 0:
            await self._reply(update, msg.AMOUNT_INVALID)
            return
        await self._reply(update, self.formatter.amount(state))

    async def set_source(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._set_code(update, context, self.const.LOGIC.COMMANDS.FROM)

    async def set_target(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._set_code(update, context, self.const.LOGIC.COMMANDS.TO)

    async def swap(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        session = await self._session(update, context)
        state = session.swap()
        await self._reply(update, self.formatter.pair(state))

    # ================================
    # 🧮 КОНВЕРТАЦІЯ
    # ================================
    async def convert(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        args = context.args or []
        if args and len(args) != 3:
            await self._reply(update, msg.CONVERT_USAGE)
            return

        session = await self._session(update, context)
        if args:
            amount, source, target = args
            unknown = self._unknown_codes(session, [source, target])
            if unknown:
                await self._reply(update, msg.CODE_UNKNOWN.format(code=unknown[0]))
                return
            session.set_amount(amount)
            session.set_source(source)
            session.set_target(target)

        state = session.convert_now()
        await self._reply(update, self.formatter.result(state))

    # ================================
    # 🏷️ ДОВІДКОВІ КОМАНДИ
    # ================================
    async def currencies(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        session = await self._session(update, context)
        fallback = session.repository.currencies.is_empty
        await self._reply(update, self.formatter.currencies(session.currency_options(), fallback=fallback))

    async def status(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        session = await self._session(update, context)
        await self._reply(update, self.formatter.status(session.state, session.status_line()))

    # ================================
    # 🧰 ДОПОМІЖНІ МЕТОДИ
    # ================================
    async def _session(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> ConverterSession:
        chat = update.effective_chat
        if chat is None:
            raise RuntimeError("Update without chat")
        return await self.sessions.get(chat.id, self._make_listener(context.bot, chat.id))

    async def _set_code(self, update: Update, context: ContextTypes.DEFAULT_TYPE, command: str) -> None:
        args = context.args or []
        if not args:
            await self._reply(update, msg.CODE_USAGE.format(command=command))
            return
        session = await self._session(update, context)
        unknown = self._unknown_codes(session, args[:1])
        if unknown:
            await self._reply(update, msg.CODE_UNKNOWN.format(code=unknown[0]))
            return
        if command == self.const.LOGIC.COMMANDS.FROM:
            state = session.set_source(args[0])
        else:
            state = session.set_target(args[0])
        await self._reply(update, self.formatter.pair(state))

    @staticmethod
    def _unknown_codes(session: ConverterSession, raw_codes: List[str]) -> List[str]:
        known = {code for code, _ in session.currency_options()}
        known.update(session.repository.rates)
        return [normalize_code(code) for code in raw_codes if normalize_code(code) not in known]

    def _make_listener(self, bot: Bot, chat_id: int) -> StateListener:
        """Слухач сесії: пушить автоконвертацію та нові помилки в чат."""
        last_error = ""

        def listener(reason: str, state: ConverterState):
            nonlocal last_error
            if reason == ConverterSession.REASON_AUTO:
                return self._push(bot, chat_id, self.formatter.result(state))
            if reason == ConverterSession.REASON_RATES:
                last_error = ""
            if reason == ConverterSession.REASON_ERROR and state.error_text != last_error:
                last_error = state.error_text                              # 🔁 Однакову помилку двох запитів шлемо раз
                return self._push(bot, chat_id, self.formatter.error(state))
            return None

        return listener

    async def _push(self, bot: Bot, chat_id: int, text: str) -> None:
        try:
            await bot.send_message(chat_id=chat_id, text=text, parse_mode=self.parse_mode)
        except TelegramError:
            logger.exception("📤 Push to chat=%s failed", chat_id)

    async def _hide_secret_message(self, update: Update) -> None:
        """Прибирає повідомлення з ключем із чату (аналог маскованого поля)."""
        message = update.effective_message
        if message is None:
            return
        try:
            await message.delete()
        except TelegramError:
            logger.debug("🙈 Could not delete message with API key", exc_info=True)

    async def _reply(self, update: Update, text: str) -> None:
        chat = update.effective_chat
        if chat is None:
            logger.debug("ℹ️ _reply: update without chat")
            return
        await chat.send_message(text, parse_mode=self.parse_mode)


__all__ = ["ConverterFeature"]
