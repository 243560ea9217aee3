# 📖 fxwidget/config/setup/constants.py
"""
📖 Типобезпечні константи Telegram-бота конвертера.

🔹 Централізує UI- та LOGIC-набори значень для інших модулів
🔹 Набори заморожені (`frozen=True, slots=True`), змінити їх у рантаймі не можна
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, fields
from typing import Final, List                                         # 🧮 Типізація

logger = logging.getLogger("fxwidget.config.constants")


# ================================
# 🧢 UI
# ================================
@dataclass(frozen=True, slots=True)
class _UIConstants:
    """Константи UI (parse mode)."""

    DEFAULT_PARSE_MODE: Final[str] = "HTML"                              # 📝 Усі відповіді йдуть як HTML


# ================================
# 🤖 КОМАНДИ ТА ЛОГІКА
# ================================
@dataclass(frozen=True, slots=True)
class _Commands:
    """Назви команд конвертера, як їх реєструє `CommandHandler`."""

    START: Final[str] = "start"                                          # ▶️ /start
    HELP: Final[str] = "help"                                            # ℹ️ /help
    KEY: Final[str] = "key"                                              # 🔑 /key <key>
    SHOW_KEY: Final[str] = "showkey"                                     # 👁️ /showkey
    AMOUNT: Final[str] = "amount"                                        # 🔢 /amount <n>
    FROM: Final[str] = "from"                                            # 💱 /from <CODE>
    TO: Final[str] = "to"                                                # 💱 /to <CODE>
    SWAP: Final[str] = "swap"                                            # 🔄 /swap
    CONVERT: Final[str] = "convert"                                      # 🧮 /convert [n FROM TO]
    CURRENCIES: Final[str] = "currencies"                                # 🏷️ /currencies
    STATUS: Final[str] = "status"                                        # 📊 /status


@dataclass(frozen=True, slots=True)
class _LogicConstants:
    """Константи, що визначають логіку (команди, ключі сховища)."""

    COMMANDS: Final[_Commands] = _Commands()                             # 🧾 Команди конвертера
    CREDENTIAL_KEY_SEPARATOR: Final[str] = ":"                           # 🔑 fixerApiKey:<chat_id>


# ================================
# 🌍 ТОЧКА ДОСТУПУ
# ================================
@dataclass(frozen=True, slots=True)
class AppConstants:
    """Єдина точка доступу до всіх констант проєкту (UI, LOGIC)."""

    UI: Final[_UIConstants] = _UIConstants()
    LOGIC: Final[_LogicConstants] = _LogicConstants()

    def get_all_commands(self) -> List[str]:
        """Повертає назви всіх команд (для реєстрації та довідки)."""
        return [getattr(self.LOGIC.COMMANDS, field.name) for field in fields(self.LOGIC.COMMANDS)]


CONST = AppConstants()
logger.debug("📖 AppConstants initialised")

__all__ = ["AppConstants", "CONST"]
