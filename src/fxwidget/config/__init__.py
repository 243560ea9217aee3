# ⚙️ fxwidget/config/__init__.py
"""
⚙️ Конфігурація конвертера та збирання залежностей бота.

`Container` і `BotRegistrar` тягнуть за собою весь Telegram-шар, тому
віддаються ліниво: імпорт `fxwidget.config` лишається легким для домену.
"""

from typing import TYPE_CHECKING

from .config_service import ConfigService
from .setup.constants import CONST, AppConstants

if TYPE_CHECKING:
    from .setup.bot_registrar import BotRegistrar
    from .setup.container import Container

__all__ = ["AppConstants", "BotRegistrar", "CONST", "ConfigService", "Container"]


def __getattr__(name: str):
    if name == "Container":
        from .setup.container import Container
        return Container
    if name == "BotRegistrar":
        from .setup.bot_registrar import BotRegistrar
        return BotRegistrar
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
