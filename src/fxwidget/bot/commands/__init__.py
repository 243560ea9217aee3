# 🧭 fxwidget/bot/commands/__init__.py
"""🧭 Командні фічі бота."""

from .base import BaseFeature
from .converter_feature import ConverterFeature

__all__ = ["BaseFeature", "ConverterFeature"]
