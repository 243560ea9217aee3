# 📝 fxwidget/bot/ui/formatters/__init__.py
"""📝 Форматери повідомлень."""

from .converter_formatter import ConverterFormatter

__all__ = ["ConverterFormatter"]
