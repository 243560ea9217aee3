# 🎛️ fxwidget/application/__init__.py
"""🎛️ Прикладний шар: стан і контролер віджета конвертера."""

from __future__ import annotations

from .converter_session import ConverterSession, parse_amount
from .state import PLACEHOLDER_TEXT, ConverterState

__all__ = ["ConverterSession", "ConverterState", "PLACEHOLDER_TEXT", "parse_amount"]
