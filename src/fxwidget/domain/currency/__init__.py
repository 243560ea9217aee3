# 💱 fxwidget/domain/currency/__init__.py
"""
💱 Пакет `domain.currency` публікує доменні типи та чистий рушій конвертації.

🔹 `interfaces.py` — `RateTable`, `CurrencySet`, `ConversionRequest`, `ConversionResult`, контракти.
🔹 `conversion.py` — `convert()` з півотом через EUR.
"""

from .conversion import DEFAULT_MAX_AMOUNT, convert, effective_rate, validate_amount
from .interfaces import (
    BASE_CURRENCY,
    ConversionRequest,
    ConversionResult,
    CurrencyCode,
    CurrencySet,
    IKeyValueStore,
    IRatesProvider,
    RateTable,
    normalize_code,
)

__all__ = [
    "BASE_CURRENCY",
    "ConversionRequest",
    "ConversionResult",
    "CurrencyCode",
    "CurrencySet",
    "DEFAULT_MAX_AMOUNT",
    "IKeyValueStore",
    "IRatesProvider",
    "RateTable",
    "convert",
    "effective_rate",
    "normalize_code",
    "validate_amount",
]
