# 💱 fxwidget/domain/currency/interfaces.py
"""
💱 Доменні типи та контракти для валютних операцій.

🔹 `RateTable` — незмінний знімок курсів відносно EUR (EUR неявно = 1.0).
🔹 `CurrencySet` — код → людська назва, лише для відображення.
🔹 `ConversionRequest` / `ConversionResult` — вхід і вихід рушія конвертації.
🔹 `IRatesProvider` та `IKeyValueStore` — контракти інфраструктури.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логи нормалізації
import math																# ♾️ Перевірка скінченності
from dataclasses import dataclass, field								# 🧱 Immutable DTO
from decimal import ROUND_HALF_UP, Decimal								# 💰 Округлення для відображення
from types import MappingProxyType										# 🧊 Незмінні мапи
from typing import Any, Iterator, Mapping, NewType, Optional, Protocol, Tuple

# 🧩 Внутрішні модулі проєкту
from fxwidget.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain")


# ================================
# 🔤 БАЗОВІ ТИПИ
# ================================
CurrencyCode = NewType("CurrencyCode", str)
BASE_CURRENCY = CurrencyCode("EUR")										# 🇪🇺 База безкоштовного тарифу Fixer

_AMOUNT_QUANTUM = Decimal("0.01")
_RATE_QUANTUM = Decimal("0.000001")


def normalize_code(code: object) -> CurrencyCode:
    """🔤 `' usd '` → `'USD'`; порожній рядок лишається порожнім."""
    return CurrencyCode(str(code or "").strip().upper())


def _positive_finite(value: object) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def quantize_display(value: float, quantum: Decimal) -> Decimal:
    """📐 Округлення для відображення (точне двійкове значення float, HALF_UP)."""
    return Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


# ================================
# 📈 ТАБЛИЦЯ КУРСІВ
# ================================
@dataclass(frozen=True)
class RateTable:
    """
    📈 Знімок курсів: скільки одиниць валюти за 1 EUR.

    Інваріант: усі значення скінченні й > 0. Некоректні записи відкидаються при
    побудові через `from_mapping`. Відсутність коду — це `None` з `lookup()`,
    а не нуль.
    """

    rates: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    fetched_at: Optional[float] = None									# 🕒 Unix-час успішного завантаження

    @classmethod
    def empty(cls) -> "RateTable":
        return cls()

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], *, fetched_at: Optional[float] = None) -> "RateTable":
        normalized = {}
        for key, value in (raw or {}).items():
            code = normalize_code(key)
            rate = _positive_finite(value)
            if not code or rate is None:
                logger.warning("⚠️ Skipping invalid rate entry %r=%r", key, value)
                continue
            normalized[code] = rate
        return cls(rates=MappingProxyType(normalized), fetched_at=fetched_at)

    @classmethod
    def coerce(cls, table: "RateTable | Mapping[str, Any] | None") -> "RateTable":
        if isinstance(table, RateTable):
            return table
        return cls.from_mapping(table or {})

    def lookup(self, code: str) -> Optional[float]:
        """Курс валюти відносно EUR або None, якщо його немає."""
        normalized = normalize_code(code)
        if normalized == BASE_CURRENCY:
            return self.rates.get(BASE_CURRENCY, 1.0)
        return self.rates.get(normalized)

    @property
    def is_empty(self) -> bool:
        return not self.rates

    def __len__(self) -> int:
        return len(self.rates)

    def __contains__(self, code: object) -> bool:
        return self.lookup(str(code)) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.rates)


# ================================
# 🏷️ НАБІР ВАЛЮТ
# ================================
@dataclass(frozen=True)
class CurrencySet:
    """🏷️ Код валюти → назва для відображення."""

    names: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "CurrencySet":
        normalized = {
            normalize_code(code): str(name)
            for code, name in (raw or {}).items()
            if normalize_code(code)
        }
        return cls(names=MappingProxyType(normalized))

    @property
    def is_empty(self) -> bool:
        return not self.names

    def name_of(self, code: str) -> Optional[str]:
        return self.names.get(normalize_code(code))

    def items(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(self.names.items())

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, code: object) -> bool:
        return normalize_code(code) in self.names


# ================================
# 🧮 ЗАПИТ ТА РЕЗУЛЬТАТ
# ================================
@dataclass(frozen=True)
class ConversionRequest:
    amount: float
    source_code: CurrencyCode
    target_code: CurrencyCode


@dataclass(frozen=True)
class ConversionResult:
    """
    🧮 Результат конвертації.

    `effective_rate` — скільки одиниць цільової валюти за одну одиницю вихідної.
    Значення зберігаються без округлення; `rounded_*` дають форму для відображення.
    """

    request: ConversionRequest
    converted_amount: float
    effective_rate: float

    @property
    def rounded_amount(self) -> Decimal:
        return quantize_display(self.converted_amount, _AMOUNT_QUANTUM)

    @property
    def rounded_rate(self) -> Decimal:
        return quantize_display(self.effective_rate, _RATE_QUANTUM)

    @property
    def is_identity(self) -> bool:
        return self.request.source_code == self.request.target_code

    def summary(self) -> str:
        """`10.00 USD = 7.73 GBP`"""
        source_amount = quantize_display(self.request.amount, _AMOUNT_QUANTUM)
        return (
            f"{source_amount} {self.request.source_code} = "
            f"{self.rounded_amount} {self.request.target_code}"
        )

    def rate_line(self) -> str:
        """`Exchange rate: 1 USD = 0.772727 GBP`"""
        return (
            f"Exchange rate: 1 {self.request.source_code} = "
            f"{self.rounded_rate} {self.request.target_code}"
        )


# ================================
# 🔗 КОНТРАКТИ ІНФРАСТРУКТУРИ
# ================================
class IRatesProvider(Protocol):
    """📈 Джерело символів та курсів (один HTTP GET на виклик)."""

    async def fetch_symbols(self, credential: str) -> CurrencySet: ...

    async def fetch_latest(self, credential: str) -> RateTable: ...

    async def close(self) -> None: ...


class IKeyValueStore(Protocol):
    """💾 Надійне сховище пар ключ → рядок."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


__all__ = [
    "BASE_CURRENCY",
    "ConversionRequest",
    "ConversionResult",
    "CurrencyCode",
    "CurrencySet",
    "IKeyValueStore",
    "IRatesProvider",
    "RateTable",
    "normalize_code",
    "quantize_display",
]
