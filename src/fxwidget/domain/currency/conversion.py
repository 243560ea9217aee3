# 🧮 fxwidget/domain/currency/conversion.py
"""
🧮 Рушій конвертації: чиста функція без побічних ефектів.

Курси відомі лише відносно EUR, тому пара X→Y рахується через EUR:
`(1 / T[X]) * T[Y]`. Прямі крос-курси ніколи не завантажуються.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
import math
from typing import Any, Mapping, Union

# 🧩 Внутрішні модулі проєкту
from fxwidget.domain.currency.interfaces import (
    BASE_CURRENCY,
    ConversionRequest,
    ConversionResult,
    RateTable,
    normalize_code,
)
from fxwidget.shared.errors import ConversionFailure, RatesUnavailable, ValidationFailure
from fxwidget.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.conversion")

DEFAULT_MAX_AMOUNT: float = 1_000_000.0								# 🚧 Верхня межа суми


def validate_amount(amount: object, *, max_amount: float = DEFAULT_MAX_AMOUNT) -> float:
    """✋ Повертає суму як float або піднімає `ValidationFailure`."""
    if isinstance(amount, bool):
        raise ValidationFailure("Please enter a valid amount", reason="Invalid amount", details="bool")
    try:
        value = float(amount)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationFailure(
            "Please enter a valid amount", reason="Invalid amount", details=f"not a number: {amount!r}"
        ) from None
    if not math.isfinite(value) or value <= 0:
        raise ValidationFailure(
            "Please enter a valid amount", reason="Invalid amount", details=f"non-positive: {amount!r}"
        )
    if value > max_amount:
        raise ValidationFailure(
            f"Amount must not exceed {max_amount:,.0f}",
            reason="Invalid amount",
            details=f"above ceiling: {value!r}",
        )
    return value


def _require_code(code: object, side: str) -> str:
    normalized = normalize_code(code)
    if not normalized:
        raise ValidationFailure(f"Please select a {side} currency", reason=f"Missing {side} currency")
    return normalized


def _rate_or_fail(table: RateTable, code: str) -> float:
    rate = table.lookup(code)
    if rate is None:
        logger.warning("🔍 Rate for %s is missing from the table (%d entries)", code, len(table))
        raise ConversionFailure(missing_code=code, details=f"no rate for {code}")
    return rate


def effective_rate(source: str, target: str, table: RateTable) -> float:
    """Курс «одиниць target за одну одиницю source» через базу EUR."""
    if source == target:
        return 1.0
    if source == BASE_CURRENCY:
        return _rate_or_fail(table, target)
    if target == BASE_CURRENCY:
        return 1 / _rate_or_fail(table, source)
    to_base = 1 / _rate_or_fail(table, source)
    from_base = _rate_or_fail(table, target)
    return to_base * from_base


def convert(
    amount: object,
    source_code: str,
    target_code: str,
    rate_table: Union[RateTable, Mapping[str, Any], None],
    *,
    max_amount: float = DEFAULT_MAX_AMOUNT,
) -> ConversionResult:
    """
    Конвертує `amount` з `source_code` у `target_code`.

    Raises:
        ValidationFailure: сума не в межах (0, max_amount] або порожній код.
        RatesUnavailable: таблиця порожня, а валюти різні.
        ConversionFailure: курсу немає або результат не скінченний.
    """
    value = validate_amount(amount, max_amount=max_amount)
    source = _require_code(source_code, "source")
    target = _require_code(target_code, "target")
    request = ConversionRequest(amount=value, source_code=source, target_code=target)  # type: ignore[arg-type]

    if source == target:
        return ConversionResult(request=request, converted_amount=value, effective_rate=1.0)

    table = RateTable.coerce(rate_table)
    if not rate_table:
        raise RatesUnavailable(details=f"{source}->{target} requested before rates were loaded")

    rate = effective_rate(source, target, table)
    converted = value * rate
    if not (math.isfinite(rate) and math.isfinite(converted)) or rate <= 0:
        logger.error("🧮 Non-finite conversion %s %s→%s (rate=%r)", value, source, target, rate)
        raise ConversionFailure(details=f"non-finite result for {source}->{target}")

    logger.debug("✅ %s %s → %s %s (rate=%.6f)", value, source, converted, target, rate)
    return ConversionResult(request=request, converted_amount=converted, effective_rate=rate)


__all__ = ["DEFAULT_MAX_AMOUNT", "convert", "effective_rate", "validate_amount"]
