# 🌐 fxwidget/infrastructure/currency/fixer_client.py
"""
🌐 FixerClient — асинхронний HTTP-клієнт Fixer (symbols / latest).

🔹 Один GET на виклик, ключ передається як `access_key` у query.
🔹 `success: false` → `ProviderError` з людським повідомленням за кодом Fixer.
🔹 Транспортні збої, не-2xx статуси та битий JSON → `NetworkFailure`.
🔹 Повторних спроб немає: користувач повторює дію сам.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                        # 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи клієнта
import time                                                         # 🕒 Мітка часу завантаження
from typing import Any, Callable, Dict, Mapping, Optional           # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from fxwidget.domain.currency.interfaces import CurrencySet, RateTable
from fxwidget.shared.errors import NetworkFailure, ProviderError
from fxwidget.shared.utils.logger import LOG_NAME, mask_secret

logger = logging.getLogger(f"{LOG_NAME}.fixer")


# ================================
# 📖 КОДИ ПОМИЛОК FIXER
# ================================
PROVIDER_ERROR_MESSAGES: Mapping[int, str] = {
    101: "Invalid API key. Please check your API key.",
    102: "Account inactive or suspended.",
    103: "This endpoint requires a paid plan. Using free plan workaround.",
    104: "Monthly usage limit exceeded. Try again next month.",
    105: "Current usage limit exceeded.",
    201: "Invalid source currency.",
    202: "Invalid target currency.",
}
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"                    # 🚫 Обʼєкта error немає взагалі
GENERIC_ERROR_MESSAGE = "An error occurred"                         # ❓ Невідомий код без info

SYMBOLS_NETWORK_MESSAGE = "Failed to fetch currencies. Please check your internet connection."
RATES_NETWORK_MESSAGE = "Failed to fetch exchange rates. Please check your internet connection."

DEFAULT_BASE_URL = "https://data.fixer.io/api"


def describe_provider_error(error: Optional[Mapping[str, Any]]) -> str:
    """
    🗺️ Перетворює `error`-обʼєкт Fixer на текст для користувача.

    Відомі коди мають фіксовані тексти; для решти — `info` провайдера або
    загальне повідомлення.
    """
    if not error:
        return UNKNOWN_ERROR_MESSAGE
    code = error.get("code")
    try:
        numeric = int(code) if code is not None else None
    except (TypeError, ValueError):
        numeric = None
    if numeric in PROVIDER_ERROR_MESSAGES:
        return PROVIDER_ERROR_MESSAGES[numeric]
    info = error.get("info")
    return str(info) if info else GENERIC_ERROR_MESSAGE


def provider_error_from_payload(payload: Mapping[str, Any], endpoint: str) -> ProviderError:
    raw_error = payload.get("error")
    error: Optional[Mapping[str, Any]] = raw_error if isinstance(raw_error, Mapping) else None
    code = error.get("code") if error else None
    info = error.get("info") if error else None
    return ProviderError(
        describe_provider_error(error),
        code=code if isinstance(code, int) else None,
        info=str(info) if info else None,
        endpoint=endpoint,
    )


# ================================
# 🌐 КЛІЄНТ
# ================================
class FixerClient:
    """🌐 Реалізація `IRatesProvider` для data.fixer.io."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client                                        # 🌐 Може бути переданий ззовні (тести)
        self._owns_client = client is None
        self._clock = clock
        logger.debug("⚙️ FixerClient base_url=%s timeout=%s", self._base_url, self._timeout)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Закриває HTTP-клієнт, якщо ми його створили."""
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()
            logger.info("🔌 HTTP-клієнт Fixer закрито.")

    # ================================
    # 🔓 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    async def fetch_symbols(self, credential: str) -> CurrencySet:
        payload = await self._get_json("symbols", credential, SYMBOLS_NETWORK_MESSAGE)
        symbols = payload.get("symbols")
        if not isinstance(symbols, Mapping):
            raise NetworkFailure(
                SYMBOLS_NETWORK_MESSAGE, endpoint="symbols", details="'symbols' object missing from response"
            )
        currency_set = CurrencySet.from_mapping(symbols)
        logger.info("🏷️ Fetched %d currency symbols", len(currency_set))
        return currency_set

    async def fetch_latest(self, credential: str) -> RateTable:
        payload = await self._get_json("latest", credential, RATES_NETWORK_MESSAGE)
        rates = payload.get("rates")
        if not isinstance(rates, Mapping):
            raise NetworkFailure(
                RATES_NETWORK_MESSAGE, endpoint="latest", details="'rates' object missing from response"
            )
        base = payload.get("base")
        if base and str(base).upper() != "EUR":
            logger.warning("⚠️ Fixer returned base=%s; rates are treated as EUR-based", base)
        table = RateTable.from_mapping(rates, fetched_at=self._clock())
        logger.info("📈 Fetched %d rates (base=%s)", len(table), base or "EUR")
        return table

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _get_json(self, endpoint: str, credential: str, network_message: str) -> Dict[str, Any]:
        url = f"{self._base_url}/{endpoint}"
        logger.debug("🌐 GET %s (access_key=%s)", url, mask_secret(credential))
        try:
            response = await self._get_client().get(url, params={"access_key": credential})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("❌ Fixer %s HTTP %s", endpoint, status)
            raise NetworkFailure(network_message, endpoint=endpoint, status_code=status, details=str(exc)) from exc
        except httpx.HTTPError as exc:
            logger.error("❌ Fixer %s transport error: %s", endpoint, exc)
            raise NetworkFailure(network_message, endpoint=endpoint, details=str(exc)) from exc
        except ValueError as exc:
            logger.error("❌ Fixer %s returned invalid JSON", endpoint)
            raise NetworkFailure(network_message, endpoint=endpoint, details=f"invalid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise NetworkFailure(
                network_message, endpoint=endpoint, details=f"expected object, got {type(payload).__name__}"
            )
        if not payload.get("success"):
            error = provider_error_from_payload(payload, endpoint)
            logger.warning("⚠️ Fixer %s failed: %s", endpoint, error.message, extra=error.to_log_extra())
            raise error
        return payload


__all__ = [
    "DEFAULT_BASE_URL",
    "FixerClient",
    "GENERIC_ERROR_MESSAGE",
    "PROVIDER_ERROR_MESSAGES",
    "RATES_NETWORK_MESSAGE",
    "SYMBOLS_NETWORK_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "describe_provider_error",
]
