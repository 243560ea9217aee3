# 🎛️ fxwidget/application/converter_session.py
"""
🎛️ ConverterSession — контролер віджета конвертера.

🎯 Призначення:
    • єдиний писач `ConverterState` (ключ, сума, валюти, результат, помилка);
    • прив'язує ключ до `RateTable`-репозиторію та зберігає його у сховищі;
    • ручна конвертація `convert_now()` та debounce-автоконвертація (500 мс тиші);
      `auto` сповіщає лише про зміни від користувача, планове оновлення курсів дає `recompute`;
    • реагує на події репозиторію: нові курси, нові символи, помилки.

⚙️ Слухач стану отримує `(reason, state)`; якщо він повертає awaitable,
   сесія запускає його фоновою задачею.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import inspect															# 🔍 Перевірка awaitable від слухача
import logging															# 🧾 Логи сесії
import time																# 🕒 Форматування часу оновлення
from dataclasses import replace											# 🧱 Оновлення frozen-стану
from typing import Any, Callable, List, Mapping, Optional, Tuple		# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from fxwidget.application.state import ConverterState
from fxwidget.domain.currency.conversion import DEFAULT_MAX_AMOUNT, convert
from fxwidget.domain.currency.interfaces import normalize_code
from fxwidget.infrastructure.currency.rate_repository import RateRepository, RepositoryEvent
from fxwidget.infrastructure.storage.credential_store import CredentialStore
from fxwidget.shared.errors import (
    ConversionFailure,
    ConverterError,
    RatesUnavailable,
    ValidationFailure,
)
from fxwidget.shared.utils.logger import LOG_NAME, mask_secret
from fxwidget.shared.utils.tasks import BackgroundTasks
from fxwidget.shared.utils.timers import Debouncer, Scheduler

logger = logging.getLogger(f"{LOG_NAME}.session")

# ================================
# 📝 ТЕКСТИ ДЛЯ КОРИСТУВАЧА
# ================================
API_KEY_PROMPT = "Please enter your API key"
API_KEY_REQUIRED = "API key required"
CONVERSION_FAILED = "Conversion failed"

FALLBACK_CURRENCIES: Mapping[str, str] = {
    "EUR": "Euro",
    "USD": "US Dollar",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
}

DEFAULT_DEBOUNCE_SEC: float = 0.5

StateListener = Callable[[str, ConverterState], Any]


def parse_amount(raw: object) -> float:
    """`'12,5'` → 12.5; усе, що не число, стає 0 (і далі не проходить валідацію)."""
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw or "").strip().replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return 0.0


class ConverterSession:
    """🎛️ Стан і поведінка одного віджета (одного чату)."""

    # Причини сповіщень слухача
    REASON_CREDENTIAL = "credential"
    REASON_INPUT = "input"
    REASON_MANUAL = "manual"
    REASON_AUTO = "auto"
    REASON_RATES = "rates"
    REASON_SYMBOLS = "symbols"
    REASON_ERROR = "error"
    REASON_RECOMPUTE = "recompute"

    def __init__(
        self,
        repository: RateRepository,
        credential_store: CredentialStore,
        scheduler: Scheduler,
        *,
        debounce_sec: float = DEFAULT_DEBOUNCE_SEC,
        max_amount: float = DEFAULT_MAX_AMOUNT,
        default_amount: float = 1.0,
        default_source: str = "EUR",
        default_target: str = "USD",
        fallback_currencies: Optional[Mapping[str, str]] = None,
        listener: Optional[StateListener] = None,
    ) -> None:
        self._repository = repository
        self._credentials = credential_store
        self._max_amount = float(max_amount)
        self._fallback = dict(fallback_currencies or FALLBACK_CURRENCIES)
        self._listener = listener
        self._tasks = BackgroundTasks("converter-session")
        self._debouncer = Debouncer(scheduler, debounce_sec, self._on_debounce_fired)
        self._closed = False
        self._announce_auto = False                                      # 📣 Автоконвертацію ініціював користувач

        self._state = ConverterState(
            amount=float(default_amount),
            source=normalize_code(default_source) or "EUR",
            target=normalize_code(default_target) or "USD",
        )
        self._repository.add_listener(self._on_repository_event)
        logger.debug("🎛️ ConverterSession created (debounce=%.3fs)", debounce_sec)

    # ================================
    # 🔎 СТАН
    # ================================
    @property
    def state(self) -> ConverterState:
        return self._state

    @property
    def repository(self) -> RateRepository:
        return self._repository

    @property
    def auto_convert_pending(self) -> bool:
        return self._debouncer.pending

    # ================================
    # 🔑 КЛЮЧ
    # ================================
    async def load_credential(self) -> str:
        """Читає збережений ключ (один раз на старті) і прив'язує його."""
        credential = await self._credentials.load()
        if credential:
            self._apply_credential(credential)
            logger.info("🔑 Stored credential restored: %s", mask_secret(credential))
        return credential

    async def set_credential(self, raw: Optional[str]) -> ConverterState:
        """Нормалізує ключ, зберігає непорожній і перев'язує репозиторій."""
        credential = (raw or "").strip()
        if credential == self._state.credential:
            return self._state
        await self._credentials.save(credential)
        self._apply_credential(credential)
        self._notify(self.REASON_CREDENTIAL)
        return self._state

    def _apply_credential(self, credential: str) -> None:
        self._state = replace(self._state, credential=credential)
        self._announce_auto = True
        self._repository.bind_credential(credential)
        self._schedule_auto_convert()

    # ================================
    # ✏️ ВВІД
    # ================================
    def set_amount(self, value: object) -> ConverterState:
        return self._update_input(amount=parse_amount(value))

    def set_source(self, code: str) -> ConverterState:
        return self._update_input(source=normalize_code(code))

    def set_target(self, code: str) -> ConverterState:
        return self._update_input(target=normalize_code(code))

    def swap(self) -> ConverterState:
        return self._update_input(source=self._state.target, target=self._state.source)

    def _update_input(self, **changes: Any) -> ConverterState:
        updated = replace(self._state, **changes)
        if updated == self._state:
            return self._state
        self._state = updated
        self._announce_auto = True
        self._schedule_auto_convert()
        return self._state

    # ================================
    # 🧮 КОНВЕРТАЦІЯ
    # ================================
    def convert_now(self) -> ConverterState:
        """Ручна конвертація. Усі збої відображаються у стані, нічого не піднімається."""
        self._debouncer.cancel()
        self._announce_auto = False
        state = self._state

        if not state.credential.strip():
            self._state = replace(state, result_text=API_KEY_PROMPT, error_text=API_KEY_REQUIRED, last_result=None)
            return self._state

        try:
            result = convert(
                state.amount,
                state.source,
                state.target,
                self._repository.rates,
                max_amount=self._max_amount,
            )
        except ValidationFailure as failure:
            self._state = replace(state, result_text=failure.message, error_text=failure.reason, last_result=None)
        except RatesUnavailable as failure:
            self._state = replace(state, result_text=failure.message, loading=True, last_result=None)
            self._repository.request_rates_refresh()
        except ConversionFailure as failure:
            logger.warning("🧮 Conversion failed: %s", failure.details, extra=failure.to_log_extra())
            self._state = replace(
                state, result_text=CONVERSION_FAILED, error_text=failure.message, loading=False, last_result=None
            )
        else:
            text = result.summary() if result.is_identity else f"{result.summary()}\n{result.rate_line()}"
            self._state = replace(state, result_text=text, error_text="", loading=False, last_result=result)
            logger.info("✅ %s", result.summary())
        return self._state

    def _auto_convert_ready(self) -> bool:
        state = self._state
        return bool(state.credential) and not self._repository.rates.is_empty and state.amount > 0

    def _schedule_auto_convert(self) -> None:
        if self._closed:
            return
        if self._auto_convert_ready():
            self._debouncer.trigger()
        else:
            self._debouncer.cancel()

    def _on_debounce_fired(self) -> None:
        if self._closed or not self._auto_convert_ready():
            return
        announce = self._announce_auto
        logger.debug("⏱️ Debounced auto-convert (announce=%s)", announce)
        self.convert_now()
        # 📣 Після планового оновлення курсів результат лише оновлюється на місці
        self._notify(self.REASON_AUTO if announce else self.REASON_RECOMPUTE)

    # ================================
    # 🏷️ ВІДОБРАЖЕННЯ
    # ================================
    def currency_options(self) -> List[Tuple[str, str]]:
        """Пари (код, назва) для селекторів; без символів — запасний список."""
        currencies = self._repository.currencies
        if currencies.is_empty:
            return list(self._fallback.items())
        return sorted(currencies.items())

    def status_line(self) -> str:
        """`Rates updated: HH:MM:SS` і кількість завантажених валют."""
        lines = []
        if self._state.last_updated is not None:
            stamp = time.strftime("%H:%M:%S", time.localtime(self._state.last_updated))
            lines.append(f"Rates updated: {stamp}")
        if self._state.currency_count:
            lines.append(f"✓ {self._state.currency_count} currencies loaded")
        return "\n".join(lines)

    # ================================
    # 📣 ПОДІЇ РЕПОЗИТОРІЮ
    # ================================
    def _on_repository_event(self, event: RepositoryEvent) -> None:
        if event.kind == RepositoryEvent.RATES:
            self._state = replace(
                self._state,
                error_text="",
                loading=False,
                last_updated=self._repository.last_updated,
            )
            self._schedule_auto_convert()
            self._notify(self.REASON_RATES)
        elif event.kind == RepositoryEvent.SYMBOLS:
            self._state = replace(self._state, error_text="", currency_count=len(self._repository.currencies))
            self._notify(self.REASON_SYMBOLS)
        elif event.kind == RepositoryEvent.ERROR and isinstance(event.error, ConverterError):
            self._state = replace(self._state, error_text=event.error.message, loading=False)
            self._notify(self.REASON_ERROR)

    def _notify(self, reason: str) -> None:
        if self._listener is None or self._closed:
            return
        outcome = self._listener(reason, self._state)
        if inspect.isawaitable(outcome):
            self._tasks.spawn(self._await_listener(outcome), name=f"session-listener-{reason}")

    @staticmethod
    async def _await_listener(outcome: Any) -> None:
        await outcome

    # ================================
    # 🧹 ЗАВЕРШЕННЯ
    # ================================
    async def drain(self) -> None:
        """Чекає фонові оновлення репозиторію та доставку сповіщень."""
        await self._repository.drain()
        await self._tasks.drain()

    async def close(self) -> None:
        """Скасовує debounce, періодичне оновлення та фонові задачі."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()
        self._repository.remove_listener(self._on_repository_event)
        await self._repository.close()
        await self._tasks.cancel_all()
        logger.info("🧹 ConverterSession closed")


__all__ = [
    "API_KEY_PROMPT",
    "API_KEY_REQUIRED",
    "CONVERSION_FAILED",
    "ConverterSession",
    "FALLBACK_CURRENCIES",
    "StateListener",
    "parse_amount",
]
