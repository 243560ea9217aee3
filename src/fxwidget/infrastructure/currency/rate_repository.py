# 💵 fxwidget/infrastructure/currency/rate_repository.py
"""
💵 RateRepository — життєвий цикл символів і курсів для поточного ключа.

🎯 Призначення:
    • тримає останні успішні знімки `CurrencySet` та `RateTable` (stale-but-available);
    • одноразово оновлює обидва при зміні ключа на новий непорожній;
    • далі оновлює курси за таймером (600 с), поки є ключ і непорожня таблиця;
    • перезапускає таймер при зміні ключа, зупиняє його для порожнього ключа та при `close()`.

⚙️ Нотатки:
    • кожен запит позначається поколінням (generation), яке зростає при зміні ключа;
      відповідь застарілого покоління відкидається (fencing), якщо це не вимкнено;
    • знімки замінюються цілком, читачі ніколи не бачать частково оновлену таблицю.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # 🔁 gather для паралельних запитів
import logging                                                      # 🧾 Логи сервісу
import time                                                         # ⏱️ Мітки часу
from dataclasses import dataclass                                   # 🧱 Подія для слухачів
from typing import Callable, List, Optional                         # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from fxwidget.domain.currency.interfaces import CurrencySet, IRatesProvider, RateTable
from fxwidget.shared.errors import ConverterError
from fxwidget.shared.utils.logger import LOG_NAME, mask_secret
from fxwidget.shared.utils.tasks import BackgroundTasks
from fxwidget.shared.utils.timers import RecurringTimer, Scheduler

logger = logging.getLogger(f"{LOG_NAME}.rates")

DEFAULT_REFRESH_INTERVAL_SEC: float = 600.0                         # 🔁 10 хвилин


# ================================
# 📣 ПОДІЇ
# ================================
@dataclass(frozen=True)
class RepositoryEvent:
    """Що змінилося в репозиторії: `symbols`, `rates` або `error`."""

    kind: str
    error: Optional[ConverterError] = None

    SYMBOLS = "symbols"
    RATES = "rates"
    ERROR = "error"


RepositoryListener = Callable[[RepositoryEvent], None]


# ================================
# 🏦 РЕПОЗИТОРІЙ
# ================================
class RateRepository:
    """🏦 Власник знімків курсів і політики їх оновлення."""

    def __init__(
        self,
        provider: IRatesProvider,
        scheduler: Scheduler,
        *,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL_SEC,
        fence_stale_responses: bool = True,
        owns_provider: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._provider = provider                                    # 🌐 Джерело даних
        self._owns_provider = owns_provider                          # 🔌 Чи закривати провайдера в close()
        self._clock = clock
        self._fence = fence_stale_responses

        # ── Стан ────────────────────────────────────────────────────────────
        self._rates: RateTable = RateTable.empty()                   # 💱 Останній успішний знімок
        self._currencies: CurrencySet = CurrencySet()                # 🏷️ Останній список символів
        self._last_updated: Optional[float] = None                   # 🕒 Час останнього оновлення курсів
        self._credential: str = ""                                   # 🔑 Прив'язаний ключ
        self._generation: int = 0                                    # 🧷 Покоління для fencing

        self._rates_task: Optional[asyncio.Task] = None                # 🛫 Останній запит курсів
        self._rates_task_generation: int = -1

        self._listeners: List[RepositoryListener] = []
        self._tasks = BackgroundTasks("rate-repository")
        self._timer = RecurringTimer(scheduler, refresh_interval, self._on_refresh_tick)
        logger.debug(
            "⚙️ RateRepository interval=%.0fs fencing=%s", refresh_interval, "ON" if self._fence else "OFF"
        )

    # ================================
    # 🔎 ЧИТАННЯ СТАНУ
    # ================================
    @property
    def rates(self) -> RateTable:
        return self._rates

    @property
    def currencies(self) -> CurrencySet:
        return self._currencies

    @property
    def last_updated(self) -> Optional[float]:
        """Unix-час останнього успішного оновлення курсів (None — ще не було)."""
        return self._last_updated

    @property
    def credential(self) -> str:
        return self._credential

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def refresh_scheduled(self) -> bool:
        return self._timer.running

    @property
    def rates_refresh_in_flight(self) -> bool:
        """Чи летить зараз запит курсів для поточного ключа."""
        task = self._rates_task
        return task is not None and not task.done() and self._rates_task_generation == self._generation

    def add_listener(self, listener: RepositoryListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: RepositoryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ================================
    # 🔑 ПРИВ'ЯЗКА КЛЮЧА
    # ================================
    def bind_credential(self, credential: Optional[str]) -> bool:
        """
        Прив'язує новий ключ. Повертає True, якщо ключ справді змінився.

        Зміна ключа перезапускає періодичне оновлення (або зупиняє його для
        порожнього ключа чи порожньої таблиці) і робить усі запити, що ще
        летять, застарілими. Новий непорожній ключ запускає разове оновлення
        символів і курсів.
        """
        normalized = (credential or "").strip()
        if normalized == self._credential:
            return False

        self._credential = normalized
        self._generation += 1
        self._timer.cancel()
        logger.info("🔑 Credential bound: %s (generation=%d)", mask_secret(normalized), self._generation)

        if normalized:
            # 🔁 Стара таблиця лишається доступною, тож опитування триває і для нового ключа
            self._ensure_recurring_refresh()
            self._track_rates(
                self._tasks.spawn(
                    self._refresh_all(normalized, self._generation), name=f"refresh-all-{self._generation}"
                )
            )
        return True

    # ================================
    # 🔄 ОНОВЛЕННЯ
    # ================================
    async def refresh_symbols(self, credential: Optional[str]) -> Optional[CurrencySet]:
        """
        Завантажує список валют. Порожній ключ — no-op (None, без мережі).

        Raises:
            ProviderError / NetworkFailure: попередній знімок лишається без змін.
        """
        return await self._load_symbols(credential, self._generation)

    async def refresh_rates(self, credential: Optional[str]) -> Optional[RateTable]:
        """
        Завантажує останні курси. Порожній ключ — no-op (None, без мережі).

        Raises:
            ProviderError / NetworkFailure: попередня таблиця лишається без змін.
        """
        return await self._load_rates(credential, self._generation)

    async def refresh_all(self, credential: Optional[str] = None) -> None:
        """
        Оновлює символи й курси паралельно для `credential` (або прив'язаного ключа).

        Помилки не піднімаються: кожна передається слухачам як подія `error`.
        """
        key = self._credential if credential is None else credential
        await self._refresh_all(key, self._generation)

    def request_rates_refresh(self) -> None:
        """Фоново оновлює курси для прив'язаного ключа; помилки йдуть слухачам."""
        if not self._credential:
            logger.debug("⏭️ Rates refresh requested without credential")
            return
        self._spawn_rates_refresh(f"refresh-rates-{self._generation}")

    async def drain(self) -> None:
        """Чекає завершення всіх фонових оновлень."""
        await self._tasks.drain()

    async def close(self) -> None:
        """Скасовує таймер і фонові задачі, закриває провайдера."""
        self._timer.cancel()
        await self._tasks.cancel_all()
        if self._owns_provider:
            await self._provider.close()
        logger.info("🧹 RateRepository closed")

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    # Покоління фіксується в момент запиту, а не коли задача почне виконуватись.
    def _is_stale(self, generation: int) -> bool:
        return self._fence and generation != self._generation

    async def _load_symbols(self, credential: Optional[str], generation: int) -> Optional[CurrencySet]:
        key = (credential or "").strip()
        if not key:
            logger.debug("⏭️ refresh_symbols skipped: empty credential")
            return None

        try:
            currencies = await self._provider.fetch_symbols(key)
        except ConverterError:
            if self._is_stale(generation):
                logger.info("🗑️ Discarding symbols error from stale generation %d", generation)
                return None
            raise

        if self._is_stale(generation):
            logger.info("🗑️ Discarding symbols response from stale generation %d", generation)
            return None

        self._currencies = currencies
        self._notify(RepositoryEvent(RepositoryEvent.SYMBOLS))
        return currencies

    async def _load_rates(self, credential: Optional[str], generation: int) -> Optional[RateTable]:
        key = (credential or "").strip()
        if not key:
            logger.debug("⏭️ refresh_rates skipped: empty credential")
            return None

        try:
            table = await self._provider.fetch_latest(key)
        except ConverterError:
            if self._is_stale(generation):
                logger.info("🗑️ Discarding rates error from stale generation %d", generation)
                return None
            raise

        if self._is_stale(generation):
            logger.info("🗑️ Discarding rates response from stale generation %d", generation)
            return None

        self._rates = table
        self._last_updated = table.fetched_at if table.fetched_at is not None else self._clock()
        logger.info("🕒 Rates replaced (%d entries), last_updated=%s", len(table), self._last_updated)
        self._ensure_recurring_refresh()
        self._notify(RepositoryEvent(RepositoryEvent.RATES))
        return table

    async def _refresh_all(self, key: str, generation: int) -> None:
        results = await asyncio.gather(
            self._load_symbols(key, generation),
            self._load_rates(key, generation),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, ConverterError):
                self._report(result)
            elif isinstance(result, BaseException):
                raise result

    def _ensure_recurring_refresh(self) -> None:
        if self._credential and not self._rates.is_empty and not self._timer.running:
            self._timer.start()

    def _on_refresh_tick(self) -> None:
        if not self._credential or self._rates.is_empty:
            self._timer.cancel()
            return
        logger.info("⏰ Scheduled rates refresh")
        self._spawn_rates_refresh(f"tick-{self._generation}")

    def _spawn_rates_refresh(self, name: str) -> None:
        if self.rates_refresh_in_flight:
            logger.debug("⏭️ %s skipped: rates request already in flight", name)
            return
        self._track_rates(
            self._tasks.spawn(self._refresh_rates_reporting(self._credential, self._generation), name=name)
        )

    def _track_rates(self, task: asyncio.Task) -> None:
        self._rates_task = task
        self._rates_task_generation = self._generation

    async def _refresh_rates_reporting(self, credential: str, generation: int) -> None:
        try:
            await self._load_rates(credential, generation)
        except ConverterError as error:
            self._report(error)

    def _report(self, error: ConverterError) -> None:
        logger.warning("⚠️ Refresh failed: %s", error.message, extra=error.to_log_extra())
        self._notify(RepositoryEvent(RepositoryEvent.ERROR, error=error))

    def _notify(self, event: RepositoryEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("🔥 Repository listener failed on %s", event.kind)


__all__ = ["DEFAULT_REFRESH_INTERVAL_SEC", "RateRepository", "RepositoryEvent", "RepositoryListener"]
