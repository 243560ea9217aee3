"""
🧪 test_rate_repository.py — unit-тести для RateRepository

Перевіряє:
- Порожній ключ не робить мережевих запитів
- Оновлення при зміні ключа та періодичне оновлення кожні 600 с
- Збереження останнього знімка при збоях
- Відкидання відповідей застарілого ключа (fencing)
- Скасування таймера при зміні ключа та при close()
"""

import asyncio

import pytest

from fxwidget.domain.currency.interfaces import CurrencySet, RateTable
from fxwidget.infrastructure.currency.rate_repository import RateRepository, RepositoryEvent
from fxwidget.shared.errors import NetworkFailure, ProviderError
from fxwidget.shared.utils.timers import VirtualScheduler


def _repo(provider, scheduler=None, **kwargs) -> RateRepository:
    return RateRepository(provider, scheduler or VirtualScheduler(), **kwargs)


@pytest.mark.asyncio
@pytest.mark.parametrize("credential", ["", "   ", None])
async def test_empty_credential_is_noop(fake_provider, credential):
    repo = _repo(fake_provider)

    assert await repo.refresh_rates(credential) is None
    assert await repo.refresh_symbols(credential) is None
    assert fake_provider.rates_calls == [] and fake_provider.symbols_calls == []
    assert repo.rates.is_empty


@pytest.mark.asyncio
async def test_bind_credential_loads_symbols_and_rates(fake_provider):
    repo = _repo(fake_provider)
    events = []
    repo.add_listener(lambda event: events.append(event.kind))

    assert repo.bind_credential("  key-1 ") is True
    await repo.drain()

    assert fake_provider.rates_calls == ["key-1"]
    assert fake_provider.symbols_calls == ["key-1"]
    assert repo.rates.lookup("USD") == 1.1
    assert repo.currencies.name_of("GBP") == "British Pound"
    assert repo.last_updated == 1_700_000_000.0
    assert repo.refresh_scheduled
    assert sorted(events) == [RepositoryEvent.RATES, RepositoryEvent.SYMBOLS]


@pytest.mark.asyncio
async def test_same_credential_does_not_refetch(fake_provider):
    repo = _repo(fake_provider)
    repo.bind_credential("k")
    await repo.drain()

    assert repo.bind_credential(" k ") is False
    await repo.drain()
    assert fake_provider.rates_calls == ["k"]


@pytest.mark.asyncio
async def test_recurring_refresh_every_600_seconds(fake_provider):
    scheduler = VirtualScheduler()
    repo = _repo(fake_provider, scheduler)
    repo.bind_credential("k")
    await repo.drain()

    scheduler.advance(599)
    await repo.drain()
    assert len(fake_provider.rates_calls) == 1

    scheduler.advance(1)
    await repo.drain()
    assert len(fake_provider.rates_calls) == 2

    scheduler.advance(600)
    await repo.drain()
    assert len(fake_provider.rates_calls) == 3
    assert len(fake_provider.symbols_calls) == 1


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_snapshot(fake_provider):
    repo = _repo(fake_provider)
    repo.bind_credential("k")
    await repo.drain()
    before = repo.rates

    fake_provider.rates_error = NetworkFailure("Failed to fetch exchange rates. Please check your internet connection.")
    with pytest.raises(NetworkFailure):
        await repo.refresh_rates("k")

    assert repo.rates is before
    assert repo.rates.lookup("GBP") == 0.85


@pytest.mark.asyncio
async def test_refresh_all_reports_errors_as_events(provider_factory):
    provider = provider_factory()
    provider.symbols_error = ProviderError("Invalid API key. Please check your API key.", code=101)
    provider.rates_error = ProviderError("Invalid API key. Please check your API key.", code=101)
    repo = _repo(provider)
    errors = []
    repo.add_listener(lambda event: errors.append(event.error) if event.kind == RepositoryEvent.ERROR else None)

    repo.bind_credential("bad")
    await repo.drain()

    assert [error.code for error in errors] == [101, 101]
    assert repo.rates.is_empty
    assert not repo.refresh_scheduled


@pytest.mark.asyncio
async def test_credential_change_cancels_timer(fake_provider):
    scheduler = VirtualScheduler()
    repo = _repo(fake_provider, scheduler)
    repo.bind_credential("k")
    await repo.drain()
    assert repo.refresh_scheduled

    repo.bind_credential("")
    assert not repo.refresh_scheduled

    scheduler.advance(1200)
    await repo.drain()
    assert fake_provider.rates_calls == ["k"]


@pytest.mark.asyncio
async def test_polling_survives_failed_fetch_after_key_change(fake_provider):
    scheduler = VirtualScheduler()
    repo = _repo(fake_provider, scheduler)
    repo.bind_credential("k1")
    await repo.drain()

    fake_provider.rates_error = ProviderError("Current usage limit exceeded.", code=105)
    repo.bind_credential("k2")
    await repo.drain()
    assert not repo.rates.is_empty
    assert repo.refresh_scheduled

    fake_provider.rates_error = None
    scheduler.advance(600)
    await repo.drain()

    assert fake_provider.rates_calls == ["k1", "k2", "k2"]
    assert repo.refresh_scheduled


@pytest.mark.asyncio
async def test_rates_request_in_flight_is_not_duplicated(fake_provider):
    repo = _repo(fake_provider)
    repo.bind_credential("k")
    assert repo.rates_refresh_in_flight

    repo.request_rates_refresh()
    await repo.drain()
    assert fake_provider.rates_calls == ["k"]
    assert not repo.rates_refresh_in_flight

    repo.request_rates_refresh()
    await repo.drain()
    assert fake_provider.rates_calls == ["k", "k"]


@pytest.mark.asyncio
async def test_close_cancels_timer_and_respects_provider_ownership(provider_factory):
    scheduler = VirtualScheduler()
    shared = provider_factory()
    repo = _repo(shared, scheduler, owns_provider=False)
    repo.bind_credential("k")
    await repo.drain()

    await repo.close()
    assert not repo.refresh_scheduled
    assert scheduler.pending == 0
    assert shared.closed is False

    owned = provider_factory()
    await _repo(owned).close()
    assert owned.closed is True


class GatedProvider:
    """Відповідь для ключа `old` тримається, доки тест не відкриє шлюз."""

    def __init__(self):
        self.gate = asyncio.Event()

    async def fetch_symbols(self, credential):
        return CurrencySet.from_mapping({"EUR": "Euro"})

    async def fetch_latest(self, credential):
        if credential == "old":
            await self.gate.wait()
            return RateTable.from_mapping({"USD": 9.9})
        return RateTable.from_mapping({"USD": 1.1})

    async def close(self):
        pass


@pytest.mark.asyncio
async def test_stale_response_is_discarded():
    provider = GatedProvider()
    repo = _repo(provider)

    repo.bind_credential("old")
    await asyncio.sleep(0)
    repo.bind_credential("new")
    await asyncio.sleep(0)
    provider.gate.set()
    await repo.drain()

    assert repo.rates.lookup("USD") == 1.1


@pytest.mark.asyncio
async def test_without_fencing_last_response_wins():
    provider = GatedProvider()
    repo = _repo(provider, fence_stale_responses=False)

    repo.bind_credential("old")
    await asyncio.sleep(0)
    repo.bind_credential("new")
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    provider.gate.set()
    await repo.drain()

    assert repo.rates.lookup("USD") == 9.9
