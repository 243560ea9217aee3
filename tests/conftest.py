# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Додаємо src в sys.path, щоб працював імпорт "fxwidget.…"
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fxwidget.domain.currency.interfaces import CurrencySet, RateTable  # noqa: E402

SCENARIO_RATES = {"USD": 1.1, "GBP": 0.85}


@pytest.fixture
def scenario_table() -> RateTable:
    return RateTable.from_mapping(SCENARIO_RATES, fetched_at=1_700_000_000.0)


class FakeRatesProvider:
    """Провайдер у пам'яті: відповіді та винятки задаються тестом."""

    def __init__(self, rates=None, symbols=None):
        self.rates = dict(rates if rates is not None else SCENARIO_RATES)
        self.symbols = dict(symbols if symbols is not None else {"EUR": "Euro", "USD": "US Dollar", "GBP": "British Pound"})
        self.rates_error = None
        self.symbols_error = None
        self.rates_calls = []
        self.symbols_calls = []
        self.closed = False

    async def fetch_symbols(self, credential):
        self.symbols_calls.append(credential)
        if self.symbols_error is not None:
            raise self.symbols_error
        return CurrencySet.from_mapping(self.symbols)

    async def fetch_latest(self, credential):
        self.rates_calls.append(credential)
        if self.rates_error is not None:
            raise self.rates_error
        return RateTable.from_mapping(self.rates, fetched_at=1_700_000_000.0)

    async def close(self):
        self.closed = True


class MemoryStore:
    def __init__(self, data=None):
        self.data = dict(data or {})
        self.writes = []

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.writes.append((key, value))
        self.data[key] = value


@pytest.fixture
def fake_provider() -> FakeRatesProvider:
    return FakeRatesProvider()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def provider_factory():
    return FakeRatesProvider


@pytest.fixture
def store_factory():
    return MemoryStore
