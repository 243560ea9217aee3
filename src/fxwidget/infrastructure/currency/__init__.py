# 💱 fxwidget/infrastructure/currency/__init__.py
"""
💱 Інфраструктурні сервіси для роботи з курсами.

🔹 `FixerClient` — HTTP-клієнт data.fixer.io (symbols / latest).
🔹 `RateRepository` — знімки курсів, політика оновлення, fencing.
"""

from __future__ import annotations

# 🌐 HTTP-клієнт
from .fixer_client import FixerClient, describe_provider_error

# 🏦 Репозиторій курсів
from .rate_repository import RateRepository, RepositoryEvent

__all__ = ["FixerClient", "RateRepository", "RepositoryEvent", "describe_provider_error"]
