# 💾 fxwidget/infrastructure/storage/__init__.py
"""💾 Надійне KV-сховище та збереження API-ключа."""

from __future__ import annotations

from .credential_store import DEFAULT_CREDENTIAL_KEY, CredentialStore
from .json_store import JsonKeyValueStore

__all__ = ["CredentialStore", "DEFAULT_CREDENTIAL_KEY", "JsonKeyValueStore"]
