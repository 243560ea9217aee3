# 🔑 fxwidget/infrastructure/storage/credential_store.py
"""🔑 Збереження API-ключа під фіксованим ключем у KV-сховищі."""

from __future__ import annotations

import logging
from typing import Optional

from fxwidget.domain.currency.interfaces import IKeyValueStore
from fxwidget.shared.utils.logger import LOG_NAME, mask_secret

logger = logging.getLogger(f"{LOG_NAME}.credentials")

DEFAULT_CREDENTIAL_KEY = "fixerApiKey"


class CredentialStore:
    """Читає ключ один раз на старті й записує при кожному непорожньому редагуванні."""

    def __init__(self, store: IKeyValueStore, key: str = DEFAULT_CREDENTIAL_KEY, *, fallback: str = "") -> None:
        self._store = store
        self._key = key
        self._fallback = (fallback or "").strip()                    # 🌱 Ключ з оточення (FIXER_API_KEY)

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> str:
        """Збережений ключ, інакше ключ за замовчуванням (може бути порожнім)."""
        value = await self._store.get(self._key)
        credential = (value or "").strip() or self._fallback
        logger.debug("📖 Credential loaded for %s: %s", self._key, mask_secret(credential))
        return credential

    async def save(self, credential: Optional[str]) -> bool:
        """Повертає False, якщо ключ порожній і нічого не записано."""
        value = (credential or "").strip()
        if not value:
            return False
        await self._store.set(self._key, value)
        logger.info("💾 Credential saved for %s: %s", self._key, mask_secret(value))
        return True


__all__ = ["CredentialStore", "DEFAULT_CREDENTIAL_KEY"]
