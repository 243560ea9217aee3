# 💾 fxwidget/infrastructure/storage/json_store.py
"""
💾 JsonKeyValueStore — надійне сховище пар ключ → рядок у JSON-файлі.

🔹 Реалізує доменний контракт `IKeyValueStore`.
🔹 Ліниво завантажує файл у кеш, битий/відсутній файл = порожнє сховище.
🔹 Кожен `set()` одразу пишеться на диск через tmp-файл та атомарний `os.replace`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles	# 📄 Асинхронне читання/запис JSON-файлу

# 🔠 Системні імпорти
import asyncio	# 🔐 Lock
import json	# 📄 Робота з JSON-файлом
import logging	# 🧾 Логування операцій
import os	# 🗂️ Атомарний rename
from pathlib import Path	# 📁 Створення директорії
from typing import Dict, Optional	# 🧰 Типи для кешу

# 🧩 Внутрішні модулі проєкту
from fxwidget.shared.utils.logger import LOG_NAME	# 🏷️ Імʼя базового логера

logger = logging.getLogger(f"{LOG_NAME}.storage")


class JsonKeyValueStore:
    """💾 Файлове KV-сховище з асинхронним доступом."""

    def __init__(self, file_path: str) -> None:
        self._file_path = str(file_path)	# 🗂️ Шлях до JSON-файлу
        self._lock = asyncio.Lock()	# 🔐 Серіалізація доступу до кешу/запису
        self._cache: Optional[Dict[str, str]] = None	# 🧠 Лінивий кеш
        logger.debug("💾 JsonKeyValueStore file=%s", self._file_path)

    @property
    def file_path(self) -> str:
        return self._file_path

    # ================================
    # 📣 ПУБЛІЧНИЙ КОНТРАКТ
    # ================================
    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            await self._ensure_cache_loaded()
            return (self._cache or {}).get(key)

    async def set(self, key: str, value: str) -> None:
        if not key:
            raise ValueError("Порожній ключ сховища.")
        async with self._lock:
            await self._ensure_cache_loaded()
            assert self._cache is not None
            if self._cache.get(key) == value:
                return	# ♻️ Нічого не змінилося, диск не чіпаємо
            self._cache[key] = str(value)
            await self._flush_locked()

    async def delete(self, key: str) -> None:
        async with self._lock:
            await self._ensure_cache_loaded()
            assert self._cache is not None
            if self._cache.pop(key, None) is not None:
                await self._flush_locked()

    # ================================
    # 🧠 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _ensure_cache_loaded(self) -> None:
        """📥 Ліниво завантажує JSON у кеш."""
        if self._cache is not None:
            return
        try:
            async with aiofiles.open(self._file_path, "r", encoding="utf-8") as file_handle:
                content = await file_handle.read()
            raw = json.loads(content) if content.strip() else {}
            if not isinstance(raw, dict):
                raise ValueError("Очікувався JSON-об'єкт.")
            self._cache = {str(key): str(value) for key, value in raw.items() if value is not None}
            logger.info("📖 Сховище завантажено: %d запис(ів).", len(self._cache))
        except FileNotFoundError:
            logger.info("📄 Файл сховища не знайдено, стартуємо з порожнього.")
            self._cache = {}
        except (json.JSONDecodeError, ValueError) as exc:
            logger.warning("⚠️ Некоректний формат файлу сховища (%s). Стартуємо з порожнього.", exc)
            self._cache = {}

    async def _flush_locked(self) -> None:
        payload = json.dumps(dict(sorted((self._cache or {}).items())), indent=2, ensure_ascii=False)
        path = Path(self._file_path)
        path.parent.mkdir(parents=True, exist_ok=True)	# 🏗️ Створюємо директорію
        tmp_path = f"{self._file_path}.tmp"
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as file_handle:
                await file_handle.write(payload)
            os.replace(tmp_path, self._file_path)	# 🔀 Атомарно підміняємо
            logger.debug("💾 Сховище збережено → %s", self._file_path)
        except OSError:
            logger.exception("❌ Не вдалося зберегти сховище: %s", self._file_path)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)	# 🧹 Прибираємо tmp
            raise


__all__ = ["JsonKeyValueStore"]
