# ⚙️ fxwidget/config/config_service.py
"""
⚙️ ConfigService — налаштування конвертера з одного місця.

Джерела (наступне перекриває попереднє):
    1. `config.yaml` поруч із модулем (значення за замовчуванням);
    2. `config.json` там само (необовʼязкові локальні правки);
    3. змінні оточення / `.env` з таблиці `ENV_OVERRIDES`.

Ключі читаються через крапку: `get("currency_api.refresh_interval_sec")`.
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 config.yaml
from dotenv import load_dotenv               # 🔐 .env → os.environ

# 🔠 Системні імпорти
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("fxwidget.config")

_CONFIG_DIR = Path(__file__).parent

# 🌍 Змінна оточення → ключ конфігу (перша непорожня змінна перемагає)
ENV_OVERRIDES: Dict[str, tuple] = {
    "telegram.bot_token": ("BOT_TOKEN", "TELEGRAM_TOKEN"),
    "currency_api.default_access_key": ("FIXER_API_KEY",),
    "files.credentials": ("FXWIDGET_CREDENTIALS_FILE",),
    "logging.level": ("FXWIDGET_LOG_LEVEL",),
}

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _merge(target: Dict[str, Any], patch: Mapping[str, Any]) -> None:
    """Глибоке злиття: вкладені словники зливаються, решта значень заміщується."""
    for key, value in patch.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            _merge(current, value)
        else:
            target[key] = dict(value) if isinstance(value, Mapping) else value


def _set_dotted(target: Dict[str, Any], dotted: str, value: Any) -> None:
    *parents, leaf = dotted.split(".")
    node = target
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value


class ConfigService:
    """
    ⚙️ Singleton із конфігурацією застосунку.

    Для тестів є `from_dict()` (окремий екземпляр без файлів і ENV)
    та `reset()` (наступний виклик перечитає джерела).
    """

    _instance: Optional["ConfigService"] = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load()
            cls._instance = instance
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ConfigService":
        instance = super().__new__(cls)
        instance._config = {}
        _merge(instance._config, data or {})
        return instance

    # ================================
    # 📥 ЗАВАНТАЖЕННЯ
    # ================================
    def _load(self) -> None:
        yaml_path = _CONFIG_DIR / "config.yaml"
        try:
            with open(yaml_path, "r", encoding="utf-8") as fh:
                _merge(self._config, yaml.safe_load(fh) or {})
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("⚠️ config.yaml не прочитано (%s), працюємо на значеннях за замовчуванням", exc)

        json_path = _CONFIG_DIR / "config.json"
        if json_path.is_file():
            try:
                _merge(self._config, json.loads(json_path.read_text(encoding="utf-8")))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("⚠️ config.json пропущено: %s", exc)

        load_dotenv()
        applied = []
        for dotted, names in ENV_OVERRIDES.items():
            value = next((os.environ[name] for name in names if os.environ.get(name)), None)
            if value:                                                    # 🔁 Порожня змінна не перетирає файл
                _set_dotted(self._config, dotted, value)
                applied.append(dotted)
        logger.info("✅ Конфігурацію завантажено (ENV: %s)", ", ".join(applied) or "-")

    # ================================
    # 🔑 ДОСТУП
    # ================================
    def get(self, key: str, default: Any = None) -> Any:
        """Значення за ключем із крапками або `default`, якщо шляху немає."""
        node: Any = self._config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_float(self, key: str, default: float) -> float:
        """Число з конфігу; порожнє чи некоректне значення дає `default`."""
        raw = self.get(key, default)
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.warning("⚠️ '%s' має бути числом, отримано %r; беремо %s", key, raw, default)
            return float(default)

    def get_bool(self, key: str, default: bool) -> bool:
        raw = self.get(key, default)
        if isinstance(raw, str):
            return raw.strip().lower() in _TRUTHY
        return bool(raw)

    def section(self, key: str) -> Dict[str, Any]:
        node = self.get(key)
        return dict(node) if isinstance(node, dict) else {}


__all__ = ["ConfigService", "ENV_OVERRIDES"]
