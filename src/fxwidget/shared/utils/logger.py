# 📜 fxwidget/shared/utils/logger.py
"""
📜 Логування fxwidget: один кореневий логер `fxwidget` для всіх модулів.

🔹 Консоль (коротко) і файл із добовою ротацією (детально або JSON).
🔹 Рівні сторонніх бібліотек (httpx, telegram) приглушуються з конфігу.
🔹 Ключ Fixer ніколи не пишеться у відкритому вигляді: `access_key=` у рядках
   логів маскується фільтром, а модулі маскують ключі самі через `mask_secret`.
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json
import logging
import re
import sys
import threading
from dataclasses import dataclass, field, fields
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

LOG_NAME: str = "fxwidget"
FILE_FORMAT: str = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT: str = "%(asctime)s [%(levelname).1s] %(message)s"
DEFAULT_SUPPRESS: Dict[str, str] = {"httpx": "WARNING", "httpcore": "WARNING", "telegram": "INFO"}

_ACCESS_KEY_RE = re.compile(r"(access_key=)([^&\s'\"]+)")
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}
_init_lock = threading.Lock()


# ================================
# 🙈 СЕКРЕТИ
# ================================
def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """🙈 `abcdef123456` → `••••••••3456`; порожнє значення → `<empty>`."""
    text = (value or "").strip()
    if not text:
        return "<empty>"
    if len(text) <= visible:
        return "•" * len(text)
    return "•" * (len(text) - visible) + text[-visible:]


class AccessKeyFilter(logging.Filter):
    """Маскує `access_key=...` у повідомленні (httpx логує повний URL запиту)."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "access_key=" in message:
            record.msg = _ACCESS_KEY_RE.sub(lambda m: m.group(1) + mask_secret(m.group(2)), message)
            record.args = ()
        return True


# ================================
# ⚙️ НАЛАШТУВАННЯ
# ================================
@dataclass
class LoggingConfig:
    """Розділ `logging` конфігу; відсутні ключі беруть значення за замовчуванням."""

    level: str = "INFO"
    console: bool = True
    console_level: str = "INFO"
    json: bool = False
    file: Optional[str] = "logs/fxwidget.log"
    file_level: str = "DEBUG"
    backup_count: int = 7
    suppress: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SUPPRESS))

    @classmethod
    def from_mapping(cls, node: Optional[Mapping[str, Any]]) -> "LoggingConfig":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in (node or {}).items() if k in known and v is not None}
        suppress = dict(DEFAULT_SUPPRESS)
        suppress.update(values.pop("suppress", None) or {})
        if node and node.get("file_enabled") is False:
            values["file"] = None
        return cls(suppress=suppress, **values)


class JsonFormatter(logging.Formatter):
    """Один запис → один JSON-рядок, разом з `extra`-полями (error_code, endpoint...)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            payload[key] = value if isinstance(value, (str, int, float, bool, type(None))) else repr(value)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _level(value: Union[str, int, None], default: int) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(str(value or "").upper())
    return resolved if isinstance(resolved, int) else default


# ================================
# 🚀 ІНІЦІАЛІЗАЦІЯ
# ================================
def init_logging(cfg: Optional[LoggingConfig] = None) -> logging.Logger:
    """Налаштовує логер `fxwidget`; повторний виклик замінює його хендлери."""
    cfg = cfg or LoggingConfig()
    with _init_lock:
        root = logging.getLogger(LOG_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

        handler_levels = []
        if cfg.console:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(logging.Formatter(CONSOLE_FORMAT, "%H:%M:%S"))
            console.setLevel(_level(cfg.console_level, logging.INFO))
            handler_levels.append(console.level)
            root.addHandler(console)

        if cfg.file:
            path = Path(cfg.file)
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                str(path), when="midnight", backupCount=cfg.backup_count, encoding="utf-8"
            )
            file_handler.setFormatter(JsonFormatter() if cfg.json else logging.Formatter(FILE_FORMAT))
            file_handler.setLevel(_level(cfg.file_level, logging.DEBUG))
            handler_levels.append(file_handler.level)
            root.addHandler(file_handler)

        root.setLevel(min([_level(cfg.level, logging.INFO), *handler_levels]))

        key_filter = AccessKeyFilter()
        for handler in root.handlers:
            handler.addFilter(key_filter)
        for name, level in cfg.suppress.items():
            library = logging.getLogger(name)
            library.setLevel(_level(level, logging.WARNING))
            if not any(isinstance(f, AccessKeyFilter) for f in library.filters):
                library.addFilter(key_filter)

        root.info("🪵 Logging ready: level=%s console=%s file=%s", cfg.level, cfg.console, cfg.file or "-")
        return root


def init_logging_from_config(config: Optional[Mapping[str, Any]]) -> logging.Logger:
    """Ініціалізує логування з розділу `logging` ConfigService."""
    return init_logging(LoggingConfig.from_mapping(config))


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(f"{LOG_NAME}.{suffix}" if suffix else LOG_NAME)


__all__ = [
    "AccessKeyFilter",
    "JsonFormatter",
    "LOG_NAME",
    "LoggingConfig",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    "mask_secret",
]
