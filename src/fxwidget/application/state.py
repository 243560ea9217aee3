# 🧾 fxwidget/application/state.py
"""
🧾 ConverterState — незмінний знімок стану віджета конвертера.

🔹 Пишеться лише `ConverterSession` (через `dataclasses.replace`).
🔹 `result_text` — головний рядок (результат або підказка), `error_text` — другорядний.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass										# 🧱 Immutable DTO
from typing import Optional											# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from fxwidget.domain.currency.interfaces import ConversionResult

PLACEHOLDER_TEXT = "Enter your API key and click convert to see results"


@dataclass(frozen=True)
class ConverterState:
    credential: str = ""
    amount: float = 1.0
    source: str = "EUR"
    target: str = "USD"
    result_text: str = ""												# 💬 Результат або підказка
    error_text: str = ""												# ⚠️ Остання помилка (порожньо, якщо немає)
    loading: bool = False												# ⏳ Чекаємо на курси
    last_result: Optional[ConversionResult] = None
    last_updated: Optional[float] = None								# 🕒 Unix-час останнього оновлення курсів
    currency_count: int = 0

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)

    @property
    def display_text(self) -> str:
        """Те, що бачить користувач у блоці результату."""
        return self.result_text or PLACEHOLDER_TEXT

    def credential_display(self, reveal: bool = False) -> str:
        """Ключ для показу: відкрито або крапками (перемикач show/hide)."""
        if reveal or not self.credential:
            return self.credential
        return "•" * len(self.credential)


__all__ = ["ConverterState", "PLACEHOLDER_TEXT"]
