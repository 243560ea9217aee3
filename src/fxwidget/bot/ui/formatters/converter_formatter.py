# 📝 fxwidget/bot/ui/formatters/converter_formatter.py
"""
📝 Форматування стану конвертера у HTML-повідомлення Telegram.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from html import escape												# 🛡️ Екранування тексту для HTML parse_mode
from typing import Iterable, Tuple									# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from fxwidget.application.state import ConverterState
from fxwidget.bot.ui import static_messages as msg
from fxwidget.shared.utils.logger import mask_secret


class ConverterFormatter:
    """📝 Перетворює `ConverterState` на текст повідомлень."""

    def result(self, state: ConverterState) -> str:
        """Блок результату: перший рядок жирним, далі рядок курсу та помилка."""
        first, _, rest = state.display_text.partition("\n")
        lines = [f"💱 <b>{escape(first)}</b>"]
        if rest:
            lines.append(escape(rest))
        if state.error_text:
            lines.append(f"⚠️ {escape(state.error_text)}")
        return "\n".join(lines)

    def error(self, state: ConverterState) -> str:
        return f"⚠️ {escape(state.error_text)}"

    def amount(self, state: ConverterState) -> str:
        return msg.AMOUNT_SET.format(amount=f"{state.amount:.2f}")

    def pair(self, state: ConverterState) -> str:
        return msg.PAIR_SET.format(source=escape(state.source), target=escape(state.target))

    def currencies(self, options: Iterable[Tuple[str, str]], *, fallback: bool) -> str:
        items = list(options)
        lines = [msg.CURRENCIES_TITLE.format(count=len(items))]
        lines.extend(f"<code>{escape(code)}</code> — {escape(name)}" for code, name in items)
        if fallback:
            lines.append(msg.CURRENCIES_FALLBACK_NOTE)
        return "\n".join(lines)

    def status(self, state: ConverterState, status_line: str) -> str:
        key = f"<code>{escape(mask_secret(state.credential))}</code>" if state.credential else "—"
        lines = [
            msg.STATUS_TITLE,
            f"🔑 Key: {key}",
            f"🔢 Amount: {state.amount:.2f}",
            f"💱 Pair: {escape(state.source)} → {escape(state.target)}",
            escape(status_line) if status_line else msg.STATUS_NO_RATES,
        ]
        if state.error_text:
            lines.append(f"⚠️ {escape(state.error_text)}")
        return "\n".join(lines)


__all__ = ["ConverterFormatter"]
