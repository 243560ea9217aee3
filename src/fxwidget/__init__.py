# 💱 fxwidget/__init__.py
"""
💱 fxwidget — конвертер валют на курсах Fixer (база EUR) з Telegram-інтерфейсом.

🔹 `domain` — типи та чистий рушій конвертації.
🔹 `infrastructure` — HTTP-клієнт Fixer, репозиторій курсів, сховище ключа.
🔹 `application` — сесія віджета (стан, debounce, автоконвертація).
🔹 `bot` — Telegram-фронтенд.
"""

__version__ = "0.1.0"
