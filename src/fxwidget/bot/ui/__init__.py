# 🎨 fxwidget/bot/ui/__init__.py
"""🎨 Тексти та форматери Telegram-інтерфейсу."""
