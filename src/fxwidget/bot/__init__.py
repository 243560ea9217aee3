# 🤖 fxwidget/bot/__init__.py
"""🤖 Telegram-фронтенд конвертера."""
