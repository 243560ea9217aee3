# 🏗️ fxwidget/infrastructure/__init__.py
"""🏗️ Інфраструктура: мережа (Fixer) та файлове сховище."""
