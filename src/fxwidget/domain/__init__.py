# 🏭 fxwidget/domain/__init__.py
"""🏭 Доменний шар: валютні типи та рушій конвертації."""
