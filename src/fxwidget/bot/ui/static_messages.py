# 📝 fxwidget/bot/ui/static_messages.py
"""
📝 Статичні тексти Telegram-інтерфейсу конвертера.

🔹 Тексти самого конвертера (результат, помилки провайдера) живуть у домені/сесії.
🔹 Тут — довідка, підказки команд та фолбеки обробки помилок.
"""

WELCOME = (
    "💱 <b>Currency Converter</b>\n"
    "Live rates from Fixer (EUR base, free plan).\n\n"
    "Start with <code>/key YOUR_API_KEY</code>."
)

HELP = (
    "📖 <b>Commands</b>\n"
    "/key &lt;key&gt; — save your Fixer API key\n"
    "/showkey — reveal the saved key\n"
    "/amount &lt;n&gt; — set the amount\n"
    "/from &lt;CODE&gt; — source currency\n"
    "/to &lt;CODE&gt; — target currency\n"
    "/swap — swap source and target\n"
    "/convert [&lt;n&gt; &lt;FROM&gt; &lt;TO&gt;] — convert now\n"
    "/currencies — available currencies\n"
    "/status — current settings and rates status\n\n"
    "Results update automatically 0.5 s after you change the amount or currencies."
)

KEY_USAGE = "🔑 Usage: <code>/key YOUR_API_KEY</code>"
KEY_SAVED = "🔑 API key saved: <code>{masked}</code>\nLoading currencies and rates..."
KEY_NOT_SET = "🔑 No API key set. Use <code>/key YOUR_API_KEY</code>."
KEY_REVEALED = "🔑 Your API key: <tg-spoiler>{key}</tg-spoiler>"

AMOUNT_USAGE = "🔢 Usage: <code>/amount 100</code>"
AMOUNT_SET = "🔢 Amount: <b>{amount}</b>"
AMOUNT_INVALID = "⚠️ Please enter a valid amount"

CODE_USAGE = "💱 Usage: <code>/{command} USD</code>"
CODE_UNKNOWN = "⚠️ Unknown currency <b>{code}</b>. See /currencies"
PAIR_SET = "💱 Pair: <b>{source}</b> → <b>{target}</b>"

CONVERT_USAGE = "🧮 Usage: <code>/convert</code> or <code>/convert 10 USD GBP</code>"

CURRENCIES_TITLE = "🏷️ <b>Available currencies</b> ({count}):"
CURRENCIES_FALLBACK_NOTE = "ℹ️ Showing the default list until symbols are loaded."

STATUS_TITLE = "📊 <b>Converter status</b>"
STATUS_NO_RATES = "⏳ Rates not loaded yet"

ERROR_HTTP_TIMEOUT = "⏱️ The rates service did not respond in time. Please try again."
ERROR_HTTP_CONNECTION = "🌐 Could not reach the rates service. Please check your internet connection."
ERROR_HTTP_STATUS = "🌐 The rates service returned HTTP {status_code}."
ERROR_TELEGRAM_RETRY_AFTER = "⏳ Telegram asks to wait {seconds} s before retrying."
ERROR_TELEGRAM_GENERAL = "🤖 Telegram error. Please try again a bit later."
ERROR_CRITICAL = "❌ Something went wrong. Please try again."
