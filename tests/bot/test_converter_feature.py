"""
🧪 test_converter_feature.py — unit-тести для команд Telegram-конвертера

Перевіряє:
- /key: повідомлення з ключем видаляється, відповідь маскована
- /convert без аргументів та з `<n> <FROM> <TO>`
- Валідацію коду валюти та суми
- Пуш автоконвертації та дедуплікацію однакових помилок
- Збирання контейнера й застосунку PTB
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from fxwidget.application import ConverterSession
from fxwidget.bot.commands import ConverterFeature
from fxwidget.bot.services.session_registry import SessionRegistry
from fxwidget.bot.ui import static_messages as msg
from fxwidget.config.config_service import ConfigService
from fxwidget.config.setup.constants import CONST
from fxwidget.errors import ExceptionHandlerService, HttpxErrorStrategy, TelegramErrorStrategy
from fxwidget.infrastructure.currency.rate_repository import RateRepository
from fxwidget.infrastructure.storage.credential_store import CredentialStore
from fxwidget.shared.errors import NetworkFailure
from fxwidget.shared.utils.timers import VirtualScheduler

CHAT_ID = 7


@pytest.fixture
def harness(fake_provider, memory_store):
    scheduler = VirtualScheduler()

    def factory(chat_id, listener):
        repository = RateRepository(fake_provider, scheduler)
        return ConverterSession(
            repository,
            CredentialStore(memory_store, key=f"fixerApiKey:{chat_id}"),
            scheduler,
            listener=listener,
        )

    sessions = SessionRegistry(factory)
    feature = ConverterFeature(
        sessions,
        CONST,
        ExceptionHandlerService([HttpxErrorStrategy(), TelegramErrorStrategy()]),
    )
    bot = MagicMock()
    bot.send_message = AsyncMock()
    return feature, sessions, scheduler, bot


def _update():
    update = MagicMock()
    update.effective_chat.id = CHAT_ID
    update.effective_chat.send_message = AsyncMock()
    update.effective_message.delete = AsyncMock()
    return update


def _context(bot, *args):
    context = MagicMock()
    context.args = list(args)
    context.bot = bot
    return context


def _last_reply(update) -> str:
    return update.effective_chat.send_message.await_args.args[0]


async def _with_key(harness, key="abcdefgh1234"):
    feature, sessions, scheduler, bot = harness
    update = _update()
    await feature.set_key(update, _context(bot, key))
    session = sessions.peek(CHAT_ID)
    await session.drain()
    return session, update


@pytest.mark.asyncio
async def test_set_key_hides_message_and_masks_reply(harness, memory_store):
    session, update = await _with_key(harness)

    update.effective_message.delete.assert_awaited_once()
    reply = _last_reply(update)
    assert "1234" in reply
    assert "abcdefgh" not in reply
    assert memory_store.data["fixerApiKey:7"] == "abcdefgh1234"
    assert session.state.credential == "abcdefgh1234"


@pytest.mark.asyncio
async def test_key_without_args_shows_usage(harness):
    feature, _, _, bot = harness
    update = _update()
    await feature.set_key(update, _context(bot))
    assert _last_reply(update) == msg.KEY_USAGE


@pytest.mark.asyncio
async def test_convert_uses_session_state(harness):
    feature, _, _, bot = harness
    await _with_key(harness)

    update = _update()
    await feature.convert(update, _context(bot))

    reply = _last_reply(update)
    assert "<b>1.00 EUR = 1.10 USD</b>" in reply
    assert "Exchange rate: 1 EUR = 1.100000 USD" in reply


@pytest.mark.asyncio
async def test_convert_with_arguments(harness):
    feature, sessions, _, bot = harness
    await _with_key(harness)

    update = _update()
    await feature.convert(update, _context(bot, "10", "usd", "GBP"))

    assert "10.00 USD = 7.73 GBP" in _last_reply(update)
    state = sessions.peek(CHAT_ID).state
    assert (state.amount, state.source, state.target) == (10.0, "USD", "GBP")


@pytest.mark.asyncio
async def test_convert_without_key_prompts(harness):
    feature, _, _, bot = harness
    update = _update()
    await feature.convert(update, _context(bot))

    reply = _last_reply(update)
    assert "Please enter your API key" in reply
    assert "API key required" in reply


@pytest.mark.asyncio
async def test_unknown_code_and_invalid_amount(harness):
    feature, _, _, bot = harness
    await _with_key(harness)

    update = _update()
    await feature.set_source(update, _context(bot, "XYZ"))
    assert _last_reply(update) == msg.CODE_UNKNOWN.format(code="XYZ")

    await feature.set_amount(update, _context(bot, "abc"))
    assert _last_reply(update) == msg.AMOUNT_INVALID


@pytest.mark.asyncio
async def test_auto_convert_is_pushed_to_chat(harness):
    feature, sessions, scheduler, bot = harness
    session, _ = await _with_key(harness)
    scheduler.advance(1)                                                # 🧹 Початкова автоконвертація
    await session.drain()
    bot.send_message.reset_mock()

    await feature.set_amount(_update(), _context(bot, "5"))
    scheduler.advance(0.6)
    await session.drain()

    bot.send_message.assert_awaited_once()
    kwargs = bot.send_message.await_args.kwargs
    assert kwargs["chat_id"] == CHAT_ID
    assert "5.00 EUR = 5.50 USD" in kwargs["text"]


@pytest.mark.asyncio
async def test_scheduled_refreshes_do_not_message_the_chat(harness):
    _, _, scheduler, bot = harness
    session, _ = await _with_key(harness)
    scheduler.advance(1)
    await session.drain()
    bot.send_message.reset_mock()

    for _ in range(6):
        scheduler.advance(600)
        await session.drain()

    bot.send_message.assert_not_awaited()
    assert session.state.result_text.startswith("1.00 EUR = 1.10 USD")


@pytest.mark.asyncio
async def test_same_refresh_error_pushed_once(harness, fake_provider):
    feature, _, scheduler, bot = harness
    session, _ = await _with_key(harness)
    scheduler.advance(1)
    await session.drain()
    bot.send_message.reset_mock()

    fake_provider.rates_error = NetworkFailure("Network error. Please check your internet connection.")
    session.repository.request_rates_refresh()
    await session.drain()
    session.repository.request_rates_refresh()
    await session.drain()

    bot.send_message.assert_awaited_once()
    assert "Network error" in bot.send_message.await_args.kwargs["text"]


@pytest.mark.asyncio
async def test_status_and_currencies(harness):
    feature, _, _, bot = harness
    await _with_key(harness)

    update = _update()
    await feature.currencies(update, _context(bot))
    assert "<code>GBP</code> — British Pound" in _last_reply(update)
    assert msg.CURRENCIES_FALLBACK_NOTE not in _last_reply(update)

    await feature.status(update, _context(bot))
    assert "✓ 3 currencies loaded" in _last_reply(update)


@pytest.mark.asyncio
async def test_container_wires_sessions_and_application():
    from fxwidget.bot.main import build_application
    from fxwidget.config.setup.container import Container

    container = Container(ConfigService.from_dict({"converter": {"credential_key": "fixerApiKey"}}),
                          scheduler=VirtualScheduler())
    try:
        assert container.credential_key_for(42) == "fixerApiKey:42"

        application = build_application("123456:TEST-TOKEN", container)
        assert application.bot_data["container"] is container
        assert len(application.handlers[0]) == len(CONST.get_all_commands())
    finally:
        await container.shutdown()
