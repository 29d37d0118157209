import asyncio

import pytest
from telegram.error import NetworkError

from memeagent.notify.telegram import LogNotifier, TelegramNotifier


class FakeBot:
    def __init__(self, error: Exception = None, delay: float = 0.0) -> None:
        self.sent = []
        self._error = error
        self._delay = delay

    async def send_message(self, chat_id, text):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        self.sent.append((chat_id, text))


@pytest.mark.asyncio
async def test_send_delivers_to_chat():
    bot = FakeBot()
    notifier = TelegramNotifier(chat_id=12345, bot=bot)

    assert await notifier.send("hello") is True
    assert bot.sent == [("12345", "hello")]


@pytest.mark.asyncio
async def test_telegram_error_is_swallowed():
    notifier = TelegramNotifier(chat_id="1", bot=FakeBot(NetworkError("down")))

    assert await notifier.send("hello") is False


@pytest.mark.asyncio
async def test_unexpected_error_is_swallowed():
    notifier = TelegramNotifier(chat_id="1", bot=FakeBot(RuntimeError("boom")))

    assert await notifier.send("hello") is False


@pytest.mark.asyncio
async def test_timeout_is_swallowed():
    notifier = TelegramNotifier(chat_id="1", bot=FakeBot(delay=1.0), timeout=0.01)

    assert await notifier.send("hello") is False


def test_needs_token_or_bot():
    with pytest.raises(ValueError):
        TelegramNotifier(chat_id="1")


@pytest.mark.asyncio
async def test_log_notifier_keeps_messages():
    notifier = LogNotifier()

    assert await notifier.send("one")
    assert await notifier.send("two")
    assert notifier.messages == ["one", "two"]
