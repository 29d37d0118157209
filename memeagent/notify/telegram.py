import asyncio
from typing import List, Optional

from loguru import logger
from telegram import Bot
from telegram.error import TelegramError

from ..constants import DEFAULT_REQUEST_TIMEOUT_SECONDS
from .interfaces import Notifier


class TelegramNotifier(Notifier):
    """Sends plain-text messages to one Telegram chat."""

    def __init__(
        self,
        chat_id: str,
        token: Optional[str] = None,
        bot: Optional[Bot] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        if bot is None and not token:
            raise ValueError("TelegramNotifier needs a bot token or a Bot instance")
        self._bot = bot or Bot(token=token)
        self._chat_id = str(chat_id)
        self._timeout = timeout

    async def send(self, message: str) -> bool:
        try:
            await asyncio.wait_for(
                self._bot.send_message(chat_id=self._chat_id, text=message),
                timeout=self._timeout,
            )
            return True
        except asyncio.TimeoutError:
            logger.warning("Telegram send timed out after {}s", self._timeout)
        except TelegramError as exc:
            logger.error("Failed to send Telegram message: {}", exc)
        except Exception:
            logger.exception("Unexpected error sending Telegram message")
        return False


class LogNotifier(Notifier):
    """Writes messages to the log only; used when no chat is configured."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    async def send(self, message: str) -> bool:
        self.messages.append(message)
        logger.info("[notify] {}", message)
        return True
