"""Telegram command surface: /start and /status.

Handlers only read orchestrator state; they never trigger a cycle.
"""

from typing import Callable, Optional

from loguru import logger
from telegram import Update
from telegram.ext import Application, ApplicationBuilder, CommandHandler, ContextTypes

from .notify import formatters

StatusProvider = Callable[[], str]


class StatusBot:
    def __init__(self, status_provider: StatusProvider) -> None:
        self._status_provider = status_provider

    async def cmd_start(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        await update.effective_message.reply_text(formatters.WELCOME)

    async def cmd_status(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        await update.effective_message.reply_text(self._status_provider())

    async def on_error(
        self, update: Optional[object], context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        logger.opt(exception=context.error).error("Telegram handler failed")
        message = getattr(update, "effective_message", None)
        if message is None:
            return
        try:
            await message.reply_text(formatters.ERROR_REPLY)
        except Exception:
            logger.exception("Failed to send error reply")

    def register(self, app: Application) -> Application:
        app.add_handler(CommandHandler("start", self.cmd_start))
        app.add_handler(CommandHandler("status", self.cmd_status))
        app.add_error_handler(self.on_error)
        return app


def build_application(token: str, status_provider: StatusProvider) -> Application:
    app = ApplicationBuilder().token(token).build()
    return StatusBot(status_provider).register(app)
