"""Telegram notification sink — aiogram 3.x, send-only.

The bot never polls for updates; it only posts alerts to one channel.
A bot that cannot be verified on startup is fatal: the radar must not
run cycles without a working channel.
"""

import math

from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.types import LinkPreviewOptions
from loguru import logger

from src.bot.formatters import format_token_alert
from src.models.token import TokenRecord

DEFAULT_TIMEOUT = 10.0


class NotifierError(Exception):
    pass


class TelegramNotifier:
    """Posts HTML messages to a fixed Telegram channel."""

    def __init__(
        self,
        bot_token: str,
        channel_id: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        bot: Bot | None = None,
    ) -> None:
        self._token = bot_token
        self._channel_id = channel_id
        self._timeout = timeout
        self._bot = bot
        self._sent = 0

    @property
    def total_sent(self) -> int:
        return self._sent

    @property
    def _request_timeout(self) -> int:
        """Whole seconds for aiogram; 0 would mean no timeout at all."""
        return max(1, math.ceil(self._timeout))

    async def initialize(self) -> str:
        """Create the bot and verify the token. Returns the bot username."""
        try:
            if self._bot is None:
                self._bot = Bot(token=self._token)
            me = await self._bot.get_me(request_timeout=self._request_timeout)
        except Exception as e:
            raise NotifierError(f"Failed to initialize Telegram bot: {e}") from e

        logger.info(f"[TG] Bot initialized: @{me.username}")
        return me.username or ""

    async def send_message(self, text: str) -> None:
        """Send one HTML message, link previews off. Raises on failure."""
        if self._bot is None:
            raise NotifierError("Telegram bot not initialized")

        await self._bot.send_message(
            chat_id=self._channel_id,
            text=text,
            parse_mode=ParseMode.HTML,
            link_preview_options=LinkPreviewOptions(is_disabled=True),
            request_timeout=self._request_timeout,
        )
        self._sent += 1

    async def send_token_alert(self, token: TokenRecord) -> None:
        await self.send_message(format_token_alert(token))

    async def close(self) -> None:
        if self._bot is not None:
            await self._bot.session.close()
            self._bot = None
