"""Telegram chat action indicator — re-sends the action every N seconds until stopped."""
import asyncio
import logging

from telegram import Bot
from telegram.constants import ChatAction

from rafikimeds.bot_client import ChatActionIndicator
from rafikimeds.constants import TELEGRAM_ACTION_INTERVAL

logger = logging.getLogger(__name__)


async def _keep_acting(bot: Bot, chat_id: str, action: ChatAction, stop: asyncio.Event) -> None:
    while not stop.is_set():
        try:
            await bot.send_chat_action(chat_id=int(chat_id), action=action)
        except Exception as exc:
            logger.debug("Chat action failed: %s", exc)
        await asyncio.sleep(TELEGRAM_ACTION_INTERVAL)


class TelegramChatAction(ChatActionIndicator):

    def __init__(self, bot: Bot, chat_id: str, action: ChatAction = ChatAction.TYPING) -> None:
        self._bot = bot
        self._chat_id = chat_id
        self._action = action
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None

    async def start(self, to: str) -> None:
        await self.stop(to)
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(
            _keep_acting(self._bot, self._chat_id, self._action, self._stop_event)
        )

    async def stop(self, to: str) -> None:
        match self._stop_event:
            case None:
                pass
            case event:
                event.set()

        match self._task:
            case None:
                pass
            case task:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                self._task = None

        self._stop_event = None

    async def __aenter__(self) -> "TelegramChatAction":
        await self.start(self._chat_id)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop(self._chat_id)
