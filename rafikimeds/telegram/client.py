"""TelegramClient — capture and display boundaries via python-telegram-bot."""
import logging
import time
from typing import Awaitable, Callable, Optional

from telegram import Update
from telegram.constants import ChatAction
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from rafikimeds.bot_client import BotClient
from rafikimeds.config import Config
from rafikimeds.constants import (
    CMD_CLEAR,
    CMD_HELP,
    CMD_HISTORY,
    CMD_LANGUAGE,
    CMD_LISTEN,
    CMD_OPEN,
    CMD_SHARE,
    CMD_START,
    CMD_STATUS,
    MSG_BLOCKED_CHAT,
    MSG_BUSY,
    MSG_CLEARED,
    MSG_HELP,
    MSG_LANGUAGE_CURRENT,
    MSG_LANGUAGE_SET,
    MSG_LANGUAGE_UNKNOWN,
    MSG_NO_RESULT,
    MSG_NOT_AN_IMAGE,
    MSG_OPEN_NOT_FOUND,
    MSG_OPEN_USAGE,
    MSG_SEND_FAIL,
    MSG_SEND_OK,
    MSG_SPEECH_FAILED,
    MSG_SPEECH_NOT_CONFIGURED,
    MSG_STATUS,
    SPEECH_FILENAME,
)
from rafikimeds.errors import InvalidTransitionError, SpeechError
from rafikimeds.models import Language, Status
from rafikimeds.render import render_card, render_history, render_share
from rafikimeds.telegram.chat_action import TelegramChatAction
from rafikimeds.workflow import WorkflowController

logger = logging.getLogger(__name__)

# A command callback gets the raw argument string and returns the reply (None = no reply).
CommandCallback = Callable[[Update, ContextTypes.DEFAULT_TYPE, str], Awaitable[Optional[str]]]


class TelegramClient(BotClient):

    def __init__(
        self,
        config: Config,
        controller: WorkflowController,
        analysis_backend: str = "",
    ) -> None:
        self._token = config.telegram_bot_token
        self._allowed_chat_id = config.allowed_chat_id
        self._controller = controller
        self._analysis_backend = analysis_backend
        self._app: Optional[Application] = None

    # ── BotClient interface ───────────────────────────────────────────────────

    def run(self) -> None:
        # Concurrent updates let a newer photo supersede one still being analyzed.
        self._app = Application.builder().token(self._token).concurrent_updates(True).build()
        commands: dict[str, CommandCallback] = {
            CMD_START: self._on_help,
            CMD_HELP: self._on_help,
            CMD_LANGUAGE: self._on_language,
            CMD_HISTORY: self._on_history,
            CMD_OPEN: self._on_open,
            CMD_LISTEN: self._on_listen,
            CMD_SHARE: self._on_share,
            CMD_STATUS: self._on_status,
            CMD_CLEAR: self._on_clear,
        }
        for name, callback in commands.items():
            self._app.add_handler(CommandHandler(name, self._make_handler(callback)))
        self._app.add_handler(
            TGMessageHandler(filters.PHOTO | filters.Document.IMAGE, self._make_handler(self._on_photo))
        )
        self._app.add_handler(
            TGMessageHandler(~filters.COMMAND, self._make_handler(self._on_other))
        )
        self._app.run_polling()

    async def send_message(self, to: str, text: str) -> bool:
        match self._app:
            case None:
                logger.error("send_message called before run()")
                return False
            case app:
                try:
                    await app.bot.send_message(chat_id=int(to), text=text)
                    return True
                except Exception as exc:
                    logger.error("Telegram send_message failed: %s", exc)
                    return False

    async def send_audio(self, to: str, audio: bytes, title: str) -> bool:
        match self._app:
            case None:
                logger.error("send_audio called before run()")
                return False
            case app:
                try:
                    await app.bot.send_audio(
                        chat_id=int(to), audio=audio, filename=SPEECH_FILENAME, title=title
                    )
                    return True
                except Exception as exc:
                    logger.error("Telegram send_audio failed: %s", exc)
                    return False

    # ── helpers (also used in tests) ─────────────────────────────────────────

    def _is_allowed(self, update: Update) -> bool:
        if update.effective_chat is None:
            return False
        return str(update.effective_chat.id).strip() == self._allowed_chat_id.strip()

    @staticmethod
    def _parse_index(args: str) -> int | None:
        """Parse a 1-based history number → 0-based index, or None."""
        match args.strip().split():
            case [n] if n.isdigit() and int(n) > 0:
                return int(n) - 1
            case _:
                return None

    def _make_handler(self, callback: CommandCallback) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._is_allowed(update):
                case False:
                    chat_id = update.effective_chat.id if update.effective_chat else "?"
                    logger.warning(MSG_BLOCKED_CHAT, chat_id)
                    return
                case True:
                    pass

            sender = str(update.effective_chat.id)
            start = time.time()
            reply = await callback(update, context, " ".join(context.args or []))
            match reply:
                case None | "":
                    return
                case text:
                    success = await self.send_message(sender, text)
                    match success:
                        case True:
                            logger.info(MSG_SEND_OK, time.time() - start)
                        case False:
                            logger.error(MSG_SEND_FAIL, time.time() - start)

        return _handler

    # ── capture boundary ──────────────────────────────────────────────────────

    async def _on_photo(self, update: Update, context: ContextTypes.DEFAULT_TYPE, _: str) -> Optional[str]:
        message = update.message
        if message is None:
            return None
        attachment = message.photo[-1] if message.photo else message.document
        if attachment is None:
            return MSG_NOT_AN_IMAGE

        async def _read() -> bytes:
            tg_file = await attachment.get_file()
            return bytes(await tg_file.download_as_bytearray())

        sender = str(update.effective_chat.id)
        async with TelegramChatAction(context.bot, sender, ChatAction.TYPING):
            state = await self._controller.capture(_read)

        match state:
            case None:
                return None
            case s if s.status == Status.COMPLETE and self._controller.analysis is not None:
                return render_card(self._controller.analysis)
            case s:
                return s.message

    async def _on_other(self, update: Update, context: ContextTypes.DEFAULT_TYPE, _: str) -> str:
        return MSG_NOT_AN_IMAGE

    # ── commands ──────────────────────────────────────────────────────────────

    async def _on_help(self, update: Update, context: ContextTypes.DEFAULT_TYPE, _: str) -> str:
        return MSG_HELP

    async def _on_language(self, update: Update, context: ContextTypes.DEFAULT_TYPE, args: str) -> str:
        match args.strip():
            case "":
                return MSG_LANGUAGE_CURRENT % (self._controller.language.value, Language.names())
            case name:
                try:
                    language = Language.parse(name)
                except ValueError:
                    return MSG_LANGUAGE_UNKNOWN % (name, Language.names())
                self._controller.set_language(language)
                return MSG_LANGUAGE_SET % language.value

    async def _on_history(self, update: Update, context: ContextTypes.DEFAULT_TYPE, _: str) -> str:
        return render_history(self._controller.history)

    async def _on_open(self, update: Update, context: ContextTypes.DEFAULT_TYPE, args: str) -> str:
        index = self._parse_index(args)
        history = self._controller.history
        match index:
            case None:
                return MSG_OPEN_USAGE
            case i if i >= len(history):
                return MSG_OPEN_NOT_FOUND % args.strip()
            case i:
                pass
        try:
            self._controller.dismiss()
            entry = self._controller.select_history(history[i].id)
        except InvalidTransitionError:
            return MSG_BUSY
        except KeyError:
            return MSG_OPEN_NOT_FOUND % args.strip()
        return render_card(entry)

    async def _on_listen(self, update: Update, context: ContextTypes.DEFAULT_TYPE, _: str) -> Optional[str]:
        match (self._controller.speech_enabled, self._controller.analysis):
            case (False, _):
                return MSG_SPEECH_NOT_CONFIGURED
            case (_, None):
                return MSG_NO_RESULT
            case _:
                pass

        sender = str(update.effective_chat.id)
        try:
            async with TelegramChatAction(context.bot, sender, ChatAction.RECORD_VOICE):
                spoken, audio = await self._controller.listen()
        except SpeechError:
            return MSG_SPEECH_FAILED
        sent = await self.send_audio(sender, audio.to_wav(), spoken.medicine_name)
        return None if sent else MSG_SPEECH_FAILED

    async def _on_share(self, update: Update, context: ContextTypes.DEFAULT_TYPE, _: str) -> str:
        match self._controller.analysis:
            case None:
                return MSG_NO_RESULT
            case analysis:
                return render_share(analysis, self._controller.language)

    async def _on_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE, _: str) -> str:
        return MSG_STATUS % (
            self._controller.state.status.value,
            self._controller.language.value,
            self._analysis_backend or "configured",
            "enabled" if self._controller.speech_enabled else "disabled",
            len(self._controller.history),
        )

    async def _on_clear(self, update: Update, context: ContextTypes.DEFAULT_TYPE, _: str) -> str:
        try:
            self._controller.dismiss()
        except InvalidTransitionError:
            return MSG_BUSY
        return MSG_CLEARED
