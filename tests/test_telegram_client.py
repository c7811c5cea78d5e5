"""TelegramClient tests"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from rafikimeds.constants import (
    MSG_ANALYSIS_FAILED,
    MSG_BUSY,
    MSG_CLEARED,
    MSG_HELP,
    MSG_NO_RESULT,
    MSG_NOT_AN_IMAGE,
    MSG_OPEN_USAGE,
    MSG_SPEECH_FAILED,
    MSG_SPEECH_NOT_CONFIGURED,
)
from rafikimeds.errors import SpeechError
from rafikimeds.models import Language, MedicationAnalysis, ProcessingState, Status
from rafikimeds.speech.client import PcmAudio
from rafikimeds.config import Config
from rafikimeds.telegram.client import TelegramClient


def make_config(*, allowed_chat_id: str = "123456789") -> Config:
    return Config(
        telegram_bot_token="test-token",
        allowed_chat_id=allowed_chat_id,
        log_level="INFO",
        anthropic_api_key="sk-ant-test",
        openai_api_key="sk-test",
        analysis_backend="auto",
        default_language=Language.KINYARWANDA,
        history_path=".medication_history.json",
        history_max_entries=10,
        analysis_timeout=60.0,
        speech_timeout=60.0,
    )


def make_analysis(name: str = "Amoxicillin", entry_id: str = "id-1") -> MedicationAnalysis:
    return MedicationAnalysis(
        id=entry_id,
        timestamp=1_700_000_000_000,
        medicine_name=name,
        purpose="Treats infection",
        dosage="1 tablet",
        frequency="Twice daily",
        warnings=("Take with food",),
        storage="Cool dry place",
    )


def make_controller() -> MagicMock:
    controller = MagicMock()
    controller.language = Language.KINYARWANDA
    controller.state = ProcessingState(Status.IDLE)
    controller.analysis = None
    controller.history = ()
    controller.speech_enabled = True
    controller.capture = AsyncMock()
    controller.listen = AsyncMock()
    return controller


def make_update(*, chat_id: int = 123456789) -> MagicMock:
    """Build a minimal mock of a python-telegram-bot Update."""
    update = MagicMock()
    update.effective_chat.id = chat_id
    return update


def make_context(*args: str) -> MagicMock:
    context = MagicMock()
    context.args = list(args)
    context.bot.send_chat_action = AsyncMock()
    return context


def make_client(controller=None, chat_id: str = "123456789") -> TelegramClient:
    return TelegramClient(make_config(allowed_chat_id=chat_id), controller or make_controller())


# ── allowed-chat filter ───────────────────────────────────────────────────────


def test_allowed_chat_id_passes_filter():
    assert make_client()._is_allowed(make_update(chat_id=123456789))


def test_blocked_chat_id_fails_filter():
    assert not make_client()._is_allowed(make_update(chat_id=999999999))


def test_missing_chat_fails_filter():
    update = make_update()
    update.effective_chat = None
    assert not make_client()._is_allowed(update)


async def test_blocked_chat_gets_no_reply():
    client = make_client()
    callback = AsyncMock(return_value="hi")

    with patch.object(client, "send_message", new_callable=AsyncMock) as mock_send:
        await client._make_handler(callback)(make_update(chat_id=1), make_context())

    callback.assert_not_called()
    mock_send.assert_not_called()


async def test_handler_sends_callback_reply():
    client = make_client()
    callback = AsyncMock(return_value="reply text")

    with patch.object(client, "send_message", new_callable=AsyncMock) as mock_send:
        await client._make_handler(callback)(make_update(), make_context("a", "b"))

    assert callback.call_args.args[2] == "a b"
    mock_send.assert_called_once_with("123456789", "reply text")


async def test_handler_skips_empty_reply():
    client = make_client()

    with patch.object(client, "send_message", new_callable=AsyncMock) as mock_send:
        await client._make_handler(AsyncMock(return_value=None))(make_update(), make_context())

    mock_send.assert_not_called()


# ── index parsing ─────────────────────────────────────────────────────────────


@pytest.mark.parametrize("args,expected", [("1", 0), (" 3 ", 2), ("0", None), ("x", None), ("", None), ("1 2", None)])
def test_parse_index(args, expected):
    assert TelegramClient._parse_index(args) == expected


# ── photo capture ─────────────────────────────────────────────────────────────


def make_photo_update(data: bytes = b"\xff\xd8\xffimage") -> MagicMock:
    update = make_update()
    tg_file = MagicMock()
    tg_file.download_as_bytearray = AsyncMock(return_value=bytearray(data))
    photo = MagicMock()
    photo.get_file = AsyncMock(return_value=tg_file)
    update.message.photo = [MagicMock(), photo]
    return update


async def test_photo_is_read_and_captured():
    controller = make_controller()
    analysis = make_analysis()

    async def capture(read):
        assert await read() == b"\xff\xd8\xffimage"
        controller.analysis = analysis
        return ProcessingState(Status.COMPLETE)

    controller.capture = AsyncMock(side_effect=capture)
    client = make_client(controller)

    reply = await client._on_photo(make_photo_update(), make_context(), "")

    assert "Amoxicillin" in reply
    controller.capture.assert_called_once()


async def test_photo_failure_replies_fixed_message():
    controller = make_controller()
    controller.capture = AsyncMock(return_value=ProcessingState(Status.ERROR, MSG_ANALYSIS_FAILED))
    client = make_client(controller)

    reply = await client._on_photo(make_photo_update(), make_context(), "")

    assert reply == MSG_ANALYSIS_FAILED


async def test_superseded_photo_sends_nothing():
    controller = make_controller()
    controller.capture = AsyncMock(return_value=None)
    client = make_client(controller)

    assert await client._on_photo(make_photo_update(), make_context(), "") is None


async def test_image_document_is_captured():
    controller = make_controller()
    controller.capture = AsyncMock(return_value=ProcessingState(Status.ERROR, MSG_ANALYSIS_FAILED))
    client = make_client(controller)
    update = make_photo_update()
    update.message.document = update.message.photo[-1]
    update.message.photo = []

    await client._on_photo(update, make_context(), "")

    controller.capture.assert_called_once()


async def test_text_message_asks_for_photo():
    assert await make_client()._on_other(make_update(), make_context(), "") == MSG_NOT_AN_IMAGE


# ── commands ──────────────────────────────────────────────────────────────────


async def test_help_reply():
    assert await make_client()._on_help(make_update(), make_context(), "") == MSG_HELP


def test_help_mentions_commands():
    for command in ("/language", "/listen", "/history", "/open", "/share", "/clear"):
        assert command in MSG_HELP


async def test_language_without_args_shows_current():
    reply = await make_client()._on_language(make_update(), make_context(), "")
    assert "Kinyarwanda" in reply
    assert "Swahili" in reply


async def test_language_sets_next_request_language():
    controller = make_controller()

    reply = await make_client(controller)._on_language(make_update(), make_context(), "french")

    controller.set_language.assert_called_once_with(Language.FRENCH)
    assert "French" in reply


async def test_language_unknown_is_rejected():
    controller = make_controller()

    reply = await make_client(controller)._on_language(make_update(), make_context(), "Klingon")

    controller.set_language.assert_not_called()
    assert "Klingon" in reply


async def test_open_shows_history_entry():
    controller = make_controller()
    entry = make_analysis("Old", "id-9")
    controller.history = (entry,)
    controller.select_history.return_value = entry

    reply = await make_client(controller)._on_open(make_update(), make_context(), "1")

    controller.dismiss.assert_called_once()
    controller.select_history.assert_called_once_with("id-9")
    assert "Old" in reply


async def test_open_out_of_range():
    controller = make_controller()
    controller.history = (make_analysis(),)

    reply = await make_client(controller)._on_open(make_update(), make_context(), "5")

    assert "5" in reply
    controller.select_history.assert_not_called()


async def test_open_without_number_shows_usage():
    assert await make_client()._on_open(make_update(), make_context(), "") == MSG_OPEN_USAGE


async def test_open_while_analyzing_is_busy():
    from rafikimeds.errors import InvalidTransitionError

    controller = make_controller()
    controller.history = (make_analysis(),)
    controller.dismiss.side_effect = InvalidTransitionError("analyzing")

    assert await make_client(controller)._on_open(make_update(), make_context(), "1") == MSG_BUSY


async def test_listen_sends_wav_audio():
    controller = make_controller()
    controller.analysis = make_analysis()
    controller.listen = AsyncMock(return_value=(controller.analysis, PcmAudio(samples=(1, 2, 3))))
    client = make_client(controller)

    with patch.object(client, "send_audio", new_callable=AsyncMock, return_value=True) as mock_audio:
        reply = await client._on_listen(make_update(), make_context(), "")

    assert reply is None
    to, audio, title = mock_audio.call_args.args
    assert to == "123456789"
    assert audio.startswith(b"RIFF")
    assert title == "Amoxicillin"


async def test_listen_titles_audio_with_the_entry_that_was_read():
    controller = make_controller()
    controller.analysis = make_analysis("Old", "id-old")
    read = controller.analysis

    async def listen():
        controller.analysis = make_analysis("New", "id-new")
        return read, PcmAudio(samples=(1,))

    controller.listen = AsyncMock(side_effect=listen)
    client = make_client(controller)

    with patch.object(client, "send_audio", new_callable=AsyncMock, return_value=True) as mock_audio:
        await client._on_listen(make_update(), make_context(), "")

    assert mock_audio.call_args.args[2] == "Old"


async def test_listen_failure_replies_generic_message():
    controller = make_controller()
    controller.analysis = make_analysis()
    controller.listen = AsyncMock(side_effect=SpeechError("tts down"))

    reply = await make_client(controller)._on_listen(make_update(), make_context(), "")

    assert reply == MSG_SPEECH_FAILED


async def test_listen_without_result():
    assert await make_client()._on_listen(make_update(), make_context(), "") == MSG_NO_RESULT


async def test_listen_not_configured():
    controller = make_controller()
    controller.speech_enabled = False

    reply = await make_client(controller)._on_listen(make_update(), make_context(), "")

    assert reply == MSG_SPEECH_NOT_CONFIGURED


async def test_share_requires_result():
    assert await make_client()._on_share(make_update(), make_context(), "") == MSG_NO_RESULT


async def test_share_renders_result():
    controller = make_controller()
    controller.analysis = make_analysis()

    reply = await make_client(controller)._on_share(make_update(), make_context(), "")

    assert "Translated to Kinyarwanda" in reply


async def test_status_reports_state():
    reply = await make_client()._on_status(make_update(), make_context(), "")
    assert "idle" in reply
    assert "enabled" in reply


async def test_clear_dismisses():
    controller = make_controller()

    reply = await make_client(controller)._on_clear(make_update(), make_context(), "")

    controller.dismiss.assert_called_once()
    assert reply == MSG_CLEARED


# ── send before run ───────────────────────────────────────────────────────────


async def test_send_message_before_run_fails():
    assert await make_client().send_message("123456789", "hi") is False


async def test_send_audio_before_run_fails():
    assert await make_client().send_audio("123456789", b"RIFF", "x") is False
