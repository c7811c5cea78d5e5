"""Entry point — wires Config → clients → WorkflowController → TelegramClient."""
import logging
from pathlib import Path

from rich.logging import RichHandler

from rafikimeds.analysis.claude import ClaudeAnalysisClient
from rafikimeds.analysis.client import AnalysisClient
from rafikimeds.analysis.openai import OpenAIAnalysisClient
from rafikimeds.config import Config
from rafikimeds.constants import ANALYSIS_BACKEND_CLAUDE, MSG_BOT_STARTING
from rafikimeds.history_store import HistoryStore
from rafikimeds.speech.openai import OpenAISpeechClient
from rafikimeds.storage import JsonFileStorage
from rafikimeds.telegram.client import TelegramClient
from rafikimeds.workflow import WorkflowController


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def build_analysis_client(config: Config) -> AnalysisClient:
    match config.resolved_analysis_backend():
        case backend if backend == ANALYSIS_BACKEND_CLAUDE:
            return ClaudeAnalysisClient(config.anthropic_api_key, timeout=config.analysis_timeout)
        case _:
            return OpenAIAnalysisClient(config.openai_api_key, timeout=config.analysis_timeout)


def build_controller(config: Config) -> WorkflowController:
    speech = (
        OpenAISpeechClient(config.openai_api_key, timeout=config.speech_timeout)
        if config.speech_enabled
        else None
    )
    history = HistoryStore(
        JsonFileStorage(Path(config.history_path)),
        max_entries=config.history_max_entries,
    )
    return WorkflowController(
        build_analysis_client(config),
        history,
        speech_client=speech,
        language=config.default_language,
    )


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING)

    controller = build_controller(config)
    client = TelegramClient(
        config, controller, analysis_backend=config.resolved_analysis_backend()
    )
    client.run()


if __name__ == "__main__":
    main()
