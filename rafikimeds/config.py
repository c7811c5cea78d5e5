from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from rafikimeds.constants import (
    ANALYSIS_BACKEND_AUTO,
    ANALYSIS_BACKEND_CLAUDE,
    ANALYSIS_BACKEND_OPENAI,
    ANALYSIS_BACKENDS,
    DEFAULT_HISTORY_PATH,
    HISTORY_MAX_ENTRIES,
)
from rafikimeds.models import Language


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    allowed_chat_id: str
    log_level: str
    anthropic_api_key: Optional[str]
    openai_api_key: Optional[str]
    analysis_backend: str
    default_language: Language
    history_path: str
    history_max_entries: int
    analysis_timeout: float
    speech_timeout: float

    @property
    def speech_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        chat_id = os.getenv("ALLOWED_CHAT_ID")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY") or None
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        backend = os.getenv("ANALYSIS_BACKEND", ANALYSIS_BACKEND_AUTO).strip().lower()
        raw_language = os.getenv("DEFAULT_LANGUAGE", Language.KINYARWANDA.value)
        history_path = os.getenv("HISTORY_PATH", DEFAULT_HISTORY_PATH)
        history_max = os.getenv("HISTORY_MAX_ENTRIES", str(HISTORY_MAX_ENTRIES))
        analysis_timeout = os.getenv("ANALYSIS_TIMEOUT", "60")
        speech_timeout = os.getenv("SPEECH_TIMEOUT", "60")

        try:
            language = Language.parse(raw_language)
        except ValueError:
            raise ValueError(
                f"DEFAULT_LANGUAGE must be one of: {Language.names()}"
            ) from None

        return cls._validate(
            telegram_bot_token=token,
            allowed_chat_id=chat_id,
            log_level=log_level,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
            analysis_backend=backend,
            default_language=language,
            history_path=history_path,
            history_max_entries=int(history_max),
            analysis_timeout=float(analysis_timeout),
            speech_timeout=float(speech_timeout),
        )

    @staticmethod
    def _validate(
        telegram_bot_token: Optional[str],
        allowed_chat_id: Optional[str],
        log_level: str,
        anthropic_api_key: Optional[str],
        openai_api_key: Optional[str],
        analysis_backend: str,
        default_language: Language,
        history_path: str,
        history_max_entries: int,
        analysis_timeout: float,
        speech_timeout: float,
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match allowed_chat_id:
            case None | "":
                raise ValueError("ALLOWED_CHAT_ID must be set in .env")
            case _:
                pass

        match (analysis_backend, anthropic_api_key, openai_api_key):
            case (backend, _, _) if backend not in ANALYSIS_BACKENDS:
                raise ValueError(f"ANALYSIS_BACKEND must be one of: {', '.join(ANALYSIS_BACKENDS)}")
            case (_, None, None):
                raise ValueError("ANTHROPIC_API_KEY or OPENAI_API_KEY must be set in .env")
            case (backend, None, _) if backend == ANALYSIS_BACKEND_CLAUDE:
                raise ValueError("ANALYSIS_BACKEND=claude requires ANTHROPIC_API_KEY")
            case (backend, _, None) if backend == ANALYSIS_BACKEND_OPENAI:
                raise ValueError("ANALYSIS_BACKEND=openai requires OPENAI_API_KEY")
            case _:
                pass

        match history_max_entries:
            case n if n < 1:
                raise ValueError("HISTORY_MAX_ENTRIES must be at least 1")
            case _:
                pass

        return Config(
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id,
            log_level=log_level,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
            analysis_backend=analysis_backend,
            default_language=default_language,
            history_path=history_path,
            history_max_entries=history_max_entries,
            analysis_timeout=analysis_timeout,
            speech_timeout=speech_timeout,
        )

    def resolved_analysis_backend(self) -> str:
        """'auto' picks Claude when its key is set, otherwise OpenAI."""
        match (self.analysis_backend, self.anthropic_api_key):
            case (backend, str() as k) if backend == ANALYSIS_BACKEND_AUTO and k:
                return ANALYSIS_BACKEND_CLAUDE
            case (backend, _) if backend == ANALYSIS_BACKEND_AUTO:
                return ANALYSIS_BACKEND_OPENAI
            case (backend, _):
                return backend
