"""Wiring tests for the entry point"""
from rafikimeds.analysis.claude import ClaudeAnalysisClient
from rafikimeds.analysis.openai import OpenAIAnalysisClient
from rafikimeds.config import Config
from rafikimeds.main import build_analysis_client, build_controller
from rafikimeds.models import Language


def make_config(tmp_path, **overrides) -> Config:
    fields = dict(
        telegram_bot_token="token",
        allowed_chat_id="123456789",
        log_level="INFO",
        anthropic_api_key=None,
        openai_api_key="sk-test",
        analysis_backend="auto",
        default_language=Language.FRENCH,
        history_path=str(tmp_path / "history.json"),
        history_max_entries=10,
        analysis_timeout=60.0,
        speech_timeout=60.0,
    )
    fields.update(overrides)
    return Config(**fields)


def test_claude_backend_selected_when_key_present(tmp_path):
    config = make_config(tmp_path, anthropic_api_key="sk-ant")
    assert isinstance(build_analysis_client(config), ClaudeAnalysisClient)


def test_openai_backend_selected_without_anthropic_key(tmp_path):
    assert isinstance(build_analysis_client(make_config(tmp_path)), OpenAIAnalysisClient)


def test_controller_uses_configured_language_and_speech(tmp_path):
    controller = build_controller(make_config(tmp_path))

    assert controller.language == Language.FRENCH
    assert controller.speech_enabled
    assert controller.history == ()


def test_controller_without_openai_key_has_no_speech(tmp_path):
    config = make_config(tmp_path, anthropic_api_key="sk-ant", openai_api_key=None)
    assert not build_controller(config).speech_enabled
