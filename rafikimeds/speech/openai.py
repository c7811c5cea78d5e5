"""OpenAISpeechClient — OpenAI text-to-speech backend (raw PCM output)."""
from openai import AsyncOpenAI

from rafikimeds.constants import (
    OPENAI_SPEECH_FORMAT,
    OPENAI_SPEECH_MODEL,
    OPENAI_SPEECH_VOICE,
    SPEECH_INSTRUCTIONS,
)
from rafikimeds.models import Language
from rafikimeds.speech.client import SpeechClient


class OpenAISpeechClient(SpeechClient):

    name = "openai"

    def __init__(self, api_key: str, timeout: float | None = None) -> None:
        self._api_key = api_key
        self._timeout = timeout

    async def _request(self, script: str, language: Language) -> bytes:
        client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        response = await client.audio.speech.create(
            model=OPENAI_SPEECH_MODEL,
            voice=OPENAI_SPEECH_VOICE,
            input=script,
            instructions=SPEECH_INSTRUCTIONS.format(language=language.value),
            response_format=OPENAI_SPEECH_FORMAT,
        )
        return response.content
