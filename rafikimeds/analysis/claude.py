"""ClaudeAnalysisClient — Anthropic Claude vision backend."""
from anthropic import AsyncAnthropic

from rafikimeds.analysis.client import AnalysisClient
from rafikimeds.constants import CLAUDE_ANALYSIS_MAX_TOKENS, CLAUDE_ANALYSIS_MODEL
from rafikimeds.errors import AnalysisError


class ClaudeAnalysisClient(AnalysisClient):

    name = "claude"

    def __init__(self, api_key: str, timeout: float | None = None) -> None:
        self._api_key = api_key
        self._timeout = timeout

    async def _request(self, image_data: str, mime_type: str, prompt: str) -> str:
        client = AsyncAnthropic(api_key=self._api_key, timeout=self._timeout)
        message = await client.messages.create(
            model=CLAUDE_ANALYSIS_MODEL,
            max_tokens=CLAUDE_ANALYSIS_MAX_TOKENS,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": mime_type,
                                "data": image_data,
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        )
        text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )
        match text.strip():
            case "":
                raise AnalysisError("Claude returned an empty response")
            case reply:
                return reply
