"""OpenAIAnalysisClient — OpenAI GPT-4o vision backend."""
from openai import AsyncOpenAI

from rafikimeds.analysis.client import AnalysisClient
from rafikimeds.constants import OPENAI_ANALYSIS_MODEL
from rafikimeds.errors import AnalysisError


class OpenAIAnalysisClient(AnalysisClient):

    name = "openai"

    def __init__(self, api_key: str, timeout: float | None = None) -> None:
        self._api_key = api_key
        self._timeout = timeout

    async def _request(self, image_data: str, mime_type: str, prompt: str) -> str:
        client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        response = await client.chat.completions.create(
            model=OPENAI_ANALYSIS_MODEL,
            response_format={"type": "json_object"},
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{image_data}"},
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        )
        content = response.choices[0].message.content
        match content.strip() if content else "":
            case "":
                raise AnalysisError("OpenAI returned an empty response")
            case reply:
                return reply
