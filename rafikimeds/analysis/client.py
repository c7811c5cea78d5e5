"""AnalysisClient — abstract base for medicine-image analysis backends."""
import base64
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from rafikimeds.constants import (
    ANALYSIS_PROMPT,
    FIELD_DOSAGE,
    FIELD_FREQUENCY,
    FIELD_IS_ANTIBIOTIC,
    FIELD_MEDICINE_NAME,
    FIELD_PURPOSE,
    FIELD_STORAGE,
    FIELD_WARNINGS,
    REQUIRED_FIELDS,
)
from rafikimeds.errors import AnalysisError
from rafikimeds.models import ExtractedMedication, Language

logger = logging.getLogger(__name__)

_IMAGE_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


# ── pure helpers (module-level so tests can import them directly) ──────────────


def sniff_mime_type(image_bytes: bytes) -> str:
    """Return the MIME type of an image payload. Raises AnalysisError when unreadable."""
    match image_bytes:
        case b"":
            raise AnalysisError("Image payload is empty")
        case data if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
            return "image/webp"
        case data:
            for signature, mime_type in _IMAGE_SIGNATURES:
                if data.startswith(signature):
                    return mime_type
            raise AnalysisError("Image payload is not a recognised image format")


def build_prompt(language: Language) -> str:
    return ANALYSIS_PROMPT.format(language=language.value)


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match stripped.startswith("```"):
        case True:
            body = stripped.split("\n", 1)[1] if "\n" in stripped else ""
            return body.rsplit("```", 1)[0].strip()
        case False:
            return stripped


def _as_text(value: Any) -> str:
    match value:
        case None:
            return ""
        case str() as s:
            return s.strip()
        case other:
            return str(other).strip()


def _as_warnings(value: Any) -> tuple[str, ...]:
    match value:
        case _ if not value:
            return ()
        case str() as s:
            return (s.strip(),) if s.strip() else ()
        case list() | tuple():
            return tuple(w.strip() for w in value if isinstance(w, str) and w.strip())
        case int() | float() if not isinstance(value, bool):
            return (str(value),)
        case other:
            raise AnalysisError(f"Warnings have unexpected shape: {type(other).__name__}")


def _as_flag(value: Any) -> bool:
    match value:
        case bool() as b:
            return b
        case str() as s if s.strip().lower() in ("true", "false"):
            return s.strip().lower() == "true"
        case _:
            return False


def parse_analysis(raw: str) -> ExtractedMedication:
    """Validate the service's JSON reply. Raises AnalysisError, never returns a partial result."""
    try:
        data = json.loads(_strip_code_fence(raw))
    except (json.JSONDecodeError, TypeError) as exc:
        raise AnalysisError("Analysis response is not valid JSON") from exc

    match data:
        case dict():
            pass
        case _:
            raise AnalysisError(f"Analysis response is not an object: {type(data).__name__}")

    text_fields = [key for key in REQUIRED_FIELDS if key != FIELD_WARNINGS]
    match [key for key in text_fields if isinstance(data.get(key), (dict, list))]:
        case []:
            pass
        case nested:
            raise AnalysisError(f"Analysis response has non-text fields: {', '.join(nested)}")

    missing = [key for key in REQUIRED_FIELDS if key not in data]
    blank = [key for key in text_fields if key in data and not _as_text(data[key])]
    match missing + blank:
        case []:
            pass
        case bad:
            raise AnalysisError(f"Analysis response missing required fields: {', '.join(bad)}")

    return ExtractedMedication(
        medicine_name=_as_text(data[FIELD_MEDICINE_NAME]),
        purpose=_as_text(data[FIELD_PURPOSE]),
        dosage=_as_text(data[FIELD_DOSAGE]),
        frequency=_as_text(data[FIELD_FREQUENCY]),
        warnings=_as_warnings(data[FIELD_WARNINGS]),
        storage=_as_text(data[FIELD_STORAGE]),
        is_antibiotic=_as_flag(data.get(FIELD_IS_ANTIBIOTIC)),
    )


# ── client ────────────────────────────────────────────────────────────────────


class AnalysisClient(ABC):
    """Sends a medicine photo to a hosted model and returns the validated extraction.

    Every failure, from an unreadable image to a malformed reply, surfaces as
    AnalysisError with the technical cause chained.
    """

    name: str = "analysis"

    async def analyze(self, image_bytes: bytes, language: Language) -> ExtractedMedication:
        mime_type = sniff_mime_type(image_bytes)
        image_data = base64.standard_b64encode(image_bytes).decode()
        try:
            raw = await self._request(image_data, mime_type, build_prompt(language))
        except AnalysisError:
            raise
        except Exception as exc:
            raise AnalysisError(f"{self.name} request failed: {exc}") from exc
        logger.debug("%s raw response: %s", self.name, raw)
        return parse_analysis(raw)

    @abstractmethod
    async def _request(self, image_data: str, mime_type: str, prompt: str) -> str:
        """Send base64 image data plus prompt; return the raw text reply. Raises on failure."""
        ...
