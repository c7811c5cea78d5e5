"""SpeechClient — abstract base for text-to-speech backends, plus script and PCM helpers."""
import base64
import binascii
import io
import sys
import wave
from abc import ABC, abstractmethod
from array import array
from dataclasses import dataclass

from rafikimeds.constants import (
    FLAC_MAGIC,
    FLAC_STREAMINFO,
    FLAC_STREAMINFO_LENGTH,
    ID3_MAGIC,
    ID3_VERSIONS,
    OGG_CAPTURE_PATTERN,
    PCM_CHANNELS,
    PCM_FULL_SCALE,
    PCM_SAMPLE_RATE,
    PCM_SAMPLE_WIDTH,
    WAV_FORM_TYPE,
    WAV_RIFF_MAGIC,
)
from rafikimeds.errors import SpeechError
from rafikimeds.models import Language, MedicationAnalysis


@dataclass(frozen=True)
class PcmAudio:
    """Decoded linear PCM: signed 16-bit, mono, 24 kHz."""

    samples: tuple[int, ...]
    sample_rate: int = PCM_SAMPLE_RATE
    channels: int = PCM_CHANNELS

    @property
    def duration_seconds(self) -> float:
        return len(self.samples) / self.sample_rate

    def to_float(self) -> list[float]:
        return [s / PCM_FULL_SCALE for s in self.samples]

    def to_wav(self) -> bytes:
        pcm = array("h", self.samples)
        if sys.byteorder == "big":
            pcm.byteswap()
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wav:
            wav.setnchannels(self.channels)
            wav.setsampwidth(PCM_SAMPLE_WIDTH)
            wav.setframerate(self.sample_rate)
            wav.writeframes(pcm.tobytes())
        return buffer.getvalue()


# ── pure helpers ──────────────────────────────────────────────────────────────


def _sentence(text: str) -> str:
    return text.strip().rstrip(".").strip()


def build_script(analysis: MedicationAnalysis) -> str:
    """Reading script: name, purpose, dose sentence, then warnings in display order."""
    parts = [
        analysis.medicine_name,
        analysis.purpose,
        f"Take {_sentence(analysis.dosage)}, {_sentence(analysis.frequency)}",
        *analysis.warnings,
    ]
    sentences = [s for s in map(_sentence, parts) if s]
    return ". ".join(sentences) + "."


def _is_container(raw: bytes) -> bool:
    """True only for a structurally confirmed WAV, Ogg, FLAC or ID3-tagged header."""
    if raw.startswith(WAV_RIFF_MAGIC):
        return raw[8:12] == WAV_FORM_TYPE
    if raw.startswith(OGG_CAPTURE_PATTERN):
        return True
    if raw.startswith(FLAC_MAGIC) and len(raw) >= 8:
        return (
            raw[4] & 0x7F == FLAC_STREAMINFO
            and int.from_bytes(raw[5:8], "big") == FLAC_STREAMINFO_LENGTH
        )
    if raw.startswith(ID3_MAGIC) and len(raw) >= 5:
        return raw[3] in ID3_VERSIONS and raw[4] != 0xFF
    return False


def decode_pcm(data: bytes | str) -> PcmAudio:
    """Decode raw (or base64-encoded) 16-bit little-endian mono PCM. Raises SpeechError."""
    match data:
        case str() as encoded:
            try:
                raw = base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise SpeechError("Audio payload is not valid base64") from exc
        case bytes() | bytearray():
            raw = bytes(data)
        case _:
            raise SpeechError(f"Unsupported audio payload type: {type(data).__name__}")

    match raw:
        case b"":
            raise SpeechError("Audio payload is empty")
        case _ if _is_container(raw):
            raise SpeechError("Audio payload is an encoded container, expected raw PCM")
        case _ if len(raw) % PCM_SAMPLE_WIDTH:
            raise SpeechError(f"Audio payload has odd length {len(raw)}, expected 16-bit samples")

    pcm = array("h")
    pcm.frombytes(raw)
    if sys.byteorder == "big":
        pcm.byteswap()
    return PcmAudio(samples=tuple(pcm))


# ── client ────────────────────────────────────────────────────────────────────


class SpeechClient(ABC):

    name: str = "speech"

    async def synthesize(self, script: str, language: Language) -> PcmAudio:
        """Speak script in language. Raises SpeechError on any failure; never caches."""
        match script.strip():
            case "":
                raise SpeechError("Speech script is empty")
            case _:
                pass
        try:
            payload = await self._request(script, language)
        except SpeechError:
            raise
        except Exception as exc:
            raise SpeechError(f"{self.name} request failed: {exc}") from exc
        return decode_pcm(payload)

    @abstractmethod
    async def _request(self, script: str, language: Language) -> bytes | str:
        """Return raw or base64 PCM audio for script. Raises on failure."""
        ...
