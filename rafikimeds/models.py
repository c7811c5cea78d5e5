from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

from rafikimeds import constants
from rafikimeds.constants import (
    FIELD_DOSAGE,
    FIELD_FREQUENCY,
    FIELD_ID,
    FIELD_IS_ANTIBIOTIC,
    FIELD_MEDICINE_NAME,
    FIELD_PURPOSE,
    FIELD_STORAGE,
    FIELD_TIMESTAMP,
    FIELD_WARNINGS,
)


class Language(str, Enum):
    KINYARWANDA = "Kinyarwanda"
    SWAHILI = "Swahili"
    FRENCH = "French"
    ENGLISH = "English"

    @classmethod
    def parse(cls, text: str) -> "Language":
        """Case-insensitive lookup by value or member name. Raises ValueError."""
        needle = text.strip().lower()
        match [lang for lang in cls if needle in (lang.value.lower(), lang.name.lower())]:
            case [lang]:
                return lang
            case _:
                raise ValueError(f"Unknown language: {text!r}")

    @classmethod
    def names(cls) -> str:
        return ", ".join(lang.value for lang in cls)


class Status(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class ProcessingState:
    status: Status
    message: Optional[str] = None


IDLE_STATE = ProcessingState(Status.IDLE)


@dataclass(frozen=True)
class ExtractedMedication:
    """What the analysis service returns: everything but id and timestamp."""

    medicine_name: str
    purpose: str
    dosage: str
    frequency: str
    warnings: tuple[str, ...]
    storage: str
    is_antibiotic: bool = False


@dataclass(frozen=True)
class MedicationAnalysis:
    id: str
    timestamp: int
    medicine_name: str
    purpose: str
    dosage: str
    frequency: str
    warnings: tuple[str, ...]
    storage: str
    is_antibiotic: bool = False

    @classmethod
    def from_extracted(
        cls, extracted: ExtractedMedication, id: str, timestamp: int
    ) -> "MedicationAnalysis":
        return cls(id=id, timestamp=timestamp, **asdict(extracted))

    def to_dict(self) -> dict[str, Any]:
        """Persisted camelCase shape."""
        return {
            FIELD_ID: self.id,
            FIELD_TIMESTAMP: self.timestamp,
            FIELD_MEDICINE_NAME: self.medicine_name,
            FIELD_PURPOSE: self.purpose,
            FIELD_DOSAGE: self.dosage,
            FIELD_FREQUENCY: self.frequency,
            FIELD_WARNINGS: list(self.warnings),
            FIELD_STORAGE: self.storage,
            FIELD_IS_ANTIBIOTIC: self.is_antibiotic,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MedicationAnalysis":
        """Inverse of to_dict. Raises KeyError/TypeError/ValueError on malformed input."""
        match data:
            case {
                constants.FIELD_ID: str() as entry_id,
                constants.FIELD_TIMESTAMP: int() as timestamp,
                constants.FIELD_WARNINGS: list() as warnings,
            } if entry_id and not isinstance(timestamp, bool):
                pass
            case _:
                raise ValueError(f"Malformed history entry: {data!r}")
        return cls(
            id=entry_id,
            timestamp=timestamp,
            medicine_name=str(data[FIELD_MEDICINE_NAME]),
            purpose=str(data[FIELD_PURPOSE]),
            dosage=str(data[FIELD_DOSAGE]),
            frequency=str(data[FIELD_FREQUENCY]),
            warnings=tuple(map(str, warnings)),
            storage=str(data[FIELD_STORAGE]),
            is_antibiotic=data.get(FIELD_IS_ANTIBIOTIC) is True,
        )
