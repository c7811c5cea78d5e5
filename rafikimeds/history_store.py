import json
import logging

from rafikimeds.constants import HISTORY_KEY, HISTORY_MAX_ENTRIES
from rafikimeds.models import MedicationAnalysis
from rafikimeds.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class HistoryStore:
    """Newest-first, bounded cache of past analyses, written through on every record."""

    def __init__(self, storage: KeyValueStorage, max_entries: int = HISTORY_MAX_ENTRIES) -> None:
        self._storage = storage
        self._max = max_entries
        self._entries: tuple[MedicationAnalysis, ...] = ()

    @property
    def entries(self) -> tuple[MedicationAnalysis, ...]:
        return self._entries

    def load(self) -> tuple[MedicationAnalysis, ...]:
        raw = self._storage.get(HISTORY_KEY)
        match raw:
            case None:
                self._entries = ()
            case text:
                try:
                    data = json.loads(text)
                    match data:
                        case list():
                            pass
                        case _:
                            raise ValueError(f"expected a list, got {type(data).__name__}")
                    self._entries = tuple(map(MedicationAnalysis.from_dict, data))[: self._max]
                except (ValueError, KeyError, TypeError) as e:
                    logger.warning("History load failed: %s, starting fresh", e)
                    self._entries = ()
        logger.info("Loaded %d history entries", len(self._entries))
        return self._entries

    def record(self, analysis: MedicationAnalysis) -> tuple[MedicationAnalysis, ...]:
        entries = ((analysis,) + self._entries)[: self._max]
        self._storage.set(HISTORY_KEY, json.dumps([e.to_dict() for e in entries]))
        self._entries = entries
        return entries

    def find(self, entry_id: str) -> MedicationAnalysis | None:
        return next((e for e in self._entries if e.id == entry_id), None)
