"""WorkflowController — capture → analyze → display/error state machine, transport-agnostic."""
import logging
import time
import uuid
from typing import Awaitable, Callable, Optional, Union

from rafikimeds.analysis.client import AnalysisClient
from rafikimeds.constants import (
    MSG_ANALYSIS_FAILED,
    MSG_ANALYZING,
    MSG_LOG_ANALYSIS_FAILED,
    MSG_LOG_SPEECH_FAILED,
    MSG_LOG_STALE_RESULT,
)
from rafikimeds.errors import InvalidTransitionError, SpeechError
from rafikimeds.history_store import HistoryStore
from rafikimeds.models import (
    IDLE_STATE,
    Language,
    MedicationAnalysis,
    ProcessingState,
    Status,
)
from rafikimeds.speech.client import PcmAudio, SpeechClient, build_script

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, Callable[[], Awaitable[bytes]]]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _new_id() -> str:
    return uuid.uuid4().hex


class WorkflowController:
    """Owns the analysis state for one session.

    Each capture gets a request number; only the most recently issued request
    may change state, so a slow stale response can never overwrite a newer one.
    """

    def __init__(
        self,
        analysis_client: AnalysisClient,
        history_store: HistoryStore,
        speech_client: Optional[SpeechClient] = None,
        language: Language = Language.KINYARWANDA,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._analysis_client = analysis_client
        self._history_store = history_store
        self._speech_client = speech_client
        self._language = language
        self._clock = clock
        self._id_factory = id_factory
        self._state = IDLE_STATE
        self._analysis: MedicationAnalysis | None = None
        self._history = history_store.load()
        self._last_timestamp = max((e.timestamp for e in self._history), default=0)
        self._latest_request = 0

    # ── display boundary ──────────────────────────────────────────────────────

    @property
    def state(self) -> ProcessingState:
        return self._state

    @property
    def analysis(self) -> MedicationAnalysis | None:
        return self._analysis

    @property
    def history(self) -> tuple[MedicationAnalysis, ...]:
        return self._history

    @property
    def language(self) -> Language:
        return self._language

    @property
    def speech_enabled(self) -> bool:
        return self._speech_client is not None

    # ── language ──────────────────────────────────────────────────────────────

    def set_language(self, language: Language) -> None:
        """Applies to the next capture only; the displayed result is left as is."""
        self._language = language

    # ── transitions ───────────────────────────────────────────────────────────

    async def capture(self, image: ImageSource) -> Optional[ProcessingState]:
        """Analyze a captured image and return the settled state.

        ``image`` is either the complete payload or a coroutine function that
        reads it, so a failed read takes the same error path as a failed
        analysis. Returns None when a newer capture superseded this one.
        """
        self._latest_request += 1
        request = self._latest_request
        language = self._language
        self._analysis = None
        self._state = ProcessingState(Status.ANALYZING, MSG_ANALYZING)
        logger.info("Request #%d: analyzing in %s", request, language.value)

        try:
            image_bytes = image if isinstance(image, bytes) else await image()
            extracted = await self._analysis_client.analyze(image_bytes, language)
        except Exception as exc:
            match request == self._latest_request:
                case True:
                    logger.error(MSG_LOG_ANALYSIS_FAILED, exc.__cause__ or exc)
                    self._state = ProcessingState(Status.ERROR, MSG_ANALYSIS_FAILED)
                    return self._state
                case False:
                    logger.debug(MSG_LOG_STALE_RESULT, request, self._latest_request)
                    return None

        match request == self._latest_request:
            case False:
                logger.debug(MSG_LOG_STALE_RESULT, request, self._latest_request)
                return None
            case True:
                pass

        analysis = MedicationAnalysis.from_extracted(
            extracted, id=self._id_factory(), timestamp=self._next_timestamp()
        )
        try:
            self._history = self._history_store.record(analysis)
        except OSError:
            logger.exception("Could not save %s to history", analysis.id)
        self._analysis = analysis
        self._state = ProcessingState(Status.COMPLETE)
        logger.info("Request #%d: complete — %s", request, analysis.medicine_name)
        return self._state

    def select_history(self, entry_id: str) -> MedicationAnalysis:
        match (self._state.status, self._analysis):
            case (Status.IDLE, None):
                pass
            case (status, _):
                raise InvalidTransitionError(f"Cannot open history while {status.value}")
        entry = self._history_store.find(entry_id)
        match entry:
            case None:
                raise KeyError(entry_id)
            case found:
                self._analysis = found
                self._state = ProcessingState(Status.COMPLETE)
                return found

    def dismiss(self) -> None:
        match self._state.status:
            case Status.ANALYZING:
                raise InvalidTransitionError("Cannot dismiss while analyzing")
            case _:
                self._analysis = None
                self._state = IDLE_STATE

    async def listen(self) -> tuple[MedicationAnalysis, PcmAudio]:
        """Synthesize the displayed result and return it with its audio.

        Raises SpeechError; never touches state.
        """
        match (self._speech_client, self._analysis):
            case (None, _):
                raise SpeechError("No speech client configured")
            case (_, None):
                raise SpeechError("No analysis to read aloud")
            case (client, analysis):
                pass
        try:
            audio = await client.synthesize(build_script(analysis), self._language)
        except SpeechError as exc:
            logger.error(MSG_LOG_SPEECH_FAILED, exc.__cause__ or exc)
            raise
        return analysis, audio

    # ── helpers ───────────────────────────────────────────────────────────────

    def _next_timestamp(self) -> int:
        self._last_timestamp = max(self._clock(), self._last_timestamp + 1)
        return self._last_timestamp
