"""Error kinds raised at the core boundary."""


class RafikiError(Exception):
    """Base for all RafikiMeds errors."""


class AnalysisError(RafikiError):
    """Image analysis or translation failed. The technical cause is chained."""


class SpeechError(RafikiError):
    """Speech synthesis or audio decoding failed. The technical cause is chained."""


class InvalidTransitionError(RafikiError):
    """The workflow refused an operation in its current state."""
