"""Plain-text rendering of workflow state for the chat transport."""
from datetime import datetime

from rafikimeds.constants import (
    CARD_ANTIBIOTIC,
    CARD_DOSAGE,
    CARD_FOOTER,
    CARD_FREQUENCY,
    CARD_MEDICINE,
    CARD_PURPOSE,
    CARD_STORAGE,
    CARD_WARNING_ITEM,
    CARD_WARNINGS,
    HISTORY_TIME_FORMAT,
    MSG_HISTORY_EMPTY,
    MSG_HISTORY_FOOTER,
    MSG_HISTORY_HEADER,
    MSG_HISTORY_ITEM,
    SHARE_TEXT,
)
from rafikimeds.models import Language, MedicationAnalysis


def render_card(analysis: MedicationAnalysis) -> str:
    lines = [CARD_MEDICINE % analysis.medicine_name, CARD_PURPOSE % analysis.purpose]
    if analysis.is_antibiotic:
        lines.append(CARD_ANTIBIOTIC)
    lines += ["", CARD_DOSAGE % analysis.dosage, CARD_FREQUENCY % analysis.frequency]
    match analysis.warnings:
        case ():
            pass
        case warnings:
            lines += ["", CARD_WARNINGS, *(CARD_WARNING_ITEM % w for w in warnings)]
    lines += ["", CARD_STORAGE % analysis.storage, "", CARD_FOOTER]
    return "\n".join(lines)


def render_share(analysis: MedicationAnalysis, language: Language) -> str:
    return SHARE_TEXT % (
        analysis.medicine_name,
        analysis.purpose,
        analysis.dosage,
        analysis.frequency,
        ", ".join(analysis.warnings),
        language.value,
    )


def _format_time(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime(HISTORY_TIME_FORMAT)


def render_history(history: tuple[MedicationAnalysis, ...]) -> str:
    match history:
        case ():
            return MSG_HISTORY_EMPTY
        case entries:
            lines = [MSG_HISTORY_HEADER % len(entries)]
            lines += [
                MSG_HISTORY_ITEM % (i, e.medicine_name, _format_time(e.timestamp))
                for i, e in enumerate(entries, start=1)
            ]
            lines.append(MSG_HISTORY_FOOTER)
            return "\n".join(lines)
