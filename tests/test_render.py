from rafikimeds.constants import CARD_ANTIBIOTIC, MSG_HISTORY_EMPTY
from rafikimeds.models import Language, MedicationAnalysis
from rafikimeds.render import render_card, render_history, render_share


def make_analysis(**overrides) -> MedicationAnalysis:
    fields = dict(
        id="abc",
        timestamp=1_700_000_000_000,
        medicine_name="Amoxicillin",
        purpose="Treats infection",
        dosage="1 tablet",
        frequency="Twice daily",
        warnings=("Take with food", "Complete the full course"),
        storage="Cool dry place",
    )
    fields.update(overrides)
    return MedicationAnalysis(**fields)


def test_card_lists_fields_and_warnings_in_order():
    card = render_card(make_analysis())

    assert card.splitlines()[0] == "💊 Amoxicillin"
    assert "🔢 Dose: 1 tablet" in card
    assert "⏰ When: Twice daily" in card
    assert card.index("Take with food") < card.index("Complete the full course")


def test_card_flags_antibiotic():
    assert CARD_ANTIBIOTIC in render_card(make_analysis(is_antibiotic=True))
    assert CARD_ANTIBIOTIC not in render_card(make_analysis())


def test_card_without_warnings_has_no_warning_header():
    assert "Warnings" not in render_card(make_analysis(warnings=()))


def test_share_text_names_language():
    text = render_share(make_analysis(), Language.SWAHILI)

    assert "*Medicine:* Amoxicillin" in text
    assert "Take with food, Complete the full course" in text
    assert text.endswith("_Translated to Swahili_")


def test_history_empty():
    assert render_history(()) == MSG_HISTORY_EMPTY


def test_history_numbers_entries_newest_first():
    text = render_history((make_analysis(medicine_name="New"), make_analysis(medicine_name="Old")))

    lines = text.splitlines()
    assert lines[0] == "Last 2 scans:"
    assert lines[1].startswith("1. New (")
    assert lines[2].startswith("2. Old (")
    assert "/open" in text
