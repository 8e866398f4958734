"""Reminder text formatting."""

from __future__ import annotations

from fmms.services.reminder_service import REMINDER_TITLE, build_medication_reminder


def test_reminder_without_instructions() -> None:
    title, message = build_medication_reminder(
        name="Lisinopril", dosage="10mg", instructions=None
    )
    assert title == REMINDER_TITLE == "Medication Reminder"
    assert message == "Time to take Lisinopril (10mg)"


def test_reminder_appends_instructions() -> None:
    _, message = build_medication_reminder(
        name="Metformin", dosage="500mg", instructions="  Take with food "
    )
    assert message == "Time to take Metformin (500mg)\n\nInstructions: Take with food"


def test_blank_instructions_are_ignored() -> None:
    _, message = build_medication_reminder(name="Zinc", dosage="", instructions="   ")
    assert message == "Time to take Zinc ()"
