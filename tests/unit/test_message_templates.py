import pytest

from payping.domain.entities.reminder import ReminderChannel, ReminderKind
from payping.domain.services.message_templates import MESSAGE_TEMPLATES, render_message


@pytest.mark.parametrize("kind", list(ReminderKind))
@pytest.mark.parametrize("channel", list(ReminderChannel))
def test_every_combination_has_a_template(kind, channel):
    text = render_message(kind, channel, "Ana")
    assert "{name}" not in text
    assert "Ana" in text
    assert (kind, channel) in MESSAGE_TEMPLATES


def test_email_templates_are_multiline():
    assert "\n\n" in render_message(ReminderKind.FOLLOWUP, ReminderChannel.EMAIL, "Ana")
    assert "\n" not in render_message(ReminderKind.FOLLOWUP, ReminderChannel.WHATSAPP, "Ana")


def test_missing_name_falls_back():
    assert render_message("payment", "whatsapp", None).startswith("Hi there!")
    assert render_message("payment", "email", "   ").startswith("Hi there,")
