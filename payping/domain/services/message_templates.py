from __future__ import annotations

from payping.domain.entities.reminder import ReminderChannel, ReminderKind

DEFAULT_NAME = "there"

MESSAGE_TEMPLATES: dict[tuple[ReminderKind, ReminderChannel], str] = {
    (ReminderKind.FOLLOWUP, ReminderChannel.WHATSAPP): (
        "Hi {name}! Just checking in on our conversation. "
        "Let me know if you have any questions!"
    ),
    (ReminderKind.FOLLOWUP, ReminderChannel.EMAIL): (
        "Hi {name},\n\nI wanted to follow up on our recent conversation. "
        "Please let me know if you have any questions or if there's anything I can help with."
        "\n\nBest regards"
    ),
    (ReminderKind.PAYMENT, ReminderChannel.WHATSAPP): (
        "Hi {name}! This is a friendly reminder about the pending payment. "
        "Please let me know if you have any questions."
    ),
    (ReminderKind.PAYMENT, ReminderChannel.EMAIL): (
        "Hi {name},\n\nThis is a friendly reminder about your pending payment. "
        "Please let me know if you have any questions or concerns.\n\nBest regards"
    ),
}


def render_message(
    kind: ReminderKind | str,
    channel: ReminderChannel | str,
    client_name: str | None = None,
) -> str:
    """Default reminder text for ``(kind, channel)`` with the client's name filled in."""
    template = MESSAGE_TEMPLATES[(ReminderKind(kind), ReminderChannel(channel))]
    name = client_name.strip() if client_name and client_name.strip() else DEFAULT_NAME
    return template.replace("{name}", name)
