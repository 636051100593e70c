from typing import Any, Dict, Union

from events.models import NotificationDetails

# Slack fields rendered as mrkdwn in attachments
MRKDWN_FIELDS = ["pretext", "text", "fields"]

Payload = Union[Dict[str, Any], str]


def format_new_lines(value: Any) -> Any:
    """Normalize Windows line endings in strings, recursing into dicts and lists."""
    if isinstance(value, str):
        return value.replace("\r\n", "\n")
    if isinstance(value, dict):
        return {key: format_new_lines(item) for key, item in value.items()}
    if isinstance(value, list):
        return [format_new_lines(item) for item in value]
    return value


class NotificationMessageBuilder:
    @staticmethod
    def to_attachment(details: NotificationDetails) -> Dict[str, Any]:
        """Rich attachment for transports that render structured messages."""
        attachment = format_new_lines(details.to_attachment())
        attachment['mrkdwn_in'] = list(MRKDWN_FIELDS)
        return attachment

    @staticmethod
    def to_plain_text(details: NotificationDetails) -> str:
        return format_new_lines(details.fallback)

    @staticmethod
    def build_payload(details: NotificationDetails, rich: bool) -> Payload:
        """Render once per notification; the same payload goes to every recipient."""
        if rich:
            return NotificationMessageBuilder.to_attachment(details)
        return NotificationMessageBuilder.to_plain_text(details)
