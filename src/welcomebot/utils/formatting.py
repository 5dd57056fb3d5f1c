"""Slack text helpers"""

from typing import Optional

# Slack control characters that must be escaped in literal text
_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)


def escape_text(text: str) -> str:
    """Escape &, < and > so Slack shows them literally"""
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def format_outgoing(text: str, raw: bool) -> str:
    """Raw text is sent verbatim, anything else is escaped"""
    return text if raw else escape_text(text)


def mention_token(user_id: str) -> str:
    return f"<@{user_id}>"


def normalize_command(text: str, bot_user_id: Optional[str]) -> str:
    """
    Strip a leading `<@BOTID> ` mention, trim whitespace and lower-case.

    Without a bot user id there is no prefix to strip.
    """
    if bot_user_id:
        prefix = f"{mention_token(bot_user_id)} "
        if text.startswith(prefix):
            text = text[len(prefix):]
    return text.strip().lower()


def labeled(label: str, body: str) -> str:
    return f"*{label}*:\n\n{body}"
