"""Render an IRC line for Discord: strip colors, bold the author."""

from __future__ import annotations

from collections.abc import Collection

from discord_irc.formatting.bridge_bot import reattribute

COLOR = "\x03"
_DIGITS = "0123456789"
# "00"-"15"; "16" and up read as a one-digit code followed by a literal digit
_TWO_DIGIT_CODES = frozenset(f"{n:02d}" for n in range(16))


def _color_code_length(text: str, start: int) -> int:
    """Length of the color code at ``start`` (just after the control byte), 0 if none."""
    if text[start : start + 2] in _TWO_DIGIT_CODES:
        return 2
    if start < len(text) and text[start] in _DIGITS:
        return 1
    return 0


def _strip_once(text: str) -> str:
    result: list[str] = []
    i = 0
    while i < len(text):
        if text[i] == COLOR:
            length = _color_code_length(text, i + 1)
            if length:
                i += 1 + length
                continue
        result.append(text[i])
        i += 1
    return "".join(result)


def strip_colors(text: str) -> str:
    """Remove every control byte plus color code 0-15.

    A control byte with no valid code after it is kept. Scans again while a
    removal leaves such a byte next to a digit ("\\x03\\x0355"), so the result
    never contains a strippable code.
    """
    while COLOR in text:
        stripped = _strip_once(text)
        if stripped == text:
            break
        text = stripped
    return text


def irc_to_discord(author: str, text: str, bridge_bot_names: Collection[str] = ()) -> str:
    """Format an IRC line as a Discord message.

    ``**author:** text`` normally; ``**sender** rest`` without the colon when
    the author is a configured relay bot and the line was re-attributed.
    """
    author = strip_colors(author)
    text = strip_colors(text)
    relayed, author, text = reattribute(author, text, bridge_bot_names)
    if relayed:
        return f"**{author}** {text}"
    return f"**{author}:** {text}"
