"""Emoji normalization for IRC: glyphs and custom emoji to shortcodes, then to ASCII."""

from __future__ import annotations

import re

import emoji

# Custom Discord emoji: <:name:id> or animated <a:name:id>
_CUSTOM_EMOJI = re.compile(r"<a?:([A-Za-z0-9_]+):\d+>")
_SHORTCODE = re.compile(r":([a-z0-9_+\-]+):")

# Shortcode -> ASCII smiley, where IRC has a conventional equivalent
SHORTCODE_TO_ASCII: dict[str, str] = {
    "angry": ">:(",
    "broken_heart": "</3",
    "confused": ":/",
    "cry": ":'(",
    "disappointed": ":(",
    "expressionless": "-_-",
    "fearful": "D:",
    "flushed": ":$",
    "frowning": ":(",
    "heart": "<3",
    "innocent": "O:)",
    "joy": ":')",
    "kissing_heart": ":*",
    "laughing": ">:)",
    "neutral_face": ":|",
    "no_mouth": ":#",
    "open_mouth": ":o",
    "slight_frown": ":(",
    "slight_smile": ":)",
    "slightly_frowning_face": ":(",
    "slightly_smiling_face": ":)",
    "smile": ":)",
    "smiley": ":D",
    "smiling_imp": ">:)",
    "stuck_out_tongue": ":P",
    "stuck_out_tongue_winking_eye": ">:P",
    "sunglasses": "B-)",
    "sweat_smile": "':)",
    "wink": ";)",
}


def _shortcode_to_ascii(match: re.Match[str]) -> str:
    return SHORTCODE_TO_ASCII.get(match.group(1), match.group(0))


def normalize_emoji(text: str) -> str:
    """Rewrite emoji so they read on IRC.

    Custom emoji become ``:name:`` and native glyphs their ``:alias:``;
    shortcodes with an ASCII equivalent are then replaced. Anything else
    passes through unchanged.
    """
    if not text:
        return text
    text = _CUSTOM_EMOJI.sub(lambda m: f":{m.group(1)}:", text)
    text = emoji.demojize(text, language="alias")
    return _SHORTCODE.sub(_shortcode_to_ascii, text)
