"""Render Discord message content as a single IRC line."""

from __future__ import annotations

import re
from collections.abc import Callable

from discord_irc.errors import UnresolvedReferenceError
from discord_irc.formatting.emoji import normalize_emoji

# <@id> or <@!id> (nickname mention)
_USER_MENTION = re.compile(r"<@!?(\d+)>")
_CHANNEL_REF = re.compile(r"<#(\d+)>")
_LINE_BREAK = re.compile(r"\r\n|\n|\r")

NameResolver = Callable[[str], "str | None"]


def resolve_user_mentions(content: str, resolve_user: NameResolver) -> str:
    """Replace user mentions with @name. Unresolved mentions stay as written."""

    def _sub(match: re.Match[str]) -> str:
        name = resolve_user(match.group(1))
        return f"@{name}" if name else match.group(0)

    return _USER_MENTION.sub(_sub, content)


def resolve_channel_refs(content: str, resolve_channel: NameResolver) -> str:
    """Replace channel references with #name.

    Raises:
        UnresolvedReferenceError: a referenced channel has no known name.
    """

    def _sub(match: re.Match[str]) -> str:
        channel_id = match.group(1)
        name = resolve_channel(channel_id)
        if not name:
            raise UnresolvedReferenceError(channel_id)
        return f"#{name}"

    return _CHANNEL_REF.sub(_sub, content)


def discord_to_irc(
    content: str,
    resolve_user: NameResolver,
    resolve_channel: NameResolver,
) -> str:
    """Rewrite Discord content for IRC.

    Steps run in order, each on the output of the previous one: user
    mentions, line breaks to spaces, channel references, emoji.
    """
    text = resolve_user_mentions(content, resolve_user)
    text = _LINE_BREAK.sub(" ", text)
    text = resolve_channel_refs(text, resolve_channel)
    return normalize_emoji(text)
