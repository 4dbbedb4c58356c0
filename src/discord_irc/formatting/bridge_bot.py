"""Re-attribute messages that an upstream relay bot posted on IRC.

Relay bots (a game server's chat bridge, say) post as their own nick and
put the real sender as the first word of the line. For nicks listed in
``irc_bridge_bot_names`` the first word becomes the author.
"""

from __future__ import annotations

from collections.abc import Collection


def reattribute(author: str, body: str, bridge_bot_names: Collection[str]) -> tuple[bool, str, str]:
    """Return ``(is_relayed, author, body)``.

    ``bridge_bot_names`` must already be lowercased. A one-word body from a
    relay bot yields that word as author and an empty body.
    """
    if author.lower() not in bridge_bot_names:
        return False, author, body
    words = body.split(" ")
    return True, words[0], " ".join(words[1:])
