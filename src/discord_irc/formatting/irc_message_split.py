"""Split long lines for IRC (512 byte line limit) at word boundaries."""

from __future__ import annotations


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _hard_split(word: str, max_bytes: int) -> list[str]:
    """Cut a word longer than max_bytes on character boundaries."""
    pieces: list[str] = []
    current = ""
    for char in word:
        if current and _byte_len(current + char) > max_bytes:
            pieces.append(current)
            current = ""
        current += char
    if current:
        pieces.append(current)
    return pieces


def split_irc_message(content: str, max_bytes: int = 450) -> list[str]:
    """Split content into chunks of at most max_bytes UTF-8 bytes.

    The limit leaves room for "PRIVMSG #channel :" and the CRLF. Breaks at
    spaces where possible; never splits a multi-byte character.
    """
    if not content:
        return []
    if _byte_len(content) <= max_bytes:
        return [content]

    chunks: list[str] = []
    current = ""
    for word in content.split(" "):
        candidate = f"{current} {word}" if current else word
        if _byte_len(candidate) <= max_bytes:
            current = candidate
            continue
        if current:
            chunks.append(current)
        if _byte_len(word) <= max_bytes:
            current = word
        else:
            *full, current = _hard_split(word, max_bytes)
            chunks.extend(full)
    if current:
        chunks.append(current)
    return chunks
