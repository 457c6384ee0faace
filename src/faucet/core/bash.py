"""Shell helpers: quoting for command reconstruction and bashlex-based inspection."""

from __future__ import annotations

import bashlex


def bash_quote(s: str) -> str:
    """Quote a string for safe use in sh.

    Uses single quotes, with escape handling for embedded single quotes.
    Returns '' for empty strings. Returns unquoted if no special chars.
    """
    if not s:
        return "''"
    if all(c.isalnum() or c in "-_./=@:" for c in s):
        return s
    return "'" + s.replace("'", "'\"'\"'") + "'"


def bash_join(tokens: list[str]) -> str:
    """Join argv tokens into one shell string for sh -c."""
    return " ".join(bash_quote(t) for t in tokens)


def _parse(command: str) -> list | None:
    try:
        return bashlex.parse(command)
    except Exception:  # bashlex raises assorted errors on syntax it doesn't support
        return None


def is_parseable(command: str) -> bool:
    """True if bashlex understands the command."""
    return bool(command.strip()) and _parse(command) is not None


def _first_word(node) -> str | None:
    kind = getattr(node, "kind", None)
    if kind == "command":
        for part in node.parts:
            if part.kind == "word":
                return part.word
        return None
    for child in getattr(node, "parts", None) or getattr(node, "list", None) or []:
        word = _first_word(child)
        if word is not None:
            return word
    return None


def program_name(command: str) -> str | None:
    """Return the program a shell command runs first, skipping VAR=val prefixes.

    "FOO=1 dmenu -l 20 | tee x" -> "dmenu". None if unparseable.
    """
    nodes = _parse(command)
    if not nodes:
        return None
    for node in nodes:
        word = _first_word(node)
        if word is not None:
            return word
    return None
