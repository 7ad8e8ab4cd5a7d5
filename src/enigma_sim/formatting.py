"""enigma_sim.formatting.

Output layout helpers.

Converted messages are traditionally written in blocks of five symbols
(``QVPQS OKOIL PUBKJ ZPISF XDW``); the last block may be shorter. This module
only lays text out, it never validates symbols.

"""

from __future__ import annotations

DEFAULT_GROUP_SIZE = 5


def group_symbols(text: str, size: int = DEFAULT_GROUP_SIZE) -> list[str]:
    """Split `text` into consecutive blocks of `size` symbols.

    Args:
        text: Symbols to split.
        size: Block length; must be positive.

    Returns:
        The blocks, the last one possibly shorter. Empty for empty `text`.

    """
    if size <= 0:
        raise ValueError(f"Group size must be positive, got {size}")
    return [text[i : i + size] for i in range(0, len(text), size)]


def format_message(text: str, size: int = DEFAULT_GROUP_SIZE) -> str:
    """Return `text` as space-separated blocks on a single line."""
    return " ".join(group_symbols(text, size))


def format_groups(groups: list[str], per_line: int) -> str:
    """Wrap blocks into lines of at most `per_line` blocks.

    Returns:
        A newline-terminated string (just ``"\\n"`` when `groups` is empty).

    """
    lines: list[str] = []
    for i in range(0, len(groups), per_line):
        lines.append(" ".join(groups[i : i + per_line]))
    return "\n".join(lines) + "\n"
