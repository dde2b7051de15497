"""Text heuristics shared by the reasoning engine and the response validator.

These are deliberately coarse: token-set overlap stands in for semantic
equivalence and fixed phrase pairs stand in for contradiction detection.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

# mcp_* tokens are always recognised in addition to the configured names
_MCP_TOKEN = r"mcp_\w+"


def tokenize(text: str) -> set[str]:
    """Lowercase ``text`` and split it on whitespace into a token set.

    Examples:
        >>> sorted(tokenize("Read the  FILE read"))
        ['file', 'read', 'the']
    """
    return set(text.lower().split())


def jaccard_similarity(first: str, second: str) -> float:
    """Token-set Jaccard similarity of two texts.

    Returns 0.0 when both texts are empty.

    Examples:
        >>> jaccard_similarity("the file exists", "the file exists")
        1.0
        >>> jaccard_similarity("a b", "c d")
        0.0
    """
    tokens_a = tokenize(first)
    tokens_b = tokenize(second)
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def find_contradiction(
    first: str,
    second: str,
    pairs: Iterable[Sequence[str]],
) -> tuple[str, str] | None:
    """Return the first phrase pair split across the two texts, or None.

    Matching is case-insensitive substring containment in either direction,
    so ``valid`` also matches inside ``invalid``.

    Examples:
        >>> find_contradiction("The file exists", "It does not exist", [("exists", "does not exist")])
        ('exists', 'does not exist')
    """
    text_a = first.lower()
    text_b = second.lower()
    for positive, negative in pairs:
        if positive in text_a and negative in text_b:
            return positive, negative
        if negative in text_a and positive in text_b:
            return positive, negative
    return None


def compile_tool_pattern(tool_names: Iterable[str]) -> re.Pattern[str]:
    """Build the word-boundary pattern matching any known tool token."""
    names = sorted({re.escape(name) for name in tool_names if name}, key=len, reverse=True)
    alternatives = "|".join([*names, _MCP_TOKEN])
    return re.compile(rf"\b({alternatives})\b")


def extract_tool_tokens(content: str, pattern: re.Pattern[str]) -> list[str]:
    """Return tool tokens mentioned in ``content``, in order of first mention.

    Examples:
        >>> pattern = compile_tool_pattern(["ls", "read_file"])
        >>> extract_tool_tokens("Use ls, then read_file and mcp_fetch, then ls", pattern)
        ['ls', 'read_file', 'mcp_fetch']
    """
    return list(dict.fromkeys(match.group(1) for match in pattern.finditer(content)))
