"""
Quote-aware scanning helpers for the interpolation grammar.

Every helper walks the text once, tracking only whether it is inside a
single- or double-quoted region (and, for parentheses, the nesting depth).
Delimiters inside a quoted region are never significant.
"""

from collections.abc import Iterable, Iterator

from htmldsl.exceptions import GrammarError

QUOTE_CHARS = ('"', "'")


def iter_unquoted(text: str, start: int = 0) -> Iterator[tuple[int, str]]:
    """
    Yield (index, char) for every character outside quoted regions.

    Quote characters themselves are not yielded.

    Params:
        text: Text to scan
        start: Index to start scanning from

    Raises:
        GrammarError: If the scan reaches the end inside a quoted region
    """
    quote = None
    for index in range(start, len(text)):
        char = text[index]
        if quote:
            if char == quote:
                quote = None
            continue
        if char in QUOTE_CHARS:
            quote = char
            continue
        yield index, char

    if quote:
        raise GrammarError(f"Unterminated {quote} quote in '{text}'")


def split_unquoted(text: str, delimiter: str) -> list[str]:
    """
    Split text on a single-character delimiter outside quoted regions.

    Params:
        text: Text to split
        delimiter: Single delimiter character

    Returns:
        Pieces between delimiters (untrimmed); empty list for empty text

    Examples:
        'a|"b|c"|d' -> ['a', '"b|c"', 'd']
    """
    if not text:
        return []

    cuts = [index for index, char in iter_unquoted(text) if char == delimiter]
    bounds = [-1, *cuts, len(text)]
    return [text[bounds[i] + 1 : bounds[i + 1]] for i in range(len(bounds) - 1)]


def find_unquoted(text: str, target: str) -> int:
    """Return the index of the first unquoted `target` character, or -1."""
    for index, char in iter_unquoted(text):
        if char == target:
            return index
    return -1


def find_matching_paren(text: str, open_index: int) -> int:
    """
    Find the ")" closing the "(" at `open_index`.

    Params:
        text: Text containing the parenthesised region
        open_index: Index of the opening parenthesis

    Returns:
        Index of the matching close, or -1 if the region never closes
    """
    depth = 0
    for index, char in iter_unquoted(text, open_index):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def split_constraint_entries(text: str, keywords: Iterable[str]) -> list[str]:
    """
    Split a constraint body into `keyword:value` entries.

    A comma separates entries only when the text after it (ignoring leading
    whitespace) starts with a known keyword followed by ":", so value lists
    such as `enum:A,B` stay intact.

    Params:
        text: Constraint body without the surrounding parentheses
        keywords: Recognized constraint keywords

    Returns:
        Non-empty, stripped entries in authoring order
    """
    prefixes = tuple(f"{keyword}:" for keyword in keywords)
    cuts = [
        index
        for index, char in iter_unquoted(text)
        if char == "," and text[index + 1 :].lstrip().startswith(prefixes)
    ]

    bounds = [-1, *cuts, len(text)]
    entries = (text[bounds[i] + 1 : bounds[i + 1]] for i in range(len(bounds) - 1))
    return [entry.strip() for entry in entries if entry.strip()]


def unquote(token: str) -> str:
    """Strip one pair of matching surrounding quotes, if present."""
    if len(token) >= 2 and token[0] in QUOTE_CHARS and token[-1] == token[0]:
        return token[1:-1]
    return token
