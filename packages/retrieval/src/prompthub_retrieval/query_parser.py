"""Inline search operator parsing.

Extracts `tag:`, `category:` and `specialty:` operators from free-text
search input. Operator keys are case-sensitive; values are lower-cased.

Category and specialty labels are Title Case phrases ("Shift Report Prep"),
so a value that starts with an uppercase letter also takes the following
capitalised words. Tags are single tokens.

Known limitation: capitalised free text right after such a value is read
as part of the label, so `category:ICU Handoff` filters on "icu handoff"
and leaves no free text. Write `handoff category:ICU` to keep the word.

Example:
    >>> parsed = parse_query("handoff category:Shift Report Prep tag:communication")
    >>> parsed.free_text
    'handoff'
    >>> sorted(parsed.categories)
    ['shift report prep']
"""

import re
from dataclasses import dataclass, field

OPERATOR_KEYS = ("tag", "category", "specialty")

OPERATOR_PATTERN = re.compile(r"(tag|category|specialty):(\S+)")

_PHRASE_KEYS = frozenset({"category", "specialty"})
_TITLE_WORD = re.compile(r"\s+([A-Z]\S*)")


@dataclass(frozen=True)
class ParsedQuery:
    """Operators extracted from a query string.

    Attributes:
        free_text: Remaining text, operators removed, whitespace collapsed
        tags: Lower-cased `tag:` values
        categories: Lower-cased `category:` values
        specialties: Lower-cased `specialty:` values
    """

    free_text: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)
    categories: frozenset[str] = field(default_factory=frozenset)
    specialties: frozenset[str] = field(default_factory=frozenset)

    @property
    def has_operators(self) -> bool:
        return bool(self.tags or self.categories or self.specialties)


def _phrase_end(text: str, pos: int) -> tuple[str, int]:
    """Collect capitalised words after `pos` that are not operators themselves."""
    words = []
    while True:
        match = _TITLE_WORD.match(text, pos)
        if match is None or OPERATOR_PATTERN.search(match.group(1)):
            break
        words.append(match.group(1))
        pos = match.end()
    return " ".join(words), pos


def parse_query(query_text: str) -> ParsedQuery:
    """Split a search string into free text and operator filters.

    Every occurrence is removed, including ones that only appear once an
    earlier occurrence has been cut out, so the returned free text never
    contains an operator. Unknown keys (`author:x`) stay in the free text.

    Args:
        query_text: Raw search input

    Returns:
        ParsedQuery with deduplicated operator values
    """
    extracted: dict[str, set[str]] = {key: set() for key in OPERATOR_KEYS}
    text = query_text or ""

    while True:
        match = OPERATOR_PATTERN.search(text)
        if match is None:
            break

        key, value = match.group(1), match.group(2)
        end = match.end()
        if key in _PHRASE_KEYS and value[:1].isupper():
            tail, end = _phrase_end(text, end)
            if tail:
                value = f"{value} {tail}"

        extracted[key].add(value.lower())
        text = f"{text[:match.start()]} {text[end:]}"

    return ParsedQuery(
        free_text=" ".join(text.split()),
        tags=frozenset(extracted["tag"]),
        categories=frozenset(extracted["category"]),
        specialties=frozenset(extracted["specialty"]),
    )
