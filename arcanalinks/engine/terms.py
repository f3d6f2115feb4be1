"""Term index construction: registry titles plus generated card-name aliases."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

from .config import EngineConfig, load_config
from .types import LinkRegistry, LinkType, TermInfo

NUMBER_WORDS: Dict[str, str] = {
    "1": "One",
    "2": "Two",
    "3": "Three",
    "4": "Four",
    "5": "Five",
    "6": "Six",
    "7": "Seven",
    "8": "Eight",
    "9": "Nine",
    "10": "Ten",
}

WORD_TO_NUMBER: Dict[str, str] = {word.lower(): digit for digit, word in NUMBER_WORDS.items()}

_NUMBER_WORD_ALTERNATION = "|".join(NUMBER_WORDS.values())

# "The Fool - Tarot Card Meaning", "9 of Pentacles: The Ultimate Guide"
_SEPARATOR_RE = re.compile(r"(.+?)\s*[-–—:]\s*.+")
# "The Fool Tarot Card Meaning" -> "The Fool"
_CORE_RE = re.compile(r"(.+?)\s+(?:Tarot\s+)?(?:Card\s+)?(?:Meaning|Guide|Interpretation)", re.IGNORECASE)
_NUMBERED_PREFIX_RE = re.compile(rf"(\d+|(?:{_NUMBER_WORD_ALTERNATION}))\s+of\s+(\w+)", re.IGNORECASE)
# "King of Cups Meaning" -> "King of Cups"
_SUFFIX_RE = re.compile(r"(.+?)\s+(?:Card|Meaning|Guide|Interpretation)", re.IGNORECASE)
_DIGIT_ALIAS_RE = re.compile(r"(\d+)\s+of\s+(\w+)", re.IGNORECASE)
_WORD_ALIAS_RE = re.compile(rf"({_NUMBER_WORD_ALTERNATION})\s+of\s+(\w+)", re.IGNORECASE)

_MIN_ALIAS_LENGTH = 3


def extract_card_name_aliases(title: str) -> List[str]:
    """Return shorter names a tarot article title is commonly referred to by.

    "9 of Pentacles: The Ultimate Guide" yields "9 of Pentacles" and
    "Nine of Pentacles" among others; numbered cards always get both the
    digit and the spelled-out form.
    """

    aliases: List[str] = []

    separated = _SEPARATOR_RE.fullmatch(title)
    if separated and len(separated.group(1)) >= _MIN_ALIAS_LENGTH:
        extracted = separated.group(1).strip()
        aliases.append(extracted)

        core = _CORE_RE.fullmatch(extracted)
        if core and len(core.group(1)) >= _MIN_ALIAS_LENGTH:
            extracted = core.group(1).strip()
            aliases.append(extracted)

        numbered = _NUMBERED_PREFIX_RE.match(extracted)
        if numbered:
            aliases.append(numbered.group(0))

    suffixed = _SUFFIX_RE.fullmatch(title)
    if suffixed and len(suffixed.group(1)) >= _MIN_ALIAS_LENGTH:
        aliases.append(suffixed.group(1).strip())

    variations = list(aliases)
    for alias in aliases:
        digit = _DIGIT_ALIAS_RE.fullmatch(alias)
        if digit and digit.group(1) in NUMBER_WORDS:
            variations.append(f"{NUMBER_WORDS[digit.group(1)]} of {digit.group(2)}")

        word = _WORD_ALIAS_RE.fullmatch(alias)
        if word:
            variations.append(f"{WORD_TO_NUMBER[word.group(1).lower()]} of {word.group(2)}")

    return list(dict.fromkeys(variations))


def should_require_capital(term: str, capitalized_nouns: Sequence[str]) -> bool:
    """Return True for "The <common noun>" terms that collide with ordinary prose."""

    lowered = term.lower()
    if not lowered.startswith("the "):
        return False
    word_after_the = lowered[4:].split(" ")[0]
    return word_after_the in capitalized_nouns


def build_term_index(
    registry: LinkRegistry,
    config: EngineConfig | None = None,
) -> Dict[str, TermInfo]:
    """Map lowercase terms to the entity they link to.

    Tarot titles and their aliases are indexed before blog titles, and the
    first writer of a key wins. Spread and horoscope entries are only resolved
    at render time and never offered as suggestions.
    """

    engine_config = config or load_config(None)
    nouns = engine_config.capitalized_nouns()
    index: Dict[str, TermInfo] = {}

    def _add(term: str, link_type: LinkType, slug: str, title: str) -> None:
        key = term.lower()
        if not key or key in index:
            return
        index[key] = TermInfo(
            type=link_type,
            slug=slug,
            title=title,
            requires_capital=should_require_capital(term, nouns),
            label=term,
        )

    for entry in registry.tarot:
        _add(entry.title, LinkType.TAROT, entry.slug, entry.title)
        for alias in extract_card_name_aliases(entry.title):
            _add(alias, LinkType.TAROT, entry.slug, entry.title)

    for entry in registry.blog:
        _add(entry.title, LinkType.BLOG, entry.slug, entry.title)

    return index


def sorted_terms(index: Dict[str, TermInfo]) -> List[tuple[str, TermInfo]]:
    """Return index items with the longest keys first.

    Longer phrases must be tried before the shorter terms they contain; ties
    keep index order.
    """

    return sorted(index.items(), key=lambda item: -len(item[0]))
