"""Choice matching for replies to a prompt that offered a choice set.

Matching order:
1. case-insensitive exact label
2. case-insensitive exact value or synonym
3. 1-based position ("2", "2.", "2)")
4. fuzzy label similarity, unless the best two candidates are too close or
   the numbers in the reply and the label differ
"""

import logging
import re
from collections.abc import Iterable, Sequence
from difflib import SequenceMatcher

from wasifu.core.types import Choice

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 0.85
AMBIGUITY_MARGIN = 0.08

_ORDINAL_RE = re.compile(r"^\(?(\d{1,3})[.)]?$")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"\d+")


def normalize(text: str) -> str:
    """Trim, collapse inner whitespace and casefold."""
    return _WHITESPACE_RE.sub(" ", text.strip()).casefold()


def to_choices(labels: Iterable[str]) -> list[Choice]:
    """Build a choice set whose values equal their labels."""
    return [Choice(value=label, label=label) for label in labels]


def find_choice(reply: str | None, choices: Sequence[Choice]) -> Choice | None:
    """Match a free-form reply against the offered choices.

    Args:
        reply: Raw user reply
        choices: Choice set offered by the pending prompt

    Returns:
        The matched Choice, or None when nothing matches
    """
    if reply is None or not choices:
        return None

    text = normalize(reply)
    if not text:
        return None

    for choice in choices:
        if normalize(choice.label) == text:
            return choice

    for choice in choices:
        if normalize(choice.value) == text or any(normalize(s) == text for s in choice.synonyms):
            return choice

    ordinal = _ORDINAL_RE.match(text)
    if ordinal:
        index = int(ordinal.group(1)) - 1
        if 0 <= index < len(choices):
            return choices[index]
        return None

    return _fuzzy_match(text, choices)


def _similarity(label: str, text: str) -> float:
    # "Sub 2" must never stand in for "Sub 1"
    if _NUMBER_RE.findall(label) != _NUMBER_RE.findall(text):
        return 0.0
    return SequenceMatcher(a=label, b=text).ratio()


def _fuzzy_match(text: str, choices: Sequence[Choice]) -> Choice | None:
    scored = sorted(
        ((_similarity(normalize(c.label), text), i) for i, c in enumerate(choices)),
        reverse=True,
    )
    top_ratio, top_index = scored[0]
    if top_ratio < FUZZY_THRESHOLD:
        return None

    if len(scored) > 1 and top_ratio - scored[1][0] < AMBIGUITY_MARGIN:
        logger.debug(f"Ambiguous fuzzy match for reply (top ratio {top_ratio:.2f})")
        return None

    return choices[top_index]
