from __future__ import annotations

import random

from .models import HINT_BLANK


def blank_hint(word: str) -> list[str]:
    return [HINT_BLANK] * len(word)


def reveal_letter(word: str, hint: list[str], rng: random.Random | None = None) -> list[str]:
    """Reveal one more letter of ``word`` in ``hint`` (in place) and return it.

    A random still-blank position is set to the upper-cased letter. When no
    blank position is left the hint is returned unchanged.
    """
    if not word:
        return hint
    if len(hint) != len(word):
        hint[:] = blank_hint(word)

    blanks = [i for i, ch in enumerate(hint) if ch == HINT_BLANK]
    if not blanks:
        return hint

    idx = (rng or random).choice(blanks)
    hint[idx] = word[idx].upper()
    return hint


def revealed_count(hint: list[str]) -> int:
    return sum(1 for ch in hint if ch != HINT_BLANK)
