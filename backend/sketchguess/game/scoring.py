"""Points awarded for correct guesses.

Earlier correct guessers earn more; the drawer earns a flat bonus for
every correct guess.
"""

from __future__ import annotations


GUESSER_POINTS = (100, 70, 50)
LATE_GUESSER_POINTS = 30
DRAWER_POINTS = 10


def normalize_guess(text: str) -> str:
    return (text or "").strip().lower()


def points_for_position(position: int) -> int:
    """Points for the ``position``-th correct guesser (1-based)."""
    if position < 1:
        raise ValueError("position is 1-based")
    if position <= len(GUESSER_POINTS):
        return GUESSER_POINTS[position - 1]
    return LATE_GUESSER_POINTS


def round_complete(correct_guessers: int, total_players: int) -> bool:
    """Everyone except the drawer has guessed."""
    return correct_guessers >= total_players - 1
