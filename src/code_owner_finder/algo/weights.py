"""Line weight heuristics.

A line's weight estimates how much information it carries. Weights are
used twice: as the averaging weight of a line's knowledge, and as the
budget unit when reading knowledge spreads around an edit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class LineWeightCalculator(ABC):
    """Assigns a non-negative integer weight to a line of text."""

    @abstractmethod
    def calculate(self, line: str) -> int:
        """Weight of ``line``; must be pure and deterministic."""


class LengthLineWeightCalculator(LineWeightCalculator):
    """Weight is the raw length of the line."""

    def calculate(self, line: str) -> int:
        return len(line)


class WordType(Enum):
    LETTER = "letter"
    DIGIT = "digit"
    OTHER = "other"
    NONE = "none"


class WordLineWeightCalculator(LineWeightCalculator):
    """Weight is the number of "words" in the line.

    A word is a run of letters or a run of digits. Words are separated by
    whitespace, by any other character (punctuation, underscores), by a
    change between letters and digits, and by camelCase boundaries: an
    uppercase letter starts a new word unless the previous character was
    uppercase too, so ``CAPSLOCK`` is one word and ``vcsFileRevision`` is
    three. Runs of other characters separate words but are not words.

    Letter, digit and case classes come from Unicode, so Cyrillic and
    other scripts are counted the same way as ASCII.

    Examples:
        >>> WordLineWeightCalculator().calculate("make_next_state")
        3
        >>> WordLineWeightCalculator().calculate("WordLineWeightCalculator.calculate(line)")
        6
    """

    def calculate(self, line: str) -> int:
        return sum(self._words_in_token(token) for token in line.split())

    @staticmethod
    def _words_in_token(token: str) -> int:
        counter = 0
        current = WordType.NONE
        previous_upper = False
        for char in token:
            if char.isalpha():
                upper = char.isupper()
                if (upper and not previous_upper) or current is not WordType.LETTER:
                    counter += 1
                    current = WordType.LETTER
            elif char.isdecimal():
                if current is not WordType.DIGIT:
                    counter += 1
                    current = WordType.DIGIT
            else:
                current = WordType.OTHER
            previous_upper = char.isupper()
        return counter
