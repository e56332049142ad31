"""Random file names drawn from a word list.

Dictionary words are used rather than gibberish, since samples may look out
for high-entropy file names.
"""

from __future__ import annotations

import random as _random
from dataclasses import dataclass, field


@dataclass
class Randomizer:
    """Picks random words from a fixed list."""

    words: list[str]
    rng: _random.Random = field(default_factory=_random.Random, repr=False)

    def random(self) -> str:
        """Return a random word from the list."""
        return self.rng.choice(self.words)


def load_randomizer(words_path: str) -> Randomizer:
    """Build a Randomizer from a newline-separated word file."""
    with open(words_path, encoding="utf-8") as fh:
        return Randomizer(fh.read().split("\n"))