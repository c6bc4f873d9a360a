from __future__ import annotations

import random

RANKS = 5
COPIES_PER_RANK = 5


def create_deck(rng: random.Random, ranks: int = RANKS, copies: int = COPIES_PER_RANK) -> list[int]:
    """Return a shuffled draw pile holding `copies` of every rank 1..`ranks`.

    The pile is used as a stack: cards are drawn with `pop()`.
    """
    deck = [rank for rank in range(1, ranks + 1) for _ in range(copies)]
    rng.shuffle(deck)
    return deck
