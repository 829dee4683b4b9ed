from __future__ import annotations

import sys
from pathlib import Path

import pytest


# Allow `import whistbot` when running tests without installing the package.
SRC = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC))

from whistbot.games.german_whist.cards import ALL_RANKS, Card, Suit  # noqa: E402


def suit_cards(suit: Suit) -> list[Card]:
    return [Card(suit, r) for r in ALL_RANKS]


def ordered_deck() -> list[Card]:
    """Spades to the human, Hearts to the opponent, Diamonds 2 face-up."""
    return [
        *suit_cards(Suit.SPADES),
        *suit_cards(Suit.HEARTS),
        *suit_cards(Suit.DIAMONDS),
        *suit_cards(Suit.CLUBS),
    ]


@pytest.fixture
def deck() -> list[Card]:
    return ordered_deck()
