from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Suit(str, Enum):
    # Enumeration order is the card-index order (see codec.py).
    SPADES = "SPADES"
    HEARTS = "HEARTS"
    DIAMONDS = "DIAMONDS"
    CLUBS = "CLUBS"

    @property
    def ordinal(self) -> int:
        return ALL_SUITS.index(self)

    @property
    def letter(self) -> str:
        return self.value[0]


ALL_SUITS: tuple[Suit, ...] = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)


class Rank(str, Enum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    @property
    def is_face(self) -> bool:
        return not self.value.isdigit()

    @property
    def order(self) -> int:
        """Position in 2 < 3 < ... < 10 < J < Q < K < A (0..12)."""
        return ALL_RANKS.index(self)


ALL_RANKS: tuple[Rank, ...] = tuple(Rank)
FACE_ORDER: tuple[Rank, ...] = (Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE)


def rank_greater_or_equal(a: Rank, b: Rank) -> bool:
    """Whether rank ``a`` is at least as big as rank ``b``.

    Numbers compare numerically, faces by J < Q < K < A, and any face is
    bigger than any number.  Identical ranks return True, which is what
    makes the leader win a tie in :func:`rules.beats`.  Do not use this as a
    sort key: it is not a strict order.
    """
    if not a.is_face and not b.is_face:
        return int(a.value) >= int(b.value)
    if a.is_face and b.is_face:
        return FACE_ORDER.index(a) >= FACE_ORDER.index(b)
    return not b.is_face


# Unicode playing cards block: U+1F0A0 + 16 * suit, A=1 .. 10=10, J=11, (C=12), Q=13, K=14.
_UNICODE_BASE = 0x1F0A0
_UNICODE_RANK = {Rank.ACE: 1, Rank.JACK: 11, Rank.QUEEN: 13, Rank.KING: 14}


@dataclass(frozen=True, slots=True)
class Card:
    suit: Suit
    rank: Rank

    def short(self) -> str:
        return f"{self.suit.letter}{self.rank.value}"

    def unicode(self) -> str:
        n = _UNICODE_RANK.get(self.rank)
        if n is None:
            n = int(self.rank.value)
        return chr(_UNICODE_BASE + 16 * self.suit.ordinal + n)

    @classmethod
    def parse(cls, text: str) -> Card:
        """Parse the short form, e.g. ``"S10"``, ``"hq"``."""
        s = text.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card: {text!r}")
        suit: Optional[Suit] = next((x for x in ALL_SUITS if x.letter == s[0]), None)
        if suit is None:
            raise ValueError(f"Invalid suit in card: {text!r}")
        try:
            rank = Rank(s[1:])
        except ValueError:
            raise ValueError(f"Invalid rank in card: {text!r}") from None
        return cls(suit, rank)

    def __str__(self) -> str:
        return self.short()


def make_deck() -> List[Card]:
    return [Card(s, r) for s in ALL_SUITS for r in ALL_RANKS]


def shuffled_deck(rng: random.Random) -> List[Card]:
    deck = make_deck()
    rng.shuffle(deck)
    return deck
