"""Card <-> index mapping used to address the belief vector.

Suit-major: Spades 0-12, Hearts 13-25, Diamonds 26-38, Clubs 39-51.
Within a suit the Ace comes first, then 2..10, J, Q, K.
"""

from __future__ import annotations

from whistbot.games.german_whist.cards import ALL_SUITS, Card, Rank

INDEX_RANKS: tuple[Rank, ...] = (
    Rank.ACE,
    Rank.TWO,
    Rank.THREE,
    Rank.FOUR,
    Rank.FIVE,
    Rank.SIX,
    Rank.SEVEN,
    Rank.EIGHT,
    Rank.NINE,
    Rank.TEN,
    Rank.JACK,
    Rank.QUEEN,
    Rank.KING,
)

_CARD_TO_IDX: dict[Card, int] = {}
_IDX_TO_CARD: list[Card] = []
for _suit in ALL_SUITS:
    for _rank in INDEX_RANKS:
        _c = Card(_suit, _rank)
        _CARD_TO_IDX[_c] = len(_IDX_TO_CARD)
        _IDX_TO_CARD.append(_c)


def card_to_index(card: Card) -> int:
    return _CARD_TO_IDX[card]


def index_to_card(index: int) -> Card:
    return _IDX_TO_CARD[index]


def rank_offset(rank: Rank) -> int:
    return INDEX_RANKS.index(rank)
