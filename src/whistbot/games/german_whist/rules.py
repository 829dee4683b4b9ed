from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Sequence

from whistbot.games.german_whist.cards import Card, Suit, rank_greater_or_equal


class Player(IntEnum):
    HUMAN = 0
    OPPONENT = 1

    @property
    def other(self) -> Player:
        return Player(1 - int(self))


@dataclass(frozen=True, slots=True)
class TrickResult:
    leader: Player
    lead_card: Card
    follow_card: Card
    winner: Player


def beats(lead: Card, follow: Card, trump: Suit) -> bool:
    """
    Whether the lead card wins against the follow card:
    - Off-suit non-trump follow => lead wins.
    - Off-suit trump follow against a non-trump lead => follow wins.
    - Same suit => higher rank wins, the lead keeps ties.
    """
    if follow.suit != lead.suit:
        if follow.suit != trump:
            return True
        if lead.suit != trump:
            return False
    return rank_greater_or_equal(lead.rank, follow.rank)


def can_follow_suit(hand: Sequence[Card], suit: Suit) -> bool:
    return any(c.suit == suit for c in hand)


def legal_follow_cards(hand: Sequence[Card], lead: Card) -> List[Card]:
    """Cards of the lead suit if there are any, otherwise the whole hand."""
    same = [c for c in hand if c.suit == lead.suit]
    return same if same else list(hand)


def resolve_trick(*, leader: Player, lead_card: Card, follow_card: Card, trump: Suit) -> TrickResult:
    winner = leader if beats(lead_card, follow_card, trump) else leader.other
    return TrickResult(leader=leader, lead_card=lead_card, follow_card=follow_card, winner=winner)
