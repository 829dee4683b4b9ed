"""Rule-based opponent for German Whist.

* **Following**: win as cheaply as possible, otherwise concede cheaply.
* **Leading**: score every card by its estimated chance of winning against
  the human's hand (from the :class:`~belief.BeliefTracker`), then spend the
  cheapest card that is still likely enough to win.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

import numpy as np

from whistbot.games.german_whist.cards import Card, Suit
from whistbot.games.german_whist.codec import card_to_index, index_to_card
from whistbot.games.german_whist.constants import DECK_SIZE, DEFAULT_LEAD_CONFIDENCE
from whistbot.games.german_whist.rules import beats

log = logging.getLogger(__name__)


def _lowest(cards: Sequence[Card]) -> Card:
    # min() keeps the first of equal ranks, i.e. hand order.
    return min(cards, key=lambda c: c.rank.order)


def choose_follow(hand: Sequence[Card], lead: Card, trump: Suit) -> Card:
    if not hand:
        raise ValueError("No cards to follow with")

    same = [c for c in hand if c.suit == lead.suit]
    if same:
        for c in sorted(same, key=lambda c: c.rank.order):
            if not beats(lead, c, trump):
                return c
        return _lowest(same)

    trumps = [c for c in hand if c.suit == trump]
    if trumps:
        return _lowest(trumps)
    return _lowest(hand)


@lru_cache(maxsize=len(Suit))
def _lead_win_matrix(trump: Suit) -> np.ndarray:
    """``m[a, b]`` is 1.0 when card index ``a`` led beats card index ``b``."""
    m = np.zeros((DECK_SIZE, DECK_SIZE), dtype=np.float64)
    for a in range(DECK_SIZE):
        ca = index_to_card(a)
        for b in range(DECK_SIZE):
            if beats(ca, index_to_card(b), trump):
                m[a, b] = 1.0
    m.setflags(write=False)
    return m


def lead_scores(hand: Sequence[Card], belief: np.ndarray, trump: Suit) -> np.ndarray:
    """Estimated win chance of leading each card of ``hand``.

    Sum of ``belief[i]`` over the cards ``i`` the lead would beat, divided by
    the opponent's own hand size as a stand-in for the human's.
    """
    if not hand:
        return np.zeros(0, dtype=np.float64)
    rows = _lead_win_matrix(trump)[[card_to_index(c) for c in hand]]
    return (rows @ np.asarray(belief, dtype=np.float64)) / len(hand)


def choose_lead(
    hand: Sequence[Card],
    belief: np.ndarray,
    trump: Suit,
    *,
    threshold: float = DEFAULT_LEAD_CONFIDENCE,
) -> Card:
    if not hand:
        raise ValueError("No cards to lead with")

    scores = lead_scores(hand, belief, trump)
    order = sorted(range(len(hand)), key=lambda k: (float(scores[k]), hand[k].rank.order, k))
    for k in order:
        if scores[k] >= threshold:
            return hand[k]
    # np.argmax returns the first maximum, i.e. hand order on ties.
    return hand[int(np.argmax(scores))]


@dataclass(slots=True)
class OpponentPolicy:
    threshold: float = DEFAULT_LEAD_CONFIDENCE

    def follow(self, hand: Sequence[Card], lead: Card, trump: Suit) -> Card:
        card = choose_follow(hand, lead, trump)
        log.debug("opponent follows %s with %s", lead.short(), card.short())
        return card

    def lead(self, hand: Sequence[Card], belief: np.ndarray, trump: Suit) -> Card:
        card = choose_lead(hand, belief, trump, threshold=self.threshold)
        if log.isEnabledFor(logging.DEBUG):
            scores = lead_scores(hand, belief, trump)
            log.debug(
                "opponent leads %s (scores: %s)",
                card.short(),
                " ".join(f"{c.short()}={s:.2f}" for c, s in zip(hand, scores)),
            )
        return card
