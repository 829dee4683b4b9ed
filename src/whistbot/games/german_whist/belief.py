"""Opponent's belief about which cards the human holds.

The tracker keeps a 52-slot probability vector (addressed through
:mod:`codec`) plus what the opponent knows for certain: cards the human
holds and cards the human does not hold.

Only *public* information may be fed in.  :meth:`BeliefTracker.reveal`
accepts :class:`PublicCard` values, never bare :class:`Card` values, so a
hidden stock card cannot reach the tracker by accident: the engine only
wraps cards the opponent has actually seen (cards the human played, the
face-up stock card, the opponent's own hand).

A card can be reported more than once over a match: the face-up card is
"not held" until the human wins it, and a card the human won is "held"
until the human plays it.  The latest report about a card decides its
status.  The raw report sets only ever grow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from whistbot.games.german_whist.cards import Card
from whistbot.games.german_whist.codec import card_to_index
from whistbot.games.german_whist.constants import DECK_SIZE

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PublicCard:
    """A card whose identity is visible to the opponent."""

    card: Card

    @property
    def index(self) -> int:
        return card_to_index(self.card)


@dataclass(frozen=True, slots=True)
class Reveal:
    held: tuple[Card, ...]
    not_held: tuple[Card, ...]
    hand_size: int


@dataclass(slots=True)
class BeliefTracker:
    vector: np.ndarray = field(default_factory=lambda: np.zeros(DECK_SIZE, dtype=np.float64))
    reported_held: set[int] = field(default_factory=set)
    reported_not_held: set[int] = field(default_factory=set)
    _status: dict[int, bool] = field(default_factory=dict)  # index -> held?
    history: list[Reveal] = field(default_factory=list)

    def clone(self) -> BeliefTracker:
        return BeliefTracker(
            vector=self.vector.copy(),
            reported_held=set(self.reported_held),
            reported_not_held=set(self.reported_not_held),
            _status=dict(self._status),
            history=list(self.history),
        )

    @property
    def confirmed_held(self) -> frozenset[int]:
        return frozenset(i for i, held in self._status.items() if held)

    @property
    def confirmed_not_held(self) -> frozenset[int]:
        return frozenset(i for i, held in self._status.items() if not held)

    def unknown_indices(self) -> list[int]:
        return [i for i in range(DECK_SIZE) if i not in self._status]

    def reveal(
        self,
        held: Sequence[PublicCard] = (),
        not_held: Sequence[PublicCard] = (),
        *,
        hand_size: int,
    ) -> None:
        """Record newly public cards and rebuild the whole vector.

        ``hand_size`` is the human's hand size right now.  Reporting the
        same thing twice changes nothing.
        """
        for pc in (*held, *not_held):
            if not isinstance(pc, PublicCard):
                raise TypeError(f"reveal() only accepts PublicCard, got {type(pc).__name__}")
        for pc in held:
            self.reported_held.add(pc.index)
            self._status[pc.index] = True
        for pc in not_held:
            self.reported_not_held.add(pc.index)
            self._status[pc.index] = False
        self.history.append(
            Reveal(
                held=tuple(pc.card for pc in held),
                not_held=tuple(pc.card for pc in not_held),
                hand_size=int(hand_size),
            )
        )
        self._rebuild(int(hand_size))

    def _rebuild(self, hand_size: int) -> None:
        held = sorted(self.confirmed_held)
        unknown = self.unknown_indices()
        vec = np.zeros(DECK_SIZE, dtype=np.float64)
        vec[held] = 1.0
        if unknown:
            vec[unknown] = (hand_size - len(held)) / len(unknown)
        self.vector = vec
        log.debug(
            "belief: held=%d not_held=%d unknown=%d sum=%.6f",
            len(held),
            DECK_SIZE - len(held) - len(unknown),
            len(unknown),
            float(vec.sum()),
        )

    def probability(self, card: Card) -> float:
        return float(self.vector[card_to_index(card)])

    def total(self) -> float:
        return float(self.vector.sum())
