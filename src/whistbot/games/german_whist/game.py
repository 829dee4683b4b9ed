from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Literal, Optional, Sequence

from whistbot.games.german_whist.belief import BeliefTracker, PublicCard
from whistbot.games.german_whist.cards import Card, Suit, make_deck, shuffled_deck
from whistbot.games.german_whist.codec import card_to_index
from whistbot.games.german_whist.constants import (
    BELIEF_SUM_TOLERANCE,
    DECK_SIZE,
    DEFAULT_LEAD_CONFIDENCE,
    HAND_SIZE,
)
from whistbot.games.german_whist.errors import IllegalCard, MatchAlreadyOver
from whistbot.games.german_whist.policy import OpponentPolicy
from whistbot.games.german_whist.rules import (
    Player,
    TrickResult,
    can_follow_suit,
    legal_follow_cards,
    resolve_trick,
)

log = logging.getLogger(__name__)

Outcome = Literal["unfinished", "win", "lose", "tie"]

_FULL_DECK: frozenset[Card] = frozenset(make_deck())


@dataclass(slots=True)
class Match:
    hands: list[list[Card]]  # indexed by Player
    stock: Deque[Card]  # stock[0] is face-up
    trick: list[Card]  # 0, 1 or 2 cards; trick[0] was played by `leader`
    discarded: list[Card]  # cards of resolved tricks, in play order
    trump: Suit
    leader: Player
    scores: list[int]  # indexed by Player
    belief: BeliefTracker
    policy: OpponentPolicy = field(default_factory=OpponentPolicy)
    trick_no: int = 0
    last_trick: Optional[TrickResult] = None

    def clone(self) -> Match:
        """Independent copy; Card, Suit and TrickResult are immutable and shared."""
        return Match(
            hands=[list(h) for h in self.hands],
            stock=deque(self.stock),
            trick=list(self.trick),
            discarded=list(self.discarded),
            trump=self.trump,
            leader=self.leader,
            scores=list(self.scores),
            belief=self.belief.clone(),
            policy=self.policy,
            trick_no=self.trick_no,
            last_trick=self.last_trick,
        )

    # -- read-only views -------------------------------------------------

    @property
    def human_hand(self) -> tuple[Card, ...]:
        return tuple(self.hands[Player.HUMAN])

    @property
    def opponent_hand(self) -> tuple[Card, ...]:
        # For rendering only; the human must not act on it.
        return tuple(self.hands[Player.OPPONENT])

    @property
    def human_score(self) -> int:
        return self.scores[Player.HUMAN]

    @property
    def opponent_score(self) -> int:
        return self.scores[Player.OPPONENT]


def deal(
    seed: Optional[int] = None,
    *,
    deck: Optional[Sequence[Card]] = None,
    threshold: float = DEFAULT_LEAD_CONFIDENCE,
) -> Match:
    """
    Start a match.

    The first HAND_SIZE cards of the deck go to the human, the next HAND_SIZE
    to the opponent, the rest form the stock.  The face-up stock card fixes
    trump.  Pass ``deck`` for a fixed order (tests), otherwise a deck is
    shuffled with ``random.Random(seed)``.
    """
    if deck is None:
        cards = shuffled_deck(random.Random(seed))
    else:
        cards = list(deck)
        if len(cards) != DECK_SIZE or set(cards) != _FULL_DECK:
            raise ValueError(f"deck must hold each of the {DECK_SIZE} cards exactly once")

    hands = [cards[:HAND_SIZE], cards[HAND_SIZE : 2 * HAND_SIZE]]
    stock: Deque[Card] = deque(cards[2 * HAND_SIZE :])
    trump = stock[0].suit

    match = Match(
        hands=hands,
        stock=stock,
        trick=[],
        discarded=[],
        trump=trump,
        leader=Player.HUMAN,
        scores=[0, 0],
        belief=BeliefTracker(),
        policy=OpponentPolicy(threshold=threshold),
    )
    # The opponent sees its own hand and the face-up card.
    match.belief.reveal(
        not_held=[PublicCard(stock[0]), *(PublicCard(c) for c in hands[Player.OPPONENT])],
        hand_size=len(hands[Player.HUMAN]),
    )
    log.info("dealt: trump=%s face-up=%s seed=%s", trump.value, stock[0].short(), seed)
    return match


# ---------------------------------------------------------------------------
#  Queries
# ---------------------------------------------------------------------------


def face_up_card(match: Match) -> Optional[Card]:
    return match.stock[0] if match.stock else None


def leading_suit(match: Match) -> Optional[Suit]:
    return match.trick[0].suit if match.trick else None


def is_over(match: Match) -> bool:
    return not match.hands[Player.HUMAN] and not match.hands[Player.OPPONENT] and not match.trick


def outcome(match: Match) -> Outcome:
    if not is_over(match):
        return "unfinished"
    human, opp = match.scores
    if human > opp:
        return "win"
    if human < opp:
        return "lose"
    return "tie"


def legal_cards(match: Match) -> list[Card]:
    """Cards the human may submit right now."""
    if is_over(match):
        return []
    hand = match.hands[Player.HUMAN]
    if not match.trick:
        return list(hand)
    return legal_follow_cards(hand, match.trick[0])


# ---------------------------------------------------------------------------
#  Transition
# ---------------------------------------------------------------------------


def _validate(match: Match, card: Card) -> None:
    if is_over(match):
        raise MatchAlreadyOver("The match is over; no more cards can be played.")
    hand = match.hands[Player.HUMAN]
    if card not in hand:
        raise IllegalCard(f"{card.short()} is not in your hand.")
    if match.trick:
        lead = match.trick[0]
        if card.suit != lead.suit and can_follow_suit(hand, lead.suit):
            raise IllegalCard(f"You must follow {lead.suit.value.lower()}.")


def _draw(match: Match, winner: Player) -> None:
    """Winner takes the face-up card, loser the hidden one below it."""
    loser = winner.other
    face_up = match.stock.popleft()
    hidden = match.stock.popleft()
    match.hands[winner].append(face_up)
    match.hands[loser].append(hidden)

    # Only the face-up card is public.  `hidden` is never reported.
    human_size = len(match.hands[Player.HUMAN])
    if winner == Player.HUMAN:
        match.belief.reveal(held=[PublicCard(face_up)], hand_size=human_size)
    else:
        match.belief.reveal(not_held=[PublicCard(face_up)], hand_size=human_size)


def _opponent_lead(match: Match) -> None:
    hand = match.hands[Player.OPPONENT]
    card = match.policy.lead(hand, match.belief.vector, match.trump)
    hand.remove(card)
    match.trick.append(card)


def submit_human_card(match: Match, card: Card) -> TrickResult:
    """
    Play the human's card and run the match forward to the human's next turn.

    This resolves the trick (with the opponent's reply if the human led),
    scores it, draws from the stock and, if the opponent won, has the
    opponent lead the next trick.  Raises IllegalCard / MatchAlreadyOver
    without touching the match.
    """
    try:
        _validate(match, card)
    except (IllegalCard, MatchAlreadyOver) as e:
        log.warning("rejected %s: %s", card.short(), e)
        raise

    human_hand = match.hands[Player.HUMAN]
    human_hand.remove(card)
    match.trick.append(card)
    match.belief.reveal(not_held=[PublicCard(card)], hand_size=len(human_hand))

    if match.leader == Player.HUMAN:
        opp_hand = match.hands[Player.OPPONENT]
        reply = match.policy.follow(opp_hand, card, match.trump)
        opp_hand.remove(reply)
        match.trick.append(reply)

    lead_card, follow_card = match.trick
    result = resolve_trick(leader=match.leader, lead_card=lead_card, follow_card=follow_card, trump=match.trump)
    match.scores[result.winner] += 1
    match.leader = result.winner
    match.discarded.extend(match.trick)
    match.trick = []
    match.trick_no += 1
    match.last_trick = result
    log.info(
        "trick %d: %s %s vs %s -> %s (%d-%d)",
        match.trick_no,
        result.leader.name.lower(),
        lead_card.short(),
        follow_card.short(),
        result.winner.name.lower(),
        match.scores[Player.HUMAN],
        match.scores[Player.OPPONENT],
    )

    if match.stock:
        _draw(match, result.winner)

    if match.leader == Player.OPPONENT and match.hands[Player.OPPONENT]:
        _opponent_lead(match)

    if is_over(match):
        log.info("match over: %s (%d-%d)", outcome(match), *match.scores)
    return result


# ---------------------------------------------------------------------------
#  Consistency checks
# ---------------------------------------------------------------------------


def check_invariants(match: Match) -> None:
    """Raise AssertionError if the match is in an impossible state."""
    zones = [
        *match.hands[Player.HUMAN],
        *match.hands[Player.OPPONENT],
        *match.stock,
        *match.trick,
        *match.discarded,
    ]
    assert len(zones) == DECK_SIZE, f"{len(zones)} cards across zones"
    assert set(zones) == _FULL_DECK, "zones are not the full deck"
    assert len(match.trick) <= 1, "trick left unresolved"
    if match.trick:
        assert match.leader == Player.OPPONENT, "pending lead card but human leads"

    human = match.hands[Player.HUMAN]
    total = match.belief.total()
    assert abs(total - len(human)) <= BELIEF_SUM_TOLERANCE, f"belief sum {total} != {len(human)}"

    human_idx = {card_to_index(c) for c in human}
    held = match.belief.confirmed_held
    not_held = match.belief.confirmed_not_held
    assert not (held & not_held), "confirmed sets overlap"
    assert held <= human_idx, "belief claims a card the human does not hold"
    assert not (not_held & human_idx), "belief rules out a card the human holds"
