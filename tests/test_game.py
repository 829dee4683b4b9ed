from __future__ import annotations

import random

import numpy as np
import pytest

from whistbot.games.german_whist.cards import Card, Rank, Suit, make_deck
from whistbot.games.german_whist.codec import card_to_index
from whistbot.games.german_whist.errors import IllegalCard, MatchAlreadyOver
from whistbot.games.german_whist.game import (
    Match,
    check_invariants,
    deal,
    face_up_card,
    is_over,
    leading_suit,
    legal_cards,
    outcome,
    submit_human_card,
)
from whistbot.games.german_whist.rules import Player


def S(rank: Rank) -> Card:
    return Card(Suit.SPADES, rank)


def D(rank: Rank) -> Card:
    return Card(Suit.DIAMONDS, rank)


def _snapshot(m: Match) -> tuple:
    return (
        m.human_hand,
        m.opponent_hand,
        tuple(m.stock),
        tuple(m.trick),
        tuple(m.discarded),
        tuple(m.scores),
        m.leader,
        m.belief.vector.tolist(),
        len(m.belief.history),
    )


def test_ordered_deal_sets_trump_and_initial_belief(deck: list[Card]) -> None:
    m = deal(deck=deck)
    assert m.trump == Suit.DIAMONDS
    assert face_up_card(m) == D(Rank.TWO)
    assert m.leader == Player.HUMAN
    assert len(m.human_hand) == 13 and len(m.opponent_hand) == 13 and len(m.stock) == 26

    vec = m.belief.vector
    for c in m.opponent_hand:
        assert vec[card_to_index(c)] == 0.0
    assert vec[card_to_index(D(Rank.TWO))] == 0.0
    rest = [i for i in range(52) if vec[i] != 0.0]
    assert len(rest) == 38
    assert np.allclose(vec[rest], 13 / 38)
    assert m.belief.total() == pytest.approx(13)
    check_invariants(m)


def test_deal_rejects_incomplete_deck() -> None:
    deck = make_deck()
    deck[0] = deck[1]
    with pytest.raises(ValueError):
        deal(deck=deck)


def test_seeded_deals_are_reproducible() -> None:
    a = deal(seed=42)
    b = deal(seed=42)
    assert a.human_hand == b.human_hand
    assert tuple(a.stock) == tuple(b.stock)


def test_winner_draws_face_up_card_loser_draws_hidden(deck: list[Card]) -> None:
    m = deal(deck=deck)
    result = submit_human_card(m, S(Rank.ACE))

    # Opponent holds only hearts and no trump: cheapest discard.
    assert result.follow_card == Card(Suit.HEARTS, Rank.TWO)
    assert result.winner == Player.HUMAN
    assert m.scores == [1, 0]
    assert m.leader == Player.HUMAN
    assert m.trick == []
    assert D(Rank.TWO) in m.human_hand
    assert D(Rank.THREE) in m.opponent_hand
    assert face_up_card(m) == D(Rank.FOUR)

    assert m.belief.probability(D(Rank.TWO)) == 1.0
    assert m.belief.history[-1].held == (D(Rank.TWO),)
    check_invariants(m)


def test_opponent_wins_trumps_and_leads_next_trick(deck: list[Card]) -> None:
    m = deal(deck=deck)
    submit_human_card(m, S(Rank.ACE))
    result = submit_human_card(m, S(Rank.TWO))

    assert result.follow_card == D(Rank.THREE)
    assert result.winner == Player.OPPONENT
    assert m.scores == [1, 1]
    assert m.leader == Player.OPPONENT
    # Opponent took the face-up D4; the human got the hidden D5.
    assert D(Rank.FIVE) in m.human_hand
    assert m.belief.history[-1].not_held == (D(Rank.FOUR),)

    # D4 is the opponent's best lead (about 0.74, below the threshold).
    assert m.trick == [D(Rank.FOUR)]
    assert leading_suit(m) == Suit.DIAMONDS
    assert set(legal_cards(m)) == {D(Rank.TWO), D(Rank.FIVE)}
    check_invariants(m)

    result = submit_human_card(m, D(Rank.FIVE))
    assert result.leader == Player.OPPONENT
    assert result.winner == Player.HUMAN
    assert m.leader == Player.HUMAN
    assert D(Rank.SIX) in m.human_hand
    check_invariants(m)


def test_hidden_cards_never_reach_the_belief_tracker(deck: list[Card]) -> None:
    m = deal(deck=deck)
    submit_human_card(m, S(Rank.ACE))
    submit_human_card(m, S(Rank.TWO))
    told = {c for r in m.belief.history for c in (*r.held, *r.not_held)}
    # D3 went to the opponent and D5 to the human, both face down.
    assert D(Rank.THREE) not in told
    assert D(Rank.FIVE) not in told
    assert m.belief.probability(D(Rank.FIVE)) < 1.0


def test_card_not_in_hand_is_rejected_without_changes(deck: list[Card]) -> None:
    m = deal(deck=deck)
    before = _snapshot(m)
    with pytest.raises(IllegalCard):
        submit_human_card(m, Card(Suit.HEARTS, Rank.ACE))
    assert _snapshot(m) == before


def test_off_suit_follow_is_rejected_without_changes(deck: list[Card]) -> None:
    m = deal(deck=deck)
    submit_human_card(m, S(Rank.ACE))
    submit_human_card(m, S(Rank.TWO))
    assert leading_suit(m) == Suit.DIAMONDS
    before = _snapshot(m)
    with pytest.raises(IllegalCard):
        submit_human_card(m, S(Rank.KING))
    assert _snapshot(m) == before


def test_clone_is_independent(deck: list[Card]) -> None:
    m = deal(deck=deck)
    before = _snapshot(m)
    cp = m.clone()
    submit_human_card(cp, S(Rank.ACE))
    assert _snapshot(m) == before
    assert _snapshot(cp) != before


def _play_random_match(seed: int) -> Match:
    rng = random.Random(seed)
    m = deal(seed=seed)
    check_invariants(m)
    while not is_over(m):
        card = rng.choice(legal_cards(m))
        face_up = m.stock[0] if m.stock else None
        hidden = m.stock[1] if len(m.stock) > 1 else None
        seen = len(m.belief.history)

        submit_human_card(m, card)
        check_invariants(m)

        told = {c for r in m.belief.history[seen:] for c in (*r.held, *r.not_held)}
        assert told <= {card, face_up}
        assert hidden not in told
    return m


@pytest.mark.parametrize("seed", range(25))
def test_random_matches_keep_invariants(seed: int) -> None:
    m = _play_random_match(seed)
    assert m.human_hand == () and m.opponent_hand == ()
    assert len(m.stock) == 0
    assert len(m.discarded) == 52
    assert sum(m.scores) == 26
    assert m.trick_no == 26


@pytest.mark.parametrize("seed", range(5))
def test_outcome_follows_final_scores(seed: int) -> None:
    m = _play_random_match(seed)
    human, opp = m.scores
    expected = "win" if human > opp else "lose" if human < opp else "tie"
    assert outcome(m) == expected


def test_unfinished_until_both_hands_are_empty(deck: list[Card]) -> None:
    m = deal(deck=deck)
    assert outcome(m) == "unfinished"
    submit_human_card(m, S(Rank.ACE))
    assert outcome(m) == "unfinished"


def test_outcome_on_hand_built_end_states(deck: list[Card]) -> None:
    m = deal(deck=deck)
    m.hands = [[], []]
    m.trick = []
    m.scores = [14, 12]
    assert outcome(m) == "win"
    m.scores = [12, 14]
    assert outcome(m) == "lose"
    m.scores = [13, 13]
    assert outcome(m) == "tie"


def test_no_submissions_after_the_end() -> None:
    m = _play_random_match(3)
    before = _snapshot(m)
    assert legal_cards(m) == []
    with pytest.raises(MatchAlreadyOver):
        submit_human_card(m, S(Rank.ACE))
    assert _snapshot(m) == before


def test_check_invariants_catches_duplicated_card(deck: list[Card]) -> None:
    m = deal(deck=deck)
    m.hands[Player.HUMAN].append(m.hands[Player.OPPONENT][0])
    with pytest.raises(AssertionError):
        check_invariants(m)
