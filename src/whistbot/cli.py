from __future__ import annotations

import argparse
import logging
import random
from typing import Callable, Optional, Sequence

from whistbot.games.german_whist.cards import Card
from whistbot.games.german_whist.constants import DEFAULT_LEAD_CONFIDENCE
from whistbot.games.german_whist.errors import WhistError
from whistbot.games.german_whist.game import (
    Match,
    deal,
    face_up_card,
    is_over,
    legal_cards,
    outcome,
    submit_human_card,
)
from whistbot.games.german_whist.rules import Player


def _cards(cards: Sequence[Card]) -> str:
    return " ".join(c.short() for c in cards) or "-"


def render(match: Match, *, show_opponent: bool = False) -> str:
    up = face_up_card(match)
    lines = [
        f"Trump: {match.trump.value.lower()}   Stock: {len(match.stock)}"
        + (f"   Face-up: {up.short()} {up.unicode()}" if up is not None else ""),
        f"Score: you {match.human_score} - {match.opponent_score} opponent",
    ]
    if show_opponent:
        lines.append(f"Opponent: {_cards(match.opponent_hand)}")
    if match.trick:
        lines.append(f"Opponent leads: {match.trick[0].short()} {match.trick[0].unicode()}")
    lines.append(f"Your hand: {_cards(sorted(match.human_hand, key=lambda c: (c.suit.ordinal, c.rank.order)))}")
    return "\n".join(lines)


def play(
    match: Match,
    choose: Callable[[Match], Card],
    *,
    show_opponent: bool = False,
    out: Callable[[str], None] = print,
) -> str:
    """Run ``match`` to the end, asking ``choose`` for every human card."""
    while not is_over(match):
        out(render(match, show_opponent=show_opponent))
        card = choose(match)
        try:
            result = submit_human_card(match, card)
        except WhistError as e:
            out(f"! {e}")
            continue
        if result.leader == Player.HUMAN:
            out(f"You led {result.lead_card.short()}, opponent played {result.follow_card.short()}.")
        else:
            out(f"Opponent led {result.lead_card.short()}, you played {result.follow_card.short()}.")
        out("You win the trick." if result.winner == Player.HUMAN else "Opponent wins the trick.")
        out("")
    res = outcome(match)
    out(f"Final score: you {match.human_score} - {match.opponent_score} opponent ({res})")
    return res


def _prompt(match: Match) -> Card:
    while True:
        text = input("Your card: ")
        try:
            return Card.parse(text)
        except ValueError as e:
            print(f"! {e}")


def _random_chooser(rng: random.Random) -> Callable[[Match], Card]:
    def choose(match: Match) -> Card:
        return rng.choice(legal_cards(match))

    return choose


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="German Whist — play one match against the computer")
    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed (random when omitted).")
    parser.add_argument(
        "--auto",
        action="store_true",
        help="Let a random legal player take the human seat (no input needed).",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_LEAD_CONFIDENCE,
        help="Win-chance the opponent needs before leading its cheapest card.",
    )
    parser.add_argument("--show-opponent", action="store_true", help="Print the opponent's hand too.")
    parser.add_argument("--verbose", action="store_true", help="Debug logging (policy decisions, belief updates).")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    match = deal(args.seed, threshold=args.threshold)
    choose = _random_chooser(random.Random(args.seed)) if args.auto else _prompt
    try:
        play(match, choose, show_opponent=args.show_opponent)
    except (KeyboardInterrupt, EOFError):
        print("\nBye.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
