"""Centralized constants and defaults for German Whist play.

Every tunable default lives here.  Import from this module instead
of hardcoding magic numbers elsewhere.

Usage::

    from whistbot.games.german_whist.constants import (
        DEFAULT_LEAD_CONFIDENCE,
        HAND_SIZE,
    )
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
#  Deck / deal
# ---------------------------------------------------------------------------

DECK_SIZE: int = 52
"""One card per (suit, rank); no duplicates."""

CARDS_PER_SUIT: int = 13

HAND_SIZE: int = 13
"""Cards dealt to each player.  The remaining 26 form the stock."""

# ---------------------------------------------------------------------------
#  Opponent policy
# ---------------------------------------------------------------------------

DEFAULT_LEAD_CONFIDENCE: float = 0.80
"""Minimum estimated win chance for a lead card to count as "safe".

When leading, the opponent spends the cheapest card whose score reaches
this value and keeps its stronger cards for later.  If no card reaches
it, the highest-scoring card is led instead.
"""

# ---------------------------------------------------------------------------
#  Invariant checks
# ---------------------------------------------------------------------------

BELIEF_SUM_TOLERANCE: float = 1e-9
"""Allowed drift between the belief vector sum and the human hand size."""
