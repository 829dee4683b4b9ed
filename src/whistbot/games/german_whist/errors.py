from __future__ import annotations


class WhistError(ValueError):
    """Base class for rejected submissions.  The match is left untouched."""


class IllegalCard(WhistError):
    """The card is not in the human's hand, or it fails to follow suit."""


class MatchAlreadyOver(WhistError):
    """A card was submitted after both hands ran out."""
