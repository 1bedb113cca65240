"""Automated review moderation heuristic."""
from dataclasses import dataclass, field
from typing import Tuple

from ..enums import ReviewStatus


DEFAULT_DENYLIST = ("spam", "fake", "scam")


@dataclass(frozen=True)
class ModerationPolicy:
    """
    Substring-match-or-low-rating rule.

    A comment containing any denylisted term (case-insensitive), or a
    1-star rating, is FLAGGED for manual review; anything else is PUBLISHED.
    """
    denylist: Tuple[str, ...] = field(default=DEFAULT_DENYLIST)
    flag_rating: int = 1

    def matched_terms(self, text: str) -> Tuple[str, ...]:
        lowered = (text or "").lower()
        return tuple(term for term in self.denylist if term.lower() in lowered)

    def evaluate(self, rating: int, comment: str) -> ReviewStatus:
        if self.matched_terms(comment) or rating == self.flag_rating:
            return ReviewStatus.FLAGGED
        return ReviewStatus.PUBLISHED
