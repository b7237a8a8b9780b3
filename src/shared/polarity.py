"""Reaction polarity shared by product and member reactions."""

from enum import Enum
from typing import assert_never

from protean.exceptions import ValidationError


class Polarity(Enum):
    UPVOTE = 0
    DOWNVOTE = 1

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value) -> "Polarity":
        """Accept ``"upvote"``/``"downvote"`` or the stored integer code."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise ValidationError({"polarity": [f"Unknown reaction type '{value}', expected 'upvote' or 'downvote'"]})


def tally(polarities) -> tuple[int, int]:
    """Return ``(upvotes, downvotes)`` for a sequence of stored polarity codes."""
    upvotes = downvotes = 0
    for code in polarities:
        polarity = Polarity(code)
        match polarity:
            case Polarity.UPVOTE:
                upvotes += 1
            case Polarity.DOWNVOTE:
                downvotes += 1
            case _:
                assert_never(polarity)
    return upvotes, downvotes
