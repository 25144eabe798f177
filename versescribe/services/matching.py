"""Compare typed input against the target verse text."""

from enum import Enum
from typing import NamedTuple


class MatchState(str, Enum):
    MATCH = "match"
    PENDING = "pending"
    MISMATCH = "mismatch"


class Segment(NamedTuple):
    text: str
    style: str  # "affirmative" | "error" | "neutral"


def match_state(text: str, target: str) -> MatchState:
    """
    Only leading/trailing whitespace of the input is ignored; spacing and
    punctuation inside the verse must be typed exactly.
    """
    typed = text.strip()
    if typed == target:
        return MatchState.MATCH
    if target.startswith(typed):
        return MatchState.PENDING
    return MatchState.MISMATCH


def highlight(text: str, target: str) -> list[Segment]:
    typed = text.strip()
    head = target[: len(typed)]
    tail = target[len(typed):]
    out: list[Segment] = []
    if head:
        out.append(Segment(head, "affirmative" if head == typed else "error"))
    if tail:
        out.append(Segment(tail, "neutral"))
    return out
