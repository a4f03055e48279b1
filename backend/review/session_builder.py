"""Builds the queue of cards for one review session."""
import random
from dataclasses import dataclass

from review.context import MasteryStatus, WordRecord


@dataclass(frozen=True)
class Empty:
    """The user has no words at all."""


@dataclass(frozen=True)
class AllMastered:
    """The user has words, but every one of them is mastered."""


@dataclass(frozen=True)
class Ready:
    queue: tuple[WordRecord, ...]


SessionResult = Empty | AllMastered | Ready


def is_eligible(record: WordRecord, force_review: bool) -> bool:
    return force_review or record.status < MasteryStatus.MASTERED


def shuffle_in_place(items: list, rng=None) -> list:
    """Fisher-Yates shuffle.

    Walks i from the last index down to 1 and swaps items[i] with a uniformly
    drawn items[j], 0 <= j <= i. `rng` is anything with a `randint` method,
    the `random` module by default.
    """
    rng = rng or random
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def build_session(all_words, force_review: bool = False, rng=None) -> SessionResult:
    """
    Decide what a session started on `all_words` looks like.

    Args:
        all_words: full snapshot of one user's WordRecords (may be empty)
        force_review: when True mastered words are drilled too
        rng: randomness source for the shuffle, mostly for tests

    Returns:
        Empty, AllMastered or Ready(queue), checked in that order.
    """
    all_words = list(all_words)
    if not all_words:
        return Empty()

    eligible = [w for w in all_words if is_eligible(w, force_review)]
    if not eligible:
        return AllMastered()

    return Ready(queue=tuple(shuffle_in_place(eligible, rng)))
