"""
Bounded search for a diff base that actually differs from the release.

When the previous tag turns out to be equivalent to the current release
it cannot serve as the base of a changelog. The walk then tries the next
older tag, or the first parent of the equivalent reference, until a
different base is found or the attempt ceiling is reached.

The walk is a small state machine::

    Probing(candidate, attempts_left) --different--> Found(candidate)
    Probing(candidate, attempts_left) --equivalent--> Probing(successor, attempts_left - 1)
    Probing(...) --no successor / no attempts left--> Exhausted
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from release_notes_helper.equivalence.detector import EquivalenceDetector
from release_notes_helper.host.github_client import HostError
from release_notes_helper.versioning.tag_resolver import PreviousRelease


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


MAX_BASE_ATTEMPTS = 5


@dataclass(frozen=True)
class Probing:
    candidate: PreviousRelease
    attempts_left: int


@dataclass(frozen=True)
class Found:
    candidate: PreviousRelease
    attempts: int


@dataclass(frozen=True)
class Exhausted:
    attempts: int


WalkResult = Union[Found, Exhausted]
Successor = Callable[[], Optional[PreviousRelease]]


def first_parent_finder(host) -> Callable[[PreviousRelease], Optional[PreviousRelease]]:
    """Return a function mapping a candidate to its first parent commit."""

    def first_parent(candidate: PreviousRelease) -> Optional[PreviousRelease]:
        try:
            commit = host.get_commit_object(candidate.reference)
        except HostError as exc:
            logger.warning("Could not load parents of %s: %s", candidate.reference, exc)
            return None
        if not commit.parents:
            return None
        return PreviousRelease(reference=commit.parents[0])

    return first_parent


def walk_to_distinct_base(
    current_reference: str,
    first_candidate: PreviousRelease,
    detector: EquivalenceDetector,
    next_tag: Successor,
    first_parent: Callable[[PreviousRelease], Optional[PreviousRelease]],
    max_attempts: int = MAX_BASE_ATTEMPTS,
) -> WalkResult:
    """Find the first candidate that is not equivalent to ``current_reference``.

    Args:
        current_reference: SHA of the release being generated.
        first_candidate: Base proposed by the tag resolver.
        detector: Equivalence detector used for every probe.
        next_tag: Returns the next older qualifying tag, or ``None``.
        first_parent: Returns the first parent of a candidate, or ``None``.
        max_attempts: Maximum number of equivalence checks.

    Returns:
        ``Found`` with the usable base, or ``Exhausted`` when every probe
        within the ceiling was equivalent or history ran out.
    """
    state: Union[Probing, WalkResult] = Probing(first_candidate, max_attempts)
    while isinstance(state, Probing):
        state = _step(state, current_reference, detector, next_tag, first_parent, max_attempts)
    if isinstance(state, Exhausted):
        logger.warning(
            "No base different from %s found after %s attempt(s)",
            current_reference,
            state.attempts,
        )
    return state


def _step(
    state: Probing,
    current_reference: str,
    detector: EquivalenceDetector,
    next_tag: Successor,
    first_parent: Callable[[PreviousRelease], Optional[PreviousRelease]],
    max_attempts: int,
) -> Union[Probing, WalkResult]:
    if state.attempts_left <= 0:
        return Exhausted(attempts=max_attempts)

    attempts = max_attempts - state.attempts_left + 1
    candidate = state.candidate
    if not detector.are_equivalent(candidate.reference, current_reference):
        logger.info("Using %s as changelog base", candidate.name or candidate.reference)
        return Found(candidate, attempts)

    logger.info(
        "%s is identical to the current release, looking further back",
        candidate.name or candidate.reference,
    )
    if state.attempts_left == 1:
        return Exhausted(attempts=attempts)

    successor = next_tag() or first_parent(candidate)
    if successor is None:
        return Exhausted(attempts=attempts)
    return Probing(successor, state.attempts_left - 1)
