"""
Sequential "first success wins" fallback over an ordered list of sources.

Both the Invidious instance rotation and the channel URL-shape rotation
are expressed with :func:`try_in_order`. Sources are attempted strictly one
at a time, each exactly once, in the order given.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")


@dataclass(frozen=True)
class FallbackOutcome(Generic[S, T]):
    """
    The source that produced a value, and the value.

    Attributes
    ----------
    source : S
        The winning source.
    value : T
        What the attempt returned.
    attempts : list[S]
        Every source attempted, in order, including the winner.
    """

    source: S
    value: T
    attempts: list[S] = field(default_factory=list)


async def try_in_order(
    sources: Iterable[S],
    attempt: Callable[[S], Awaitable[T | None]],
    *,
    description: str = "source",
    attempted: list[S] | None = None,
) -> FallbackOutcome[S, T] | None:
    """
    Await ``attempt`` on each source in turn until one yields a value.

    An attempt fails when it raises or returns ``None``. Failures are
    logged at WARNING and the next source is tried; they never propagate.

    Parameters
    ----------
    sources : Iterable[S]
        Candidates in priority order.
    attempt : Callable[[S], Awaitable[T | None]]
        Coroutine function producing a value for one source.
    description : str, optional
        What a source is, for log messages (default: "source").
    attempted : list[S] | None, optional
        When given, every source tried is appended to it, so callers can
        report what was attempted even when nothing succeeded.

    Returns
    -------
    FallbackOutcome[S, T] | None
        The first success, or None when every source failed.

    Examples
    --------
    >>> outcome = await try_in_order(instances, fetch_from, description="Invidious instance")
    >>> if outcome:
    ...     print(outcome.source, len(outcome.attempts))
    """
    tried: list[S] = attempted if attempted is not None else []

    for source in sources:
        tried.append(source)
        try:
            value = await attempt(source)
        except Exception as e:
            logger.warning(
                "%s %s failed: %s: %s", description, source, type(e).__name__, e
            )
            continue

        if value is None:
            logger.warning("%s %s produced no result", description, source)
            continue

        return FallbackOutcome(source=source, value=value, attempts=list(tried))

    if tried:
        logger.warning("All %d %s attempts failed", len(tried), description)
    return None
