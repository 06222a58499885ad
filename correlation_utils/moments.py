"""
Moment Accumulation
Means, covariance sum and standard deviations in decimal arithmetic
"""

import logging
import math
from decimal import Decimal
from typing import NamedTuple, Optional, Sequence

from .errors import EmptyInputError, MismatchedLengthError, NegativeRadicandError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 200


class Moments(NamedTuple):
    """
    Un-normalised second moments of a pair of samples.

    ``std_dev_x``, ``std_dev_y`` and ``covariance_sum`` are not divided by N;
    the N terms cancel in the Pearson ratio.
    """

    mean_x: Decimal
    mean_y: Decimal
    std_dev_x: Decimal
    std_dev_y: Decimal
    covariance_sum: Decimal


def _initial_estimate(x: Decimal) -> Decimal:
    """Float seed for Newton's method, or a power of ten when out of float range."""
    seed = math.sqrt(float(x))
    if seed > 0 and math.isfinite(seed):
        return Decimal(seed)
    return Decimal(10) ** (x.adjusted() // 2)


def decimal_sqrt(
    x: Decimal,
    epsilon: Decimal = Decimal(0),
    max_iterations: Optional[int] = None
) -> Decimal:
    """
    Square root of a Decimal by Newton's method.

    Parameters
    ----------
    x : Decimal
        Radicand, must be non-negative
    epsilon : Decimal
        Stop once two successive iterates differ by no more than this.
        ``0`` iterates to the precision of the active decimal context.
    max_iterations : int, optional
        Upper bound on Newton steps (default 200)

    Returns
    -------
    Decimal
        The root, accurate to the current context precision when epsilon is 0

    Raises
    ------
    NegativeRadicandError
        If ``x < 0``
    """
    x = Decimal(x)
    if x < 0:
        raise NegativeRadicandError(x)
    if x == 0:
        return Decimal(0)

    limit = max_iterations or DEFAULT_MAX_ITERATIONS
    current = _initial_estimate(x)
    before_previous = None
    for _ in range(limit):
        previous = current
        current = (previous + x / previous) / 2
        if abs(previous - current) <= epsilon:
            return current
        # At full precision the iterate can flip between two neighbouring values
        if current == before_previous:
            return min(current, previous)
        before_previous = previous

    logger.warning("decimal_sqrt stopped after %d iterations for %s", limit, x)
    return current


def accumulate_moments(
    x: Sequence[Decimal],
    y: Sequence[Decimal],
    epsilon: Decimal = Decimal(0),
    max_iterations: Optional[int] = None
) -> Moments:
    """
    Means, covariance sum and un-normalised standard deviations of paired samples.

    Parameters
    ----------
    x, y : sequence of Decimal
        Paired samples of equal, non-zero length
    epsilon, max_iterations
        Passed to ``decimal_sqrt``

    Returns
    -------
    Moments
        ``covariance_sum = sum((xi - mean_x) * (yi - mean_y))`` and
        ``std_dev = sqrt(sum((xi - mean)**2))``
    """
    if len(x) != len(y):
        raise MismatchedLengthError(len(x), len(y))
    n = len(x)
    if n == 0:
        raise EmptyInputError()

    mean_x = sum(x, Decimal(0)) / n
    mean_y = sum(y, Decimal(0)) / n

    covariance_sum = Decimal(0)
    squares_x = Decimal(0)
    squares_y = Decimal(0)
    for xi, yi in zip(x, y):
        dx = xi - mean_x
        dy = yi - mean_y
        covariance_sum += dx * dy
        squares_x += dx * dx
        squares_y += dy * dy

    return Moments(
        mean_x=mean_x,
        mean_y=mean_y,
        std_dev_x=decimal_sqrt(squares_x, epsilon, max_iterations),
        std_dev_y=decimal_sqrt(squares_y, epsilon, max_iterations),
        covariance_sum=covariance_sum,
    )
