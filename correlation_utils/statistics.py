"""
Correlation Statistics
Pearson, Spearman and Kendall's tau for a pair of numeric samples
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from config_utils import EngineSettings, get_settings

from .errors import (
    DegenerateVarianceError,
    EmptyInputError,
    InputTooLargeError,
    InvalidSampleError,
    MismatchedLengthError,
)
from .moments import Moments, accumulate_moments, decimal_sqrt
from .ranking import rank_values

logger = logging.getLogger(__name__)

KENDALL_VARIANTS = ('a', 'b')

# Extra digits carried while accumulating; results are rounded back to decimal_precision
GUARD_DIGITS = 10


@dataclass(frozen=True)
class CorrelationResult:
    """Coefficients computed by one ``calculate_correlations`` call."""

    label_x: str
    label_y: str
    n: int
    pearson: Decimal
    spearman: Decimal
    kendall: Decimal
    kendall_variant: str = 'b'

    def as_dict(self) -> Dict[str, Decimal]:
        return {
            'pearson': self.pearson,
            'spearman': self.spearman,
            'kendall': self.kendall,
        }


# =============================================================================
# INPUT HANDLING
# =============================================================================

def as_decimal_sample(values: Sequence, label: Optional[str] = None) -> List[Decimal]:
    """
    Convert a numeric sequence to Decimals.

    Floats go through their shortest repr, so ``0.1`` becomes ``Decimal('0.1')``.
    Strings must parse as decimal numbers. Booleans, None and non-finite
    values are rejected with ``InvalidSampleError``.
    """
    converted = []
    for position, value in enumerate(values):
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, (bool, np.bool_)) or value is None:
            raise InvalidSampleError(value, position, label)
        elif isinstance(value, (int, np.integer)):
            number = Decimal(int(value))
        elif isinstance(value, (float, np.floating)):
            number = Decimal(repr(float(value)))
        elif isinstance(value, str):
            try:
                number = Decimal(value.strip())
            except InvalidOperation:
                raise InvalidSampleError(value, position, label) from None
        else:
            raise InvalidSampleError(value, position, label)

        if not number.is_finite():
            raise InvalidSampleError(value, position, label)
        converted.append(number)
    return converted


def _prepare_samples(
    x: Sequence,
    y: Sequence,
    label_x: Optional[str] = None,
    label_y: Optional[str] = None
) -> Tuple[List[Decimal], List[Decimal]]:
    if len(x) != len(y):
        raise MismatchedLengthError(len(x), len(y))
    if len(x) == 0:
        raise EmptyInputError()
    return as_decimal_sample(x, label_x), as_decimal_sample(y, label_y)


def _engine_settings(engine: Optional[EngineSettings]) -> EngineSettings:
    return engine if engine is not None else get_settings().engine


def _check_not_constant(sample: Sequence[Decimal], label: Optional[str], coefficient: str) -> None:
    """Raise when every value is equal, compared exactly on the input Decimals."""
    if min(sample) == max(sample):
        raise DegenerateVarianceError(label, coefficient)


def _round_to_precision(value: Decimal, engine: EngineSettings) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = engine.decimal_precision
        return +value


# =============================================================================
# PEARSON / SPEARMAN
# =============================================================================

def _ratio_from_moments(
    moments: Moments,
    label_x: Optional[str],
    label_y: Optional[str],
    coefficient: str
) -> Decimal:
    if moments.std_dev_x == 0:
        raise DegenerateVarianceError(label_x, coefficient)
    if moments.std_dev_y == 0:
        raise DegenerateVarianceError(label_y, coefficient)
    return moments.covariance_sum / (moments.std_dev_x * moments.std_dev_y)


def pearson_coefficient(
    x: Sequence,
    y: Sequence,
    label_x: Optional[str] = None,
    label_y: Optional[str] = None,
    engine: Optional[EngineSettings] = None
) -> Decimal:
    """
    Pearson product-moment correlation.

    Parameters
    ----------
    x, y : sequence of numbers
        Paired samples of equal length
    label_x, label_y : str, optional
        Names used in error messages
    engine : EngineSettings, optional
        Numerical settings (defaults to the configured ones)

    Returns
    -------
    Decimal
        ``covariance_sum / (std_dev_x * std_dev_y)``

    Raises
    ------
    DegenerateVarianceError
        If either sample is constant
    """
    engine = _engine_settings(engine)
    with localcontext() as ctx:
        ctx.prec = engine.decimal_precision + GUARD_DIGITS
        xs, ys = _prepare_samples(x, y, label_x, label_y)
        _check_not_constant(xs, label_x, 'Pearson')
        _check_not_constant(ys, label_y, 'Pearson')
        moments = accumulate_moments(xs, ys, engine.sqrt_epsilon, engine.sqrt_max_iterations)
        pearson = _ratio_from_moments(moments, label_x, label_y, 'Pearson')
    return _round_to_precision(pearson, engine)


def spearman_coefficient(
    x: Sequence,
    y: Sequence,
    label_x: Optional[str] = None,
    label_y: Optional[str] = None,
    engine: Optional[EngineSettings] = None
) -> Decimal:
    """
    Spearman rank correlation: the Pearson formula applied to tie-corrected ranks.
    """
    engine = _engine_settings(engine)
    with localcontext() as ctx:
        ctx.prec = engine.decimal_precision + GUARD_DIGITS
        xs, ys = _prepare_samples(x, y, label_x, label_y)
        _check_not_constant(xs, label_x, 'Spearman')
        _check_not_constant(ys, label_y, 'Spearman')
        moments = accumulate_moments(
            rank_values(xs), rank_values(ys), engine.sqrt_epsilon, engine.sqrt_max_iterations
        )
        spearman = _ratio_from_moments(moments, label_x, label_y, 'Spearman')
    return _round_to_precision(spearman, engine)


# =============================================================================
# KENDALL'S TAU
# =============================================================================

def _kendall_pair_counts(
    ranks_x: Sequence[Decimal],
    ranks_y: Sequence[Decimal]
) -> Tuple[int, int, int]:
    """
    Sweep every unordered pair of observations.

    Returns
    -------
    tuple
        (concordant - discordant, pairs tied in x, pairs tied in y).
        Pairs tied in either sample add nothing to the first count.

    Notes
    -----
    Ranks are multiples of 0.5 no larger than N, so float64 holds them
    exactly and the sign comparisons match a Decimal pair loop.
    """
    rx = np.array([float(r) for r in ranks_x], dtype=np.float64)
    ry = np.array([float(r) for r in ranks_y], dtype=np.float64)
    n = len(rx)

    score = 0
    ties_x = 0
    ties_y = 0
    for i in range(n - 1):
        sign_x = np.sign(rx[i + 1:] - rx[i]).astype(np.int64)
        sign_y = np.sign(ry[i + 1:] - ry[i]).astype(np.int64)
        score += int(np.dot(sign_x, sign_y))
        ties_x += int(np.count_nonzero(sign_x == 0))
        ties_y += int(np.count_nonzero(sign_y == 0))

    return score, ties_x, ties_y


def _check_kendall_size(n: int, engine: EngineSettings) -> None:
    limit = engine.max_kendall_observations
    if limit is not None and n > limit:
        raise InputTooLargeError(n, limit)


def _tau_from_ranks(
    ranks_x: Sequence[Decimal],
    ranks_y: Sequence[Decimal],
    variant: str,
    label_x: Optional[str],
    label_y: Optional[str],
    engine: EngineSettings
) -> Decimal:
    n = len(ranks_x)
    n0 = n * (n - 1) // 2
    score, ties_x, ties_y = _kendall_pair_counts(ranks_x, ranks_y)
    logger.debug(
        "Kendall sweep over %d pairs: C-D=%d, tied in x=%d, tied in y=%d",
        n0, score, ties_x, ties_y
    )

    if variant == 'a':
        if n0 == 0:
            raise DegenerateVarianceError(label_x, "Kendall tau-a")
        return Decimal(score) / Decimal(n0)

    if n0 - ties_x == 0:
        raise DegenerateVarianceError(label_x, "Kendall tau-b")
    if n0 - ties_y == 0:
        raise DegenerateVarianceError(label_y, "Kendall tau-b")
    denominator = decimal_sqrt(
        Decimal((n0 - ties_x) * (n0 - ties_y)),
        engine.sqrt_epsilon,
        engine.sqrt_max_iterations
    )
    return Decimal(score) / denominator


def _kendall(
    x: Sequence,
    y: Sequence,
    variant: str,
    label_x: Optional[str],
    label_y: Optional[str],
    engine: Optional[EngineSettings]
) -> Decimal:
    engine = _engine_settings(engine)
    with localcontext() as ctx:
        ctx.prec = engine.decimal_precision + GUARD_DIGITS
        xs, ys = _prepare_samples(x, y, label_x, label_y)
        _check_kendall_size(len(xs), engine)
        tau = _tau_from_ranks(rank_values(xs), rank_values(ys), variant, label_x, label_y, engine)
    return _round_to_precision(tau, engine)


def kendall_tau_b(
    x: Sequence,
    y: Sequence,
    label_x: Optional[str] = None,
    label_y: Optional[str] = None,
    engine: Optional[EngineSettings] = None
) -> Decimal:
    """
    Kendall's tau-b, adjusted for ties.

    ``tau_b = (C - D) / sqrt((n0 - n1) * (n0 - n2))`` where ``n0 = N(N-1)/2``
    and ``n1``, ``n2`` count the pairs tied in x and in y.

    Raises
    ------
    DegenerateVarianceError
        If every pair is tied in one of the samples (constant sample or N == 1)
    """
    return _kendall(x, y, 'b', label_x, label_y, engine)


def kendall_tau_a(
    x: Sequence,
    y: Sequence,
    label_x: Optional[str] = None,
    label_y: Optional[str] = None,
    engine: Optional[EngineSettings] = None
) -> Decimal:
    """
    Kendall's tau-a, without tie adjustment: ``(C - D) / (N(N-1)/2)``.
    """
    return _kendall(x, y, 'a', label_x, label_y, engine)


# =============================================================================
# ALL COEFFICIENTS
# =============================================================================

def calculate_correlations(
    label_x: str,
    x: Sequence,
    label_y: str,
    y: Sequence,
    kendall_variant: Optional[str] = None,
    engine: Optional[EngineSettings] = None
) -> CorrelationResult:
    """
    Compute Pearson, Spearman and Kendall's tau for two paired samples.

    Parameters
    ----------
    label_x : str
        Name of the first sample
    x : sequence of numbers
        First sample
    label_y : str
        Name of the second sample
    y : sequence of numbers
        Second sample, same length as ``x``
    kendall_variant : str, optional
        'b' (tie-adjusted) or 'a'. Defaults to the configured variant.
    engine : EngineSettings, optional
        Numerical settings (defaults to the configured ones)

    Returns
    -------
    CorrelationResult
        The three coefficients as Decimals

    Raises
    ------
    MismatchedLengthError
        If the samples differ in length
    EmptyInputError
        If the samples are empty
    DegenerateVarianceError
        If a sample has zero variance (this includes a single observation)
    InvalidSampleError
        If a value is not a finite number
    InputTooLargeError
        If N exceeds the configured Kendall limit

    Notes
    -----
    Sums and square roots carry ``GUARD_DIGITS`` beyond ``decimal_precision``;
    each coefficient is rounded back to ``decimal_precision`` digits, so a
    perfect correlation comes out as exactly 1 or -1.
    """
    engine = _engine_settings(engine)
    variant = (kendall_variant or engine.kendall_variant).lower()
    if variant not in KENDALL_VARIANTS:
        raise ValueError(f"Unknown Kendall variant: {kendall_variant}")

    with localcontext() as ctx:
        ctx.prec = engine.decimal_precision + GUARD_DIGITS

        xs, ys = _prepare_samples(x, y, label_x, label_y)
        _check_not_constant(xs, label_x, 'Pearson')
        _check_not_constant(ys, label_y, 'Pearson')
        _check_kendall_size(len(xs), engine)
        logger.debug("Calculating correlations for %s and %s (n=%d)", label_x, label_y, len(xs))

        ranks_x = rank_values(xs)
        ranks_y = rank_values(ys)

        raw_moments = accumulate_moments(xs, ys, engine.sqrt_epsilon, engine.sqrt_max_iterations)
        rank_moments = accumulate_moments(
            ranks_x, ranks_y, engine.sqrt_epsilon, engine.sqrt_max_iterations
        )

        pearson = _ratio_from_moments(raw_moments, label_x, label_y, 'Pearson')
        spearman = _ratio_from_moments(rank_moments, label_x, label_y, 'Spearman')
        kendall = _tau_from_ranks(ranks_x, ranks_y, variant, label_x, label_y, engine)

    return CorrelationResult(
        label_x=label_x,
        label_y=label_y,
        n=len(xs),
        pearson=_round_to_precision(pearson, engine),
        spearman=_round_to_precision(spearman, engine),
        kendall=_round_to_precision(kendall, engine),
        kendall_variant=variant,
    )
