"""
Correlation Utilities
Pearson, Spearman and Kendall's tau for a pair of numeric samples,
computed in decimal arithmetic with tie-corrected ranks
"""

from .errors import (
    CorrelationError,
    MismatchedLengthError,
    EmptyInputError,
    DegenerateVarianceError,
    NegativeRadicandError,
    InvalidSampleError,
    InputTooLargeError
)

from .ranking import (
    RankedDatum,
    rank_sample,
    rank_values
)

from .moments import (
    Moments,
    accumulate_moments,
    decimal_sqrt
)

from .statistics import (
    CorrelationResult,
    as_decimal_sample,
    calculate_correlations,
    pearson_coefficient,
    spearman_coefficient,
    kendall_tau_a,
    kendall_tau_b
)

from .reporting import (
    format_correlation_report,
    correlation_summary_frame,
    correlation_strength,
    round_coefficient
)

from .plotting import (
    create_correlation_scatter
)

__all__ = [
    # Errors
    'CorrelationError',
    'MismatchedLengthError',
    'EmptyInputError',
    'DegenerateVarianceError',
    'NegativeRadicandError',
    'InvalidSampleError',
    'InputTooLargeError',
    # Ranking
    'RankedDatum',
    'rank_sample',
    'rank_values',
    # Moments
    'Moments',
    'accumulate_moments',
    'decimal_sqrt',
    # Coefficients
    'CorrelationResult',
    'as_decimal_sample',
    'calculate_correlations',
    'pearson_coefficient',
    'spearman_coefficient',
    'kendall_tau_a',
    'kendall_tau_b',
    # Reporting
    'format_correlation_report',
    'correlation_summary_frame',
    'correlation_strength',
    'round_coefficient',
    # Plotting
    'create_correlation_scatter'
]
