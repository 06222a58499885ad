"""
Correlation Reporting
Text and tabular presentation of computed coefficients
"""

from decimal import Decimal, localcontext

import pandas as pd

from .statistics import CorrelationResult

COEFFICIENT_NAMES = {
    'pearson': 'Pearson',
    'spearman': 'Spearman',
    'kendall': 'Kendall',
}


def round_coefficient(value: Decimal, places: int) -> Decimal:
    """Quantize a coefficient to ``places`` decimal places (half-even)."""
    with localcontext() as ctx:
        ctx.prec = max(places + 10, 28)
        return value.quantize(Decimal(1).scaleb(-places))


def correlation_strength(value: Decimal) -> str:
    """Strength label for a coefficient, as used in the correlation ranking legend."""
    magnitude = abs(value)
    if magnitude > Decimal('0.8'):
        return 'Very Strong'
    if magnitude > Decimal('0.6'):
        return 'Strong'
    if magnitude > Decimal('0.4'):
        return 'Moderate'
    return 'Weak'


def _coefficient_label(name: str, result: CorrelationResult) -> str:
    label = COEFFICIENT_NAMES[name]
    if name == 'kendall':
        label = f"{label} (tau-{result.kendall_variant})"
    return label


def format_correlation_report(result: CorrelationResult, places: int = 8) -> str:
    """
    Console report for one calculation.

    Parameters
    ----------
    result : CorrelationResult
        Output of ``calculate_correlations``
    places : int
        Decimal places shown for each coefficient

    Returns
    -------
    str
        Multi-line report, one line per coefficient
    """
    lines = [f"Calculating statistics for {result.label_x} and {result.label_y}", ""]
    for name, value in result.as_dict().items():
        label = _coefficient_label(name, result)
        lines.append(f"The {label} Coefficient is: {round_coefficient(value, places):f}")
    return "\n".join(lines)


def correlation_summary_frame(result: CorrelationResult, places: int = 8) -> pd.DataFrame:
    """
    Summary table of the three coefficients.

    Returns
    -------
    pd.DataFrame
        Columns: ['Coefficient', 'Value', 'Strength']
    """
    rows = []
    for name, value in result.as_dict().items():
        rows.append({
            'Coefficient': _coefficient_label(name, result),
            'Value': float(round_coefficient(value, places)),
            'Strength': correlation_strength(value),
        })
    return pd.DataFrame(rows)
