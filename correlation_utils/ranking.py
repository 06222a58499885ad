"""
Sample Ranking
Tie-corrected ranks for correlation analysis
"""

import logging
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence

logger = logging.getLogger(__name__)


@dataclass
class RankedDatum:
    """A sample value together with the rank assigned to it."""

    value: Decimal
    rank: Decimal


def rank_sample(sample: Sequence[Decimal]) -> List[RankedDatum]:
    """
    Rank a sample, giving tied values the mean of their sequential ranks.

    Parameters
    ----------
    sample : sequence of Decimal
        Values to rank. Order is preserved in the output.

    Returns
    -------
    list of RankedDatum
        One entry per input value, in input order (not sorted)

    Notes
    -----
    Each value first receives the 1-based position of its first occurrence
    in the sorted sample. A provisional rank ``r`` shared by ``k`` values
    covers the ranks ``r .. r+k-1``, so their sum is ``k*r`` plus the
    triangular number of order ``k-1``; dividing by ``k`` gives the mean
    rank ``r + (k-1)/2``. Ranks therefore always sum to ``N(N+1)/2``.

    Examples
    --------
    >>> [d.rank for d in rank_sample([Decimal(5), Decimal(5), Decimal(1)])]
    [Decimal('2.5'), Decimal('2.5'), Decimal('1')]
    """
    ordered = sorted(sample)

    # First occurrence of each value in the sorted copy
    first_position = {}
    for position, value in enumerate(ordered):
        if value not in first_position:
            first_position[value] = position + 1

    ranked = [RankedDatum(value, Decimal(first_position[value])) for value in sample]

    # Tied values share the mean of the ranks they occupy
    counts = Counter(datum.rank for datum in ranked)
    mean_rank = {}
    tie_groups = 0
    for provisional, count in counts.items():
        if count < 2:
            mean_rank[provisional] = provisional
            continue
        tie_groups += 1
        triangular = Decimal((count - 1) * count // 2)
        mean_rank[provisional] = (count * provisional + triangular) / count

    for datum in ranked:
        datum.rank = mean_rank[datum.rank]

    if tie_groups:
        logger.debug("Ranked %d values with %d tie groups", len(ranked), tie_groups)

    return ranked


def rank_values(sample: Sequence[Decimal]) -> List[Decimal]:
    """Ranks of ``sample`` in input order (see ``rank_sample``)."""
    return [datum.rank for datum in rank_sample(sample)]
