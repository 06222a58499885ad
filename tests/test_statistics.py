"""Unit tests for the correlation coefficients and their orchestration."""

from __future__ import annotations

import dataclasses
import decimal
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal, localcontext
from itertools import combinations

import numpy as np
import pytest

from config_utils import EngineSettings
from correlation_utils import (
    CorrelationResult,
    DegenerateVarianceError,
    EmptyInputError,
    InputTooLargeError,
    InvalidSampleError,
    MismatchedLengthError,
    calculate_correlations,
    kendall_tau_a,
    kendall_tau_b,
    pearson_coefficient,
    spearman_coefficient,
)

scipy_stats = pytest.importorskip("scipy.stats")

TOLERANCE = 1e-8
ACCURACY_PLACES = 8


def _rounded(value: Decimal) -> float:
    return round(float(value), ACCURACY_PLACES)


def _brute_force_tau_b(x, y) -> float:
    """Direct concordant/discordant/tie count over every pair."""
    n = len(x)
    score = ties_x = ties_y = 0
    for i, j in combinations(range(n), 2):
        dx = (x[j] > x[i]) - (x[j] < x[i])
        dy = (y[j] > y[i]) - (y[j] < y[i])
        score += dx * dy
        ties_x += dx == 0
        ties_y += dy == 0
    n0 = n * (n - 1) // 2
    return score / ((n0 - ties_x) * (n0 - ties_y)) ** 0.5


# ──────────────────────────────────────────────
#  KNOWN VALUES
# ──────────────────────────────────────────────

def test_perfectly_correlated_samples() -> None:
    x = list(range(1, 11))
    result = calculate_correlations("A", x, "B", list(x))

    assert _rounded(result.pearson) == 1
    assert _rounded(result.spearman) == 1
    assert result.kendall == 1


def test_perfectly_anticorrelated_samples() -> None:
    x = list(range(1, 11))
    y = [11 - i for i in x]
    result = calculate_correlations("A", x, "B", y)

    assert _rounded(result.pearson) == -1
    assert _rounded(result.spearman) == -1
    assert result.kendall == -1


def test_tau_b_with_duplicates_regression(duplicate_fixture) -> None:
    x, y = duplicate_fixture
    result = calculate_correlations("A", x, "B", y)

    # C - D = -65, 91 pairs, 3 tied in x and 3 tied in y
    with localcontext() as ctx:
        ctx.prec = 50
        expected = Decimal(-65) / Decimal(88)
    assert abs(result.kendall - expected) < Decimal("1e-40")
    assert result.kendall_variant == "b"


def test_tau_b_with_duplicates_matches_reference(duplicate_fixture) -> None:
    x, y = duplicate_fixture
    tau = kendall_tau_b(x, y)

    assert float(tau) == pytest.approx(scipy_stats.kendalltau(x, y).statistic, abs=TOLERANCE)
    assert float(tau) == pytest.approx(_brute_force_tau_b(x, y), abs=TOLERANCE)


def test_tau_a_with_duplicates(duplicate_fixture) -> None:
    x, y = duplicate_fixture
    tau = kendall_tau_a(x, y)
    assert float(tau) == pytest.approx(-65 / 91, abs=TOLERANCE)


def test_tau_a_equals_tau_b_without_ties() -> None:
    x = [3, 1, 4, 10, 5, 9, 2, 6]
    y = [2, 7, 1, 8, 12, 11, 3, 5]
    assert kendall_tau_a(x, y) == kendall_tau_b(x, y)


def test_calculate_correlations_with_tau_a_variant(duplicate_fixture) -> None:
    x, y = duplicate_fixture
    result = calculate_correlations("A", x, "B", y, kendall_variant="a")
    assert result.kendall_variant == "a"
    assert result.kendall == kendall_tau_a(x, y)


def test_configured_variant_is_default(duplicate_fixture) -> None:
    x, y = duplicate_fixture
    engine = EngineSettings(kendall_variant="a")
    result = calculate_correlations("A", x, "B", y, engine=engine)
    assert result.kendall_variant == "a"


def test_unknown_variant_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown Kendall variant"):
        calculate_correlations("A", [1, 2, 3], "B", [3, 2, 1], kendall_variant="c")


def test_spearman_is_pearson_of_ranks() -> None:
    x = [10, 20, 20, 40, 35]
    y = [1, 3, 2, 5, 4]
    ranks_x = [1, 2.5, 2.5, 5, 4]
    ranks_y = [1, 3, 2, 5, 4]
    assert spearman_coefficient(x, y) == pearson_coefficient(ranks_x, ranks_y)


# ──────────────────────────────────────────────
#  REFERENCE IMPLEMENTATIONS
# ──────────────────────────────────────────────

@pytest.mark.parametrize("seed", [1, 7, 2024])
@pytest.mark.parametrize("n", [10, 60])
def test_random_samples_match_scipy(seed: int, n: int) -> None:
    rng = np.random.default_rng(seed)
    a = rng.random(n) * 100
    b = rng.random(n) * 100

    result = calculate_correlations("A", a.tolist(), "B", b.tolist())

    assert float(result.pearson) == pytest.approx(scipy_stats.pearsonr(a, b).statistic, abs=TOLERANCE)
    assert float(result.pearson) == pytest.approx(np.corrcoef(a, b)[0, 1], abs=TOLERANCE)
    assert float(result.spearman) == pytest.approx(scipy_stats.spearmanr(a, b).statistic, abs=TOLERANCE)
    assert float(result.kendall) == pytest.approx(scipy_stats.kendalltau(a, b).statistic, abs=TOLERANCE)


@pytest.mark.parametrize("seed", [3, 11])
def test_random_samples_with_ties_match_scipy(seed: int) -> None:
    rng = np.random.default_rng(seed)
    a = rng.integers(0, 6, size=40)
    b = rng.integers(0, 6, size=40)

    result = calculate_correlations("A", a.tolist(), "B", b.tolist())

    assert float(result.pearson) == pytest.approx(scipy_stats.pearsonr(a, b).statistic, abs=TOLERANCE)
    assert float(result.spearman) == pytest.approx(scipy_stats.spearmanr(a, b).statistic, abs=TOLERANCE)
    assert float(result.kendall) == pytest.approx(scipy_stats.kendalltau(a, b).statistic, abs=TOLERANCE)
    assert float(result.kendall) == pytest.approx(_brute_force_tau_b(a.tolist(), b.tolist()), abs=TOLERANCE)


# ──────────────────────────────────────────────
#  INPUT VALIDATION
# ──────────────────────────────────────────────

def test_mismatched_lengths_are_rejected() -> None:
    with pytest.raises(MismatchedLengthError) as excinfo:
        calculate_correlations("A", [1, 2, 3, 4, 5], "B", [1, 2, 3, 4])
    assert excinfo.value.len_x == 5
    assert excinfo.value.len_y == 4
    assert isinstance(excinfo.value, ValueError)


def test_empty_input_is_rejected() -> None:
    with pytest.raises(EmptyInputError):
        calculate_correlations("A", [], "B", [])


def test_single_observation_is_degenerate() -> None:
    with pytest.raises(DegenerateVarianceError):
        calculate_correlations("A", [1], "B", [2])


def test_constant_sample_names_the_column() -> None:
    with pytest.raises(DegenerateVarianceError, match="'Flat' has zero variance"):
        calculate_correlations("Flat", [4, 4, 4, 4], "B", [1, 2, 3, 4])


def test_constant_sample_is_degenerate_for_tau_b() -> None:
    with pytest.raises(DegenerateVarianceError):
        kendall_tau_b([1, 2, 3], [5, 5, 5])


def test_tau_a_single_observation_is_degenerate() -> None:
    with pytest.raises(DegenerateVarianceError):
        kendall_tau_a([1], [1])


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), "abc", None, True, object()])
def test_non_numeric_values_are_rejected(bad) -> None:
    with pytest.raises(InvalidSampleError, match="position 2"):
        calculate_correlations("A", [1, bad, 3], "B", [1, 2, 3])


def test_mixed_numeric_inputs_are_accepted() -> None:
    x = [Decimal("1.5"), 2, 3.25, "4", np.int64(5), np.float64(6.5)]
    y = [1, 2, 3, 4, 5, 6]
    result = calculate_correlations("A", x, "B", y)
    assert result.n == 6
    assert result.kendall == 1


def test_kendall_size_limit() -> None:
    engine = EngineSettings(max_kendall_observations=3)
    with pytest.raises(InputTooLargeError):
        calculate_correlations("A", [1, 2, 3, 4], "B", [4, 3, 2, 1], engine=engine)


# ──────────────────────────────────────────────
#  RESULT AND STATE
# ──────────────────────────────────────────────

def test_result_is_immutable() -> None:
    result = calculate_correlations("A", [1, 2, 3], "B", [1, 3, 2])
    assert isinstance(result, CorrelationResult)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.pearson = Decimal(0)  # type: ignore[misc]


def test_result_as_dict() -> None:
    result = calculate_correlations("A", [1, 2, 3], "B", [1, 3, 2])
    assert set(result.as_dict()) == {"pearson", "spearman", "kendall"}
    assert result.label_x == "A"
    assert result.label_y == "B"


def test_precision_setting_limits_significant_digits() -> None:
    engine = EngineSettings(decimal_precision=12)
    result = calculate_correlations("A", [1, 2, 3, 4], "B", [1, 3, 2, 7], engine=engine)
    assert len(result.pearson.as_tuple().digits) <= 12


def test_caller_decimal_context_is_untouched() -> None:
    before = decimal.getcontext().prec
    calculate_correlations("A", [1, 2, 3, 4], "B", [1, 3, 2, 7])
    assert decimal.getcontext().prec == before


def test_repeated_calls_are_independent() -> None:
    first = calculate_correlations("A", [1, 2, 3, 4], "B", [1, 2, 3, 4])
    calculate_correlations("C", [1, 2, 3, 4], "D", [4, 3, 2, 1])
    again = calculate_correlations("A", [1, 2, 3, 4], "B", [1, 2, 3, 4])
    assert first == again


def test_concurrent_calls_do_not_share_state() -> None:
    rng = np.random.default_rng(5)
    inputs = [(rng.random(25).tolist(), rng.random(25).tolist()) for _ in range(8)]
    serial = [calculate_correlations("A", a, "B", b) for a, b in inputs]

    with ThreadPoolExecutor(max_workers=4) as pool:
        parallel = list(pool.map(lambda pair: calculate_correlations("A", pair[0], "B", pair[1]), inputs))

    assert parallel == serial


# ──────────────────────────────────────────────
#  PRECISION EDGES
# ──────────────────────────────────────────────

def test_constant_sample_with_more_digits_than_precision() -> None:
    long_value = "1." + "3" * 60
    with pytest.raises(DegenerateVarianceError, match="'Long' has zero variance"):
        pearson_coefficient([long_value] * 3, [1, 2, 4], label_x="Long")
    with pytest.raises(DegenerateVarianceError):
        calculate_correlations("Long", [Decimal(long_value)] * 3, "B", [1, 2, 4])


def test_constant_float_sample_at_low_precision() -> None:
    engine = EngineSettings(decimal_precision=12)
    with pytest.raises(DegenerateVarianceError):
        pearson_coefficient([0.12345678901234566] * 3, [1, 2, 4], engine=engine)
    with pytest.raises(DegenerateVarianceError):
        spearman_coefficient([1, 2, 4], [0.12345678901234566] * 3, engine=engine)


@pytest.mark.parametrize("seed", range(10))
def test_self_correlation_is_exactly_one(seed: int) -> None:
    values = np.random.default_rng(seed).random(30).tolist()

    assert pearson_coefficient(values, values) == 1
    assert spearman_coefficient(values, values) == 1
    assert pearson_coefficient(values, [-v for v in values]) == -1
