"""Descriptive statistics and significance tests.

describe: mean / sample SD / SEM
welch_t_test: two-sample unequal-variance t-test with explicit degenerate cases
one_way_anova: omnibus F-test across three or more groups
"""

import enum
import math
import warnings
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy import stats

from relquant.constants import AnalysisConstants
from relquant.utils import is_missing


@dataclass(frozen=True)
class DescriptiveStats:
    n: int
    mean: float
    variance: float
    sd: float
    sem: float


def describe(values: Sequence[float]) -> DescriptiveStats:
    """Mean, sample variance (n-1), SD and SEM; 0 wherever undefined."""
    arr = np.asarray(values, dtype=float)
    n = arr.size
    mean = float(arr.mean()) if n > 0 else 0.0
    variance = float(arr.var(ddof=1)) if n > 1 else 0.0
    sd = math.sqrt(variance)
    sem = sd / math.sqrt(n) if n > 0 else 0.0
    return DescriptiveStats(n=n, mean=mean, variance=variance, sd=sd, sem=sem)


class Outcome(str, enum.Enum):
    TESTED = "tested"
    DEGENERATE = "degenerate"
    INSUFFICIENT_REPLICATES = "insufficient_replicates"


@dataclass(frozen=True)
class PairwiseTest:
    p_value: float
    outcome: Outcome
    t_statistic: Optional[float] = None
    df: Optional[float] = None

    @property
    def is_valid(self) -> bool:
        return not math.isnan(self.p_value)

    @property
    def significance(self) -> str:
        return get_significance_label(self.p_value)


@dataclass(frozen=True)
class AnovaTest:
    p_value: float
    f_statistic: Optional[float]
    outcome: Outcome


def get_significance_label(p: Optional[float]) -> str:
    """Map a p-value to ns / * / ** / *** / ****; empty when untested."""
    if is_missing(p):
        return ""
    if p > AnalysisConstants.SIGNIFICANCE_ALPHA:
        return AnalysisConstants.NOT_SIGNIFICANT_LABEL
    for label, threshold in AnalysisConstants.P_VALUE_THRESHOLDS.items():
        if p <= threshold:
            return label
    return AnalysisConstants.NOT_SIGNIFICANT_LABEL


def welch_t_test(sample1: Sequence[float], sample2: Sequence[float]) -> PairwiseTest:
    """Welch's two-tailed t-test (unequal variances).

    Both samples need at least MIN_REPLICATES_FOR_STATS values, otherwise the
    p-value is NaN. When both variances are zero the data are perfectly
    separated (p = 0.0) or identical (p = 1.0).
    """
    a = np.asarray(sample1, dtype=float)
    b = np.asarray(sample2, dtype=float)
    n1, n2 = a.size, b.size
    if n1 < AnalysisConstants.MIN_REPLICATES_FOR_STATS or n2 < AnalysisConstants.MIN_REPLICATES_FOR_STATS:
        return PairwiseTest(p_value=math.nan, outcome=Outcome.INSUFFICIENT_REPLICATES)

    m1, m2 = float(a.mean()), float(b.mean())
    v1, v2 = float(a.var(ddof=1)), float(b.var(ddof=1))

    if v1 == 0 and v2 == 0:
        return PairwiseTest(p_value=1.0 if m1 == m2 else 0.0, outcome=Outcome.DEGENERATE)

    se1, se2 = v1 / n1, v2 / n2
    if se1 + se2 == 0:
        return PairwiseTest(p_value=0.0, outcome=Outcome.DEGENERATE)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        result = stats.ttest_ind(a, b, equal_var=False)
    t = float(result.statistic)
    # Welch-Satterthwaite degrees of freedom
    df = (se1 + se2) ** 2 / (se1 ** 2 / (n1 - 1) + se2 ** 2 / (n2 - 1))
    # Two-sided p is 2 * sf(|t|), so swapping the samples leaves it unchanged
    p = float(result.pvalue)
    return PairwiseTest(p_value=min(p, 1.0), outcome=Outcome.TESTED, t_statistic=t, df=df)


def one_way_anova(*vectors: Sequence[float]) -> AnovaTest:
    """One-way ANOVA F-test; every vector must have at least two values."""
    arrays = [np.asarray(v, dtype=float) for v in vectors]
    if len(arrays) < 2 or any(arr.size < AnalysisConstants.MIN_REPLICATES_FOR_STATS for arr in arrays):
        return AnovaTest(p_value=math.nan, f_statistic=None, outcome=Outcome.INSUFFICIENT_REPLICATES)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        f_stat, p_val = stats.f_oneway(*arrays)
    f_stat, p_val = float(f_stat), float(p_val)

    if math.isnan(p_val):
        # All values identical in every group: no evidence of any difference
        return AnovaTest(p_value=1.0, f_statistic=None, outcome=Outcome.DEGENERATE)
    if math.isinf(f_stat):
        return AnovaTest(p_value=0.0, f_statistic=f_stat, outcome=Outcome.DEGENERATE)
    return AnovaTest(p_value=p_val, f_statistic=f_stat, outcome=Outcome.TESTED)
