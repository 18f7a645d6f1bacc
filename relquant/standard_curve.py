"""StandardCurveCalculator: amplification efficiency from a dilution series.

Ct readings are regressed against log10 of the relative concentration
(1, 1/D, 1/D², ...). The slope gives the efficiency E = 10 ** (-1/slope),
which can be written back to a gene with models.update_efficiency.
"""

import math
import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy import stats

from relquant.constants import StandardCurveConstants
from relquant.exceptions import InvalidDilutionSeries, QuantificationError, ZeroSlopeRegression
from relquant.utils import is_missing


@dataclass
class StandardCurveResult:
    status: str  # "success" | "warning" | "error"
    message: str = ""
    slope: Optional[float] = None
    intercept: Optional[float] = None
    r_squared: Optional[float] = None
    efficiency: Optional[float] = None
    percent_efficiency: Optional[float] = None
    efficiency_quality: str = ""  # "excellent" | "acceptable" | "poor"
    r_squared_quality: str = ""  # "good" | "warning"
    points: List[Tuple[float, float]] = field(default_factory=list)


def _to_ct(value) -> Optional[float]:
    if is_missing(value):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        ct = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(ct) else ct


def dilution_points(ct_values: Sequence, dilution_factor) -> List[Tuple[float, float]]:
    """(log10 concentration, Ct) pairs for the numeric readings.

    A reading at position i belongs to concentration D ** -i; blank or
    non-numeric readings are skipped without shifting later positions.

    Raises:
        InvalidDilutionSeries: bad dilution factor or fewer than MIN_POINTS readings
    """
    try:
        factor = float(dilution_factor)
    except (TypeError, ValueError):
        raise InvalidDilutionSeries(f"Dilution factor must be a number, got {dilution_factor!r}")
    if not factor.is_integer() or factor < StandardCurveConstants.MIN_DILUTION_FACTOR:
        raise InvalidDilutionSeries(
            f"Dilution factor must be an integer >= {StandardCurveConstants.MIN_DILUTION_FACTOR}, "
            f"got {dilution_factor!r}"
        )

    points = []
    for i, value in enumerate(ct_values):
        ct = _to_ct(value)
        if ct is not None:
            # log10(D ** -i) without forming D ** -i
            points.append((-i * math.log10(factor), ct))

    if len(points) < StandardCurveConstants.MIN_POINTS:
        raise InvalidDilutionSeries(
            f"At least {StandardCurveConstants.MIN_POINTS} numeric Ct values are required, got {len(points)}"
        )
    return points


def fit_standard_curve(ct_values: Sequence, dilution_factor) -> StandardCurveResult:
    """Least-squares fit of Ct on log10 concentration.

    Raises:
        InvalidDilutionSeries: see dilution_points
        ZeroSlopeRegression: the fitted slope is exactly 0
    """
    points = dilution_points(ct_values, dilution_factor)
    x = np.array([p[0] for p in points])
    y = np.array([p[1] for p in points])

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        fit = stats.linregress(x, y)
    slope, intercept = float(fit.slope), float(fit.intercept)

    if slope == 0:
        raise ZeroSlopeRegression("Regression slope is 0; efficiency is undefined")

    predicted = slope * x + intercept
    ss_res = float(np.sum((y - predicted) ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    r_squared = 1 - ss_res / ss_tot if ss_tot > 0 else 1.0

    efficiency = 10 ** (-1 / slope)
    percent = (efficiency - 1) * 100
    eff_quality, eff_status = classify_efficiency(percent)
    r2_quality, r2_status = classify_r_squared(r_squared)
    status = worst_status(eff_status, r2_status)

    return StandardCurveResult(
        status=status,
        message=_summary(percent, eff_quality, r_squared, r2_quality),
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        efficiency=efficiency,
        percent_efficiency=percent,
        efficiency_quality=eff_quality,
        r_squared_quality=r2_quality,
        points=points,
    )


def classify_efficiency(percent: float) -> Tuple[str, str]:
    """(quality, status) for a percent efficiency."""
    low, high = StandardCurveConstants.EXCELLENT_RANGE
    if low <= percent <= high:
        return "excellent", "success"
    if StandardCurveConstants.ACCEPTABLE_LOW <= percent < low or high < percent <= StandardCurveConstants.ACCEPTABLE_HIGH:
        return "acceptable", "warning"
    return "poor", "error"


def classify_r_squared(r_squared: float) -> Tuple[str, str]:
    if r_squared < StandardCurveConstants.R_SQUARED_THRESHOLD:
        return "warning", "warning"
    return "good", "success"


def worst_status(*statuses: str) -> str:
    rank = StandardCurveConstants.STATUS_RANK
    return max(statuses, key=lambda s: rank[s])


def _summary(percent: float, eff_quality: str, r_squared: float, r2_quality: str) -> str:
    parts = [f"Efficiency {percent:.1f}% ({eff_quality})"]
    if r2_quality == "warning":
        parts.append(f"R²={r_squared:.4f} below {StandardCurveConstants.R_SQUARED_THRESHOLD}")
    else:
        parts.append(f"R²={r_squared:.4f}")
    return "; ".join(parts)


class StandardCurveCalculator:
    @staticmethod
    def calculate(ct_values: Sequence, dilution_factor=10) -> StandardCurveResult:
        """Fit a standard curve, reporting input and fit errors in the result."""
        try:
            return fit_standard_curve(ct_values, dilution_factor)
        except QuantificationError as exc:
            return StandardCurveResult(status="error", message=str(exc))
