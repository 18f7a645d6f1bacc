"""Utility functions for relative quantification.

Contains sorting helpers, identifier generation, p-value formatting,
and efficiency value parsing.
"""

import math
import random
import re
import string
from typing import Optional

from relquant.constants import AnalysisConstants


def natural_sort_key(sample_name):
    """Extract numbers from sample name for natural sorting (e.g., Sample2 < Sample10)"""
    parts = re.split(r"(\d+)", str(sample_name))
    return [int(part) if part.isdigit() else part.lower() for part in parts]


def generate_id(length: int = 7) -> str:
    """Short random identifier for genes, groups and samples."""
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choice(alphabet) for _ in range(length))


def is_missing(value) -> bool:
    """True for None and NaN; a measured 0.0 is not missing."""
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


def format_p_value(p: Optional[float]) -> str:
    """Format a p-value for tables.

    Values below 0.001 use exponent notation (``1.23e-04``) so small numbers
    are not confused with rounded decimals; everything else uses four places.

    Args:
        p: p-value, or None/NaN when no test was run

    Returns:
        Formatted string, ``"-"`` when the value is missing
    """
    if is_missing(p):
        return "-"
    if p < 0.001:
        return f"{p:.2e}"
    return f"{p:.4f}"


def parse_efficiency(text) -> Optional[float]:
    """Parse a typed or pasted efficiency value.

    Returns None for blank, non-numeric, or out-of-range input
    (outside [EFFICIENCY_MIN, EFFICIENCY_MAX]).
    """
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    if math.isnan(value):
        return None
    if not AnalysisConstants.EFFICIENCY_MIN <= value <= AnalysisConstants.EFFICIENCY_MAX:
        return None
    return value
