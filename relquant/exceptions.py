"""Error types and reportable issue codes.

Standard-curve fitting raises; the quantification pipeline never does.
Everything it has to skip is returned as a ``ReportedIssue`` on the report.
"""

import enum
from dataclasses import dataclass
from typing import Optional


class QuantificationError(ValueError):
    """Base class for errors raised by relquant calculations."""


class InvalidDilutionSeries(QuantificationError):
    """Fewer than three numeric Ct readings, or an unusable dilution factor."""


class ZeroSlopeRegression(QuantificationError):
    """Regression slope is exactly zero so efficiency is undefined."""


class AnalysisIssue(str, enum.Enum):
    NO_DATA = "no_data"
    NO_CONTROL_GROUP = "no_control_group"
    NO_REFERENCE_GENE = "no_reference_gene"
    NO_BASELINE = "no_baseline"
    INSUFFICIENT_REPLICATES = "insufficient_replicates"
    DEGENERATE_INPUT = "degenerate_input"


@dataclass(frozen=True)
class ReportedIssue:
    code: AnalysisIssue
    message: str
    gene_id: Optional[str] = None
    group_id: Optional[str] = None

    def __str__(self):
        return f"[{self.code.value}] {self.message}"
