"""Relative quantification of qPCR data.

Provides:
- QuantificationEngine: efficiency-corrected quantities and reference normalization
- AnalysisEngine / compute: per-gene group statistics, Welch t-test, ANOVA
- generate_letter_markings: compact letter display from maximal cliques
- StandardCurveCalculator: amplification efficiency from a dilution series
- GraphGenerator: Plotly grouped bar chart
- results_to_dataframe / export_to_csv / export_to_excel: tabular export
"""

from relquant.constants import (
    AnalysisConstants,
    StandardCurveConstants,
    GROUP_COLORS,
    CONTROL_COLOR,
    TREATMENT_COLOR,
)
from relquant.exceptions import (
    QuantificationError,
    InvalidDilutionSeries,
    ZeroSlopeRegression,
    AnalysisIssue,
    ReportedIssue,
)
from relquant.utils import natural_sort_key, format_p_value, parse_efficiency
from relquant.models import (
    Gene,
    Group,
    Sample,
    GroupStatResult,
    AnalysisResult,
    AnalysisReport,
    add_gene,
    remove_gene,
    update_efficiency,
    get_control_group,
    set_control_group,
    add_group,
    remove_group,
    add_replicate,
    remove_sample,
    set_ct,
    default_experiment,
)
from relquant.statistics import describe, welch_t_test, one_way_anova, get_significance_label
from relquant.quantification import QuantificationEngine, QuantificationResult
from relquant.letters import generate_letter_markings, find_maximal_cliques
from relquant.analysis import AnalysisEngine, compute
from relquant.standard_curve import StandardCurveCalculator, StandardCurveResult, fit_standard_curve
from relquant.converters import experiment_from_dataframe
from relquant.graph import GraphGenerator
from relquant.export import results_to_dataframe, export_to_csv, export_to_excel

__all__ = [
    "AnalysisConstants",
    "StandardCurveConstants",
    "GROUP_COLORS",
    "CONTROL_COLOR",
    "TREATMENT_COLOR",
    "QuantificationError",
    "InvalidDilutionSeries",
    "ZeroSlopeRegression",
    "AnalysisIssue",
    "ReportedIssue",
    "natural_sort_key",
    "format_p_value",
    "parse_efficiency",
    "Gene",
    "Group",
    "Sample",
    "GroupStatResult",
    "AnalysisResult",
    "AnalysisReport",
    "add_gene",
    "remove_gene",
    "update_efficiency",
    "get_control_group",
    "set_control_group",
    "add_group",
    "remove_group",
    "add_replicate",
    "remove_sample",
    "set_ct",
    "default_experiment",
    "describe",
    "welch_t_test",
    "one_way_anova",
    "get_significance_label",
    "QuantificationEngine",
    "QuantificationResult",
    "generate_letter_markings",
    "find_maximal_cliques",
    "AnalysisEngine",
    "compute",
    "StandardCurveCalculator",
    "StandardCurveResult",
    "fit_standard_curve",
    "experiment_from_dataframe",
    "GraphGenerator",
    "results_to_dataframe",
    "export_to_csv",
    "export_to_excel",
]
