"""Constants and configuration for relative quantification.

Contains analysis thresholds, efficiency quality bands, colour palette,
and the default experiment layout.
"""

# ==================== COLOR CONSTANTS ====================
CONTROL_COLOR = "#000000"
TREATMENT_COLOR = "#fe0000"

GROUP_COLORS = [
    CONTROL_COLOR,  # Control
    TREATMENT_COLOR,  # First treatment
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
]

# ==================== DEFAULT EXPERIMENT ====================
DEFAULT_GENES = [
    {"id": "g_bactin", "name": "β-actin", "role": "reference", "efficiency": 2.0},
    {"id": "g_s27", "name": "S27", "role": "reference", "efficiency": 2.0},
    {"id": "g_target1", "name": "GeneA", "role": "target", "efficiency": 2.0},
]

DEFAULT_GROUPS = [
    {"id": "grp_ctrl", "name": "Control", "is_control": True, "color": GROUP_COLORS[0]},
    {"id": "grp_treat1", "name": "Treatment1", "is_control": False, "color": GROUP_COLORS[1]},
]

LETTERS = "abcdefghijklmnopqrstuvwxyz"


# ==================== ANALYSIS CONSTANTS ====================
class AnalysisConstants:
    SIGNIFICANCE_ALPHA = 0.05
    MIN_REPLICATES_FOR_STATS = 2
    DEFAULT_REPLICATES = 3
    DEFAULT_EFFICIENCY = 2.0
    EFFICIENCY_MIN = 1.0
    EFFICIENCY_MAX = 3.0
    # Checked in order; first threshold the p-value does not exceed wins
    P_VALUE_THRESHOLDS = {"****": 0.0001, "***": 0.001, "**": 0.01, "*": 0.05}
    NOT_SIGNIFICANT_LABEL = "ns"
    CONTROL_LABEL = "Control"


class StandardCurveConstants:
    MIN_POINTS = 3
    MIN_DILUTION_FACTOR = 2
    R_SQUARED_THRESHOLD = 0.98
    EXCELLENT_RANGE = (90.0, 110.0)
    ACCEPTABLE_LOW = 80.0
    ACCEPTABLE_HIGH = 120.0
    STATUS_RANK = {"success": 0, "warning": 1, "error": 2}
