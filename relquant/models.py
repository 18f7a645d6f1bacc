"""Experiment entities, derived result types, and state helpers.

Genes, groups and samples are frozen dataclasses owned by the caller. The
helpers below never modify their arguments; each returns new lists so that
every recomputation sees a consistent snapshot.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from relquant.constants import (
    CONTROL_COLOR,
    DEFAULT_GENES,
    DEFAULT_GROUPS,
    GROUP_COLORS,
    TREATMENT_COLOR,
    AnalysisConstants,
)
from relquant.exceptions import ReportedIssue
from relquant.utils import generate_id, parse_efficiency

TARGET = "target"
REFERENCE = "reference"


@dataclass(frozen=True)
class Gene:
    id: str
    name: str
    role: str = TARGET
    efficiency: float = AnalysisConstants.DEFAULT_EFFICIENCY

    def __post_init__(self):
        if self.role not in (TARGET, REFERENCE):
            raise ValueError(f"Gene role must be '{TARGET}' or '{REFERENCE}', got {self.role!r}")

    @property
    def is_reference(self) -> bool:
        return self.role == REFERENCE


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    is_control: bool = False
    color: str = TREATMENT_COLOR


@dataclass(frozen=True)
class Sample:
    id: str
    group_id: str
    replicate: int = 1
    ct_values: Dict[str, Optional[float]] = field(default_factory=dict)

    def ct(self, gene_id: str) -> Optional[float]:
        return self.ct_values.get(gene_id)


@dataclass
class GroupStatResult:
    group_id: str
    group_name: str
    n: int
    values: List[float]
    mean: float
    sd: float
    sem: float
    is_control: bool = False
    # Two-group path
    p_value: Optional[float] = None
    significance: str = ""
    # Multi-group path
    marking_letter: str = ""


@dataclass
class AnalysisResult:
    gene_id: str
    gene_name: str
    group_results: List[GroupStatResult]
    anova_p_value: Optional[float] = None

    def for_group(self, group_id: str) -> Optional[GroupStatResult]:
        return next((g for g in self.group_results if g.group_id == group_id), None)


@dataclass
class AnalysisReport:
    results: List[AnalysisResult] = field(default_factory=list)
    issues: List[ReportedIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.results)

    def for_gene(self, gene_id: str) -> Optional[AnalysisResult]:
        return next((r for r in self.results if r.gene_id == gene_id), None)

    def issue_codes(self) -> List[str]:
        return [issue.code.value for issue in self.issues]


# ==================== GENE HELPERS ====================
def add_gene(genes: List[Gene], name: str = "New gene", role: str = TARGET) -> List[Gene]:
    return [*genes, Gene(id=generate_id(), name=name, role=role)]


def remove_gene(genes: List[Gene], gene_id: str) -> List[Gene]:
    """Remove a gene, keeping at least one gene in the experiment."""
    if len(genes) <= 1:
        return list(genes)
    return [g for g in genes if g.id != gene_id]


def update_efficiency(genes: List[Gene], gene_id: str, value) -> List[Gene]:
    """Apply an efficiency (e.g. from a standard curve) to one gene.

    Raises:
        ValueError: value is not a number in [EFFICIENCY_MIN, EFFICIENCY_MAX]
    """
    efficiency = parse_efficiency(value)
    if efficiency is None:
        raise ValueError(
            f"Efficiency must be between {AnalysisConstants.EFFICIENCY_MIN} and "
            f"{AnalysisConstants.EFFICIENCY_MAX}, got {value!r}"
        )
    return [replace(g, efficiency=efficiency) if g.id == gene_id else g for g in genes]


# ==================== GROUP HELPERS ====================
def get_control_group(groups: List[Group]) -> Optional[Group]:
    return next((g for g in groups if g.is_control), None)


def set_control_group(groups: List[Group], group_id: str) -> List[Group]:
    """Make ``group_id`` the only control group.

    The new control is drawn in the control colour; a former group still
    using that colour is switched to the treatment colour.

    Raises:
        ValueError: ``group_id`` is not one of ``groups``
    """
    if not any(g.id == group_id for g in groups):
        raise ValueError(f"Unknown group id {group_id!r}")
    updated = []
    for g in groups:
        if g.id == group_id:
            updated.append(replace(g, is_control=True, color=CONTROL_COLOR))
        else:
            color = TREATMENT_COLOR if g.color == CONTROL_COLOR else g.color
            updated.append(replace(g, is_control=False, color=color))
    return updated


def add_group(
    groups: List[Group], samples: List[Sample], replicates: int = AnalysisConstants.DEFAULT_REPLICATES
) -> Tuple[List[Group], List[Sample]]:
    """Append a treatment group named ``Treatment{k}`` with empty replicates."""
    treatment_count = sum(1 for g in groups if not g.is_control)
    group = Group(
        id=generate_id(),
        name=f"Treatment{treatment_count + 1}",
        is_control=False,
        color=GROUP_COLORS[len(groups) % len(GROUP_COLORS)],
    )
    new_samples = [
        Sample(id=generate_id(), group_id=group.id, replicate=i) for i in range(1, replicates + 1)
    ]
    return [*groups, group], [*samples, *new_samples]


def remove_group(
    groups: List[Group], samples: List[Sample], group_id: str
) -> Tuple[List[Group], List[Sample]]:
    """Remove a group and its samples; the last group cannot be removed."""
    if len(groups) <= 1:
        return list(groups), list(samples)
    removed = next((g for g in groups if g.id == group_id), None)
    remaining = [g for g in groups if g.id != group_id]
    if removed is not None and removed.is_control:
        remaining = set_control_group(remaining, remaining[0].id)
    return remaining, [s for s in samples if s.group_id != group_id]


# ==================== SAMPLE HELPERS ====================
def add_replicate(samples: List[Sample], group_id: str) -> List[Sample]:
    existing = [s.replicate for s in samples if s.group_id == group_id]
    next_rep = max(existing) + 1 if existing else 1
    return [*samples, Sample(id=generate_id(), group_id=group_id, replicate=next_rep)]


def remove_sample(samples: List[Sample], sample_id: str) -> List[Sample]:
    return [s for s in samples if s.id != sample_id]


def set_ct(samples: List[Sample], sample_id: str, gene_id: str, ct: Optional[float]) -> List[Sample]:
    """Record a Ct value; ``None`` marks the gene as not measured."""
    updated = []
    for s in samples:
        if s.id == sample_id:
            updated.append(replace(s, ct_values={**s.ct_values, gene_id: ct}))
        else:
            updated.append(s)
    return updated


def default_experiment() -> Tuple[List[Gene], List[Group], List[Sample]]:
    """Two reference genes, one target, a control and one treatment group."""
    genes = [Gene(**g) for g in DEFAULT_GENES]
    groups = [Group(**g) for g in DEFAULT_GROUPS]
    samples = [
        Sample(id=f"{g.id}_r{i}", group_id=g.id, replicate=i)
        for g in groups
        for i in range(1, AnalysisConstants.DEFAULT_REPLICATES + 1)
    ]
    return genes, groups, samples
