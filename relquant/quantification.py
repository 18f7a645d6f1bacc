"""QuantificationEngine: efficiency-corrected relative quantities.

Control-baseline ΔCt per gene, geometric-mean normalization against the
reference genes, and per-group normalized expression vectors for every
target gene.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from relquant.exceptions import AnalysisIssue, ReportedIssue
from relquant.models import Gene, Group, Sample, get_control_group
from relquant.utils import is_missing


@dataclass
class QuantificationResult:
    baselines: Dict[str, float] = field(default_factory=dict)
    quantities: Dict[str, Dict[str, float]] = field(default_factory=dict)
    normalization_factors: Dict[str, float] = field(default_factory=dict)
    # target gene id -> group id -> normalized expression values
    expression: Dict[str, Dict[str, List[float]]] = field(default_factory=dict)
    issues: List[ReportedIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.expression)

    def to_dataframe(self, genes: List[Gene], groups: List[Group], samples: List[Sample]) -> pd.DataFrame:
        """One row per sample x gene with Ct, Q, NF and normalized expression."""
        if not self.quantities:
            return pd.DataFrame()

        group_names = {g.id: g.name for g in groups}
        rows = []
        for sample in samples:
            nf = self.normalization_factors.get(sample.id, 0.0)
            for gene in genes:
                q = self.quantities.get(sample.id, {}).get(gene.id, 0.0)
                normalized = np.nan
                if not gene.is_reference and q > 0 and nf > 0:
                    normalized = q / nf
                rows.append(
                    {
                        "Sample": sample.id,
                        "Group": group_names.get(sample.group_id, sample.group_id),
                        "Replicate": sample.replicate,
                        "Gene": gene.name,
                        "Role": gene.role,
                        "CT": sample.ct(gene.id),
                        "Baseline_Ct": self.baselines.get(gene.id, 0.0),
                        "Relative_Quantity": q,
                        "Normalization_Factor": nf,
                        "Normalized_Expression": normalized,
                    }
                )
        return pd.DataFrame(rows)


class QuantificationEngine:
    @staticmethod
    def control_baselines(genes: List[Gene], control_samples: List[Sample]) -> Dict[str, float]:
        """Mean control Ct per gene; 0.0 marks a gene with no control signal."""
        baselines = {}
        for gene in genes:
            cts = [s.ct(gene.id) for s in control_samples]
            cts = [ct for ct in cts if not is_missing(ct)]
            baselines[gene.id] = float(np.mean(cts)) if cts else 0.0
        return baselines

    @staticmethod
    def relative_quantity(efficiency: float, baseline: float, ct: Optional[float]) -> float:
        """Q = E ** (baseline - Ct), or 0.0 without a Ct or a baseline."""
        if is_missing(ct) or baseline == 0:
            return 0.0
        with np.errstate(over="ignore"):
            return float(np.power(efficiency, baseline - ct))

    @staticmethod
    def relative_quantities(
        genes: List[Gene], samples: List[Sample], baselines: Dict[str, float]
    ) -> Dict[str, Dict[str, float]]:
        return {
            sample.id: {
                gene.id: QuantificationEngine.relative_quantity(
                    gene.efficiency, baselines.get(gene.id, 0.0), sample.ct(gene.id)
                )
                for gene in genes
            }
            for sample in samples
        }

    @staticmethod
    def normalization_factors(
        reference_genes: List[Gene], samples: List[Sample], quantities: Dict[str, Dict[str, float]]
    ) -> Dict[str, float]:
        """Geometric mean of the positive reference quantities of each sample."""
        factors = {}
        for sample in samples:
            qs = [quantities[sample.id][g.id] for g in reference_genes]
            qs = np.array([q for q in qs if q > 0], dtype=float)
            factors[sample.id] = float(np.exp(np.mean(np.log(qs)))) if qs.size else 0.0
        return factors

    @staticmethod
    def normalized_expression(
        target: Gene,
        groups: List[Group],
        samples: List[Sample],
        quantities: Dict[str, Dict[str, float]],
        factors: Dict[str, float],
    ) -> Dict[str, List[float]]:
        """Group id -> Q_target / NF for samples where both are positive.

        Samples lacking either value are left out rather than counted as 0.
        """
        expression = {}
        for group in groups:
            values = []
            for sample in samples:
                if sample.group_id != group.id:
                    continue
                q_target = quantities[sample.id][target.id]
                nf = factors[sample.id]
                if q_target > 0 and nf > 0:
                    values.append(q_target / nf)
            expression[group.id] = values
        return expression

    @staticmethod
    def quantify(genes: List[Gene], groups: List[Group], samples: List[Sample]) -> QuantificationResult:
        """Run the full quantification for every target gene.

        Missing preconditions are reported on the result instead of raised.
        """
        result = QuantificationResult()

        if not genes or not groups or not samples:
            result.issues.append(
                ReportedIssue(AnalysisIssue.NO_DATA, "Genes, groups and samples are all required")
            )
            return result

        control = get_control_group(groups)
        if control is None:
            result.issues.append(
                ReportedIssue(AnalysisIssue.NO_CONTROL_GROUP, "No group is marked as control")
            )
            return result

        reference_genes = [g for g in genes if g.is_reference]
        target_genes = [g for g in genes if not g.is_reference]
        if not reference_genes:
            result.issues.append(
                ReportedIssue(AnalysisIssue.NO_REFERENCE_GENE, "At least one reference gene is required")
            )
            return result

        control_samples = [s for s in samples if s.group_id == control.id]
        result.baselines = QuantificationEngine.control_baselines(genes, control_samples)
        result.quantities = QuantificationEngine.relative_quantities(genes, samples, result.baselines)
        result.normalization_factors = QuantificationEngine.normalization_factors(
            reference_genes, samples, result.quantities
        )

        for gene in genes:
            if result.baselines[gene.id] == 0:
                result.issues.append(
                    ReportedIssue(
                        AnalysisIssue.NO_BASELINE,
                        f"Gene '{gene.name}': no Ct values in control group '{control.name}'",
                        gene_id=gene.id,
                        group_id=control.id,
                    )
                )

        for target in target_genes:
            result.expression[target.id] = QuantificationEngine.normalized_expression(
                target, groups, samples, result.quantities, result.normalization_factors
            )
        return result
