"""AnalysisEngine: quantification plus group statistics per target gene.

compute() is the single entry point: it takes a snapshot of genes, groups
and samples and returns a fresh AnalysisReport. Nothing is cached between
calls, so callers recompute whenever any input changes.
"""

import logging
from typing import Dict, List, Optional, Tuple

from relquant.constants import AnalysisConstants
from relquant.exceptions import AnalysisIssue, ReportedIssue
from relquant.letters import generate_letter_markings
from relquant.models import (
    AnalysisReport,
    AnalysisResult,
    Gene,
    Group,
    GroupStatResult,
    Sample,
    get_control_group,
)
from relquant.quantification import QuantificationEngine
from relquant.statistics import Outcome, describe, get_significance_label, one_way_anova, welch_t_test

logger = logging.getLogger(__name__)


class AnalysisEngine:
    @staticmethod
    def build_group_stats(groups: List[Group], expression: Dict[str, List[float]]) -> List[GroupStatResult]:
        """Descriptive statistics per group, in group order."""
        stats_list = []
        for group in groups:
            values = list(expression.get(group.id, []))
            desc = describe(values)
            stats_list.append(
                GroupStatResult(
                    group_id=group.id,
                    group_name=group.name,
                    n=desc.n,
                    values=values,
                    mean=desc.mean,
                    sd=desc.sd,
                    sem=desc.sem,
                    is_control=group.is_control,
                )
            )
        return stats_list

    @staticmethod
    def compare_groups(
        gene: Gene, stats_list: List[GroupStatResult], control: Group
    ) -> Tuple[Optional[float], List[ReportedIssue]]:
        """Annotate ``stats_list`` in place with p-values or letters.

        Two groups: Welch test of the treatment against the control.
        More than two: one-way ANOVA, then letters when it is significant.

        Returns:
            Tuple of (ANOVA p-value or None, issues raised while testing)
        """
        issues = []
        min_n = AnalysisConstants.MIN_REPLICATES_FOR_STATS

        if len(stats_list) == 2:
            ctrl = next((s for s in stats_list if s.group_id == control.id), None)
            treat = next((s for s in stats_list if s.group_id != control.id), None)
            if ctrl is None or treat is None:
                return None, issues
            if ctrl.n < min_n or treat.n < min_n:
                issues.append(
                    ReportedIssue(
                        AnalysisIssue.INSUFFICIENT_REPLICATES,
                        f"Gene '{gene.name}': t-test needs n>={min_n} per group "
                        f"({treat.group_name} n={treat.n}, {ctrl.group_name} n={ctrl.n})",
                        gene_id=gene.id,
                        group_id=treat.group_id,
                    )
                )
                return None, issues

            test = welch_t_test(treat.values, ctrl.values)
            treat.p_value = test.p_value
            treat.significance = get_significance_label(test.p_value)
            if test.outcome == Outcome.DEGENERATE:
                issues.append(
                    ReportedIssue(
                        AnalysisIssue.DEGENERATE_INPUT,
                        f"Gene '{gene.name}': zero-variance data, p set to {test.p_value}",
                        gene_id=gene.id,
                        group_id=treat.group_id,
                    )
                )
            return None, issues

        if len(stats_list) > 2:
            short = [s for s in stats_list if s.n < min_n]
            if short:
                names = ", ".join(f"{s.group_name} n={s.n}" for s in short)
                issues.append(
                    ReportedIssue(
                        AnalysisIssue.INSUFFICIENT_REPLICATES,
                        f"Gene '{gene.name}': ANOVA needs n>={min_n} in every group ({names})",
                        gene_id=gene.id,
                    )
                )
                return None, issues

            anova = one_way_anova(*[s.values for s in stats_list])
            if anova.outcome == Outcome.DEGENERATE:
                issues.append(
                    ReportedIssue(
                        AnalysisIssue.DEGENERATE_INPUT,
                        f"Gene '{gene.name}': zero within-group variance, ANOVA p set to {anova.p_value}",
                        gene_id=gene.id,
                    )
                )

            if anova.p_value < AnalysisConstants.SIGNIFICANCE_ALPHA:
                markings = generate_letter_markings(stats_list)
                for s in stats_list:
                    s.marking_letter = markings[s.group_id]
            else:
                # No global difference: skip pairwise testing
                for s in stats_list:
                    s.marking_letter = "a"
            return anova.p_value, issues

        return None, issues

    @staticmethod
    def compute(genes: List[Gene], groups: List[Group], samples: List[Sample]) -> AnalysisReport:
        """Quantify every target gene and attach group statistics.

        Never raises for missing data: preconditions that fail are listed in
        ``report.issues`` and only the affected gene or test is skipped.
        """
        quant = QuantificationEngine.quantify(genes, groups, samples)
        report = AnalysisReport(issues=list(quant.issues))

        if quant.ok:
            control = get_control_group(groups)
            for gene in genes:
                if gene.id not in quant.expression:
                    continue
                stats_list = AnalysisEngine.build_group_stats(groups, quant.expression[gene.id])
                anova_p, issues = AnalysisEngine.compare_groups(gene, stats_list, control)
                report.issues.extend(issues)
                report.results.append(
                    AnalysisResult(
                        gene_id=gene.id,
                        gene_name=gene.name,
                        group_results=stats_list,
                        anova_p_value=anova_p,
                    )
                )

        for issue in report.issues:
            if issue.code == AnalysisIssue.DEGENERATE_INPUT:
                logger.info("%s", issue)
            else:
                logger.warning("%s", issue)
        return report


def compute(genes: List[Gene], groups: List[Group], samples: List[Sample]) -> AnalysisReport:
    """Shortcut for AnalysisEngine.compute."""
    return AnalysisEngine.compute(genes, groups, samples)
