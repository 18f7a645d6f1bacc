"""Tests for the relquant package surface.

Verifies that all public classes and functions are importable from the
package root and that the pieces compose end to end.
"""

import pytest


class TestPackageImports:
    """Verify all expected symbols are importable from the relquant package."""

    def test_import_constants(self):
        from relquant import AnalysisConstants, StandardCurveConstants, GROUP_COLORS

        assert AnalysisConstants.SIGNIFICANCE_ALPHA == 0.05
        assert AnalysisConstants.MIN_REPLICATES_FOR_STATS == 2
        assert StandardCurveConstants.R_SQUARED_THRESHOLD == 0.98
        assert GROUP_COLORS[0] == "#000000"

    def test_import_classes(self):
        from relquant import (
            QuantificationEngine, AnalysisEngine, StandardCurveCalculator, GraphGenerator,
        )
        assert hasattr(QuantificationEngine, 'quantify')
        assert hasattr(AnalysisEngine, 'compute')
        assert hasattr(StandardCurveCalculator, 'calculate')
        assert hasattr(GraphGenerator, 'create_expression_chart')

    def test_import_functions(self):
        from relquant import (
            compute, describe, welch_t_test, one_way_anova, generate_letter_markings,
            results_to_dataframe, export_to_csv, export_to_excel, experiment_from_dataframe,
        )
        assert callable(compute)
        assert callable(generate_letter_markings)
        assert callable(export_to_excel)


class TestPackageWorkflow:
    def test_standard_curve_feeds_gene_efficiency(self, two_group_experiment):
        from relquant import StandardCurveCalculator, compute, update_efficiency

        genes, groups, samples = two_group_experiment
        curve = StandardCurveCalculator.calculate([18.0, 21.4, 24.8, 28.2], dilution_factor=10)
        assert curve.status in ("success", "warning")

        genes = update_efficiency(genes, "tgt", curve.efficiency)
        report = compute(genes, groups, samples)

        assert [g for g in genes if g.id == "tgt"][0].efficiency == pytest.approx(curve.efficiency)
        assert report.for_gene("tgt").for_group("treat").mean > 1.0

    def test_default_experiment_without_data(self):
        from relquant import compute, default_experiment

        report = compute(*default_experiment())

        # No Ct values entered yet: every gene lacks a baseline, nothing crashes
        assert "no_baseline" in report.issue_codes()
        assert all(g.n == 0 for r in report.results for g in r.group_results)
