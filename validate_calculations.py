#!/usr/bin/env python3
"""
relquant Validation Script
==========================
Validates the engine against an independent pandas/scipy calculation.

Usage:
    python validate_calculations.py

This script will:
1. Build the reference two-group experiment (two reference genes, one target)
2. Recompute normalized expression per replicate with plain pandas
3. Cross-check the Welch p-value against scipy.stats.ttest_ind
4. Check the standard-curve estimate on an ideal tenfold dilution series
5. Report any discrepancies
"""

import numpy as np
import pandas as pd
from scipy import stats

from relquant import Gene, Group, Sample, StandardCurveCalculator, compute

CT_TABLE = {
    "Control": {"refA": [22.1, 22.3, 22.0], "refB": [24.5, 24.4, 24.6], "tgt": [28.0, 28.2, 27.9]},
    "Treatment1": {"refA": [22.2, 22.1, 22.4], "refB": [24.5, 24.3, 24.6], "tgt": [26.1, 25.9, 26.0]},
}


def build_experiment():
    genes = [
        Gene(id="refA", name="β-actin", role="reference"),
        Gene(id="refB", name="S27", role="reference"),
        Gene(id="tgt", name="GeneA", role="target"),
    ]
    groups = [
        Group(id="Control", name="Control", is_control=True),
        Group(id="Treatment1", name="Treatment1"),
    ]
    samples = []
    for group_id, columns in CT_TABLE.items():
        for rep in range(3):
            samples.append(
                Sample(
                    id=f"{group_id}_{rep + 1}",
                    group_id=group_id,
                    replicate=rep + 1,
                    ct_values={gene: cts[rep] for gene, cts in columns.items()},
                )
            )
    return genes, groups, samples


def reference_expression() -> pd.DataFrame:
    """Per-replicate normalized expression computed directly in log2 space."""
    rows = [
        {"Group": group, "Replicate": rep, "Gene": gene, "CT": ct}
        for group, columns in CT_TABLE.items()
        for gene, cts in columns.items()
        for rep, ct in enumerate(cts)
    ]
    df = pd.DataFrame(rows)
    baseline = df[df["Group"] == "Control"].groupby("Gene")["CT"].mean()
    df["dCt"] = df["Gene"].map(baseline) - df["CT"]
    wide = df.pivot_table(index=["Group", "Replicate"], columns="Gene", values="dCt")
    # E=2: log2(Q_target / geomean(Q_ref)) = dCt_target - mean(dCt_ref)
    wide["Expression"] = 2 ** (wide["tgt"] - wide[["refA", "refB"]].mean(axis=1))
    return wide.reset_index()


def validate_relquant_calculations():
    """Main validation function."""

    print("=" * 100)
    print("relquant Engine Validation")
    print("=" * 100)

    genes, groups, samples = build_experiment()
    report = compute(genes, groups, samples)
    if not report.ok:
        print(f"❌ ERROR: engine produced no results: {report.issue_codes()}")
        return False

    result = report.for_gene("tgt")
    expected = reference_expression()
    all_match = True

    for group in groups:
        engine_values = np.array(result.for_group(group.id).values)
        expected_values = expected[expected["Group"] == group.id]["Expression"].values
        match = len(engine_values) == len(expected_values) and np.allclose(
            engine_values, expected_values, atol=1e-9
        )
        all_match = all_match and match
        print(f"\nGroup {group.name}: {'✅' if match else '❌'}")
        print(f"  Engine:   {np.round(engine_values, 6)}")
        print(f"  Expected: {np.round(expected_values, 6)}")

    ctrl = expected[expected["Group"] == "Control"]["Expression"].values
    treat = expected[expected["Group"] == "Treatment1"]["Expression"].values
    scipy_p = stats.ttest_ind(treat, ctrl, equal_var=False).pvalue
    engine_p = result.for_group("Treatment1").p_value
    p_match = abs(engine_p - scipy_p) < 1e-9
    all_match = all_match and p_match
    print(f"\nWelch p-value: {engine_p:.6g} (scipy: {scipy_p:.6g}) {'✓' if p_match else '✗'}")

    ideal = [15.0 + 3.32193 * i for i in range(5)]
    curve = StandardCurveCalculator.calculate(ideal, dilution_factor=10)
    curve_match = curve.status == "success" and abs(curve.efficiency - 2.0) < 1e-3
    all_match = all_match and curve_match
    print(
        f"Standard curve: E={curve.efficiency:.4f}, R²={curve.r_squared:.4f} "
        f"{'✓' if curve_match else '✗'}"
    )

    print(f"\n{'=' * 100}")
    if all_match:
        print("✅ VALIDATION PASSED - Engine matches the independent calculation")
    else:
        print("❌ VALIDATION FAILED - Some calculations don't match")
        print("   Please check the discrepancies above.")
    print(f"{'=' * 100}\n")

    return all_match


if __name__ == "__main__":
    try:
        success = validate_relquant_calculations()
        exit(0 if success else 1)
    except Exception as e:
        print(f"\n❌ ERROR: {e}")
        import traceback

        traceback.print_exc()
        exit(1)
