"""
Pytest configuration and fixtures for relquant tests.

Provides small, hand-checkable experiments shared across the test modules.
"""

import pytest
import pandas as pd

from relquant.models import Gene, Group, Sample


def _samples(group_id, columns):
    """Build replicate samples from {gene_id: [ct per replicate]}."""
    n_reps = max(len(v) for v in columns.values())
    return [
        Sample(
            id=f"{group_id}_r{rep + 1}",
            group_id=group_id,
            replicate=rep + 1,
            ct_values={gene_id: cts[rep] for gene_id, cts in columns.items()},
        )
        for rep in range(n_reps)
    ]


# ==================== GENE / GROUP FIXTURES ====================
@pytest.fixture
def reference_genes():
    return [
        Gene(id="refA", name="β-actin", role="reference", efficiency=2.0),
        Gene(id="refB", name="S27", role="reference", efficiency=2.0),
    ]


@pytest.fixture
def target_gene():
    return Gene(id="tgt", name="GeneA", role="target", efficiency=2.0)


# ==================== TWO-GROUP EXPERIMENT ====================
@pytest.fixture
def two_group_experiment(reference_genes, target_gene):
    """Control vs one treatment; the target is ~4x up-regulated.

    Returns (genes, groups, samples).
    """
    genes = [*reference_genes, target_gene]
    groups = [
        Group(id="ctrl", name="Control", is_control=True, color="#000000"),
        Group(id="treat", name="Treatment1", is_control=False, color="#fe0000"),
    ]
    samples = _samples(
        "ctrl",
        {"refA": [22.1, 22.3, 22.0], "refB": [24.5, 24.4, 24.6], "tgt": [28.0, 28.2, 27.9]},
    ) + _samples(
        "treat",
        {"refA": [22.2, 22.1, 22.4], "refB": [24.5, 24.3, 24.6], "tgt": [26.1, 25.9, 26.0]},
    )
    return genes, groups, samples


# ==================== THREE-GROUP EXPERIMENT ====================
@pytest.fixture
def three_group_experiment(target_gene):
    """Control, up-regulated (~4x) and down-regulated (~0.25x) groups."""
    genes = [Gene(id="refA", name="GAPDH", role="reference", efficiency=2.0), target_gene]
    groups = [
        Group(id="ctrl", name="Control", is_control=True, color="#000000"),
        Group(id="up", name="Inducer", is_control=False, color="#fe0000"),
        Group(id="down", name="Inhibitor", is_control=False, color="#3b82f6"),
    ]
    ref = [20.0, 20.1, 19.9]
    samples = (
        _samples("ctrl", {"refA": ref, "tgt": [25.0, 25.2, 24.9]})
        + _samples("up", {"refA": ref, "tgt": [23.0, 23.2, 22.9]})
        + _samples("down", {"refA": ref, "tgt": [27.0, 27.2, 26.9]})
    )
    return genes, groups, samples


@pytest.fixture
def similar_three_group_experiment(target_gene):
    """Three groups whose target Ct values are permutations of each other."""
    genes = [Gene(id="refA", name="GAPDH", role="reference", efficiency=2.0), target_gene]
    groups = [
        Group(id="ctrl", name="Control", is_control=True),
        Group(id="g2", name="Treatment1"),
        Group(id="g3", name="Treatment2"),
    ]
    ref = [20.0, 20.1, 19.9]
    samples = (
        _samples("ctrl", {"refA": ref, "tgt": [25.0, 25.2, 24.9]})
        + _samples("g2", {"refA": ref, "tgt": [25.2, 24.9, 25.0]})
        + _samples("g3", {"refA": ref, "tgt": [24.9, 25.0, 25.2]})
    )
    return genes, groups, samples


# ==================== LONG-FORMAT DATA ====================
@pytest.fixture
def long_ct_dataframe():
    """Well-level Ct table as exported by the instrument."""
    rows = []
    well = 1
    layout = {
        ("Control", "GAPDH"): [18.5, 18.4, 18.6],
        ("Control", "COL1A1"): [25.0, 25.1, 24.9],
        ("Treated", "GAPDH"): [18.3, 18.4, 18.2],
        ("Treated", "COL1A1"): [23.5, 23.4, "Undetermined"],
    }
    for (sample, target), cts in layout.items():
        for ct in cts:
            rows.append({"Well": f"A{well}", "Sample": sample, "Target": target, "CT": ct})
            well += 1
    return pd.DataFrame(rows)
