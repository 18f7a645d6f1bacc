"""Convert long-format Ct tables into genes, groups and samples.

The expected frame has one row per well with ``Sample``, ``Target`` and
``CT`` columns (the layout produced by instrument CSV exports) and an
optional ``Group`` column. Wells of the same sample/target pair become
replicates in order of appearance.
"""

from typing import Iterable, List, Optional, Tuple

import pandas as pd

from relquant.constants import GROUP_COLORS, AnalysisConstants
from relquant.models import REFERENCE, TARGET, Gene, Group, Sample
from relquant.utils import natural_sort_key

REQUIRED_COLUMNS = ["Sample", "Target", "CT"]


def experiment_from_dataframe(
    data: pd.DataFrame,
    reference_genes: Iterable[str],
    control_group: str,
    efficiencies: Optional[dict] = None,
) -> Tuple[List[Gene], List[Group], List[Sample]]:
    """Build entities from a long-format Ct table.

    Args:
        data: DataFrame with Sample, Target, CT and optionally Group columns.
            Without Group, each sample name is its own group.
        reference_genes: Target names to treat as reference genes.
        control_group: Group name to mark as control.
        efficiencies: Optional {target name: efficiency}, default 2.0.

    Raises:
        ValueError: required columns missing, or control group not present
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in data.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    efficiencies = efficiencies or {}
    reference_set = {str(r).upper() for r in reference_genes}

    df = data.copy()
    df["CT"] = pd.to_numeric(df["CT"], errors="coerce")
    df = df.dropna(subset=["Sample", "Target"])
    if "Group" not in df.columns:
        df["Group"] = df["Sample"]

    targets = list(dict.fromkeys(df["Target"].astype(str)))
    genes = [
        Gene(
            id=name,
            name=name,
            role=REFERENCE if name.upper() in reference_set else TARGET,
            efficiency=float(efficiencies.get(name, AnalysisConstants.DEFAULT_EFFICIENCY)),
        )
        for name in targets
    ]

    group_names = sorted(dict.fromkeys(df["Group"].astype(str)), key=natural_sort_key)
    if control_group not in group_names:
        raise ValueError(f"Control group '{control_group}' not found in data")
    # Control first so it keeps the control colour
    group_names.remove(control_group)
    group_names.insert(0, control_group)
    groups = [
        Group(
            id=name,
            name=name,
            is_control=name == control_group,
            color=GROUP_COLORS[idx % len(GROUP_COLORS)],
        )
        for idx, name in enumerate(group_names)
    ]

    samples = []
    for group_name in group_names:
        group_rows = df[df["Group"].astype(str) == group_name]
        for sample_name in sorted(group_rows["Sample"].astype(str).unique(), key=natural_sort_key):
            sample_rows = group_rows[group_rows["Sample"].astype(str) == sample_name]
            n_reps = int(sample_rows.groupby("Target").size().max())
            for rep in range(n_reps):
                ct_values = {}
                for target, target_rows in sample_rows.groupby("Target"):
                    cts = target_rows["CT"].tolist()
                    ct = cts[rep] if rep < len(cts) else None
                    ct_values[str(target)] = None if pd.isna(ct) else float(ct)
                samples.append(
                    Sample(
                        id=f"{group_name}::{sample_name}::{rep + 1}",
                        group_id=group_name,
                        replicate=rep + 1,
                        ct_values=ct_values,
                    )
                )
    return genes, groups, samples
