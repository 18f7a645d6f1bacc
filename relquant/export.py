"""Export functions for relative quantification results.

Provides the flat results table, CSV text, and a multi-sheet Excel export
with the results table, per-sample values, and reported issues.
"""

import io
from typing import List, Union

import numpy as np
import pandas as pd

from relquant.constants import AnalysisConstants
from relquant.models import AnalysisReport, AnalysisResult
from relquant.utils import format_p_value

RESULT_COLUMNS = [
    "Gene",
    "ANOVA_P_Value",
    "Group",
    "Mean",
    "SEM",
    "SD",
    "n",
    "Comparison",
    "P_Value",
    "Significance",
]


def _results(report_or_results: Union[AnalysisReport, List[AnalysisResult]]) -> List[AnalysisResult]:
    if isinstance(report_or_results, AnalysisReport):
        return report_or_results.results
    return list(report_or_results)


def results_to_dataframe(
    report_or_results: Union[AnalysisReport, List[AnalysisResult]],
) -> pd.DataFrame:
    """One row per (target gene, group).

    With more than two groups the Significance column holds the letter
    marking; with two it holds the t-test label and the control row reads
    ``Control``.
    """
    rows = []
    for res in _results(report_or_results):
        multi_group = len(res.group_results) > 2
        for gr in res.group_results:
            if multi_group:
                comparison = "Letter Marking (CLD)"
                sig_text = gr.marking_letter
            else:
                comparison = "vs Control (t-test)"
                if gr.is_control:
                    sig_text = AnalysisConstants.CONTROL_LABEL
                else:
                    sig_text = gr.significance
            rows.append(
                {
                    "Gene": res.gene_name,
                    "ANOVA_P_Value": res.anova_p_value if res.anova_p_value is not None else np.nan,
                    "Group": gr.group_name,
                    "Mean": gr.mean,
                    "SEM": gr.sem,
                    "SD": gr.sd,
                    "n": gr.n,
                    "Comparison": comparison,
                    "P_Value": gr.p_value if gr.p_value is not None else np.nan,
                    "Significance": sig_text,
                }
            )
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def export_to_csv(
    report_or_results: Union[AnalysisReport, List[AnalysisResult]],
) -> str:
    """CSV text (with UTF-8 BOM for spreadsheet apps), p-values pre-formatted."""
    table = results_to_dataframe(report_or_results)
    for col in ["ANOVA_P_Value", "P_Value"]:
        table[col] = table[col].map(format_p_value)
    return "\ufeff" + table.to_csv(index=False)


def export_to_excel(
    report: AnalysisReport,
    values: pd.DataFrame = None,
) -> bytes:
    """Export results to an Excel workbook.

    Args:
        report: AnalysisReport from AnalysisEngine.compute().
        values: Optional per-sample table from QuantificationResult.to_dataframe().
    """
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        results_to_dataframe(report).to_excel(writer, sheet_name="Results", index=False)

        # Individual normalized values, one row per replicate
        value_rows = [
            {"Gene": res.gene_name, "Group": gr.group_name, "Normalized_Expression": v}
            for res in report.results
            for gr in res.group_results
            for v in gr.values
        ]
        pd.DataFrame(value_rows, columns=["Gene", "Group", "Normalized_Expression"]).to_excel(
            writer, sheet_name="Values", index=False
        )

        if values is not None and not values.empty:
            values.to_excel(writer, sheet_name="Sample_Quantities", index=False)

        if report.issues:
            pd.DataFrame(
                [
                    {
                        "Code": issue.code.value,
                        "Message": issue.message,
                        "Gene": issue.gene_id,
                        "Group": issue.group_id,
                    }
                    for issue in report.issues
                ]
            ).to_excel(writer, sheet_name="Issues", index=False)

    return output.getvalue()
