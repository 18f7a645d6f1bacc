"""GraphGenerator: Plotly bar charts of normalized expression.

One cluster of bars per target gene, one bar per group, SEM (or SD) error
bars, and the CLD letters or t-test labels written above each bar.
"""

import textwrap
from typing import List, Optional

import plotly.graph_objects as go

from relquant.constants import GROUP_COLORS
from relquant.models import AnalysisReport, Group


class GraphGenerator:
    @staticmethod
    def _wrap_text(text: str, width: int = 15) -> str:
        """Wrap text for x-axis labels using <br> for Plotly compatibility"""
        wrapped = textwrap.fill(text, width=width)
        return wrapped.replace("\n", "<br>")

    @staticmethod
    def bar_annotation(group_result, multi_group: bool) -> str:
        if multi_group:
            return group_result.marking_letter
        return group_result.significance

    @staticmethod
    def create_expression_chart(
        report: AnalysisReport,
        groups: List[Group],
        error_bar: str = "sem",
        title: Optional[str] = None,
        settings: dict = None,
    ) -> go.Figure:
        """Grouped bar chart of mean normalized expression per gene and group."""
        settings = settings or {}

        if report is None or not report.results:
            fig = go.Figure()
            fig.add_annotation(text="No data available", showarrow=False)
            return fig

        gene_labels = [GraphGenerator._wrap_text(r.gene_name) for r in report.results]
        multi_group = len(groups) > 2

        fig = go.Figure()
        for idx, group in enumerate(groups):
            means, errors, labels = [], [], []
            for res in report.results:
                gr = res.for_group(group.id)
                if gr is None:
                    means.append(0.0)
                    errors.append(0.0)
                    labels.append("")
                    continue
                means.append(gr.mean)
                errors.append(gr.sd if error_bar == "sd" else gr.sem)
                labels.append(GraphGenerator.bar_annotation(gr, multi_group))

            color = group.color or GROUP_COLORS[idx % len(GROUP_COLORS)]
            fig.add_trace(
                go.Bar(
                    name=group.name,
                    x=gene_labels,
                    y=means,
                    error_y=dict(
                        type="data",
                        array=errors,
                        visible=True,
                        thickness=settings.get("error_thickness", 1.5),
                        width=4,
                        color="rgba(0,0,0,0.7)",
                    ),
                    marker=dict(
                        color=color,
                        line=dict(width=settings.get("marker_line_width", 1), color="black"),
                        opacity=settings.get("bar_opacity", 0.95),
                    ),
                    text=labels,
                    textposition="outside",
                    cliponaxis=False,
                )
            )

        fig.update_layout(
            title=dict(text=title or "Relative expression", font=dict(size=settings.get("title_size", 18))),
            barmode="group",
            bargap=settings.get("bar_gap", 0.15),
            template=settings.get("color_scheme", "plotly_white"),
            yaxis=dict(title="Relative expression (normalized)", rangemode="tozero"),
            xaxis=dict(title="Gene"),
            font=dict(size=settings.get("font_size", 14)),
            showlegend=settings.get("show_legend", True),
            height=settings.get("figure_height", 500),
        )
        return fig
