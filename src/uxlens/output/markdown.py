"""Markdown report builder: renders an AnalysisReport to a Markdown document."""

from __future__ import annotations

from uxlens.schemas.metrics import MetricResult
from uxlens.schemas.pipeline import AnalysisReport
from uxlens.schemas.visual import VisualAnalysisResult


def render_markdown_report(report: AnalysisReport, *, source: str = "") -> str:
    """Render an AnalysisReport into a Markdown string."""
    sections: list[str] = []
    analysis = report.analysis

    # Title
    title = f"# Human-Factors Report: {source}" if source else "# Human-Factors Report"
    sections.append(title + "\n")
    sections.append(f"*Generated: {report.generated_at}*\n")

    sections.append(f"**Overall score:** {analysis.overall_score}/100\n")
    if analysis.summary:
        sections.append(analysis.summary + "\n")

    # Heuristic metrics
    if report.metrics:
        sections.append("## Heuristic Metrics\n")
        sections.append(_render_metric_table(report.metrics))
        for metric in report.metrics:
            sections.append(_render_metric_detail(metric))

    # Top issues
    if analysis.top_issues:
        sections.append("## Top Issues\n")
        for issue in analysis.top_issues:
            sections.append(f"- **{issue.metric}** ({issue.severity}): {issue.issue}")
        sections.append("")

    # Recommendations
    if analysis.recommendations:
        sections.append("## Recommendations\n")
        sections.append("| # | Recommendation | Impact | Effort |")
        sections.append("|---|----------------|--------|--------|")
        for i, rec in enumerate(analysis.recommendations, 1):
            sections.append(
                f"| {i} | **{rec.title}**: {rec.description} | {rec.impact} | {rec.effort} |"
            )
        sections.append("")

    visual = _render_visual(report.greenpt)
    if visual:
        sections.append(visual)

    sections.append(
        "---\n*Scores are heuristic human-factors signals, not an accessibility "
        "standards audit.*\n"
    )
    return "\n".join(sections)


def _render_metric_table(metrics: list[MetricResult]) -> str:
    lines = ["| Metric | Score | Verdict |", "|--------|-------|---------|"]
    for m in metrics:
        lines.append(f"| {m.label} | {m.score} | {m.summary} |")
    lines.append("")
    return "\n".join(lines)


def _render_metric_detail(metric: MetricResult) -> str:
    lines = [f"### {metric.label} ({metric.score}/100)\n"]
    if metric.evidence:
        evidence = ", ".join(f"{k}={v}" for k, v in metric.evidence.items())
        lines.append(f"*Evidence:* {evidence}\n")
    for rec in metric.recommendations:
        lines.append(f"- {rec}")
    lines.append("")
    return "\n".join(lines)


def _fmt(value: float | int | None, suffix: str = "") -> str:
    if value is None:
        return "unknown"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}{suffix}"


def _render_visual(visual: VisualAnalysisResult) -> str:
    """Visual analysis section; empty string when the service reported nothing."""
    if not visual.to_wire():
        return ""

    lines = ["## Visual Analysis\n"]
    lines.append(f"- **Overall:** {_fmt(visual.overall_score, '/100')}")
    if visual.contrast:
        lines.append(f"- **Contrast:** {_fmt(visual.contrast.score, '/100')}")
        for issue in visual.contrast.issues or []:
            ratio = f" (ratio {issue.ratio})" if issue.ratio is not None else ""
            lines.append(f"  - {issue.element or 'element'}{ratio}: {issue.level or 'n/a'}")
    if visual.layout:
        lines.append(f"- **Layout complexity:** {_fmt(visual.layout.complexity, '/100')}")
        lines.append(f"- **Visual hierarchy:** {_fmt(visual.layout.visual_hierarchy, '/100')}")
        lines.append(f"- **Focusable elements:** {_fmt(visual.layout.focusable_elements)}")
    if visual.text_extraction and visual.text_extraction.headings:
        lines.append(f"- **Headings:** {', '.join(visual.text_extraction.headings)}")
    if visual.errors:
        lines.append("\n**Service errors:**")
        for err in visual.errors:
            lines.append(f"- {err}")
    lines.append("")
    return "\n".join(lines)
