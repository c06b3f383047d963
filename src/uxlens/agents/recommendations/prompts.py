"""Prompt templates for the recommendation synthesis stage."""

SYNTHESIS_PROMPT = """\
You are an accessibility design consultant. Analyze the following metrics and \
provide actionable recommendations.

Metrics:
{metrics_summary}{visual_summary}

Provide a JSON response with:
1. overallScore: 0-100 average of all metric scores
2. topIssues: array of {{metric: string, issue: string, severity: "high"|"medium"|"low"}} - top 3 issues
3. recommendations: array of {{title: string, description: string, impact: "high"|"medium"|"low", \
effort: "quick"|"medium"|"long-term"}} - prioritized actionable recommendations
4. summary: 2-3 sentence executive summary

Return ONLY valid JSON, no markdown formatting."""

METRIC_LINE = "- {label}: {score}/100 - {summary}"

VISUAL_SUMMARY = """

Visual Analysis:
- Overall Accessibility Score: {overall}/100
- Contrast score: {contrast}/100
- Layout complexity: {complexity}/100 (lower is better)
- Visual hierarchy: {hierarchy}/100
- Focusable elements: {focusable}
- Contrast issues found: {issue_count}"""

FALLBACK_SUMMARY = "Overall accessibility score: {score}/100. {count} key areas need attention."
