"""Prompt for the visual analysis stage."""

ANALYSIS_PROMPT = """\
You are an accessibility analysis expert. Analyze this web interface \
comprehensively and provide a detailed JSON response.

Analyze the following:
1. **Visual Contrast**: Check color contrast ratios, identify low-contrast text/elements, score from 0-100
2. **Layout Complexity**: Assess visual hierarchy, spacing, information density, score from 0-100
3. **Focusable Elements**: Count and evaluate interactive elements, keyboard navigation paths
4. **Text Structure**: Extract headings hierarchy, links, and text organization
5. **Overall Accessibility Score**: 0-100 based on all factors

Return ONLY valid JSON in this exact format (no markdown, no code blocks):
{
  "contrast": {
    "score": <number 0-100>,
    "issues": [{"element": "<description>", "ratio": <number>, "level": "<AA|AAA|fail>"}]
  },
  "layout": {
    "complexity": <number 0-100, lower is better>,
    "focusableElements": <number>,
    "visualHierarchy": <number 0-100, higher is better>
  },
  "textExtraction": {
    "text": "<main text content>",
    "headings": ["<h1>", "<h2>", ...],
    "links": ["<link text>", ...]
  },
  "overallScore": <number 0-100>
}
"""

URL_SECTION = "\nURL to analyze: {url}\n"

HTML_SECTION = "\nHTML Content (first {limit} chars):\n{html}\n"

IMAGE_SECTION = (
    "\nA screenshot of the interface is provided above. Analyze the visual "
    "design, contrast, and layout from the image.\n"
)

CLOSING = "\nNow provide your analysis as JSON only:"
