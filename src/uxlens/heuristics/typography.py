"""Text normalization and shared typography signal extraction.

Everything here is a best-effort scan of the markup with regular
expressions, not a DOM parse. Utility class names follow Tailwind
conventions; inline ``style`` declarations are matched by property name.
"""

from __future__ import annotations

import re

from uxlens.schemas.metrics import TypographySignals

_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_END_RE = re.compile(r"[.!?]")

_HEADING_RE = re.compile(r"<h[1-6][^>]*>", re.IGNORECASE)
_PARAGRAPH_RE = re.compile(r"<p(?=[\s>/])", re.IGNORECASE)

# Legibility thresholds
SMALL_TEXT_PX = 12.0
TIGHT_LINE_HEIGHT = 1.2
LOW_ALPHA = 0.5
WIDE_BLOCK_PX = 750.0
REM_PX = 16.0
CH_PX = 8.0

_SMALL_TEXT_UTILITY_RE = re.compile(
    r"\btext-(?:2xs|xs)(?![\w-])|\btext-\[(?:\d|1[01])(?:\.\d+)?px\]", re.IGNORECASE
)
_LOW_CONTRAST_UTILITY_RE = re.compile(
    r"\btext-(?:gray|slate|zinc|neutral|stone)-[1-4]00(?![\w-])|\btext-white/[1-5]0(?![\w-])",
    re.IGNORECASE,
)
# Light grays written as repeated hex digits: #aaa .. #eee, #aaaaaa .. #eeeeee
_LIGHT_HEX_COLOR_RE = re.compile(
    r"(?<![\w-])color\s*:\s*#([a-e])\1\1(?:\1\1\1)?(?![0-9a-f])", re.IGNORECASE
)
_RGBA_RE = re.compile(
    r"rgba\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*(\d*\.?\d+)\s*\)", re.IGNORECASE
)
_TIGHT_LEADING_UTILITY_RE = re.compile(r"\bleading-(?:none|tight)(?![\w-])", re.IGNORECASE)
_LINE_HEIGHT_RE = re.compile(r"line-height\s*:\s*(\d*\.?\d+)\s*([a-z%]*)", re.IGNORECASE)
_LIGHT_WEIGHT_RE = re.compile(
    r"\bfont-(?:thin|extralight|light)(?![\w-])|font-weight\s*:\s*[1-3]00(?!\d)",
    re.IGNORECASE,
)
_FONT_SIZE_UTILITY_RE = re.compile(
    r"\btext-(?:2xs|xs|sm|base|lg|[2-9]?xl)(?![\w-])|\btext-\[\d*\.?\d+(?:px|rem|em)\]",
    re.IGNORECASE,
)
_FONT_SIZE_INLINE_RE = re.compile(r"font-size\s*:\s*([^;\"'}]+)", re.IGNORECASE)
_FONT_SIZE_VALUE_RE = re.compile(r"(\d*\.?\d+)\s*(px|rem|em)\b", re.IGNORECASE)

# At-rule preludes such as `@media (max-width: 768px)` are conditions, not constraints
_AT_RULE_PRELUDE_RE = re.compile(r"@(?:media|container|supports)\b[^{]*", re.IGNORECASE)
_MAX_WIDTH_INLINE_RE = re.compile(r"max-width\s*:\s*([^;\"'}]+)", re.IGNORECASE)
_MAX_WIDTH_ARBITRARY_RE = re.compile(r"\bmax-w-\[([^\]\s]+)\]", re.IGNORECASE)
_MAX_WIDTH_NAMED_RE = re.compile(
    r"\bmax-w-(xs|sm|md|lg|xl|[2-7]xl|prose|full|none|screen(?:-[a-z0-9]+)?)(?![\w-])",
    re.IGNORECASE,
)
_LENGTH_RE = re.compile(r"^\s*(\d*\.?\d+)\s*(px|rem|em|ch|%|vw)?\s*$", re.IGNORECASE)

# Tailwind max-w-* scale in px
_NAMED_MAX_WIDTHS = {
    "xs": 320.0,
    "sm": 384.0,
    "md": 448.0,
    "lg": 512.0,
    "xl": 576.0,
    "2xl": 672.0,
    "3xl": 768.0,
    "4xl": 896.0,
    "5xl": 1024.0,
    "6xl": 1152.0,
    "7xl": 1280.0,
    "prose": 65 * CH_PX,
}
_UNBOUNDED = float("inf")


def normalize_text(html: str | None) -> str:
    """Return the visible text of ``html``: no scripts, styles or tags, single-spaced."""
    if not html:
        return ""
    text = _SCRIPT_RE.sub(" ", html)
    text = _STYLE_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(text: str) -> int:
    return len(text.split()) if text else 0


def count_sentences(text: str) -> int:
    """Count sentence terminators, never less than 1."""
    return len(_SENTENCE_END_RE.findall(text)) or 1


def _average(total: int, count: int) -> float:
    return total / count if count else float(total)


def _count_small_text(html: str) -> int:
    hits = len(_SMALL_TEXT_UTILITY_RE.findall(html))
    for value in _FONT_SIZE_INLINE_RE.findall(html):
        match = _FONT_SIZE_VALUE_RE.search(value)
        if match and _to_px(float(match.group(1)), match.group(2)) < SMALL_TEXT_PX:
            hits += 1
    return hits


def _count_low_contrast(html: str) -> int:
    hits = len(_LOW_CONTRAST_UTILITY_RE.findall(html))
    hits += len(_LIGHT_HEX_COLOR_RE.findall(html))
    hits += sum(1 for alpha in _RGBA_RE.findall(html) if float(alpha) < LOW_ALPHA)
    return hits


def _count_tight_line_heights(html: str) -> int:
    hits = len(_TIGHT_LEADING_UTILITY_RE.findall(html))
    for value, unit in _LINE_HEIGHT_RE.findall(html):
        # Only unitless multipliers are comparable without a font size
        if not unit and float(value) < TIGHT_LINE_HEIGHT:
            hits += 1
    return hits


def _count_unique_font_sizes(html: str) -> int:
    tokens = {m.group(0).lower() for m in _FONT_SIZE_UTILITY_RE.finditer(html)}
    tokens.update(
        "font-size:" + _WHITESPACE_RE.sub("", value).lower()
        for value in _FONT_SIZE_INLINE_RE.findall(html)
    )
    return len(tokens)


def _to_px(value: float, unit: str | None) -> float:
    unit = (unit or "px").lower()
    if unit in ("rem", "em"):
        return value * REM_PX
    if unit == "ch":
        return value * CH_PX
    if unit in ("%", "vw"):
        return _UNBOUNDED
    return value


def _length_px(raw: str) -> float | None:
    """Convert a CSS length to px; ``None`` when it isn't a plain length."""
    raw = raw.strip().lower()
    if raw == "none":
        return _UNBOUNDED
    match = _LENGTH_RE.match(raw)
    if not match:
        return None
    return _to_px(float(match.group(1)), match.group(2))


def _max_width_constraints(html: str) -> list[float | None]:
    widths: list[float | None] = []
    declarations = _AT_RULE_PRELUDE_RE.sub(" ", html)
    widths.extend(_length_px(v) for v in _MAX_WIDTH_INLINE_RE.findall(declarations))
    widths.extend(_length_px(v) for v in _MAX_WIDTH_ARBITRARY_RE.findall(html))
    for name in _MAX_WIDTH_NAMED_RE.findall(html):
        widths.append(_NAMED_MAX_WIDTHS.get(name.lower(), _UNBOUNDED))
    return widths


def _wide_block_risk(html: str, paragraphs: int) -> int:
    """Count max-width constraints wider than a comfortable line length.

    Without any width control on the page, long lines are likely as soon
    as there is paragraph copy, which counts as a single unit of risk.
    """
    widths = _max_width_constraints(html)
    if not widths:
        return 1 if paragraphs > 0 else 0
    return sum(1 for w in widths if w is not None and w > WIDE_BLOCK_PX)


def extract_typography_signals(html: str | None, text: str | None = None) -> TypographySignals:
    """Scan ``html`` once and return the counts shared by several metrics.

    ``text`` is the already-normalized visible text; it is derived from
    ``html`` when omitted.
    """
    html = html or ""
    if text is None:
        text = normalize_text(html)

    words = count_words(text)
    sentences = count_sentences(text)
    headings = len(_HEADING_RE.findall(html))
    paragraphs = len(_PARAGRAPH_RE.findall(html))

    return TypographySignals(
        words=words,
        sentences=sentences,
        headings=headings,
        paragraphs=paragraphs,
        avg_words_per_sentence=_average(words, sentences),
        avg_words_per_paragraph=_average(words, paragraphs),
        small_text_hits=_count_small_text(html),
        low_contrast_hits=_count_low_contrast(html),
        tight_line_heights=_count_tight_line_heights(html),
        light_weight_hits=len(_LIGHT_WEIGHT_RE.findall(html)),
        unique_font_sizes=_count_unique_font_sizes(html),
        wide_block_risk=_wide_block_risk(html, paragraphs),
    )
