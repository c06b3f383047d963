"""Heuristic human-factors metrics computed from page markup.

Five independent calculators, each starting from a fixed base score and
applying additive penalties/bonuses. They are signals for designers, not
a standards compliance check.

Red usage counts the word ``red``, ``#f00``/``#ff0000`` and
``rgb(255, 0, 0)`` only. Bare ``#`` characters (``href="#"``) and words that
merely contain "red" (``required``, ``credit``) are not counted, so stress
scores on such markup are higher than a raw substring count would give.
"""

from __future__ import annotations

import logging
import re

from uxlens.errors import InsufficientContentError
from uxlens.heuristics.scoring import clamp_score
from uxlens.heuristics.typography import extract_typography_signals, normalize_text
from uxlens.schemas.metrics import MetricResult, TypographySignals
from uxlens.schemas.pipeline import MetricsReport

logger = logging.getLogger(__name__)

# Shorter HTML is treated as "nothing to analyze"
MIN_HTML_CHARS = 20

_OPEN_TAG_RE = re.compile(r"<([a-z0-9-]+)", re.IGNORECASE)
_INTERACTIVE_RE = re.compile(r"<(?:button|a|input|select|textarea)\b", re.IGNORECASE)
_FORM_FIELD_RE = re.compile(r"<(?:input|select|textarea)\b", re.IGNORECASE)
_INPUT_RE = re.compile(r"<input\b", re.IGNORECASE)
_ALERT_WORD_RE = re.compile(r"error|warning|failed|urgent|alert", re.IGNORECASE)
_RED_RE = re.compile(
    r"\bred\b|#(?:f00|ff0000)(?![0-9a-f])|rgb\(\s*255\s*,\s*0\s*,\s*0\s*\)", re.IGNORECASE
)
_STEP_INDICATOR_RE = re.compile(r"step|progress|breadcrumb", re.IGNORECASE)
_SUPPORTIVE_RE = re.compile(r"thank|welcome|help|support|assist|calm|friendly", re.IGNORECASE)
_JARGON_RE = re.compile(r"synergy|pipeline|KPI|leverage|compliance|policy", re.IGNORECASE)

# Free allowances before penalties kick in
MAX_SENTENCE_WORDS = 20
MAX_INTERACTIVE = 8
MAX_FONT_SIZES = 6
MAX_PARAGRAPH_WORDS = 80
MAX_DENSE_INPUTS = 6
MAX_FORM_FIELDS = 6


def _count(pattern: re.Pattern[str], text: str) -> int:
    return len(pattern.findall(text)) if text else 0


# ----------------------------------------------------------------------
# Readability
# ----------------------------------------------------------------------


def calc_readability(signals: TypographySignals) -> MetricResult:
    s = signals
    score = 100.0
    if s.avg_words_per_sentence > MAX_SENTENCE_WORDS:
        score -= (s.avg_words_per_sentence - MAX_SENTENCE_WORDS) * 2
    if s.headings == 0:
        score -= 15
    if s.words < 50:
        score -= 10
    score -= s.small_text_hits * 4
    score -= min(s.low_contrast_hits * 4, 20)
    score -= s.tight_line_heights * 3
    score -= s.light_weight_hits * 4
    score -= s.wide_block_risk * 6

    if s.avg_words_per_sentence > MAX_SENTENCE_WORDS:
        summary = "Dense copy detected; consider shorter sentences."
    else:
        summary = "Sentence cadence feels scannable."

    recommendations: list[str] = []
    if s.avg_words_per_sentence > MAX_SENTENCE_WORDS:
        recommendations.append("Break long sentences into 2-3 clauses for easier scanning.")
    if s.headings < 2:
        recommendations.append("Add hierarchy with headings or section labels.")
    if s.words < 80:
        recommendations.append("Ensure enough descriptive text to set context for the screen.")
    if s.small_text_hits > 0:
        recommendations.append("Raise body and helper text to at least 12px so it stays legible.")
    if s.low_contrast_hits > 0:
        recommendations.append("Darken light gray or translucent text to strengthen contrast.")
    if s.tight_line_heights > 0:
        recommendations.append("Loosen line height to around 1.4-1.6 for multi-line text.")
    if s.wide_block_risk > 0:
        recommendations.append("Constrain text blocks to about 750px so lines stay easy to track.")
    if s.light_weight_hits > 0:
        recommendations.append("Avoid thin or light font weights for body copy.")

    return MetricResult(
        id="readability",
        label="Readability",
        score=clamp_score(score),
        summary=summary,
        recommendations=recommendations,
        evidence={
            "words": s.words,
            "sentences": s.sentences,
            "avgWordsPerSentence": round(s.avg_words_per_sentence, 1),
            "headings": s.headings,
            "paragraphs": s.paragraphs,
            "smallTextHits": s.small_text_hits,
            "lowContrastHits": s.low_contrast_hits,
            "tightLineHeights": s.tight_line_heights,
            "lightWeightHits": s.light_weight_hits,
            "wideBlockRisk": s.wide_block_risk,
        },
    )


# ----------------------------------------------------------------------
# Cognitive load
# ----------------------------------------------------------------------


def calc_cognitive_load(html: str, signals: TypographySignals) -> MetricResult:
    unique_components = len({tag.lower() for tag in _OPEN_TAG_RE.findall(html)})
    interactive = _count(_INTERACTIVE_RE, html)
    font_sizes = signals.unique_font_sizes
    avg_paragraph = signals.avg_words_per_paragraph

    score = 90.0 - unique_components
    if interactive > MAX_INTERACTIVE:
        score -= (interactive - MAX_INTERACTIVE) * 2
    if font_sizes > MAX_FONT_SIZES:
        score -= (font_sizes - MAX_FONT_SIZES) * 2
    if avg_paragraph > MAX_PARAGRAPH_WORDS:
        score -= min(20.0, (avg_paragraph - MAX_PARAGRAPH_WORDS) * 0.5)

    if interactive > MAX_INTERACTIVE:
        summary = "Many simultaneous actions; consider progressive disclosure."
    else:
        summary = "Interaction surface looks manageable."

    recommendations: list[str] = []
    if unique_components > 30:
        recommendations.append("Consolidate visual styles to reduce decision fatigue.")
    if interactive > MAX_INTERACTIVE:
        recommendations.append("Sequence actions into smaller groups or steps.")
    if font_sizes > MAX_FONT_SIZES:
        recommendations.append("Trim the type scale to a handful of font sizes.")
    if avg_paragraph > MAX_PARAGRAPH_WORDS:
        recommendations.append("Split long paragraphs into shorter chunks or lists.")

    return MetricResult(
        id="cognitive-load",
        label="Cognitive Load",
        score=clamp_score(score),
        summary=summary,
        recommendations=recommendations,
        evidence={
            "uniqueComponents": unique_components,
            "interactiveElements": interactive,
            "uniqueFontSizes": font_sizes,
            "avgWordsPerParagraph": round(avg_paragraph, 1),
        },
    )


# ----------------------------------------------------------------------
# User stress
# ----------------------------------------------------------------------


def calc_stress(html: str) -> MetricResult:
    alert_words = _count(_ALERT_WORD_RE, html)
    red_usage = _count(_RED_RE, html)
    dense_inputs = _count(_INPUT_RE, html)

    score = 85.0
    score -= alert_words * 5
    score -= red_usage * 3
    if dense_inputs > MAX_DENSE_INPUTS:
        score -= (dense_inputs - MAX_DENSE_INPUTS) * 2

    if alert_words > 0:
        summary = "Warning language visible; ensure context and reassurance."
    else:
        summary = "No obvious stress triggers detected."

    recommendations: list[str] = []
    if alert_words > 0:
        recommendations.append("Pair alerts with next-step guidance, not just warnings.")
    if red_usage > 3:
        recommendations.append("Use calmer tones for emphasis unless truly critical.")
    if dense_inputs > MAX_DENSE_INPUTS:
        recommendations.append("Group related inputs and add breathing space.")

    return MetricResult(
        id="stress",
        label="User Stress",
        score=clamp_score(score),
        summary=summary,
        recommendations=recommendations,
        evidence={
            "alertWords": alert_words,
            "redUsage": red_usage,
            "denseInputs": dense_inputs,
        },
    )


# ----------------------------------------------------------------------
# Memory load
# ----------------------------------------------------------------------


def calc_memory(html: str) -> MetricResult:
    fields = _count(_FORM_FIELD_RE, html)
    steps = _count(_STEP_INDICATOR_RE, html)

    score = 95.0
    if fields > MAX_FORM_FIELDS:
        score -= (fields - MAX_FORM_FIELDS) * 4
    if steps == 0 and fields > 4:
        score -= 10

    if fields > MAX_FORM_FIELDS:
        summary = "High working-memory burden from many simultaneous inputs."
    else:
        summary = "Form load feels within working-memory limits."

    recommendations: list[str] = []
    if fields > MAX_FORM_FIELDS:
        recommendations.append("Stage questions or use progressive disclosure.")
    if steps == 0:
        recommendations.append("Show progress or chunk tasks so users understand sequence.")

    return MetricResult(
        id="memory",
        label="Memory Load",
        score=clamp_score(score),
        summary=summary,
        recommendations=recommendations,
        evidence={
            "fields": fields,
            "stepIndicators": steps,
        },
    )


# ----------------------------------------------------------------------
# Empathy alignment
# ----------------------------------------------------------------------


def calc_empathy(text: str, signals: TypographySignals) -> MetricResult:
    supportive = _count(_SUPPORTIVE_RE, text)
    jargon = _count(_JARGON_RE, text)
    risk_hits = signals.typography_risk_hits

    score = 70.0 + supportive * 5 - jargon * 4
    if risk_hits == 0:
        score += 8
    if (
        signals.unique_font_sizes <= 5
        and signals.avg_words_per_paragraph <= MAX_PARAGRAPH_WORDS
    ):
        score += 5

    if supportive > jargon:
        summary = "Language leans helpful and human."
    else:
        summary = "Tone feels utilitarian; layer in more human cues."

    recommendations: list[str] = []
    if supportive < 2:
        recommendations.append("Narrate intent with plain, supportive language.")
    if jargon > 0:
        recommendations.append("Swap internal jargon for user-facing words.")
    if risk_hits > 0:
        recommendations.append("Make small, faint or cramped text comfortable to read.")

    return MetricResult(
        id="empathy",
        label="Empathy Alignment",
        score=clamp_score(score),
        summary=summary,
        recommendations=recommendations,
        evidence={
            "supportivePhrases": supportive,
            "jargonHits": jargon,
            "typographyRiskHits": risk_hits,
            "uniqueFontSizes": signals.unique_font_sizes,
            "avgWordsPerParagraph": round(signals.avg_words_per_paragraph, 1),
        },
    )


# ----------------------------------------------------------------------
# Entry points
# ----------------------------------------------------------------------


def evaluate_all_metrics(html: str | None) -> list[MetricResult]:
    """Score ``html`` on all five dimensions.

    Pure and deterministic. ``None`` or empty markup is scored from
    zero-valued signals rather than rejected.
    """
    html = html or ""
    text = normalize_text(html)
    signals = extract_typography_signals(html, text)

    return [
        calc_readability(signals),
        calc_cognitive_load(html, signals),
        calc_stress(html),
        calc_memory(html),
        calc_empathy(text, signals),
    ]


def score_markup(html: str | None) -> MetricsReport:
    """Heuristic-only entry point.

    Raises ``InsufficientContentError`` when HTML is supplied but shorter
    than ``MIN_HTML_CHARS``.
    """
    if html is not None and len(html) < MIN_HTML_CHARS:
        raise InsufficientContentError("Insufficient HTML supplied for heuristic scoring.")

    metrics = evaluate_all_metrics(html)
    logger.debug(
        "Scored %d chars of HTML: %s",
        len(html or ""),
        ", ".join(f"{m.id}={m.score}" for m in metrics),
    )
    return MetricsReport(metrics=metrics)
