"""Tests for the Pydantic schemas."""

import json

import pytest
from pydantic import ValidationError

from uxlens.schemas.analysis import RecommendationAnalysis, TopIssue
from uxlens.schemas.metrics import MetricResult, TypographySignals
from uxlens.schemas.pipeline import AnalysisReport, IngestMetadata, IngestResult
from uxlens.schemas.visual import VisualAnalysisResult


def _analysis(**overrides) -> dict:
    data = {
        "overallScore": 70,
        "topIssues": [],
        "recommendations": [],
        "summary": "ok",
    }
    data.update(overrides)
    return data


class TestMetricResult:
    def test_rejects_unknown_id(self) -> None:
        with pytest.raises(ValidationError):
            MetricResult(id="vibes", label="Vibes", score=50, summary="")

    def test_is_frozen(self) -> None:
        m = MetricResult(id="stress", label="User Stress", score=50, summary="")
        with pytest.raises(ValidationError):
            m.score = 10


class TestTypographySignals:
    def test_camel_case_wire_names(self) -> None:
        s = TypographySignals(small_text_hits=2)
        dumped = s.model_dump(by_alias=True)
        assert dumped["smallTextHits"] == 2
        assert TypographySignals.model_validate(dumped) == s


class TestRecommendationAnalysis:
    def test_parses_wire_names(self) -> None:
        analysis = RecommendationAnalysis.model_validate(_analysis(
            topIssues=[{"metric": "Readability", "issue": "dense", "severity": "high"}],
            recommendations=[{"title": "t", "description": "d", "impact": "low", "effort": "long-term"}],
        ))
        assert analysis.top_issues[0].severity == "high"
        assert analysis.recommendations[0].effort == "long-term"

    def test_float_score_rounded(self) -> None:
        assert RecommendationAnalysis.model_validate(_analysis(overallScore=72.5)).overall_score == 73

    def test_score_out_of_range(self) -> None:
        with pytest.raises(ValidationError, match="0-100"):
            RecommendationAnalysis.model_validate(_analysis(overallScore=101))

    def test_missing_field(self) -> None:
        data = _analysis()
        del data["summary"]
        with pytest.raises(ValidationError):
            RecommendationAnalysis.model_validate(data)

    def test_bad_effort(self) -> None:
        with pytest.raises(ValidationError):
            RecommendationAnalysis.model_validate(_analysis(
                recommendations=[{"title": "t", "description": "d", "impact": "low", "effort": "someday"}],
            ))

    def test_top_issues_truncated(self) -> None:
        issues = [{"metric": f"m{i}", "issue": "x", "severity": "low"} for i in range(5)]
        analysis = RecommendationAnalysis.model_validate(_analysis(topIssues=issues))
        assert [i.metric for i in analysis.top_issues] == ["m0", "m1", "m2"]
        assert isinstance(analysis.top_issues[0], TopIssue)


class TestVisualAnalysisResult:
    def test_partial_result(self) -> None:
        result = VisualAnalysisResult.model_validate({"layout": {"complexity": 30}})
        assert result.layout.visual_hierarchy is None
        assert result.contrast is None
        assert result.to_wire() == {"layout": {"complexity": 30.0}}

    def test_has_errors(self) -> None:
        assert not VisualAnalysisResult().has_errors
        assert not VisualAnalysisResult(errors=[]).has_errors
        assert VisualAnalysisResult(errors=["boom"]).has_errors


class TestAnalysisReport:
    def test_json_round_trip(self) -> None:
        report = AnalysisReport(
            metrics=[MetricResult(id="memory", label="Memory Load", score=95, summary="fine",
                                  evidence={"fields": 3, "stepIndicators": 0})],
            greenpt=VisualAnalysisResult(overall_score=80),
            analysis=RecommendationAnalysis.model_validate(_analysis()),
        )
        payload = json.loads(report.to_json())
        assert payload["greenpt"] == {"overallScore": 80.0}
        assert payload["analysis"]["overallScore"] == 70
        assert AnalysisReport.model_validate(payload) == report


class TestIngestResult:
    def test_wire_names_and_omitted_fields(self) -> None:
        result = IngestResult(
            fetched_html="<p>x</p>",
            metadata=IngestMetadata(source="url", url="https://example.com", content_type="text/html"),
        )
        payload = json.loads(result.to_json())
        assert payload["fetchedHtml"] == "<p>x</p>"
        assert payload["metadata"] == {
            "source": "url", "url": "https://example.com", "contentType": "text/html",
        }
        assert "screenshotDataUrl" not in payload
        assert payload["warnings"] == []
