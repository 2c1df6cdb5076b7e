import pytest

from plagiarism_client.config import PresentationPolicy
from plagiarism_client.models.schemas import DetectionResult, Verdict
from plagiarism_client.services.presentation import (
    Severity, Tone, build_report_view, classify_severity, distribution, headline_tone,
)
from plagiarism_client.services.report_renderer import render_report


def make_result(**overrides):
    data = {
        "overall_similarity": 15,
        "verdict": "Clean",
        "explanation": "Hybrid Analysis Complete.",
        "detailed_scores": [
            {"sentence": "The sky is blue.", "similarity_score": 15, "explanation": "Common phrase"},
        ],
    }
    data.update(overrides)
    return DetectionResult.model_validate(data)


@pytest.mark.parametrize("score, expected", [
    (0, Severity.LOW),
    (40, Severity.LOW),
    (40.01, Severity.MEDIUM),
    (80, Severity.MEDIUM),
    (80.5, Severity.HIGH),
    (100, Severity.HIGH),
])
def test_severity_breakpoints(score, expected):
    assert classify_severity(score) == expected


def test_severity_is_monotonic():
    order = [Severity.LOW, Severity.MEDIUM, Severity.HIGH]
    ranks = [order.index(classify_severity(score / 2)) for score in range(0, 201)]
    assert ranks == sorted(ranks)


def test_headline_breakpoint():
    assert headline_tone(20) == Tone.FAVORABLE
    assert headline_tone(20.5) == Tone.ADVERSE


def test_thresholds_are_overridable():
    policy = PresentationPolicy(headline_threshold=50, severity_medium=10, severity_high=30)
    assert headline_tone(40, policy) == Tone.FAVORABLE
    assert classify_severity(20, policy) == Severity.MEDIUM
    assert classify_severity(31, policy) == Severity.HIGH


def test_policy_rejects_inverted_thresholds():
    with pytest.raises(ValueError):
        PresentationPolicy(severity_medium=90, severity_high=80)


@pytest.mark.parametrize("overall", [0, 15, 37.25, 62.5, 100])
def test_distribution_sums_to_100(overall):
    chart = distribution(overall)
    assert chart.labels == ["Unique", "Plagiarized"]
    assert chart.values[1] == overall
    assert sum(chart.values) == pytest.approx(100)


def test_sky_is_blue_scenario():
    view = build_report_view("abc123", make_result())
    assert view.headline_tone == Tone.FAVORABLE
    assert view.chart.values == [85, 15]
    assert view.verdict == Verdict.CLEAN
    assert view.rows[0].severity == Severity.LOW
    assert view.rows[0].score_label == "15%"


def test_missing_metrics_default_to_zero():
    view = build_report_view("old-task", make_result())
    metrics = view.metrics
    assert (metrics.readability_score, metrics.spelling_errors, metrics.grammar_issues,
            metrics.additional_issues) == (0, 0, 0, 0)
    assert metrics.readability_label == "N/A"


def test_rendered_report():
    result = make_result(
        overall_similarity=66.67,
        verdict="Plagiarism Detected",
        detailed_scores=[
            {"sentence": "Copied line.", "similarity_score": 91.2,
             "matched_source": "A copied line.", "explanation": "Identical match (High Confidence)."},
            {"sentence": "My own line.", "similarity_score": 12, "explanation": "Original content."},
        ],
        metrics={"readability_score": 55, "readability_label": "Fairly Difficult",
                 "spelling_errors": 3, "grammar_issues": 1, "additional_issues": 2},
    )
    text = render_report(build_report_view("t-1", result))

    assert "Overall Plagiarism Score: 66.67%" in text
    assert "Verdict: Flagged" in text
    assert "[HIGH] Similarity: 91%" in text
    assert 'Matches: "A copied line."' in text
    assert "[LOW] Similarity: 12%" in text
    assert "Readability: Fairly Difficult (Score: 55)" in text
    assert text.count("Matches:") == 1
    assert "\033[" not in text


def test_rendering_never_fails_without_metrics():
    text = render_report(build_report_view("old-task", make_result()))
    assert "Readability: N/A (Score: 0)" in text
    assert "Grammar Issues: 0" in text
