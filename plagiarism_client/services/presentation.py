from enum import Enum
from pydantic import BaseModel
from typing import List, Optional

from plagiarism_client.config import PresentationPolicy
from plagiarism_client.models.schemas import DetectionResult, Metrics, Verdict

CHART_LABELS = ["Unique", "Plagiarized"]
CHART_COLORS = ["#10b981", "#ef4444"]


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Tone(str, Enum):
    ADVERSE = "adverse"      # red
    FAVORABLE = "favorable"  # green


class ChartData(BaseModel):
    labels: List[str]
    values: List[float]
    colors: List[str]


class ScoreRow(BaseModel):
    sentence: str
    similarity_score: float
    severity: Severity
    matched_source: Optional[str] = None
    explanation: str = ""

    @property
    def score_label(self) -> str:
        return f"{self.similarity_score:.0f}%"


class ReportView(BaseModel):
    task_id: str
    overall_similarity: float
    headline_tone: Tone
    verdict: Verdict
    explanation: str
    chart: ChartData
    metrics: Metrics
    rows: List[ScoreRow]


def distribution(overall_similarity: float) -> ChartData:
    return ChartData(
        labels=list(CHART_LABELS),
        values=[100 - overall_similarity, overall_similarity],
        colors=list(CHART_COLORS),
    )


def classify_severity(score: float, policy: PresentationPolicy = PresentationPolicy()) -> Severity:
    if score > policy.severity_high:
        return Severity.HIGH
    if score > policy.severity_medium:
        return Severity.MEDIUM
    return Severity.LOW


def headline_tone(score: float, policy: PresentationPolicy = PresentationPolicy()) -> Tone:
    return Tone.ADVERSE if score > policy.headline_threshold else Tone.FAVORABLE


def build_report_view(task_id: str, result: DetectionResult,
                      policy: PresentationPolicy = PresentationPolicy()) -> ReportView:
    """
    Derive everything the results view shows from a fetched result.
    Older results carry no metrics, so a zeroed default is used.
    """
    rows = [
        ScoreRow(
            sentence=item.sentence,
            similarity_score=item.similarity_score,
            severity=classify_severity(item.similarity_score, policy),
            matched_source=item.matched_source,
            explanation=item.explanation or "",
        )
        for item in result.detailed_scores
    ]
    return ReportView(
        task_id=task_id,
        overall_similarity=result.overall_similarity,
        headline_tone=headline_tone(result.overall_similarity, policy),
        verdict=result.verdict,
        explanation=result.explanation,
        chart=distribution(result.overall_similarity),
        metrics=result.metrics or Metrics(),
        rows=rows,
    )
