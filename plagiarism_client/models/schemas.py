from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class Verdict(str, Enum):
    CLEAN = "Clean"
    FLAGGED = "Flagged"


class RewriteMode(str, Enum):
    ACADEMIC = "academic"
    HUMANIZE = "humanize"
    FIX = "fix"
    COMPREHENSIVE = "comprehensive"


# Scores are cosine similarities scaled to percent; float32 rounding can
# push an identical sentence slightly past 100.
SCORE_TOLERANCE = 0.01


def clamp_score(value):
    if isinstance(value, bool):
        return value
    try:
        score = float(value)
    except (TypeError, ValueError):
        # Left for the float field to reject
        return value
    if not -SCORE_TOLERANCE <= score <= 100 + SCORE_TOLERANCE:
        raise ValueError(f"Score {score} is outside 0-100")
    return min(max(score, 0.0), 100.0)


class Task(BaseModel):
    task_id: str = Field(min_length=1)


class SentenceScore(BaseModel):
    sentence: str
    similarity_score: float
    matched_source: Optional[str] = None
    explanation: Optional[str] = ""

    @field_validator("similarity_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        return clamp_score(value)


class Metrics(BaseModel):
    readability_score: float = 0
    readability_label: str = "N/A"
    spelling_errors: int = Field(default=0, ge=0)
    grammar_issues: int = Field(default=0, ge=0)
    additional_issues: int = Field(default=0, ge=0)  # long sentences


class DetectionResult(BaseModel):
    overall_similarity: float
    detailed_scores: List[SentenceScore] = Field(min_length=1)
    verdict: Verdict
    explanation: str = ""
    metrics: Optional[Metrics] = None

    @field_validator("overall_similarity", mode="before")
    @classmethod
    def _clamp_overall(cls, value):
        return clamp_score(value)

    @field_validator("verdict", mode="before")
    @classmethod
    def _normalize_verdict(cls, value):
        # The backend may label a flagged run "Plagiarism Detected".
        if value == Verdict.CLEAN or value == Verdict.CLEAN.value:
            return Verdict.CLEAN
        return Verdict.FLAGGED


class RewriteRequest(BaseModel):
    text: str = Field(min_length=1)
    mode: RewriteMode = RewriteMode.ACADEMIC

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Text must not be empty.")
        return value


class RewriteResult(BaseModel):
    rewritten_text: str


class PdfRequest(BaseModel):
    text: str
