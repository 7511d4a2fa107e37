"""
Risk Engine Module

Aggregates the per-condition scorers into a single assessment: scores,
risk levels, overall confidence and follow-up recommendations.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .answers import coerce_answers
from .conditions import SCORERS, Confidence
from .recommendations import (
    Recommendation, SpecialistReferral, advice_for, build_recommendations, recommend_specialists
)
from .thresholds import Condition, RiskLevel, classify_risk


@dataclass(frozen=True)
class RiskAssessment:
    """Complete result of one assessment pass."""
    scores: Dict[Condition, int]
    levels: Dict[Condition, RiskLevel]
    confidence: Confidence
    individual_confidence: Dict[Condition, Confidence]
    recommendations: List[Recommendation] = field(default_factory=list)

    @property
    def elevated_conditions(self) -> List[Condition]:
        return [c for c in Condition if self.levels[c].is_elevated]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON output contract."""
        return {
            "scores": {c.value: self.scores[c] for c in Condition},
            "levels": {c.value: self.levels[c].value for c in Condition},
            "confidence": self.confidence.value,
            "individual_confidence": {c.value: self.individual_confidence[c].value for c in Condition},
            "advice": {c.value: advice_for(self.levels[c]) for c in Condition},
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


def aggregate(answers: Any) -> RiskAssessment:
    """
    Score, classify and summarise an answer record.

    Args:
        answers: AnswerRecord or raw answer mapping. Missing and malformed
            fields never raise; they score zero and lower confidence.

    Returns:
        RiskAssessment whose overall confidence is the lowest individual one.
    """
    record = coerce_answers(answers)

    scores: Dict[Condition, int] = {}
    levels: Dict[Condition, RiskLevel] = {}
    confidences: Dict[Condition, Confidence] = {}

    for condition in Condition:
        result = SCORERS[condition](record)
        scores[condition] = result.score
        levels[condition] = classify_risk(condition, result.score)
        confidences[condition] = result.confidence

    return RiskAssessment(
        scores=scores,
        levels=levels,
        confidence=Confidence.lowest(*confidences.values()),
        individual_confidence=confidences,
        recommendations=build_recommendations(levels),
    )


class RiskEngine:
    """
    Stateless facade over the scoring functions.

    Exists so services can take the engine as an injectable collaborator.
    """

    def assess(self, answers: Any) -> RiskAssessment:
        return aggregate(answers)

    def classify(self, condition: Any, score: float) -> RiskLevel:
        return classify_risk(condition, score)

    def specialists(self, scores: Any) -> List[SpecialistReferral]:
        return recommend_specialists(scores)
