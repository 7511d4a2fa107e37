"""
Scoring Module

Computes diabetes, hypertension, cardiovascular, dyslipidemia and thyroid
risk from questionnaire answers.
"""
from .answers import AnswerRecord
from .conditions import (
    Confidence, ConditionScore,
    score_diabetes, score_hypertension, score_cvd, score_dyslipidemia, score_thyroid,
)
from .recommendations import Recommendation, SpecialistReferral, recommend_specialists
from .risk_engine import RiskAssessment, RiskEngine, aggregate
from .thresholds import Condition, RiskLevel, classify_risk

__all__ = [
    "AnswerRecord",
    "Condition",
    "Confidence",
    "ConditionScore",
    "Recommendation",
    "RiskAssessment",
    "RiskEngine",
    "RiskLevel",
    "SpecialistReferral",
    "aggregate",
    "classify_risk",
    "recommend_specialists",
    "score_cvd",
    "score_diabetes",
    "score_dyslipidemia",
    "score_hypertension",
    "score_thyroid",
]
