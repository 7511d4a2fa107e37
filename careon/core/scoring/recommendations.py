"""
Recommendations and Specialist Referrals

Canned, non-diagnostic follow-up messages for elevated risk levels and
the mapping from condition scores to suggested specialist types.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from .thresholds import LEVEL_CUTOFFS, Condition, RiskLevel


@dataclass(frozen=True)
class Recommendation:
    """Follow-up suggestion for one condition at Moderate or High risk."""
    condition: Condition
    message: str
    priority: str  # "urgent" for High, "moderate" for Moderate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition.value,
            "message": self.message,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class SpecialistReferral:
    """Suggested specialist type with a human-readable reason."""
    specialization: str
    reason: str
    priority: str  # "high" or "medium"
    risk_score: float  # condition score on a 0-10 scale

    def to_dict(self) -> Dict[str, Any]:
        return {
            "specialization": self.specialization,
            "reason": self.reason,
            "priority": self.priority,
            "riskScore": self.risk_score,
        }


CONDITION_MESSAGES: Mapping[Condition, str] = MappingProxyType({
    Condition.DIABETES: (
        "Consider lifestyle modifications including regular exercise and balanced diet. "
        "Consult a doctor for screening."
    ),
    Condition.HYPERTENSION: (
        "Monitor blood pressure regularly. Reduce salt intake and manage stress. "
        "Medical consultation recommended."
    ),
    Condition.CVD: (
        "Heart health assessment recommended. Focus on heart-healthy diet and regular exercise."
    ),
    Condition.DYSLIPIDEMIA: (
        "Lipid profile test recommended. Maintain healthy diet low in saturated fats."
    ),
    Condition.THYROID: (
        "Thyroid function tests recommended. Monitor symptoms and consult an endocrinologist."
    ),
})

LEVEL_ADVICE: Mapping[RiskLevel, str] = MappingProxyType({
    RiskLevel.HIGH: (
        "We recommend consulting with a healthcare professional for a comprehensive evaluation."
    ),
    RiskLevel.MODERATE: (
        "Consider discussing these results with your doctor during your next visit."
    ),
    RiskLevel.LOW: (
        "Continue maintaining healthy lifestyle habits and regular check-ups."
    ),
})

PRIORITY_BY_LEVEL: Mapping[RiskLevel, str] = MappingProxyType({
    RiskLevel.HIGH: "urgent",
    RiskLevel.MODERATE: "moderate",
})


def advice_for(level: RiskLevel) -> str:
    """General advice line for a risk level."""
    return LEVEL_ADVICE[level]


def build_recommendations(levels: Mapping[Condition, RiskLevel]) -> List[Recommendation]:
    """One recommendation per condition classified Moderate or High, in condition order."""
    recommendations = []
    for condition in Condition:
        level = levels.get(condition, RiskLevel.LOW)
        if not level.is_elevated:
            continue
        recommendations.append(Recommendation(
            condition=condition,
            message=CONDITION_MESSAGES[condition],
            priority=PRIORITY_BY_LEVEL[level],
        ))
    return recommendations


# (condition, lower bound, upper bound or None, specialization, priority, reason)
# Bounds apply to the score normalised to a 0-10 scale.
SPECIALIST_RULES: Tuple[Tuple[Condition, float, Any, str, str, str], ...] = (
    (Condition.DIABETES, 7.0, None, "Endocrinologist", "high",
     "High diabetes risk detected - Early intervention can prevent complications!"),
    (Condition.CVD, 7.0, None, "Cardiologist", "high",
     "High heart disease risk - Protect your heart with expert care!"),
    (Condition.HYPERTENSION, 7.0, None, "Cardiologist", "high",
     "High blood pressure risk - Control it before it controls you!"),
    (Condition.DIABETES, 4.0, 7.0, "General Physician", "medium",
     "Moderate diabetes risk - Prevention is better than cure!"),
    (Condition.DYSLIPIDEMIA, 7.0, None, "General Physician", "high",
     "High cholesterol risk - A lipid profile and diet review are recommended."),
    (Condition.THYROID, 7.0, None, "Endocrinologist", "high",
     "High thyroid risk - Thyroid function tests can confirm what is going on."),
)


def normalize_score(condition: Condition, score: float) -> float:
    """Rescale a condition score to 0-10, rounded to one decimal."""
    max_score = LEVEL_CUTOFFS[condition].max_score
    return round(min(max(score, 0), max_score) / max_score * 10, 1)


def _scores_mapping(scores: Any) -> Dict[Condition, float]:
    """Accept a RiskAssessment or a plain ``{condition: score}`` mapping."""
    raw = getattr(scores, "scores", scores)
    if raw is None:
        return {}

    parsed: Dict[Condition, float] = {}
    for key, value in raw.items():
        try:
            condition = key if isinstance(key, Condition) else Condition.from_string(str(key))
        except ValueError:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        parsed[condition] = float(value)
    return parsed


def recommend_specialists(scores: Any) -> List[SpecialistReferral]:
    """
    Map elevated condition scores to suggested specialist types.

    Args:
        scores: RiskAssessment or mapping of condition name to raw score.
            Missing or non-numeric entries count as zero.

    Returns:
        Referrals in rule order; a specialization may appear more than once
        when several conditions point to it.
    """
    by_condition = _scores_mapping(scores)
    referrals = []
    for condition, lower, upper, specialization, priority, reason in SPECIALIST_RULES:
        normalized = normalize_score(condition, by_condition.get(condition, 0.0))
        if normalized < lower:
            continue
        if upper is not None and normalized >= upper:
            continue
        referrals.append(SpecialistReferral(
            specialization=specialization,
            reason=reason,
            priority=priority,
            risk_score=normalized,
        ))
    return referrals
