"""
Condition Scorers

One point-accumulation scorer per condition. Each scorer is a pure
function of an ``AnswerRecord`` (or a raw answer mapping) and returns a
``ConditionScore`` holding the clamped integer score and a confidence
level reflecting how complete the relevant answers were.

Every factor only ever adds points, so raising any single risk factor
never lowers a score.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional
import numpy as np

from .answers import AnswerRecord, FamilyHistory, Gender, Intensity, WaistBand, coerce_answers
from .thresholds import BMI_OBESE, BMI_OVERWEIGHT, LEVEL_CUTOFFS, Condition


class Confidence(str, Enum):
    """How complete the answers behind a score were."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]

    @classmethod
    def lowest(cls, *levels: "Confidence") -> "Confidence":
        """Most conservative of the given levels (``low`` if none given)."""
        if not levels:
            return cls.LOW
        return min(levels, key=lambda level: level.rank)


_CONFIDENCE_RANK = {Confidence.LOW: 0, Confidence.MODERATE: 1, Confidence.HIGH: 2}


@dataclass(frozen=True)
class ConditionScore:
    """Score and confidence for a single condition."""
    condition: Condition
    score: int
    confidence: Confidence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition.value,
            "score": self.score,
            "confidence": self.confidence.value,
        }


def _clamp(condition: Condition, points: float) -> int:
    return int(np.clip(points, 0, LEVEL_CUTOFFS[condition].max_score))


def _completeness(required: tuple, secondary: tuple) -> Confidence:
    """``low`` if any required answer is missing, ``moderate`` if any secondary one is."""
    if any(value is None for value in required):
        return Confidence.LOW
    if any(value is None for value in secondary):
        return Confidence.MODERATE
    return Confidence.HIGH


def _bmi_points(bmi: Optional[float], obese: int, overweight: int) -> int:
    if bmi is None:
        return 0
    if bmi >= BMI_OBESE:
        return obese
    if bmi >= BMI_OVERWEIGHT:
        return overweight
    return 0


def _intensity_points(value: Optional[Intensity], high: int, moderate: int) -> int:
    if value == Intensity.HIGH:
        return high
    if value == Intensity.MODERATE:
        return moderate
    return 0


def _inactivity_points(value: Optional[Intensity], low: int, moderate: int) -> int:
    """Physical activity is scored inversely: low activity carries the penalty."""
    if value == Intensity.LOW:
        return low
    if value == Intensity.MODERATE:
        return moderate
    return 0


def score_diabetes(answers: Any) -> ConditionScore:
    """
    Diabetes risk on a 0-100 scale.

    Age, waist, activity and family history follow the Indian Diabetes
    Risk Score point values; BMI and diet add South-Asian lifestyle
    factors on top. Confidence drops to ``low`` without BMI or waist, and
    to ``moderate`` when fewer than two symptom flags are set.
    """
    a = coerce_answers(answers)
    points = 0

    if a.age is not None:
        if a.age >= 50:
            points += 30
        elif a.age >= 35:
            points += 20

    if a.waist_band == WaistBand.WELL_OVER:
        points += 20
    elif a.waist_band == WaistBand.OVER:
        points += 10

    points += _inactivity_points(a.physical_activity, low=20, moderate=10)

    if a.family_diabetes == FamilyHistory.BOTH:
        points += 20
    elif a.family_diabetes == FamilyHistory.ONE:
        points += 10

    points += _bmi_points(a.bmi, obese=10, overweight=5)

    if a.diet_sugar == Intensity.HIGH:
        points += 5
    if a.diet_vegetables == Intensity.LOW:
        points += 5

    symptoms_set = sum(
        1 for flag in (a.symptom_thirst, a.symptom_urination, a.symptom_fatigue)
        if flag
    )
    if a.bmi is None or a.waist_band is None:
        confidence = Confidence.LOW
    elif symptoms_set <= 1:
        confidence = Confidence.MODERATE
    else:
        confidence = Confidence.HIGH

    return ConditionScore(Condition.DIABETES, _clamp(Condition.DIABETES, points), confidence)


def score_hypertension(answers: Any) -> ConditionScore:
    """Hypertension risk on a 0-15 scale."""
    a = coerce_answers(answers)
    points = 0

    if a.age is not None:
        if a.age >= 55:
            points += 3
        elif a.age >= 45:
            points += 2
        elif a.age >= 35:
            points += 1

    points += _bmi_points(a.bmi, obese=3, overweight=2)
    if a.family_hypertension:
        points += 2
    points += _intensity_points(a.diet_salt, high=2, moderate=1)
    points += _intensity_points(a.stress_level, high=2, moderate=1)
    points += _inactivity_points(a.physical_activity, low=2, moderate=1)
    if a.tobacco_use:
        points += 1
    if a.frequent_alcohol:
        points += 1

    confidence = _completeness(
        required=(a.age, a.bmi),
        secondary=(a.diet_salt, a.stress_level),
    )
    return ConditionScore(Condition.HYPERTENSION, _clamp(Condition.HYPERTENSION, points), confidence)


def score_cvd(answers: Any) -> ConditionScore:
    """Cardiovascular disease risk on a 0-20 scale."""
    a = coerce_answers(answers)
    points = 0

    if a.age is not None:
        if a.age >= 55:
            points += 5
        elif a.age >= 45:
            points += 4
        elif a.age >= 35:
            points += 2
        if a.gender == Gender.MALE and a.age >= 45:
            points += 2

    if a.tobacco_use:
        points += 4
    if a.family_heart:
        points += 3
    points += _bmi_points(a.bmi, obese=3, overweight=2)
    points += _inactivity_points(a.physical_activity, low=2, moderate=1)
    if a.stress_level == Intensity.HIGH:
        points += 1

    if a.waist_over_cutoff:
        points += 2
    if a.history_diabetes:
        points += 2
    if a.history_bp:
        points += 2

    confidence = _completeness(
        required=(a.age, a.bmi),
        secondary=(a.tobacco_use, a.family_heart),
    )
    return ConditionScore(Condition.CVD, _clamp(Condition.CVD, points), confidence)


def score_dyslipidemia(answers: Any) -> ConditionScore:
    """Dyslipidemia risk on a 0-15 scale."""
    a = coerce_answers(answers)
    points = 0

    if a.age is not None:
        if a.age >= 45:
            points += 3
        elif a.age >= 35:
            points += 2

    points += _bmi_points(a.bmi, obese=4, overweight=3)
    points += _intensity_points(a.diet_fried, high=3, moderate=2)
    points += _inactivity_points(a.physical_activity, low=2, moderate=1)
    if a.family_cholesterol:
        points += 2
    if a.waist_over_cutoff:
        points += 1
    if a.history_diabetes:
        points += 2
    if a.frequent_alcohol:
        points += 1

    confidence = _completeness(
        required=(a.age, a.bmi),
        secondary=(a.diet_fried, a.physical_activity),
    )
    return ConditionScore(Condition.DYSLIPIDEMIA, _clamp(Condition.DYSLIPIDEMIA, points), confidence)


def score_thyroid(answers: Any) -> ConditionScore:
    """Thyroid dysfunction risk on a 0-20 scale."""
    a = coerce_answers(answers)
    points = 0

    if a.thyroid_symptoms:
        points += 4
    if a.family_thyroid:
        points += 4
    if a.gender == Gender.FEMALE:
        points += 2
    if a.history_autoimmune:
        points += 3
    if a.neck_swelling:
        points += 3

    confidence = _completeness(
        required=(a.thyroid_symptoms, a.family_thyroid),
        secondary=(a.gender, a.neck_swelling),
    )
    return ConditionScore(Condition.THYROID, _clamp(Condition.THYROID, points), confidence)


SCORERS: Mapping[Condition, Callable[[AnswerRecord], ConditionScore]] = MappingProxyType({
    Condition.DIABETES: score_diabetes,
    Condition.HYPERTENSION: score_hypertension,
    Condition.CVD: score_cvd,
    Condition.DYSLIPIDEMIA: score_dyslipidemia,
    Condition.THYROID: score_thyroid,
})
