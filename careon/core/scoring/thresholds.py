"""
Threshold Tables

South-Asian anthropometric cutoffs and per-condition risk-level cutoffs.
All tables are read-only.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from careon.errors import UnknownConditionError


class Condition(str, Enum):
    """Conditions scored by the engine, in reporting order."""
    DIABETES = "diabetes"
    HYPERTENSION = "hypertension"
    CVD = "cvd"
    DYSLIPIDEMIA = "dyslipidemia"
    THYROID = "thyroid"

    @classmethod
    def from_string(cls, name: str) -> "Condition":
        """Parse a condition name, accepting a few common aliases."""
        name_lower = name.strip().lower().replace(" ", "_").replace("-", "_")
        aliases = {
            "cardiovascular": cls.CVD,
            "cardiovascular_disease": cls.CVD,
            "heart": cls.CVD,
            "bp": cls.HYPERTENSION,
            "blood_pressure": cls.HYPERTENSION,
            "cholesterol": cls.DYSLIPIDEMIA,
            "lipids": cls.DYSLIPIDEMIA,
        }
        if name_lower in aliases:
            return aliases[name_lower]
        return cls(name_lower)


# BMI and waist cutoffs are lower than the WHO global defaults (25/30, 102/88 cm).
BMI_OVERWEIGHT = 23.0
BMI_OBESE = 27.5

WAIST_CUTOFF_CM: Mapping[str, float] = MappingProxyType({
    "male": 90.0,
    "female": 80.0,
})

# Waist more than this far above the cutoff is the top band.
WAIST_WELL_OVER_MARGIN_CM = 10.0


@dataclass(frozen=True)
class LevelCutoffs:
    """Bucket boundaries for one condition: [0, moderate_from) Low, [moderate_from, high_from) Moderate."""
    moderate_from: int
    high_from: int
    max_score: int


LEVEL_CUTOFFS: Mapping[Condition, LevelCutoffs] = MappingProxyType({
    Condition.DIABETES: LevelCutoffs(moderate_from=30, high_from=60, max_score=100),
    Condition.HYPERTENSION: LevelCutoffs(moderate_from=4, high_from=8, max_score=15),
    Condition.CVD: LevelCutoffs(moderate_from=7, high_from=14, max_score=20),
    Condition.DYSLIPIDEMIA: LevelCutoffs(moderate_from=5, high_from=10, max_score=15),
    Condition.THYROID: LevelCutoffs(moderate_from=5, high_from=10, max_score=20),
})


class RiskLevel(str, Enum):
    """Canonical risk level labels."""
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"

    @classmethod
    def from_string(cls, label: str) -> "RiskLevel":
        """Parse a level label; ``Medium`` is read as ``Moderate``."""
        text = label.strip().lower()
        if text == "medium":
            return cls.MODERATE
        for level in cls:
            if level.value.lower() == text:
                return level
        raise ValueError(f"Unknown risk level: {label}")

    @property
    def is_elevated(self) -> bool:
        return self is not RiskLevel.LOW


def classify_risk(condition, score: float) -> RiskLevel:
    """
    Classify a condition score into a risk level.

    Buckets are inclusive at the low end and exclusive at the high end:
    ``score < moderate_from`` is Low, ``score >= high_from`` is High.

    Raises:
        UnknownConditionError: if the condition has no cutoff table.
    """
    if not isinstance(condition, Condition):
        try:
            condition = Condition.from_string(str(condition))
        except ValueError:
            raise UnknownConditionError(str(condition)) from None

    cutoffs = LEVEL_CUTOFFS[condition]
    if score >= cutoffs.high_from:
        return RiskLevel.HIGH
    if score >= cutoffs.moderate_from:
        return RiskLevel.MODERATE
    return RiskLevel.LOW
