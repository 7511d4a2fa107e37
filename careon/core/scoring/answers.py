"""
Answer Record

Typed view over a questionnaire answer mapping.

Raw answers arrive as a flat JSON object whose values may be numbers,
numeric strings, enum strings or booleans. ``AnswerRecord.from_dict``
normalises them with parse-with-default semantics: anything missing,
malformed or unrecognised becomes ``None`` and is treated by the scorers
as the lowest-risk contribution.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
import math
from typing import Any, Dict, Mapping, Optional, TypeVar

from .thresholds import WAIST_CUTOFF_CM, WAIST_WELL_OVER_MARGIN_CM

E = TypeVar("E", bound=Enum)


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Intensity(str, Enum):
    """Three-step scale shared by activity, diet and stress answers."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class FamilyHistory(str, Enum):
    NONE = "none"
    ONE = "one"
    BOTH = "both"


class AlcoholUse(str, Enum):
    NONE = "none"
    OCCASIONAL = "occasional"
    FREQUENT = "frequent"


class WaistBand(str, Enum):
    """Waist circumference relative to the gender-specific cutoff."""
    NORMAL = "normal"
    OVER = "over"
    WELL_OVER = "well_over"


_TRUE_STRINGS = {"yes", "y", "true", "1", "one", "both"}
_FALSE_STRINGS = {"no", "n", "false", "0", "none"}

_ACTIVITY_ALIASES = {
    "low": Intensity.LOW,
    "sedentary": Intensity.LOW,
    "mild": Intensity.LOW,
    "moderate": Intensity.MODERATE,
    "medium": Intensity.MODERATE,
    "high": Intensity.HIGH,
    "vigorous": Intensity.HIGH,
}

_INTENSITY_ALIASES = {
    "low": Intensity.LOW,
    "moderate": Intensity.MODERATE,
    "medium": Intensity.MODERATE,
    "normal": Intensity.MODERATE,
    "high": Intensity.HIGH,
}

# Legacy single "diet" question maps onto fried/junk food intake.
_DIET_ALIASES = {
    "healthy": Intensity.LOW,
    "low": Intensity.LOW,
    "moderate": Intensity.MODERATE,
    "high_fat": Intensity.HIGH,
    "high-junk": Intensity.HIGH,
    "high": Intensity.HIGH,
}

_FAMILY_ALIASES = {
    "none": FamilyHistory.NONE,
    "no": FamilyHistory.NONE,
    "one": FamilyHistory.ONE,
    "yes": FamilyHistory.ONE,
    "both": FamilyHistory.BOTH,
}

_ALCOHOL_ALIASES = {
    "none": AlcoholUse.NONE,
    "no": AlcoholUse.NONE,
    "rarely": AlcoholUse.NONE,
    "occasional": AlcoholUse.OCCASIONAL,
    "frequent": AlcoholUse.FREQUENT,
    "weekly": AlcoholUse.FREQUENT,
    ">3/week": AlcoholUse.FREQUENT,
}

_WAIST_BAND_ALIASES = {
    "low": WaistBand.NORMAL,
    "normal": WaistBand.NORMAL,
    "medium": WaistBand.OVER,
    "moderate": WaistBand.OVER,
    "high": WaistBand.WELL_OVER,
}


def parse_number(value: Any) -> Optional[float]:
    """Parse a finite number, returning None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_positive(value: Any) -> Optional[float]:
    """Parse a strictly positive number; zero and negatives count as missing."""
    number = parse_number(value)
    if number is None or number <= 0:
        return None
    return number


def parse_age(value: Any) -> Optional[int]:
    """Whole years; anything under one year counts as missing."""
    number = parse_number(value)
    if number is None or number < 1:
        return None
    return int(number)


def parse_flag(value: Any) -> Optional[bool]:
    """Parse a yes/no style answer."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value in (0, 1):
            return bool(value)
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def parse_choice(value: Any, aliases: Mapping[str, E]) -> Optional[E]:
    """Map an enum-like answer through an alias table."""
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return None
    return aliases.get(value.strip().lower())


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key that is present and non-empty."""
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def waist_band_for(waist_cm: float, gender: Optional[Gender]) -> WaistBand:
    """Bucket a waist measurement against the South-Asian cutoff."""
    cutoff = WAIST_CUTOFF_CM[(gender or Gender.MALE).value]
    if waist_cm > cutoff + WAIST_WELL_OVER_MARGIN_CM:
        return WaistBand.WELL_OVER
    if waist_cm > cutoff:
        return WaistBand.OVER
    return WaistBand.NORMAL


def bmi_from_measurements(height_cm: Optional[float], weight_kg: Optional[float]) -> Optional[float]:
    """BMI rounded to one decimal, or None if either measurement is missing."""
    if not height_cm or not weight_kg:
        return None
    metres = height_cm / 100.0
    return round(weight_kg / (metres * metres), 1)


@dataclass(frozen=True)
class AnswerRecord:
    """Normalised questionnaire answers. ``None`` means not answered."""
    age: Optional[int] = None
    gender: Optional[Gender] = None
    bmi: Optional[float] = None
    waist_cm: Optional[float] = None
    waist_band: Optional[WaistBand] = None

    physical_activity: Optional[Intensity] = None
    diet_salt: Optional[Intensity] = None
    diet_sugar: Optional[Intensity] = None
    diet_fried: Optional[Intensity] = None
    diet_vegetables: Optional[Intensity] = None
    stress_level: Optional[Intensity] = None
    tobacco_use: Optional[bool] = None
    alcohol: Optional[AlcoholUse] = None

    family_diabetes: Optional[FamilyHistory] = None
    family_hypertension: Optional[bool] = None
    family_heart: Optional[bool] = None
    family_cholesterol: Optional[bool] = None
    family_thyroid: Optional[bool] = None

    symptom_thirst: Optional[bool] = None
    symptom_urination: Optional[bool] = None
    symptom_fatigue: Optional[bool] = None
    thyroid_symptoms: Optional[bool] = None
    neck_swelling: Optional[bool] = None

    history_diabetes: Optional[bool] = None
    history_bp: Optional[bool] = None
    history_autoimmune: Optional[bool] = None

    @property
    def waist_over_cutoff(self) -> bool:
        return self.waist_band in (WaistBand.OVER, WaistBand.WELL_OVER)

    @property
    def frequent_alcohol(self) -> bool:
        return self.alcohol == AlcoholUse.FREQUENT

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "AnswerRecord":
        """
        Build a record from a loose answer mapping.

        Unknown keys are ignored. Legacy key names used by older
        questionnaires (``activity``, ``salt``, ``stress``, ``tobacco``,
        ``family_bp``, ``diet``) are accepted as aliases.
        """
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise TypeError(f"answers must be a mapping, got {type(raw).__name__}")

        gender = parse_choice(_first(raw, "gender"), {"male": Gender.MALE, "female": Gender.FEMALE})

        age = parse_age(_first(raw, "age"))

        bmi = parse_positive(_first(raw, "bmi"))
        if bmi is None:
            bmi = bmi_from_measurements(
                parse_positive(_first(raw, "height")),
                parse_positive(_first(raw, "weight")),
            )

        # A measurement under either key beats a bucketed label.
        waist_cm = None
        waist_band = None
        for key in ("waist_cm", "waist"):
            value = _first(raw, key)
            if value is None:
                continue
            waist_cm = parse_positive(value)
            if waist_cm is not None:
                waist_band = waist_band_for(waist_cm, gender)
                break
            if waist_band is None:
                waist_band = parse_choice(value, _WAIST_BAND_ALIASES)

        diet_fried = parse_choice(_first(raw, "diet_fried"), _INTENSITY_ALIASES)
        if diet_fried is None:
            diet_fried = parse_choice(_first(raw, "diet"), _DIET_ALIASES)

        return cls(
            age=age,
            gender=gender,
            bmi=bmi,
            waist_cm=waist_cm,
            waist_band=waist_band,
            physical_activity=parse_choice(_first(raw, "physical_activity", "activity"), _ACTIVITY_ALIASES),
            diet_salt=parse_choice(_first(raw, "diet_salt", "salt"), _INTENSITY_ALIASES),
            diet_sugar=parse_choice(_first(raw, "diet_sugar"), _INTENSITY_ALIASES),
            diet_fried=diet_fried,
            diet_vegetables=parse_choice(_first(raw, "diet_vegetables"), _INTENSITY_ALIASES),
            stress_level=parse_choice(_first(raw, "stress_level", "stress"), _INTENSITY_ALIASES),
            tobacco_use=parse_flag(_first(raw, "tobacco_use", "tobacco")),
            alcohol=parse_choice(_first(raw, "alcohol"), _ALCOHOL_ALIASES),
            family_diabetes=_parse_family(_first(raw, "family_diabetes")),
            family_hypertension=parse_flag(_first(raw, "family_hypertension", "family_bp")),
            family_heart=parse_flag(_first(raw, "family_heart")),
            family_cholesterol=parse_flag(_first(raw, "family_cholesterol")),
            family_thyroid=parse_flag(_first(raw, "family_thyroid")),
            symptom_thirst=parse_flag(_first(raw, "symptom_thirst")),
            symptom_urination=parse_flag(_first(raw, "symptom_urination")),
            symptom_fatigue=parse_flag(_first(raw, "symptom_fatigue")),
            thyroid_symptoms=parse_flag(_first(raw, "thyroid_symptoms")),
            neck_swelling=parse_flag(_first(raw, "neck_swelling")),
            history_diabetes=parse_flag(_first(raw, "history_diabetes")),
            history_bp=parse_flag(_first(raw, "history_bp")),
            history_autoimmune=parse_flag(_first(raw, "history_autoimmune")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize answered fields only."""
        return {
            key: (value.value if isinstance(value, Enum) else value)
            for key, value in asdict(self).items()
            if value is not None
        }


def _parse_family(value: Any) -> Optional[FamilyHistory]:
    if isinstance(value, bool):
        return FamilyHistory.ONE if value else FamilyHistory.NONE
    return parse_choice(value, _FAMILY_ALIASES)


def coerce_answers(answers: Any) -> AnswerRecord:
    """Accept either an ``AnswerRecord`` or a raw mapping."""
    if isinstance(answers, AnswerRecord):
        return answers
    return AnswerRecord.from_dict(answers)
