"""
Assessment Service - Boundary validation and orchestration for risk scoring
"""
import uuid
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from careon.config import Settings, settings as default_settings
from careon.core.scoring import Condition, RiskEngine
from careon.core.scoring.answers import bmi_from_measurements, parse_number, parse_positive
from careon.core.scoring.recommendations import advice_for
from careon.errors import AnswerValidationError, UnknownConditionError
from careon.utils import get_logger

logger = get_logger(__name__)

# Physiologically plausible ranges for numeric answers (inclusive).
PLAUSIBLE_RANGES: Mapping[str, Tuple[float, float]] = MappingProxyType({
    "age": (1, 120),
    "bmi": (10, 80),
    "waist": (40, 200),
    "waist_cm": (40, 200),
    "height": (50, 250),
    "weight": (10, 300),
})


class AssessmentService:
    """
    Service class wrapping the risk engine for the API layer.

    Keeps the engine itself pure: validation, logging and response
    shaping all happen here.
    """

    def __init__(self, risk_engine: Optional[RiskEngine] = None, settings: Optional[Settings] = None):
        self.risk_engine = risk_engine or RiskEngine()
        self.settings = settings or default_settings

    def validate_answers(self, answers: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
        """
        Check numeric answers against plausible ranges.

        Non-numeric values (e.g. a pre-bucketed ``waist`` of ``"high"``)
        are left for the engine to interpret. When no usable ``bmi`` is
        given, the BMI the engine would derive from ``height`` and
        ``weight`` is checked too; if it is implausible both
        measurements are dropped.

        Returns:
            Tuple of (answers with out-of-range values removed, dropped keys)

        Raises:
            AnswerValidationError: in strict mode, if any value is out of range.
        """
        violations: Dict[str, str] = {}
        dropped = set()
        for key, (low, high) in PLAUSIBLE_RANGES.items():
            if key not in answers:
                continue
            number = parse_number(answers[key])
            if number is None:
                continue
            if not low <= number <= high:
                violations[key] = f"{number:g} outside plausible range {low:g}-{high:g}"
                dropped.add(key)

        bmi_usable = "bmi" not in dropped and parse_positive(answers.get("bmi")) is not None
        if not bmi_usable and not {"height", "weight"} & dropped:
            derived = bmi_from_measurements(
                parse_positive(answers.get("height")),
                parse_positive(answers.get("weight")),
            )
            low, high = PLAUSIBLE_RANGES["bmi"]
            if derived is not None and not low <= derived <= high:
                violations["bmi"] = (
                    f"BMI {derived:g} derived from height and weight "
                    f"outside plausible range {low:g}-{high:g}"
                )
                dropped.update(("height", "weight"))

        if violations and self.settings.strict_validation:
            raise AnswerValidationError(violations)

        for key, message in violations.items():
            logger.warning(f"Dropping answer {key}: {message}")

        cleaned = {k: v for k, v in answers.items() if k not in dropped}
        return cleaned, sorted(dropped)

    def process_assessment(self, patient_id: str, answers: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Score one assessment session.

        Args:
            patient_id: ID of the patient (opaque to the engine).
            answers: Raw questionnaire answers.

        Returns:
            A dictionary matching ``AssessmentResponse``.
        """
        assessment_id = f"ASM-{uuid.uuid4().hex[:8].upper()}"
        cleaned, dropped = self.validate_answers(answers)

        assessment = self.risk_engine.assess(cleaned)
        result = assessment.to_dict()

        if self.settings.include_specialists:
            specialists = [s.to_dict() for s in self.risk_engine.specialists(assessment)]
        else:
            specialists = []

        logger.info(
            f"Assessment {assessment_id} for {patient_id}: "
            f"confidence={result['confidence']}, "
            f"elevated={[c.value for c in assessment.elevated_conditions]}"
        )

        return {
            "assessment_id": assessment_id,
            "patient_id": patient_id,
            "timestamp": datetime.now().isoformat(),
            **result,
            "specialists": specialists,
            "dropped_fields": dropped,
        }

    def specialists_for_scores(self, scores: Mapping[str, float]) -> List[Dict[str, Any]]:
        """Specialist referrals for scores read back from storage."""
        return [s.to_dict() for s in self.risk_engine.specialists(scores)]

    def describe_level(self, condition: str, score: float) -> Dict[str, Any]:
        """Risk level and advice for a single stored score."""
        try:
            parsed = Condition.from_string(condition)
        except ValueError:
            raise UnknownConditionError(condition) from None

        level = self.risk_engine.classify(parsed, score)
        return {
            "condition": parsed.value,
            "score": score,
            "level": level.value,
            "advice": advice_for(level),
        }
