"""
Domain exceptions.
"""
from typing import Dict, List


class CareOnError(Exception):
    """Base class for errors raised by the risk scoring service."""


class UnknownConditionError(CareOnError, ValueError):
    """Raised when a condition name has no threshold table entry."""

    def __init__(self, condition: str):
        self.condition = condition
        super().__init__(f"Unknown condition: {condition}")


class AnswerValidationError(CareOnError):
    """Raised at the service boundary when answers fail plausibility checks."""

    def __init__(self, violations: Dict[str, str]):
        self.violations = dict(violations)
        details = "; ".join(f"{k}: {v}" for k, v in self.violations.items())
        super().__init__(f"Invalid answers: {details}")

    def to_list(self) -> List[Dict[str, str]]:
        return [{"field": k, "message": v} for k, v in self.violations.items()]
