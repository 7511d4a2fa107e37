"""
Assessment API Models
"""
from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional


class AssessmentRequest(BaseModel):
    """Questionnaire answers for one assessment session."""
    patient_id: str = Field(default="ANONYMOUS")
    answers: Dict[str, Any] = Field(default_factory=dict, description="Flat question key -> answer mapping")


class RecommendationResponse(BaseModel):
    condition: str
    message: str
    priority: str


class SpecialistResponse(BaseModel):
    specialization: str
    reason: str
    priority: str
    riskScore: float


class AssessmentResponse(BaseModel):
    """Scored assessment."""
    assessment_id: str
    patient_id: str
    timestamp: str
    scores: Dict[str, int]
    levels: Dict[str, str]
    confidence: str
    individual_confidence: Dict[str, str]
    advice: Dict[str, str]
    recommendations: List[RecommendationResponse] = []
    specialists: List[SpecialistResponse] = []
    dropped_fields: List[str] = []


class SpecialistRequest(BaseModel):
    """Stored condition scores to map onto specialist types."""
    scores: Dict[str, float] = Field(default_factory=dict)


class SpecialistListResponse(BaseModel):
    specialists: List[SpecialistResponse] = []


class RiskLevelResponse(BaseModel):
    condition: str
    score: float
    level: str
    advice: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str
    components: Dict[str, str]


class ErrorResponse(BaseModel):
    detail: Any
    errors: Optional[List[Dict[str, str]]] = None
