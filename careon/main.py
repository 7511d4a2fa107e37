"""
CareOn Risk Scoring Service - FastAPI Application

Main application entry point with API endpoints for:
- Questionnaire risk assessment
- Specialist referral suggestions
- Risk level lookup for stored scores
"""
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from careon.config import settings
from careon.errors import AnswerValidationError, UnknownConditionError
from careon.models.assessment import (
    AssessmentRequest, AssessmentResponse, ErrorResponse, HealthResponse,
    RiskLevelResponse, SpecialistListResponse, SpecialistRequest,
)
from careon.services.assessment import AssessmentService
from careon.utils import configure_logging, get_logger

configure_logging(settings.log_level)
logger = get_logger(__name__)


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.app_name,
    description="Questionnaire-based chronic disease risk scoring",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_service = AssessmentService()


# ---- API Endpoints ----

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=datetime.now().isoformat(),
        components={
            "api": "healthy",
            "risk_engine": "ready",
        }
    )


@app.post(
    f"{settings.api_prefix}/assessments",
    response_model=AssessmentResponse,
    responses={422: {"model": ErrorResponse}},
    tags=["Assessment"],
)
async def create_assessment(request: AssessmentRequest):
    """
    Score a questionnaire answer record.

    Returns per-condition scores, levels, confidence, recommendations and
    specialist referrals.
    """
    try:
        return _service.process_assessment(request.patient_id, request.answers)
    except AnswerValidationError as e:
        logger.warning(f"Rejected assessment for {request.patient_id}: {e}")
        raise HTTPException(status_code=422, detail=e.to_list())
    except Exception as e:
        logger.error(f"Assessment failed for {request.patient_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Assessment failed: {str(e)}")


@app.post(
    f"{settings.api_prefix}/specialists",
    response_model=SpecialistListResponse,
    tags=["Assessment"],
)
async def suggest_specialists(request: SpecialistRequest):
    """Suggest specialist types for previously stored scores."""
    return SpecialistListResponse(specialists=_service.specialists_for_scores(request.scores))


@app.get(
    f"{settings.api_prefix}/risk-levels/{{condition}}",
    response_model=RiskLevelResponse,
    tags=["Assessment"],
)
async def get_risk_level(condition: str, score: float = Query(..., ge=0)):
    """Classify a single stored score."""
    try:
        return _service.describe_level(condition, score)
    except UnknownConditionError as e:
        raise HTTPException(status_code=404, detail=str(e))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("careon.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)
