"""
FastAPI backend for the exam practice answer engine.

This service implements:
- Answer validation for single answers and whole practice attempts
- Blank normalization and blank configuration checks
- Import preparation for question versions
- Structured logging and consistent error responses
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from epq.answer import Diagnostic
from epq.blanks import BlankConfigurationReport, NormalizationResult

from .core import (
    settings,
    setup_logging,
    get_context_logger,
    register_error_handlers,
)
from .models import AnswerCheck, AnswerSubmission, PreparedQuestion, QuestionImport
from .services import (
    GradingService,
    QuestionImportService,
    get_grading_service,
    get_import_service,
)

# Setup logging
setup_logging()
logger = get_context_logger(__name__)


# Lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(
        "Starting answer engine API",
        extra_data={
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG
        }
    )
    yield
    logger.info("Shutting down answer engine API")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="REST API for exam practice answer validation and blank normalization",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

# Register error handlers
register_error_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

router = APIRouter(prefix=settings.API_PREFIX)


# Dependency injection
def get_grading_service_dep() -> GradingService:
    """Get grading service instance"""
    return get_grading_service(settings)


def get_import_service_dep() -> QuestionImportService:
    """Get import service instance"""
    return get_import_service(settings)


# API Request/Response Models
class ValidateAnswerRequest(AnswerSubmission):
    """Request to validate one answer"""
    include_diagnostics: bool = Field(False, description="Return grading diagnostics")


class ValidateAnswerResponse(BaseModel):
    """Answer validation response"""
    question_id: Optional[str] = None
    question_type: str
    correct: bool
    reason: str
    diagnostics: Optional[List[Diagnostic]] = None

    @classmethod
    def from_domain(cls, check: AnswerCheck, include_diagnostics: bool = False) -> "ValidateAnswerResponse":
        """Convert domain model to response"""
        return cls(
            question_id=check.question_id,
            question_type=check.question_type,
            correct=check.correct,
            reason=check.reason,
            diagnostics=check.diagnostics if include_diagnostics else None,
        )


class ValidateBatchRequest(BaseModel):
    """Request to validate every answer of a practice attempt"""
    submissions: List[AnswerSubmission] = Field(..., description="One entry per question")
    include_diagnostics: bool = False


class ValidateBatchResponse(BaseModel):
    """Batch validation response"""
    score: float
    total: int
    correct_count: int
    results: List[ValidateAnswerResponse]


class NormalizeRequest(BaseModel):
    """Request to normalize blank notation"""
    question_text: str = Field(..., description="Question text with blanks in any notation")


class NormalizeResponse(BaseModel):
    """Blank normalization response"""
    normalized_text: str
    blank_positions: List[int]
    original_format: str
    blank_count: int

    @classmethod
    def from_domain(cls, result: NormalizationResult) -> "NormalizeResponse":
        """Convert domain model to response"""
        return cls(
            normalized_text=result.normalized_text,
            blank_positions=result.blank_positions,
            original_format=result.original_format.value,
            blank_count=result.blank_count,
        )


class BlankConfigurationRequest(BaseModel):
    """Request to check blank configuration"""
    question_text: str
    blanks: List[Dict[str, Any]] = Field(default_factory=list)


class PrepareImportRequest(BaseModel):
    """Request to prepare question versions for import"""
    questions: List[QuestionImport]


class PrepareImportResponse(BaseModel):
    """Import preparation response"""
    questions: List[PreparedQuestion]
    mismatched: List[int]
    duplicates: List[int]


# API Routes

@app.get("/")
async def read_root():
    """API root endpoint"""
    prefix = settings.API_PREFIX
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "validate": f"{prefix}/answers/validate",
            "validate_batch": f"{prefix}/answers/validate-batch",
            "normalize": f"{prefix}/blanks/normalize",
            "validate_configuration": f"{prefix}/blanks/validate-configuration",
            "prepare_import": f"{prefix}/questions/prepare-import",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@router.post("/answers/validate", response_model=ValidateAnswerResponse, response_model_exclude_none=True)
async def validate_answer(
    request: ValidateAnswerRequest,
    service: GradingService = Depends(get_grading_service_dep)
):
    """
    Validate one submitted answer.

    Args:
        request: Answer, correct answer, question type and options

    Returns:
        Whether the answer is correct and which comparison decided it
    """
    logger.info(
        "Validating answer",
        extra_data={
            "question_id": request.question_id,
            "question_type": request.question_type,
        }
    )

    check = await service.grade_answer(request)
    return ValidateAnswerResponse.from_domain(check, request.include_diagnostics)


@router.post("/answers/validate-batch", response_model=ValidateBatchResponse, response_model_exclude_none=True)
async def validate_batch(
    request: ValidateBatchRequest,
    service: GradingService = Depends(get_grading_service_dep)
):
    """Validate every answer of a practice attempt and score it"""
    result = await service.grade_attempt(request.submissions)

    return ValidateBatchResponse(
        score=result.score,
        total=result.total,
        correct_count=result.correct_count,
        results=[
            ValidateAnswerResponse.from_domain(check, request.include_diagnostics)
            for check in result.results
        ],
    )


@router.post("/blanks/normalize", response_model=NormalizeResponse)
async def normalize_blanks(
    request: NormalizeRequest,
    service: QuestionImportService = Depends(get_import_service_dep)
):
    """Rewrite every blank notation in a question text to ___"""
    result = await service.normalize_text(request.question_text)
    return NormalizeResponse.from_domain(result)


@router.post("/blanks/validate-configuration", response_model=BlankConfigurationReport)
async def validate_blank_configuration(
    request: BlankConfigurationRequest,
    service: QuestionImportService = Depends(get_import_service_dep)
):
    """Check configured blanks against the blanks in a question text"""
    return await service.check_configuration(request.question_text, request.blanks)


@router.post("/questions/prepare-import", response_model=PrepareImportResponse)
async def prepare_import(
    request: PrepareImportRequest,
    service: QuestionImportService = Depends(get_import_service_dep)
):
    """
    Prepare question versions for import.

    Normalizes blanks, reports blank configuration mismatches and flags
    repeated question text. Strict mode rejects batches with mismatches.
    """
    prepared = await service.prepare_questions(request.questions)

    return PrepareImportResponse(
        questions=prepared,
        mismatched=[
            i for i, p in enumerate(prepared)
            if p.blank_report is not None and not p.blank_report.is_valid
        ],
        duplicates=[i for i, p in enumerate(prepared) if p.duplicate_of is not None],
    )


app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "epq_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
