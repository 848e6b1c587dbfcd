import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from fitcheck.api.v1.router import router as api_v1_router
from fitcheck.core.config import settings as app_settings
from fitcheck.core.exceptions import (
    AICreditsExhaustedError,
    AIGatewayError,
    AIRateLimitError,
    CompareLimitError,
    ConfirmationRequiredError,
    DisqualificationNotFoundError,
    EngagementTypeNotFoundError,
    EnrichmentError,
    InvalidRequestError,
    ModelNotTrainedError,
    ProspectNotFoundError,
    RuleNotFoundError,
    ScoringDisabledError,
    SignalNotFoundError,
    TrainingDataError,
)
from fitcheck.core.rate_limit import limiter

# Configure logging
logging.basicConfig(level=app_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="FitCheck Lead Scoring",
    description="Rule, engagement, intent, negative and predictive lead scoring with AI-assisted ICP fit analysis",
    version="0.1.0",
)

# Attach rate limiter state so slowapi middleware can find it
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware, restricted to configured origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in app_settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router)


@app.exception_handler(RuleNotFoundError)
async def rule_not_found_handler(request: Request, exc: RuleNotFoundError):
    logger.warning("Rule not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "rule_not_found"},
    )


@app.exception_handler(EngagementTypeNotFoundError)
async def engagement_type_not_found_handler(
    request: Request, exc: EngagementTypeNotFoundError
):
    logger.warning("Engagement type not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "engagement_type_not_found"},
    )


@app.exception_handler(SignalNotFoundError)
async def signal_not_found_handler(request: Request, exc: SignalNotFoundError):
    logger.warning("Signal not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "signal_not_found"},
    )


@app.exception_handler(DisqualificationNotFoundError)
async def disqualification_not_found_handler(
    request: Request, exc: DisqualificationNotFoundError
):
    logger.warning("Disqualification not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "disqualification_not_found"},
    )


@app.exception_handler(ProspectNotFoundError)
async def prospect_not_found_handler(request: Request, exc: ProspectNotFoundError):
    logger.warning("Prospect not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "prospect_not_found"},
    )


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    logger.warning("Invalid request: %s %s", exc.detail, exc.errors)
    content = {"detail": exc.detail, "type": "invalid_request"}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(ConfirmationRequiredError)
async def confirmation_required_handler(
    request: Request, exc: ConfirmationRequiredError
):
    logger.info("Confirmation required: %s", exc.detail)
    return JSONResponse(
        status_code=409,
        content={"detail": exc.detail, "type": "confirmation_required"},
    )


@app.exception_handler(CompareLimitError)
async def compare_limit_handler(request: Request, exc: CompareLimitError):
    return JSONResponse(
        status_code=400,
        content={"detail": exc.detail, "type": "compare_limit"},
    )


@app.exception_handler(ScoringDisabledError)
async def scoring_disabled_handler(request: Request, exc: ScoringDisabledError):
    logger.info("Scoring disabled: %s", exc.detail)
    return JSONResponse(
        status_code=400,
        content={"detail": exc.detail, "type": "scoring_disabled"},
    )


@app.exception_handler(ModelNotTrainedError)
async def model_not_trained_handler(request: Request, exc: ModelNotTrainedError):
    logger.info("Model not trained: %s", exc.detail)
    return JSONResponse(
        status_code=400,
        content={"detail": exc.detail, "type": "model_not_trained"},
    )


@app.exception_handler(TrainingDataError)
async def training_data_handler(request: Request, exc: TrainingDataError):
    logger.warning("Training data missing: %s", exc.detail)
    return JSONResponse(
        status_code=400,
        content={"detail": exc.detail, "type": "training_data_missing"},
    )


@app.exception_handler(EnrichmentError)
async def enrichment_error_handler(request: Request, exc: EnrichmentError):
    logger.error("Enrichment failed: %s", exc.detail)
    return JSONResponse(
        status_code=502,
        content={"detail": exc.detail, "type": "enrichment_failed"},
    )


@app.exception_handler(AIGatewayError)
async def ai_gateway_error_handler(request: Request, exc: AIGatewayError):
    """Map gateway failures onto the status the gateway itself reported."""
    if isinstance(exc, AIRateLimitError):
        status_code, error_type = 429, "ai_rate_limited"
    elif isinstance(exc, AICreditsExhaustedError):
        status_code, error_type = 402, "ai_credits_exhausted"
    else:
        status_code, error_type = 502, "ai_gateway_error"
    logger.error("AI gateway error: %s", exc.detail)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.detail, "type": error_type},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Request validation error: %s", exc.errors())
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "errors": jsonable_encoder(exc.errors()),
            "type": "validation_error",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected/unhandled exceptions.

    Returns a generic 500 response so that raw stack traces are never
    leaked to the client.
    """
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected internal error occurred. Please try again later.",
            "type": "internal_server_error",
        },
    )
