"""API routes for log anomaly checks."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field, StrictStr, field_validator

from logsentinel.detection.detector import SemanticAnomalyDetector
from logsentinel.detection.models import AnomalyVerdict
from logsentinel.logging_config import get_logger

logger = get_logger(__name__)


router = APIRouter(tags=["Detection"])


class CheckLogRequest(BaseModel):
    """Request body for a log check."""

    log_entry: StrictStr = Field(description="Log line to check")

    @field_validator("log_entry")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        # Validate on the stripped text but keep the original for the echo
        if not value.strip():
            raise ValueError("log_entry must not be empty")
        # Lone surrogates survive JSON decoding but cannot be sent upstream
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError("log_entry must be valid UTF-8 text") from e
        return value


class AnomalyResponse(BaseModel):
    """Response from a log check."""

    is_anomalous: bool = Field(description="Whether the log is anomalous")
    score: float = Field(description="Similarity to the nearest baseline entry")
    log_entry: str = Field(description="Checked log line, echoed unchanged")


def get_detector(request: Request) -> SemanticAnomalyDetector:
    """Return the detector built during application startup."""
    detector: SemanticAnomalyDetector | None = getattr(request.app.state, "detector", None)
    if detector is None:
        logger.warning("Log check requested before the baseline was initialized")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "Baseline not initialized",
                "message": "The detector becomes available once the baseline is indexed",
            },
        )
    return detector


@router.post("/check_log", response_model=AnomalyResponse)
async def check_log_endpoint(
    body: CheckLogRequest,
    detector: SemanticAnomalyDetector = Depends(get_detector),
) -> AnomalyResponse:
    """Check a log line against the known-normal baseline.

    Upstream failures surface as LogSentinelError and are rendered by the
    application's exception handler.
    """
    verdict = await detector.check(body.log_entry)
    return verdict_to_response(verdict)


def verdict_to_response(verdict: AnomalyVerdict) -> AnomalyResponse:
    """Convert an internal AnomalyVerdict to the API response."""
    return AnomalyResponse(
        is_anomalous=verdict.is_anomalous,
        score=verdict.score,
        log_entry=verdict.log_entry,
    )
