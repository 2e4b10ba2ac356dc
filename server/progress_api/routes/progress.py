"""Progress report API routes."""
import logging
from datetime import datetime, timezone
from typing import List, Sequence

from fastapi import APIRouter, Depends, HTTPException

from progress_engine import (
    ProgressReportError,
    ReportOptions,
    SurveyEntry,
    build_report,
    compute_aggregates,
    normalize,
)

from ..config import get_settings
from ..database import HistoryStore, get_history_store
from ..models.history import CheckIn, CheckInRecord
from ..models.report import GenerateReportRequest, ProgressReportResponse
from ..services.narrative import NarrativeGenerator, get_narrative_generator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/progress", tags=["Progress Reports"])


def get_report_options() -> ReportOptions:
    """Engine options from settings; overridable in tests."""
    return get_settings().report_options()


def make_report_id(user_id: str, generated_at: datetime) -> str:
    """Report id in the form report_YYYYMMDDHHMMSS_<userId>."""
    return f"report_{generated_at:%Y%m%d%H%M%S}_{user_id}"


def _unprocessable(error: ProgressReportError) -> HTTPException:
    return HTTPException(status_code=422, detail=error.to_dict())


async def _generate(
    user_id: str,
    history: Sequence[dict],
    options: ReportOptions,
    narrator: NarrativeGenerator,
) -> ProgressReportResponse:
    try:
        aggregates = compute_aggregates(history, options)
    except ProgressReportError as e:
        logger.info(f"[REPORT] Rejected report for {user_id}: {e.kind}: {e.message}")
        raise _unprocessable(e)

    narrative = await narrator.summarize(aggregates)
    generated_at = datetime.now(timezone.utc)
    report = build_report(
        user_id,
        aggregates,
        report_id=make_report_id(user_id, generated_at),
        generated_at=generated_at,
        narrative=narrative,
    )
    return ProgressReportResponse.model_validate(report.to_dict())


@router.post(
    "/report",
    response_model=ProgressReportResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def generate_report(
    request: GenerateReportRequest,
    options: ReportOptions = Depends(get_report_options),
    narrator: NarrativeGenerator = Depends(get_narrative_generator),
):
    """
    Generate a progress report from an explicit check-in history.

    Returns daily, weekly and monthly chart data for the most recent
    periods with entries. Invalid entries are rejected with 422 naming the
    entry index and field.
    """
    history = [item.model_dump() for item in request.history]
    return await _generate(request.user_id, history, options, narrator)


@router.post(
    "/{user_id}/history",
    response_model=CheckInRecord,
    response_model_by_alias=True,
    status_code=201,
)
async def append_check_in(
    user_id: str,
    check_in: CheckIn,
    store: HistoryStore = Depends(get_history_store),
):
    """Validate and store one check-in for ``user_id``."""
    try:
        normalize(SurveyEntry.from_dict(check_in.model_dump()))
    except ProgressReportError as e:
        raise _unprocessable(e)

    return store.append(user_id, check_in.timestamp, check_in.indicators)


@router.get(
    "/{user_id}/history",
    response_model=List[CheckInRecord],
    response_model_by_alias=True,
)
async def get_history(
    user_id: str,
    store: HistoryStore = Depends(get_history_store),
):
    """Stored check-ins for ``user_id``, oldest first."""
    return store.query(user_id)


@router.get(
    "/{user_id}/report",
    response_model=ProgressReportResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def get_stored_report(
    user_id: str,
    store: HistoryStore = Depends(get_history_store),
    options: ReportOptions = Depends(get_report_options),
    narrator: NarrativeGenerator = Depends(get_narrative_generator),
):
    """
    Generate a progress report from the stored history.

    A user with no stored check-ins gets 422 ``EmptyHistory`` so the UI can
    show its "not enough data" state.
    """
    history = [{"timestamp": r["timestamp"], "indicators": r["indicators"]} for r in store.query(user_id)]
    return await _generate(user_id, history, options, narrator)
