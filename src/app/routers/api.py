"""REST API endpoints for survey submissions and aggregate results.

Provides:
- health check;
- survey submission (icon assignments) and tie-breaker ranking submission;
- statistics, top icons per role, demographics and ranking analytics.

The router is mounted both at the root and under `/api`.
"""
# app/routers/api.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.app.core.config import settings
from src.app.schemas.results import (
    DemographicsOut,
    RankingAnalyticsOut,
    StatsOut,
    TopIconsOut,
)
from src.app.schemas.submission import RankingSubmissionIn, SubmissionIn, SubmissionOut
from src.app.services import analytics
from src.app.services.submission import submit_ranking, submit_survey
from src.credit.catalog import ICON_SET
from src.db.session import get_db

router = APIRouter(tags=["survey"])


@router.get("/health")
async def health():
    return {
        "success": True,
        "message": "Survey API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/survey/submit", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
async def submit(payload: SubmissionIn, db: Session = Depends(get_db)):
    """Store one completed icon survey.

    Args:
        payload: Participant demographics, 1 to 20 role/icon responses and an
            optional survey version.
        db: The DB session.

    Returns:
        SubmissionOut: Ids of the created participant and submission.

    Errors:
        400: Validation failed, or a row referenced a missing record.
        500: The store rejected an insert.
    """
    data = submit_survey(db, payload)
    return SubmissionOut(data=data)


@router.post("/survey/ranking/submit", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
async def submit_tie_breaker(payload: RankingSubmissionIn, db: Session = Depends(get_db)):
    """Store one tie-breaker ranking survey; errors as for `/survey/submit`."""
    data = submit_ranking(db, payload)
    return SubmissionOut(message="Ranking survey submitted successfully", data=data)


@router.get("/survey/stats", response_model=StatsOut)
async def stats(db: Session = Depends(get_db)):
    return StatsOut(data=analytics.survey_stats(db))


@router.get("/survey/results/top-icons", response_model=TopIconsOut)
async def top_icons(
    limit: int = Query(settings.RESULTS_TOP_N, ge=1, le=len(ICON_SET)),
    db: Session = Depends(get_db),
):
    """Most selected icons for each role, grouped by role title."""
    return TopIconsOut(data=analytics.get_top_icons(db, limit=limit))


@router.get("/survey/results/demographics", response_model=DemographicsOut)
async def demographics(db: Session = Depends(get_db)):
    return DemographicsOut(data=analytics.get_demographics_summary(db))


@router.get("/survey/results/ranking", response_model=RankingAnalyticsOut)
async def ranking_analytics(db: Session = Depends(get_db)):
    """Tie-breaker scores per role (4 points for a first place down to 1 for a fourth)."""
    return RankingAnalyticsOut(data=analytics.get_ranking_analytics(db))
