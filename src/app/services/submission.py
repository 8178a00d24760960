"""Submission pipeline: participant, then submission, then its response rows.

The three inserts are dependent (each needs the id of the previous row) and
run one after another on the same session. They are committed together, so a
failure in a later step rolls back the earlier ones instead of leaving an
orphaned participant behind.
"""
# app/services/submission.py
from contextlib import contextmanager
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.app.core.errors import StoreError
from src.app.core.logging import get_logs_writer_logger
from src.app.schemas.submission import (
    ParticipantIn,
    RankingSubmissionIn,
    SubmissionData,
    SubmissionIn,
)
from src.db.models import CompletionStatus, Participant, RankingResponse, Response, Submission

logger = get_logs_writer_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def store_step(db: Session, message: str):
    """Turn a store failure inside the block into a `StoreError` after rolling back."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s: %s", message, e)
        raise StoreError(message, e) from e


def _create_submission(db: Session, participant_in: ParticipantIn, survey_version: str) -> tuple[Participant, Submission]:
    participant = Participant(id=str(uuid4()), **participant_in.model_dump())
    with store_step(db, "Failed to create participant"):
        db.add(participant)
        db.flush()

    submission = Submission(
        id=str(uuid4()),
        participant_id=participant.id,
        survey_version=survey_version,
        completion_status=CompletionStatus.completed,
        submitted_at=utcnow(),
    )
    with store_step(db, "Failed to create submission"):
        db.add(submission)
        db.flush()
    return participant, submission


def submit_survey(db: Session, payload: SubmissionIn) -> SubmissionData:
    """Store a validated icon survey submission.

    Args:
        db: The DB session.
        payload: Participant demographics, 1 to 20 role/icon responses and the
            survey version.

    Returns:
        SubmissionData: The new participant and submission ids and the number
        of stored responses.

    Errors:
        StoreError: Any insert or the final commit failed.
    """
    participant, submission = _create_submission(db, payload.participant, payload.survey_version)

    with store_step(db, "Failed to create responses"):
        db.add_all([
            Response(id=str(uuid4()), submission_id=submission.id, **response.model_dump())
            for response in payload.responses
        ])
        db.flush()

    with store_step(db, "Failed to submit survey"):
        db.commit()

    logger.info(
        "Survey submitted: participant=%s submission=%s responses=%d version=%s",
        participant.id, submission.id, len(payload.responses), payload.survey_version,
    )
    return SubmissionData(
        participant_id=participant.id,
        submission_id=submission.id,
        responses_count=len(payload.responses),
    )


def submit_ranking(db: Session, payload: RankingSubmissionIn) -> SubmissionData:
    """Store a tie-breaker submission; same steps as `submit_survey` with ranking rows."""
    participant, submission = _create_submission(db, payload.participant, payload.survey_version)

    with store_step(db, "Failed to create ranking responses"):
        db.add_all([
            RankingResponse(id=str(uuid4()), submission_id=submission.id, **entry.model_dump())
            for entry in payload.rankings
        ])
        db.flush()

    with store_step(db, "Failed to submit ranking survey"):
        db.commit()

    logger.info(
        "Ranking submitted: participant=%s submission=%s rows=%d",
        participant.id, submission.id, len(payload.rankings),
    )
    return SubmissionData(
        participant_id=participant.id,
        submission_id=submission.id,
        responses_count=len(payload.rankings),
    )
