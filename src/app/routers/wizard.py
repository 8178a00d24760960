"""Wizard session endpoints.

A client creates a session once and then drives the survey through it: page
transitions, the icon board (drop, select/tap, undo, reset, submit) and the
tie-breaker ranking. Every change is persisted, so reloading a session with
`GET /wizard/sessions/{session_id}` restores where the respondent left off.
"""
# app/routers/wizard.py
import enum

from fastapi import APIRouter, Depends, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from src.app.core.errors import BoardIncompleteError
from src.app.core.logging import get_logs_writer_logger
from src.app.schemas.submission import (
    ParticipantIn,
    RankingSubmissionIn,
    SubmissionIn,
    SubmissionOut,
)
from src.app.schemas.wizard import (
    BoardOut,
    DropIn,
    RankingOut,
    RankingStepOut,
    SelectIn,
    TapIn,
    ToggleIn,
    WizardStateOut,
)
from src.app.services.drafts import load_session, new_session
from src.app.services.submission import submit_ranking, submit_survey
from src.credit.wizard import UserInfo, Wizard
from src.db.session import get_db

logger = get_logs_writer_logger()

router = APIRouter(prefix="/wizard/sessions", tags=["wizard"])


class WizardAction(str, enum.Enum):
    skip_to_results = "skip-to-results"
    take_ranking_survey = "take-ranking-survey"
    flashcards_next = "flashcards-next"
    back_to_user_info = "back-to-user-info"
    back_to_flashcards = "back-to-flashcards"
    see_results = "see-results"
    see_example = "see-example"
    back_to_completion = "back-to-completion"
    leave_ranking = "leave-ranking"
    restart = "restart"


def get_wizard(session_id: str, db: Session = Depends(get_db)) -> Wizard:
    return load_session(db, session_id)


def _validated(model, data: dict):
    """Validate internally built payloads with the same 400 response as request bodies."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e


@router.post("", response_model=WizardStateOut, status_code=status.HTTP_201_CREATED)
async def create_session(db: Session = Depends(get_db)):
    session_id, wizard = new_session(db)
    return WizardStateOut.from_state(session_id, wizard.state)


@router.get("/{session_id}", response_model=WizardStateOut)
async def get_session(session_id: str, wizard: Wizard = Depends(get_wizard)):
    return WizardStateOut.from_state(session_id, wizard.state)


@router.post("/{session_id}/user-info", response_model=WizardStateOut)
async def submit_user_info(session_id: str, payload: ParticipantIn, wizard: Wizard = Depends(get_wizard)):
    wizard.submit_user_info(UserInfo(**payload.model_dump()))
    return WizardStateOut.from_state(session_id, wizard.state)


@router.post("/{session_id}/actions/{action}", response_model=WizardStateOut)
async def apply_action(session_id: str, action: WizardAction, wizard: Wizard = Depends(get_wizard)):
    getattr(wizard, action.name)()
    return WizardStateOut.from_state(session_id, wizard.state)


# -- icon board --------------------------------------------------------------

@router.get("/{session_id}/board", response_model=BoardOut)
async def get_board(wizard: Wizard = Depends(get_wizard)):
    return BoardOut.from_board(wizard.board())


@router.post("/{session_id}/board/drop", response_model=BoardOut)
async def drop_icon(payload: DropIn, wizard: Wizard = Depends(get_wizard)):
    board = wizard.board()
    if board.drop(payload.role_id, payload.icon):
        wizard.save()
    return BoardOut.from_board(board)


@router.post("/{session_id}/board/select", response_model=BoardOut)
async def select_icon(payload: SelectIn, wizard: Wizard = Depends(get_wizard)):
    board = wizard.board()
    board.select_icon(payload.icon)
    wizard.save()
    return BoardOut.from_board(board)


@router.post("/{session_id}/board/tap", response_model=BoardOut)
async def tap_role(payload: TapIn, wizard: Wizard = Depends(get_wizard)):
    board = wizard.board()
    if board.tap(payload.role_id):
        wizard.save()
    return BoardOut.from_board(board)


@router.post("/{session_id}/board/undo", response_model=BoardOut)
async def undo(wizard: Wizard = Depends(get_wizard)):
    board = wizard.board()
    if board.undo():
        wizard.save()
    return BoardOut.from_board(board)


@router.post("/{session_id}/board/reset", response_model=BoardOut)
async def reset(wizard: Wizard = Depends(get_wizard)):
    board = wizard.board()
    board.reset()
    wizard.save()
    return BoardOut.from_board(board)


@router.post("/{session_id}/board/submit", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
async def submit_board(session_id: str, wizard: Wizard = Depends(get_wizard), db: Session = Depends(get_db)):
    """Submit a complete board with the session's user info, then move to the completion page."""
    board = wizard.board()
    if not board.is_complete:
        raise BoardIncompleteError(board.assigned_count, len(board.roles))
    user_info = wizard.require_user_info()

    payload = _validated(SubmissionIn, {
        "participant": user_info.model_dump(),
        "responses": board.to_responses(),
    })
    data = submit_survey(db, payload)
    wizard.complete_survey()
    logger.info("Wizard session %s submitted as %s", session_id, data.submission_id)
    return SubmissionOut(data=data)


# -- tie-breaker ranking -----------------------------------------------------

@router.post("/{session_id}/ranking/toggle", response_model=RankingOut)
async def toggle_ranked_icon(payload: ToggleIn, wizard: Wizard = Depends(get_wizard)):
    ranking = wizard.ranking()
    ranking.toggle(payload.icon)
    wizard.save()
    return RankingOut.from_session(ranking)


@router.post("/{session_id}/ranking/back", response_model=WizardStateOut)
async def leave_ranking(session_id: str, wizard: Wizard = Depends(get_wizard)):
    """Leave the ranking survey; taking it again resumes the saved progress."""
    wizard.leave_ranking()
    return WizardStateOut.from_state(session_id, wizard.state)


@router.post("/{session_id}/ranking/next", response_model=RankingStepOut)
async def next_ranking_step(session_id: str, wizard: Wizard = Depends(get_wizard), db: Session = Depends(get_db)):
    """Advance to the next role; after the last role the rankings are submitted."""
    ranking = wizard.ranking()
    if not ranking.next():
        wizard.save()
        return RankingStepOut(finished=False, state=WizardStateOut.from_state(session_id, wizard.state))

    user_info = wizard.require_user_info()
    payload = _validated(RankingSubmissionIn, {
        "participant": user_info.model_dump(),
        "rankings": ranking.rows(),
    })
    data = submit_ranking(db, payload)
    wizard.finish_ranking()
    logger.info("Wizard session %s submitted rankings as %s", session_id, data.submission_id)
    return RankingStepOut(
        finished=True,
        state=WizardStateOut.from_state(session_id, wizard.state),
        submission=data,
    )
