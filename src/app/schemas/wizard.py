"""Pydantic schemes for the wizard session endpoints.
"""
# app/schemas/wizard.py
from pydantic import BaseModel

from src.app.schemas.submission import SubmissionData
from src.credit.board import RoleBoard, RoleSlot
from src.credit.catalog import IconItem, TieBreakerRole, TIE_BREAKER_ROLES
from src.credit.ranking import RankingSession
from src.credit.wizard import SurveyState, UserInfo


class DropIn(BaseModel):
    role_id: int
    icon: str


class SelectIn(BaseModel):
    icon: str


class TapIn(BaseModel):
    role_id: int


class ToggleIn(BaseModel):
    icon: str


class BoardOut(BaseModel):
    roles: list[RoleSlot]
    available_icons: list[IconItem]
    current_icon: IconItem | None
    current_icon_index: int
    selected_icon: str | None
    assigned_count: int
    total: int
    progress: float
    is_complete: bool
    can_undo: bool

    @classmethod
    def from_board(cls, board: RoleBoard) -> "BoardOut":
        return cls(
            roles=board.roles,
            available_icons=board.available_icons,
            current_icon=board.current_icon,
            current_icon_index=board.current_icon_index,
            selected_icon=board.selected_icon,
            assigned_count=board.assigned_count,
            total=len(board.roles),
            progress=round(board.progress, 2),
            is_complete=board.is_complete,
            can_undo=bool(board.history),
        )


class RankingOut(BaseModel):
    current_step: int
    total_steps: int
    role: TieBreakerRole
    ranked: list[str]
    finished: bool

    @classmethod
    def from_session(cls, ranking: RankingSession) -> "RankingOut":
        return cls(
            current_step=ranking.current_step,
            total_steps=len(TIE_BREAKER_ROLES),
            role=ranking.role,
            ranked=ranking.current_ranked,
            finished=ranking.finished,
        )


class WizardStateOut(BaseModel):
    session_id: str
    current_page: str
    is_submitted: bool
    history: list
    user_info: UserInfo | None = None
    board: BoardOut | None = None
    ranking: RankingOut | None = None

    @classmethod
    def from_state(cls, session_id: str, state: SurveyState) -> "WizardStateOut":
        return cls(
            session_id=session_id,
            current_page=state.current_page.value,
            is_submitted=state.is_submitted,
            history=state.history,
            user_info=state.user_info,
            board=BoardOut.from_board(state.survey_data) if state.survey_data else None,
            ranking=RankingOut.from_session(state.ranking) if state.ranking else None,
        )


class RankingStepOut(BaseModel):
    finished: bool
    state: WizardStateOut
    submission: SubmissionData | None = None
