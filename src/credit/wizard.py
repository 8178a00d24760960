"""Survey wizard: page state, transitions and draft persistence.

The wizard walks a respondent through

    userInfo -> flashcards -> survey -> completed -> {results | contributorExample | rankingSurvey}

with a direct path from userInfo into the tie-breaker ranking survey. The
whole state is written to a `DraftStore` after every change, under the same
keys the browser client used for local storage, and read back by
`Wizard.load()`. A session that has already submitted is pinned to the
post-submission pages when it is loaded again.
"""
import enum
import json
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from src.app.core.errors import NoDraftError, WizardTransitionError
from src.app.core.logging import get_logs_writer_logger
from src.credit.board import RoleBoard
from src.credit.catalog import RETURNING
from src.credit.ranking import RankingSession

logger = get_logs_writer_logger()

STORAGE_KEYS = {
    "SURVEY_STATE": "credit_survey_state",
    "USER_INFO": "credit_survey_user_info",
    "SURVEY_DATA": "credit_survey_data",
    "RANKING": "credit_survey_ranking",
}


class WizardPage(str, enum.Enum):
    user_info = "userInfo"
    flashcards = "flashcards"
    survey = "survey"
    completed = "completed"
    results = "results"
    contributor_example = "contributorExample"
    ranking_survey = "rankingSurvey"


SUBMITTED_PAGES = frozenset({
    WizardPage.completed,
    WizardPage.contributor_example,
    WizardPage.results,
    WizardPage.ranking_survey,
})

# action -> (pages offering it, page it leads to)
TRANSITIONS: dict[str, tuple[frozenset[WizardPage], WizardPage]] = {
    "submit_user_info": (frozenset({WizardPage.user_info}), WizardPage.flashcards),
    "skip_to_results": (frozenset({WizardPage.user_info}), WizardPage.results),
    "take_ranking_survey": (frozenset({WizardPage.user_info, WizardPage.completed}), WizardPage.ranking_survey),
    "flashcards_next": (frozenset({WizardPage.flashcards}), WizardPage.survey),
    "back_to_user_info": (frozenset({WizardPage.flashcards}), WizardPage.user_info),
    "back_to_flashcards": (frozenset({WizardPage.survey}), WizardPage.flashcards),
    "complete_survey": (frozenset({WizardPage.survey}), WizardPage.completed),
    "see_results": (frozenset({WizardPage.completed, WizardPage.contributor_example}), WizardPage.results),
    "see_example": (frozenset({WizardPage.completed}), WizardPage.contributor_example),
    "back_to_completion": (frozenset({WizardPage.results, WizardPage.contributor_example}), WizardPage.completed),
    "leave_ranking": (frozenset({WizardPage.ranking_survey}), WizardPage.user_info),
    "finish_ranking": (frozenset({WizardPage.ranking_survey}), WizardPage.user_info),
}


class UserInfo(BaseModel):
    age: str
    field_of_study: str
    country_of_residence: str


class SurveyState(BaseModel):
    current_page: WizardPage = WizardPage.user_info
    is_submitted: bool = False
    history: list = Field(default_factory=list)
    user_info: UserInfo | None = None
    survey_data: RoleBoard | None = None
    ranking: RankingSession | None = None


class DraftStore(Protocol):
    """String key/value storage scoped to one wizard session."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


def _load_json(store: DraftStore, key: str):
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.error("Failed to load from storage: %s (%s)", key, e)
        return None


def _load_model(store: DraftStore, key: str, model: type[BaseModel]):
    data = _load_json(store, key)
    if data is None:
        return None
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error("Discarding unreadable %s: %s", key, e.errors()[:3])
        return None


def _save(store: DraftStore, key: str, data) -> None:
    store.set(key, json.dumps(data, ensure_ascii=False))


class Wizard:
    def __init__(self, store: DraftStore, state: SurveyState | None = None):
        self.store = store
        self.state = state or SurveyState()

    # -- persistence -----------------------------------------------------

    @classmethod
    def load(cls, store: DraftStore) -> "Wizard":
        saved = _load_json(store, STORAGE_KEYS["SURVEY_STATE"])
        if not isinstance(saved, dict):
            if saved is not None:
                logger.error("Discarding unreadable %s: %r", STORAGE_KEYS["SURVEY_STATE"], saved)
            saved = {}
        history = saved.get("history")
        if not isinstance(history, list):
            history = []
        user_info = _load_model(store, STORAGE_KEYS["USER_INFO"], UserInfo)
        ranking = _load_model(store, STORAGE_KEYS["RANKING"], RankingSession)

        try:
            page = WizardPage(saved.get("currentPage") or WizardPage.user_info)
        except (TypeError, ValueError):
            page = WizardPage.user_info

        if saved.get("isSubmitted"):
            state = SurveyState(
                current_page=page if page in SUBMITTED_PAGES else WizardPage.completed,
                is_submitted=True,
                history=[],
                user_info=user_info,
                survey_data=None,
                ranking=ranking,
            )
        else:
            state = SurveyState(
                current_page=page,
                is_submitted=False,
                history=history,
                user_info=user_info,
                survey_data=_load_model(store, STORAGE_KEYS["SURVEY_DATA"], RoleBoard),
                ranking=ranking,
            )
        return cls(store, state)

    def save(self) -> None:
        state = self.state
        _save(self.store, STORAGE_KEYS["SURVEY_STATE"], {
            "currentPage": state.current_page.value,
            "isSubmitted": state.is_submitted,
            "history": state.history,
        })
        if state.user_info:
            _save(self.store, STORAGE_KEYS["USER_INFO"], state.user_info.model_dump(mode="json"))
        if state.survey_data:
            _save(self.store, STORAGE_KEYS["SURVEY_DATA"], state.survey_data.model_dump(mode="json"))
        if state.ranking:
            _save(self.store, STORAGE_KEYS["RANKING"], state.ranking.model_dump(mode="json"))

    def clear_storage(self) -> None:
        for key in STORAGE_KEYS.values():
            self.store.remove(key)

    # -- transitions -----------------------------------------------------

    @property
    def page(self) -> WizardPage:
        return self.state.current_page

    def _go(self, action: str) -> None:
        sources, target = TRANSITIONS[action]
        if self.page not in sources:
            raise WizardTransitionError(action, self.page.value)
        self.state.history.append(self.page.value)
        self.state.current_page = target

    def submit_user_info(self, user_info: UserInfo) -> None:
        self._go("submit_user_info")
        self.state.user_info = user_info
        self.save()

    def skip_to_results(self) -> None:
        self._go("skip_to_results")
        self.save()

    def take_ranking_survey(self) -> None:
        self._go("take_ranking_survey")
        if self.state.user_info is None:
            self.state.user_info = UserInfo(
                age=RETURNING, field_of_study=RETURNING, country_of_residence=RETURNING
            )
        if self.state.ranking is None or self.state.ranking.finished:
            self.state.ranking = RankingSession()
        self.save()

    def flashcards_next(self) -> None:
        self._go("flashcards_next")
        if self.state.survey_data is None:
            self.state.survey_data = RoleBoard.new()
        self.save()

    def back_to_user_info(self) -> None:
        self._go("back_to_user_info")
        self.save()

    def back_to_flashcards(self) -> None:
        self._go("back_to_flashcards")
        self.save()

    def complete_survey(self) -> None:
        self._go("complete_survey")
        self.state.is_submitted = True
        self.state.survey_data = None
        self.store.remove(STORAGE_KEYS["SURVEY_DATA"])
        self.save()

    def see_results(self) -> None:
        self._go("see_results")
        self.save()

    def see_example(self) -> None:
        self._go("see_example")
        self.save()

    def back_to_completion(self) -> None:
        self._go("back_to_completion")
        self.save()

    def leave_ranking(self) -> None:
        self._go("leave_ranking")
        self.save()

    def finish_ranking(self) -> None:
        self._go("finish_ranking")
        self.state.ranking = None
        self.store.remove(STORAGE_KEYS["RANKING"])
        self.save()

    def restart(self) -> None:
        self.clear_storage()
        self.state = SurveyState()
        self.save()

    # -- drafts ----------------------------------------------------------

    def board(self) -> RoleBoard:
        if self.page != WizardPage.survey:
            raise WizardTransitionError("edit_board", self.page.value)
        if self.state.survey_data is None:
            raise NoDraftError()
        return self.state.survey_data

    def ranking(self) -> RankingSession:
        if self.page != WizardPage.ranking_survey:
            raise WizardTransitionError("rank_icons", self.page.value)
        if self.state.ranking is None:
            self.state.ranking = RankingSession()
        return self.state.ranking

    def require_user_info(self) -> UserInfo:
        if self.state.user_info is None:
            raise NoDraftError("User information is missing. Please restart the survey.")
        return self.state.user_info
