"""Pydantic schemes for survey and tie-breaker submissions.
"""
# app/schemas/submission.py
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.app.core.config import settings
from src.credit.catalog import MAX_RANKED_ICONS, TIE_BREAKER_ROLES, tie_breaker_role

AgeRange = Literal["18-25", "26-35", "36-45", "46-55", "56-65", "66+"]


class ParticipantIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    age: AgeRange
    field_of_study: str = Field(min_length=2, max_length=100)
    country_of_residence: str = Field(min_length=2, max_length=100)


class ResponseIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    role_title: str = Field(min_length=2, max_length=100)
    assigned_icon: str = Field(min_length=2, max_length=100)
    response_order: int = Field(ge=0)


class SubmissionIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    participant: ParticipantIn
    responses: list[ResponseIn] = Field(min_length=1, max_length=20)
    survey_version: str = Field(default=settings.SURVEY_VERSION, min_length=1)


class RankingParticipantIn(ParticipantIn):
    # returning respondents skip the demographics page
    age: AgeRange | Literal["Returning"]


class RankingEntryIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    role_title: str = Field(min_length=2, max_length=100)
    icon_name: str = Field(min_length=2, max_length=100)
    rank_position: int = Field(ge=1, le=MAX_RANKED_ICONS)


class RankingSubmissionIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    participant: RankingParticipantIn
    rankings: list[RankingEntryIn] = Field(min_length=1, max_length=len(TIE_BREAKER_ROLES) * MAX_RANKED_ICONS)
    survey_version: str = Field(default=settings.RANKING_SURVEY_VERSION, min_length=1)

    @field_validator("rankings")
    @classmethod
    def check_candidates(cls, rankings: list[RankingEntryIn]) -> list[RankingEntryIn]:
        problems = []
        seen_icons: set[tuple[str, str]] = set()
        seen_ranks: set[tuple[str, int]] = set()
        for entry in rankings:
            role = tie_breaker_role(entry.role_title)
            if role is None:
                problems.append(f"'{entry.role_title}' is not a tie-breaker role")
                continue
            if entry.icon_name not in role.candidates:
                problems.append(f"'{entry.icon_name}' is not a candidate for '{role.title}'")
            if (role.title, entry.icon_name) in seen_icons:
                problems.append(f"'{entry.icon_name}' is ranked twice for '{role.title}'")
            if (role.title, entry.rank_position) in seen_ranks:
                problems.append(f"rank {entry.rank_position} is used twice for '{role.title}'")
            seen_icons.add((role.title, entry.icon_name))
            seen_ranks.add((role.title, entry.rank_position))
        if problems:
            raise ValueError("; ".join(problems))
        return rankings


class SubmissionData(BaseModel):
    participant_id: str
    submission_id: str
    responses_count: int


class SubmissionOut(BaseModel):
    success: bool = True
    message: str = "Survey submitted successfully"
    data: SubmissionData
