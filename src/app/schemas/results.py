"""Pydantic schemes for aggregate results.
"""
# app/schemas/results.py
from pydantic import BaseModel


class StatsData(BaseModel):
    total_participants: int
    total_submissions: int
    completed_submissions: int
    completion_rate: str


class StatsOut(BaseModel):
    success: bool = True
    data: StatsData


class TopIcon(BaseModel):
    role_title: str
    assigned_icon: str
    selection_count: int
    shape: str = "circle"


class TopIconsOut(BaseModel):
    success: bool = True
    data: dict[str, list[TopIcon]]


class CountRow(BaseModel):
    value: str
    count: int


class DemographicsSummary(BaseModel):
    total_participants: int
    by_age: list[CountRow]
    by_field_of_study: list[CountRow]
    by_country_of_residence: list[CountRow]


class DemographicsOut(BaseModel):
    success: bool = True
    data: DemographicsSummary


class IconRanking(BaseModel):
    icon_name: str
    votes: int
    first_place_votes: int
    average_rank: float
    score: int


class RoleRanking(BaseModel):
    role_title: str
    total_votes: int
    icons: list[IconRanking]


class RankingAnalyticsOut(BaseModel):
    success: bool = True
    data: list[RoleRanking]
