"""Aggregate views over stored submissions.

Server-side versions of the aggregations the results pages need: overall
counts, the most selected icons per role, a demographics breakdown and the
tie-breaker ranking scores.
"""
# app/services/analytics.py
from collections import defaultdict

from sqlalchemy import case, distinct, func, select
from sqlalchemy.orm import Session

from src.app.schemas.results import (
    CountRow,
    DemographicsSummary,
    IconRanking,
    RoleRanking,
    StatsData,
    TopIcon,
)
from src.app.services.submission import store_step
from src.credit.catalog import AGE_RANGES, MAX_RANKED_ICONS, TIE_BREAKER_ROLES, icon_shape
from src.db.models import CompletionStatus, Participant, RankingResponse, Response, Submission


def survey_stats(db: Session) -> StatsData:
    with store_step(db, "Failed to fetch statistics"):
        participants = db.scalar(select(func.count()).select_from(Participant)) or 0
        submissions = db.scalar(select(func.count()).select_from(Submission)) or 0
        completed = db.scalar(
            select(func.count()).select_from(Submission)
            .where(Submission.completion_status == CompletionStatus.completed)
        ) or 0

    rate = f"{completed / submissions * 100:.2f}" if submissions else "0.00"
    return StatsData(
        total_participants=participants,
        total_submissions=submissions,
        completed_submissions=completed,
        completion_rate=rate,
    )


def get_top_icons(db: Session, limit: int = 3) -> dict[str, list[TopIcon]]:
    """Most selected icons per role, grouped by role title.

    Args:
        db: The DB session.
        limit: How many icons to keep per role.

    Returns:
        dict: `{role_title: [TopIcon, ...]}` with roles in alphabetical order
        and icons by descending selection count (ties by icon name).
    """
    count = func.count(Response.id).label("selection_count")
    stmt = (
        select(Response.role_title, Response.assigned_icon, count)
        .group_by(Response.role_title, Response.assigned_icon)
        .order_by(Response.role_title, count.desc(), Response.assigned_icon)
    )
    with store_step(db, "Failed to fetch top icons"):
        rows = db.execute(stmt).all()

    grouped: dict[str, list[TopIcon]] = defaultdict(list)
    for role_title, icon, selections in rows:
        if len(grouped[role_title]) < limit:
            grouped[role_title].append(TopIcon(
                role_title=role_title,
                assigned_icon=icon,
                selection_count=selections,
                shape=icon_shape(icon),
            ))
    return {title: grouped[title] for title in sorted(grouped)}


def _counts(db: Session, column) -> dict[str, int]:
    stmt = select(column, func.count()).group_by(column)
    return {value: n for value, n in db.execute(stmt).all()}


def _sorted_rows(counts: dict[str, int]) -> list[CountRow]:
    return [
        CountRow(value=value, count=n)
        for value, n in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


def get_demographics_summary(db: Session) -> DemographicsSummary:
    with store_step(db, "Failed to fetch demographics"):
        total = db.scalar(select(func.count()).select_from(Participant)) or 0
        ages = _counts(db, Participant.age)
        fields = _counts(db, Participant.field_of_study)
        countries = _counts(db, Participant.country_of_residence)

    # every bracket is listed, in bracket order; anything else (e.g. Returning) follows
    by_age = [CountRow(value=bracket, count=ages.pop(bracket, 0)) for bracket in AGE_RANGES]
    by_age.extend(_sorted_rows(ages))

    return DemographicsSummary(
        total_participants=total,
        by_age=by_age,
        by_field_of_study=_sorted_rows(fields),
        by_country_of_residence=_sorted_rows(countries),
    )


def get_ranking_analytics(db: Session) -> list[RoleRanking]:
    """Score tie-breaker candidates per role.

    A rank position `p` is worth `5 - p` points (4 for first place down to 1
    for fourth). Candidates nobody ranked are listed with zero votes.
    """
    points = MAX_RANKED_ICONS + 1 - RankingResponse.rank_position
    stmt = (
        select(
            RankingResponse.role_title,
            RankingResponse.icon_name,
            func.count(RankingResponse.id),
            func.sum(case((RankingResponse.rank_position == 1, 1), else_=0)),
            func.avg(RankingResponse.rank_position),
            func.sum(points),
        )
        .group_by(RankingResponse.role_title, RankingResponse.icon_name)
    )
    voters_stmt = (
        select(RankingResponse.role_title, func.count(distinct(RankingResponse.submission_id)))
        .group_by(RankingResponse.role_title)
    )
    with store_step(db, "Failed to fetch ranking analytics"):
        rows = db.execute(stmt).all()
        voters = {title: n for title, n in db.execute(voters_stmt).all()}

    stats: dict[tuple[str, str], IconRanking] = {}
    for role_title, icon, votes, firsts, avg_rank, score in rows:
        stats[(role_title, icon)] = IconRanking(
            icon_name=icon,
            votes=votes,
            first_place_votes=firsts or 0,
            average_rank=round(float(avg_rank), 2),
            score=score or 0,
        )

    result = []
    for role in TIE_BREAKER_ROLES:
        icons = [
            stats.get((role.title, icon), IconRanking(
                icon_name=icon, votes=0, first_place_votes=0, average_rank=0.0, score=0,
            ))
            for icon in role.candidates
        ]
        icons.sort(key=lambda r: (-r.score, -r.first_place_votes, r.icon_name))
        result.append(RoleRanking(role_title=role.title, total_votes=voters.get(role.title, 0), icons=icons))
    return result
