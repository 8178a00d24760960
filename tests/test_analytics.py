import pytest
from httpx import AsyncClient
from sqlalchemy.orm import Session

from src.app.schemas.submission import RankingSubmissionIn, SubmissionIn
from src.app.services import analytics
from src.app.services.submission import submit_ranking, submit_survey
from src.credit.catalog import AGE_RANGES, TIE_BREAKER_ROLES


def submit(db: Session, age: str, field: str, country: str, assignments: dict[str, str]):
    return submit_survey(db, SubmissionIn.model_validate({
        "participant": {"age": age, "field_of_study": field, "country_of_residence": country},
        "responses": [
            {"role_title": role, "assigned_icon": icon, "response_order": i}
            for i, (role, icon) in enumerate(assignments.items())
        ],
    }))


def rank(db: Session, role: str, icons: list[str]):
    return submit_ranking(db, RankingSubmissionIn.model_validate({
        "participant": {"age": "Returning", "field_of_study": "Returning", "country_of_residence": "Returning"},
        "rankings": [
            {"role_title": role, "icon_name": icon, "rank_position": i + 1}
            for i, icon in enumerate(icons)
        ],
    }))


@pytest.fixture
def seeded(db_session: Session) -> Session:
    submit(db_session, "18-25", "Biology", "USA", {"Software": "code", "Resources": "box"})
    submit(db_session, "18-25", "Physics", "USA", {"Software": "code", "Resources": "database"})
    submit(db_session, "26-35", "Biology", "Germany", {"Software": "network", "Resources": "box"})
    submit(db_session, "36-45", "Biology", "France", {"Software": "chart", "Resources": "pen"})
    return db_session


def test_stats_on_empty_store(db_session: Session):
    stats = analytics.survey_stats(db_session)

    assert stats.total_participants == 0
    assert stats.total_submissions == 0
    assert stats.completion_rate == "0.00"


def test_stats_counts(seeded: Session):
    stats = analytics.survey_stats(seeded)

    assert stats.total_participants == 4
    assert stats.completed_submissions == 4
    assert stats.completion_rate == "100.00"


def test_top_icons_per_role(seeded: Session):
    """Test icons are ranked by votes with ties broken by name"""
    grouped = analytics.get_top_icons(seeded, limit=3)

    assert list(grouped) == ["Resources", "Software"]
    software = [(row.assigned_icon, row.selection_count) for row in grouped["Software"]]
    assert software == [("code", 2), ("chart", 1), ("network", 1)]
    assert grouped["Software"][0].shape == "gear"
    assert [row.assigned_icon for row in grouped["Resources"]] == ["box", "database", "pen"]


def test_top_icons_limit(seeded: Session):
    grouped = analytics.get_top_icons(seeded, limit=1)

    assert [len(rows) for rows in grouped.values()] == [1, 1]


def test_demographics(seeded: Session):
    summary = analytics.get_demographics_summary(seeded)

    assert summary.total_participants == 4
    assert [row.value for row in summary.by_age] == list(AGE_RANGES)
    assert summary.by_age[0].count == 2
    assert summary.by_age[-1].count == 0
    assert (summary.by_field_of_study[0].value, summary.by_field_of_study[0].count) == ("Biology", 3)
    assert [row.value for row in summary.by_country_of_residence] == ["USA", "France", "Germany"]


def test_demographics_lists_returning_after_brackets(db_session: Session):
    rank(db_session, "Methodology", ["map"])

    by_age = analytics.get_demographics_summary(db_session).by_age

    assert by_age[-1].value == "Returning"
    assert by_age[-1].count == 1


def test_ranking_scores(db_session: Session):
    """Test first place is worth four points and unranked candidates score zero"""
    rank(db_session, "Investigation", ["flask", "microscope"])
    rank(db_session, "Investigation", ["microscope", "flask", "search"])

    result = analytics.get_ranking_analytics(db_session)

    assert [r.role_title for r in result] == [role.title for role in TIE_BREAKER_ROLES]
    investigation = result[0]
    assert investigation.total_votes == 2
    scores = {icon.icon_name: icon for icon in investigation.icons}
    assert scores["flask"].score == 7
    assert scores["microscope"].score == 7
    assert scores["search"].score == 2
    assert scores["clipboard-list"].votes == 0
    assert scores["flask"].average_rank == 1.5
    # equal scores and first-place votes fall back to the icon name
    assert [icon.icon_name for icon in investigation.icons] == ["flask", "microscope", "search", "clipboard-list"]
    assert result[1].total_votes == 0


@pytest.mark.asyncio
async def test_results_endpoints(client: AsyncClient, seeded: Session):
    stats = await client.get("/survey/stats")
    top = await client.get("/api/survey/results/top-icons", params={"limit": 2})
    demographics = await client.get("/survey/results/demographics")
    ranking = await client.get("/survey/results/ranking")

    assert stats.json()["data"]["total_submissions"] == 4
    assert [row["assigned_icon"] for row in top.json()["data"]["Software"]] == ["code", "chart"]
    assert demographics.json()["data"]["total_participants"] == 4
    assert len(ranking.json()["data"]) == len(TIE_BREAKER_ROLES)


@pytest.mark.asyncio
async def test_top_icons_limit_is_bounded(client: AsyncClient):
    response = await client.get("/survey/results/top-icons", params={"limit": 0})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "query.limit"
