import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.credit.catalog import TIE_BREAKER_ROLES
from src.db.models import DraftEntry, RankingResponse, Response, Submission


async def new_session(client: AsyncClient) -> str:
    response = await client.post("/wizard/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


async def to_board(client: AsyncClient, participant: dict) -> str:
    session_id = await new_session(client)
    response = await client.post(f"/wizard/sessions/{session_id}/user-info", json=participant)
    assert response.json()["current_page"] == "flashcards"
    response = await client.post(f"/wizard/sessions/{session_id}/actions/flashcards-next")
    assert response.json()["current_page"] == "survey"
    return session_id


@pytest.mark.asyncio
async def test_create_and_reload_session(client: AsyncClient):
    session_id = await new_session(client)

    response = await client.get(f"/wizard/sessions/{session_id}")

    assert response.status_code == 200
    assert response.json()["current_page"] == "userInfo"
    assert response.json()["board"] is None


@pytest.mark.asyncio
async def test_unknown_session(client: AsyncClient):
    response = await client.get("/wizard/sessions/does-not-exist")

    assert response.status_code == 404
    assert response.json()["code"] == "SESSION_NOT_FOUND"


@pytest.mark.asyncio
async def test_invalid_action_for_page(client: AsyncClient):
    session_id = await new_session(client)

    response = await client.post(f"/wizard/sessions/{session_id}/actions/see-results")

    assert response.status_code == 409
    assert response.json()["code"] == "WIZARD_TRANSITION"


@pytest.mark.asyncio
async def test_unknown_action(client: AsyncClient):
    session_id = await new_session(client)

    response = await client.post(f"/wizard/sessions/{session_id}/actions/fly-away")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_board_moves_persist(client: AsyncClient, participant_data):
    session_id = await to_board(client, participant_data)
    base = f"/wizard/sessions/{session_id}/board"

    await client.post(f"{base}/drop", json={"role_id": 1, "icon": "lightbulb"})
    response = await client.post(f"{base}/drop", json={"role_id": 2, "icon": "lightbulb"})
    board = response.json()
    assert [slot["assigned_icon"] for slot in board["roles"][:2]] == [None, "lightbulb"]
    assert board["can_undo"] is True

    await client.post(f"{base}/select", json={"icon": "eye"})
    await client.post(f"{base}/tap", json={"role_id": 10})
    response = await client.post(f"{base}/undo")
    assert response.json()["roles"][9]["assigned_icon"] is None

    reloaded = (await client.get(base)).json()
    assert reloaded["assigned_count"] == 1
    assert reloaded["roles"][1]["assigned_icon"] == "lightbulb"

    response = await client.post(f"{base}/reset")
    assert response.json()["assigned_count"] == 0
    assert response.json()["can_undo"] is False


@pytest.mark.asyncio
async def test_drop_unknown_icon(client: AsyncClient, participant_data):
    session_id = await to_board(client, participant_data)

    response = await client.post(
        f"/wizard/sessions/{session_id}/board/drop", json={"role_id": 1, "icon": "rocket"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "UNKNOWN_ICON"


@pytest.mark.asyncio
async def test_incomplete_board_cannot_be_submitted(client: AsyncClient, db_session: Session, participant_data):
    session_id = await to_board(client, participant_data)
    await client.post(f"/wizard/sessions/{session_id}/board/drop", json={"role_id": 1, "icon": "code"})

    response = await client.post(f"/wizard/sessions/{session_id}/board/submit")

    assert response.status_code == 409
    assert response.json()["details"] == {"assigned": 1, "total": 14}
    assert db_session.scalar(select(func.count()).select_from(Submission)) == 0


@pytest.mark.asyncio
async def test_submit_board_then_pinned(client: AsyncClient, db_session: Session, participant_data):
    """Test a complete board is stored and the session stays on the post-submission pages"""
    session_id = await to_board(client, participant_data)
    board = (await client.get(f"/wizard/sessions/{session_id}/board")).json()
    for slot, icon in zip(board["roles"], board["available_icons"]):
        await client.post(
            f"/wizard/sessions/{session_id}/board/drop", json={"role_id": slot["id"], "icon": icon["name"]}
        )

    response = await client.post(f"/wizard/sessions/{session_id}/board/submit")

    assert response.status_code == 201
    assert response.json()["data"]["responses_count"] == 14
    assert db_session.scalar(select(func.count()).select_from(Response)) == 14

    state = (await client.get(f"/wizard/sessions/{session_id}")).json()
    assert state["current_page"] == "completed"
    assert state["is_submitted"] is True
    assert state["board"] is None
    response = await client.get(f"/wizard/sessions/{session_id}/board")
    assert response.status_code == 409

    response = await client.post(f"/wizard/sessions/{session_id}/actions/see-results")
    assert response.json()["current_page"] == "results"


@pytest.mark.asyncio
async def test_ranking_flow(client: AsyncClient, db_session: Session):
    """Test a returning respondent ranks every tie-breaker role and the rows are stored"""
    session_id = await new_session(client)
    base = f"/wizard/sessions/{session_id}"
    response = await client.post(f"{base}/actions/take-ranking-survey")
    assert response.json()["ranking"]["total_steps"] == len(TIE_BREAKER_ROLES)

    response = await client.post(f"{base}/ranking/next")
    assert response.status_code == 409
    assert response.json()["code"] == "RANKING_INCOMPLETE"

    result = None
    for role in TIE_BREAKER_ROLES:
        await client.post(f"{base}/ranking/toggle", json={"icon": role.candidates[1]})
        await client.post(f"{base}/ranking/toggle", json={"icon": role.candidates[0]})
        result = (await client.post(f"{base}/ranking/next")).json()

    assert result["finished"] is True
    assert result["state"]["current_page"] == "userInfo"
    assert result["state"]["ranking"] is None
    assert result["submission"]["responses_count"] == 2 * len(TIE_BREAKER_ROLES)
    first = db_session.scalars(
        select(RankingResponse).where(
            RankingResponse.role_title == TIE_BREAKER_ROLES[0].title,
            RankingResponse.rank_position == 1,
        )
    ).one()
    assert first.icon_name == TIE_BREAKER_ROLES[0].candidates[1]


@pytest.mark.asyncio
async def test_ranking_back_keeps_progress(client: AsyncClient):
    session_id = await new_session(client)
    base = f"/wizard/sessions/{session_id}"
    await client.post(f"{base}/actions/take-ranking-survey")
    await client.post(f"{base}/ranking/toggle", json={"icon": "flask"})

    response = await client.post(f"{base}/ranking/back")

    assert response.json()["current_page"] == "userInfo"
    assert response.json()["ranking"]["ranked"] == ["flask"]

    response = await client.post(f"{base}/actions/take-ranking-survey")

    assert response.json()["current_page"] == "rankingSurvey"
    assert response.json()["ranking"]["ranked"] == ["flask"]


@pytest.mark.asyncio
async def test_restart_clears_drafts(client: AsyncClient, db_session: Session, participant_data):
    session_id = await to_board(client, participant_data)

    response = await client.post(f"/wizard/sessions/{session_id}/actions/restart")

    assert response.json()["current_page"] == "userInfo"
    assert response.json()["user_info"] is None
    keys = db_session.scalars(select(DraftEntry.key).where(DraftEntry.session_id == session_id)).all()
    assert keys == ["credit_survey_state"]
