import pytest

from src.app.core.errors import RankingIncompleteError, UnknownIconError
from src.credit.catalog import TIE_BREAKER_ROLES
from src.credit.ranking import RankingSession


def test_toggle_ranks_in_tap_order():
    session = RankingSession()
    session.toggle("flask")
    session.toggle("microscope")

    assert session.role.title == "Investigation"
    assert session.current_ranked == ["flask", "microscope"]


def test_toggle_again_removes_and_closes_gap():
    session = RankingSession()
    for icon in ["flask", "microscope", "search"]:
        session.toggle(icon)

    session.toggle("microscope")

    assert session.current_ranked == ["flask", "search"]


def test_toggle_rejects_non_candidates():
    with pytest.raises(UnknownIconError):
        RankingSession().toggle("lightbulb")


def test_next_requires_a_ranked_icon():
    with pytest.raises(RankingIncompleteError):
        RankingSession().next()


def test_walk_through_all_roles():
    """Test every role is visited once and the last step finishes the session"""
    session = RankingSession()
    visited = []
    finished = False
    while not finished:
        visited.append(session.role.title)
        session.toggle(session.role.candidates[0])
        finished = session.next()

    assert visited == [role.title for role in TIE_BREAKER_ROLES]
    assert session.finished
    assert len(session.rows()) == len(TIE_BREAKER_ROLES)


def test_rows_number_ranks_from_one():
    session = RankingSession()
    session.toggle("search")
    session.toggle("flask")

    assert session.rows() == [
        {"role_title": "Investigation", "icon_name": "search", "rank_position": 1},
        {"role_title": "Investigation", "icon_name": "flask", "rank_position": 2},
    ]
