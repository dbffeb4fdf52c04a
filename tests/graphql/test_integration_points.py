"""
Integration tests for the points schema against a real PostgreSQL database
"""

from typing import Any
from unittest.mock import MagicMock

import pytest

from points_api.graphql.schema import schema

pytestmark = [pytest.mark.integration, pytest.mark.requires_db]

CREATE_DAILY_POINT = """
mutation Create($user: String!, $date: String!, $stake: Float!, $blend: Float!) {
  createDailyPoint(
    user_id: $user, stake_usd: $stake, debt_usd: 1, blend_lend: 2, blend_borrow: 3,
    yuzu_lend: 4, yuzu_borrow: 5, blend_point: $blend, yuzu_point: 0.5, send_date: $date
  ) { id user_id send_date stake_usd blend_point last_time }
}
"""

UPDATE_USER_SUMMARY = """
mutation Update($user: String!, $blend: Float!, $yuzu: Float!) {
  updateUserSummary(
    user_id: $user, blend_lend: 10, blend_borrow: 20, yuzu_lend: 30, yuzu_borrow: 40,
    blend_point: $blend, yuzu_point: $yuzu
  ) { id user_id blend_point yuzu_point last_time }
}
"""


async def run(database, query: str, **variables: Any) -> dict[str, Any]:
    result = await schema.execute(
        query,
        variable_values=variables,
        context_value={"request": MagicMock(), "db": database},
    )
    assert result.errors is None, result.errors
    return result.data


async def create_point(database, user: str, date: str, stake: float = 100.0, blend: float = 1.0):
    data = await run(database, CREATE_DAILY_POINT, user=user, date=date, stake=stake, blend=blend)
    return data["createDailyPoint"]


@pytest.mark.asyncio
async def test_daily_points_range_and_order(database):
    for date in ("2024-10-30", "2024-11-01", "2024-11-03", "2024-11-05"):
        await create_point(database, "0xAlice", date)
    await create_point(database, "0xbob", "2024-11-03")

    data = await run(
        database,
        '{ dailyPoints(userId: "0xalice", startDate: "2024-11-01", endDate: "2024-11-03") '
        "{ user_id send_date } }",
    )

    assert data["dailyPoints"] == [
        {"user_id": "0xalice", "send_date": "2024-11-03"},
        {"user_id": "0xalice", "send_date": "2024-11-01"},
    ]

    # A single bound applies no filter
    data = await run(database, '{ dailyPoints(userId: "0xALICE", startDate: "2024-11-04") { send_date } }')
    assert [row["send_date"] for row in data["dailyPoints"]] == [
        "2024-11-05",
        "2024-11-03",
        "2024-11-01",
        "2024-10-30",
    ]


@pytest.mark.asyncio
async def test_create_daily_point_appends_duplicates(database):
    first = await create_point(database, "0xcarol", "2024-11-05", stake=10.0)
    second = await create_point(database, "0xcarol", "2024-11-05", stake=20.0)

    assert first["id"] != second["id"]
    assert first["last_time"]

    data = await run(database, '{ dailyPoints(userId: "0xcarol") { id stake_usd } }')
    assert sorted(row["id"] for row in data["dailyPoints"]) == sorted([first["id"], second["id"]])


@pytest.mark.asyncio
async def test_last_send_point(database):
    data = await run(database, "{ lastSendPoint { id } }")
    assert data["lastSendPoint"] is None

    await create_point(database, "0xdave", "2024-11-01")
    latest = await create_point(database, "0xerin", "2024-10-01")

    data = await run(database, "{ lastSendPoint { id user_id } }")
    assert data["lastSendPoint"] == {"id": latest["id"], "user_id": "0xerin"}

    data = await run(database, '{ lastSendPoint(userId: "0xDAVE") { user_id } }')
    assert data["lastSendPoint"] == {"user_id": "0xdave"}


@pytest.mark.asyncio
async def test_daily_point_by_date_matches_individual_rows(database):
    await create_point(database, "a", "2024-11-01", stake=10.0, blend=1.0)
    await create_point(database, "a", "2024-11-01", stake=15.0, blend=2.0)
    await create_point(database, "b", "2024-11-01", stake=5.0, blend=0.5)
    await create_point(database, "b", "2024-11-02", stake=7.0, blend=3.0)

    data = await run(
        database,
        "{ dailyPointByDate { send_date daily_count total_stake_usd total_blend_point "
        "total_debt_usd } }",
    )

    assert data["dailyPointByDate"] == [
        {
            "send_date": "2024-11-02",
            "daily_count": 1,
            "total_stake_usd": 7.0,
            "total_blend_point": 3.0,
            "total_debt_usd": 1.0,
        },
        {
            "send_date": "2024-11-01",
            "daily_count": 2,
            "total_stake_usd": 30.0,
            "total_blend_point": 3.5,
            "total_debt_usd": 3.0,
        },
    ]


@pytest.mark.asyncio
async def test_update_user_summary_replaces_totals(database):
    first = (await run(database, UPDATE_USER_SUMMARY, user="ABC", blend=5.0, yuzu=1.0))[
        "updateUserSummary"
    ]
    second = (await run(database, UPDATE_USER_SUMMARY, user="abc", blend=5.0, yuzu=1.0))[
        "updateUserSummary"
    ]

    assert first["id"] == second["id"]
    assert second["blend_point"] == 5.0
    assert second["yuzu_point"] == 1.0

    await run(database, UPDATE_USER_SUMMARY, user="abc", blend=2.0, yuzu=0.0)

    upper = await run(database, '{ userSummary(userId: "ABC") { id blend_point yuzu_point } }')
    lower = await run(database, '{ userSummary(userId: "abc") { id blend_point yuzu_point } }')
    assert upper == {"userSummary": lower["userSummary"]}
    assert lower["userSummary"] == {"id": first["id"], "blend_point": 2.0, "yuzu_point": 0.0}

    missing = await run(database, '{ userSummary(userId: "nobody") { id } }')
    assert missing == {"userSummary": None}


@pytest.mark.asyncio
async def test_top_users_and_point_summary(database):
    empty = await run(database, "{ pointSummary { blend_point yuzu_borrow } }")
    assert empty == {"pointSummary": {"blend_point": 0.0, "yuzu_borrow": 0.0}}

    for index, blend in enumerate([3.0, 9.0, 1.0, 7.0, 5.0]):
        await run(database, UPDATE_USER_SUMMARY, user=f"user-{index}", blend=blend, yuzu=1.0)

    data = await run(
        database,
        '{ topUsers(limit: 3, orderBy: "blend_point", orderByDirection: "desc") '
        "{ user_id blend_point rank } }",
    )
    assert data["topUsers"] == [
        {"user_id": "user-1", "blend_point": 9.0, "rank": 1},
        {"user_id": "user-3", "blend_point": 7.0, "rank": 2},
        {"user_id": "user-4", "blend_point": 5.0, "rank": 3},
    ]

    totals = await run(database, "{ pointSummary { blend_point yuzu_point blend_lend } }")
    assert totals == {"pointSummary": {"blend_point": 25.0, "yuzu_point": 5.0, "blend_lend": 50.0}}
