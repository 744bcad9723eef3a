"""Event routes: candidates, creation, confirmation, ledger and maintenance over HTTP.

Invariants:
    - Join/cancel answer 200 with an outcome field, even for unknown events
    - Candidate limit above the configured ceiling is a 400 INVALID_LIMIT
    - Second confirmation is 409 EVENT_NOT_PLANNING
"""

from uuid import UUID, uuid4

import pytest


@pytest.fixture
async def availability(client):
    for member, days in {
        "A": ["2024-06-01", "2024-06-04"],
        "B": ["2024-06-01"],
    }.items():
        res = await client.put(
            f"/api/v1/scopes/guild-1/members/{member}/availability/2024/6",
            json={"available": days},
        )
        assert res.status_code == 200


async def _create_event(client, **overrides):
    body = {
        "scope_id": "guild-1", "title": "Raid night", "created_by": "organizer",
        "start_date": "2024-06-01", "end_date": "2024-06-30",
        "candidate_limit": 3,
    }
    body.update(overrides)
    return await client.post("/api/v1/events", json=body)


async def test_rank_candidates(client, availability):
    res = await client.post(
        "/api/v1/scopes/guild-1/candidates",
        json={
            "start_date": "2024-06-01", "end_date": "2024-06-30",
            "limit": 3, "min_participants": 2,
        },
    )

    assert res.status_code == 200
    assert res.json() == [{
        "date": "2024-06-01", "count": 2, "member_ids": ["A", "B"],
        "tags": ["full_attendance", "weekend"],
    }]


async def test_candidate_limit_above_ceiling(client):
    res = await client.post(
        "/api/v1/scopes/guild-1/candidates",
        json={"start_date": "2024-06-01", "end_date": "2024-06-30", "limit": 1000},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_LIMIT"


async def test_candidate_limit_required(client):
    res = await client.post(
        "/api/v1/scopes/guild-1/candidates",
        json={"start_date": "2024-06-01", "end_date": "2024-06-30"},
    )
    assert res.status_code == 400


async def test_create_event(client, availability):
    res = await _create_event(client, max_participants=2, required_members=["B"])

    assert res.status_code == 201
    body = res.json()
    assert body["event"]["status"] == "planning"
    assert body["event"]["required_members"] == ["B"]
    assert [c["date"] for c in body["candidates"]] == ["2024-06-01"]


async def test_create_event_without_range_uses_next_month(client):
    res = await _create_event(client, start_date=None, end_date=None)
    assert res.status_code == 201
    assert res.json()["candidates"] == []


async def test_get_event_not_found(client):
    res = await client.get(f"/api/v1/events/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_confirm_once_then_conflict(client):
    event_id = (await _create_event(client)).json()["event"]["id"]

    first = await client.post(f"/api/v1/events/{event_id}/confirm", json={"date": "2024-06-01"})
    second = await client.post(f"/api/v1/events/{event_id}/confirm", json={"date": "2024-06-02"})

    assert first.status_code == 200
    assert first.json()["status"] == "confirmed"
    assert first.json()["scheduled_date"] == "2024-06-01"
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "EVENT_NOT_PLANNING"


async def test_join_waitlist_and_promotion(client):
    event_id = (await _create_event(client, max_participants=1)).json()["event"]["id"]

    x = await client.post(f"/api/v1/events/{event_id}/participants/X")
    y = await client.post(f"/api/v1/events/{event_id}/participants/Y")
    cancel = await client.delete(f"/api/v1/events/{event_id}/participants/X")
    roster = await client.get(f"/api/v1/events/{event_id}/roster")

    assert x.json()["outcome"] == "confirmed"
    assert y.json()["outcome"] == "waitlisted"
    assert cancel.status_code == 200
    assert cancel.json()["outcome"] == "promoted"
    assert cancel.json()["promoted_member_id"] == "Y"
    assert [e["member_id"] for e in roster.json()["confirmed"]] == ["Y"]
    assert roster.json()["waitlisted"] == []


async def test_join_unknown_event_reports_outcome(client):
    res = await client.post(f"/api/v1/events/{uuid4()}/participants/X")
    assert res.status_code == 200
    assert res.json()["outcome"] == "event_not_found"


async def test_cancel_without_record_reports_outcome(client):
    res = await client.delete(f"/api/v1/events/{uuid4()}/participants/X")
    assert res.status_code == 200
    assert res.json()["outcome"] == "not_found"


async def test_get_event_includes_counts(client):
    event_id = (await _create_event(client, max_participants=1)).json()["event"]["id"]
    await client.post(f"/api/v1/events/{event_id}/participants/X")
    await client.post(f"/api/v1/events/{event_id}/participants/Y")

    body = (await client.get(f"/api/v1/events/{event_id}")).json()

    assert (body["confirmed_count"], body["waitlisted_count"]) == (1, 1)


async def test_list_scope_events(client):
    await _create_event(client, title="First")
    await _create_event(client, title="Other scope", scope_id="guild-2")

    res = await client.get("/api/v1/scopes/guild-1/events")

    assert [e["title"] for e in res.json()] == ["First"]
    archived = await client.get("/api/v1/scopes/guild-1/events", params={"archived": True})
    assert archived.json() == []


async def test_delete_event(client):
    event_id = (await _create_event(client)).json()["event"]["id"]
    await client.post(f"/api/v1/events/{event_id}/participants/X")

    res = await client.delete(f"/api/v1/events/{event_id}")

    assert res.status_code == 204
    assert (await client.get(f"/api/v1/events/{event_id}")).status_code == 404


async def test_archive_sweep(client):
    event_id = (await _create_event(client)).json()["event"]["id"]
    await client.post(f"/api/v1/events/{event_id}/confirm", json={"date": "2024-06-01"})

    res = await client.post("/api/v1/maintenance/archive", json={"today": "2024-06-02"})

    assert res.json() == {"archived": 1}
    listed = await client.get("/api/v1/scopes/guild-1/events", params={"archived": True})
    assert [e["id"] for e in listed.json()] == [event_id]


async def test_ledger_busy_is_503(client, locks):
    event_id = (await _create_event(client, max_participants=1)).json()["event"]["id"]
    locks.timeout_seconds = 0.01

    async with locks.hold(UUID(event_id)):
        res = await client.post(f"/api/v1/events/{event_id}/participants/X")

    assert res.status_code == 503
    assert res.json()["error"]["code"] == "LEDGER_BUSY"
    assert res.json()["error"]["retryable"] is True
