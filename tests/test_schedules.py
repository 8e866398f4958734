"""Schedule API tests covering every schedule type."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _medication_url(client: AsyncClient, headers: dict[str, str]) -> str:
    person = await client.post(
        "/api/v1/people", json={"first_name": "Kim", "last_name": "Lee"}, headers=headers
    )
    medication = await client.post(
        "/api/v1/medications",
        json={"person_id": person.json()["id"], "name": "Metformin", "dosage": "500mg"},
        headers=headers,
    )
    assert medication.status_code == 201
    return f"/api/v1/medications/{medication.json()['id']}/schedules"


async def _create(client: AsyncClient, headers: dict[str, str], url: str, payload: dict) -> dict:
    response = await client.post(url, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_daily_schedule(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    schedule = await _create(
        client, headers, url, {"schedule_type": "daily", "times_of_day": [1200, 480]}
    )
    assert schedule["schedule_type"] == "Daily"
    assert schedule["times_of_day"] == [480, 1200]
    assert schedule["description"] == "Daily at 8:00 AM, 8:00 PM"
    assert schedule["configuration_issue"] is None

    due = await client.get(
        f"{url}/{schedule['id']}/due", params={"at": "2024-01-08T08:10:00"}, headers=headers
    )
    assert due.status_code == 200
    assert due.json()["is_due"] is True
    assert due.json()["next_dose_at"] == "2024-01-08T20:00:00"

    later = await client.get(
        f"{url}/{schedule['id']}/next-dose",
        params={"at": "2024-01-08T21:00:00"},
        headers=headers,
    )
    assert later.json()["is_due"] is False
    assert later.json()["next_dose_at"] == "2024-01-09T08:00:00"


async def test_daily_schedule_without_times_is_flagged(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    schedule = await _create(client, headers, url, {"schedule_type": "Daily"})
    assert schedule["description"] == "Daily (no times specified)"
    assert schedule["configuration_issue"] == "no times of day configured"
    assert schedule["next_dose_at"] is None


async def test_interval_schedule(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    schedule = await _create(
        client,
        headers,
        url,
        {
            "schedule_type": "Interval",
            "interval_amount": 6,
            "interval_unit": "hours",
            "start_at": "2024-01-01T06:00:00",
        },
    )
    assert schedule["description"] == "Every 6 hour(s)"
    assert schedule["start_at"] == "2024-01-01T06:00:00"

    nxt = await client.get(
        f"{url}/{schedule['id']}/next-dose",
        params={"at": "2024-01-01T07:00:00"},
        headers=headers,
    )
    assert nxt.json()["next_dose_at"] == "2024-01-01T12:00:00"

    before = await client.get(
        f"{url}/{schedule['id']}/due", params={"at": "2024-01-01T11:45:00"}, headers=headers
    )
    assert before.json()["is_due"] is True

    exact = await client.get(
        f"{url}/{schedule['id']}/due", params={"at": "2024-01-01T12:00:00"}, headers=headers
    )
    assert exact.json()["is_due"] is False
    assert exact.json()["next_dose_at"] == "2024-01-01T18:00:00"


async def test_interval_start_is_stored_as_household_time(
    app_context: dict[str, object],
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    schedule = await _create(
        client,
        headers,
        url,
        {
            "schedule_type": "Interval",
            "interval_amount": 1,
            "interval_unit": "Days",
            "start_at": "2024-01-01T06:00:00+02:00",
        },
    )
    assert schedule["start_at"] == "2024-01-01T04:00:00"
    assert schedule["description"] == "Every 1 day(s)"


async def test_interval_with_unknown_unit_never_fires(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    schedule = await _create(
        client,
        headers,
        url,
        {
            "schedule_type": "Interval",
            "interval_amount": 2,
            "interval_unit": "Fortnights",
            "start_at": "2024-01-01T06:00:00",
        },
    )
    assert schedule["configuration_issue"] == "unknown interval unit 'Fortnights'"
    assert schedule["next_dose_at"] is None

    due = await client.get(
        f"{url}/{schedule['id']}/due", params={"at": "2024-01-01T06:00:00"}, headers=headers
    )
    assert due.json()["is_due"] is False


async def test_weekly_schedule(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    schedule = await _create(
        client,
        headers,
        url,
        {"schedule_type": "Weekly", "days_of_week": ["wednesday", "Monday"], "time_of_day": 540},
    )
    assert schedule["days_of_week"] == ["Wednesday", "Monday"]
    assert schedule["description"] == "Weekly on Wednesday, Monday at 9:00 AM"

    # 2024-01-08 is a Monday.
    due = await client.get(
        f"{url}/{schedule['id']}/due", params={"at": "2024-01-08T09:10:00"}, headers=headers
    )
    assert due.json()["is_due"] is True

    nxt = await client.get(
        f"{url}/{schedule['id']}/next-dose",
        params={"at": "2024-01-08T10:00:00"},
        headers=headers,
    )
    assert nxt.json()["is_due"] is False
    assert nxt.json()["next_dose_at"] == "2024-01-10T09:00:00"


async def test_as_needed_schedule_and_doses(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    schedule = await _create(
        client, headers, url, {"schedule_type": "AsNeeded", "minimum_hours_between_doses": 4}
    )
    assert schedule["description"] == "As needed (minimum 4 hours between doses)"
    assert schedule["last_dose_at"] is None

    recorded = await client.post(
        f"{url}/{schedule['id']}/doses",
        json={"taken_at": "2024-01-08T08:00:00"},
        headers=headers,
    )
    assert recorded.status_code == 200
    assert recorded.json()["last_dose_at"] == "2024-01-08T08:00:00"

    too_soon = await client.get(
        f"{url}/{schedule['id']}/due", params={"at": "2024-01-08T10:00:00"}, headers=headers
    )
    assert too_soon.json()["is_due"] is False
    assert too_soon.json()["next_dose_at"] == "2024-01-08T12:00:00"

    allowed = await client.get(
        f"{url}/{schedule['id']}/due", params={"at": "2024-01-08T12:30:00"}, headers=headers
    )
    assert allowed.json()["is_due"] is True
    assert allowed.json()["next_dose_at"] is None


async def test_rejects_invalid_schedules(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    unknown = await client.post(url, json={"schedule_type": "Monthly"}, headers=headers)
    assert unknown.status_code == 400
    assert unknown.json()["detail"] == "Unknown schedule type: Monthly"

    foreign = await client.post(
        url, json={"schedule_type": "Daily", "interval_amount": 3}, headers=headers
    )
    assert foreign.status_code == 400
    assert foreign.json()["detail"] == "interval_amount cannot be set on a Daily schedule"

    weekday = await client.post(
        url, json={"schedule_type": "Weekly", "days_of_week": ["Funday"]}, headers=headers
    )
    assert weekday.status_code == 400
    assert weekday.json()["detail"] == "Unknown day of week: Funday"

    blank = await client.post(url, json={"schedule_type": ""}, headers=headers)
    assert blank.status_code == 422

    listed = await client.get(url, headers=headers)
    assert listed.json() == []


async def test_record_dose_requires_as_needed(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)
    schedule = await _create(
        client, headers, url, {"schedule_type": "Daily", "times_of_day": [480]}
    )

    response = await client.post(f"{url}/{schedule['id']}/doses", headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Doses can only be recorded on as-needed schedules"


async def test_update_schedule(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)
    schedule = await _create(
        client, headers, url, {"schedule_type": "Daily", "times_of_day": [480]}
    )

    response = await client.patch(
        f"{url}/{schedule['id']}",
        json={"times_of_day": [420, 1140], "notes": "With food"},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["description"] == "Daily at 7:00 AM, 7:00 PM"
    assert body["notes"] == "With food"

    paused = await client.patch(
        f"{url}/{schedule['id']}", json={"is_active": False}, headers=headers
    )
    assert paused.json()["is_active"] is False
    assert paused.json()["next_dose_at"] is None
    due = await client.get(
        f"{url}/{schedule['id']}/due", params={"at": "2024-01-08T07:00:00"}, headers=headers
    )
    assert due.json()["is_due"] is False

    foreign = await client.patch(
        f"{url}/{schedule['id']}", json={"time_of_day": 600}, headers=headers
    )
    assert foreign.status_code == 400


async def test_delete_and_active_listing(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)
    kept = await _create(
        client, headers, url, {"schedule_type": "Daily", "times_of_day": [480]}
    )
    paused = await _create(
        client, headers, url, {"schedule_type": "AsNeeded", "is_active": False}
    )
    removed = await _create(
        client, headers, url, {"schedule_type": "Weekly", "days_of_week": ["Friday"]}
    )

    response = await client.delete(f"{url}/{removed['id']}", headers=headers)
    assert response.status_code == 204
    missing = await client.get(f"{url}/{removed['id']}", headers=headers)
    assert missing.status_code == 404

    listed = await client.get(url, headers=headers)
    assert [s["id"] for s in listed.json()] == [kept["id"], paused["id"]]

    active = await client.get("/api/v1/schedules/active", headers=headers)
    assert [s["id"] for s in active.json()] == [kept["id"]]

    outsider = await client.get(
        "/api/v1/schedules/active", headers=app_context["outsider_headers"]
    )
    assert outsider.json() == []
    hidden = await client.get(url, headers=app_context["outsider_headers"])
    assert hidden.status_code == 404


async def test_rejects_times_outside_the_day(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["headers"]
    url = await _medication_url(client, headers)

    daily = await client.post(
        url, json={"schedule_type": "Daily", "times_of_day": [1500, -3]}, headers=headers
    )
    assert daily.status_code == 422

    weekly = await client.post(
        url,
        json={"schedule_type": "Weekly", "days_of_week": ["Monday"], "time_of_day": -30},
        headers=headers,
    )
    assert weekly.status_code == 422

    schedule = await _create(
        client, headers, url, {"schedule_type": "Daily", "times_of_day": [1439]}
    )
    assert schedule["description"] == "Daily at 11:59 PM"
    patched = await client.patch(
        f"{url}/{schedule['id']}", json={"times_of_day": [1440]}, headers=headers
    )
    assert patched.status_code == 422

    listed = await client.get(url, headers=headers)
    assert [s["times_of_day"] for s in listed.json()] == [[1439]]
