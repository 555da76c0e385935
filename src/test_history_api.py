"""Tests for history API endpoints."""

from typedefs import Exercise, LogEntry, SetEntry


def finish_workout(client, routine, weights, rating=3):
    """Run a whole workout through the API, logging one weight per set."""
    client.post("/api/v1/navigate", json={"view": "home"})
    client.post("/api/v1/session/start", json={"routine_id": routine.id})
    exercise = routine.exercises[0]
    for index, weight in enumerate(weights):
        if index >= 3:
            client.post(f"/api/v1/session/exercises/{exercise.id}/sets")
        client.patch(
            f"/api/v1/session/exercises/{exercise.id}/sets/{index}",
            json={"field": "weight", "value": weight},
        )
    client.post("/api/v1/session/finish")
    client.patch("/api/v1/session/finish", json={"rating": rating})
    return client.post("/api/v1/session/save").json()


def test_history_empty(client):
    response = client.get("/api/v1/history")
    assert response.status_code == 200
    assert response.json() == []


def test_history_summaries(client, controller, leg_day, clock):
    controller.routines.add(leg_day)
    first = finish_workout(client, leg_day, ["100", "110", "105"], rating=3)
    clock.advance(days=2)
    second = finish_workout(client, leg_day, ["abc", "", "120", "120"], rating=5)

    data = client.get("/api/v1/history").json()

    assert [log["id"] for log in data] == [second["id"], first["id"]]
    assert data[0]["rating"] == 5
    assert data[0]["exercises"] == [
        {
            "exercise_id": leg_day.exercises[0].id,
            "name": "Squat",
            "set_count": 4,
            "best_weight": "120",
        }
    ]
    assert data[1]["exercises"][0]["best_weight"] == "110"
    assert data[1]["exercises"][0]["set_count"] == 3


def test_history_pagination(client, controller):
    for i in range(4):
        controller.logs.record(
            LogEntry(
                routine_id="r",
                routine_name=f"Session {i}",
                date="2025-12-01T10:00:00+00:00",
                duration_ms=0,
                entries={},
                exercises=[],
            )
        )

    data = client.get("/api/v1/history?skip=1&limit=2").json()
    assert [log["routine_name"] for log in data] == ["Session 2", "Session 1"]


def test_history_placeholder_for_empty_weights(client, controller):
    controller.logs.record(
        LogEntry(
            routine_id="r",
            routine_name="Bodyweight",
            date="2025-12-01T10:00:00+00:00",
            duration_ms=0,
            entries={"pushups": [SetEntry(reps="20"), SetEntry(reps="15")]},
            exercises=[Exercise(id="pushups", name="Push-ups", sets="2")],
        )
    )

    (summary,) = client.get("/api/v1/history").json()
    assert summary["exercises"][0]["best_weight"] == "0"


def test_get_log(client, controller, leg_day):
    controller.routines.add(leg_day)
    log = finish_workout(client, leg_day, ["60"])

    response = client.get(f"/api/v1/history/{log['id']}")
    assert response.status_code == 200
    assert response.json() == log


def test_get_log_not_found(client):
    response = client.get("/api/v1/history/missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "Log not found"
