"""Tests for routine API endpoints."""

import pytest


@pytest.fixture
def created_routine(client):
    """Create a routine through the create-view endpoints."""
    client.post("/api/v1/routines/draft")
    client.patch(
        "/api/v1/routines/draft",
        json={"name": "Upper Body Strength", "description": "Compound pressing"},
    )
    client.post(
        "/api/v1/routines/draft/exercises",
        json={"name": "Bench Press", "sets": "4", "reps": "6-8"},
    )
    client.post(
        "/api/v1/routines/draft/exercises",
        json={"name": "Barbell Rows", "sets": "4", "reps": "8-10"},
    )
    response = client.post("/api/v1/routines")
    assert response.status_code == 201
    return response.json()


def test_list_routines_empty(client):
    response = client.get("/api/v1/routines")
    assert response.status_code == 200
    assert response.json() == []


def test_create_routine(client, created_routine):
    assert created_routine["name"] == "Upper Body Strength"
    assert created_routine["description"] == "Compound pressing"
    assert [
        (ex["name"], ex["sets"], ex["reps"]) for ex in created_routine["exercises"]
    ] == [("Bench Press", "4", "6-8"), ("Barbell Rows", "4", "8-10")]
    assert "id" in created_routine

    state = client.get("/api/v1/state").json()
    assert state["view"] == "home"
    assert state["draft"] == {"name": "", "description": "", "exercises": []}


def test_get_routine(client, created_routine):
    response = client.get(f"/api/v1/routines/{created_routine['id']}")
    assert response.status_code == 200
    assert response.json() == created_routine


def test_get_routine_not_found(client):
    response = client.get("/api/v1/routines/missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "Routine not found"


def test_list_routines_pagination(client, controller, leg_day, upper_body):
    controller.routines.add(leg_day)
    controller.routines.add(upper_body)

    data = client.get("/api/v1/routines").json()
    assert [r["name"] for r in data] == ["Leg Day", "Upper Body"]

    data = client.get("/api/v1/routines?skip=1&limit=1").json()
    assert [r["name"] for r in data] == ["Upper Body"]


def test_save_routine_without_name(client):
    client.post("/api/v1/routines/draft")
    client.post("/api/v1/routines/draft/exercises", json={"name": "Squat"})

    response = client.post("/api/v1/routines")
    assert response.status_code == 400
    assert response.json()["detail"] == "Routine name is required"


def test_save_routine_without_exercises(client):
    client.post("/api/v1/routines/draft")
    client.patch("/api/v1/routines/draft", json={"name": "Nothing"})

    response = client.post("/api/v1/routines")
    assert response.status_code == 400
    assert response.json()["detail"] == "Routine needs at least one exercise"


def test_add_exercise_requires_name(client):
    client.post("/api/v1/routines/draft")

    response = client.post("/api/v1/routines/draft/exercises", json={"name": ""})
    assert response.status_code == 400


def test_remove_draft_exercise(client):
    client.post("/api/v1/routines/draft")
    client.post("/api/v1/routines/draft/exercises", json={"name": "A"})
    client.post("/api/v1/routines/draft/exercises", json={"name": "B"})

    response = client.delete("/api/v1/routines/draft/exercises/0")
    assert response.status_code == 200
    assert [ex["name"] for ex in response.json()["exercises"]] == ["B"]

    response = client.delete("/api/v1/routines/draft/exercises/5")
    assert response.status_code == 404


def test_draft_edit_outside_create_view(client):
    response = client.patch("/api/v1/routines/draft", json={"name": "Nope"})
    assert response.status_code == 409


def test_close_draft(client):
    client.post("/api/v1/routines/draft")
    response = client.post("/api/v1/routines/draft/close")
    assert response.status_code == 204
    assert client.get("/api/v1/state").json()["view"] == "home"


def test_delete_routine_requires_confirmation(client, created_routine):
    response = client.delete(f"/api/v1/routines/{created_routine['id']}")
    assert response.status_code == 400

    response = client.get(f"/api/v1/routines/{created_routine['id']}")
    assert response.status_code == 200


def test_delete_routine(client, created_routine, storage):
    response = client.delete(f"/api/v1/routines/{created_routine['id']}?confirm=true")
    assert response.status_code == 204

    response = client.get(f"/api/v1/routines/{created_routine['id']}")
    assert response.status_code == 404
    assert storage.load_routines() == []


def test_delete_routine_not_found(client):
    response = client.delete("/api/v1/routines/missing?confirm=true")
    assert response.status_code == 404
    assert response.json()["detail"] == "Routine not found"
