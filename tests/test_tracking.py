"""Test mood and water tracking."""

from sqlalchemy.orm import Session

from mindhaven import models

DAY = "2026-01-15"


# ============================================================================
# MOODS
# ============================================================================


def test_log_mood_normalizes_case(client, make_user):
    _, headers = make_user()
    response = client.post("/api/moods", json={"mood": "Happy", "note": "sunny", "intensity": 4}, headers=headers)
    assert response.status_code == 201
    body = response.json()
    assert body["mood"] == "happy"
    assert body["mood_intensity"] == 4


def test_log_mood_validation(client, make_user):
    """Missing, unknown or out-of-range values are rejected."""
    _, headers = make_user()
    response = client.post("/api/moods", json={}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Mood value is required."

    response = client.post("/api/moods", json={"mood": "elated"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid mood value: elated.")

    response = client.post("/api/moods", json={"mood": "sad", "intensity": 6}, headers=headers)
    assert response.status_code == 400


def test_list_moods_oldest_first(client, make_user):
    _, headers = make_user()
    for mood in ("sad", "neutral", "happy"):
        client.post("/api/moods", json={"mood": mood}, headers=headers)
    logs = client.get("/api/moods", headers=headers).json()
    assert [log["mood"] for log in logs] == ["sad", "neutral", "happy"]
    assert all(log["mood_intensity"] == 3 for log in logs)


def test_mood_summary_is_per_user(client, make_user):
    """Summary counts only the caller's logs."""
    _, headers = make_user()
    _, other_headers = make_user()
    client.post("/api/moods", json={"mood": "happy", "intensity": 5}, headers=headers)
    client.post("/api/moods", json={"mood": "happy", "intensity": 3}, headers=headers)
    client.post("/api/moods", json={"mood": "sad", "intensity": 1}, headers=headers)
    client.post("/api/moods", json={"mood": "angry"}, headers=other_headers)

    body = client.get("/api/moods/summary", headers=headers).json()
    assert body["total_entries"] == 3
    assert body["average_mood_score"] == 3.0
    assert body["mood_counts"] == {"happy": 2, "sad": 1}


def test_empty_mood_summary(client, make_user):
    _, headers = make_user()
    body = client.get("/api/moods/summary", headers=headers).json()
    assert body == {"total_entries": 0, "average_mood_score": None, "mood_counts": {}}


# ============================================================================
# WATER
# ============================================================================


def test_progress_without_logs(client, make_user):
    """A new user starts at zero against the signup goal."""
    _, headers = make_user()
    body = client.get("/api/water/progress", params={"date": DAY}, headers=headers).json()
    assert body == {"date": DAY, "goal": 2000, "current": 0, "percentage": 0, "remaining": 2000}


def test_log_water_updates_progress(client, make_user):
    _, headers = make_user()
    response = client.post("/api/water/logs", json={"amount_ml": 500, "date": DAY}, headers=headers)
    assert response.status_code == 201
    body = response.json()
    assert body["log"]["amount_ml"] == 500
    assert body["log"]["log_date"] == DAY
    assert body["progress"] == {"date": DAY, "goal": 2000, "current": 500, "percentage": 25, "remaining": 1500}


def test_progress_caps_at_goal(client, make_user):
    """Percentage stops at 100 and remaining never goes negative."""
    _, headers = make_user()
    client.post("/api/water/logs", json={"amount_ml": 1500, "date": DAY}, headers=headers)
    client.post("/api/water/logs", json={"amount_ml": 1500, "date": DAY}, headers=headers)
    body = client.get("/api/water/progress", params={"date": DAY}, headers=headers).json()
    assert body["current"] == 3000
    assert body["percentage"] == 100
    assert body["remaining"] == 0


def test_progress_is_per_day(client, make_user):
    _, headers = make_user()
    client.post("/api/water/logs", json={"amount_ml": 250, "date": "2026-01-14"}, headers=headers)
    body = client.get("/api/water/progress", params={"date": DAY}, headers=headers).json()
    assert body["current"] == 0


def test_log_water_validation(client, make_user):
    _, headers = make_user()
    for payload in ({}, {"amount_ml": 0}, {"amount_ml": -100}):
        response = client.post("/api/water/logs", json=payload, headers=headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Valid amount_ml is required"


def test_water_goal(client, make_user):
    _, headers = make_user()
    assert client.get("/api/water/goal", headers=headers).json() == {"goal": 2000}

    response = client.put("/api/water/goal", json={"goal_ml": 2500}, headers=headers)
    assert response.status_code == 200
    assert client.get("/api/water/goal", headers=headers).json() == {"goal": 2500}

    assert client.put("/api/water/goal", json={"goal_ml": 0}, headers=headers).status_code == 400


def test_fallback_goal_when_unset(client, make_user, db: Session):
    """Users without a recorded goal get the fallback goal."""
    user_id, headers = make_user()
    db.query(models.User).filter(models.User.user_id == user_id).update({"water_goal_ml": None})
    db.commit()
    assert client.get("/api/water/goal", headers=headers).json() == {"goal": 3700}


def test_detailed_logs(client, make_user):
    _, headers = make_user()
    client.post("/api/water/logs", json={"amount_ml": 200, "date": DAY}, headers=headers)
    client.post("/api/water/logs", json={"amount_ml": 300, "date": DAY}, headers=headers)
    logs = client.get("/api/water/logs/detailed", params={"date": DAY}, headers=headers).json()["logs"]
    assert [log["amount_ml"] for log in logs] == [200, 300]
    assert all(0 <= log["hour"] < 24 and 0 <= log["minute"] < 60 for log in logs)
