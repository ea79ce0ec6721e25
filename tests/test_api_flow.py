"""End-to-end API flow: a nutritionist builds a plan and the client reads it."""
import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def _register(client, role):
    tag = uuid.uuid4().hex[:8]
    res = client.post("/api/users", json={"name": f"{role} {tag}", "email": f"{tag}@example.com", "role": role})
    user = res.json()
    return user["id"], {"X-User-Id": str(user["id"])}


def test_plan_totals_follow_food_edits(client):
    _, staff = _register(client, "nutritionist")
    client_user_id, client_headers = _register(client, "client")

    res = client.post("/api/clients", headers=staff, json={
        "user_id": client_user_id, "height": 168, "weight": 70, "weight_goal": "lose"})
    assert res.status_code == 201
    client_id = res.json()["id"]

    res = client.post("/api/foods", headers=staff, json={
        "name": f"Flow Chicken {uuid.uuid4().hex[:6]}", "category": "protein",
        "calories": 165, "protein": 31, "carbs": 0, "fat": 3.6, "serving_size": 100})
    food_id = res.json()["id"]

    meal = {"type": "lunch", "time": "13:00", "foods": [{"food_id": food_id, "quantity": 150}]}
    res = client.post("/api/nutrition-plans/preview", headers=staff, json={"meals": [meal, {"type": "dinner"}]})
    assert res.json()["day_display"]["calories"] == 248

    res = client.post("/api/nutrition-plans", headers=staff, json={
        "client_id": client_id, "title": "Lean month", "start_date": "2026-01-05",
        "daily_plans": [{"day": 1, "meals": [meal]}]})
    assert res.status_code == 201
    plan = res.json()
    assert plan["daily_plans"][0]["total_calories"] == 248
    assert plan["daily_plans"][0]["meals"][0]["totals"]["fat"] == 5.4

    client.patch(f"/api/foods/{food_id}", headers=staff, json={"calories": 100})
    res = client.get("/api/nutrition-plans/mine", headers=client_headers)
    assert res.status_code == 200
    assert [p["id"] for p in res.json()] == [plan["id"]]
    assert res.json()[0]["daily_plans"][0]["total_calories"] == 150

    res = client.patch(f"/api/nutrition-plans/{plan['id']}", headers=client_headers, json={"title": "Mine"})
    assert res.status_code == 403


def test_unknown_food_in_plan_is_400(client):
    _, staff = _register(client, "nutritionist")
    client_user_id, _ = _register(client, "client")
    client_id = client.post("/api/clients", headers=staff, json={"user_id": client_user_id}).json()["id"]
    res = client.post("/api/nutrition-plans", headers=staff, json={
        "client_id": client_id, "title": "Broken", "start_date": "2026-01-05",
        "daily_plans": [{"day": 1, "meals": [{"type": "lunch", "foods": [{"food_id": 987654, "quantity": 1}]}]}]})
    assert res.status_code == 400
    assert res.json()["error"]["details"]["field"] == "daily_plans"


def test_csv_import_endpoint(client):
    _, staff = _register(client, "nutritionist")
    name = f"Imported Pear {uuid.uuid4().hex[:6]}"
    body = f"name,category,calories,protein,carbs,fat,serving_size\n{name},fruit,57,0.4,15,0.1,100\n"
    res = client.post("/api/foods/import", headers={**staff, "Content-Type": "text/csv"}, content=body)
    assert res.status_code == 200
    assert res.json()["added"] == 1
    found = client.get("/api/foods", headers=staff, params={"q": name}).json()
    assert [f["name"] for f in found] == [name]


def test_check_reminders_endpoint(client):
    _, headers = _register(client, "trainer")
    due = (datetime.utcnow() + timedelta(minutes=10)).isoformat()
    res = client.post("/api/reminders", headers=headers, json={
        "title": "Leg day", "message": "Bring your lifting shoes", "type": "workout", "reminder_at": due})
    assert res.status_code == 201

    res = client.post("/api/notifications/check-reminders", headers=headers)
    assert res.json()["created"] == 1
    assert res.json()["notifications"][0]["title"] == "Reminder: Leg day"
    assert client.post("/api/notifications/check-reminders", headers=headers).json()["created"] == 0

    listing = client.get("/api/notifications", headers=headers).json()
    assert listing["unread_count"] == 1


def test_library_and_follow_up_routes(client):
    _, staff = _register(client, "nutritionist")
    client_user_id, client_headers = _register(client, "client")
    client_id = client.post("/api/clients", headers=staff, json={"user_id": client_user_id}).json()["id"]

    res = client.post("/api/supplements", headers=staff, json={"name": f"Omega 3 {uuid.uuid4().hex[:6]}"})
    assert res.status_code == 201
    supplement_id = res.json()["id"]
    assert client.get(f"/api/supplements/{supplement_id}", headers=client_headers).status_code == 200

    plan = client.post("/api/nutrition-plans", headers=staff, json={
        "client_id": client_id, "title": "With fish oil", "start_date": "2026-02-02",
        "supplements": {"dinner": {"dose": "1 capsule", "supplement_id": supplement_id}},
        "daily_plans": [{"day": 1, "meals": [{"type": "dinner"}]}]}).json()

    res = client.post("/api/follow-ups", headers=staff, json={
        "client_id": client_id, "plan_id": plan["id"], "date": "2026-02-03", "mood": "normal",
        "completed_meals": [{"day": 1, "meal_type": "dinner"}]})
    assert res.status_code == 201
    listing = client.get("/api/follow-ups", headers=client_headers, params={"client_id": client_id}).json()
    assert [f["id"] for f in listing] == [res.json()["id"]]

    guide = client.post("/api/guides", headers=staff, json={
        "title": "Hydration basics", "description": "Water through the day",
        "file_url": "https://files.example.com/hydration.pdf"}).json()
    res = client.post(f"/api/guides/{guide['id']}/download", headers=client_headers)
    assert res.json()["download_count"] == 1
