from datetime import date

import pytest

from app.models.achievement import Achievement


def create(client, payload, **overrides):
    body = {**payload, **overrides}
    response = client.post("/api/achievements", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_returns_camel_case_object(client, achievement_payload):
    created = create(client, achievement_payload)

    assert created["id"]
    assert created["date"] == "2024-03-10"
    assert created["title"] == "First steps"
    assert created["description"] == "Walked from the sofa to the table"
    assert created["ageAtEvent"] == {"years": 1, "months": 1, "days": 26}
    assert created["tags"] == ["walking", "milestone"]
    assert created["photo"] is None
    assert "createdAt" in created and "updatedAt" in created
    assert "age_years" not in created


def test_create_then_list_round_trip(client, achievement_payload):
    created = create(client, achievement_payload)

    listed = client.get("/api/achievements").json()
    assert len(listed) == 1
    for key in ("id", "date", "title", "tags", "ageAtEvent"):
        assert listed[0][key] == created[key]


def test_create_defaults_optional_fields(client):
    created = create(client, {
        "date": "2024-01-01",
        "title": "Smiled",
        "ageAtEvent": {"years": 0, "months": 2, "days": 0},
    })
    assert created["description"] is None
    assert created["tags"] == []
    assert created["photo"] is None


def test_create_accepts_photo_url(client, achievement_payload):
    created = create(client, achievement_payload, photoUrl="https://example.com/a.jpg")
    assert created["photo"] == "https://example.com/a.jpg"


def test_create_drops_empty_tags(client, achievement_payload):
    created = create(client, achievement_payload, tags=["a", "", "  ", "b"])
    assert created["tags"] == ["a", "b"]


def test_create_requires_date_and_title(client, achievement_payload):
    for missing in ("date", "title"):
        body = {k: v for k, v in achievement_payload.items() if k != missing}
        response = client.post("/api/achievements", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Date and title are required"

    response = client.post("/api/achievements", json={**achievement_payload, "title": "   "})
    assert response.status_code == 400


def test_create_requires_age_at_event(client, achievement_payload):
    body = {k: v for k, v in achievement_payload.items() if k != "ageAtEvent"}
    response = client.post("/api/achievements", json=body)
    assert response.status_code == 400
    assert response.json()["detail"] == "Age at event is required"

    response = client.post("/api/achievements", json={**achievement_payload, "ageAtEvent": None})
    assert response.status_code == 400


def test_create_rejects_partial_age(client, achievement_payload):
    response = client.post("/api/achievements", json={
        **achievement_payload,
        "ageAtEvent": {"years": 1, "months": 2},
    })
    assert response.status_code == 400
    assert "ageAtEvent.days" in response.json()["detail"]


@pytest.mark.parametrize("age", [
    {"years": "1", "months": True, "days": 2.0},
    {"years": "1", "months": 1, "days": 2},
    {"years": 1, "months": True, "days": 2},
    {"years": 1, "months": 1, "days": 2.0},
])
def test_create_rejects_non_integer_age(client, achievement_payload, age):
    response = client.post("/api/achievements", json={**achievement_payload, "ageAtEvent": age})
    assert response.status_code == 400
    assert "ageAtEvent" in response.json()["detail"]
    assert client.get("/api/achievements").json() == []


def test_create_accepts_long_title(client, achievement_payload):
    title = "Said a very long sentence " * 20
    created = create(client, achievement_payload, title=title)
    assert created["title"] == title.strip()


def test_create_rejects_malformed_date(client, achievement_payload):
    response = client.post("/api/achievements", json={**achievement_payload, "date": "2024-02-31"})
    assert response.status_code == 400


def test_list_orders_by_date_descending(client, achievement_payload):
    for day in ("2024-01-01", "2024-03-01", "2024-02-01"):
        create(client, achievement_payload, date=day, title=day)

    dates = [item["date"] for item in client.get("/api/achievements").json()]
    assert dates == ["2024-03-01", "2024-02-01", "2024-01-01"]


def test_list_breaks_ties_by_newest_created(client, achievement_payload):
    first = create(client, achievement_payload, title="first")
    second = create(client, achievement_payload, title="second")

    ids = [item["id"] for item in client.get("/api/achievements").json()]
    assert ids == [second["id"], first["id"]]


def test_partial_stored_age_is_presented_as_null(client, db_session):
    db_session.add(Achievement(
        id="legacy",
        date=date(2023, 5, 5),
        title="Legacy row",
        age_years=1,
        age_months=None,
        age_days=3,
        tags=None,
    ))
    db_session.commit()

    item = client.get("/api/achievements").json()[0]
    assert item["id"] == "legacy"
    assert item["ageAtEvent"] is None
    assert item["tags"] == []


def test_update_replaces_all_fields(client, achievement_payload):
    created = create(client, achievement_payload, photoUrl="https://example.com/old.jpg")

    response = client.put(f"/api/achievements/{created['id']}", json={
        "date": "2024-04-01",
        "title": "Ran",
        "ageAtEvent": {"years": 1, "months": 2, "days": 17},
        "tags": ["running"],
    })
    assert response.status_code == 200
    updated = response.json()
    assert updated["id"] == created["id"]
    assert updated["date"] == "2024-04-01"
    assert updated["title"] == "Ran"
    assert updated["description"] is None
    assert updated["ageAtEvent"] == {"years": 1, "months": 2, "days": 17}
    assert updated["tags"] == ["running"]
    assert updated["photo"] is None
    assert updated["updatedAt"] >= created["updatedAt"]


def test_update_unknown_id_is_not_found(client, achievement_payload):
    response = client.put("/api/achievements/missing", json=achievement_payload)
    assert response.status_code == 404
    assert response.json()["detail"] == "Achievement not found"


def test_update_rejects_invalid_age(client, achievement_payload):
    created = create(client, achievement_payload)
    response = client.put(f"/api/achievements/{created['id']}", json={
        **achievement_payload,
        "ageAtEvent": {"years": "one", "months": 0, "days": 0},
    })
    assert response.status_code == 400


def test_delete_then_delete_again_is_not_found(client, achievement_payload):
    created = create(client, achievement_payload)

    response = client.delete(f"/api/achievements/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Achievement deleted successfully", "id": created["id"]}

    for _ in range(2):
        response = client.delete(f"/api/achievements/{created['id']}")
        assert response.status_code == 404

    assert client.get("/api/achievements").json() == []


def test_delete_removes_photo_object(client, storage, achievement_payload):
    created = create(client, achievement_payload)
    uploaded = client.post(
        f"/api/achievements/{created['id']}/photo",
        files={"photo": ("steps.jpg", b"\xff\xd8\xff\xe0data", "image/jpeg")},
    ).json()

    client.delete(f"/api/achievements/{created['id']}")
    assert storage.deleted == [uploaded["photo"]]


def test_upload_photo_attaches_url(client, storage, achievement_payload):
    created = create(client, achievement_payload)

    response = client.post(
        f"/api/achievements/{created['id']}/photo",
        files={"photo": ("steps.jpg", b"\xff\xd8\xff\xe0data", "image/jpeg")},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["photo"] in storage.objects
    assert body["title"] == "First steps"
    assert body["ageAtEvent"] == created["ageAtEvent"]


def test_upload_photo_without_file(client, achievement_payload):
    created = create(client, achievement_payload)
    response = client.post(f"/api/achievements/{created['id']}/photo")
    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"


def test_upload_photo_unknown_achievement(client, storage):
    response = client.post(
        "/api/achievements/missing/photo",
        files={"photo": ("steps.jpg", b"data", "image/jpeg")},
    )
    assert response.status_code == 404
    assert storage.objects == {}


def test_upload_photo_too_large(client, storage, achievement_payload):
    created = create(client, achievement_payload)
    response = client.post(
        f"/api/achievements/{created['id']}/photo",
        files={"photo": ("big.jpg", b"x" * (5 * 1024 * 1024 + 1), "image/jpeg")},
    )
    assert response.status_code == 413
    assert storage.objects == {}


def test_delete_photo(client, storage, achievement_payload):
    created = create(client, achievement_payload)
    uploaded = client.post(
        f"/api/achievements/{created['id']}/photo",
        files={"photo": ("steps.jpg", b"data", "image/jpeg")},
    ).json()

    response = client.delete(f"/api/achievements/{created['id']}/photo")
    assert response.status_code == 200
    assert response.json()["photo"] is None
    assert storage.deleted == [uploaded["photo"]]

    response = client.delete(f"/api/achievements/{created['id']}/photo")
    assert response.status_code == 404
    assert response.json()["detail"] == "Photo not found"


def test_delete_photo_unknown_achievement(client):
    response = client.delete("/api/achievements/missing/photo")
    assert response.status_code == 404
    assert response.json()["detail"] == "Achievement not found"


def test_cors_preflight(client):
    response = client.options(
        "/api/achievements",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "DELETE",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
