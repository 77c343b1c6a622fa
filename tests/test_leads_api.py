from bson import ObjectId

from careerhq.services.automation_client import normalize_phone


def create_lead(client, **overrides) -> dict:
    payload = {
        "name": "Aarav Mehta",
        "email": "aarav@example.com",
        "phone": "9876543210",
        "country": "Canada",
        "program": "MBA",
        "status": "converted",
    }
    payload.update(overrides)
    response = client.post("/api/leads", json=payload)
    assert response.status_code == 201, response.json()
    return response.json()["lead"]


def test_normalize_phone() -> None:
    assert normalize_phone("9876543210") == "+919876543210"
    assert normalize_phone(" +919876543210 ") == "+919876543210"
    assert normalize_phone("5551234", prefix="+1") == "+15551234"


def test_public_can_submit_lead(client) -> None:
    lead = create_lead(client)
    # Status is never taken from the form
    assert lead["status"] == "new"
    assert lead["email"] == "aarav@example.com"


def test_lead_validation(client) -> None:
    assert client.post("/api/leads", json={"name": "A", "email": "not-an-email", "phone": "12345"}).status_code == 400
    assert client.post("/api/leads", json={"name": "A", "email": "a@example.com"}).status_code == 400


def test_listing_is_admin_only_and_paginated(client, admin_headers) -> None:
    create_lead(client)
    create_lead(client, name="Diya Rao", email="diya@example.com", program="Nursing")
    create_lead(client, name="Kabir Shah", email="kabir@example.com", program="MBA in Finance")

    assert client.get("/api/leads").status_code == 401

    body = client.get("/api/leads", params={"limit": 2}, headers=admin_headers).json()
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["limit"] == 2
    assert body["pages"] == 2
    assert len(body["leads"]) == 2

    mba = client.get("/api/leads", params={"search": "mba"}, headers=admin_headers).json()
    assert {lead["name"] for lead in mba["leads"]} == {"Aarav Mehta", "Kabir Shah"}


def test_status_update_and_filter(client, admin_headers) -> None:
    lead = create_lead(client)
    create_lead(client, name="Diya Rao", email="diya@example.com")

    response = client.patch(f"/api/leads/{lead['id']}", json={"status": "contacted"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["lead"]["status"] == "contacted"

    contacted = client.get("/api/leads", params={"status": "contacted"}, headers=admin_headers).json()
    assert [item["id"] for item in contacted["leads"]] == [lead["id"]]

    everyone = client.get("/api/leads", params={"status": "all"}, headers=admin_headers).json()
    assert everyone["total"] == 2

    invalid = client.patch(f"/api/leads/{lead['id']}", json={"status": "archived"}, headers=admin_headers)
    assert invalid.status_code == 400


def test_convert_submits_to_automation(client, admin_headers, automation) -> None:
    lead = create_lead(client)

    response = client.post(f"/api/leads/{lead['id']}/convert", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert automation.submitted == [
        {"name": "Aarav Mehta", "email": "aarav@example.com", "phone": "+919876543210"}
    ]

    leads = client.get("/api/leads", headers=admin_headers).json()["leads"]
    assert leads[0]["status"] == "converted"


def test_convert_failures(client, admin_headers, automation) -> None:
    assert client.post(f"/api/leads/{ObjectId()}/convert", headers=admin_headers).status_code == 404
    assert client.post("/api/leads/bogus/convert", headers=admin_headers).json()["detail"] == "Lead not found"

    lead = create_lead(client)
    automation.fail = True
    response = client.post(f"/api/leads/{lead['id']}/convert", headers=admin_headers)
    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to submit form"

    leads = client.get("/api/leads", headers=admin_headers).json()["leads"]
    assert leads[0]["status"] == "new"
