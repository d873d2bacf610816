from datetime import datetime, timedelta, timezone


def activate(client, admin_header, user_id="fake-test-token"):
    r = client.patch(f"/admin/profiles/{user_id}/active", headers=admin_header, json={"is_active": True})
    assert r.status_code == 200, r.text
    return r.json()


def test_root_and_health(client):
    assert client.get("/").json()["service"] == "payping-backend"
    assert client.get("/health").json() == {"status": "healthy"}


def test_auth_validate(client, auth_header):
    r = client.post("/auth/validate", headers=auth_header)
    assert r.status_code == 200
    data = r.json()
    assert data["user_id"] == "fake-test-token"
    assert data["is_active"] is False


def test_missing_token_is_rejected(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/clients").status_code == 401


def test_me_reports_admin_role(client, auth_header, admin_header):
    assert client.get("/auth/me", headers=auth_header).json()["is_admin"] is False
    me = client.get("/auth/me", headers=admin_header).json()
    assert me["is_admin"] is True
    assert me["plan"] is None


def test_plans_are_public(client):
    r = client.get("/plans")
    assert r.status_code == 200
    plans = {p["id"]: p for p in r.json()["plans"]}
    assert plans["US"]["price"] == 29
    assert plans["EA"]["price"] == 10
    assert any(m["name"] == "M-Pesa" for m in plans["EA"]["payment_methods"])


def test_inactive_user_is_gated(client, auth_header):
    for path in ("/clients", "/reminders", "/dashboard"):
        r = client.get(path, headers=auth_header)
        assert r.status_code == 403, path


def test_activation_request_flow(client, auth_header, admin_header):
    body = {"plan_requested": "EA", "method": "M-Pesa", "reference": "QHX12ABC34", "amount": "10 USD"}
    r = client.post("/activation/requests", headers=auth_header, json=body)
    assert r.status_code == 201, r.text
    request_id = r.json()["id"]
    assert r.json()["status"] == "pending"

    mine = client.get("/activation/requests", headers=auth_header).json()["requests"]
    assert [req["id"] for req in mine] == [request_id]

    queue = client.get("/admin/activation-requests?status=pending", headers=admin_header).json()["requests"]
    assert queue[0]["profile"]["id"] == "fake-test-token"

    r = client.post(
        f"/admin/activation-requests/{request_id}/resolve", headers=admin_header, json={"decision": "approved"}
    )
    assert r.status_code == 200, r.text
    assert r.json()["request"]["status"] == "approved"
    assert r.json()["profile"]["plan"] == "EA"

    me = client.get("/auth/me", headers=auth_header).json()
    assert me["is_active"] is True
    assert me["activated_at"] is not None
    assert client.get("/clients", headers=auth_header).status_code == 200

    again = client.post(
        f"/admin/activation-requests/{request_id}/resolve", headers=admin_header, json={"decision": "rejected"}
    )
    assert again.status_code == 409


def test_blank_reference_is_bad_request(client, auth_header):
    body = {"plan_requested": "US", "method": "PayPal", "reference": "   ", "amount": "29"}
    r = client.post("/activation/requests", headers=auth_header, json=body)
    assert r.status_code == 400
    assert "reference" in r.json()["detail"]


def test_admin_routes_require_admin(client, auth_header):
    assert client.get("/admin/profiles", headers=auth_header).status_code == 403
    r = client.patch("/admin/profiles/fake-test-token/active", headers=auth_header, json={"is_active": True})
    assert r.status_code == 403
    assert client.post("/admin/activation-requests/req_x/resolve", headers=auth_header,
                       json={"decision": "approved"}).status_code == 403


def test_unknown_profile_and_request(client, admin_header):
    r = client.patch("/admin/profiles/nobody/plan", headers=admin_header, json={"plan": "US"})
    assert r.status_code == 404
    r = client.post("/admin/activation-requests/req_missing/resolve", headers=admin_header,
                    json={"decision": "approved"})
    assert r.status_code == 404


def test_client_and_reminder_flow(client, auth_header, admin_header):
    client.post("/auth/validate", headers=auth_header)
    activate(client, admin_header)

    r = client.post("/clients", headers=auth_header, json={"name": "Sarah Johnson", "contact": "+1234567890"})
    assert r.status_code == 201, r.text
    client_id = r.json()["id"]
    assert r.json()["contact_type"] == "phone"

    remind_at = (datetime.now(timezone.utc) + timedelta(minutes=5)).isoformat()
    r = client.post(
        "/reminders",
        headers=auth_header,
        json={"client_id": client_id, "remind_at": remind_at, "kind": "payment", "channel": "whatsapp"},
    )
    assert r.status_code == 201, r.text
    reminder = r.json()
    assert reminder["status"] == "pending"
    assert reminder["client"]["name"] == "Sarah Johnson"
    assert reminder["message"].startswith("Hi Sarah Johnson!")

    msg = client.get(f"/reminders/{reminder['id']}/message", headers=auth_header).json()
    assert msg == {"channel": "whatsapp", "contact": "+1234567890", "message": reminder["message"]}

    r = client.post(f"/reminders/{reminder['id']}/done", headers=auth_header)
    assert r.status_code == 200
    assert r.json()["status"] == "done"
    assert r.json()["bucket"] == "done"
    assert client.post(f"/reminders/{reminder['id']}/done", headers=auth_header).status_code == 409

    r = client.patch(f"/reminders/{reminder['id']}", headers=auth_header, json={"message": "Thanks!"})
    assert r.status_code == 200
    assert r.json()["status"] == "done"
    assert r.json()["message"] == "Thanks!"

    done = client.get("/reminders?view=done", headers=auth_header).json()
    assert done["total"] == 1

    r = client.delete(f"/clients/{client_id}", headers=auth_header)
    assert r.json() == {"ok": True}
    assert client.get("/reminders", headers=auth_header).json()["total"] == 0
    assert client.get(f"/reminders/{reminder['id']}", headers=auth_header).status_code == 404


def test_other_users_data_is_forbidden(client, auth_header, admin_header):
    activate(client, admin_header, "fake-admin-token")
    r = client.post("/clients", headers=admin_header, json={"name": "Admin's client", "contact": "a@b.co"})
    client_id = r.json()["id"]

    client.post("/auth/validate", headers=auth_header)
    activate(client, admin_header)
    assert client.get(f"/clients/{client_id}", headers=auth_header).status_code == 403
    assert client.get("/clients", headers=auth_header).json()["total"] == 0


def test_seed_and_dashboard(client, admin_header):
    client.post("/admin/demo", headers=admin_header)
    r = client.post("/admin/seed", headers=admin_header)
    assert r.status_code == 201, r.text
    assert r.json()["total"] == 3

    r = client.get("/dashboard?tz=Africa/Nairobi", headers=admin_header)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["total_clients"] == 3
    assert data["overdue"] >= 1
    assert len(data["overdue_items"]) <= 3
    assert len(data["today"]) <= 5

    assert client.get("/reminders", headers=admin_header).json()["total"] == 6
    assert client.get("/dashboard?tz=Nowhere/Else", headers=admin_header).status_code == 400


def test_bad_reminder_input(client, admin_header):
    client.post("/admin/demo", headers=admin_header)
    r = client.post("/reminders", headers=admin_header, json={"client_id": "cli_missing",
                                                                 "remind_at": "2024-01-15T10:00:00"})
    assert r.status_code == 404
    r = client.post("/reminders", headers=admin_header, json={"client_id": "x", "remind_at": "2024-01-15",
                                                                 "kind": "sms"})
    assert r.status_code == 422


def test_reminder_status_cannot_be_patched(client, admin_header):
    client.post("/admin/demo", headers=admin_header)
    client.post("/admin/seed", headers=admin_header)
    reminder = client.get("/reminders?view=today", headers=admin_header).json()["reminders"][0]
    r = client.patch(f"/reminders/{reminder['id']}", headers=admin_header, json={"status": "done"})
    assert r.status_code == 422
    assert client.get(f"/reminders/{reminder['id']}", headers=admin_header).json()["status"] == "pending"
