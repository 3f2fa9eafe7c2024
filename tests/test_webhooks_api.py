import uuid

from conftest import POLKA_KEY, bearer


def api_key(key=POLKA_KEY):
    return {"Authorization": f"ApiKey {key}"}


def upgrade_event(user_id, event="user.upgraded"):
    return {"event": event, "data": {"user_id": user_id}}


def test_upgrade(client, register, login):
    user = register()
    resp = client.post("/api/polka/webhooks", json=upgrade_event(user["id"]), headers=api_key())
    assert resp.status_code == 204
    assert login()["is_chirpy_red"] is True


def test_upgrade_is_idempotent(client, register, login):
    user = register()
    for _ in range(2):
        resp = client.post("/api/polka/webhooks", json=upgrade_event(user["id"]), headers=api_key())
        assert resp.status_code == 204
    assert login()["is_chirpy_red"] is True


def test_other_events_are_ignored(client, register, login):
    user = register()
    resp = client.post(
        "/api/polka/webhooks",
        json=upgrade_event(user["id"], event="user.payment_failed"),
        headers=api_key(),
    )
    assert resp.status_code == 204
    assert login()["is_chirpy_red"] is False


def test_bad_key(client, register):
    user = register()
    resp = client.post("/api/polka/webhooks", json=upgrade_event(user["id"]), headers=api_key("wrong"))
    assert resp.status_code == 401


def test_missing_key(client, register):
    user = register()
    assert client.post("/api/polka/webhooks", json=upgrade_event(user["id"])).status_code == 401


def test_access_token_is_not_a_service_key(client, register, login):
    user = register()
    token = login()["token"]
    resp = client.post("/api/polka/webhooks", json=upgrade_event(user["id"]), headers=bearer(token))
    assert resp.status_code == 401


def test_unknown_user(client):
    resp = client.post("/api/polka/webhooks", json=upgrade_event(str(uuid.uuid4())), headers=api_key())
    assert resp.status_code == 404


def test_malformed_user_id(client):
    resp = client.post("/api/polka/webhooks", json=upgrade_event("not-a-uuid"), headers=api_key())
    assert resp.status_code == 400


def test_malformed_payload(client):
    resp = client.post("/api/polka/webhooks", json={"event": "user.upgraded"}, headers=api_key())
    assert resp.status_code == 400
