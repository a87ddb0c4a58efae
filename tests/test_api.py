"""
End-to-end checks of the JSON envelope through the FastAPI app.
"""
from __future__ import annotations

from fintrack.core.security import hash_password
from fintrack.db.models import ROLE_ADMIN
from fintrack.db.session import get_session
from fintrack.repositories.user_repository import UserRepository


def _register(client, email="ana@example.com", name="Ana", password="s3cret") -> dict:
    resp = client.post("/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _make_admin(email="root@example.com", password="pw") -> None:
    with get_session() as session:
        UserRepository(session).create_user("admin-1", email, "Root", hash_password(password), role=ROLE_ADMIN)


def test_health(client):
    assert client.get("/health").json() == {"success": True}


def test_register_and_duplicate_use_success_flag_not_status(client):
    body = _register(client)
    assert body["success"] is True
    assert body["type"] == "Bearer"
    assert body["token"]
    assert body["data"]["role"] == "USER"
    assert "password" not in body["data"]

    again = client.post("/register", json={"name": "X", "email": "ana@example.com", "password": "pw"})
    assert again.status_code == 200
    assert again.json() == {"success": False, "message": "Email already registered."}


def test_register_validation_message_is_field_map(client):
    resp = client.post("/register", json={"email": "bad"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is False
    assert set(body["message"]) == {"name", "email", "password"}


def test_login_and_profile_flow(client):
    _register(client)

    wrong = client.post("/login", json={"email": "ana@example.com", "password": "nope"}).json()
    assert wrong == {"success": False, "message": "Password did not match"}

    login = client.post("/login", json={"email": "ana@example.com", "password": "s3cret"}).json()
    assert login["success"] is True
    token = login["token"]

    profile = client.get("/profile", headers=_auth(token)).json()
    assert profile["data"]["email"] == "ana@example.com"

    edited = client.patch("/profile", json={"name": "Ana Maria"}, headers=_auth(token)).json()
    assert edited["data"]["name"] == "Ana Maria"
    assert edited["data"]["email"] == "ana@example.com"


def test_protected_routes_require_valid_bearer(client):
    missing = client.get("/profile")
    assert missing.status_code == 401
    assert missing.json() == {"success": False, "message": "Unauthorized"}

    forged = client.get("/profile", headers=_auth("not.a.jwt"))
    assert forged.status_code == 401


def test_admin_login_and_add_user(client):
    token = _register(client)["token"]
    refused = client.post("/login/admin", json={"email": "ana@example.com", "password": "s3cret"}).json()
    assert refused == {"success": False, "message": "Access denied"}

    denied = client.post("/users", json={"email": "b@example.com", "name": "B", "password": "pw"}, headers=_auth(token))
    assert denied.json() == {"success": False, "message": "Access denied"}

    _make_admin()
    admin = client.post("/login/admin", json={"email": "root@example.com", "password": "pw"}).json()
    assert admin["success"] is True
    assert "data" not in admin

    created = client.post("/users", json={"email": "b@example.com", "name": "B", "password": "pw"}, headers=_auth(admin["token"])).json()
    assert created["success"] is True
    assert "token" not in created
    assert created["data"]["email"] == "b@example.com"


def test_category_lifecycle(client):
    token = _register(client)["token"]

    bulk = client.post("/categories/bulk", headers=_auth(token)).json()
    assert bulk["success"] is True
    owner_ids = {c["user_id"] for c in bulk["data"]}
    assert len(owner_ids) == 1

    created = client.post("/categories", json={"name": "Zakat", "type": "expense", "icon": "zakat.png"}).json()["data"]
    assert created["slug"].endswith("-zakat")
    assert created["picture"] == "zakat.png"

    listed = client.get("/categories", params={"name": "Zak"}).json()["data"]
    assert [c["id"] for c in listed] == [created["id"]]

    patched = client.patch(f"/categories/{created['id']}", json={"picture": "plate.png"}).json()["data"]
    assert patched["picture"] == "plate.png"
    assert patched["slug"] == created["slug"]

    deleted = client.request("DELETE", "/categories", json={"ids": [created["id"]]}).json()
    assert deleted == {"success": True, "data": 1}
    assert client.get(f"/categories/{created['id']}").json() == {"success": True, "data": None}
    assert client.get("/categories", params={"name": "Zak"}).json()["data"] == []


def test_transactions_are_private_to_owner(client):
    ana = _register(client)["token"]
    bob = _register(client, email="bob@example.com", name="Bob")["token"]

    bad = client.post("/transactions", json={"amount": "12"}, headers=_auth(ana)).json()
    assert bad["success"] is False
    assert "amount" in bad["message"]

    tx = client.post(
        "/transactions",
        json={"amount": 2500, "description": "groceries", "spent_at": "2024-05-01T10:00:00Z"},
        headers=_auth(ana),
    ).json()["data"]
    assert tx["amount"] == 2500

    listed = client.get("/transactions", headers=_auth(ana)).json()
    assert [t["id"] for t in listed["data"]] == [tx["id"]]
    assert listed["total"] == 2500
    assert client.get("/transactions", headers=_auth(bob)).json()["data"] == []
    assert client.get(f"/transactions/{tx['id']}", headers=_auth(bob)).json()["data"] is None

    edited = client.patch(f"/transactions/{tx['id']}", json={"description": "market"}, headers=_auth(ana)).json()["data"]
    assert edited["description"] == "market"
    assert edited["amount"] == 2500

    assert client.request("DELETE", "/transactions", json={"ids": [tx["id"]]}, headers=_auth(bob)).json()["data"] == 0
    assert client.request("DELETE", "/transactions", json={"ids": [tx["id"]]}, headers=_auth(ana)).json()["data"] == 1
    assert client.get("/transactions", headers=_auth(ana)).json()["data"] == []


def test_malformed_requests_still_use_envelope(client):
    not_an_object = client.post("/register", json=["a", "b"])
    assert not_an_object.status_code == 200
    assert not_an_object.json()["success"] is False
    assert list(not_an_object.json()["message"]) == ["body"]

    bad_id = client.get("/categories/abc")
    assert bad_id.status_code == 200
    assert bad_id.json()["success"] is False
    assert "category_id" in bad_id.json()["message"]


def test_unexpected_failure_uses_envelope(db_env, monkeypatch):
    from fastapi.testclient import TestClient

    from fintrack.app import app
    from fintrack.services.category_service import CategoryService

    def boom(self, name=None):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(CategoryService, "list", boom)
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/categories")

    assert resp.status_code == 200
    assert resp.json() == {"success": False, "message": "Something went wrong."}


def test_bulk_with_malformed_predefined_file(client, tmp_path, monkeypatch):
    from fintrack.core import config as core_config

    token = _register(client)["token"]
    data_file = tmp_path / "cats.json"
    data_file.write_text("{not json")
    monkeypatch.setenv("PREDEFINED_CATEGORIES_PATH", str(data_file))
    core_config.get_settings.cache_clear()

    resp = client.post("/categories/bulk", headers=_auth(token))

    assert resp.status_code == 200
    assert resp.json() == {"success": False, "message": "Failed to save data!"}


def test_delete_with_fractional_id_deletes_nothing(client):
    created = client.post("/categories", json={"name": "Zakat"}).json()["data"]

    resp = client.request("DELETE", "/categories", json={"ids": [created["id"] + 0.7]}).json()

    assert resp == {"success": False, "message": {"ids": ["The ids field must contain only integers."]}}
    assert client.get(f"/categories/{created['id']}").json()["data"]["id"] == created["id"]


def test_register_with_long_password(client):
    body = _register(client, password="x" * 100)
    assert body["success"] is True

    login = client.post("/login", json={"email": "ana@example.com", "password": "x" * 100}).json()
    assert login["success"] is True


def test_transaction_references_are_scoped_to_owner(client):
    ana = _register(client)
    bob = _register(client, email="bob@example.com", name="Bob")
    bobs = client.post("/categories", json={"name": "Bob Only", "user_id": bob["data"]["id"]}).json()["data"]
    shared = client.post("/categories", json={"name": "Groceries"}).json()["data"]
    mine = client.post("/categories", json={"name": "Ana Only", "user_id": ana["data"]["id"]}).json()["data"]

    foreign = client.post("/transactions", json={"amount": 10, "category_id": bobs["id"]}, headers=_auth(ana["token"])).json()
    assert foreign == {"success": False, "message": {"category_id": ["The selected category_id is invalid."]}}

    missing_wallet = client.post("/transactions", json={"amount": 10, "wallet_id": 999}, headers=_auth(ana["token"])).json()
    assert missing_wallet["message"] == {"wallet_id": ["The selected wallet_id is invalid."]}

    tx = client.post("/transactions", json={"amount": 10, "category_id": shared["id"]}, headers=_auth(ana["token"])).json()["data"]
    assert tx["category_id"] == shared["id"]

    moved = client.patch(f"/transactions/{tx['id']}", json={"category_id": bobs["id"]}, headers=_auth(ana["token"])).json()
    assert moved["success"] is False
    moved = client.patch(f"/transactions/{tx['id']}", json={"category_id": mine["id"]}, headers=_auth(ana["token"])).json()
    assert moved["data"]["category_id"] == mine["id"]
