"""
tests/test_folder_routes.py -- Integration tests for /api/v1/folders.

Coverage:
  - every folder route refuses unauthenticated requests
  - create / list / get / delete happy paths
  - duplicate names per owner are rejected; other owners may reuse a name
  - ownership: another user's folder is 403 on read and delete, and a
    refused delete leaves the folder (and its forms) in the store
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import Account
from forms.models import Folder, Form


def _create_folder(client: TestClient, account: Account, name: str = "Surveys") -> dict:
    resp = client.post("/api/v1/folders", json={"name": name}, headers=account.headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["folder"]


class TestFolderAuth:
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get", "/api/v1/folders"),
            ("post", "/api/v1/folders"),
            ("post", "/api/v1/folder"),
            ("get", "/api/v1/folders/abc"),
            ("delete", "/api/v1/folders/abc"),
            ("get", "/api/v1/folders/abc/forms"),
        ],
    )
    def test_unauthenticated(self, client: TestClient, method: str, path: str) -> None:
        resp = client.request(method, path, json={"name": "x"} if method == "post" else None)
        assert resp.status_code == 401
        assert resp.json()["message"] == "Authorization header is missing"


class TestFolderCrud:
    def test_create_folder(self, api_client: tuple[TestClient, Account]) -> None:
        client, account = api_client
        resp = client.post("/api/v1/folders", json={"name": "Surveys"}, headers=account.headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Folder created"
        assert body["folder"]["name"] == "Surveys"
        assert body["folder"]["ownerId"] == account.id
        assert body["folder"]["id"]

    def test_create_folder_with_foldername(self, api_client: tuple[TestClient, Account]) -> None:
        client, account = api_client
        resp = client.post("/api/v1/folder", json={"foldername": "Leads"}, headers=account.headers)
        assert resp.status_code == 200, resp.text
        assert resp.json()["message"] == "Folder created"
        assert resp.json()["folder"]["name"] == "Leads"

        again = client.post("/api/v1/folders", json={"name": "Leads"}, headers=account.headers)
        assert again.status_code == 400
        assert again.json()["message"] == "Folder already exists"

    def test_duplicate_name_same_owner(self, api_client: tuple[TestClient, Account]) -> None:
        client, account = api_client
        _create_folder(client, account, "Surveys")
        resp = client.post("/api/v1/folders", json={"name": "Surveys"}, headers=account.headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Folder already exists"

    def test_same_name_different_owner(self, api_client: tuple[TestClient, Account], make_user) -> None:
        client, account = api_client
        other = make_user("other")
        _create_folder(client, account, "Surveys")
        _create_folder(client, other, "Surveys")

    def test_blank_name_rejected(self, api_client: tuple[TestClient, Account]) -> None:
        client, account = api_client
        resp = client.post("/api/v1/folders", json={"name": "   "}, headers=account.headers)
        assert resp.status_code == 400

    def test_list_only_own_folders(self, api_client: tuple[TestClient, Account], make_user) -> None:
        client, account = api_client
        other = make_user("other")
        _create_folder(client, account, "Mine A")
        _create_folder(client, account, "Mine B")
        _create_folder(client, other, "Theirs")

        resp = client.get("/api/v1/folders", headers=account.headers)
        assert resp.status_code == 200
        names = [f["name"] for f in resp.json()["folders"]]
        assert sorted(names) == ["Mine A", "Mine B"]

    def test_get_folder(self, api_client: tuple[TestClient, Account]) -> None:
        client, account = api_client
        folder = _create_folder(client, account)
        resp = client.get(f"/api/v1/folders/{folder['id']}", headers=account.headers)
        assert resp.status_code == 200
        assert resp.json()["folder"] == folder

    def test_get_missing_folder(self, api_client: tuple[TestClient, Account]) -> None:
        client, account = api_client
        resp = client.get("/api/v1/folders/does-not-exist", headers=account.headers)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Folder not found"

    def test_delete_own_folder(self, api_client: tuple[TestClient, Account], stores) -> None:
        client, account = api_client
        folder = _create_folder(client, account)
        resp = client.delete(f"/api/v1/folders/{folder['id']}", headers=account.headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Folder deleted"}
        assert stores[1].get_folder(folder["id"]) is None

    def test_delete_missing_folder(self, api_client: tuple[TestClient, Account]) -> None:
        client, account = api_client
        resp = client.delete("/api/v1/folders/does-not-exist", headers=account.headers)
        assert resp.status_code == 404

    def test_delete_removes_forms(self, api_client: tuple[TestClient, Account], stores) -> None:
        client, account = api_client
        _, form_store = stores
        folder = _create_folder(client, account)
        form_id = form_store.create_form(Form(name="F", owner_id=account.id, folder_id=folder["id"]))

        client.delete(f"/api/v1/folders/{folder['id']}", headers=account.headers)
        assert form_store.get_form(form_id) is None


class TestFolderOwnership:
    def test_delete_other_users_folder_forbidden(
        self, api_client: tuple[TestClient, Account], make_user, stores
    ) -> None:
        """User A deleting user B's folder gets 403 and the folder survives."""
        client, owner = api_client
        intruder = make_user("intruder")
        _, form_store = stores
        folder_id = form_store.create_folder(Folder(name="Private", owner_id=owner.id))
        form_id = form_store.create_form(Form(name="Inside", owner_id=owner.id, folder_id=folder_id))

        resp = client.delete(f"/api/v1/folders/{folder_id}", headers=intruder.headers)
        assert resp.status_code == 403
        assert resp.json()["message"] == "Not authorized to delete this folder"
        assert resp.json()["code"] == "forbidden"
        assert form_store.get_folder(folder_id) is not None
        assert form_store.get_form(form_id) is not None

    def test_get_other_users_folder_forbidden(self, api_client: tuple[TestClient, Account], make_user) -> None:
        client, owner = api_client
        intruder = make_user("intruder")
        folder = _create_folder(client, owner)
        resp = client.get(f"/api/v1/folders/{folder['id']}", headers=intruder.headers)
        assert resp.status_code == 403

    def test_list_forms_of_other_users_folder_forbidden(
        self, api_client: tuple[TestClient, Account], make_user
    ) -> None:
        client, owner = api_client
        intruder = make_user("intruder")
        folder = _create_folder(client, owner)
        resp = client.get(f"/api/v1/folders/{folder['id']}/forms", headers=intruder.headers)
        assert resp.status_code == 403
