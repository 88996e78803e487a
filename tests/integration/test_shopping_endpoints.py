"""Integration tests for shopping lists and items."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import signup, signup_with_family


def test_list_item_toggle_flow(client):
    headers, _ = signup_with_family(client)
    shopping_list = client.post("/shopping", json={"name": "Weekly"}, headers=headers).json()
    item = client.post(f"/shopping/{shopping_list['id']}/items", json={"title": "Milk"}, headers=headers).json()

    first = client.post(f"/shopping/{shopping_list['id']}/items/{item['id']}/toggle", headers=headers).json()
    second = client.post(f"/shopping/{shopping_list['id']}/items/{item['id']}/toggle", headers=headers).json()
    listing = client.get(f"/shopping/{shopping_list['id']}/items", headers=headers).json()

    assert item["isDone"] is False
    assert first["isDone"] is True
    assert second["isDone"] is False
    assert listing["list"]["name"] == "Weekly"
    assert listing["remaining"] == 1


def test_delete_item_and_list(client):
    headers, _ = signup_with_family(client)
    shopping_list = client.post("/shopping", json={"name": "Weekly"}, headers=headers).json()
    item = client.post(f"/shopping/{shopping_list['id']}/items", json={"title": "Milk"}, headers=headers).json()

    removed = client.delete(f"/shopping/{shopping_list['id']}/items/{item['id']}", headers=headers)
    missing = client.delete(f"/shopping/{shopping_list['id']}/items/{item['id']}", headers=headers)
    dropped = client.delete(f"/shopping/{shopping_list['id']}", headers=headers)

    assert removed.status_code == status.HTTP_204_NO_CONTENT
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert dropped.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/shopping", headers=headers).json() == []


def test_lists_of_other_families_are_hidden(client):
    owner, _ = signup_with_family(client)
    shopping_list = client.post("/shopping", json={"name": "Weekly"}, headers=owner).json()
    eve = signup(client, email="eve@example.com", name="Eve")
    client.post("/onboarding", json={"familyName": "Eve's"}, headers=eve)

    response = client.post(f"/shopping/{shopping_list['id']}/items", json={"title": "Cake"}, headers=eve)

    assert response.status_code == status.HTTP_404_NOT_FOUND
