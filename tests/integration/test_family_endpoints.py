"""Integration tests for onboarding, family selection and invites."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import invite_and_join, signup, signup_with_family


def test_onboarding_creates_owned_family(client):
    headers = signup(client)

    before = client.get("/onboarding", headers=headers).json()
    created = client.post("/onboarding", json={"familyName": "The Smiths"}, headers=headers)
    after = client.get("/onboarding", headers=headers).json()

    assert before["needsFamily"] is True
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["role"] == "OWNER"
    assert created.json()["family"]["name"] == "The Smiths"
    assert after == {"needsFamily": False, "activeFamilyId": created.json()["familyId"], "familyCount": 1}


def test_onboarding_needs_name_or_code(client):
    headers = signup(client)

    response = client.post("/onboarding", json={}, headers=headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_family_scoped_routes_need_a_family(client):
    headers = signup(client)

    assert client.get("/dashboard", headers=headers).status_code == status.HTTP_409_CONFLICT


def test_family_header_selects_and_rejects(client):
    headers, first_id = signup_with_family(client)
    second = client.post("/families", json={"name": "Cabin"}, headers=headers).json()

    families = client.get("/families", headers=headers).json()
    assert {entry["familyId"] for entry in families} == {first_id, second["familyId"]}

    selected = client.get("/settings", headers={**headers, "X-Family-Id": second["familyId"]})
    assert selected.json()["family"]["name"] == "Cabin"
    unknown = client.get("/settings", headers={**headers, "X-Family-Id": "nope"})
    assert unknown.status_code == status.HTTP_404_NOT_FOUND


def test_invite_preview_and_single_redemption(client):
    owner, family_id = signup_with_family(client)
    invite = client.post("/settings/invites", json={"email": "bob@example.com"}, headers=owner).json()
    bob = signup(client, email="bob@example.com", name="Bob")

    preview = client.get(f"/join/{invite['inviteCode'].lower()}", headers=bob)
    joined = client.post(f"/join/{invite['inviteCode']}", headers=bob)
    again = client.post(f"/join/{invite['inviteCode']}", headers=bob)

    assert preview.json()["familyName"] == "The Smiths"
    assert joined.json()["familyId"] == family_id
    assert joined.json()["role"] == "MEMBER"
    assert again.status_code == status.HTTP_404_NOT_FOUND


def test_onboarding_with_invite_code(client):
    owner, family_id = signup_with_family(client)
    code = client.post("/settings/invites", json={"email": "bob@example.com"}, headers=owner).json()["inviteCode"]
    bob = signup(client, email="bob@example.com", name="Bob")

    response = client.post("/onboarding", json={"inviteCode": code}, headers=bob)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["familyId"] == family_id


def test_members_cannot_invite(client):
    owner, _ = signup_with_family(client)
    member = invite_and_join(client, owner, "bob@example.com")

    response = client.post("/settings/invites", json={"email": "carol@example.com"}, headers=member)

    assert response.status_code == status.HTTP_403_FORBIDDEN
