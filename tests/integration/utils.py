"""Shared helpers for integration tests."""

from __future__ import annotations

from fastapi.testclient import TestClient

PASSWORD = "secret123"


def signup(client: TestClient, email: str = "alice@example.com", name: str = "Alice") -> dict[str, str]:
    response = client.post("/auth/signup", json={"email": email, "password": PASSWORD, "fullName": name})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


def signup_with_family(client: TestClient, family_name: str = "The Smiths") -> tuple[dict[str, str], str]:
    headers = signup(client)
    response = client.post("/onboarding", json={"familyName": family_name}, headers=headers)
    assert response.status_code == 201, response.text
    return headers, response.json()["familyId"]


def invite_and_join(client: TestClient, owner_headers: dict[str, str], email: str, role: str = "MEMBER") -> dict[str, str]:
    """Sign up ``email`` and add them to the owner's family with ``role``."""

    invite = client.post("/settings/invites", json={"email": email, "role": role}, headers=owner_headers)
    assert invite.status_code == 201, invite.text
    headers = signup(client, email=email, name=email.split("@")[0].title())
    joined = client.post(f"/join/{invite.json()['inviteCode']}", headers=headers)
    assert joined.status_code == 200, joined.text
    return headers
