# tests/test_interactions.py
"""
Integration tests for the interaction routes (/api/interactions).
"""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from conftest import auth_headers
from friends_crm import crud, models


def make_friend(db_session: Session, owner, name: str = "Alice") -> models.Friend:
    return crud.create_friend(db_session, owner.id, {"name": name})


def post_interaction(client: TestClient, owner, friend_id: int, when: str, type_: str = "call", description: str = "Caught up"):
    return client.post(
        "/api/interactions",
        json={"friend_id": friend_id, "type": type_, "description": description, "interaction_date": when},
        headers=auth_headers(owner),
    )


def test_create_interaction(client: TestClient, db_session: Session, user):
    friend = make_friend(db_session, user)

    response = post_interaction(client, user, friend.id, "2024-05-10", "hangout", "Coffee downtown")
    assert response.status_code == 201
    data = response.json()
    assert data["type"] == "hangout"
    assert data["description"] == "Coffee downtown"
    assert data["interaction_date"] == "2024-05-10"
    assert data["friend"] == {"id": friend.id, "name": "Alice", "email": None, "profile_picture": None}

    db_session.refresh(friend)
    assert friend.last_contact_date.isoformat() == "2024-05-10"


def test_create_interaction_out_of_order_keeps_last_write(client: TestClient, db_session: Session, user):
    friend = make_friend(db_session, user)

    assert post_interaction(client, user, friend.id, "2024-08-01").status_code == 201
    assert post_interaction(client, user, friend.id, "2024-03-01").status_code == 201

    response = client.get(f"/api/friends/{friend.id}", headers=auth_headers(user))
    assert response.json()["last_contact_date"] == "2024-03-01"


def test_create_interaction_validation(client: TestClient, db_session: Session, user):
    friend = make_friend(db_session, user)

    response = client.post(
        "/api/interactions",
        json={"friend_id": friend.id, "type": "carrier pigeon", "description": "", "interaction_date": "soon"},
        headers=auth_headers(user),
    )
    assert response.status_code == 422
    fields = {error["field"] for error in response.json()["detail"]}
    assert fields == {"type", "description", "interaction_date"}


def test_create_interaction_for_other_users_friend(client: TestClient, db_session: Session, user, other_user):
    friend = make_friend(db_session, user)

    response = post_interaction(client, other_user, friend.id, "2024-05-10")
    assert response.status_code == 403
    db_session.refresh(friend)
    assert friend.last_contact_date is None
    assert db_session.query(models.Interaction).count() == 0


def test_create_interaction_for_missing_friend(client: TestClient, user):
    response = post_interaction(client, user, 9999, "2024-05-10")
    assert response.status_code == 404
    assert response.json()["detail"] == "Friend not found"


def test_read_interaction(client: TestClient, db_session: Session, user, other_user):
    friend = make_friend(db_session, user)
    interaction_id = post_interaction(client, user, friend.id, "2024-05-10").json()["id"]

    response = client.get(f"/api/interactions/{interaction_id}", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["friend"]["name"] == "Alice"

    forbidden = client.get(f"/api/interactions/{interaction_id}", headers=auth_headers(other_user))
    assert forbidden.status_code == 403

    missing = client.get("/api/interactions/9999", headers=auth_headers(user))
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Interaction not found"


def test_delete_interaction(client: TestClient, db_session: Session, user, other_user):
    friend = make_friend(db_session, user)
    interaction_id = post_interaction(client, user, friend.id, "2024-05-10").json()["id"]

    assert client.delete(f"/api/interactions/{interaction_id}", headers=auth_headers(other_user)).status_code == 403

    response = client.delete(f"/api/interactions/{interaction_id}", headers=auth_headers(user))
    assert response.status_code == 204
    assert client.get(f"/api/interactions/{interaction_id}", headers=auth_headers(user)).status_code == 404

    db_session.refresh(friend)
    assert friend.last_contact_date.isoformat() == "2024-05-10"


def test_interactions_cannot_be_edited(client: TestClient, db_session: Session, user):
    friend = make_friend(db_session, user)
    interaction_id = post_interaction(client, user, friend.id, "2024-05-10").json()["id"]

    response = client.put(
        f"/api/interactions/{interaction_id}",
        json={"description": "Changed"},
        headers=auth_headers(user),
    )
    assert response.status_code == 405


def test_list_interactions(client: TestClient, db_session: Session, user, other_user):
    alice = make_friend(db_session, user, "Alice")
    bob = make_friend(db_session, user, "Bob")
    mallory = make_friend(db_session, other_user, "Mallory")
    post_interaction(client, user, alice.id, "2024-01-15")
    post_interaction(client, user, bob.id, "2024-04-15")
    post_interaction(client, user, alice.id, "2024-02-15")
    post_interaction(client, other_user, mallory.id, "2024-06-15")

    response = client.get("/api/interactions", headers=auth_headers(user))
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [i["interaction_date"] for i in data["items"]] == ["2024-04-15", "2024-02-15", "2024-01-15"]
    assert [i["friend"]["name"] for i in data["items"]] == ["Bob", "Alice", "Alice"]


def test_list_interactions_pagination(client: TestClient, db_session: Session, user):
    friend = make_friend(db_session, user)
    for day in range(1, 6):
        post_interaction(client, user, friend.id, f"2024-03-0{day}")

    response = client.get("/api/interactions", params={"page": 3, "page_size": 2}, headers=auth_headers(user))
    data = response.json()
    assert data["last_page"] == 3
    assert [i["interaction_date"] for i in data["items"]] == ["2024-03-01"]
