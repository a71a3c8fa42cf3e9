from datetime import datetime, timedelta
from fastapi import status

from shareit.models.booking import BookingStatus
from shareit.models.item import Item

from tests.conf_tests import (
    client,
    headers_for,
    clear_db,
    test_db,
    make_user,
    owner,
    booker,
    stranger,
    test_item,
    make_booking,
)


def _now():
    return datetime.now().replace(microsecond=0)


# Users
def test_create_user_success():
    response = client.post("/users", json={"name": "Alice", "email": "alice@example.com"})
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Alice"
    assert data["email"] == "alice@example.com"

    response = client.get(f"/users/{data['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == data


def test_create_user_duplicate_email():
    client.post("/users", json={"name": "Alice", "email": "alice@example.com"})
    response = client.post("/users", json={"name": "Other", "email": "alice@example.com"})
    assert response.status_code == status.HTTP_409_CONFLICT


def test_create_user_invalid_email():
    response = client.post("/users", json={"name": "Bob", "email": "not-an-email"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_get_user_not_found():
    response = client.get("/users/9999")
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_get_users(owner, booker):
    response = client.get("/users")
    assert response.status_code == status.HTTP_200_OK
    assert [user["id"] for user in response.json()] == [owner.id, booker.id]


# pylint: disable-next=redefined-outer-name
def test_update_user(owner):
    response = client.patch(f"/users/{owner.id}", json={"name": "Renamed"})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["email"] == owner.email

    response = client.patch(f"/users/{owner.id}", json={"email": "renamed@example.com"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == "renamed@example.com"
    assert client.get(f"/users/{owner.id}").json()["email"] == "renamed@example.com"


# pylint: disable-next=redefined-outer-name
def test_update_user_keeps_own_email(owner):
    response = client.patch(f"/users/{owner.id}", json={"name": "Same", "email": owner.email})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == owner.email


# pylint: disable-next=redefined-outer-name
def test_update_user_email_taken(owner, booker):
    for email in (owner.email, owner.email.upper()):
        response = client.patch(f"/users/{booker.id}", json={"email": email})
        assert response.status_code == status.HTTP_409_CONFLICT

    response = client.get(f"/users/{booker.id}")
    assert response.json()["email"] == booker.email


# pylint: disable-next=redefined-outer-name
def test_update_user_invalid(owner):
    response = client.patch(f"/users/{owner.id}", json={"email": "not-an-email"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.patch("/users/9999", json={"name": "Ghost"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


# Items
# pylint: disable-next=redefined-outer-name
def test_create_item_success(owner):
    item_data = {"name": "Bike", "description": "City bike", "available": True}
    response = client.post("/items", json=item_data, headers=headers_for(owner))
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Bike"
    assert data["ownerId"] == owner.id
    assert data["comments"] == []
    assert data["lastBooking"] is None
    assert data["nextBooking"] is None


def test_create_item_unknown_owner():
    item_data = {"name": "Bike", "description": "City bike", "available": True}
    response = client.post("/items", json=item_data, headers={"X-Sharer-User-Id": "999"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_update_item_availability(test_item, owner, booker):
    response = client.patch(f"/items/{test_item.id}", json={"available": False}, headers=headers_for(owner))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["available"] is False
    assert data["name"] == test_item.name

    start = _now() + timedelta(days=1)
    payload = {"itemId": test_item.id, "start": start.isoformat(), "end": (start + timedelta(days=1)).isoformat()}
    response = client.post("/bookings", json=payload, headers=headers_for(booker))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_update_item_not_owner(test_item, stranger):
    response = client.patch(f"/items/{test_item.id}", json={"name": "Mine now"}, headers=headers_for(stranger))
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_update_item_not_found(owner):
    response = client.patch("/items/9999", json={"name": "Ghost"}, headers=headers_for(owner))
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_item_detail_shows_bookings_to_owner_only(make_booking, test_item, owner, booker):
    now = _now()
    last = make_booking(test_item, booker, now - timedelta(days=3), now - timedelta(days=1), BookingStatus.APPROVED)
    upcoming = make_booking(test_item, booker, now + timedelta(days=1), now + timedelta(days=2), BookingStatus.APPROVED)

    response = client.get(f"/items/{test_item.id}", headers=headers_for(owner))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["lastBooking"]["id"] == last.id
    assert data["lastBooking"]["bookerId"] == booker.id
    assert data["nextBooking"]["id"] == upcoming.id

    response = client.get(f"/items/{test_item.id}", headers=headers_for(booker))
    data = response.json()
    assert data["lastBooking"] is None
    assert data["nextBooking"] is None


# pylint: disable-next=redefined-outer-name
def test_item_detail_without_approved_bookings(make_booking, test_item, owner, booker):
    now = _now()
    make_booking(test_item, booker, now - timedelta(days=3), now - timedelta(days=1), BookingStatus.REJECTED)
    make_booking(test_item, booker, now + timedelta(days=1), now + timedelta(days=2), BookingStatus.WAITING)

    data = client.get(f"/items/{test_item.id}", headers=headers_for(owner)).json()
    assert data["lastBooking"] is None
    assert data["nextBooking"] is None


# pylint: disable-next=redefined-outer-name
def test_item_detail_not_found(owner):
    response = client.get("/items/9999", headers=headers_for(owner))
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_owner_items_with_projection(test_db, make_booking, test_item, owner, booker):
    idle = Item(name="Kayak", available=True, owner_id=owner.id)
    test_db.add(idle)
    test_db.commit()
    now = _now()
    last = make_booking(test_item, booker, now - timedelta(days=3), now - timedelta(days=1), BookingStatus.APPROVED)
    upcoming = make_booking(test_item, booker, now + timedelta(days=1), now + timedelta(days=2), BookingStatus.APPROVED)

    response = client.get("/items", headers=headers_for(owner))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [item["id"] for item in data] == [test_item.id, idle.id]
    assert data[0]["lastBooking"]["id"] == last.id
    assert data[0]["nextBooking"]["id"] == upcoming.id
    assert data[1]["lastBooking"] is None
    assert data[1]["nextBooking"] is None

    response = client.get("/items?from=1&size=1", headers=headers_for(owner))
    assert [item["id"] for item in response.json()] == [idle.id]


# pylint: disable-next=redefined-outer-name
def test_search_items(test_db, test_item, owner):
    hidden = Item(name="Hammer drill", description="Heavy", available=False, owner_id=owner.id)
    saw = Item(name="Saw", description="For DRILLING holes? No, cutting", available=True, owner_id=owner.id)
    other = Item(name="Ladder", description="Aluminium", available=True, owner_id=owner.id)
    test_db.add_all([hidden, saw, other])
    test_db.commit()

    response = client.get("/items/search?text=dRiLl")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [item["id"] for item in data] == [test_item.id, saw.id]
    assert all(item["available"] for item in data)
    assert data[0]["lastBooking"] is None

    response = client.get("/items/search?text=drill&from=1&size=1")
    assert [item["id"] for item in response.json()] == [saw.id]


# pylint: disable-next=redefined-outer-name
def test_search_items_blank_text(test_item):
    for query in ("", "?text=", "?text=%20%20"):
        response = client.get(f"/items/search{query}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []


# Comments
# pylint: disable-next=redefined-outer-name
def test_comment_after_completed_booking(make_booking, test_item, owner, booker):
    now = _now()
    make_booking(test_item, booker, now - timedelta(days=3), now - timedelta(days=1), BookingStatus.APPROVED)

    response = client.post(
        f"/items/{test_item.id}/comment", json={"text": "Works great"}, headers=headers_for(booker)
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["text"] == "Works great"
    assert data["authorName"] == booker.name
    assert "created" in data

    item = client.get(f"/items/{test_item.id}", headers=headers_for(owner)).json()
    assert [c["text"] for c in item["comments"]] == ["Works great"]


# pylint: disable-next=redefined-outer-name
def test_comment_without_completed_booking(make_booking, test_item, booker, stranger):
    now = _now()
    make_booking(test_item, booker, now + timedelta(days=1), now + timedelta(days=2), BookingStatus.APPROVED)

    for user in (booker, stranger):
        response = client.post(
            f"/items/{test_item.id}/comment", json={"text": "Too early"}, headers=headers_for(user)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_comment_on_missing_item(booker):
    response = client.post("/items/9999/comment", json={"text": "Hello"}, headers=headers_for(booker))
    assert response.status_code == status.HTTP_404_NOT_FOUND
