from datetime import datetime, timedelta

import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import HuddleUser
from conftest import HuddleUserFactory, make_client
from events.models import Event, EventPhoto, Participant

pytestmark = pytest.mark.django_db


def _create_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "title": "Mixer",
        "event_type": "networking",
        "start_time": "2025-06-01T18:00:00Z",
        "location": "Capitol Hill",
        "max_capacity": 2,
    }
    payload.update(overrides)
    return payload


def test_create_event(user: HuddleUser, user_client: Client) -> None:
    response = user_client.post(reverse("api:create_event"), data=_create_payload(), content_type="application/json")

    assert response.status_code == 201, response.content
    data = response.json()
    assert data["title"] == "Mixer"
    assert data["event_type"] == "networking"
    assert data["status"] == "upcoming"
    assert data["max_capacity"] == 2
    assert data["participant_count"] == 0
    assert data["creator"]["id"] == str(user.id)
    assert Event.objects.get(pk=data["id"]).creator == user


def test_create_event_rejects_end_before_start(user_client: Client) -> None:
    payload = _create_payload(end_time="2025-06-01T17:00:00Z")

    response = user_client.post(reverse("api:create_event"), data=payload, content_type="application/json")

    assert response.status_code == 422
    assert not Event.objects.exists()


def test_create_event_rejects_unknown_type(user_client: Client) -> None:
    response = user_client.post(
        reverse("api:create_event"), data=_create_payload(event_type="rave"), content_type="application/json"
    )

    assert response.status_code == 422


def test_capacity_round_trip(user_client: Client, huddle_user_factory: HuddleUserFactory) -> None:
    """Two joins fill an event with room for two; the third is refused.

    The event is created with the camelCase payload web clients send.
    """
    response = user_client.post(
        reverse("api:create_event"),
        data={
            "title": "Mixer",
            "eventType": "networking",
            "startTime": "2025-06-01T18:00:00Z",
            "location": "Capitol Hill",
            "maxCapacity": 2,
        },
        content_type="application/json",
    )
    assert response.status_code == 201, response.content
    assert response.json()["event_type"] == "networking"
    assert response.json()["max_capacity"] == 2
    event_id = response.json()["id"]
    url = reverse("api:join_event", kwargs={"event_id": event_id})

    first, second, third = (make_client(huddle_user_factory()) for _ in range(3))

    assert first.post(url).status_code == 201
    assert second.post(url).status_code == 201
    response = third.post(url)

    assert response.status_code == 400
    assert response.json() == {"detail": "This event is full."}
    assert Participant.objects.filter(event_id=event_id).count() == 2


def test_join_twice_returns_existing(event: Event, other_user_client: Client) -> None:
    url = reverse("api:join_event", kwargs={"event_id": event.id})

    first = other_user_client.post(url)
    second = other_user_client.post(url)

    assert first.status_code == 201
    assert second.status_code == 200
    assert first.json()["id"] == second.json()["id"]


def test_join_missing_event(other_user_client: Client) -> None:
    url = reverse("api:join_event", kwargs={"event_id": "00000000-0000-4000-8000-000000000000"})

    response = other_user_client.post(url)

    assert response.status_code == 404


def test_leave_event(event: Event, other_user: HuddleUser, other_user_client: Client) -> None:
    Participant.objects.create(event=event, user=other_user)

    response = other_user_client.post(reverse("api:leave_event", kwargs={"event_id": event.id}))

    assert response.status_code == 200
    assert not Participant.objects.filter(event=event, user=other_user).exists()


def test_leave_without_joining_is_noop(event: Event, other_user_client: Client) -> None:
    response = other_user_client.post(reverse("api:leave_event", kwargs={"event_id": event.id}))

    assert response.status_code == 200
    assert response.json() == {"message": "You are not a participant."}


def test_list_participants_in_join_order(
    event: Event, other_user: HuddleUser, third_user: HuddleUser, user_client: Client
) -> None:
    Participant.objects.create(event=event, user=other_user)
    Participant.objects.create(event=event, user=third_user)

    response = user_client.get(reverse("api:list_participants", kwargs={"event_id": event.id}))

    assert response.status_code == 200
    assert [p["user"]["id"] for p in response.json()] == [str(other_user.id), str(third_user.id)]


def test_get_event(event: Event, other_user: HuddleUser, user_client: Client) -> None:
    Participant.objects.create(event=event, user=other_user)

    response = user_client.get(reverse("api:get_event", kwargs={"event_id": event.id}))

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(event.id)
    assert data["participant_count"] == 1
    assert data["tags"] == ["outdoors", "sunset"]


def test_get_missing_event(user_client: Client) -> None:
    response = user_client.get(reverse("api:get_event", kwargs={"event_id": "00000000-0000-4000-8000-000000000000"}))

    assert response.status_code == 404


class TestListEvents:
    @pytest.fixture
    def events(self, user: HuddleUser, next_week: datetime) -> list[Event]:
        return [
            Event.objects.create(
                creator=user,
                title="Taco Night",
                description="All you can eat",
                event_type=Event.EventType.FOOD,
                start_time=next_week,
                location="Fremont",
                tags=["food", "tacos"],
            ),
            Event.objects.create(
                creator=user,
                title="Board Games",
                event_type=Event.EventType.GAMING,
                start_time=next_week + timedelta(days=2),
                location="Ballard Library",
                tags=["games"],
                status=Event.EventStatus.CANCELLED,
            ),
            Event.objects.create(
                creator=user,
                title="Beach Cleanup",
                event_type=Event.EventType.BEACH,
                start_time=next_week + timedelta(days=1),
                location="Alki Beach",
            ),
        ]

    def test_newest_start_first(self, events: list[Event], user_client: Client) -> None:
        response = user_client.get(reverse("api:list_events"))

        assert response.status_code == 200
        assert [e["title"] for e in response.json()] == ["Board Games", "Beach Cleanup", "Taco Night"]

    @pytest.mark.parametrize(
        "search,expected",
        [
            ("taco", ["Taco Night"]),
            ("EAT", ["Taco Night"]),
            ("alki", ["Beach Cleanup"]),
            ("games", ["Board Games"]),
            ("nothing-matches", []),
        ],
    )
    def test_search(self, events: list[Event], user_client: Client, search: str, expected: list[str]) -> None:
        response = user_client.get(reverse("api:list_events"), {"search": search})

        assert [e["title"] for e in response.json()] == expected

    def test_filter_by_event_type(self, events: list[Event], user_client: Client) -> None:
        response = user_client.get(reverse("api:list_events"), {"event_type": "beach"})

        assert [e["title"] for e in response.json()] == ["Beach Cleanup"]

    def test_filter_by_status(self, events: list[Event], user_client: Client) -> None:
        response = user_client.get(reverse("api:list_events"), {"status": "cancelled"})

        assert [e["title"] for e in response.json()] == ["Board Games"]

    def test_filter_by_tag(self, events: list[Event], user_client: Client) -> None:
        response = user_client.get(reverse("api:list_events"), {"tag": "tacos"})

        assert [e["title"] for e in response.json()] == ["Taco Night"]


class TestEventOwnership:
    def test_creator_can_update(self, event: Event, user_client: Client) -> None:
        payload = _create_payload(title="Sunrise Hike", event_type="hiking", max_capacity=None)

        response = user_client.put(
            reverse("api:update_event", kwargs={"event_id": event.id}), data=payload, content_type="application/json"
        )

        assert response.status_code == 200, response.content
        event.refresh_from_db()
        assert event.title == "Sunrise Hike"
        assert event.location == "Capitol Hill"
        assert event.tags == []

    def test_non_creator_cannot_update(self, event: Event, other_user_client: Client) -> None:
        response = other_user_client.put(
            reverse("api:update_event", kwargs={"event_id": event.id}),
            data=_create_payload(),
            content_type="application/json",
        )

        assert response.status_code == 403
        event.refresh_from_db()
        assert event.title == "Sunset Hike"

    def test_update_missing_event(self, user_client: Client) -> None:
        response = user_client.put(
            reverse("api:update_event", kwargs={"event_id": "00000000-0000-4000-8000-000000000000"}),
            data=_create_payload(),
            content_type="application/json",
        )

        assert response.status_code == 404

    def test_creator_can_delete(self, event: Event, user_client: Client) -> None:
        response = user_client.delete(reverse("api:delete_event", kwargs={"event_id": event.id}))

        assert response.status_code == 204
        assert not Event.objects.filter(pk=event.pk).exists()

    def test_non_creator_cannot_delete(self, event: Event, other_user_client: Client) -> None:
        response = other_user_client.delete(reverse("api:delete_event", kwargs={"event_id": event.id}))

        assert response.status_code == 403
        assert Event.objects.filter(pk=event.pk).exists()


class TestPhotos:
    def test_add_photo(self, event: Event, other_user: HuddleUser, other_user_client: Client) -> None:
        response = other_user_client.post(
            reverse("api:add_photo", kwargs={"event_id": event.id}),
            data={"photo_url": "https://img.example.com/trail.jpg", "caption": "  The view  "},
            content_type="application/json",
        )

        assert response.status_code == 201, response.content
        data = response.json()
        assert data["caption"] == "The view"
        assert data["user"]["id"] == str(other_user.id)
        assert data["event_id"] == str(event.id)

    def test_add_photo_requires_valid_url(self, event: Event, other_user_client: Client) -> None:
        response = other_user_client.post(
            reverse("api:add_photo", kwargs={"event_id": event.id}),
            data={"photo_url": "not a url"},
            content_type="application/json",
        )

        assert response.status_code == 422

    def test_list_photos_newest_first(self, event: Event, other_user: HuddleUser, user_client: Client) -> None:
        older = EventPhoto.objects.create(event=event, user=other_user, photo_url="https://img.example.com/1.jpg")
        newer = EventPhoto.objects.create(event=event, user=other_user, photo_url="https://img.example.com/2.jpg")

        response = user_client.get(reverse("api:list_photos", kwargs={"event_id": event.id}))

        assert [p["id"] for p in response.json()] == [newer.id, older.id]
