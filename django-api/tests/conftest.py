"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from exhibitions import models
from exhibitions.domain import Event, EventId, EventStatus, EventType, Money

START = datetime(2026, 11, 20, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_domain_event():
    """Build a domain Event without touching the database."""

    def build(**overrides) -> Event:
        values = dict(
            id=EventId(uuid4()),
            name="Science Fair",
            code="SCI-FAIR",
            description="",
            venue="Main Hall",
            event_type=EventType.FREE,
            price=Money(Decimal("0")),
            currency="INR",
            max_capacity=None,
            start_date=START,
            end_date=START + timedelta(hours=8),
            registration_start_date=START - timedelta(days=30),
            registration_end_date=START - timedelta(days=1),
            banner_image_url="https://cdn.example.com/banner.png",
            image_url=None,
            created_by_id=uuid4(),
            status=EventStatus.DRAFT,
            approved_by_id=None,
            approved_at=None,
            rejection_reason=None,
            rejected_at=None,
            created_at=START - timedelta(days=60),
            updated_at=START - timedelta(days=60),
        )
        values.update(overrides)
        return Event(**values)

    return build


# Database fixtures


@pytest.fixture
def admin_profile(db) -> models.Admin:
    user = get_user_model().objects.create_user(username="admin", password="pw")
    return models.Admin.objects.create(user=user, full_name="Asha Admin")


@pytest.fixture
def manager_profile(db) -> models.EventManager:
    user = get_user_model().objects.create_user(username="manager", password="pw")
    return models.EventManager.objects.create(
        user=user, full_name="Manu Manager", is_approved_by_admin=True
    )


@pytest.fixture
def other_manager_profile(db) -> models.EventManager:
    user = get_user_model().objects.create_user(username="other", password="pw")
    return models.EventManager.objects.create(
        user=user, full_name="Olu Other", is_approved_by_admin=True
    )


@pytest.fixture
def admin_client(admin_profile) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=admin_profile.user)
    return client


@pytest.fixture
def manager_client(manager_profile) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=manager_profile.user)
    return client


@pytest.fixture
def other_manager_client(other_manager_profile) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=other_manager_profile.user)
    return client


@pytest.fixture
def create_event(manager_profile):
    """Insert an event row owned by ``manager_profile`` unless told otherwise."""
    counter = iter(range(1, 10_000))

    def create(**overrides) -> models.Event:
        values = dict(
            event_name="Science Fair",
            event_code=f"SCI-{next(counter)}",
            venue="Main Hall",
            event_type=EventType.FREE.value,
            start_date=START,
            end_date=START + timedelta(hours=8),
            registration_start_date=START - timedelta(days=30),
            registration_end_date=START - timedelta(days=1),
            banner_image_url="https://cdn.example.com/banner.png",
            created_by_manager=manager_profile,
            status=EventStatus.DRAFT.value,
        )
        values.update(overrides)
        return models.Event.objects.create(**values)

    return create


@pytest.fixture
def create_stall():
    counter = iter(range(1, 10_000))

    def create(event: models.Event, **overrides) -> models.Stall:
        number = next(counter)
        values = dict(event=event, stall_number=number, stall_name=f"Stall {number}")
        values.update(overrides)
        return models.Stall.objects.create(**values)

    return create


@pytest.fixture
def create_volunteer():
    counter = iter(range(1, 10_000))

    def create(event: models.Event, **overrides) -> models.Volunteer:
        number = next(counter)
        values = dict(full_name=f"Volunteer {number}", email=f"vol{number}@example.com")
        values.update(overrides)
        volunteer = models.Volunteer.objects.create(**values)
        models.EventVolunteer.objects.create(event=event, volunteer=volunteer)
        return volunteer

    return create


@pytest.fixture
def create_student():
    counter = iter(range(1, 10_000))

    def create(school: models.School | None = None, **overrides) -> models.Student:
        number = next(counter)
        values = dict(full_name=f"Student {number}", registration_no=f"REG{number:05d}", school=school)
        values.update(overrides)
        return models.Student.objects.create(**values)

    return create
