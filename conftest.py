from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

PASSWORD = "Str0ng-Passw0rd!"


@pytest.fixture(autouse=True)
def _clear_cache():
    # Throttle counters and dashboard payloads live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    from benefits.models import User

    def _make(username, role=User.ROLE_OFFICE_AGENT, password=PASSWORD, **extra):
        return User.objects.create_user(username=username, email=username, password=password, role=role, **extra)
    return _make


@pytest.fixture
def admin_user(make_user):
    from benefits.models import User
    return make_user("admin@example.test", role=User.ROLE_ADMIN)


@pytest.fixture
def agent(make_user):
    return make_user("agent@example.test")


@pytest.fixture
def other_agent(make_user):
    return make_user("agent2@example.test")


@pytest.fixture
def hospital_user(make_user):
    from benefits.models import Hospital, User
    u = make_user("desk@hospital.test", role=User.ROLE_HOSPITAL_USER)
    Hospital.objects.create(user=u, name="City Hospital", license_no="LIC-1")
    return u


@pytest.fixture
def client_for():
    """An APIClient authenticated with the user's DRF token."""
    from rest_framework.authtoken.models import Token

    def _client(user=None):
        c = APIClient()
        if user is not None:
            token, _ = Token.objects.get_or_create(user=user)
            c.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")
        return c
    return _client


@pytest.fixture
def plan(db):
    from benefits.models import Plan
    return Plan.objects.create(name="Basic", description="Basic cover", price=Decimal("50.00"), duration_days=365)


@pytest.fixture
def short_plan(db):
    from benefits.models import Plan
    return Plan.objects.create(name="Monthly", price=Decimal("10.00"), duration_days=30)


@pytest.fixture
def make_household(db):
    from benefits.models import Household, Member

    def _make(creator, phone="9000000001", national_ids=("NID1001", "NID1002")):
        h = Household.objects.create(head_name="Asha Rao", address="12 Lake Road", phone=phone, created_by=creator)
        relations = ["HEAD", "SPOUSE", "SON", "DAUGHTER"]
        for i, nid in enumerate(national_ids):
            Member.objects.create(
                household=h, first_name=f"Member{i}", last_name="Rao",
                dob=date(1980 + i, 1, 1), relation=relations[i % len(relations)], national_id=nid,
            )
        return h
    return _make


@pytest.fixture
def household(make_household, agent):
    return make_household(agent)
