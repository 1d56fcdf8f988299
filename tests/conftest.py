import pytest
from fastapi.testclient import TestClient

from staybook.main import app
from staybook.modules.auth.repository import AuthRepository
from staybook.modules.auth.utility import hash_password
from staybook.modules.booking.dependencies import get_email_service
from staybook.modules.booking.repository import OrderRepository
from staybook.modules.listing.repository import ListingRepository
from staybook.modules.payments.dependencies import get_payment_gateway
from staybook.modules.users.models import User
from staybook.modules.users.repository import UserRepository
from tests.fakes import (
    FakeGateway,
    InMemoryListingRepository,
    InMemoryOrderRepository,
    InMemoryUserRepository,
    RecordingEmailService,
    make_listing,
)


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def listing_repo():
    return InMemoryListingRepository()


@pytest.fixture
def order_repo():
    return InMemoryOrderRepository()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def host(user_repo):
    return user_repo.add(User(
        name="Hana Host",
        email="host@example.com",
        hashed_password=hash_password("secret123"),
        stripe_account_id="acct_host",
    ))


@pytest.fixture
def guest(user_repo):
    return user_repo.add(User(
        name="Gil Guest",
        email="guest@example.com",
        hashed_password=hash_password("secret123"),
    ))


@pytest.fixture
def listing(listing_repo, host):
    return listing_repo.add(make_listing(host["id"]))


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def client(user_repo, listing_repo, order_repo, gateway, email_service):
    app.dependency_overrides[AuthRepository] = lambda: user_repo
    app.dependency_overrides[UserRepository] = lambda: user_repo
    app.dependency_overrides[ListingRepository] = lambda: listing_repo
    app.dependency_overrides[OrderRepository] = lambda: order_repo
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_email_service] = lambda: email_service
    # No context manager: the lifespan (Mongo connection) is not started
    yield TestClient(app)
    app.dependency_overrides.clear()
