import pytest

from staybook.core.errors import GatewayError, NotFoundError, PreconditionFailed
from staybook.modules.booking.service import BookingSessionManager, OrderMaterializer
from staybook.modules.payments.models import PaymentStatus
from tests.fakes import make_listing


@pytest.fixture
def session_manager(listing_repo, user_repo, gateway):
    return BookingSessionManager(
        listing_repo=listing_repo,
        user_repo=user_repo,
        gateway=gateway,
        fee_percent=20,
        success_url="https://app.test/stripe/success",
        cancel_url="https://app.test/stripe/cancel",
    )


async def test_creates_gateway_session_with_owner_as_destination(session_manager, gateway, guest, listing, user_repo):
    session_id = await session_manager.create_session(guest, listing["id"])

    assert gateway.created_calls == [{
        "amount": 12050,
        "fee_percent": 20,
        "destination": "acct_host",
        "success_url": f"https://app.test/stripe/success/{listing['id']}",
        "cancel_url": "https://app.test/stripe/cancel",
        "product_name": "Loft by the canal",
        "listing_id": listing["id"],
    }]
    slot = user_repo.users[guest["id"]]["stripe_session"]
    assert slot["session"]["id"] == session_id
    assert slot["listing_id"] == listing["id"]
    assert gateway.sessions[session_id].application_fee_amount == 2410


async def test_second_session_replaces_first(session_manager, materializer_factory, gateway, guest, listing, listing_repo, host, user_repo):
    other = listing_repo.add(make_listing(host["id"], title="Beach hut", location="Nice", price=80))

    first = await session_manager.create_session(guest, listing["id"])
    gateway.set_status(first, PaymentStatus.paid)
    second = await session_manager.create_session(guest, other["id"])

    slot = user_repo.users[guest["id"]]["stripe_session"]
    assert slot["session"]["id"] == second
    assert slot["listing_id"] == other["id"]

    gateway.set_status(second, PaymentStatus.paid)
    confirmation = await materializer_factory().confirm(guest)
    assert confirmation.order.session.id == second
    assert confirmation.order.listing_id == other["id"]


async def test_missing_listing(session_manager, guest, gateway):
    with pytest.raises(NotFoundError):
        await session_manager.create_session(guest, "nope")

    assert gateway.created_calls == []


async def test_owner_without_payout_account_is_rejected(session_manager, guest, listing_repo, user_repo, gateway):
    # guest never connected a payout account
    listing = listing_repo.add(make_listing(guest["id"]))

    with pytest.raises(PreconditionFailed):
        await session_manager.create_session(guest, listing["id"])

    assert gateway.created_calls == []
    assert user_repo.users[guest["id"]]["stripe_session"] is None


async def test_gateway_failure_leaves_slot_untouched(session_manager, gateway, guest, listing, user_repo):
    first = await session_manager.create_session(guest, listing["id"])
    gateway.fail_with = GatewayError("timeout")

    with pytest.raises(GatewayError):
        await session_manager.create_session(guest, listing["id"])

    assert user_repo.users[guest["id"]]["stripe_session"]["session"]["id"] == first
    assert len(gateway.created_calls) == 1


@pytest.fixture
def materializer_factory(user_repo, order_repo, gateway):
    return lambda: OrderMaterializer(user_repo=user_repo, order_repo=order_repo, gateway=gateway)


async def test_half_cent_price_rounds_up(session_manager, gateway, guest, host, listing_repo):
    listing = listing_repo.add(make_listing(host["id"], price=1.005))

    await session_manager.create_session(guest, listing["id"])

    assert gateway.created_calls[0]["amount"] == 101
