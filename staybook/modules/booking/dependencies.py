from fastapi import Depends
from staybook.core.email_service.email_instance import email_service
from staybook.core.email_service.email_service import EmailService
from staybook.modules.booking.repository import OrderRepository
from staybook.modules.booking.service import BookingService, BookingSessionManager, OrderMaterializer
from staybook.modules.listing.repository import ListingRepository
from staybook.modules.payments.dependencies import get_payment_gateway
from staybook.modules.payments.gateway import PaymentGatewayAdapter
from staybook.modules.users.repository import UserRepository

def get_session_manager(
    listing_repo: ListingRepository = Depends(),
    user_repo: UserRepository = Depends(),
    gateway: PaymentGatewayAdapter = Depends(get_payment_gateway),
) -> BookingSessionManager:
    return BookingSessionManager(listing_repo=listing_repo, user_repo=user_repo, gateway=gateway)

def get_order_materializer(
    user_repo: UserRepository = Depends(),
    order_repo: OrderRepository = Depends(),
    gateway: PaymentGatewayAdapter = Depends(get_payment_gateway),
) -> OrderMaterializer:
    return OrderMaterializer(user_repo=user_repo, order_repo=order_repo, gateway=gateway)

def get_booking_service(
    order_repo: OrderRepository = Depends(),
    listing_repo: ListingRepository = Depends(),
) -> BookingService:
    return BookingService(order_repo=order_repo, listing_repo=listing_repo)

def get_email_service() -> EmailService:
    return email_service
