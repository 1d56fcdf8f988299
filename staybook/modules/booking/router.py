from fastapi import APIRouter, BackgroundTasks, Depends
from typing import Dict
from staybook.core.email_service.email_service import EmailService
from staybook.modules.auth.utility import get_current_user
from staybook.modules.booking.dependencies import (
    get_booking_service,
    get_email_service,
    get_order_materializer,
    get_session_manager,
)
from staybook.modules.booking.notifications import notify_order_confirmed
from staybook.modules.booking.schemas import BookingSessionCreate, BookingSessionResponse, ConfirmResponse
from staybook.modules.booking.service import BookingService, BookingSessionManager, OrderMaterializer
from staybook.modules.listing.repository import ListingRepository

booking_router = APIRouter(prefix="/booking", tags=["Booking"])

@booking_router.post("/session", response_model=BookingSessionResponse)
async def create_checkout_session(
    data: BookingSessionCreate,
    current_user: Dict = Depends(get_current_user),
    session_manager: BookingSessionManager = Depends(get_session_manager)
):
    session_id = await session_manager.create_session(current_user, data.listing_id)
    return BookingSessionResponse(session_id=session_id)

@booking_router.post("/confirm", response_model=ConfirmResponse)
async def confirm_booking(
    background_tasks: BackgroundTasks,
    current_user: Dict = Depends(get_current_user),
    materializer: OrderMaterializer = Depends(get_order_materializer),
    email_service: EmailService = Depends(get_email_service),
    listing_repo: ListingRepository = Depends(),
):
    confirmation = await materializer.confirm(current_user)
    if confirmation.created:
        background_tasks.add_task(
            notify_order_confirmed, email_service, listing_repo, current_user["email"], confirmation.order
        )
    return ConfirmResponse(order=confirmation.order)

@booking_router.get("/orders")
async def get_my_orders(
    current_user: Dict = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    return await booking_service.get_my_orders(current_user)

@booking_router.get("/is-already-booked/{listing_id}")
async def is_already_booked(
    listing_id: str,
    current_user: Dict = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    return await booking_service.is_already_booked(current_user, listing_id)
