import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from staybook.core.database import connect_to_mongo, close_mongo_connection
from staybook.core.email_service.email_instance import email_service
from staybook.core.errors import install_exception_handlers
from staybook.core.logging import setup_logging
from staybook.modules.auth.router import auth_router
from staybook.modules.booking.router import booking_router
from staybook.modules.listing.router import listing_router, search_router
from staybook.modules.payments.router import payments_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    await connect_to_mongo()
    if email_service.client:
        logger.info("Email service initialized (SendGrid)")
    else:
        logger.info("Email service running in MOCK mode")
    yield
    # Shutdown
    await close_mongo_connection()


app = FastAPI(title="Staybook API", lifespan=lifespan)
install_exception_handlers(app)


@app.get("/")
async def root():
    return {"message": "Staybook API"}


# Every public route is registered here and nowhere else
ROUTERS = (
    auth_router,
    search_router,
    listing_router,
    booking_router,
    payments_router,
)

for router in ROUTERS:
    app.include_router(router, prefix="/api")
