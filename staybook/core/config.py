from pathlib import Path
from dotenv import load_dotenv
import os


ROOT_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(ROOT_DIR / ".env")

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "staybook_db")

JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRY_HOURS = int(os.getenv("JWT_EXPIRY_HOURS", "168"))

STRIPE_SECRET = os.getenv("STRIPE_SECRET", "")
STRIPE_REDIRECT_URL = os.getenv("STRIPE_REDIRECT_URL", "http://localhost:3000/stripe/callback")
STRIPE_SUCCESS_URL = os.getenv("STRIPE_SUCCESS_URL", "http://localhost:3000/stripe/success")
STRIPE_CANCEL_URL = os.getenv("STRIPE_CANCEL_URL", "http://localhost:3000/stripe/cancel")

# Percentage of the listing price kept by the platform on every booking
PLATFORM_FEE_PERCENT = float(os.getenv("PLATFORM_FEE_PERCENT", "20"))
PAYOUT_DELAY_DAYS = int(os.getenv("PAYOUT_DELAY_DAYS", "7"))
CURRENCY = os.getenv("CURRENCY", "usd")

LISTINGS_PAGE_LIMIT = int(os.getenv("LISTINGS_PAGE_LIMIT", "24"))

SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY", "")
FROM_EMAIL = os.getenv("FROM_EMAIL", "Staybook <no-reply@staybook.app>")
BASE_URL = os.getenv("BASE_URL", "http://localhost:3000")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
