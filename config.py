# config.py - Application settings read from environment variables
import os

import pytz
from dotenv import load_dotenv

# Load the .env file without overriding variables set by the platform
load_dotenv(override=False)

APP_NAME = os.getenv("APP_NAME", "Bantay Daluyan API")

# "memory" for local sessions and tests, "firestore" for deployment
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory").lower()

JWT_SECRET = os.getenv("JWT_SECRET", "supersecretkey")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRATION_MINUTES = int(os.getenv("JWT_EXPIRATION_MINUTES", 60 * 24))  # 1 day

TIMEZONE = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Manila"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
