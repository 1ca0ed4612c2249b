"""Configuration module for the Mentor Connect scheduling service.

This module provides centralized configuration management, including the
remote API location, API server settings, scheduling limits, slot form
defaults and the public path table used by route access control.
All configuration values can be overridden via environment variables.
"""

import os
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from core.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# --- Remote API Configuration ---

# Base URL of the persistence API (slots, bookings, users, courses)
REMOTE_API_BASE_URL: str = os.getenv(
    "REMOTE_API_BASE_URL", "https://masai-connect-backend-w28f.vercel.app/api"
).rstrip("/")

# Requests are one-shot: no timeout unless explicitly configured
_REMOTE_API_TIMEOUT_STR: str = os.getenv("REMOTE_API_TIMEOUT", "").strip()
try:
    REMOTE_API_TIMEOUT: Optional[float] = (
        float(_REMOTE_API_TIMEOUT_STR) if _REMOTE_API_TIMEOUT_STR else None
    )
except ValueError:
    raise ConfigurationError(
        f"REMOTE_API_TIMEOUT must be a number of seconds, got '{_REMOTE_API_TIMEOUT_STR}'"
    )

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Time Configuration ---

# Wall-clock zone used to classify sessions and build the current week
TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Kolkata")

# --- Session Cookie Configuration ---

TOKEN_COOKIE_NAME: str = os.getenv("TOKEN_COOKIE_NAME", "token")
SELECTED_ROLE_COOKIE_NAME: str = os.getenv("SELECTED_ROLE_COOKIE_NAME", "selectedRole")

# --- Booking Configuration ---

# Maximum number of bookings allowed per student
MAX_BOOKINGS: int = int(os.getenv("MAX_BOOKINGS", "15"))

# Students may pick open slots from today up to this many days ahead
BOOKING_WINDOW_DAYS: int = int(os.getenv("BOOKING_WINDOW_DAYS", "7"))

AGENDA_MAX_LENGTH: int = 200

# Course whose rosters supply responders for each session type
DEFAULT_COURSE_ID: str = os.getenv("DEFAULT_COURSE_ID", "67a9b3795cf0982adcc295d7")

# Mentor schedule listing
SCHEDULE_PAGE_SIZE: int = int(os.getenv("SCHEDULE_PAGE_SIZE", "5"))

# --- Slot Form Defaults ---

DEFAULT_SLOT_START_TIME: str = "10:00"
DEFAULT_SLOT_END_TIME: str = "17:00"
DEFAULT_SLOT_DURATION_MINUTES: int = 30
DEFAULT_BUFFER_MINUTES: int = 0

# Buffer choices offered by the slot creation form, in minutes
BUFFER_PRESETS: Tuple[int, ...] = (0, 5, 10, 20, 30, 60)

# Cookie remembering the slot form settings a mentor chose to save
SLOT_SETTINGS_COOKIE_NAME: str = "mentorSlotSettings"
SLOT_SETTINGS_MAX_AGE: int = 60 * 60 * 24 * 365

# --- Route Access Configuration ---

HOME_PATH: str = "/"
SELECT_ROLE_PATH: str = "/select-role"
PENDING_APPROVAL_PATH: str = "/pending-approval"

# Redirect target for a role without any configured routes
FALLBACK_DASHBOARD_PATH: str = "/dashboard"

# Paths that are always reachable, matched exactly
PUBLIC_PATHS: Tuple[str, ...] = (HOME_PATH, SELECT_ROLE_PATH)

# Paths that are always reachable, matched by prefix
PUBLIC_PATH_PREFIXES: Tuple[str, ...] = (
    "/static",
    "/images",
    "/favicon.ico",
    "/api",
    "/docs",
    "/redoc",
    "/openapi.json",
)
