import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as btc.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "btc.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie name for our auth token
    AUTH_COOKIE_NAME = "btc_session"

    # 24 hours session lifetime
    SESSION_LIFETIME_SECONDS = 24 * 60 * 60

    # Idle timeout: 2 hours
    IDLE_TIMEOUT_SECONDS = 2 * 60 * 60

    # Session/cookie security defaults
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", "false")  # set True when using HTTPS

    # Password policy
    PASSWORD_MIN_LEN = 8
    PASSWORD_REQUIRE_SYMBOL = False

    # Club clock: slots are local wall-clock times
    CLUB_TIMEZONE = os.getenv("CLUB_TIMEZONE", "Africa/Kampala")

    # Slot grid: hourly slots from 08:00, last one ends 22:00
    OPENING_HOUR = 8
    CLOSING_HOUR = 22
    PRIME_TIME_WINDOWS = [(8, 12), (15, 18)]

    # Booking policy
    ADVANCE_NOTICE_HOURS = int(os.getenv("ADVANCE_NOTICE_HOURS", "24"))
    CANCELLATION_WINDOW_HOURS = int(os.getenv("CANCELLATION_WINDOW_HOURS", "2"))
    ENFORCE_ADVANCE_NOTICE = _env_flag("ENFORCE_ADVANCE_NOTICE", "true")
    ENFORCE_CANCELLATION_WINDOW = _env_flag("ENFORCE_CANCELLATION_WINDOW", "true")
    BOOKING_INITIAL_STATUS = os.getenv("BOOKING_INITIAL_STATUS", "pending")

    # AI assistant gateway
    CHAT_GATEWAY_URL = os.getenv("CHAT_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
    CHAT_API_KEY = os.getenv("LOVABLE_API_KEY")
    CHAT_MODEL = os.getenv("CHAT_MODEL", "google/gemini-3-flash-preview")
    CHAT_CONNECT_TIMEOUT_SECONDS = 5
    CHAT_READ_TIMEOUT_SECONDS = int(os.getenv("CHAT_READ_TIMEOUT_SECONDS", "30"))

    # Seed default courts at startup
    SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", "true")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False
