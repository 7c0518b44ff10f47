from flask import current_app

from services.availability import BookingPolicy
from utils.clock import club_now


def current_policy() -> BookingPolicy:
    return BookingPolicy.from_config(current_app.config)


def current_now():
    return club_now(current_app.config.get("CLUB_TIMEZONE", "Africa/Kampala"))
