from .db import db
from .user import User
from .session import Session
from .court import Court
from .booking import Booking
from .audit_log import AuditLog

__all__ = ["db", "User", "Session", "Court", "Booking", "AuditLog"]
