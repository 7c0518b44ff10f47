from datetime import datetime
from models.db import db
from utils.roles import Role


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120), nullable=True)
    phone_number = db.Column(db.String(30), nullable=True)

    # one of Role; stored as its value
    role = db.Column(db.String(20), nullable=False, default=Role.MEMBER.value)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    bookings = db.relationship("Booking", back_populates="user")

    @property
    def club_role(self) -> Role:
        # unknown stored values fall back to the least privileged role
        return Role.parse(self.role) or Role.MEMBER
