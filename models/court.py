from datetime import datetime
from models.db import db

COURT_STATUSES = ("active", "maintenance", "closed")


class Court(db.Model):
    __tablename__ = "courts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    surface = db.Column(db.String(40), nullable=False, default="clay")
    description = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default="active")
    # status values: active, maintenance, closed

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def is_bookable(self) -> bool:
        return self.status == "active"
