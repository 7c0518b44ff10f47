import json
from datetime import datetime
from models.db import db


class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=True)      # null for anonymous events
    action = db.Column(db.String(80), nullable=False)   # LOGIN_FAIL, BOOKING_CREATE, ADMIN_BOOKING_CONFIRM...
    entity = db.Column(db.String(80), nullable=True)    # booking | court | user
    entity_id = db.Column(db.String(80), nullable=True)

    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    metadata_json = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "user_id": self.user_id,
            "action": self.action,
            "entity": self.entity,
            "entity_id": self.entity_id,
            "ip": self.ip,
            "metadata": json.loads(self.metadata_json) if self.metadata_json else None,
        }
