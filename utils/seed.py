from models import db
from models.court import Court

DEFAULT_COURTS = [
    ("Court 1", "clay"),
    ("Court 2", "clay"),
]

def seed_courts() -> int:
    existing = {c.name for c in Court.query.all()}
    added = 0
    for name, surface in DEFAULT_COURTS:
        if name not in existing:
            db.session.add(Court(name=name, surface=surface, status="active"))
            added += 1
    db.session.commit()
    return added
