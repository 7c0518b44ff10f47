from enum import Enum


class Role(str, Enum):
    MEMBER = "member"
    COACH = "coach"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value):
        """Returns the Role for a name (case-insensitive) or None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


DASHBOARD_PATHS = {
    Role.MEMBER: "/member/dashboard",
    Role.COACH: "/coach/dashboard",
    Role.ADMIN: "/admin/dashboard",
}


def dashboard_path(role: Role) -> str:
    return DASHBOARD_PATHS[role]
