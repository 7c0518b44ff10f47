from flask import request


class PayloadError(ValueError):
    """Request body or field has the wrong shape; routes answer 400."""


def json_object() -> dict:
    """The JSON request body as a dict. A missing or unparseable body is empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PayloadError("Request body must be a JSON object")
    return data


def optional_text(data: dict, field: str, max_len: int):
    """Stripped, truncated string value of ``field`` or None when absent/blank."""
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise PayloadError(f"{field} must be a string")
    return value.strip()[:max_len] or None
