from flask import Blueprint, Response, current_app, jsonify, stream_with_context

from services.chat_proxy import (
    ChatGatewayError,
    build_system_prompt,
    open_stream,
    relay_stream,
    validate_messages,
)
from utils.booking_context import current_policy
from utils.request_data import json_object

chat_bp = Blueprint("chat", __name__, url_prefix="/api")


@chat_bp.post("/chat")
def chat():
    data = json_object()
    try:
        messages = validate_messages(data.get("messages"))
    except ValueError as e:
        return jsonify(error=str(e)), 400

    try:
        upstream = open_stream(messages, build_system_prompt(current_policy()), current_app.config)
    except ChatGatewayError as e:
        return jsonify(error=e.message), e.status_code

    return Response(
        stream_with_context(relay_stream(upstream)),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
