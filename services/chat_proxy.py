import logging
from typing import Iterator, List, Mapping

import requests

logger = logging.getLogger(__name__)

ALLOWED_ROLES = {"user", "assistant"}
MAX_MESSAGES = 50
MAX_CONTENT_CHARS = 4000

SYSTEM_PROMPT_TEMPLATE = """You are the AI Assistant for Buwate Tennis Club (BTC) in Buwate, Kampala, Uganda. \
You help members and visitors with court bookings, pricing, membership and club rules.

## Club Information
- Location: Buwate, Kampala, Uganda
- Phone: +256 772 675 050, +256 772 367 7325
- Email: btc2023@gmail.com
- Operating Hours: {opening} - {closing} daily

## Facilities
- 2 professional clay courts with floodlights for evening play
- 2 independent contractor coaches

## Playing Rates (per hour)
- Club Members: UGX 10,000
- Club Members' Children: UGX 5,000
- Non-Members: UGX 15,000
- Non-Members' Children: UGX 10,000

## Monthly Packages (unlimited play)
- Club Members: UGX 150,000/month
- Non-Members: UGX 200,000/month

## Membership
- Annual Membership Fee: UGX 100,000 (one-time)
- Monthly Subscription: UGX 20,000/month
- Benefits: discounted rates, priority booking, tournament access, member events

## Booking Rules
- Book at least {advance} hours in advance
- Maximum booking: 1 hour per session
- Cancellation: at least {cancel} hours before your slot
- Prime Time: {prime}
- Off-Peak: all other operating hours

## Club Rules
- Pay via MoMo only. Cash is not accepted.
- No animals, pets or toys inside the fenced court area
- No smoking within the fenced court area
- No vulgar language or aggressive behaviour
- Only racquets, tennis balls and players on the clay courts
- Violations may result in a ban

## Your Behaviour
- Be friendly, helpful and professional
- If you do not know something, suggest contacting the club directly
- Keep responses concise and use UGX for all prices"""


class ChatGatewayError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class ChatNotConfiguredError(ChatGatewayError):
    def __init__(self):
        super().__init__(500, "Chat assistant is not configured")


def _hour_label(hour: int) -> str:
    return f"{hour:02d}:00"


def build_system_prompt(policy) -> str:
    prime = " and ".join(
        f"{_hour_label(lo)} - {_hour_label(hi)}" for lo, hi in policy.prime_time_windows
    )
    return SYSTEM_PROMPT_TEMPLATE.format(
        opening=_hour_label(policy.opening_hour),
        closing=_hour_label(policy.closing_hour),
        advance=policy.advance_notice_hours,
        cancel=policy.cancellation_window_hours,
        prime=prime,
    )


def validate_messages(raw) -> List[dict]:
    if not isinstance(raw, list) or not raw:
        raise ValueError("messages must be a non-empty list")
    if len(raw) > MAX_MESSAGES:
        raise ValueError(f"At most {MAX_MESSAGES} messages allowed")

    cleaned = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError("Each message must be an object")
        role = item.get("role")
        content = item.get("content")
        if role not in ALLOWED_ROLES:
            raise ValueError("Message role must be 'user' or 'assistant'")
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Message content must be a non-empty string")
        cleaned.append({"role": role, "content": content[:MAX_CONTENT_CHARS]})
    return cleaned


def open_stream(messages: List[dict], system_prompt: str, config: Mapping) -> requests.Response:
    """POST the conversation to the gateway and return the open streaming response.

    The caller owns the returned response and must close it (relay_stream does).
    """
    api_key = config.get("CHAT_API_KEY")
    if not api_key:
        raise ChatNotConfiguredError()

    payload = {
        "model": config.get("CHAT_MODEL"),
        "messages": [{"role": "system", "content": system_prompt}, *messages],
        "stream": True,
    }
    timeout = (
        config.get("CHAT_CONNECT_TIMEOUT_SECONDS", 5),
        config.get("CHAT_READ_TIMEOUT_SECONDS", 30),
    )

    try:
        resp = requests.post(
            config.get("CHAT_GATEWAY_URL"),
            json=payload,
            headers={"Authorization": f"Bearer {api_key}"},
            stream=True,
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        logger.error("AI gateway unreachable: %s", e)
        raise ChatGatewayError(502, "AI gateway unreachable") from e

    if resp.status_code < 400:
        return resp

    try:
        if resp.status_code == 429:
            raise ChatGatewayError(429, "Rate limits exceeded, please try again later.")
        if resp.status_code == 402:
            raise ChatGatewayError(402, "Service temporarily unavailable.")
        logger.error("AI gateway error: %s %s", resp.status_code, resp.text[:500])
        raise ChatGatewayError(500, "AI gateway error")
    finally:
        resp.close()


def relay_stream(upstream: requests.Response) -> Iterator[bytes]:
    """Yield the upstream body as it arrives.

    The upstream connection is released however the loop ends: exhausted,
    read timeout, or the client going away (GeneratorExit on close()).
    """
    try:
        for chunk in upstream.iter_content(chunk_size=None):
            if chunk:
                yield chunk
    except requests.exceptions.RequestException as e:
        logger.warning("AI gateway stream interrupted: %s", e)
    finally:
        upstream.close()
