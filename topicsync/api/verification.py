"""Discourse webhook signature verification.

Discourse signs every delivery with the webhook secret and sends
``X-Discourse-Event-Signature: sha256=<hex HMAC-SHA256 of the raw body>``.
Verification is fail-closed: an empty secret rejects every request.
"""

import hashlib
import hmac
import json
from typing import Any, Optional

from fastapi import Depends, Request

from topicsync.api.deps import get_app_settings
from topicsync.core.config import Settings
from topicsync.core.exceptions import WebhookAuthenticationError
from topicsync.core.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_PREFIX = "sha256="


def generate_signature(body: bytes, secret: str) -> str:
    """Generate the Discourse-style HMAC signature for a body."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_discourse_signature(
    body: bytes,
    signature_header: Optional[str],
    secret: str,
) -> bool:
    """
    Verify a Discourse webhook signature.

    Args:
        body: Raw request body
        signature_header: Value of the signature header
        secret: Shared webhook secret

    Returns:
        True if the signature matches
    """
    signature_header = (signature_header or "").strip()
    if not secret or not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    expected = generate_signature(body, secret)
    return hmac.compare_digest(expected, signature_header)


async def verify_discourse_webhook(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """
    FastAPI dependency returning the verified JSON payload.

    Raises:
        WebhookAuthenticationError: if the secret is unset or the signature
            does not match

    A body that is signed but not a JSON object yields an empty payload,
    which the sync treats as nothing to do.
    """
    secret = settings.webhook_secret.get_secret_value()
    if not secret:
        logger.warning("Webhook secret not configured, rejecting webhook")
        raise WebhookAuthenticationError("secret not configured")

    body = await request.body()
    signature = request.headers.get(settings.webhook_signature_header)

    if not verify_discourse_signature(body, signature, secret):
        logger.warning(
            "Webhook signature verification failed",
            event_type=request.headers.get("X-Discourse-Event-Type"),
            instance=request.headers.get("X-Discourse-Instance"),
        )
        raise WebhookAuthenticationError("signature mismatch")

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.info("Webhook body is not valid JSON")
        return {}

    if not isinstance(payload, dict):
        return {}

    return payload
