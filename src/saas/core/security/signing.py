"""Webhook payload signing.

The signature is an HMAC-SHA256 over the exact raw bytes of the request body,
transmitted as ``X-Webhook-Signature: sha256=<hex digest>``.
"""

import hashlib
import hmac

from src.saas.core.exceptions import InvalidSignature

SIGNATURE_HEADER = "X-Webhook-Signature"
SIGNATURE_PREFIX = "sha256="


def sign_payload(body: bytes, secret: str) -> str:
    """Compute the signature header value for a serialized payload."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(body: bytes, signature: str | None, secret: str) -> None:
    """Check a received signature against the raw body.

    Raises:
        InvalidSignature: If the signature is missing, malformed or does not match.
    """
    if not signature:
        raise InvalidSignature("Missing webhook signature")
    if not signature.startswith(SIGNATURE_PREFIX):
        raise InvalidSignature("Malformed webhook signature")

    expected = sign_payload(body, secret)
    # Compare the full MAC in constant time
    if not hmac.compare_digest(expected.encode(), signature.encode()):
        raise InvalidSignature()
