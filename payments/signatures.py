import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Webhook-Signature"
SIGNATURE_PREFIX = "sha256="


def compute_signature(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_signature(raw_body: bytes, signature_header: str, shared_secret: str) -> bool:
    """Check ``signature_header`` against an HMAC-SHA256 of the raw body.

    With no shared secret configured every body is accepted. Otherwise a
    missing, malformed or mismatching header is rejected. Must be given the
    bytes exactly as received, not a re-serialized payload.
    """
    if not shared_secret:
        return True
    if not signature_header:
        return False
    try:
        received = signature_header.strip()
        if received.lower().startswith(SIGNATURE_PREFIX):
            received = received[len(SIGNATURE_PREFIX):]
        expected = compute_signature(raw_body or b"", shared_secret)
        return hmac.compare_digest(expected, received.lower())
    except (TypeError, ValueError, UnicodeError):
        logger.warning("Malformed webhook signature header")
        return False
