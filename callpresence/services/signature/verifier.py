"""OpenPhone webhook signature verification."""
import base64
import binascii
import hashlib
import hmac
import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "openphone-signature"
MIN_SIGNATURE_FIELDS = 4
TIMESTAMP_FIELD = 2
DIGEST_FIELD = 3


class VerificationPolicy(str, Enum):
    """Whether inbound webhook signatures are checked."""

    ENFORCED = "enforced"
    # Insecure: any payload is accepted. Only used when no secret is configured.
    DISABLED = "disabled"


def compute_digest(timestamp: str, payload: bytes, signing_key: bytes) -> str:
    """Compute the base64 HMAC-SHA256 digest over ``timestamp + "." + payload``."""
    signed_data = timestamp.encode("utf-8") + b"." + payload
    digest = hmac.new(signing_key, signed_data, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


class SignatureVerifier:
    """Validates that a webhook body was signed with the shared secret."""

    def __init__(self, secret: Optional[str] = None):
        self.secret = secret or None

    @property
    def policy(self) -> VerificationPolicy:
        if self.secret:
            return VerificationPolicy.ENFORCED
        return VerificationPolicy.DISABLED

    def verify(self, payload: bytes, signature: Optional[str]) -> bool:
        """
        Verify a raw webhook payload against its signature header.

        Args:
            payload: Raw request body exactly as received
            signature: Value of the ``openphone-signature`` header, if any

        Returns:
            True if the payload is authentic or verification is disabled
        """
        if self.policy is VerificationPolicy.DISABLED:
            logger.debug("[SIGNATURE] Verification disabled - webhook secret not configured")
            return True

        if not signature:
            logger.warning("[SIGNATURE] Missing signature header")
            return False

        fields = signature.split(";")
        if len(fields) < MIN_SIGNATURE_FIELDS:
            logger.warning(f"[SIGNATURE] Malformed signature header ({len(fields)} fields)")
            return False

        timestamp = fields[TIMESTAMP_FIELD]
        provided_digest = fields[DIGEST_FIELD]

        try:
            signing_key = base64.b64decode(self.secret)
        except (binascii.Error, ValueError):
            logger.error("[SIGNATURE] Webhook secret is not valid base64")
            return False

        computed_digest = compute_digest(timestamp, payload, signing_key)
        return hmac.compare_digest(
            provided_digest.encode("utf-8"),
            computed_digest.encode("utf-8"),
        )


def verify_signature(payload: bytes, signature: Optional[str], secret: Optional[str]) -> bool:
    """Verify ``payload`` with a one-off verifier for ``secret``."""
    return SignatureVerifier(secret).verify(payload, signature)
