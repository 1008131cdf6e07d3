"""Security utilities - crypto and webhook signing.

Re-exports all security-related functions for convenience.
"""

from src.saas.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    dummy_password_hash,
    generate_secure_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.saas.core.security.signing import (
    SIGNATURE_HEADER,
    sign_payload,
    verify_signature,
)

__all__ = [
    # Crypto
    "ACCESS_TOKEN_TYPE",
    "create_access_token",
    "decode_token",
    "dummy_password_hash",
    "generate_secure_token",
    "hash_password",
    "hash_token",
    "verify_password",
    # Signing
    "SIGNATURE_HEADER",
    "sign_payload",
    "verify_signature",
]
