"""Google Play in-app billing signature checks."""

from __future__ import annotations

import base64
import binascii

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa


class SignatureError(Exception):
    """A billing signature or its public key could not be verified."""


def _b64decode(text: str) -> bytes:
    cleaned = text.replace("\r", "").replace("\n", "")
    return base64.b64decode(cleaned, validate=True)


def verify_signature(public_key_b64: str, receipt: bytes, signature: str) -> bool:
    """Check an RSA SHA-1 PKCS#1 v1.5 signature over a purchase receipt.

    Returns True when the signature is valid and raises SignatureError otherwise.
    """
    try:
        der = _b64decode(public_key_b64)
    except (binascii.Error, ValueError):
        raise SignatureError("failed to decode public key") from None
    try:
        public_key = serialization.load_der_public_key(der)
    except (ValueError, TypeError):
        raise SignatureError("failed to parse public key") from None
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise SignatureError("public key is not an RSA key")
    try:
        decoded_signature = _b64decode(signature)
    except (binascii.Error, ValueError):
        raise SignatureError("failed to decode signature") from None
    try:
        public_key.verify(decoded_signature, bytes(receipt), padding.PKCS1v15(), hashes.SHA1())
    except InvalidSignature:
        raise SignatureError("verification error") from None
    return True