"""App Store server notifications (version 2): signed payload decoding.

A signed payload is a JWS whose header carries an ``x5c`` certificate chain
(leaf, intermediate, root). The root entry must chain to the trusted root
certificate. The leaf's elliptic-curve key then verifies the signature.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union

import jwt
from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ec

APPLE_ROOT_PEM = b"""-----BEGIN CERTIFICATE-----
MIICQzCCAcmgAwIBAgIILcX8iNLFS5UwCgYIKoZIzj0EAwMwZzEbMBkGA1UEAwwS
QXBwbGUgUm9vdCBDQSAtIEczMSYwJAYDVQQLDB1BcHBsZSBDZXJ0aWZpY2F0aW9u
IEF1dGhvcml0eTETMBEGA1UECgwKQXBwbGUgSW5jLjELMAkGA1UEBhMCVVMwHhcN
MTQwNDMwMTgxOTA2WhcNMzkwNDMwMTgxOTA2WjBnMRswGQYDVQQDDBJBcHBsZSBS
b290IENBIC0gRzMxJjAkBgNVBAsMHUFwcGxlIENlcnRpZmljYXRpb24gQXV0aG9y
aXR5MRMwEQYDVQQKDApBcHBsZSBJbmMuMQswCQYDVQQGEwJVUzB2MBAGByqGSM49
AgEGBSuBBAAiA2IABJjpLz1AcqTtkyJygRMc3RCV8cWjTnHcFBbZDuWmBSp3ZHtf
TjjTuxxEtX/1H7YyYl3J6YRbTzBPEVoA/VhYDKX1DyxNB0cTddqXl5dvMVztK517
IDvYuVTZXpmkOlEKMaNCMEAwHQYDVR0OBBYEFLuw3qFYM4iapIqZ3r6966/ayySr
MA8GA1UdEwEB/wQFMAMBAf8wDgYDVR0PAQH/BAQDAgEGMAoGCCqGSM49BAMDA2gA
MGUCMQCD6cHEFl4aXTQY2e3v9GwOAEZLuN+yRhHFD/3meoyhpmvOwgPUnPWTxnS4
at+qIxUCMG1mihDK1A3UT82NQz60imOlM27jbdoXt2QfyFMm+YhidDkLF1vLUagM
6BgD56KyKA==
-----END CERTIFICATE-----
"""

_ALGORITHMS = ["ES256", "ES384", "ES512"]

PemData = Union[bytes, str]


class NotificationType(str, Enum):
    CONSUMPTION_REQUEST = "CONSUMPTION_REQUEST"
    DID_CHANGE_RENEWAL_PREF = "DID_CHANGE_RENEWAL_PREF"
    DID_CHANGE_RENEWAL_STATUS = "DID_CHANGE_RENEWAL_STATUS"
    DID_FAIL_TO_RENEW = "DID_FAIL_TO_RENEW"
    DID_RENEW = "DID_RENEW"
    EXPIRED = "EXPIRED"
    GRACE_PERIOD_EXPIRED = "GRACE_PERIOD_EXPIRED"
    OFFER_REDEEMED = "OFFER_REDEEMED"
    PRICE_INCREASE = "PRICE_INCREASE"
    REFUND = "REFUND"
    REFUND_DECLINED = "REFUND_DECLINED"
    RENEWAL_EXTENDED = "RENEWAL_EXTENDED"
    REVOKE = "REVOKE"
    SUBSCRIBED = "SUBSCRIBED"


class Subtype(str, Enum):
    INITIAL_BUY = "INITIAL_BUY"
    RESUBSCRIBE = "RESUBSCRIBE"
    DOWNGRADE = "DOWNGRADE"
    UPGRADE = "UPGRADE"
    AUTO_RENEW_ENABLED = "AUTO_RENEW_ENABLED"
    AUTO_RENEW_DISABLED = "AUTO_RENEW_DISABLED"
    VOLUNTARY = "VOLUNTARY"
    BILLING_RETRY = "BILLING_RETRY"
    PRICE_INCREASE = "PRICE_INCREASE"
    GRACE_PERIOD = "GRACE_PERIOD"
    BILLING_RECOVERY = "BILLING_RECOVERY"
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"


def _json(name: str) -> Any:
    return {"json": name}


def _from_json(cls, data: Mapping[str, Any], **overrides: Any):
    values = {}
    for f in fields(cls):
        key = f.metadata.get("json")
        if key is None:
            continue
        value = data.get(key)
        if value is not None:
            values[f.name] = value
    values.update(overrides)
    return cls(**values)


@dataclass
class Data:
    """App and signed-info section of a notification."""

    app_apple_id: int = field(default=0, metadata=_json("appAppleId"))
    bundle_id: str = field(default="", metadata=_json("bundleId"))
    bundle_version: str = field(default="", metadata=_json("bundleVersion"))
    environment: str = field(default="", metadata=_json("environment"))
    signed_renewal_info: str = field(default="", metadata=_json("signedRenewalInfo"))
    signed_transaction_info: str = field(default="", metadata=_json("signedTransactionInfo"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Data":
        return _from_json(cls, data)


@dataclass
class TransactionInfo:
    """Decoded signed transaction information."""

    app_account_token: str = field(default="", metadata=_json("appAccountToken"))
    bundle_id: str = field(default="", metadata=_json("bundleId"))
    environment: str = field(default="", metadata=_json("environment"))
    expires_date: int = field(default=0, metadata=_json("expiresDate"))
    in_app_ownership_type: str = field(default="", metadata=_json("inAppOwnershipType"))
    is_upgraded: bool = field(default=False, metadata=_json("isUpgraded"))
    offer_identifier: str = field(default="", metadata=_json("offerIdentifier"))
    offer_type: int = field(default=0, metadata=_json("offerType"))
    original_purchase_date: int = field(default=0, metadata=_json("originalPurchaseDate"))
    original_transaction_id: str = field(default="", metadata=_json("originalTransactionId"))
    product_id: str = field(default="", metadata=_json("productId"))
    purchase_date: int = field(default=0, metadata=_json("purchaseDate"))
    quantity: int = field(default=0, metadata=_json("quantity"))
    revocation_date: int = field(default=0, metadata=_json("revocationDate"))
    revocation_reason: int = field(default=0, metadata=_json("revocationReason"))
    signed_date: int = field(default=0, metadata=_json("signedDate"))
    storefront: str = field(default="", metadata=_json("storefront"))
    storefront_id: str = field(default="", metadata=_json("storefrontId"))
    subscription_group_identifier: str = field(default="", metadata=_json("subscriptionGroupIdentifier"))
    transaction_id: str = field(default="", metadata=_json("transactionId"))
    transaction_reason: str = field(default="", metadata=_json("transactionReason"))
    type: str = field(default="", metadata=_json("type"))
    web_order_line_item_id: str = field(default="", metadata=_json("webOrderLineItemId"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransactionInfo":
        return _from_json(cls, data)


@dataclass
class RenewalInfo:
    """Decoded signed subscription renewal information."""

    auto_renew_product_id: str = field(default="", metadata=_json("autoRenewProductId"))
    auto_renew_status: int = field(default=0, metadata=_json("autoRenewStatus"))
    environment: str = field(default="", metadata=_json("environment"))
    expiration_intent: int = field(default=0, metadata=_json("expirationIntent"))
    grace_period_expires_date: int = field(default=0, metadata=_json("gracePeriodExpiresDate"))
    is_in_billing_retry_period: bool = field(default=False, metadata=_json("isInBillingRetryPeriod"))
    offer_identifier: str = field(default="", metadata=_json("offerIdentifier"))
    offer_type: int = field(default=0, metadata=_json("offerType"))
    original_transaction_id: str = field(default="", metadata=_json("originalTransactionId"))
    price_increase_status: int = field(default=0, metadata=_json("priceIncreaseStatus"))
    product_id: str = field(default="", metadata=_json("productId"))
    recent_subscription_start_date: int = field(default=0, metadata=_json("recentSubscriptionStartDate"))
    renewal_date: int = field(default=0, metadata=_json("renewalDate"))
    signed_date: int = field(default=0, metadata=_json("signedDate"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RenewalInfo":
        return _from_json(cls, data)


@dataclass
class NotificationV2Payload:
    """The decoded body of a version 2 server notification."""

    notification_type: str = field(default="", metadata=_json("notificationType"))
    subtype: str = field(default="", metadata=_json("subtype"))
    notification_uuid: str = field(default="", metadata=_json("notificationUUID"))
    notification_version: str = field(default="", metadata=_json("notificationVersion"))
    data: Optional[Data] = None
    root_pem: PemData = field(default=APPLE_ROOT_PEM, repr=False, compare=False)

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any], root_pem: PemData = APPLE_ROOT_PEM) -> "NotificationV2Payload":
        """Build a payload from verified claims; nested infos are checked against root_pem."""
        raw = claims.get("data")
        data = Data.from_dict(raw) if isinstance(raw, Mapping) else None
        return _from_json(cls, claims, data=data, root_pem=root_pem)

    def decode_renewal_info(self) -> RenewalInfo:
        if self.data is None:
            raise ValueError("data is nil")
        if not self.data.signed_renewal_info:
            raise ValueError("data.signedRenewalInfo is empty")
        return RenewalInfo.from_dict(extract_claims(self.data.signed_renewal_info, self.root_pem))

    def decode_transaction_info(self) -> TransactionInfo:
        if self.data is None:
            raise ValueError("data is nil")
        if not self.data.signed_transaction_info:
            raise ValueError("data.signedTransactionInfo is empty")
        return TransactionInfo.from_dict(extract_claims(self.data.signed_transaction_info, self.root_pem))


def _decode_segment(text: str) -> bytes:
    normalized = text.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    return base64.b64decode(normalized, validate=True)


def _header_cert(token: str, index: int) -> bytes:
    if index > 2:
        raise ValueError("invalid index")
    header = json.loads(_decode_segment(token.split(".")[0]))
    if not isinstance(header, dict):
        raise ValueError("JWS header is not a JSON object")
    chain = header.get("x5c") or []
    if not isinstance(chain, list):
        raise ValueError("x5c header is not a list")
    if len(chain) <= index:
        raise ValueError(f"index[{index}] > header.x5c slice len({len(chain)})")
    return base64.b64decode(chain[index], validate=True)


def _utc(cert: x509.Certificate, name: str) -> datetime:
    aware = getattr(cert, f"{name}_utc", None)
    if aware is not None:
        return aware
    return getattr(cert, name).replace(tzinfo=timezone.utc)


def _currently_valid(cert: x509.Certificate) -> bool:
    now = datetime.now(timezone.utc)
    return _utc(cert, "not_valid_before") <= now <= _utc(cert, "not_valid_after")


def _issued_by(cert: x509.Certificate, issuer: x509.Certificate) -> bool:
    try:
        cert.verify_directly_issued_by(issuer)
    except (ValueError, TypeError, InvalidSignature):
        return False
    return _currently_valid(issuer)


def _verify_chain(cert_der: bytes, intermediate_der: bytes, root_pem: PemData) -> None:
    pem = root_pem.encode("ascii") if isinstance(root_pem, str) else bytes(root_pem)
    try:
        roots = x509.load_pem_x509_certificates(pem)
    except ValueError:
        raise ValueError("failed to parse root certificate") from None
    try:
        intermediate = x509.load_der_x509_certificate(intermediate_der)
    except ValueError:
        raise ValueError("failed to parse intermedia certificate") from None
    cert = x509.load_der_x509_certificate(cert_der)
    if not _currently_valid(cert):
        raise ValueError("certificate has expired or is not yet valid")
    if any(cert == root for root in roots):
        return
    if any(_issued_by(cert, root) for root in roots):
        return
    if _issued_by(cert, intermediate) and any(_issued_by(intermediate, root) for root in roots):
        return
    raise ValueError("certificate signed by unknown authority")


def extract_claims(signed_payload: str, root_pem: PemData = APPLE_ROOT_PEM) -> dict[str, Any]:
    """Verify a JWS against its x5c chain and root_pem; returns its claims.

    Raises ValueError for a malformed header or an untrusted chain, and
    jwt.InvalidTokenError subclasses for a bad signature or time claims.
    """
    root_der = _header_cert(signed_payload, 2)
    intermediate_der = _header_cert(signed_payload, 1)
    _verify_chain(root_der, intermediate_der, root_pem)
    leaf = x509.load_der_x509_certificate(_header_cert(signed_payload, 0))
    public_key = leaf.public_key()
    if not isinstance(public_key, ec.EllipticCurvePublicKey):
        raise ValueError("appstore public key must be an elliptic-curve key")
    claims = jwt.decode(
        signed_payload,
        public_key,
        algorithms=_ALGORITHMS,
        options={"verify_aud": False},
    )
    if not isinstance(claims, dict):
        raise ValueError("claims are not a JSON object")
    return claims


def decode_signed_payload(signed_payload: str) -> NotificationV2Payload:
    """Verify and decode a notification's signedPayload against the Apple root."""
    if not signed_payload:
        raise ValueError("signedPayload is empty")
    return NotificationV2Payload.from_claims(extract_claims(signed_payload, APPLE_ROOT_PEM))