"""App Store receipt verification."""

from __future__ import annotations

import json
import re
import time
from dataclasses import dataclass, field, fields
from typing import Any, Mapping, NamedTuple, Optional

import requests

SAND_BOX_URL = "https://sandbox.itunes.apple.com/verifyReceipt"
PRODUCTION_URL = "https://buy.itunes.apple.com/verifyReceipt"

_MESSAGES = {
    21000: "The App Store could not read the JSON object you provided.",
    21002: "The data in the receipt-data property was malformed or missing.",
    21003: "The receipt could not be authenticated.",
    21004: "The shared secret you provided does not match the shared secret on file for your account.",
    21005: "The receipt server is not currently available.",
    21007: "This receipt is from the test environment, but it was sent to the production environment for verification. Send it to the test environment instead.",
    21008: "This receipt is from the production environment, but it was sent to the test environment for verification. Send it to the production environment instead.",
    21010: "This receipt could not be authorized. Treat this the same as if a purchase was never made.",
}
INTERNAL_ERROR_MESSAGE = "Internal data access error."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"

_INTEGER = re.compile(r"[+-]?\d+")


class AppStoreError(Exception):
    """The App Store answered with a non-zero status."""

    def __init__(self, status: int, message: str, response: Optional["IAPResponse"] = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.response = response


def error_for_status(status: int) -> Optional[AppStoreError]:
    """Error matching an App Store status, or None for status 0."""
    if status == 0:
        return None
    if status in _MESSAGES:
        message = _MESSAGES[status]
    elif 21100 <= status <= 21199:
        message = INTERNAL_ERROR_MESSAGE
    else:
        message = UNKNOWN_ERROR_MESSAGE
    return AppStoreError(status, message)


def _build(cls, data: Mapping[str, Any], **overrides: Any):
    values = {f.name: data[f.name] for f in fields(cls) if data.get(f.name) is not None}
    values.update(overrides)
    return cls(**values)


@dataclass
class InApp:
    """One in-app purchase recorded in a receipt."""

    quantity: str = ""
    product_id: str = ""
    transaction_id: str = ""
    original_transaction_id: str = ""
    web_order_line_item_id: str = ""
    is_trial_period: str = ""
    is_in_intro_offer_period: str = ""
    expires_date: str = ""
    expires_date_ms: str = ""
    expires_date_pst: str = ""
    expires_date_formatted: str = ""
    expires_date_formatted_pst: str = ""
    purchase_date: str = ""
    purchase_date_ms: str = ""
    purchase_date_pst: str = ""
    original_purchase_date: str = ""
    original_purchase_date_ms: str = ""
    original_purchase_date_pst: str = ""
    cancellation_date: str = ""
    cancellation_date_ms: str = ""
    cancellation_date_pst: str = ""
    cancellation_reason: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InApp":
        return _build(cls, data)


@dataclass
class Receipt:
    """The decoded contents of an app receipt."""

    receipt_type: str = ""
    adam_id: int = 0
    app_item_id: int = 0
    bundle_id: str = ""
    application_version: str = ""
    download_id: int = 0
    version_external_identifier: int = 0
    original_application_version: str = ""
    in_apps: list[InApp] = field(default_factory=list)
    receipt_creation_date: str = ""
    receipt_creation_date_ms: str = ""
    receipt_creation_date_pst: str = ""
    request_date: str = ""
    request_date_ms: str = ""
    request_date_pst: str = ""
    original_purchase_date: str = ""
    original_purchase_date_ms: str = ""
    original_purchase_date_pst: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Receipt":
        in_apps = [InApp.from_dict(entry) for entry in data.get("in_app") or []]
        return _build(cls, data, in_apps=in_apps)


class Order(NamedTuple):
    order_id: str
    product_id: str
    package_name: str
    purchase_time: int


@dataclass
class IAPResponse:
    """The App Store's answer to a verification request."""

    status: int = 0
    environment: str = ""
    receipt: Receipt = field(default_factory=Receipt)
    is_retryable: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IAPResponse":
        return cls(
            status=int(data.get("status", 0) or 0),
            environment=data.get("environment", "") or "",
            receipt=Receipt.from_dict(data.get("receipt") or {}),
            is_retryable=bool(data.get("is-retryable", False)),
        )

    def get_order(self, transaction_id: str) -> Order:
        """Find a purchase by transaction id; purchase time is in Unix seconds.

        An unreadable purchase time falls back to the current time.
        Raises LookupError when no purchase has that transaction id.
        """
        for in_app in self.receipt.in_apps:
            if in_app.transaction_id != transaction_id:
                continue
            raw = in_app.purchase_date_ms
            if _INTEGER.fullmatch(raw):
                millis = int(raw)
                seconds = abs(millis) // 1000
                purchase_time = -seconds if millis < 0 else seconds
            else:
                purchase_time = int(time.time())
            return Order(in_app.transaction_id, in_app.product_id, self.receipt.bundle_id, purchase_time)
        raise LookupError("No TransactionID")


@dataclass
class AppStore:
    """Client for one verifyReceipt endpoint."""

    url: str = PRODUCTION_URL
    timeout: float = 10.0

    def verify(self, receipt: str) -> IAPResponse:
        """Verify a base64 receipt; raises AppStoreError carrying the response on a non-zero status."""
        body = json.dumps({"receipt-data": receipt, "exclude-old-transactions": False})
        reply = requests.post(
            self.url,
            data=(body + "\n").encode("utf-8"),
            headers={"Content-Type": "application/json; charset=utf-8"},
            timeout=self.timeout,
        )
        data = json.loads(reply.content)
        if not isinstance(data, dict):
            raise ValueError("App Store reply is not a JSON object")
        response = IAPResponse.from_dict(data)
        error = error_for_status(response.status)
        if error is not None:
            error.response = response
            raise error
        return response