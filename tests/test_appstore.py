import json
import time

import pytest
import responses

from gamekit.appstore import (
    SAND_BOX_URL,
    AppStore,
    AppStoreError,
    IAPResponse,
    error_for_status,
)


def _reply(status, in_app=None):
    return {
        "status": status,
        "environment": "Sandbox",
        "receipt": {"bundle_id": "com.example.game", "in_app": in_app or []},
    }


@pytest.mark.parametrize(
    "status, message",
    [
        (21000, "The App Store could not read the JSON object you provided."),
        (21002, "The data in the receipt-data property was malformed or missing."),
        (21003, "The receipt could not be authenticated."),
        (21005, "The receipt server is not currently available."),
        (21010, "This receipt could not be authorized. Treat this the same as if a purchase was never made."),
        (21150, "Internal data access error."),
        (21199, "Internal data access error."),
        (21200, "An unknown error occurred"),
    ],
)
def test_error_for_status(status, message):
    error = error_for_status(status)
    assert isinstance(error, AppStoreError)
    assert str(error) == message
    assert error.status == status


def test_status_zero_is_success():
    assert error_for_status(0) is None


def test_verify_success_sends_receipt():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, SAND_BOX_URL, json=_reply(0, [{"transaction_id": "t1"}]))
        result = AppStore(SAND_BOX_URL).verify("receipt")
        sent = rsps.calls[0].request
    assert result.status == 0
    assert result.environment == "Sandbox"
    assert result.receipt.in_apps[0].transaction_id == "t1"
    assert json.loads(sent.body) == {"receipt-data": "receipt", "exclude-old-transactions": False}
    assert sent.headers["Content-Type"] == "application/json; charset=utf-8"


def test_verify_failure_carries_response():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, SAND_BOX_URL, json=_reply(21007))
        with pytest.raises(AppStoreError) as caught:
            AppStore(SAND_BOX_URL).verify("receipt")
    assert caught.value.status == 21007
    assert caught.value.response.receipt.bundle_id == "com.example.game"


def test_verify_rejects_non_object():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, SAND_BOX_URL, body="[]")
        with pytest.raises(ValueError):
            AppStore(SAND_BOX_URL).verify("receipt")


def test_get_order_found():
    response = IAPResponse.from_dict(
        _reply(0, [
            {"transaction_id": "t0", "product_id": "p0"},
            {"transaction_id": "t1", "product_id": "gems", "purchase_date_ms": "1500000000123"},
        ])
    )
    order = response.get_order("t1")
    assert order.order_id == "t1"
    assert order.product_id == "gems"
    assert order.package_name == "com.example.game"
    assert order.purchase_time == 1500000000


def test_get_order_bad_time_uses_now():
    response = IAPResponse.from_dict(_reply(0, [{"transaction_id": "t1", "purchase_date_ms": "soon"}]))
    before = int(time.time())
    order = response.get_order("t1")
    assert before <= order.purchase_time <= int(time.time())


def test_get_order_missing():
    response = IAPResponse.from_dict(_reply(0, [{"transaction_id": "t1"}]))
    with pytest.raises(LookupError, match="No TransactionID"):
        response.get_order("t2")