import httpx

from viah.client.errors import (
    ApiError,
    ConversationClosedError,
    DuplicateVendorError,
    error_from_response,
)


def test_closed_conversation_classified_by_code():
    response = httpx.Response(
        403, json={"detail": {"code": "conversation_closed", "message": "This inquiry has been closed"}}
    )

    error = error_from_response(response)

    assert isinstance(error, ConversationClosedError)
    assert error.status_code == 403
    assert error.message == "This inquiry has been closed"


def test_message_text_alone_does_not_classify():
    response = httpx.Response(403, json={"detail": "conversation_closed"})

    error = error_from_response(response)

    assert type(error) is ApiError
    assert error.code is None
    assert error.message == "conversation_closed"


def test_duplicate_vendor_exposes_matches():
    matches = [{"vendor_id": "v1", "vendor_name": "Royal Caterers", "confidence": 0.7, "reasons": []}]
    response = httpx.Response(
        409, json={"detail": {"code": "duplicate_vendor", "message": "Possible duplicate", "matches": matches}}
    )

    error = error_from_response(response)

    assert isinstance(error, DuplicateVendorError)
    assert error.matches == matches


def test_non_json_body():
    error = error_from_response(httpx.Response(502, text="Bad gateway"))

    assert error.status_code == 502
    assert error.code is None
    assert error.message == "Bad gateway"
