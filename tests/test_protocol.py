import base64

import pytest

from moabdb import protocol
from moabdb.exceptions import DataError


def test_request_field_numbers_follow_declaration_order():
    fields = protocol.Request.DESCRIPTOR.fields_by_name
    assert [fields[name].number for name in ("symbol", "start", "end", "datatype", "username", "token")] == [
        1,
        2,
        3,
        4,
        5,
        6,
    ]
    response_fields = protocol.Response.DESCRIPTOR.fields_by_name
    assert response_fields["code"].number == 1
    assert response_fields["data"].number == 2


def test_encode_request_is_base64_of_protobuf():
    request = protocol.build_request(symbol="AAPL", start=0, end=86400, datatype="daily_stocks")
    encoded = protocol.encode_request(request)

    parsed = protocol.Request()
    parsed.ParseFromString(base64.b64decode(encoded))
    assert parsed.symbol == "AAPL"
    assert parsed.start == 0
    assert parsed.end == 86400
    assert parsed.datatype == "daily_stocks"
    assert parsed.username == ""
    assert parsed.token == ""


def test_request_wire_bytes_for_symbol_field():
    request = protocol.build_request(symbol="A", start=0, end=0, datatype="")
    # поле 1, wire type 2 (length-delimited), длина 1, 'A'
    assert request.SerializeToString() == b"\x0a\x01A"


def test_decode_response_accepts_str_and_bytes():
    body = protocol.encode_response(200, b"payload")
    for raw in (body, body.encode("ascii"), body + "\n"):
        response = protocol.decode_response(raw)
        assert response.code == 200
        assert response.data == b"payload"


@pytest.mark.parametrize("body", ["", "   ", "not base64!!", b"\xff\xfe"])
def test_decode_response_rejects_malformed_body(body):
    with pytest.raises(DataError):
        protocol.decode_response(body)


def test_decode_response_rejects_truncated_message():
    # поле 2 (bytes) объявляет длину 10, но данных нет
    truncated = base64.b64encode(b"\x12\x0a").decode("ascii")
    with pytest.raises(DataError):
        protocol.decode_response(truncated)
