import base64
from datetime import datetime, timedelta, timezone

import pytest

from moabdb import endpoints, protocol
from moabdb.credentials import Credentials
from moabdb.exceptions import ValidationError
from moabdb.models import EquityQuery
from moabdb.window import Window

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _decode_header(spec: endpoints.EndpointSpec):
    request = protocol.Request()
    request.ParseFromString(base64.b64decode(spec.headers[endpoints.REQUEST_HEADER]))
    return request


def test_equity_datatype():
    assert endpoints.equity_datatype(False) == "daily_stocks"
    assert endpoints.equity_datatype(True) == "intraday_stocks"


def test_build_equity_endpoint_encodes_query_into_header():
    query = EquityQuery(
        symbol="aapl",
        window=Window(start=EPOCH, end=EPOCH + timedelta(days=1)),
        intraday=True,
        credentials=Credentials(username="jane", token="t0ken"),
    )
    spec = endpoints.build_equity_endpoint(query, base_url="https://example/request/v1/")

    assert spec.url == "https://example/request/v1/"
    request = _decode_header(spec)
    assert request.symbol == "AAPL"
    assert request.start == 0
    assert request.end == 86400
    assert request.datatype == "intraday_stocks"
    assert request.username == "jane"
    assert request.token == "t0ken"


def test_build_equity_endpoint_anonymous():
    query = EquityQuery(symbol="MSFT", window=Window(start=EPOCH, end=EPOCH + timedelta(hours=1)))
    request = _decode_header(endpoints.build_equity_endpoint(query))
    assert request.datatype == "daily_stocks"
    assert request.username == ""
    assert request.token == ""


def test_default_api_url_points_to_v1():
    assert endpoints.DEFAULT_API_URL.rstrip("/").endswith("request/v1")


def test_window_before_epoch_cannot_be_encoded():
    start = datetime(1960, 1, 1, tzinfo=timezone.utc)
    query = EquityQuery(symbol="IBM", window=Window(start=start, end=start + timedelta(days=1)))
    with pytest.raises(ValidationError):
        endpoints.build_equity_endpoint(query)


def test_sub_second_window_within_one_second_is_rejected():
    start = datetime(2024, 1, 2, 10, 0, 0, 100000, tzinfo=timezone.utc)
    query = EquityQuery(symbol="IBM", window=Window(start=start, end=start + timedelta(milliseconds=500)))
    with pytest.raises(ValidationError):
        endpoints.build_equity_endpoint(query)


def test_sub_second_window_crossing_a_second_is_encoded():
    start = datetime(2024, 1, 2, 10, 0, 0, 900000, tzinfo=timezone.utc)
    query = EquityQuery(symbol="IBM", window=Window(start=start, end=start + timedelta(milliseconds=200)))
    request = _decode_header(endpoints.build_equity_endpoint(query))
    assert request.end - request.start == 1
