from datetime import date, datetime, timedelta, timezone

import pytest

from moabdb.exceptions import ValidationError
from moabdb.utils import MAX_EPOCH_SECONDS, coerce_datetime, mask_secret, to_epoch_seconds, utc_now


def test_utc_now_is_aware():
    assert utc_now().tzinfo is not None


def test_coerce_datetime_variants():
    expected = datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert coerce_datetime(datetime(2024, 3, 1)) == expected
    assert coerce_datetime(date(2024, 3, 1)) == expected
    assert coerce_datetime("2024-03-01") == expected
    assert coerce_datetime("2024-03-01T03:00:00+03:00") == expected


@pytest.mark.parametrize("value", ["yesterday", 12345, None])
def test_coerce_datetime_rejects_unsupported(value):
    with pytest.raises(ValidationError):
        coerce_datetime(value)


def test_to_epoch_seconds():
    assert to_epoch_seconds(datetime(1970, 1, 2, tzinfo=timezone.utc)) == 86400
    assert to_epoch_seconds(datetime(1970, 1, 1, 0, 0, 1)) == 1


def test_to_epoch_seconds_range():
    too_late = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=MAX_EPOCH_SECONDS + 1)
    with pytest.raises(ValidationError):
        to_epoch_seconds(too_late)
    with pytest.raises(ValidationError):
        to_epoch_seconds(datetime(1969, 12, 31, tzinfo=timezone.utc))


def test_mask_secret():
    assert mask_secret("abcdefgh") == "****efgh"
    assert mask_secret("abc") == "***"
    assert mask_secret(None) == ""
