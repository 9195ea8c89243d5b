import pytest

from moabdb.credentials import Credentials
from moabdb.exceptions import ValidationError


def test_credentials_strip_whitespace():
    creds = Credentials(username=" user ", token=" secret-token ")
    assert creds.username == "user"
    assert creds.token == "secret-token"


@pytest.mark.parametrize("username, token", [("", "tok"), ("user", ""), ("  ", "  ")])
def test_credentials_require_both_parts(username, token):
    with pytest.raises(ValidationError):
        Credentials(username=username, token=token)


def test_repr_masks_token():
    creds = Credentials(username="user", token="abcdef123456")
    text = repr(creds)
    assert "abcdef123456" not in text
    assert "3456" in text


def test_from_env(monkeypatch):
    monkeypatch.setenv("MOABDB_USERNAME", "jane")
    monkeypatch.setenv("MOABDB_TOKEN", "t0ken")
    assert Credentials.from_env() == Credentials(username="jane", token="t0ken")


def test_from_env_without_variables_is_anonymous(monkeypatch):
    monkeypatch.delenv("MOABDB_USERNAME", raising=False)
    monkeypatch.delenv("MOABDB_TOKEN", raising=False)
    assert Credentials.from_env() is None


def test_from_env_with_half_of_credentials_fails(monkeypatch):
    monkeypatch.setenv("MOABDB_USERNAME", "jane")
    monkeypatch.delenv("MOABDB_TOKEN", raising=False)
    with pytest.raises(ValidationError):
        Credentials.from_env()
