import pytest
from pydantic import ValidationError

from nbsnapshot.core.errors import ConfigurationError
from nbsnapshot.services.credentials import Credentials, load_credentials, resolve_password


def test_resolve_password_reads_named_variable():
    assert resolve_password("NB_PASSWORD", {"NB_PASSWORD": "s3cret"}) == "s3cret"


def test_resolve_password_uses_process_environment(monkeypatch):
    monkeypatch.setenv("NB_TEST_PASSWORD", "from-env")
    assert resolve_password("NB_TEST_PASSWORD") == "from-env"


@pytest.mark.parametrize("environ", [{}, {"NB_PASSWORD": ""}])
def test_resolve_password_rejects_unset_or_empty(environ):
    with pytest.raises(ConfigurationError) as exc:
        resolve_password("NB_PASSWORD", environ)

    assert str(exc.value) == "Environment variable NB_PASSWORD is not set"


def test_load_credentials_keeps_secret_out_of_repr():
    credentials = load_credentials(
        username="admin@example.org",
        password_env_var="NB_PASSWORD",
        otp="123456",
        environ={"NB_PASSWORD": "s3cret"},
    )

    assert credentials.password.get_secret_value() == "s3cret"
    assert credentials.otp == "123456"
    assert "s3cret" not in repr(credentials)


def test_load_credentials_treats_blank_otp_as_missing():
    credentials = load_credentials(
        username="admin@example.org",
        password_env_var="NB_PASSWORD",
        otp="",
        environ={"NB_PASSWORD": "s3cret"},
    )
    assert credentials.otp is None


def test_credentials_reject_empty_password():
    with pytest.raises(ValidationError):
        Credentials(username="admin@example.org", password="")
