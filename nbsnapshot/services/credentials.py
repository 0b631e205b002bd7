import os
from collections.abc import Mapping

from pydantic import BaseModel, SecretStr, field_validator

from nbsnapshot.core.errors import ConfigurationError


class Credentials(BaseModel):
    username: str
    password: SecretStr
    otp: str | None = None

    @field_validator("password")
    @classmethod
    def _password_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("password must not be empty")
        return value


def resolve_password(env_var: str, environ: Mapping[str, str] | None = None) -> str:
    environ = os.environ if environ is None else environ
    password = environ.get(env_var)
    if not password:
        # Never echo the value, only the variable name.
        raise ConfigurationError(f"Environment variable {env_var} is not set")
    return password


def load_credentials(
    *,
    username: str,
    password_env_var: str,
    otp: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Credentials:
    password = resolve_password(password_env_var, environ)
    return Credentials(username=username, password=password, otp=otp or None)
