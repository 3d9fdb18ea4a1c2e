"""
Registration passwords.

A registration is protected by a 4-digit numeric code handed out at creation.
This is a coarse access gate, not a credential: the code space has 9000 values
and nothing throttles guessing. Schemes below only change how the code is
stored and compared, the code handed to the participant is the same.
"""
import secrets
from typing import Protocol

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHash

from registration_service.core.config import PASSWORD_SCHEME

PASSWORD_MIN = 1000
PASSWORD_MAX = 9999
PASSWORD_LENGTH = 4


def generate_password() -> str:
    """Uniform pick from [1000, 9999] using the OS CSPRNG."""
    return str(PASSWORD_MIN + secrets.randbelow(PASSWORD_MAX - PASSWORD_MIN + 1))


class PasswordScheme(Protocol):
    name: str

    def generate(self) -> str: ...

    def encode(self, plain_password: str) -> str: ...

    def verify(self, stored_password: str, supplied_password: str) -> bool: ...


class PlainCodeScheme:
    """Stores the code as is."""

    name = "plain"

    def generate(self) -> str:
        return generate_password()

    def encode(self, plain_password: str) -> str:
        return plain_password

    def verify(self, stored_password: str, supplied_password: str) -> bool:
        if supplied_password is None:
            return False
        return secrets.compare_digest(stored_password.encode(), supplied_password.encode())


class Argon2CodeScheme(PlainCodeScheme):
    """Stores an argon2 hash of the code."""

    name = "argon2"

    def __init__(self, hasher: PasswordHasher | None = None):
        self.hasher = hasher or PasswordHasher()

    def encode(self, plain_password: str) -> str:
        return self.hasher.hash(plain_password)

    def verify(self, stored_password: str, supplied_password: str) -> bool:
        if supplied_password is None:
            return False
        try:
            return self.hasher.verify(stored_password, supplied_password)
        except (VerificationError, InvalidHash):
            return False


_SCHEMES = {
    PlainCodeScheme.name: PlainCodeScheme,
    Argon2CodeScheme.name: Argon2CodeScheme,
}


def get_password_scheme(name: str = PASSWORD_SCHEME) -> PasswordScheme:
    try:
        return _SCHEMES[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown password scheme '{name}', expected one of {sorted(_SCHEMES)}")
