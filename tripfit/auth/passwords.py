from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_ph = PasswordHasher()


def hash_pw(pw: str) -> str:
    return _ph.hash(pw)


def verify_pw(hash_: str, pw: str) -> bool:
    try:
        _ph.verify(hash_, pw)
        return True
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hash_: str) -> bool:
    return _ph.check_needs_rehash(hash_)
