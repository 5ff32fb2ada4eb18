"""
One-time password reset codes kept in the `auth_codes` cache.

Codes are six digits, stored hashed, valid for CODE_TTL seconds and may be
checked at most MAX_ATTEMPTS times. Sending is throttled per email address.
"""

import hashlib
import secrets

from django.conf import settings
from django.core.cache import caches

CODE_TTL = 600
THROTTLE_TTL = 60
MAX_ATTEMPTS = 5


def _cache():
    return caches["auth_codes"]


def _salt() -> str:
    return settings.SECRET_KEY[:32] if settings.SECRET_KEY else "salt"


def gen_code() -> str:
    return str(secrets.randbelow(10**6)).zfill(6)


def _key_code(user_id: int) -> str:
    return f"auth:pr:code:{user_id}"


def _key_throttle(email: str) -> str:
    return f"auth:pr:throttle:{email.lower()}"


def _key_attempts(user_id: int) -> str:
    return f"auth:pr:attempts:{user_id}"


def _hash(code: str) -> str:
    return hashlib.sha256((_salt() + code).encode()).hexdigest()


def can_send(email: str) -> bool:
    return _cache().add(_key_throttle(email), "1", timeout=THROTTLE_TTL)


def store_code(user_id: int, code: str) -> None:
    cache = _cache()
    cache.set(_key_code(user_id), _hash(code), timeout=CODE_TTL)
    cache.delete(_key_attempts(user_id))


def _register_attempt(user_id: int) -> int:
    cache = _cache()
    attempts_key = _key_attempts(user_id)
    if cache.add(attempts_key, 1, timeout=CODE_TTL):
        return 1
    return cache.incr(attempts_key)


def verify_code(user_id: int, code: str) -> bool:
    """Checks and consumes the code. Counts towards MAX_ATTEMPTS."""

    if _register_attempt(user_id) > MAX_ATTEMPTS:
        return False

    cache = _cache()
    stored = cache.get(_key_code(user_id))
    if not stored:
        return False

    ok = secrets.compare_digest(stored, _hash(code))
    if ok:
        cache.delete_many([_key_code(user_id), _key_attempts(user_id)])
    return ok


def check_code(user_id: int, code: str) -> bool:
    """Checks the code without consuming it. Counts towards MAX_ATTEMPTS."""

    if _register_attempt(user_id) > MAX_ATTEMPTS:
        return False

    stored = _cache().get(_key_code(user_id))
    if not stored:
        return False
    return secrets.compare_digest(stored, _hash(code))
