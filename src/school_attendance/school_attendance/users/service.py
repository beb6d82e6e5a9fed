from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.exceptions import AccountDisabledError, InvalidCredentialsError, ValidationError
from .model import User
from .repository import UserRepository
from .tokens import TokenClaims, TokenService

logger = logging.getLogger(__name__)

# Same message for unknown user and wrong password.
_INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str


def hash_password(password: str) -> str:
    if not password or not password.strip():
        raise ValidationError("Password cannot be empty")
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except (TypeError, ValueError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use case: authenticate user (login) and check session tokens."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def login(self, username: str, password: str) -> LoginResult:
        username = (username or "").strip()
        user = self._users.get_by_username(username) if username else None
        if not user:
            logger.info("Login failed for %r: unknown user", username)
            raise InvalidCredentialsError(_INVALID_CREDENTIALS)

        if not user.is_active:
            logger.info("Login refused for %r: account disabled", username)
            raise AccountDisabledError("User account is disabled")

        if not verify_password(password or "", user.password_hash):
            logger.info("Login failed for %r: wrong password", username)
            raise InvalidCredentialsError(_INVALID_CREDENTIALS)

        token = self._tokens.issue(user)
        logger.info("User %s (%s) logged in", user.user_id, user.role.value)
        return LoginResult(user=user, token=token)

    def verify_token(self, token: str) -> TokenClaims:
        return self._tokens.verify(token)
