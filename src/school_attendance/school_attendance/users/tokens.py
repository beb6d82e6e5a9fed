"""Stateless session tokens.

Wire format: ``base64(json) + "." + base64(signature)`` where the JSON payload
is ``{"userId", "role", "username", "exp"}`` and ``exp`` is milliseconds since
the epoch. With ``TokenSigning.HMAC`` the signature is HMAC-SHA256 of the
first segment; ``TokenSigning.LEGACY`` reproduces the older scheme where the
second segment is just the base64 of the shared secret.

There is no server-side token store. Deactivating the user is the only way to
revoke a token before it expires, so ``verify`` reloads the user every time.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import to_epoch_ms, utc_now
from ..core.constants import DEFAULT_TOKEN_TTL_HOURS
from ..core.enums import Role, TokenSigning
from ..core.exceptions import AccountDisabledError, InvalidTokenError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role
    username: str
    expires_at_ms: int


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


class TokenService:
    def __init__(
        self,
        users: UserRepository,
        *,
        secret: str,
        ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
        signing: TokenSigning = TokenSigning.HMAC,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not secret:
            raise ValueError("Token secret must be configured")
        self._users = users
        self._secret = secret
        self._ttl = timedelta(hours=int(ttl_hours))
        self._signing = TokenSigning(signing)
        self._clock = clock

    def issue(self, user: Optional[User]) -> str:
        if user is None or not user.is_active:
            raise AccountDisabledError("User account is disabled")

        payload = {
            "userId": user.user_id,
            "role": user.role.value,
            "username": user.username,
            "exp": to_epoch_ms(self._clock() + self._ttl),
        }
        segment = _b64encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
        return f"{segment}.{self._sign(segment)}"

    def verify(self, token: str) -> TokenClaims:
        """Return the claims of a valid token, or raise InvalidTokenError.

        Every failure raises the same error so callers cannot tell which
        check failed.
        """

        if not isinstance(token, str) or not token:
            self._reject("empty token")

        parts = token.split(".")
        if len(parts) != 2:
            self._reject("wrong number of segments")

        segment, signature = parts
        if not hmac.compare_digest(signature.encode("utf-8"), self._sign(segment).encode("utf-8")):
            self._reject("signature mismatch")

        try:
            payload = json.loads(base64.b64decode(segment, validate=True).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError):
            self._reject("undecodable payload")

        if not isinstance(payload, dict):
            self._reject("payload is not an object")

        user_id = payload.get("userId")
        exp = payload.get("exp")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            self._reject("missing userId")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            self._reject("missing exp")
        try:
            role = Role(payload.get("role"))
        except ValueError:
            self._reject("unknown role")

        if exp < to_epoch_ms(self._clock()):
            self._reject("expired")

        user = self._users.get_by_id(user_id)
        if user is None:
            self._reject(f"user {user_id} no longer exists")
        if not user.is_active:
            self._reject(f"user {user_id} is deactivated")

        return TokenClaims(
            user_id=user_id,
            role=role,
            username=str(payload.get("username") or user.username),
            expires_at_ms=int(exp),
        )

    def _sign(self, segment: str) -> str:
        if self._signing == TokenSigning.LEGACY:
            return _b64encode(self._secret.encode("utf-8"))
        digest = hmac.new(self._secret.encode("utf-8"), segment.encode("utf-8"), hashlib.sha256).digest()
        return _b64encode(digest)

    @staticmethod
    def _reject(reason: str):
        logger.debug("Token rejected: %s", reason)
        raise InvalidTokenError("Invalid or expired token")
