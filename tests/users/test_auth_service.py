from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.core.exceptions import (
    AccountDisabledError,
    InvalidCredentialsError,
    ValidationError,
)
from src.school_attendance.school_attendance.users.service import AuthService, hash_password, verify_password
from src.school_attendance.school_attendance.users.tokens import TokenService


@pytest.fixture
def auth(users):
    return AuthService(users, TokenService(users, secret="test-token-secret"))


def test_login_returns_user_and_verifiable_token(auth, password):
    result = auth.login("guru", password)

    assert result.user.user_id == 2
    claims = auth.verify_token(result.token)
    assert claims.user_id == 2
    assert claims.role == Role.TEACHER


def test_login_trims_username(auth, password):
    assert auth.login("  admin ", password).user.role == Role.ADMIN


def test_unknown_user_and_wrong_password_look_the_same(auth, password):
    with pytest.raises(InvalidCredentialsError) as unknown:
        auth.login("nobody", password)
    with pytest.raises(InvalidCredentialsError) as wrong:
        auth.login("admin", "wrong-password")

    assert str(unknown.value) == str(wrong.value) == "Invalid username or password"


def test_blank_username_is_invalid_credentials(auth, password):
    with pytest.raises(InvalidCredentialsError):
        auth.login("", password)


def test_disabled_account_cannot_login(auth, password):
    with pytest.raises(AccountDisabledError):
        auth.login("mantan", password)


def test_public_view_hides_password_hash(auth, password):
    view = auth.login("admin", password).user.public_view()

    assert "password_hash" not in view
    assert view["role"] == "admin"


def test_hash_password_roundtrip():
    hashed = hash_password("rahasia1")

    assert hashed != "rahasia1"
    assert verify_password("rahasia1", hashed)
    assert not verify_password("rahasia2", hashed)


def test_hash_password_rejects_blank():
    with pytest.raises(ValidationError):
        hash_password("   ")


def test_verify_password_tolerates_placeholder_hash():
    assert verify_password("anything", "CHANGE_ME") is False
