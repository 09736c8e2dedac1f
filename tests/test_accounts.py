from __future__ import annotations

from datetime import timedelta

import pytest
from flask import Flask
from flask_jwt_extended import create_access_token
from werkzeug.security import check_password_hash

from taskvault.errors import ConflictError, InvalidCredentialsError
from taskvault.services import accounts as accounts_module
from taskvault.services.accounts import AccountDirectory, AuthFailure
from taskvault.stores.memory import InMemoryAccountStore


@pytest.fixture
def directory(app: Flask):
    with app.app_context():
        yield AccountDirectory(InMemoryAccountStore(), hash_method="pbkdf2:sha256:1000")


def test_register_then_authenticate(directory: AccountDirectory) -> None:
    account_id = directory.register("a@x.com", "p1")
    result = directory.authenticate("a@x.com", "p1")
    assert result.user == {"id": account_id, "email": "a@x.com"}

    verified = directory.verify(result.token)
    assert verified.ok
    assert verified.account_id == account_id


def test_register_duplicate_raises_conflict(directory: AccountDirectory) -> None:
    directory.register("a@x.com", "p1")
    with pytest.raises(ConflictError):
        directory.register("a@x.com", "p2")


def test_authenticate_failures_share_one_message(directory: AccountDirectory) -> None:
    directory.register("a@x.com", "p1")
    with pytest.raises(InvalidCredentialsError) as wrong_password:
        directory.authenticate("a@x.com", "p2")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        directory.authenticate("nobody@x.com", "p1")
    assert str(wrong_password.value) == str(unknown_email.value) == "Invalid credentials"


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_verify_missing_or_malformed_is_unauthorized(directory: AccountDirectory, token) -> None:
    result = directory.verify(token)
    assert not result.ok
    assert result.failure is AuthFailure.UNAUTHORIZED
    assert result.account_id is None


def test_verify_expired_is_forbidden(directory: AccountDirectory) -> None:
    account_id = directory.register("a@x.com", "p1")
    expired = create_access_token(identity=account_id, expires_delta=timedelta(seconds=-5))
    assert directory.verify(expired).failure is AuthFailure.FORBIDDEN


def test_token_expires_after_an_hour_by_default(app: Flask) -> None:
    assert app.config["JWT_ACCESS_TOKEN_EXPIRES"] == timedelta(hours=1)


def test_unknown_email_still_checks_a_hash(directory: AccountDirectory, monkeypatch) -> None:
    checked: list[str] = []

    def recording_check(pwhash: str, password: str) -> bool:
        checked.append(pwhash)
        return check_password_hash(pwhash, password)

    monkeypatch.setattr(accounts_module, "check_password_hash", recording_check)
    with pytest.raises(InvalidCredentialsError):
        directory.authenticate("nobody@x.com", "p1")
    assert len(checked) == 1
    assert checked[0].startswith("pbkdf2:sha256")


def test_tokens_do_not_rely_on_flask_secret_key(app: Flask) -> None:
    assert app.config["SECRET_KEY"] is None
    assert app.config["JWT_SECRET_KEY"]
