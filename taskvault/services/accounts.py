"""Account directory: registration, login and bearer token verification."""

import enum
import secrets
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from werkzeug.security import check_password_hash, generate_password_hash

from taskvault.errors import InvalidCredentialsError
from taskvault.stores.base import AccountStore


class AuthFailure(enum.Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Verification:
    account_id: Optional[str] = None
    failure: Optional[AuthFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: Dict[str, Any]


class AccountDirectory:
    def __init__(self, store: AccountStore, hash_method: str = "scrypt"):
        self.store = store
        self.hash_method = hash_method
        # Checked against when the email is unknown so both failures cost one hash.
        self._dummy_hash = generate_password_hash(secrets.token_urlsafe(16), method=hash_method)

    def register(self, email: str, password: str) -> str:
        """Create an account and return its id. Raises ConflictError on duplicate email."""
        password_hash = generate_password_hash(password, method=self.hash_method)
        account = self.store.add(email, password_hash)
        current_app.logger.info("Registered account %s", account.id)
        return account.id

    def authenticate(self, email: str, password: str) -> LoginResult:
        # Unknown email and wrong password raise the same error.
        account = self.store.get_by_email(email)
        stored_hash = account.password_hash if account else self._dummy_hash
        if not check_password_hash(stored_hash, password) or account is None:
            raise InvalidCredentialsError()
        token = create_access_token(identity=account.id)
        return LoginResult(token=token, user=account.public())

    def verify(self, token: Optional[str]) -> Verification:
        if not token:
            return Verification(failure=AuthFailure.UNAUTHORIZED)
        try:
            claims = decode_token(token)
        except (jwt.ExpiredSignatureError, jwt.InvalidSignatureError):
            return Verification(failure=AuthFailure.FORBIDDEN)
        except jwt.DecodeError:
            # Not a JWT at all.
            return Verification(failure=AuthFailure.UNAUTHORIZED)
        except (jwt.InvalidTokenError, JWTExtendedException):
            return Verification(failure=AuthFailure.FORBIDDEN)
        return Verification(account_id=str(claims[current_app.config["JWT_IDENTITY_CLAIM"]]))
