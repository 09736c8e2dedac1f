from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from taskvault.errors import ValidationError


@dataclass
class Account:
    email: str
    password_hash: str
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Mapping[str, Any]) -> "Account":
        return cls(id=str(doc["_id"]), email=doc["email"], password_hash=doc["password_hash"])

    def public(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email}


@dataclass
class Credentials:
    email: str
    password: str

    @classmethod
    def from_payload(cls, payload) -> "Credentials":
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be a JSON object")
        email = payload.get("email")
        password = payload.get("password")
        # Emails are compared exactly as stored; no case folding.
        if not isinstance(email, str) or not email or not isinstance(password, str) or not password:
            raise ValidationError("email and password are required")
        return cls(email=email, password=password)
