# korsvagen_api/entities/auth_context.py
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class AuthContext:
    id: str
    email: Optional[str]
    role: Optional[str]
    token_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AuthContext":
        return cls(
            id=str(claims["sub"]),
            email=claims.get("email"),
            role=claims.get("role"),
            token_data=dict(claims),
        )


@dataclass(frozen=True)
class ClientInfo:
    ip_address: Optional[str]
    user_agent: Optional[str]
