"""
Result objects returned by the authentication services.

Views translate these into HTTP responses; the services never raise for
expected failures such as a wrong password or a taken email.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class TokenPairResult:
    """Outcome of an operation that signs the user in."""

    success: bool
    user: Optional[Any] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None

    def tokens(self) -> Dict[str, str]:
        return {"access": self.access_token, "refresh": self.refresh_token}


@dataclass
class LoginResult(TokenPairResult):
    pass


@dataclass
class RegisterResult(TokenPairResult):
    # field name -> message, for duplicate email/username
    errors: Optional[Dict[str, str]] = None


@dataclass
class Result:
    """Profile reads/updates and mock vendor generation."""

    success: bool
    message: str
    data: Optional[Dict[str, Any]] = field(default_factory=dict)
    error: Optional[str] = None
