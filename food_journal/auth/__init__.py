"""Authentication flow (login / register)."""

from .service import AuthFlow, AuthMode, AuthResult, validate_credentials

__all__ = ["AuthFlow", "AuthMode", "AuthResult", "validate_credentials"]
